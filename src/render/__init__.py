"""
Render layer: include directive 해석.

- directives: 템플릿 → IncludeDirective 목록
- link_header: Link 헤더 → stylesheet 태그
- fetcher: directive → FragmentResult (timeout 적용)
- engine: scan → 동시 fetch → 순서 유지 병합
"""

from .directives import DEFAULT_TIMEOUT_MS, scan_directives
from .engine import RenderEngine, merge_fragments
from .fetcher import FetchError, FragmentFetcher, HttpxFragmentFetcher
from .link_header import resolve_stylesheet_links

__all__ = [
    "scan_directives",
    "DEFAULT_TIMEOUT_MS",
    "resolve_stylesheet_links",
    "FragmentFetcher",
    "HttpxFragmentFetcher",
    "FetchError",
    "RenderEngine",
    "merge_fragments",
]
