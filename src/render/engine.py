"""
Render Engine: Template → RenderedDocument.

처리 순서:
1. Directive Scanner 1회 실행 (fetch 시작 전에 순서 확정)
2. 모든 directive를 동시에 fetch (directive당 task 1개, 동시성 제한 없음)
3. 전부 끝날 때까지 대기 (성공/실패 무관)
4. 문서 순서대로 병합 (fetch 완료 순서와 무관)
   - success → START/END 마커 + stylesheet 태그 + body로 원문 태그 교체
   - timeout / network-error → 렌더 전체 실패 (부분 문서 반환 없음)
"""

import asyncio
import logging
from collections.abc import Sequence
from typing import Any

from src.core.logging import complete_render_log, create_render_log, record_include
from src.domain.errors import (
    DirectiveParseError,
    RenderError,
    UpstreamNetworkError,
    UpstreamTimeoutError,
)
from src.domain.schemas import (
    FragmentResult,
    FragmentStatus,
    IncludeDirective,
    RenderedDocument,
    Template,
)
from src.render.directives import DEFAULT_TIMEOUT_MS, scan_directives
from src.render.fetcher import FragmentFetcher

logger = logging.getLogger(__name__)


def include_start_marker(directive_id: str) -> str:
    return f'<!-- Template include "{directive_id}" START -->'


def include_end_marker(directive_id: str) -> str:
    return f'<!-- Template include "{directive_id}" END -->'


def build_include_block(directive: IncludeDirective, result: FragmentResult) -> str:
    """성공한 fetch 결과 → directive 자리에 들어갈 문자열."""
    return (
        include_start_marker(directive.id)
        + "\n"
        + "".join(result.stylesheet_tags)
        + (result.body or "")
        + "\n"
        + include_end_marker(directive.id)
    )


def _raise_for_failure(directive: IncludeDirective, result: FragmentResult) -> None:
    context = {
        "directive_id": directive.id,
        "src": directive.src,
        "timeout": directive.timeout,
    }
    if result.status == FragmentStatus.TIMEOUT:
        raise UpstreamTimeoutError(**context)
    if result.status == FragmentStatus.NETWORK_ERROR:
        raise UpstreamNetworkError(reason=result.error_message, **context)


def merge_fragments(
    content: str,
    directives: Sequence[IncludeDirective],
    results: Sequence[FragmentResult],
) -> str:
    """
    scan 순서대로 directive 원문을 fetch 결과로 교체.

    directives와 results는 같은 순서, 같은 길이여야 함.
    directive 사이의 원문은 그대로 유지.

    Raises:
        UpstreamTimeoutError / UpstreamNetworkError: 문서 순서상 첫 실패
    """
    if len(directives) != len(results):
        raise ValueError(
            f"directive/result count mismatch: {len(directives)} != {len(results)}"
        )

    pieces = []
    cursor = 0

    for directive, result in zip(directives, results):
        if not result.ok:
            _raise_for_failure(directive, result)

        pieces.append(content[cursor:directive.start])
        pieces.append(build_include_block(directive, result))
        cursor = directive.end

    pieces.append(content[cursor:])
    return "".join(pieces)


class RenderEngine:
    """
    include directive 해석 엔진.

    상태 없음: 같은 인스턴스를 여러 렌더 호출이 동시에 사용 가능.
    """

    def __init__(
        self,
        fetcher: FragmentFetcher,
        default_timeout: int = DEFAULT_TIMEOUT_MS,
    ):
        """
        Args:
            fetcher: fragment fetcher (테스트에서 stub 주입)
            default_timeout: timeout 속성 없는 directive의 기본값 (ms)
        """
        self.fetcher = fetcher
        self.default_timeout = default_timeout

    @classmethod
    def from_config(cls, config: dict[str, Any], fetcher: FragmentFetcher) -> "RenderEngine":
        render_config = config.get("render", {})
        return cls(
            fetcher=fetcher,
            default_timeout=int(render_config.get("default_timeout_ms", DEFAULT_TIMEOUT_MS)),
        )

    def scan(self, content: str) -> list[IncludeDirective]:
        """directive 목록 확정 (fetch 전에 1회)."""
        return list(scan_directives(content, self.default_timeout))

    async def fetch_all(self, directives: Sequence[IncludeDirective]) -> list[FragmentResult]:
        """모든 directive를 동시에 fetch하고 전부 끝날 때까지 대기."""
        return list(
            await asyncio.gather(*(self.fetcher.fetch(d) for d in directives))
        )

    async def render(self, template: Template) -> RenderedDocument:
        """
        템플릿 렌더링.

        Args:
            template: 렌더 대상 (호출 시점 snapshot)

        Returns:
            RenderedDocument (name, content, log)

        Raises:
            DirectiveParseError: 잘못된 include 태그
            UpstreamTimeoutError: fragment timeout
            UpstreamNetworkError: fragment 전송 실패
        """
        name = template.name
        content = template.content
        render_log = create_render_log(name)

        try:
            directives = self.scan(content)
        except DirectiveParseError as e:
            complete_render_log(render_log, False, e.code, e.context)
            raise

        if not directives:
            complete_render_log(render_log, True)
            return RenderedDocument(name=name, content=content, log=render_log)

        logger.debug(f"Template '{name}': fetching {len(directives)} include(s)")
        results = await self.fetch_all(directives)

        for directive, result in zip(directives, results):
            record_include(render_log, directive, result)

        try:
            rendered = merge_fragments(content, directives, results)
        except RenderError as e:
            complete_render_log(render_log, False, e.code, e.context)
            raise

        complete_render_log(render_log, True)
        return RenderedDocument(name=name, content=rendered, log=render_log)
