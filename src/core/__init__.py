"""
Core layer: 렌더 공통 모듈.

역할:
- run_id / 저장 키 생성
- 렌더 로그 (include별 결과 기록)
"""

from .ids import generate_run_id, template_storage_key
from .logging import (
    complete_render_log,
    configure_logging,
    create_render_log,
    record_include,
)

__all__ = [
    # ids
    "generate_run_id",
    "template_storage_key",
    # logging
    "configure_logging",
    "create_render_log",
    "record_include",
    "complete_render_log",
]
