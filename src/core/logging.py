"""
Render logging: render log schema, include events

규칙:
- 렌더 1회 = RenderLog 1개 (run_id 발급)
- include마다 결과 기록: directive_id, src, status, elapsed_ms
- 성공/실패 모두 logger로 내보냄 (파일 저장 없음)
"""

import json
import logging
from datetime import UTC, datetime
from typing import Any

from src.core.ids import generate_run_id
from src.domain.schemas import FragmentResult, IncludeDirective, IncludeLog, RenderLog

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def configure_logging(config: dict[str, Any]) -> None:
    """
    config의 logging.level로 루트 로거 설정.

    잘못된 level 값은 INFO로 대체.
    """
    level = str(config.get("logging", {}).get("level", "INFO")).upper()
    if level not in LOG_LEVELS:
        level = "INFO"

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


# =============================================================================
# Render Log Management
# =============================================================================


def create_render_log(template_name: str) -> RenderLog:
    """
    새 RenderLog 생성.

    Args:
        template_name: 렌더 대상 템플릿 name

    Returns:
        초기화된 RenderLog
    """
    now = datetime.now(UTC).isoformat()

    return RenderLog(
        run_id=generate_run_id(),
        template_name=template_name,
        started_at=now,
        result="pending",
    )


def record_include(
    render_log: RenderLog,
    directive: IncludeDirective,
    result: FragmentResult,
) -> None:
    """
    include 처리 결과 기록.

    Args:
        render_log: RenderLog 인스턴스
        directive: 대상 directive
        result: fetch 결과
    """
    render_log.includes.append(
        IncludeLog(
            directive_id=directive.id,
            src=directive.src,
            timeout=directive.timeout,
            status=result.status.value,
            status_code=result.status_code,
            elapsed_ms=result.elapsed_ms,
            stylesheets=len(result.stylesheet_tags),
            message=result.error_message,
        )
    )


def complete_render_log(
    render_log: RenderLog,
    success: bool,
    error_code: str | None = None,
    error_context: dict[str, Any] | None = None,
) -> None:
    """
    RenderLog 완료 처리 후 logger로 내보냄.

    Args:
        render_log: RenderLog 인스턴스
        success: 성공 여부
        error_code: 에러 코드 (실패 시)
        error_context: 에러 컨텍스트 (실패 시)
    """
    render_log.finished_at = datetime.now(UTC).isoformat()
    render_log.result = "success" if success else "failed"

    if not success:
        render_log.error_code = error_code
        render_log.error_context = error_context

    payload = json.dumps(render_log.to_dict(), ensure_ascii=False)
    if success:
        logger.info(f"Render completed: {payload}")
    else:
        logger.warning(f"Render failed: {payload}")
