"""
Error definitions for the render engine.

규칙:
- 조용한 실패 금지 → include 하나라도 실패하면 렌더 전체 실패
- 부분 문서(일부 include 누락) 반환 금지
- 재시도 없음: 호출자가 렌더 전체를 다시 요청
"""

from typing import Any


class RenderError(Exception):
    """
    렌더 실패 시 발생하는 에러의 기반 클래스.

    Usage:
        raise UpstreamTimeoutError(directive_id="header", src=url, timeout=500)
    """

    code = "RENDER_FAILED"

    def __init__(self, code: str | None = None, **context: Any) -> None:
        if code is not None:
            self.code = code
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
        return f"[{self.code}] {ctx_str}" if ctx_str else f"[{self.code}]"

    def to_dict(self) -> dict[str, Any]:
        """로그/JSON 직렬화용."""
        return {
            "code": self.code,
            **self.context,
        }


class DirectiveParseError(RenderError):
    """include 태그의 속성이 잘못됨 (예: 정수가 아닌 timeout)."""

    code = "DIRECTIVE_PARSE_ERROR"


class UpstreamTimeoutError(RenderError):
    """fragment 응답이 timeout 내에 도착하지 않음."""

    code = "UPSTREAM_TIMEOUT"


class UpstreamNetworkError(RenderError):
    """fragment 요청이 전송 단계에서 실패 (DNS, 연결 거부, reset 등)."""

    code = "UPSTREAM_NETWORK_ERROR"


# =============================================================================
# Error Codes
# =============================================================================

class ErrorCodes:
    """에러 코드 상수. HTTP 응답 detail.code 로도 사용."""

    # === Store ===
    TEMPLATE_NOT_FOUND = "TEMPLATE_NOT_FOUND"
    TEMPLATE_EXISTS = "TEMPLATE_EXISTS"

    # === Request ===
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # === Render ===
    DIRECTIVE_PARSE_ERROR = DirectiveParseError.code
    UPSTREAM_TIMEOUT = UpstreamTimeoutError.code
    UPSTREAM_NETWORK_ERROR = UpstreamNetworkError.code
