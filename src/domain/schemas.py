"""
Data schemas for the include registry.

규칙:
- Template만 영속화됨 (TemplateManager 소유)
- IncludeDirective / FragmentResult / RenderedDocument는 렌더 1회 동안만 존재
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# =============================================================================
# Template
# =============================================================================

@dataclass
class Template:
    """
    저장된 HTML 템플릿.

    name은 생성 후 변경 불가, content는 update 시 전체 교체.
    """
    name: str
    content: str
    created_at: str = ""  # ISO 8601
    updated_at: str = ""  # ISO 8601

    def to_dict(self) -> dict[str, Any]:
        """API 응답용 (name, content만)."""
        return {
            "name": self.name,
            "content": self.content,
        }

    def to_record(self) -> dict[str, Any]:
        """저장용 (메타데이터 포함)."""
        return {
            "name": self.name,
            "content": self.content,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_record(cls, data: dict[str, Any]) -> "Template":
        return cls(
            name=data["name"],
            content=data["content"],
            created_at=data.get("created_at", ""),
            updated_at=data.get("updated_at", ""),
        )


# =============================================================================
# Render Schemas
# =============================================================================

@dataclass(frozen=True)
class IncludeDirective:
    """
    템플릿 본문에서 찾은 include 태그.

    start/end는 원문에서의 문자 offset (raw == content[start:end]).
    """
    id: str
    src: str
    timeout: int  # milliseconds
    start: int
    end: int
    raw: str


class FragmentStatus(str, Enum):
    """fragment fetch 결과 상태."""
    SUCCESS = "success"
    TIMEOUT = "timeout"
    NETWORK_ERROR = "network-error"


@dataclass
class FragmentResponse:
    """upstream HTTP 응답 (헤더는 반복 가능하므로 pair 목록)."""
    status_code: int
    headers: list[tuple[str, str]] = field(default_factory=list)
    body: str = ""

    def header_values(self, name: str) -> list[str]:
        """대소문자 무시하고 같은 이름의 헤더 값 전부 반환."""
        lowered = name.lower()
        return [value for key, value in self.headers if key.lower() == lowered]


@dataclass
class FragmentResult:
    """directive 1개에 대한 fetch 결과."""
    directive_id: str
    status: FragmentStatus
    body: str | None = None
    stylesheet_tags: list[str] = field(default_factory=list)
    status_code: int | None = None
    error_message: str | None = None
    elapsed_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.status == FragmentStatus.SUCCESS


@dataclass
class RenderedDocument:
    """렌더 결과. Template Store에 다시 쓰지 않음."""
    name: str
    content: str
    log: "RenderLog | None" = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "content": self.content,
        }


# =============================================================================
# Render Log Schemas
# =============================================================================

@dataclass
class IncludeLog:
    """include 1개의 처리 기록."""
    directive_id: str
    src: str
    timeout: int
    status: str
    status_code: int | None = None
    elapsed_ms: int = 0
    stylesheets: int = 0
    message: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "directive_id": self.directive_id,
            "src": self.src,
            "timeout": self.timeout,
            "status": self.status,
            "status_code": self.status_code,
            "elapsed_ms": self.elapsed_ms,
            "stylesheets": self.stylesheets,
            "message": self.message,
        }


@dataclass
class RenderLog:
    """
    렌더 실행 로그.

    render call 단위 결과 및 include별 처리 기록.
    """
    run_id: str
    template_name: str
    started_at: str  # ISO 8601
    finished_at: str | None = None
    result: str = "pending"  # pending, success, failed

    includes: list[IncludeLog] = field(default_factory=list)

    # Error (if failed)
    error_code: str | None = None
    error_context: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "run_id": self.run_id,
            "template_name": self.template_name,
            "started_at": self.started_at,
            "finished_at": self.finished_at,
            "result": self.result,
            "includes": [i.to_dict() for i in self.includes],
            "error_code": self.error_code,
            "error_context": self.error_context,
        }
