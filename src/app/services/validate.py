"""
Validation Service: 템플릿 요청 body 검증.

규칙:
- create: name, content 모두 필수, 문자열
- update: content 필수, name 금지 (name은 불변)
- 정의되지 않은 키 금지
- 에러는 한 번에 모두 모아서 반환 (필드명 순, 줄바꿈 구분)

메시지 형식:
    "name" is required
    "content" must be a string
    "name" is not allowed
"""

from dataclasses import dataclass, field
from typing import Any

CREATE_FIELDS = ("name", "content")
UPDATE_FIELDS = ("content",)


@dataclass
class ValidationResult:
    """검증 결과."""
    valid: bool = True
    errors: list[tuple[str, str]] = field(default_factory=list)  # (field, message)

    def add_error(self, field_name: str, message: str) -> None:
        self.valid = False
        self.errors.append((field_name, message))

    @property
    def message(self) -> str:
        """필드명 순으로 정렬된 에러 메시지 (줄바꿈 구분)."""
        return "\n".join(msg for _, msg in sorted(self.errors, key=lambda e: e[0]))


def _validate_fields(
    body: Any,
    required: tuple[str, ...],
) -> ValidationResult:
    result = ValidationResult()

    if not isinstance(body, dict):
        result.add_error("value", '"value" must be of type object')
        return result

    for name in required:
        if name not in body or body[name] is None:
            result.add_error(name, f'"{name}" is required')
        elif not isinstance(body[name], str):
            result.add_error(name, f'"{name}" must be a string')

    for name in body:
        if name not in required:
            result.add_error(str(name), f'"{name}" is not allowed')

    return result


def validate_create_body(body: Any) -> ValidationResult:
    """POST body 검증: {"name": str, "content": str}."""
    return _validate_fields(body, CREATE_FIELDS)


def validate_update_body(body: Any) -> ValidationResult:
    """PUT body 검증: {"content": str} (name 금지)."""
    return _validate_fields(body, UPDATE_FIELDS)
