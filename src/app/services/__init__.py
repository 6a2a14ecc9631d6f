"""
Application Services.

역할:
- validate: 템플릿 CRUD 요청 body 검증
"""

from .validate import ValidationResult, validate_create_body, validate_update_body

__all__ = [
    "ValidationResult",
    "validate_create_body",
    "validate_update_body",
]
