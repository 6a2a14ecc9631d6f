"""
Templates layer: 템플릿 저장소 모듈.

역할:
- 템플릿 CRUD (manager.py)

주의: 폴더 구분
- src/templates/ → 코드 (이 모듈)
- templates_data/ (루트) → 데이터 저장소
"""

from .manager import (
    TemplateError,
    TemplateManager,
    validate_template_name,
)

__all__ = [
    "TemplateManager",
    "TemplateError",
    "validate_template_name",
]
