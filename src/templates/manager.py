"""
템플릿 관리자: name 기반 CRUD (파일 저장소).

규칙:
- name은 생성 후 변경 불가, update는 content 전체 교체
- 중복 name 생성 시 에러 (fail-fast)
- 저장 파일명은 name의 SHA-256 (name에 공백/슬래시 허용)
- 쓰기는 name별 파일 락으로 보호, 렌더는 락 없이 snapshot 읽기

구조:
templates_data/
├── <sha256(name)>.json   # {"name", "content", "created_at", "updated_at"}
└── .locks/
"""

import json
import os
import tempfile
from collections.abc import Generator
from contextlib import contextmanager
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from filelock import FileLock, Timeout

from src.core.ids import template_storage_key
from src.domain.schemas import Template

# =============================================================================
# Exceptions
# =============================================================================

class TemplateError(Exception):
    """템플릿 관련 에러."""

    def __init__(self, code: str, message: str, **context: Any) -> None:
        self.code = code
        self.message = message
        self.context = context
        super().__init__(f"[{code}] {message}")


# =============================================================================
# Validation
# =============================================================================

TEMPLATE_NAME_MAX_LENGTH = 255


def validate_template_name(name: str) -> None:
    """
    템플릿 name 유효성 검증.

    규칙:
    - 빈 문자열 / 공백만 금지
    - 최대 255자

    Raises:
        TemplateError: INVALID_TEMPLATE_NAME
    """
    if not name or not name.strip():
        raise TemplateError(
            "INVALID_TEMPLATE_NAME",
            "template name cannot be empty",
        )

    if len(name) > TEMPLATE_NAME_MAX_LENGTH:
        raise TemplateError(
            "INVALID_TEMPLATE_NAME",
            f"template name exceeds {TEMPLATE_NAME_MAX_LENGTH} characters",
            length=len(name),
        )


# =============================================================================
# Template Manager
# =============================================================================

class TemplateManager:
    """
    템플릿 CRUD 관리자.

    Template Store 역할: get / list / create / update / delete.
    """

    # 락 timeout (초)
    LOCK_TIMEOUT = 10.0

    def __init__(self, templates_root: Path):
        """
        Args:
            templates_root: 템플릿 저장 디렉터리
        """
        self.templates_root = templates_root
        self._locks_dir = templates_root / ".locks"

    @contextmanager
    def _template_lock(self, name: str) -> Generator[None, None, None]:
        """
        템플릿별 락 획득.

        같은 name에 대한 동시 생성/수정/삭제 방지.

        Raises:
            TemplateError: TEMPLATE_LOCK_TIMEOUT
        """
        self._locks_dir.mkdir(parents=True, exist_ok=True)
        lock_file = self._locks_dir / f"{template_storage_key(name)}.lock"
        lock = FileLock(lock_file, timeout=self.LOCK_TIMEOUT)

        try:
            lock.acquire()
        except Timeout:
            raise TemplateError(
                "TEMPLATE_LOCK_TIMEOUT",
                f"Failed to acquire lock for template '{name}'",
                name=name,
                timeout=self.LOCK_TIMEOUT,
            ) from None

        try:
            yield
        finally:
            lock.release()

    # =========================================================================
    # Create
    # =========================================================================

    def create(self, name: str, content: str) -> Template:
        """
        새 템플릿 저장.

        Raises:
            TemplateError: INVALID_TEMPLATE_NAME, TEMPLATE_EXISTS
        """
        validate_template_name(name)

        with self._template_lock(name):
            path = self._record_path(name)
            if path.exists():
                raise TemplateError(
                    "TEMPLATE_EXISTS",
                    f"Template '{name}' already exists",
                    name=name,
                )

            now = datetime.now(UTC).isoformat()
            template = Template(name=name, content=content, created_at=now, updated_at=now)
            self._save(template)
            return template

    # =========================================================================
    # Read
    # =========================================================================

    def get(self, name: str) -> Template:
        """
        템플릿 조회 (호출 시점 snapshot).

        Raises:
            TemplateError: TEMPLATE_NOT_FOUND, TEMPLATE_CORRUPT
        """
        path = self._record_path(name)
        if not path.exists():
            raise TemplateError(
                "TEMPLATE_NOT_FOUND",
                f"Template '{name}' not found",
                name=name,
            )

        return self._load(path)

    def exists(self, name: str) -> bool:
        return self._record_path(name).exists()

    def list_templates(self) -> list[Template]:
        """
        전체 템플릿 목록 (name 순).

        읽을 수 없는 레코드는 건너뜀.
        """
        if not self.templates_root.exists():
            return []

        results = []
        for path in self.templates_root.glob("*.json"):
            if path.name.startswith("."):
                continue
            try:
                results.append(self._load(path))
            except TemplateError:
                continue

        results.sort(key=lambda t: t.name)
        return results

    # =========================================================================
    # Update
    # =========================================================================

    def update(self, name: str, content: str) -> Template:
        """
        content 전체 교체 (name 불변).

        Raises:
            TemplateError: TEMPLATE_NOT_FOUND
        """
        with self._template_lock(name):
            template = self.get(name)
            template.content = content
            template.updated_at = datetime.now(UTC).isoformat()
            self._save(template)
            return template

    # =========================================================================
    # Delete
    # =========================================================================

    def delete(self, name: str) -> None:
        """
        템플릿 삭제.

        Raises:
            TemplateError: TEMPLATE_NOT_FOUND
        """
        with self._template_lock(name):
            path = self._record_path(name)
            if not path.exists():
                raise TemplateError(
                    "TEMPLATE_NOT_FOUND",
                    f"Template '{name}' not found",
                    name=name,
                )
            path.unlink()

    # =========================================================================
    # Internal Helpers
    # =========================================================================

    def _record_path(self, name: str) -> Path:
        return self.templates_root / f"{template_storage_key(name)}.json"

    def _load(self, path: Path) -> Template:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            return Template.from_record(data)
        except (json.JSONDecodeError, KeyError, TypeError) as e:
            raise TemplateError(
                "TEMPLATE_CORRUPT",
                f"Cannot read template record {path.name}",
                path=str(path),
            ) from e

    def _save(self, template: Template) -> Path:
        """레코드 원자적 저장 (temp → rename)."""
        self.templates_root.mkdir(parents=True, exist_ok=True)
        path = self._record_path(template.name)

        fd, tmp_name = tempfile.mkstemp(
            dir=self.templates_root, prefix=".tmp_", suffix=".json"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(template.to_record(), f, indent=2, ensure_ascii=False)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        return path
