"""
test_ids.py - ID 생성 테스트

DoD:
- run_id: RUN-{timestamp}-{uuid8}, 호출마다 고유
- 저장 키: name → 결정론적 SHA-256 hex
"""

import re

from src.core.ids import generate_run_id, template_storage_key


class TestGenerateRunId:
    """generate_run_id 테스트."""

    def test_format(self):
        """RUN-YYYYMMDDHHMMSS-xxxxxxxx."""
        assert re.fullmatch(r"RUN-\d{14}-[0-9a-f]{8}", generate_run_id())

    def test_unique(self):
        """연속 호출 시 중복 없음."""
        ids = {generate_run_id() for _ in range(100)}

        assert len(ids) == 100


class TestTemplateStorageKey:
    """template_storage_key 테스트."""

    def test_deterministic(self):
        assert template_storage_key("a name") == template_storage_key("a name")

    def test_filename_safe(self):
        """슬래시/공백 포함 name도 hex 64자."""
        key = template_storage_key("../etc/passwd and spaces")

        assert re.fullmatch(r"[0-9a-f]{64}", key)

    def test_different_names(self):
        assert template_storage_key("a") != template_storage_key("b")
