"""
test_logging.py - RenderLog 관리 테스트

DoD:
- 렌더 1회 = RenderLog 1개
- include별 결과 기록
- 완료 시 logger로 내보냄 (성공 INFO, 실패 WARNING)
"""

import logging
from datetime import UTC, datetime

from src.core.logging import (
    complete_render_log,
    configure_logging,
    create_render_log,
    record_include,
)
from src.domain.schemas import FragmentResult, FragmentStatus, IncludeDirective


def make_directive(id: str = "header") -> IncludeDirective:
    raw = f'<include id="{id}" src="https://h/{id}" timeout="300" />'
    return IncludeDirective(id=id, src=f"https://h/{id}", timeout=300, start=0, end=len(raw), raw=raw)


class TestCreateRenderLog:
    """create_render_log 테스트."""

    def test_creates_with_template_name(self):
        render_log = create_render_log("home")

        assert render_log.template_name == "home"
        assert render_log.run_id.startswith("RUN-")
        assert render_log.result == "pending"
        assert render_log.includes == []

    def test_has_started_at(self):
        before = datetime.now(UTC)
        render_log = create_render_log("home")
        after = datetime.now(UTC)

        assert before <= datetime.fromisoformat(render_log.started_at) <= after


class TestRecordInclude:
    """record_include 테스트."""

    def test_success_entry(self):
        render_log = create_render_log("home")
        result = FragmentResult(
            directive_id="header",
            status=FragmentStatus.SUCCESS,
            body="<header/>",
            stylesheet_tags=['<link rel="stylesheet" href="a.css">'],
            status_code=200,
            elapsed_ms=12,
        )

        record_include(render_log, make_directive(), result)

        assert render_log.includes[0].to_dict() == {
            "directive_id": "header",
            "src": "https://h/header",
            "timeout": 300,
            "status": "success",
            "status_code": 200,
            "elapsed_ms": 12,
            "stylesheets": 1,
            "message": None,
        }

    def test_failure_entry(self):
        render_log = create_render_log("home")
        result = FragmentResult(
            directive_id="header",
            status=FragmentStatus.NETWORK_ERROR,
            error_message="refused",
        )

        record_include(render_log, make_directive(), result)

        assert render_log.includes[0].status == "network-error"
        assert render_log.includes[0].message == "refused"


class TestCompleteRenderLog:
    """complete_render_log 테스트."""

    def test_success(self, caplog):
        render_log = create_render_log("home")

        with caplog.at_level(logging.INFO, logger="src.core.logging"):
            complete_render_log(render_log, success=True)

        assert render_log.result == "success"
        assert render_log.finished_at is not None
        assert render_log.error_code is None
        assert "Render completed" in caplog.text
        assert render_log.run_id in caplog.text

    def test_failure(self, caplog):
        render_log = create_render_log("home")

        with caplog.at_level(logging.WARNING, logger="src.core.logging"):
            complete_render_log(
                render_log,
                success=False,
                error_code="UPSTREAM_TIMEOUT",
                error_context={"directive_id": "header"},
            )

        assert render_log.result == "failed"
        assert render_log.error_code == "UPSTREAM_TIMEOUT"
        assert render_log.to_dict()["error_context"] == {"directive_id": "header"}
        assert "Render failed" in caplog.text


class TestConfigureLogging:
    """configure_logging 테스트."""

    def test_invalid_level_falls_back(self, monkeypatch):
        calls = []
        monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.append(kw))

        configure_logging({"logging": {"level": "loud"}})
        configure_logging({"logging": {"level": "debug"}})

        assert [c["level"] for c in calls] == ["INFO", "DEBUG"]
