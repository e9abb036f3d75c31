from __future__ import annotations

import sys

import pytest

from application.ports.http_client import HttpResponse
from application.session import Session
from application.steps.request import parse_document
from domain.exceptions import StepFailedError
from infrastructure.logging.composite_logger import CompositeLogger
from infrastructure.logging.console_logger import ConsoleLogger
from infrastructure.logging.loguru_logger import LoguruLogger
from scripts import smoke_run


def _page(url: str, html: str) -> HttpResponse:
    return HttpResponse(status=200, url=url, text=html, headers={}, document=parse_document(html))


def test_smoke_run_prints_page_summary(monkeypatch, capsys) -> None:
    # Arrange
    captured = {}

    async def fake_run_steps(self, steps):
        captured["names"] = [s.name for s in steps]
        return _page("https://example.com/", "<html><title>Example</title></html>")

    monkeypatch.setattr(Session, "run_steps", fake_run_steps)
    monkeypatch.setattr(smoke_run, "setup_console_logging", lambda level: None)
    monkeypatch.setattr(
        sys, "argv", ["smoke_run.py", "https://example.com/", "--click", "a", "--expect-text", "Example"]
    )

    # Act
    with pytest.raises(SystemExit) as excinfo:
        smoke_run.main()

    # Assert
    out = capsys.readouterr().out
    assert "Status: 200" in out
    assert "Title: Example" in out
    assert captured["names"] == ["open", "click#1", "expect-text"]
    assert excinfo.value.code == 0


def test_smoke_run_reports_failed_step(monkeypatch, capsys) -> None:
    async def fake_run_steps(self, steps):
        raise StepFailedError("open", ConnectionError("refused"))

    monkeypatch.setattr(Session, "run_steps", fake_run_steps)
    monkeypatch.setattr(smoke_run, "setup_console_logging", lambda level: None)
    monkeypatch.setattr(sys, "argv", ["smoke_run.py", "https://example.invalid/"])

    with pytest.raises(SystemExit) as excinfo:
        smoke_run.main()

    assert 'refused [at step "open"]' in capsys.readouterr().err
    assert excinfo.value.code == 1


def test_build_steps_with_form(monkeypatch) -> None:
    monkeypatch.setattr(
        sys,
        "argv",
        ["smoke_run.py", "https://example.com/", "--form", "#login", "--field", "user=alice", "--field", "pw=a=b"],
    )
    args = smoke_run._build_parser().parse_args()

    steps = smoke_run.build_steps(args)

    assert [s.name for s in steps] == ["open", "submit-form"]
    fields = {"user": "", "pw": ""}
    steps[1].options["callback"](fields)
    assert fields == {"user": "alice", "pw": "a=b"}


def test_bad_field_exits_with_usage_error(monkeypatch, capsys) -> None:
    monkeypatch.setattr(smoke_run, "setup_console_logging", lambda level: None)
    monkeypatch.setattr(sys, "argv", ["smoke_run.py", "https://example.com/", "--form", "f", "--field", "novalue"])

    with pytest.raises(SystemExit) as excinfo:
        smoke_run.main()

    assert excinfo.value.code == 2
    assert "name=value" in capsys.readouterr().err


def test_json_log_adds_console_logger(monkeypatch, capsys) -> None:
    captured = {}

    async def fake_run_steps(self, steps):
        captured["logger"] = self.logger
        self.logger.bind(run_id="r1").info("run.start", step_count=len(steps))
        return _page("https://example.com/", "<html><title>Example</title></html>")

    monkeypatch.setattr(Session, "run_steps", fake_run_steps)
    monkeypatch.setattr(smoke_run, "setup_console_logging", lambda level: None)
    monkeypatch.setattr(sys, "argv", ["smoke_run.py", "https://example.com/", "--json-log"])

    with pytest.raises(SystemExit) as excinfo:
        smoke_run.main()

    logger = captured["logger"]
    assert isinstance(logger, CompositeLogger)
    assert [type(l) for l in logger.loggers] == [LoguruLogger, ConsoleLogger]
    out = capsys.readouterr().out
    assert 'run.start {"run_id": "r1", "step_count": 1, "type": "run.start", "level": "info"}' in out
    assert excinfo.value.code == 0


def test_default_logger_is_loguru_and_error_status_is_marked(monkeypatch, capsys) -> None:
    captured = {}

    async def fake_run_steps(self, steps):
        captured["logger"] = self.logger
        return HttpResponse(status=503, url="https://example.com/", text="", headers={})

    monkeypatch.setattr(Session, "run_steps", fake_run_steps)
    monkeypatch.setattr(smoke_run, "setup_console_logging", lambda level: None)
    monkeypatch.setattr(sys, "argv", ["smoke_run.py", "https://example.com/"])

    with pytest.raises(SystemExit):
        smoke_run.main()

    assert isinstance(captured["logger"], LoguruLogger)
    out = capsys.readouterr().out
    assert "Status: 503 (error)" in out
    assert "{" not in out
