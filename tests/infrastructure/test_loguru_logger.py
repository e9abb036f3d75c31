from __future__ import annotations

import pytest
from loguru import logger

from infrastructure.logging.log_setup import setup_console_logging
from infrastructure.logging.loguru_logger import LoguruLogger


@pytest.fixture
def loguru_messages():
    messages = []
    handler_id = logger.add(lambda m: messages.append(m.record), level="DEBUG")
    yield messages
    logger.remove(handler_id)


def test_loguru_logger_renders_event_and_fields(loguru_messages) -> None:
    LoguruLogger().info("run.start", step_count=3)

    record = loguru_messages[-1]
    assert record["level"].name == "INFO"
    assert record["message"] == 'run.start {"step_count": 3}'


def test_loguru_logger_bind_sets_extra(loguru_messages) -> None:
    bound = LoguruLogger().bind(run_id="abc")

    bound.warning("assertion.failed", step_name="check")

    record = loguru_messages[-1]
    assert record["extra"]["run_id"] == "abc"
    assert record["level"].name == "WARNING"
    assert '"run_id": "abc"' in record["message"]
    assert bound.bound == {"run_id": "abc"}


def test_setup_console_logging_accepts_lowercase_level() -> None:
    setup_console_logging(level="debug")
    setup_console_logging(level="INFO")
