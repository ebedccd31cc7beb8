from __future__ import annotations

import io
import json
import logging
from collections.abc import Iterator

import pytest

from sqlsession.core.config import Settings
from sqlsession.core.logging import configure_logging


@pytest.fixture
def restore_root_logger() -> Iterator[None]:
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def _capture(logger_name: str, message: str, **extra: object) -> str:
    root_logger = logging.getLogger()
    handler = next(
        (h for h in root_logger.handlers if isinstance(h, logging.StreamHandler)),
        None,
    )
    assert handler is not None, "Expected stream handler to be configured"

    buffer = io.StringIO()
    previous_stream = handler.setStream(buffer)
    try:
        logging.getLogger(logger_name).warning(message, extra=extra)
    finally:
        handler.flush()
        handler.setStream(previous_stream)
    return buffer.getvalue()


@pytest.mark.usefixtures("restore_root_logger")
def test_configure_logging_outputs_json_when_enabled() -> None:
    settings = Settings(environment="ci", log_json=True)
    configure_logging(settings)

    output = _capture("sqlsession.tests.logging", "structured log event", db_stage="execute")

    payload = json.loads(output.strip().splitlines()[-1])
    assert payload["message"] == "structured log event"
    assert payload["level"] == "WARNING"
    assert payload["logger"] == "sqlsession.tests.logging"
    assert payload["environment"] == "ci"
    assert payload["service"] == settings.project_name
    assert payload["db_stage"] == "execute"


@pytest.mark.usefixtures("restore_root_logger")
def test_configure_logging_defaults_to_text_lines() -> None:
    configure_logging(Settings(environment="ci"))

    output = _capture("sqlsession.tests.logging", "plain log event")

    assert " | WARNING  | sqlsession.tests.logging | plain log event" in output


@pytest.mark.usefixtures("restore_root_logger")
def test_configure_logging_honours_level() -> None:
    configure_logging(Settings(log_level="error"))

    assert logging.getLogger().level == logging.ERROR
    assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
