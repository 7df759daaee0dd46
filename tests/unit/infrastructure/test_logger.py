# tests/unit/infrastructure/test_logger.py
from __future__ import annotations

import json
import logging
import os
import sys

import pytest

from exact_online.infrastructure.logging.logger import (
    _JsonFormatter,  # internal but importable
    configure_root_logging,
    get_json_logger,
    get_request_id,
    get_trace_id,
    set_request_context,
)


def _capture_log(record_msg: str, level: int = logging.INFO, **extra) -> dict:
    """Emit a log record and return the parsed JSON payload."""
    logger = logging.getLogger("test.logger")
    fmt = _JsonFormatter()
    record = logger.makeRecord(
        name=logger.name,
        level=level,
        fn="test_logger",
        lno=123,
        msg=record_msg,
        args=(),
        exc_info=None,
    )
    for k, v in extra.items():
        setattr(record, k, v)
    return json.loads(fmt.format(record))


def test_configure_root_logging_installs_json_handler(monkeypatch: pytest.MonkeyPatch) -> None:
    """Root logger should get a JSON formatter and respect LOG_LEVEL."""
    monkeypatch.setenv("LOG_LEVEL", "debug")
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    root.handlers.clear()
    try:
        configure_root_logging()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, _JsonFormatter)

        configure_root_logging("WARNING")
        assert root.level == logging.WARNING
        assert len(root.handlers) == 1
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)


def test_json_formatter_basic_fields() -> None:
    """Formatter should emit ts, level, logger and message."""
    payload = _capture_log("hello-world")
    assert payload["message"] == "hello-world"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "test.logger"
    assert "ts" in payload


def test_json_formatter_merges_structured_extra() -> None:
    payload = _capture_log("envelope.unwrap_object.malformed", extra={"operation": "unwrap_object"})
    assert payload["operation"] == "unwrap_object"


def test_json_formatter_request_id_precedence(monkeypatch: pytest.MonkeyPatch) -> None:
    """Request ID comes from the record, then the context, then REQUEST_ID env."""
    monkeypatch.delenv("REQUEST_ID", raising=False)
    assert _capture_log("with-record-id", request_id="abc-123")["request_id"] == "abc-123"

    monkeypatch.setenv("REQUEST_ID", "env-id")
    assert _capture_log("with-env-id")["request_id"] == os.environ["REQUEST_ID"]

    set_request_context(request_id="ctx-id", trace_id="trace-1")
    payload = _capture_log("with-ctx-id")
    assert payload["request_id"] == "ctx-id"
    assert payload["trace_id"] == "trace-1"


def test_set_request_context_updates_only_given_values() -> None:
    set_request_context(request_id="r1", trace_id="t1")
    set_request_context(trace_id="t2")
    assert get_request_id() == "r1"
    assert get_trace_id() == "t2"


def test_json_formatter_includes_exception_info() -> None:
    """Formatter should add exc_type and exc_message for errors with exc_info."""
    logger = logging.getLogger("test.logger.exc")
    try:
        raise ValueError("boom")
    except ValueError:
        record = logger.makeRecord(
            logger.name, logging.ERROR, "f", 1, "failure", (), sys.exc_info()
        )
    payload = json.loads(_JsonFormatter().format(record))
    assert payload["level"] == "ERROR"
    assert payload["exc_type"] == "ValueError"
    assert "boom" in payload["exc_message"]


def test_get_json_logger_propagates() -> None:
    logger = get_json_logger("exact_online.test")
    assert logger.name == "exact_online.test"
    assert logger.propagate is True
