# tests/unit/infrastructure/logging/test_json_logger.py
from __future__ import annotations

import contextvars
import json
import logging
import sys

from cachebench_api.infrastructure.logging import logger as logger_module
from cachebench_api.infrastructure.logging.logger import (
    _JsonFormatter,
    configure_root_logging,
    get_json_logger,
    get_request_id,
    set_request_context,
)


def _record(msg: str, **attrs) -> logging.LogRecord:
    rec = logging.LogRecord("cachebench.test", logging.INFO, __file__, 1, msg, None, None)
    for k, v in attrs.items():
        setattr(rec, k, v)
    return rec


def test_formatter_emits_stable_keys_and_merges_extra() -> None:
    line = _JsonFormatter().format(_record("cache_aside.hit", extra={"key": "record:42"}))
    payload = json.loads(line)

    assert payload["level"] == "INFO"
    assert payload["logger"] == "cachebench.test"
    assert payload["message"] == "cache_aside.hit"
    assert payload["key"] == "record:42"
    assert "ts" in payload


def test_formatter_includes_exception_info() -> None:
    try:
        raise ValueError("bad price")
    except ValueError:
        rec = _record("failed")
        rec.exc_info = sys.exc_info()

    payload = json.loads(_JsonFormatter().format(rec))
    assert payload["exc_type"] == "ValueError"
    assert payload["exc_message"] == "bad price"


def test_request_id_comes_from_context() -> None:
    def run() -> dict:
        set_request_context(request_id="rid-1")
        assert get_request_id() == "rid-1"
        return json.loads(_JsonFormatter().format(_record("x")))

    payload = contextvars.copy_context().run(run)
    assert payload["request_id"] == "rid-1"


def test_configure_root_logging_is_idempotent() -> None:
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    root.handlers.clear()
    try:
        configure_root_logging("DEBUG")
        configure_root_logging("DEBUG")

        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, logger_module._JsonFormatter)
        assert root.level == logging.DEBUG
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)


def test_get_json_logger_propagates() -> None:
    assert get_json_logger("cachebench.any").propagate is True
