"""Tests for logging setup."""

from __future__ import annotations

import io
import json
import logging
import sys

import pytest

from loadcheck._internal.logging import JsonLineFormatter, get_logger, setup_logging


@pytest.fixture
def isolated_logger(monkeypatch: pytest.MonkeyPatch):
    """The ``loadcheck`` logger stripped bare, restored afterwards."""
    logger = logging.getLogger("loadcheck")
    saved = (list(logger.handlers), logger.level, logger.propagate)
    logger.handlers.clear()
    monkeypatch.setattr(sys, "stderr", io.StringIO())
    yield logger
    logger.handlers[:] = saved[0]
    logger.setLevel(saved[1])
    logger.propagate = saved[2]


def _own_handlers(logger: logging.Logger) -> list[logging.Handler]:
    return [h for h in logger.handlers if getattr(h, "_loadcheck", False)]


def test_repeated_setup_keeps_one_handler(isolated_logger: logging.Logger):
    first = setup_logging(logging.INFO)
    second = setup_logging(logging.DEBUG)
    assert first is second is isolated_logger
    assert len(_own_handlers(isolated_logger)) == 1
    assert _own_handlers(isolated_logger)[0].level == logging.DEBUG
    assert isolated_logger.propagate is False


def test_foreign_handler_does_not_block_setup(isolated_logger: logging.Logger):
    foreign = logging.NullHandler()
    isolated_logger.addHandler(foreign)

    setup_logging(logging.WARNING)

    assert foreign in isolated_logger.handlers
    assert len(_own_handlers(isolated_logger)) == 1
    assert isolated_logger.propagate is False


def test_later_call_switches_to_json(isolated_logger: logging.Logger):
    setup_logging(logging.INFO)
    setup_logging(logging.INFO, json_format=True)

    get_logger("engine.session").info("users=%d", 3)

    payload = json.loads(sys.stderr.getvalue().strip())
    assert payload["message"] == "users=3"
    assert payload["logger"] == "loadcheck.engine.session"


def test_get_logger_namespaced():
    assert get_logger("engine.session").name == "loadcheck.engine.session"


def test_json_formatter_includes_exception():
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        exc_info = sys.exc_info()
    record = logging.LogRecord(
        name="loadcheck.test",
        level=logging.ERROR,
        pathname=__file__,
        lineno=1,
        msg="failed after %d tries",
        args=(3,),
        exc_info=exc_info,
    )
    payload = json.loads(JsonLineFormatter().format(record))
    assert payload["level"] == "ERROR"
    assert payload["message"] == "failed after 3 tries"
    assert "RuntimeError: boom" in payload["exception"]
    assert "timestamp" in payload
