"""Logging configuration for the ``loadcheck`` logger tree."""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime

ROOT_LOGGER = "loadcheck"
TEXT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s | %(message)s"

# Marks the handler installed by setup_logging, so handlers added by other
# code (pytest's capture handlers, an embedding application) are left alone.
_HANDLER_TAG = "_loadcheck"


class JsonLineFormatter(logging.Formatter):
    """Render each record as a single JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info and record.exc_info[1] is not None:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def _installed_handler(logger: logging.Logger) -> logging.StreamHandler | None:
    for handler in logger.handlers:
        if getattr(handler, _HANDLER_TAG, False):
            return handler  # type: ignore[return-value]
    return None


def setup_logging(level: int = logging.INFO, *, json_format: bool = False) -> logging.Logger:
    """Point the ``loadcheck`` logger at stderr and return it.

    Safe to call repeatedly: the tagged handler is created once and then
    reconfigured, so the latest *level* and *json_format* always win and
    the handler follows the current ``sys.stderr``.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    logger.propagate = False

    handler = _installed_handler(logger)
    if handler is None:
        handler = logging.StreamHandler(sys.stderr)
        setattr(handler, _HANDLER_TAG, True)
        logger.addHandler(handler)
    else:
        handler.setStream(sys.stderr)

    handler.setLevel(level)
    if json_format:
        handler.setFormatter(JsonLineFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT, datefmt="%H:%M:%S"))
    return logger


def get_logger(name: str) -> logging.Logger:
    """Child of the ``loadcheck`` logger, e.g. ``get_logger("engine.session")``."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
