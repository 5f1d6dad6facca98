"""Logging for stoptoken.

The library only logs at DEBUG level, under the ``stoptoken.`` namespace.
Records may carry stoptoken fields (``source_id``, ``backend``, ``delay``)
passed through ``extra=``; both formatters render them.

Usage::

    from stoptoken.log import configure_logging

    configure_logging(level="DEBUG", fmt="json")

Setting ``STOPTOKEN_DEBUG=1`` or ``STOPTOKEN_LOG_LEVEL`` does the same at
import time.
"""

from __future__ import annotations

import json
import logging
import os
import sys
import threading
from datetime import UTC, datetime
from typing import Any

_PREFIX = "stoptoken"

_EXTRA_FIELDS = ("source_id", "backend", "delay")


def _extras(record: logging.LogRecord) -> dict[str, Any]:
    return {name: getattr(record, name) for name in _EXTRA_FIELDS if hasattr(record, name)}


class TextFormatter(logging.Formatter):
    """``12:00:01 DEBUG stoptoken.source: message source_id=0x7f...``"""

    def __init__(self) -> None:
        super().__init__("%(asctime)s %(levelname)s %(name)s: %(message)s", "%H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = _extras(record)
        if not fields:
            return line
        # Fields go on the message line, ahead of any traceback.
        head, sep, tail = line.partition("\n")
        rendered = " ".join(f"{name}={value}" for name, value in fields.items())
        return f"{head} {rendered}{sep}{tail}"


class JsonFormatter(logging.Formatter):
    """One JSON object per record, stoptoken fields included as keys."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **_extras(record),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def get_logger(name: str) -> logging.Logger:
    """Return the logger *name*, prefixed with ``stoptoken.`` if needed."""
    if name != _PREFIX and not name.startswith(f"{_PREFIX}."):
        name = f"{_PREFIX}.{name}"
    return logging.getLogger(name)


_lock = threading.Lock()
_handler: logging.Handler | None = None


def configure_logging(
    level: str | int = "WARNING",
    fmt: str = "text",
    *,
    force: bool = False,
) -> None:
    """Attach one stderr handler to the ``stoptoken`` logger.

    A second call is a no-op unless *force* is set, which replaces the
    handler and level.

    Args:
        level: Level name or number. Unknown names fall back to WARNING.
        fmt: ``"text"`` or ``"json"``.
    """
    global _handler
    with _lock:
        if _handler is not None and not force:
            return
        root = logging.getLogger(_PREFIX)
        if _handler is not None:
            root.removeHandler(_handler)
        _handler = logging.StreamHandler(sys.stderr)
        _handler.setFormatter(JsonFormatter() if fmt == "json" else TextFormatter())
        root.addHandler(_handler)
        if isinstance(level, str):
            level = logging.getLevelNamesMapping().get(level.upper(), logging.WARNING)
        root.setLevel(level)


def reset_logging() -> None:
    """Remove the handler and restore the WARNING level. For tests."""
    global _handler
    with _lock:
        root = logging.getLogger(_PREFIX)
        if _handler is not None:
            root.removeHandler(_handler)
            _handler = None
        root.setLevel(logging.WARNING)


def _configure_from_env() -> None:
    if os.environ.get("STOPTOKEN_DEBUG") == "1":
        configure_logging("DEBUG")
    elif "STOPTOKEN_LOG_LEVEL" in os.environ:
        configure_logging(os.environ["STOPTOKEN_LOG_LEVEL"])


_configure_from_env()
