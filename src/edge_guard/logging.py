"""Logging helpers: credential masking, debug events, and JSON output.

Guards emit two kinds of records:

* store failures at ``ERROR`` on their module logger, always;
* decision events at ``DEBUG``, only when the caller passes ``debug=True``.

Decision events carry their fields as ``extra`` so :class:`JsonFormatter`
can render them as one machine-readable object per line.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from logging import LogRecord
from typing import Any

MASK = "***"
_VISIBLE_PREFIX = 3

# LogRecord attributes that are never copied into the JSON payload
_RESERVED_ATTRS = frozenset(
    {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "message",
        "asctime",
    }
)


def mask_sensitive(value: str) -> str:
    """Return *value* reduced to a short prefix plus a fixed mask marker.

    Values of three characters or fewer are masked entirely.
    """
    if len(value) <= _VISIBLE_PREFIX:
        return MASK
    return value[:_VISIBLE_PREFIX] + MASK


def debug_log(
    logger: logging.Logger,
    message: str,
    data: dict[str, Any] | None = None,
    debug: bool = False,
) -> None:
    """Emit a structured ``DEBUG`` record when *debug* is set.

    *data* is attached to the record as ``extra`` fields, so callers must
    mask credential-like values before passing them in.
    """
    if not debug:
        return
    extra: dict[str, Any] = {"event": message}
    if data:
        extra.update(data)
    logger.debug(message, extra=extra)


class JsonFormatter(logging.Formatter):
    """Format a LogRecord as a single JSON object, including its extra fields."""

    def format(self, record: LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS or key.startswith("_"):
                continue
            payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logging(level: str = "INFO", fmt: str = "json") -> None:
    """Install a stdout handler on the root logger.

    Parameters:
        level: Level name (``"DEBUG"``, ``"INFO"``, ...).  Unknown names fall back to INFO.
        fmt:   ``"json"`` for :class:`JsonFormatter`, ``"plain"`` for a one-line text format.
    """
    handler = logging.StreamHandler(sys.stdout)
    if fmt.lower() == "plain":
        formatter: logging.Formatter = logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s"
        )
    else:
        formatter = JsonFormatter()
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
