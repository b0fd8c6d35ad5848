"""Structured JSON logger for getpronto.

Every log record is emitted as a single-line JSON object::

    {"ts": "2026-01-01T12:00:00.123456+00:00", "level": "INFO",
     "logger": "getpronto.transport", "message": "Request complete",
     "method": "GET", "path": "/files", "status_code": 200}

Structured fields are passed through :func:`getpronto.utils.redact` before
they are written, so credentials, data URLs and raw bytes handed to a
logging call show up masked.

Usage::

    from getpronto.observability import get_logger

    log = get_logger("getpronto.upload")
    log.info("upload normalized", extra={"extra_fields": {"size": 512}})
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from getpronto.utils.redact import redact


class StructuredFormatter(logging.Formatter):
    """Render a :class:`logging.LogRecord` as one JSON line.

    Keys: ``ts`` (UTC time the record was created), ``level``, ``logger``,
    ``message``, then the redacted ``extra_fields``.  A failing record
    also gets ``exception`` and, for SDK errors, ``error_code``.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        fields = getattr(record, "extra_fields", None)
        if fields:
            entry.update(redact(fields))

        exc = record.exc_info[1] if record.exc_info else None
        if exc is not None:
            entry["exception"] = self.formatException(record.exc_info)
            code = getattr(exc, "code", None)
            if code is not None:
                entry["error_code"] = getattr(code, "value", code)
        if record.stack_info:
            entry["stack_info"] = self.formatStack(record.stack_info)

        return json.dumps(entry, default=str)


def _resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved


_configured_loggers: set[str] = set()


def get_logger(
    name: str = "getpronto",
    *,
    level: int | str = logging.WARNING,
    stream: Any | None = None,
) -> logging.Logger:
    """Return the JSON logger called *name*, configuring it on first use.

    The first call attaches a :class:`StructuredFormatter` handler writing
    to *stream* (``sys.stderr`` by default), sets *level* (an ``int`` or a
    case-insensitive name such as ``"debug"``) and stops propagation.
    Later calls return the same logger untouched.

    Raises
    ------
    ValueError
        If *level* is a string that names no logging level.
    """
    logger = logging.getLogger(name)
    if name in _configured_loggers:
        return logger

    logger.setLevel(_resolve_level(level))
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(StructuredFormatter())
    logger.addHandler(handler)
    logger.propagate = False
    _configured_loggers.add(name)
    return logger
