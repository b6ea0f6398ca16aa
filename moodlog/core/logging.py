"""
moodlog.core.logging — Structured logging support.

Provides a JSON formatter for stdlib logging.  When enabled, all
moodlog loggers output machine-parseable JSON lines instead of
human-readable text.

Usage::

    from moodlog.core.logging import configure_logging

    configure_logging(structured=True, level="INFO")

When ``structured=False`` (default), only the level is set and the
standard stdlib formatting applies.
"""

from __future__ import annotations

import json
import logging

#: ``extra=`` keys moodlog attaches to journal and store log calls.
CONTEXT_FIELDS = ("record_id", "mood_value", "action")


class StructuredFormatter(logging.Formatter):
    """Formats log records as single-line JSON objects.

    Fields emitted: ``ts``, ``level``, ``logger``, ``msg``, ``module``,
    ``func`` and ``line``.  Journal context passed through ``extra=``
    (see ``CONTEXT_FIELDS``) is copied in when present, so a log line
    can be matched to the mood record it concerns.  If the record
    carries ``exc_info`` the formatted traceback is included as
    ``exception``.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S")
            + f".{int(record.msecs):03d}",
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "module": record.module,
            "func": record.funcName,
            "line": record.lineno,
        }
        for name in CONTEXT_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                entry[name] = value

        if record.exc_info and record.exc_info[1] is not None:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str, ensure_ascii=False)


def configure_logging(
    structured: bool = False,
    level: str = "INFO",
    logger_name: str = "moodlog",
) -> None:
    """Configure moodlog's logging subsystem.

    Parameters
    ----------
    structured:
        When True, moodlog loggers emit JSON lines via
        ``StructuredFormatter``.
    level:
        Log level (``"DEBUG"``, ``"INFO"``, ``"WARNING"``, etc.).
    logger_name:
        Root logger name to configure (default ``"moodlog"``).
    """
    root = logging.getLogger(logger_name)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    if structured:
        root.handlers.clear()

        handler = logging.StreamHandler()
        handler.setFormatter(StructuredFormatter())
        root.addHandler(handler)

        # Avoid duplicate output when the application has its own handler.
        root.propagate = False
