"""Structured logging configuration.

Uses standard library logging with a JSON formatter. Modules attach context
through ``extra=``; the keys used across the package are:

- ``job_id`` and ``dividend`` (``"index/divisor"``): lifted to the top level of
  the JSON object so that the lines of one job, or one dividend, can be
  filtered directly.
- ``divisor``, ``status``, ``cost`` and ``error``: job lifecycle events.
- ``entries``, ``hits`` and ``smiles``: dataset loading and Open Babel operators.
- ``command``, ``returncode``, ``work_dir`` and ``path``: ``gmx`` invocations,
  saved reports and CLI failures.

Everything else passed through ``extra=`` is nested under ``"extra"``.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

_RESERVED_LOG_RECORD_ATTRS: set[str] = set(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__
) | {"message", "asctime"}

_CORRELATION_FIELDS: tuple[str, ...] = ("job_id", "dividend")


class JsonFormatter(logging.Formatter):
    """One JSON object per record.

    Correlation fields sit beside "message"; other `extra` fields are nested
    under "extra".
    """

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 (record)
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extra = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED_LOG_RECORD_ATTRS and not key.startswith("_")
        }
        for field in _CORRELATION_FIELDS:
            if field in extra:
                payload[field] = extra.pop(field)
        if extra:
            payload["extra"] = extra

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging(level: str) -> None:
    """Configure root logging with structured JSON output."""

    root = logging.getLogger()

    # Remove any existing handlers to avoid duplicate logs when re-configuring.
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(JsonFormatter())

    root.addHandler(handler)
    root.setLevel(level.upper())
