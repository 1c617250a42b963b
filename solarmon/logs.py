"""
Logging setup for the monitoring service.

Installs a single stderr handler on the root logger, formatting each record
as one JSON object per line (or plain text when JSON output is disabled).
Context passed through ``extra=`` under one of ``CONTEXT_FIELDS`` is copied
into the JSON object, so log lines can be filtered per plant.

CHANGELOG:
- 2026-10-19: Initial creation
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime

CONTEXT_FIELDS = ("plant_id", "history_len")

_PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class JsonFormatter(logging.Formatter):
    """One JSON object per record: ts, level, logger, msg, plus context."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                entry[field] = value
        if record.exc_info and record.exc_info[1] is not None:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def configure_logging(level: str = "INFO", json_output: bool = True) -> None:
    """Replace the root logger's handlers with one stderr handler.

    Args:
        level: Log level name (e.g. ``"INFO"``).
        json_output: Use :class:`JsonFormatter` when True, plain text otherwise.
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JsonFormatter() if json_output else logging.Formatter(_PLAIN_FORMAT))
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)
