"""JSON-lines diagnostics for a migration run.

Progress and the final summary go to stdout through the rich console;
everything here goes to stderr, one JSON object per line, so a run can be
piped into a log shipper without the status line getting in the way.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import IO, Any, Iterable, Optional

LOGGER_NAME = "migration"

# Per-record context attached by the migrator via ``extra=``
RECORD_FIELDS = ("external_id", "position", "status", "attempt", "delay_s", "outcome")


class JsonFormatter(logging.Formatter):
    """Serialise a LogRecord plus any known per-record context fields."""

    def __init__(self, fields: Iterable[str] = RECORD_FIELDS) -> None:
        super().__init__()
        self.fields = tuple(fields)

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            (key, record.__dict__[key])
            for key in self.fields
            if record.__dict__.get(key) is not None
        )
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def _resolve_level(level: str) -> int:
    """Map a LOG_LEVEL name to its number, falling back to INFO for unknown names."""
    value = getattr(logging, level.strip().upper(), None)
    return value if isinstance(value, int) else logging.INFO


def configure_logging(level: str = "INFO", stream: Optional[IO[str]] = None) -> logging.Logger:
    """Route the ``migration`` logger tree to a JSON handler.

    Safe to call twice: the CLI configures logging once before the config
    is loaded and again once ``LOG_LEVEL`` is known.
    """
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(JsonFormatter())

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(_resolve_level(level))
    logger.handlers[:] = [handler]
    logger.propagate = False
    return logger
