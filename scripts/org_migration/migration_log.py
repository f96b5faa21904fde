"""Run-scoped append-only failure log."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional, Union

logger = logging.getLogger("migration.log")


def log_file_name(started_at: Optional[datetime] = None) -> str:
    """``migration-log-YYYY-MM-DDTHH:MM:SS.json`` for the given UTC start time."""
    started_at = started_at or datetime.now(timezone.utc)
    return f"migration-log-{started_at.strftime('%Y-%m-%dT%H:%M:%S')}.json"


class MigrationLog:
    """Appends pretty-printed JSON entries, newline separated.

    The file is only created on the first append, so a clean run leaves
    nothing behind. The result is a sequence of objects, not one JSON
    document.
    """

    def __init__(
        self,
        directory: Union[str, Path] = ".",
        started_at: Optional[datetime] = None,
    ) -> None:
        self.path = Path(directory) / log_file_name(started_at)
        self.entries_written = 0

    def append(self, payload: dict[str, Any]) -> None:
        with open(self.path, "a", encoding="utf-8") as fh:
            fh.write("\n" + json.dumps(payload, indent=2, default=str))
        self.entries_written += 1
        logger.debug("Appended entry %d to %s", self.entries_written, self.path)
