"""Input file loading."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Union

logger = logging.getLogger("migration.loader")

DEFAULT_INPUT_FILE = "orgs.json"


def load_records(path: Union[str, Path] = DEFAULT_INPUT_FILE, offset: int = 0) -> list[Any]:
    """Read the JSON array at ``path`` and return it from ``offset`` onwards.

    Records are returned raw; validation happens per record later so a
    malformed entry never stops the batch. A missing file, invalid JSON
    or a top-level value that is not an array raises.
    """
    if offset < 0:
        raise ValueError(f"offset must not be negative, got {offset}")

    with open(path, "r", encoding="utf-8") as fh:
        data = json.load(fh)

    if not isinstance(data, list):
        raise ValueError(
            f"{path} must contain a JSON array of organizations, got {type(data).__name__}"
        )

    logger.info("Loaded %d records from %s, skipping the first %d", len(data), path, offset)
    return data[offset:]
