"""Input record schema and the per-run result types."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError


class OrgRecord(BaseModel):
    """One organization from the export file."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    # Clerk user ID of the user that will own the organization
    created_by: str = Field(alias="createdBy", min_length=1)
    name: str = Field(min_length=1)
    # ID of the organization in the originating system; unique per instance
    external_id: Optional[str] = Field(default=None, alias="externalId")
    slug: Optional[str] = None
    # Visible to both Frontend and Backend APIs
    public_metadata: Optional[dict[str, Any]] = Field(default=None, alias="publicMetadata")
    # Visible to Backend APIs only
    private_metadata: Optional[dict[str, Any]] = Field(default=None, alias="privateMetadata")

    def merged_private_metadata(self) -> dict[str, Any]:
        """Private metadata with ``externalId`` folded in for traceability."""
        merged = dict(self.private_metadata or {})
        if self.external_id is not None:
            merged["externalId"] = self.external_id
        return merged


def validate_record(raw: Any) -> tuple[Optional[OrgRecord], Optional[ValidationError]]:
    """Validate one raw record without raising.

    Returns ``(record, None)`` on success and ``(None, error)`` otherwise.
    """
    try:
        return OrgRecord.model_validate(raw), None
    except ValidationError as exc:
        return None, exc


class Outcome(str, enum.Enum):
    MIGRATED = "migrated"
    ALREADY_EXISTS = "already_exists"
    FAILED = "failed"
    INVALID = "invalid"


@dataclass
class MigrationSummary:
    """Counts accumulated over one run."""

    total: int = 0
    migrated: int = 0
    already_exists: int = 0
    failed: int = 0
    invalid: int = 0

    def record(self, outcome: Outcome) -> None:
        setattr(self, outcome.value, getattr(self, outcome.value) + 1)

    @property
    def processed(self) -> int:
        return self.migrated + self.already_exists + self.failed + self.invalid

    def as_dict(self) -> dict[str, int]:
        return {
            "total": self.total,
            "migrated": self.migrated,
            "already_exists": self.already_exists,
            "failed": self.failed,
            "invalid": self.invalid,
        }
