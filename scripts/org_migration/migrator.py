"""Sequential migration driver: validate, submit, classify, log."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Optional, Sequence

import requests

from scripts.org_migration.clerk_client import ClerkAPIError, ClerkClient
from scripts.org_migration.config import MigrationConfig
from scripts.org_migration.migration_log import MigrationLog
from scripts.org_migration.models import (
    MigrationSummary,
    OrgRecord,
    Outcome,
    validate_record,
)

logger = logging.getLogger("migration.migrator")

# Attempts per record, including the first, before a rate limit becomes a failure
MAX_SUBMIT_ATTEMPTS = 6
MAX_RETRY_DELAY_S = 300.0


class OrgMigrator:
    """Migrates records one at a time.

    Every record is preceded by a flat ``delay_ms`` pause. A 429 response
    pauses for ``retry_delay_ms`` doubled on each consecutive rate limit and
    resubmits the same record, up to ``MAX_SUBMIT_ATTEMPTS`` attempts.
    Conflicts and other failures are written to the migration log and
    never retried.
    """

    def __init__(
        self,
        config: MigrationConfig,
        client: ClerkClient,
        migration_log: MigrationLog,
        sleep: Callable[[float], None] = time.sleep,
        on_status: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.config = config
        self.client = client
        self.migration_log = migration_log
        self._sleep = sleep
        self._on_status = on_status
        self._status_text = ""

    def run(self, records: Sequence[Any]) -> MigrationSummary:
        """Process ``records`` in order and return the accumulated counts."""
        summary = MigrationSummary(total=len(records))
        for index, raw in enumerate(records):
            self._set_status(f"Migrating org {index}/{summary.total}, cooldown")
            self._sleep(self.config.delay_ms / 1000)
            self._set_status(f"Migrating org {index + 1}/{summary.total}")
            summary.record(self.process_record(raw, position=index + 1))

        logger.info(
            "Migration complete: %d/%d records processed, %s",
            summary.processed,
            summary.total,
            summary.as_dict(),
        )
        return summary

    def process_record(self, raw: Any, position: Optional[int] = None) -> Outcome:
        """Validate and submit one record, returning how it ended."""
        record, error = validate_record(raw)
        if error is not None:
            external_id = raw.get("externalId") if isinstance(raw, dict) else None
            logger.warning(
                "Record failed validation: %d issue(s)",
                error.error_count(),
                extra={"external_id": external_id, "position": position, "outcome": Outcome.INVALID.value},
            )
            self.migration_log.append({
                "externalId": external_id,
                "name": "ValidationError",
                "issues": error.errors(include_url=False),
            })
            return Outcome.INVALID
        return self._submit(record, position)

    def _submit(self, record: OrgRecord, position: Optional[int]) -> Outcome:
        extra = {"external_id": record.external_id, "position": position}
        attempt = 0
        while True:
            try:
                self.client.create_organization(record)
            except ClerkAPIError as exc:
                if exc.is_rate_limited and attempt + 1 < MAX_SUBMIT_ATTEMPTS:
                    self._rate_limit_sleep(attempt, extra)
                    attempt += 1
                    continue
                return self._handle_api_error(record, exc, attempt + 1, extra)
            except requests.RequestException as exc:
                logger.error("Request failed: %s", exc, extra={**extra, "outcome": Outcome.FAILED.value})
                self.migration_log.append({
                    "externalId": record.external_id,
                    "status": None,
                    "message": str(exc),
                })
                return Outcome.FAILED

            logger.debug("Migrated %s", record.name, extra={**extra, "outcome": Outcome.MIGRATED.value})
            return Outcome.MIGRATED

    def _handle_api_error(
        self, record: OrgRecord, exc: ClerkAPIError, attempts: int, extra: dict[str, Any]
    ) -> Outcome:
        if exc.is_conflict:
            logger.info(
                "Organization already exists",
                extra={**extra, "status": exc.status, "outcome": Outcome.ALREADY_EXISTS.value},
            )
            self.migration_log.append({
                "userId": record.created_by,
                "externalId": record.external_id,
                **exc.details(),
            })
            return Outcome.ALREADY_EXISTS

        if exc.is_rate_limited:
            logger.error(
                "Still rate limited after %d attempts, giving up on record",
                attempts,
                extra={**extra, "status": exc.status, "attempt": attempts, "outcome": Outcome.FAILED.value},
            )
            self.migration_log.append({
                "externalId": record.external_id,
                **exc.details(),
                "attempts": attempts,
            })
            return Outcome.FAILED

        logger.error(
            "Create failed: %s",
            exc,
            extra={**extra, "status": exc.status, "outcome": Outcome.FAILED.value},
        )
        self.migration_log.append({"externalId": record.external_id, **exc.details()})
        return Outcome.FAILED

    def _rate_limit_sleep(self, attempt: int, extra: dict[str, Any]) -> None:
        """Exponential backoff sleep for rate limiting."""
        delay = min(self.config.retry_delay_ms / 1000 * (2 ** attempt), MAX_RETRY_DELAY_S)
        logger.warning(
            "Rate limited, sleeping %.1fs (attempt %d)",
            delay,
            attempt + 1,
            extra={**extra, "status": 429, "attempt": attempt + 1, "delay_s": delay},
        )
        base_text = self._status_text
        self._set_status(f"{base_text} - rate limit reached, waiting {int(delay * 1000)} ms")
        self._sleep(delay)
        self._set_status(base_text)

    def _set_status(self, text: str) -> None:
        self._status_text = text
        if self._on_status is not None:
            self._on_status(text)
