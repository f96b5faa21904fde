"""Minimal Clerk Backend API client: organization creation only."""

from __future__ import annotations

import logging
from typing import Any, Optional

import requests

from scripts.org_migration.config import MigrationConfig
from scripts.org_migration.models import OrgRecord

logger = logging.getLogger("migration.clerk")

STATUS_CONFLICT = 422
STATUS_RATE_LIMITED = 429


class ClerkAPIError(Exception):
    """Non-2xx response from the Clerk Backend API."""

    def __init__(
        self,
        status: int,
        errors: Optional[list[dict[str, Any]]] = None,
        trace_id: Optional[str] = None,
    ) -> None:
        self.status = status
        self.errors = errors or []
        self.trace_id = trace_id
        message = f"Clerk API returned {status}"
        if self.errors and self.errors[0].get("message"):
            message += f": {self.errors[0]['message']}"
        super().__init__(message)

    @property
    def is_conflict(self) -> bool:
        return self.status == STATUS_CONFLICT

    @property
    def is_rate_limited(self) -> bool:
        return self.status == STATUS_RATE_LIMITED

    def details(self) -> dict[str, Any]:
        """Error fields copied into migration log entries."""
        details: dict[str, Any] = {"status": self.status}
        if self.trace_id:
            details["clerkTraceId"] = self.trace_id
        details["errors"] = self.errors
        return details

    @classmethod
    def from_response(cls, resp: requests.Response) -> "ClerkAPIError":
        errors: list[dict[str, Any]] = []
        trace_id = None
        try:
            body = resp.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            errors = [
                {
                    "code": e.get("code"),
                    "message": e.get("message"),
                    "longMessage": e.get("long_message"),
                    "meta": e.get("meta"),
                }
                for e in body.get("errors") or []
                if isinstance(e, dict)
            ]
            trace_id = body.get("clerk_trace_id")
        elif resp.text:
            errors = [{"message": resp.text[:500]}]
        return cls(resp.status_code, errors, trace_id)


def build_create_payload(record: OrgRecord) -> dict[str, Any]:
    """Map a validated record onto the create-organization request body."""
    payload: dict[str, Any] = {
        "created_by": record.created_by,
        "name": record.name,
        "private_metadata": record.merged_private_metadata(),
    }
    if record.public_metadata is not None:
        payload["public_metadata"] = record.public_metadata
    return payload


class ClerkClient:
    """Thin wrapper around a requests.Session authenticated with the secret key."""

    def __init__(self, config: MigrationConfig, session: Optional[requests.Session] = None) -> None:
        self._base = config.api_url.rstrip("/")
        self._session = session or requests.Session()
        self._session.headers.update({
            "Authorization": f"Bearer {config.secret_key}",
            "Content-Type": "application/json",
            "User-Agent": "clerk-org-migrate",
        })

    def close(self) -> None:
        self._session.close()

    def create_organization(self, record: OrgRecord) -> dict[str, Any]:
        """POST /organizations. Raises ClerkAPIError on any non-2xx status."""
        resp = self._session.post(
            f"{self._base}/organizations", json=build_create_payload(record)
        )
        if not resp.ok:
            raise ClerkAPIError.from_response(resp)
        # 2xx is success even when the body is empty or not JSON
        try:
            created = resp.json()
        except ValueError:
            logger.debug("Created organization %s with a non-JSON body", record.name)
            return {}
        logger.debug("Created organization %s", record.name)
        return created if isinstance(created, dict) else {}
