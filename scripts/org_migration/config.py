"""Configuration via environment variables (and an optional .env file)."""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from scripts.org_migration.secrets import resolve_secret

DEFAULT_API_URL = "https://api.clerk.com/v1"

DEV_INSTANCE_MESSAGE = (
    "The secret key provided is for a development instance. Development "
    "instances are limited to 500 users and do not share their userbase with "
    "production instances. If you want to import organizations to your "
    "development instance, set IMPORT_TO_DEV_INSTANCE=true in your .env."
)


@dataclass(frozen=True)
class MigrationConfig:
    secret_key: str
    api_url: str = DEFAULT_API_URL
    delay_ms: int = 1_000
    retry_delay_ms: int = 10_000
    import_to_dev: bool = False
    offset: int = 0
    log_level: str = "INFO"

    @property
    def is_live_key(self) -> bool:
        return is_live_key(self.secret_key)


def is_live_key(secret_key: str) -> bool:
    """True for production keys, which look like ``sk_live_...``."""
    parts = secret_key.split("_")
    return len(parts) > 1 and parts[1] == "live"


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {os.environ[name]!r}") from None
    if value < 0:
        raise ValueError(f"{name} must not be negative, got {value}")
    return value


def load_config() -> MigrationConfig:
    """Load configuration from the environment.

    Raises ValueError when the secret key is missing, or when it belongs
    to a development instance and IMPORT_TO_DEV_INSTANCE is not "true".
    """
    load_dotenv()

    raw_key = os.environ.get("API_SECRET_KEY") or os.environ.get("CLERK_SECRET_KEY", "")
    if not raw_key:
        raise ValueError(
            "API_SECRET_KEY is required. Copy .env.example to .env and add your key."
        )
    secret_key = resolve_secret(raw_key)

    import_to_dev = os.environ.get("IMPORT_TO_DEV_INSTANCE", "false") == "true"
    if not is_live_key(secret_key) and not import_to_dev:
        raise ValueError(DEV_INSTANCE_MESSAGE)

    return MigrationConfig(
        secret_key=secret_key,
        api_url=os.environ.get("CLERK_API_URL", DEFAULT_API_URL).rstrip("/"),
        delay_ms=_int_env("DELAY_MS", 1_000),
        retry_delay_ms=_int_env("RETRY_DELAY_MS", 10_000),
        import_to_dev=import_to_dev,
        offset=_int_env("OFFSET", 0),
        log_level=os.environ.get("LOG_LEVEL", "INFO"),
    )
