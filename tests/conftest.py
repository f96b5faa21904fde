"""Shared fixtures."""

import pytest

from scripts.org_migration import config as config_module
from scripts.org_migration.config import MigrationConfig

ENV_VARS = (
    "API_SECRET_KEY",
    "CLERK_SECRET_KEY",
    "DELAY_MS",
    "RETRY_DELAY_MS",
    "IMPORT_TO_DEV_INSTANCE",
    "OFFSET",
    "CLERK_API_URL",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Isolate every test from the caller's environment and any .env file."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(config_module, "load_dotenv", lambda *a, **k: False)


@pytest.fixture
def migration_config() -> MigrationConfig:
    return MigrationConfig(
        secret_key="sk_live_test",
        api_url="https://api.example.test/v1",
        delay_ms=1_000,
        retry_delay_ms=10_000,
    )
