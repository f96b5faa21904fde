"""CLI entry point: ``clerk-org-migrate [input-file]``."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

from rich.console import Console

from scripts.org_migration.clerk_client import ClerkClient
from scripts.org_migration.config import load_config
from scripts.org_migration.loader import DEFAULT_INPUT_FILE, load_records
from scripts.org_migration.logging_config import configure_logging
from scripts.org_migration.migration_log import MigrationLog
from scripts.org_migration.migrator import OrgMigrator
from scripts.org_migration.models import MigrationSummary

logger = logging.getLogger("migration.cli")

console = Console()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="clerk-org-migrate",
        description="Migrate organizations from a JSON export into Clerk",
    )
    parser.add_argument(
        "input_file",
        nargs="?",
        default=DEFAULT_INPUT_FILE,
        help=f"JSON array of organization records (default: {DEFAULT_INPUT_FILE})",
    )
    return parser


def print_summary(summary: MigrationSummary, migration_log: MigrationLog) -> None:
    """Print the final counts."""
    console.print(f"{summary.migrated} organization(s) migrated")
    console.print(f"{summary.already_exists} organization(s) already existed")
    console.print(f"{summary.failed} organization(s) failed to upload")
    console.print(f"{summary.invalid} organization(s) failed validation")
    if migration_log.entries_written:
        console.print(f"Failures logged to {migration_log.path}")


def run(input_file: str) -> MigrationSummary:
    """Load config and records, then migrate. Startup and input errors raise."""
    config = load_config()
    configure_logging(config.log_level)
    if config.import_to_dev and not config.is_live_key:
        logger.warning("Importing into a development instance; organizations will not reach production")

    console.print("Clerk Organization Migration Utility")
    console.print(f"Fetching orgs from {input_file}")
    records = load_records(input_file, config.offset)
    console.print(
        f"{input_file} found and parsed, attempting migration with an offset of {config.offset}"
    )

    client = ClerkClient(config)
    migration_log = MigrationLog()
    try:
        with console.status("Migrating organizations") as status:
            migrator = OrgMigrator(
                config,
                client,
                migration_log,
                on_status=status.update,
            )
            summary = migrator.run(records)
        console.print("[green]✔[/green] Migration complete")
    finally:
        client.close()

    print_summary(summary, migration_log)
    return summary


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main CLI entry point."""
    configure_logging()
    args = build_parser().parse_args(argv)

    try:
        run(args.input_file)
    except (ValueError, OSError) as exc:
        # json.JSONDecodeError is a ValueError; a missing file is an OSError
        logger.error("Migration aborted: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
