"""Tests for structured logging."""

import io
import json
import logging

from scripts.org_migration.logging_config import JsonFormatter, configure_logging


def test_json_lines_with_extra_fields():
    stream = io.StringIO()
    configure_logging("DEBUG", stream=stream)
    logger = logging.getLogger("migration.test")

    logger.warning("Rate limited", extra={"external_id": "ext-1", "attempt": 2, "delay_s": 20.0})

    entry = json.loads(stream.getvalue().strip())
    assert entry["level"] == "WARNING"
    assert entry["logger"] == "migration.test"
    assert entry["message"] == "Rate limited"
    assert entry["external_id"] == "ext-1"
    assert entry["attempt"] == 2
    assert entry["delay_s"] == 20.0
    assert "status" not in entry


def test_level_filtering():
    stream = io.StringIO()
    configure_logging("error", stream=stream)

    logging.getLogger("migration.test").info("hidden")

    assert stream.getvalue() == ""


def test_exception_included():
    stream = io.StringIO()
    configure_logging(stream=stream)
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        logging.getLogger("migration.test").exception("failed")

    entry = json.loads(stream.getvalue().strip())
    assert "RuntimeError: boom" in entry["exception"]


def test_unknown_level_falls_back_to_info():
    stream = io.StringIO()
    logger = configure_logging("chatty", stream=stream)

    assert logger.level == logging.INFO


def test_reconfigure_replaces_handler():
    first, second = io.StringIO(), io.StringIO()
    configure_logging(stream=first)
    configure_logging(stream=second)

    logging.getLogger("migration.test").info("once")

    assert first.getvalue() == ""
    assert len(second.getvalue().splitlines()) == 1


def test_formatter_uses_record_time_and_selected_fields():
    record = logging.LogRecord("migration.test", logging.INFO, __file__, 1, "hi", None, None)
    record.created = 0.0
    record.outcome = "migrated"
    record.position = 3

    entry = json.loads(JsonFormatter(fields=("outcome",)).format(record))

    assert entry["timestamp"] == "1970-01-01T00:00:00+00:00"
    assert entry["outcome"] == "migrated"
    assert "position" not in entry
