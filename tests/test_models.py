"""Tests for record validation and summary accounting."""

import pytest

from scripts.org_migration.models import MigrationSummary, OrgRecord, Outcome, validate_record


def test_minimal_record():
    record, error = validate_record({"createdBy": "u1", "name": "Acme"})

    assert error is None
    assert record.created_by == "u1"
    assert record.name == "Acme"
    assert record.external_id is None
    assert record.public_metadata is None


def test_full_record_passes_through():
    raw = {
        "createdBy": "user_1",
        "name": "Acme",
        "externalId": "ext-1",
        "slug": "acme",
        "publicMetadata": {"tier": "gold", "seats": 12},
        "privateMetadata": {"crm": {"id": 7}},
        "legacyField": "ignored",
    }
    record, error = validate_record(raw)

    assert error is None
    assert record.slug == "acme"
    assert record.public_metadata == {"tier": "gold", "seats": 12}
    assert record.private_metadata == {"crm": {"id": 7}}


@pytest.mark.parametrize(
    "raw",
    [
        {"createdBy": "u1"},
        {"name": "Acme"},
        {"createdBy": "", "name": "Acme"},
        {"createdBy": "u1", "name": ""},
        {"createdBy": 42, "name": "Acme"},
        {"createdBy": "u1", "name": "Acme", "publicMetadata": ["not", "a", "map"]},
        {"createdBy": "u1", "name": "Acme", "externalId": 99},
        "just a string",
        None,
    ],
)
def test_invalid_records_return_error(raw):
    record, error = validate_record(raw)

    assert record is None
    assert error is not None
    assert error.error_count() >= 1


def test_external_id_folded_into_private_metadata():
    record = OrgRecord.model_validate(
        {"createdBy": "u1", "name": "Acme", "externalId": "ext-1", "privateMetadata": {"a": 1}}
    )

    assert record.merged_private_metadata() == {"a": 1, "externalId": "ext-1"}
    # The record's own metadata is left untouched
    assert record.private_metadata == {"a": 1}


def test_private_metadata_without_external_id():
    record = OrgRecord.model_validate({"createdBy": "u1", "name": "Acme"})
    assert record.merged_private_metadata() == {}


def test_summary_record():
    summary = MigrationSummary(total=4)
    for outcome in (Outcome.MIGRATED, Outcome.MIGRATED, Outcome.ALREADY_EXISTS, Outcome.INVALID):
        summary.record(outcome)

    assert summary.as_dict() == {
        "total": 4,
        "migrated": 2,
        "already_exists": 1,
        "failed": 0,
        "invalid": 1,
    }
    assert summary.processed == 4
