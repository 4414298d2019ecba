"""Property-based tests for data models.

Feature: favorites-sync
"""

from datetime import datetime, timedelta

import pytest
from hypothesis import given
from hypothesis import strategies as st
from pydantic import ValidationError

from src.models.record import NewRecord, PendingFormInput, Record, derive_username
from src.sync.models import LoadReport


@given(st.text(max_size=50))
def test_derived_username_has_no_spaces_or_uppercase(name: str):
    """Test that the handle is lowercased with every space replaced."""
    username = derive_username(name)

    assert " " not in username
    assert username == name.lower().replace(" ", "_")
    assert len(username) == len(name.lower())


@pytest.mark.parametrize(
    "name,expected",
    [
        ("Bob", "bob"),
        ("Ann Lee", "ann_lee"),
        ("Mary Ann Lee", "mary_ann_lee"),
    ],
)
def test_derive_username_examples(name: str, expected: str):
    assert derive_username(name) == expected


def test_record_ignores_unknown_fields():
    """Test that jsonplaceholder extras (address, company, ...) are dropped."""
    record = Record.model_validate(
        {
            "id": 1,
            "name": "Leanne Graham",
            "username": "Bret",
            "email": "Sincere@april.biz",
            "address": {"city": "Gwenborough"},
            "company": {"name": "Romaguera-Crona"},
        }
    )

    assert record.id == 1
    assert record.username == "Bret"
    assert not hasattr(record, "address")


def test_record_requires_id_name_and_email():
    for missing in ("id", "name", "email"):
        payload = {"id": 1, "name": "Ann", "email": "a@x.com"}
        del payload[missing]
        with pytest.raises(ValidationError):
            Record.model_validate(payload)


def test_record_is_immutable():
    record = Record(id=1, name="Ann", email="a@x.com")

    with pytest.raises(ValidationError):
        record.name = "Changed"


def test_new_record_rejects_empty_fields():
    with pytest.raises(ValidationError):
        NewRecord(name="", email="a@x.com", username="")


def test_pending_form_input_defaults_empty():
    form = PendingFormInput()

    assert form.is_empty
    assert not PendingFormInput(name="Bob").is_empty


@given(st.lists(st.text(min_size=1, max_size=50), max_size=5))
def test_load_report_success_tracks_errors(errors: list[str]):
    """Test that a report is successful exactly when it carries no errors."""
    start = datetime(2024, 1, 1, 12, 0, 0)
    report = LoadReport(
        record_count=3,
        favorite_count=1,
        duration_seconds=0.5,
        start_time=start,
        end_time=start + timedelta(seconds=0.5),
        errors=errors,
    )

    assert report.success == (len(errors) == 0)


def test_load_report_rejects_negative_counts():
    now = datetime.now()
    with pytest.raises(ValidationError):
        LoadReport(record_count=-1, start_time=now, end_time=now)
