"""日時正規化のテスト。"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

from superops.enums import DateHandling
from superops.normalize import convert_dates, parse_datetime_tolerant, to_iso_string


def test_to_iso_string_uses_z_for_utc() -> None:
    aware = datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)
    naive = datetime(2024, 1, 15, 10, 30)

    assert to_iso_string(aware) == "2024-01-15T10:30:00Z"
    assert to_iso_string(naive) == "2024-01-15T10:30:00Z"


def test_to_iso_string_keeps_other_offsets_and_plain_values() -> None:
    jst = timezone(timedelta(hours=9))

    assert to_iso_string(datetime(2024, 1, 15, 19, 30, tzinfo=jst)) == "2024-01-15T19:30:00+09:00"
    assert to_iso_string(date(2024, 3, 1)) == "2024-03-01"
    assert to_iso_string("2024-03-01") == "2024-03-01"
    assert to_iso_string(None) is None


def test_parse_datetime_tolerant() -> None:
    parsed = parse_datetime_tolerant("2024-01-15T10:30:00Z")

    assert parsed == datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)
    assert parse_datetime_tolerant("") is None
    assert parse_datetime_tolerant("not a date") is None


def test_convert_dates_handles_nested_keys() -> None:
    payload = {
        "id": "t1",
        "createdAt": "2024-01-15T10:30:00Z",
        "dueDate": "2024-02-01",
        "subject": "2024-01-15T10:30:00Z",
        "notes": [{"id": "n1", "updatedAt": "2024-01-16T00:00:00+00:00"}],
        "window": {"startTime": "2024-01-15T08:00:00Z", "endTime": "bogus"},
        "resolvedAt": None,
    }

    converted = convert_dates(payload, DateHandling.DATE)

    assert converted["createdAt"] == datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)
    assert converted["dueDate"] == datetime(2024, 2, 1)
    assert converted["subject"] == "2024-01-15T10:30:00Z"
    assert isinstance(converted["notes"][0]["updatedAt"], datetime)
    assert isinstance(converted["window"]["startTime"], datetime)
    assert converted["window"]["endTime"] == "bogus"
    assert converted["resolvedAt"] is None
    assert payload["createdAt"] == "2024-01-15T10:30:00Z"


def test_convert_dates_string_mode_returns_input() -> None:
    payload = {"createdAt": "2024-01-15T10:30:00Z"}

    assert convert_dates(payload, "string") is payload
