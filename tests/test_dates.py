# tests/test_dates.py

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from task_prioritizer.domain.dates import normalize_due_date, parse_instant, to_canonical


@pytest.mark.parametrize(
    "value",
    [
        "2024-12-01T00:00:00.000Z",
        "2024-02-29T23:59:59.999Z",
        "1999-12-31T08:30:15.120Z",
        "0999-01-01T00:00:00.000Z",
        "0001-01-01T00:00:00.000Z",
    ],
)
def test_canonical_values_round_trip(value: str) -> None:
    assert normalize_due_date(value) == value


def test_missing_fraction_and_zone_are_filled_in() -> None:
    assert normalize_due_date("2024-12-01T10:20:30") == "2024-12-01T10:20:30.000Z"
    assert normalize_due_date("2024-12-01T10:20:30Z") == "2024-12-01T10:20:30.000Z"


def test_long_fraction_is_truncated_to_millis() -> None:
    assert normalize_due_date("2024-12-01T10:20:30.123987Z") == "2024-12-01T10:20:30.123Z"
    assert normalize_due_date("2024-12-01T10:20:30.5") == "2024-12-01T10:20:30.500Z"


@pytest.mark.parametrize(
    "value",
    [
        "2024-12-01",
        "not-a-date",
        "",
        "2024-12-01 10:00:00",
        "2024-12-01T10:00:00+02:00",
        "24-12-01T10:00:00Z",
        "2024-12-01T10:00:00.Z",
        "2024-12-01T00:00:00.000Z\n",
        "\u0662\u0660\u0662\u0664-12-01T00:00:00Z",
        "2024-12-01T00:00:00.\uff11Z",
    ],
)
def test_strict_pattern_rejects_other_shapes(value: str) -> None:
    assert normalize_due_date(value) is None


@pytest.mark.parametrize(
    "value",
    ["2024-02-30T00:00:00Z", "2023-02-29T00:00:00Z", "2024-13-01T00:00:00Z", "2024-01-01T24:00:00Z"],
)
def test_unrepresentable_instants_are_rejected(value: str) -> None:
    assert normalize_due_date(value) is None


@pytest.mark.parametrize("value", [None, 20241201, 1.5, ["2024-12-01T00:00:00Z"]])
def test_non_strings_are_rejected(value) -> None:
    assert normalize_due_date(value) is None


def test_to_canonical_converts_offsets_to_utc() -> None:
    dt = datetime.fromisoformat("2024-06-01T02:00:00+02:00")
    assert to_canonical(dt) == "2024-06-01T00:00:00.000Z"


def test_parse_instant_is_lenient() -> None:
    assert parse_instant("2024-06-01") == datetime(2024, 6, 1, tzinfo=timezone.utc)
    assert parse_instant("2024-06-01T00:00:00.000Z") == datetime(2024, 6, 1, tzinfo=timezone.utc)
    assert parse_instant("2024-06-01T03:00:00+03:00") == datetime(2024, 6, 1, tzinfo=timezone.utc)


@pytest.mark.parametrize("value", ["", "   ", "yesterday", "2024-99-01"])
def test_parse_instant_rejects_garbage(value: str) -> None:
    assert parse_instant(value) is None


def test_early_years_keep_four_digits() -> None:
    assert to_canonical(datetime(500, 1, 2, tzinfo=timezone.utc)) == "0500-01-02T00:00:00.000Z"
    # fixed width keeps string order equal to time order
    assert normalize_due_date("0999-06-01T00:00:00Z") < normalize_due_date("2024-01-01T00:00:00Z")
