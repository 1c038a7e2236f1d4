"""Tests for polytracker.utils.time_utils."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from polytracker.errors import DateParseError
from polytracker.utils.time_utils import (
    as_instant,
    calendar_day,
    calendar_day_label,
    parse_target_date,
    resolve_timezone,
)


# ── parse_target_date ─────────────────────────────────────────────────────────


def test_parse_date_only_string_stays_naive() -> None:
    dt = parse_target_date("2024-11-21")
    assert dt == datetime(2024, 11, 21)
    assert dt.tzinfo is None


def test_parse_zulu_with_millis() -> None:
    dt = parse_target_date("2024-11-21T05:30:00.000Z")
    assert dt == datetime(2024, 11, 21, 5, 30, tzinfo=timezone.utc)


def test_parse_keeps_explicit_offset() -> None:
    dt = parse_target_date("2024-11-21T23:00:00-05:00")
    assert dt.utcoffset() == timedelta(hours=-5)


def test_parse_accepts_date_and_datetime_objects() -> None:
    assert parse_target_date(date(2024, 11, 21)) == datetime(2024, 11, 21)
    aware = datetime(2024, 11, 21, tzinfo=timezone.utc)
    assert parse_target_date(aware) is aware


@pytest.mark.parametrize("bad", [None, "", "   ", "Nov 21", "2024-13-01", 20241121])
def test_parse_rejects_malformed(bad) -> None:
    with pytest.raises(DateParseError):
        parse_target_date(bad)


def test_parse_error_names_field() -> None:
    with pytest.raises(DateParseError, match="targetDate"):
        parse_target_date("nope")


# ── calendar_day_label ────────────────────────────────────────────────────────


def test_label_format() -> None:
    assert calendar_day_label(datetime(2024, 11, 21, tzinfo=timezone.utc)) == "Nov 21"
    assert calendar_day_label(datetime(2024, 12, 1, tzinfo=timezone.utc)) == "Dec 1"


def test_label_ignores_time_of_day() -> None:
    morning = datetime(2024, 11, 21, 0, 1, tzinfo=timezone.utc)
    night = datetime(2024, 11, 21, 23, 59, tzinfo=timezone.utc)
    assert calendar_day_label(morning) == calendar_day_label(night)


def test_label_with_timezone_conversion() -> None:
    dt = datetime(2024, 11, 21, 3, tzinfo=timezone.utc)
    assert calendar_day_label(dt, ZoneInfo("America/New_York")) == "Nov 20"
    assert calendar_day_label(dt, ZoneInfo("Asia/Tokyo")) == "Nov 21"


def test_naive_moment_is_never_shifted() -> None:
    naive = datetime(2024, 11, 21)
    assert calendar_day_label(naive, ZoneInfo("America/New_York")) == "Nov 21"
    assert calendar_day(naive, ZoneInfo("Asia/Tokyo")) == date(2024, 11, 21)


def test_calendar_day_keeps_year() -> None:
    dt = datetime(2024, 12, 31, 23, tzinfo=timezone(timedelta(hours=-5)))
    assert calendar_day(dt) == date(2024, 12, 31)
    assert calendar_day(dt, ZoneInfo("UTC")) == date(2025, 1, 1)


def test_as_instant_reads_naive_as_utc() -> None:
    assert as_instant(datetime(2024, 11, 21, 5)) == datetime(2024, 11, 21, 5, tzinfo=timezone.utc)
    aware = datetime(2024, 11, 21, tzinfo=timezone(timedelta(hours=2)))
    assert as_instant(aware) is aware


def test_resolve_timezone() -> None:
    assert resolve_timezone(None) is None
    assert resolve_timezone("UTC") == ZoneInfo("UTC")
