"""
Date helpers for bucketing forecast timestamps into calendar days.

The backend sends ``targetDate`` as an ISO-8601 string that may be a bare
date (``"2024-11-21"``), a naive datetime, or a UTC/offset datetime
(``"2024-11-21T05:00:00.000Z"``).

Values that carry an offset are kept timezone-aware and may be converted
into a display zone.  Bare dates and naive datetimes stay naive: they name
a calendar day, not an instant, and are never shifted.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Optional
from zoneinfo import ZoneInfo

from polytracker.errors import DateParseError


def parse_target_date(value: Any, field: Optional[str] = "targetDate") -> datetime:
    """Parse a payload date into a ``datetime``.

    Args:
        value: ISO-8601 string, ``date`` or ``datetime``.
        field: Payload field name, used in the error message.

    Returns:
        Aware ``datetime`` when the input carried an offset, otherwise a
        naive one (midnight for a bare date).

    Raises:
        DateParseError: If ``value`` is missing, empty, or not ISO-8601.
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str) and value.strip():
        try:
            return datetime.fromisoformat(value.strip())
        except ValueError:
            raise DateParseError(value, field) from None
    raise DateParseError(value, field)


def as_instant(moment: datetime) -> datetime:
    """Aware copy of ``moment`` for ordering; naive values are read as UTC."""
    return moment if moment.tzinfo is not None else moment.replace(tzinfo=timezone.utc)


def calendar_day(moment: datetime, tz: Optional[ZoneInfo] = None) -> date:
    """Calendar date of ``moment``; only aware timestamps are converted to ``tz``."""
    if tz is not None and moment.tzinfo is not None:
        moment = moment.astimezone(tz)
    return moment.date()


def day_label(day: date) -> str:
    return f"{day:%b} {day.day}"


def calendar_day_label(moment: datetime, tz: Optional[ZoneInfo] = None) -> str:
    """Return the month + day label used as the merge key, e.g. ``"Nov 21"``.

    Args:
        moment: Timestamp to label.
        tz:     When given, aware timestamps are converted to this zone first.
                Naive timestamps keep the date they were written with.
    """
    return day_label(calendar_day(moment, tz))


def resolve_timezone(name: Optional[str]) -> Optional[ZoneInfo]:
    """Return a ``ZoneInfo`` for ``name``, or ``None`` when no zone is configured."""
    return ZoneInfo(name) if name else None
