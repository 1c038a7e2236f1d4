"""
Cross-source forecast alignment.

``align()`` merges N per-source forecast series and one resolution series into
a single list of ``MergedRecord`` rows, one per calendar day, ordered by date.

Algorithm
---------
1. Walk every source's points.  Each point's calendar day selects a day
   bucket labelled ``"Nov 21"``; the first point to open a bucket fixes the
   full date (with year) the row sorts by.  The point's value is stored
   under the source key.
2. Walk the resolutions.  A resolution only fills ``"Actual"`` on a bucket that
   already exists; resolution-only days never create rows.
3. Sort buckets by calendar date and freeze them into ``MergedRecord``.

Same-day duplicates within one source
-------------------------------------
When a source supplies two points for the same calendar day the point with
the later full timestamp wins (naive timestamps compare as UTC); on an
exact tie the later-iterated point wins.  Each collision is logged at
WARNING so upstream duplicates stay visible.

Malformed dates raise ``DateParseError`` immediately: a point that cannot be
placed on the timeline is never dropped or defaulted.
"""

from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass, field
from datetime import date, datetime
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional, Union

from polytracker.errors import EmptyInputWarning
from polytracker.models.weather import ForecastPoint, ResolutionPoint
from polytracker.utils.time_utils import as_instant, calendar_day, day_label, resolve_timezone

logger = logging.getLogger(__name__)

ACTUAL_KEY = "Actual"

ForecastInput = Union[ForecastPoint, Mapping[str, Any]]
ResolutionInput = Union[ResolutionPoint, Mapping[str, Any]]


@dataclass(frozen=True)
class MergedRecord:
    """One calendar day of the comparison table.

    ``values`` always holds every source key of the run plus ``"Actual"``;
    a series with no data for this day maps to ``None``.

    Attributes:
        date_label: Month + day label, e.g. ``"Nov 21"``.
        values:     Read-only mapping of series key → predicted/actual high.
    """

    date_label: str
    values: Mapping[str, Optional[float]]

    def value(self, key: str) -> Optional[float]:
        return self.values.get(key)

    @property
    def actual(self) -> Optional[float]:
        return self.values.get(ACTUAL_KEY)

    def as_row(self) -> dict[str, Any]:
        """Chart row: ``{"date": label, <series>: value, ...}`` without missing series."""
        row: dict[str, Any] = {"date": self.date_label}
        row.update({k: v for k, v in self.values.items() if v is not None})
        return row


@dataclass
class _DayBucket:
    day: date
    forecasts: dict[str, float] = field(default_factory=dict)
    stamps: dict[str, datetime] = field(default_factory=dict)
    actual: Optional[float] = None

    def put_forecast(self, source: str, point: ForecastPoint, label: str) -> None:
        previous = self.stamps.get(source)
        if previous is not None:
            keep_new = as_instant(point.target_date) >= as_instant(previous)
            logger.warning(
                "Duplicate %s forecast for %s (%s vs %s); keeping %s",
                source, label, previous.isoformat(), point.target_date.isoformat(),
                "later" if keep_new else "existing",
                extra={"source": source, "date_label": label},
            )
            if not keep_new:
                return
        self.forecasts[source] = point.predicted_high
        self.stamps[source] = point.target_date

    def freeze(self, label: str, sources: list[str]) -> MergedRecord:
        values: dict[str, Optional[float]] = {s: self.forecasts.get(s) for s in sources}
        values[ACTUAL_KEY] = self.actual
        return MergedRecord(date_label=label, values=MappingProxyType(values))


def _as_forecast(item: ForecastInput, source: str) -> ForecastPoint:
    if isinstance(item, ForecastPoint):
        return item
    return ForecastPoint.from_payload(item, source=source)


def _as_resolution(item: ResolutionInput) -> ResolutionPoint:
    if isinstance(item, ResolutionPoint):
        return item
    return ResolutionPoint.from_payload(item)


def align(
    forecasts_by_source: Mapping[str, Iterable[ForecastInput]],
    resolutions: Iterable[ResolutionInput],
    *,
    display_timezone: Optional[str] = None,
) -> list[MergedRecord]:
    """Merge per-source forecasts and resolutions into date-ordered rows.

    Args:
        forecasts_by_source: Source identifier → forecast points (models or
                             raw backend dicts).  Points may be unsorted.
        resolutions:         Resolution points (models or raw dicts), any order.
        display_timezone:    IANA zone for choosing the calendar day of
                             aware timestamps.  ``None`` labels each point by
                             the date written in its timestamp.  Bare dates
                             and naive timestamps are never shifted.

    Returns:
        One ``MergedRecord`` per distinct calendar day seen in the forecasts,
        sorted ascending by the full date that first opened that day.

    Raises:
        DateParseError: If any forecast or resolution date is malformed.
        ValueError:     If a source is named ``"Actual"`` or a payload lacks
                        its numeric value.
    """
    tz = resolve_timezone(display_timezone)
    sources = list(forecasts_by_source.keys())
    if ACTUAL_KEY in sources:
        raise ValueError(f"'{ACTUAL_KEY}' is reserved for resolutions and cannot be a source.")

    days: dict[str, _DayBucket] = {}
    n_points = 0
    for source in sources:
        for item in forecasts_by_source[source]:
            point = _as_forecast(item, source)
            day = calendar_day(point.target_date, tz)
            label = day_label(day)
            bucket = days.get(label)
            if bucket is None:
                bucket = _DayBucket(day=day)
                days[label] = bucket
            bucket.put_forecast(source, point, label)
            n_points += 1

    n_resolutions = 0
    n_matched = 0
    for item in resolutions:
        resolution = _as_resolution(item)
        n_resolutions += 1
        label = day_label(calendar_day(resolution.target_date, tz))
        bucket = days.get(label)
        if bucket is None:
            logger.debug("Resolution for %s has no forecasts; dropped", label)
            continue
        if bucket.actual is not None:
            logger.warning("Multiple resolutions for %s; keeping the last one", label)
        bucket.actual = resolution.actual_high
        n_matched += 1

    if n_points == 0:
        warnings.warn("No forecast points to align.", EmptyInputWarning, stacklevel=2)
    elif n_resolutions == 0:
        warnings.warn(
            "No resolutions available; 'Actual' will be empty for every day.",
            EmptyInputWarning,
            stacklevel=2,
        )

    ordered = sorted(days.items(), key=lambda kv: kv[1].day)
    records = [bucket.freeze(label, sources) for label, bucket in ordered]

    logger.info(
        "Aligned %d forecast point(s) from %d source(s) into %d day(s); "
        "%d/%d resolution(s) matched",
        n_points, len(sources), len(records), n_matched, n_resolutions,
    )
    return records


def series_keys(records: list[MergedRecord]) -> list[str]:
    """Series keys of an aligned table: sources in input order, then ``"Actual"``."""
    if not records:
        return []
    return list(records[0].values.keys())
