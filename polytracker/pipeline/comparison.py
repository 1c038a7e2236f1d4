"""
Fetch-then-compute flows used by the CLI and the dashboard.

``load_comparison()`` waits for both the forecast and the resolution fetch
to return before calling ``align()``; the engine never coordinates I/O.

``collect_and_refresh()`` mirrors the dashboard's "Fetch Forecast" button:
it POSTs a collection request, sleeps a fixed delay, then re-fetches.  The
delay is a timing assumption, not a completion signal; a slow collection
job simply shows up on the next refresh.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import date
from typing import Callable, Iterable, Mapping, Optional

from polytracker.engine.alignment import MergedRecord, align, series_keys
from polytracker.engine.leaderboard import BestModel, as_table, best_of_table
from polytracker.ingestion.api_client import TrackerApiClient
from polytracker.models.accuracy import AccuracySummary
from polytracker.models.weather import ForecastPoint, ResolutionPoint

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ComparisonResult:
    """Aligned forecast-vs-actual table plus its series keys."""

    records: list[MergedRecord]
    series: list[str]

    @property
    def is_empty(self) -> bool:
        return not self.records


@dataclass(frozen=True)
class LeaderboardResult:
    """Best model (or ``None``) plus the ranked table in producer order."""

    best: Optional[BestModel]
    table: list[AccuracySummary]

    @property
    def is_empty(self) -> bool:
        return not self.table


def build_comparison(
    forecasts: Mapping[str, Iterable[ForecastPoint]],
    resolutions: Iterable[ResolutionPoint],
    display_timezone: Optional[str] = None,
) -> ComparisonResult:
    records = align(forecasts, resolutions, display_timezone=display_timezone)
    return ComparisonResult(records=records, series=series_keys(records))


def build_leaderboard(summaries: Iterable[AccuracySummary], strict: bool = False) -> LeaderboardResult:
    table = as_table(summaries, strict=strict)
    return LeaderboardResult(best=best_of_table(table), table=table)


def load_comparison(
    client: TrackerApiClient,
    display_timezone: Optional[str] = None,
) -> ComparisonResult:
    """Fetch forecasts and resolutions, then align them."""
    forecasts = client.fetch_forecasts()
    resolutions = client.fetch_resolutions()
    return build_comparison(forecasts, resolutions, display_timezone)


def load_leaderboard(client: TrackerApiClient, strict: bool = False) -> LeaderboardResult:
    """Fetch accuracy summaries and select the best model."""
    return build_leaderboard(client.fetch_accuracy(), strict=strict)


def collect_and_refresh(
    client: TrackerApiClient,
    start_date: date,
    delay_seconds: float,
    display_timezone: Optional[str] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> ComparisonResult:
    """Trigger a collection job, wait ``delay_seconds``, then reload the comparison.

    Args:
        client:           Backend client.
        start_date:       First date the backend should collect forecasts for.
        delay_seconds:    Fixed wait before re-fetching.
        display_timezone: Passed through to ``align()``.
        sleep:            Injected for tests.
    """
    client.trigger_collection(start_date)
    logger.info(
        "Waiting %.1fs for collection to finish (fixed delay; job completion is not tracked)",
        delay_seconds,
    )
    sleep(delay_seconds)
    return load_comparison(client, display_timezone)
