"""
Dashboard data loader.

Every loader is wrapped in ``@st.cache_data`` so Streamlit only hits the
backend again after the TTL expires or the cache is cleared.  Cached values
must be picklable, so loaders return plain rows / pydantic models rather
than ``MergedRecord`` objects.

Fetch errors are not swallowed here; ``app.py`` catches them per tab and
shows the message next to the empty state.
"""

from __future__ import annotations

from datetime import date

import pandas as pd
import streamlit as st

from polytracker.engine.alignment import series_keys
from polytracker.ingestion.api_client import TrackerApiClient
from polytracker.pipeline.comparison import (
    LeaderboardResult,
    collect_and_refresh,
    load_comparison,
    load_leaderboard,
)
from polytracker.reporting.export import records_to_frame


@st.cache_data(ttl=60, show_spinner="Loading forecasts...")
def load_comparison_frame(
    base_url: str,
    timeout: float,
    display_timezone: str | None,
) -> pd.DataFrame:
    """Fetch + align; returns one row per day, one column per series."""
    with TrackerApiClient(base_url, timeout=timeout) as client:
        result = load_comparison(client, display_timezone)
    return records_to_frame(result.records)


@st.cache_data(ttl=60, show_spinner="Loading accuracy metrics...")
def load_accuracy(base_url: str, timeout: float, strict: bool) -> LeaderboardResult:
    with TrackerApiClient(base_url, timeout=timeout) as client:
        return load_leaderboard(client, strict=strict)


def trigger_collection(
    base_url: str,
    timeout: float,
    start_date: date,
    delay_seconds: float,
    display_timezone: str | None,
) -> list[str]:
    """Trigger collection, wait the fixed delay, and clear cached data.

    Returns the series keys seen after the refresh.
    """
    with TrackerApiClient(base_url, timeout=timeout) as client:
        result = collect_and_refresh(client, start_date, delay_seconds, display_timezone)
    st.cache_data.clear()
    return series_keys(result.records)
