"""
Tests for polytracker/pipeline/comparison.py.

The client is a small in-memory stand-in recording call order; the real
HTTP client is covered in test_ingestion/test_api_client.py.
"""

from __future__ import annotations

from datetime import date

import pytest

from polytracker.errors import LeaderboardOrderError
from polytracker.ingestion.payloads import parse_accuracy, parse_forecasts, parse_resolutions
from polytracker.pipeline.comparison import (
    build_comparison,
    build_leaderboard,
    collect_and_refresh,
    load_comparison,
    load_leaderboard,
)


class _FakeClient:
    def __init__(self, forecasts, resolutions, accuracy) -> None:
        self._forecasts = forecasts
        self._resolutions = resolutions
        self._accuracy = accuracy
        self.calls: list[str] = []

    def fetch_forecasts(self):
        self.calls.append("forecasts")
        return self._forecasts

    def fetch_resolutions(self):
        self.calls.append("resolutions")
        return self._resolutions

    def fetch_accuracy(self):
        self.calls.append("accuracy")
        return self._accuracy

    def trigger_collection(self, start_date: date) -> None:
        self.calls.append(f"collect:{start_date.isoformat()}")


@pytest.fixture
def fake_client(forecast_payload, resolution_payload, accuracy_payload) -> _FakeClient:
    return _FakeClient(
        parse_forecasts(forecast_payload),
        parse_resolutions(resolution_payload),
        parse_accuracy(accuracy_payload),
    )


# ── Comparison ─────────────────────────────────────────────────────────────────

def test_load_comparison_fetches_both_then_aligns(fake_client) -> None:
    result = load_comparison(fake_client)
    assert fake_client.calls == ["forecasts", "resolutions"]
    assert [r.date_label for r in result.records] == ["Nov 21", "Nov 22", "Nov 23"]
    assert result.series == ["NWS", "ECMWF", "OWM", "Actual"]
    assert not result.is_empty


def test_build_comparison_empty() -> None:
    with pytest.warns(UserWarning):
        result = build_comparison({}, [])
    assert result.is_empty
    assert result.series == []


def test_collect_and_refresh_waits_fixed_delay(fake_client) -> None:
    slept: list[float] = []
    result = collect_and_refresh(fake_client, date(2024, 11, 21), 3.0, sleep=slept.append)
    assert slept == [3.0]
    assert fake_client.calls == ["collect:2024-11-21", "forecasts", "resolutions"]
    assert len(result.records) == 3


# ── Leaderboard ────────────────────────────────────────────────────────────────

def test_load_leaderboard(fake_client) -> None:
    result = load_leaderboard(fake_client)
    assert fake_client.calls == ["accuracy"]
    assert result.best is not None and result.best.source == "NWS"
    assert [s.source for s in result.table] == ["NWS", "ECMWF", "OWM"]


def test_build_leaderboard_empty() -> None:
    result = build_leaderboard([])
    assert result.best is None
    assert result.is_empty


def test_build_leaderboard_strict_unsorted(accuracy_payload) -> None:
    rows = parse_accuracy(list(reversed(accuracy_payload)))
    with pytest.raises(LeaderboardOrderError):
        build_leaderboard(rows, strict=True)


def test_build_leaderboard_lenient_unsorted_trusts_order(accuracy_payload) -> None:
    rows = parse_accuracy(list(reversed(accuracy_payload)))
    result = build_leaderboard(rows, strict=False)
    assert result.best.source == "OWM"
