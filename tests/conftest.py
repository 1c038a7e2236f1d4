"""
Shared pytest fixtures for the PolyTracker test suite.

Provides:
  - Backend-shaped payload dicts (forecasts grouped by source, resolutions,
    accuracy rows) matching the ``/weather/*`` endpoints.
  - ``payload_file``: the same payloads written to a JSON snapshot.
  - ``config_file``: a minimal TOML config that logs to the console only.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest


@pytest.fixture
def forecast_payload() -> dict:
    """Three sources over Nov 21–23, with gaps (OWM has no Nov 23)."""
    return {
        "NWS": [
            {"id": 1, "source": "NWS", "targetDate": "2024-11-22T00:00:00.000Z", "predictedHigh": 50},
            {"id": 2, "source": "NWS", "targetDate": "2024-11-21T00:00:00.000Z", "predictedHigh": 52},
            {"id": 3, "source": "NWS", "targetDate": "2024-11-23T00:00:00.000Z", "predictedHigh": 47},
        ],
        "ECMWF": [
            {"id": 4, "source": "ECMWF", "targetDate": "2024-11-21T00:00:00.000Z", "predictedHigh": 54},
            {"id": 5, "source": "ECMWF", "targetDate": "2024-11-22T00:00:00.000Z", "predictedHigh": 49},
        ],
        "OWM": [
            {"id": 6, "source": "OWM", "targetDate": "2024-11-21T00:00:00.000Z", "predictedHigh": 51.5},
        ],
    }


@pytest.fixture
def resolution_payload() -> list[dict]:
    """Actuals for Nov 21 and Nov 25 (Nov 25 has no forecasts)."""
    return [
        {"targetDate": "2024-11-21T00:00:00.000Z", "actualHigh": 53},
        {"targetDate": "2024-11-25T00:00:00.000Z", "actualHigh": 48},
    ]


@pytest.fixture
def accuracy_payload() -> list[dict]:
    """Accuracy rows as the backend sends them: camelCase, MAE ascending."""
    return [
        {"source": "NWS", "mae": 1.2, "rmse": 1.5, "accuracyPercent": 80,
         "totalForecasts": 10, "totalResolved": 5},
        {"source": "ECMWF", "mae": 2.5, "rmse": 3.1, "accuracyPercent": 40,
         "totalForecasts": 10, "totalResolved": 5},
        {"source": "OWM", "mae": 3.75, "rmse": 4.2, "accuracyPercent": 20,
         "totalForecasts": 8, "totalResolved": 4},
    ]


@pytest.fixture
def payload_file(tmp_path: Path, forecast_payload, resolution_payload, accuracy_payload) -> Path:
    path = tmp_path / "snapshot.json"
    path.write_text(
        json.dumps({
            "forecasts": forecast_payload,
            "resolutions": resolution_payload,
            "accuracy": accuracy_payload,
        }),
        encoding="utf-8",
    )
    return path


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """Console-only logging so tests never write log files."""
    path = tmp_path / "config.toml"
    path.write_text(
        '[api]\n'
        'base_url = "http://backend.test"\n'
        'timeout_seconds = 5.0\n'
        '\n'
        '[collection]\n'
        'refresh_delay_seconds = 0.0\n'
        '\n'
        '[logging]\n'
        'level = "WARNING"\n'
        'log_file = ""\n',
        encoding="utf-8",
    )
    return path
