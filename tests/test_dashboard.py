"""
Tests for dashboard/app.py, run headless with Streamlit's AppTest.

The cached loaders are replaced with fakes so no backend is needed; the
app's own ``load_config()`` reads config/default.toml and writes its log
file under the temporary working directory.
"""

from __future__ import annotations

from pathlib import Path

import pytest

pytest.importorskip("streamlit")

from streamlit.testing.v1 import AppTest

from dashboard import data_loader
from polytracker.models.accuracy import AccuracySummary
from polytracker.models.weather import ForecastPoint
from polytracker.reporting.formatters import NO_ACCURACY_MSG, NO_FORECASTS_MSG

APP_PATH = Path(__file__).resolve().parent.parent / "dashboard" / "app.py"


@pytest.fixture(autouse=True)
def _isolated(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    for var in ("POLYTRACKER_API_URL", "POLYTRACKER_LOG_LEVEL", "POLYTRACKER_STRICT_ORDER", "POLYTRACKER_DEBUG"):
        monkeypatch.delenv(var, raising=False)


def _malformed_forecasts(*args, **kwargs):
    ForecastPoint.from_payload({"targetDate": "2024-11-21"}, source="NWS")


def _malformed_accuracy(*args, **kwargs):
    AccuracySummary.model_validate({"source": "NWS", "mae": -1.0})


def test_malformed_rows_show_errors_instead_of_crashing(monkeypatch) -> None:
    monkeypatch.setattr(data_loader, "load_comparison_frame", _malformed_forecasts)
    monkeypatch.setattr(data_loader, "load_accuracy", _malformed_accuracy)

    at = AppTest.from_file(str(APP_PATH), default_timeout=30).run()

    assert not at.exception
    assert len(at.error) == 2
    infos = [el.value for el in at.info]
    assert NO_FORECASTS_MSG in infos
    assert NO_ACCURACY_MSG in infos


def test_reserved_source_shows_error(monkeypatch) -> None:
    def _reserved(*args, **kwargs):
        raise ValueError("'Actual' is reserved for resolutions and cannot be a source.")

    monkeypatch.setattr(data_loader, "load_comparison_frame", _reserved)
    monkeypatch.setattr(data_loader, "load_accuracy", _malformed_accuracy)

    at = AppTest.from_file(str(APP_PATH), default_timeout=30).run()

    assert not at.exception
    assert any("reserved" in el.value for el in at.error)
