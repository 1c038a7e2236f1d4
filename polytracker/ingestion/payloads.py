"""
Backend payload parsing.

Payload shapes (see the backend's ``/weather/*`` endpoints)::

    forecasts   {"NWS": [{"id": 1, "source": "NWS",
                          "targetDate": "2024-11-21T00:00:00.000Z",
                          "predictedHigh": 52}, ...], ...}
    resolutions [{"targetDate": "2024-11-21", "actualHigh": 53}, ...]
    accuracy    [{"source": "NWS", "mae": 1.2, "rmse": 1.5,
                  "accuracyPercent": 80, "totalForecasts": 10,
                  "totalResolved": 5}, ...]

An offline snapshot file bundles all three under ``forecasts``,
``resolutions`` and ``accuracy`` keys; any of them may be omitted.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from polytracker.models.accuracy import AccuracySummary
from polytracker.models.weather import ForecastPoint, ResolutionPoint

logger = logging.getLogger(__name__)


@dataclass
class PayloadSnapshot:
    """Parsed contents of an offline payload file."""

    forecasts: dict[str, list[ForecastPoint]] = field(default_factory=dict)
    resolutions: list[ResolutionPoint] = field(default_factory=list)
    accuracy: list[AccuracySummary] = field(default_factory=list)


def parse_forecasts(data: Any) -> dict[str, list[ForecastPoint]]:
    """Parse the grouped ``/weather/forecasts`` payload.

    Raises:
        ValueError: If ``data`` is not a mapping of source → list.
        DateParseError: If any ``targetDate`` is malformed.
    """
    if not isinstance(data, dict):
        raise ValueError(f"Forecast payload must be an object keyed by source, got {type(data).__name__}.")

    grouped: dict[str, list[ForecastPoint]] = {}
    for source, items in data.items():
        if not isinstance(items, list):
            raise ValueError(f"Forecasts for source '{source}' must be a list.")
        grouped[source] = [ForecastPoint.from_payload(item, source=source) for item in items]
        logger.debug("Parsed %d forecast(s) for %s", len(grouped[source]), source)
    return grouped


def parse_resolutions(data: Any) -> list[ResolutionPoint]:
    """Parse the ``/weather/resolutions`` payload.

    Raises:
        ValueError: If ``data`` is not a list.
        DateParseError: If any ``targetDate`` is malformed.
    """
    if not isinstance(data, list):
        raise ValueError(f"Resolution payload must be a list, got {type(data).__name__}.")
    return [ResolutionPoint.from_payload(item) for item in data]


def parse_accuracy(data: Any) -> list[AccuracySummary]:
    """Parse the ``/weather/accuracy`` payload, preserving the backend's order."""
    if not isinstance(data, list):
        raise ValueError(f"Accuracy payload must be a list, got {type(data).__name__}.")
    return [AccuracySummary.model_validate(item) for item in data]


def load_payload_file(path: Path) -> PayloadSnapshot:
    """Load an offline JSON snapshot of the backend payloads.

    Args:
        path: JSON file with optional ``forecasts``, ``resolutions`` and
              ``accuracy`` keys.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: If the file is not a JSON object or a section is malformed.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Payload file not found: {path}")

    raw = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise ValueError("Payload file must contain a JSON object.")

    snapshot = PayloadSnapshot(
        forecasts=parse_forecasts(raw.get("forecasts", {})),
        resolutions=parse_resolutions(raw.get("resolutions", [])),
        accuracy=parse_accuracy(raw.get("accuracy", [])),
    )
    logger.info(
        "Loaded payload file %s: %d source(s), %d resolution(s), %d accuracy row(s)",
        path, len(snapshot.forecasts), len(snapshot.resolutions), len(snapshot.accuracy),
    )
    return snapshot
