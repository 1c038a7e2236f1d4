"""
Forecast and resolution input models.

``ForecastPoint`` is one source's predicted daily high for a target date.
``ResolutionPoint`` is the observed daily high for a date (ground truth).

Both models are frozen: they are produced by the backend and only read here.
Payload constructors (``from_payload``) parse ``targetDate`` with
``parse_target_date`` so a malformed date surfaces as ``DateParseError``
rather than a generic validation error.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from polytracker.utils.time_utils import parse_target_date


def _require_mapping(raw: Any, kind: str) -> None:
    if not isinstance(raw, Mapping):
        raise ValueError(f"{kind} payload item must be an object, got {type(raw).__name__}.")


class ForecastPoint(BaseModel):
    """A single predicted daily high from one forecast source.

    Attributes:
        forecast_id:    Backend row id (``id`` in the payload), if provided.
        source:         Source identifier, e.g. ``"NWS"`` or ``"ECMWF"``.
        target_date:    Date the forecast is for (aware only if the payload had an offset).
        predicted_high: Predicted daily high in °F.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    forecast_id: Optional[int] = Field(default=None, alias="id")
    source: str
    target_date: datetime = Field(alias="targetDate")
    predicted_high: float = Field(alias="predictedHigh")

    @field_validator("source")
    @classmethod
    def validate_source(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("source must not be empty.")
        return v.strip()

    @classmethod
    def from_payload(cls, raw: Mapping[str, Any], source: Optional[str] = None) -> "ForecastPoint":
        """Build from a backend dict ``{id, source, targetDate, predictedHigh}``.

        ``source`` fills in the identifier when the payload item omits it
        (the backend groups forecasts by source already).

        Raises:
            ValueError: If ``raw`` is not a mapping.
            DateParseError: If ``targetDate`` is missing or malformed.
            pydantic.ValidationError: If ``predictedHigh`` is missing or not numeric.
        """
        _require_mapping(raw, "Forecast")
        return cls(
            forecast_id=raw.get("id"),
            source=raw.get("source") or source or "",
            target_date=parse_target_date(raw.get("targetDate"), "targetDate"),
            predicted_high=raw.get("predictedHigh"),
        )


class ResolutionPoint(BaseModel):
    """Observed daily high for a resolved date.

    Attributes:
        target_date: Date that was resolved (aware only if the payload had an offset).
        actual_high: Observed daily high in °F.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    target_date: datetime = Field(alias="targetDate")
    actual_high: float = Field(alias="actualHigh")

    @classmethod
    def from_payload(cls, raw: Mapping[str, Any]) -> "ResolutionPoint":
        """Build from a backend dict ``{targetDate, actualHigh}``.

        Raises:
            ValueError: If ``raw`` is not a mapping.
            DateParseError: If ``targetDate`` is missing or malformed.
        """
        _require_mapping(raw, "Resolution")
        return cls(
            target_date=parse_target_date(raw.get("targetDate"), "targetDate"),
            actual_high=raw.get("actualHigh"),
        )
