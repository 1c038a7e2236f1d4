"""
Per-source accuracy summary, as computed by the backend.

The backend returns camelCase keys (``accuracyPercent``, ``totalForecasts``
...); the model accepts both those and the snake_case field names.  Values
are validated for range but never recomputed here.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AccuracySummary(BaseModel):
    """Error metrics for one forecast source over its resolved forecasts.

    Attributes:
        source:           Source identifier.
        mae:              Mean absolute error in °F.
        rmse:             Root mean squared error in °F.
        accuracy_percent: Share of forecasts within ±2°F of actual, 0–100.
        total_forecasts:  Forecasts stored for this source.
        total_resolved:   Forecasts that have a matching resolution.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    source: str
    mae: float
    rmse: float
    accuracy_percent: float = Field(alias="accuracyPercent")
    total_forecasts: int = Field(alias="totalForecasts")
    total_resolved: int = Field(alias="totalResolved")

    @field_validator("mae", "rmse")
    @classmethod
    def validate_non_negative_error(cls, v: float) -> float:
        if v < 0:
            raise ValueError(f"error metrics must be non-negative, got {v}.")
        return v

    @field_validator("accuracy_percent")
    @classmethod
    def validate_percent(cls, v: float) -> float:
        if not 0.0 <= v <= 100.0:
            raise ValueError(f"accuracy_percent must be in [0, 100], got {v}.")
        return v

    @field_validator("total_forecasts", "total_resolved")
    @classmethod
    def validate_counts(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"forecast counts must be non-negative, got {v}.")
        return v
