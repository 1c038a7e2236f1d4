"""
Accuracy leaderboard selection.

The backend ranks ``AccuracySummary`` rows by MAE ascending; this module
trusts that ordering and never re-sorts.  A wrong order would otherwise be
hidden, so the precondition is checked on every call:

  - ``strict=False`` (default): a violation is logged at WARNING and the
    producer's order is still used as-is.
  - ``strict=True``: a violation raises ``LeaderboardOrderError``.

The best model is simply the first row.  ``is_high_confidence`` marks
sources whose MAE is under ``HIGH_CONFIDENCE_MAE_F`` degrees; it only drives
highlighting.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Union

from polytracker.errors import LeaderboardOrderError
from polytracker.models.accuracy import AccuracySummary

logger = logging.getLogger(__name__)

HIGH_CONFIDENCE_MAE_F = 2.0

SummaryInput = Union[AccuracySummary, Mapping[str, Any]]


@dataclass(frozen=True)
class BestModel:
    """The top-ranked source, as shown in the summary panel.

    Attributes:
        source:             Source identifier.
        accuracy_percent:   Share of forecasts within ±2°F.
        mae:                Mean absolute error in °F.
        is_high_confidence: ``mae < HIGH_CONFIDENCE_MAE_F``.
        summary:            The full summary row.
    """

    source: str
    accuracy_percent: float
    mae: float
    is_high_confidence: bool
    summary: AccuracySummary


def is_high_confidence(summary: AccuracySummary) -> bool:
    return summary.mae < HIGH_CONFIDENCE_MAE_F


def _coerce(summaries: Iterable[SummaryInput]) -> list[AccuracySummary]:
    return [
        s if isinstance(s, AccuracySummary) else AccuracySummary.model_validate(s)
        for s in summaries
    ]


def check_sorted_by_mae(summaries: Iterable[SummaryInput]) -> None:
    """Verify that ``summaries`` are sorted by MAE ascending.

    Raises:
        LeaderboardOrderError: At the first row whose MAE is below its predecessor's.
    """
    rows = _coerce(summaries)
    for i in range(1, len(rows)):
        prev, cur = rows[i - 1], rows[i]
        if cur.mae < prev.mae:
            raise LeaderboardOrderError(i, prev.source, cur.source, prev.mae, cur.mae)


def _enforce_order(rows: list[AccuracySummary], strict: bool) -> None:
    try:
        check_sorted_by_mae(rows)
    except LeaderboardOrderError as exc:
        if strict:
            raise
        logger.warning("%s Using producer order unchanged.", exc)


def as_table(summaries: Iterable[SummaryInput], *, strict: bool = False) -> list[AccuracySummary]:
    """Return the summaries in producer order, for the ranked table.

    Args:
        summaries: Accuracy rows (models or raw camelCase dicts).
        strict:    Raise instead of warn on an MAE order violation.

    Raises:
        LeaderboardOrderError: ``strict`` and the input is out of order.
        pydantic.ValidationError: A raw row fails validation.
    """
    rows = _coerce(summaries)
    _enforce_order(rows, strict)
    return rows


def select_best(summaries: Iterable[SummaryInput], *, strict: bool = False) -> Optional[BestModel]:
    """Return the best model (first row), or ``None`` when there are no summaries.

    An empty input is the normal state before any resolution exists, not an error.

    Raises:
        LeaderboardOrderError: ``strict`` and the input is out of order.
    """
    return best_of_table(as_table(summaries, strict=strict))


def best_of_table(table: list[AccuracySummary]) -> Optional[BestModel]:
    """Best model of a table already returned by ``as_table()`` (no re-check)."""
    if not table:
        logger.info("No accuracy summaries yet; no best model")
        return None

    top = table[0]
    return BestModel(
        source=top.source,
        accuracy_percent=top.accuracy_percent,
        mae=top.mae,
        is_high_confidence=is_high_confidence(top),
        summary=top,
    )
