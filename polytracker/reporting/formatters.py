"""
ASCII terminal formatters for the CLI.

Formatters take engine outputs and return plain multi-line strings.  Empty
inputs render an explicit "no data" message instead of an empty table, so
"nothing collected yet" never looks like a crash.
"""

from __future__ import annotations

from typing import Optional

from polytracker.engine.alignment import MergedRecord, series_keys
from polytracker.engine.leaderboard import BestModel, is_high_confidence
from polytracker.models.accuracy import AccuracySummary

NO_FORECASTS_MSG = "No forecast data available. Try fetching data for a specific date."
NO_ACCURACY_MSG = (
    "No accuracy data available. Add resolutions for past dates to calculate accuracy."
)


def _fmt_temp(value: Optional[float]) -> str:
    return "-" if value is None else f"{value:.1f}"


def format_comparison_table(records: list[MergedRecord]) -> str:
    """Format aligned rows as one line per day, one column per series.

    Missing series values are shown as ``-``.
    """
    if not records:
        return f"  {NO_FORECASTS_MSG}"

    keys = series_keys(records)
    width = max(8, *(len(k) + 2 for k in keys))
    header = f"  {'Date':<8}" + "".join(f"{k:>{width}}" for k in keys)
    lines = [header, "  " + "-" * (len(header) - 2)]
    for rec in records:
        cells = "".join(f"{_fmt_temp(rec.value(k)):>{width}}" for k in keys)
        lines.append(f"  {rec.date_label:<8}{cells}")
    lines.append("")
    lines.append(f"  {len(records)} day(s), temperatures in °F")
    return "\n".join(lines)


def format_best_model(best: Optional[BestModel]) -> str:
    if best is None:
        return f"  {NO_ACCURACY_MSG}"
    return "\n".join([
        "  Most Accurate Model",
        f"    {best.source}",
        f"    {best.accuracy_percent:g}% of forecasts within ±2°F",
    ])


def format_leaderboard(best: Optional[BestModel], table: list[AccuracySummary]) -> str:
    """Format the best-model banner and the ranked accuracy table.

    Rows keep the producer's order.  The top row is marked with ``#1``;
    an MAE under the high-confidence threshold is flagged with ``*``.
    """
    if not table:
        return f"  {NO_ACCURACY_MSG}"

    lines = [format_best_model(best), ""]
    header = (
        f"  {'Rank':<5}{'Model':<16}{'MAE (°F)':>10}{'RMSE (°F)':>11}"
        f"{'Accuracy':>10}{'Forecasts':>13}"
    )
    lines += [header, "  " + "-" * (len(header) - 2)]
    for rank, row in enumerate(table, start=1):
        marker = "*" if is_high_confidence(row) else " "
        lines.append(
            f"  {'#' + str(rank):<5}{row.source:<16}"
            f"{row.mae:>9.2f}{marker}"
            f"{row.rmse:>11.2f}"
            f"{row.accuracy_percent:>9g}%"
            f"{f'{row.total_resolved} / {row.total_forecasts}':>13}"
        )
    lines.append("")
    lines.append("  * MAE under 2°F")
    lines.append("  MAE: mean absolute error. RMSE: penalizes large misses. Lower is better.")
    lines.append("  Accuracy: share of forecasts within ±2°F of the actual high.")
    return "\n".join(lines)
