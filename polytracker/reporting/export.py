"""
Export helpers for aligned comparison tables.

``records_to_frame()`` is the chart adapter: one row per calendar day, one
column per series (sources, then ``Actual``), ``NaN`` where a series has no
value.  The CSV/JSON writers take plain ``list[dict]`` rows and return the
written ``Path``.
"""

from __future__ import annotations

import csv
import json
from pathlib import Path

import pandas as pd

from polytracker.engine.alignment import MergedRecord, series_keys


def records_to_frame(records: list[MergedRecord]) -> pd.DataFrame:
    """Convert aligned records to a DataFrame indexed by date label.

    Row order is preserved (chronological), so the frame can be passed
    straight to a bar or line chart.
    """
    keys = series_keys(records)
    frame = pd.DataFrame(
        [[rec.value(k) for k in keys] for rec in records],
        index=pd.Index([rec.date_label for rec in records], name="date"),
        columns=keys,
        dtype="float64",
    )
    return frame


def comparison_rows(records: list[MergedRecord]) -> list[dict]:
    """Flat export rows: ``date`` plus every series key (``None`` when missing)."""
    return [{"date": rec.date_label, **rec.values} for rec in records]


def export_to_csv(
    records: list[dict],
    path: Path,
    fieldnames: list[str] | None = None,
) -> Path:
    """Write ``records`` to a UTF-8 CSV file (parent dirs created if missing).

    ``None`` values are written as empty cells.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    if not records:
        path.write_text("", encoding="utf-8")
        return path
    cols = fieldnames or list(records[0].keys())
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=cols, extrasaction="ignore")
        writer.writeheader()
        writer.writerows(records)
    return path


def export_to_json(data: dict | list, path: Path) -> Path:
    """Write ``data`` as pretty-printed JSON (parent dirs created if missing)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, default=str), encoding="utf-8")
    return path
