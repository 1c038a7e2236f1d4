"""
PolyTracker — Streamlit Dashboard
=================================

Optional local UI over the same pipeline the CLI uses.

Tabs
----
  1. Forecasts      — grouped bar chart of every source's predicted high
                      next to the observed high, one group per day.
  2. Model Accuracy — most accurate model plus the ranked MAE/RMSE table.

Usage
-----
    pip install -e ".[dashboard]"
    streamlit run dashboard/app.py
"""

from __future__ import annotations

import sys
from datetime import date
from pathlib import Path

# ── Ensure project root is importable ────────────────────────────────────────
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import streamlit as st

st.set_page_config(page_title="PolyTracker", layout="wide")

import pandas as pd
from pydantic import ValidationError

from dashboard.data_loader import load_accuracy, load_comparison_frame, trigger_collection
from polytracker.config import load_config
from polytracker.engine.leaderboard import is_high_confidence
from polytracker.errors import LeaderboardOrderError, TrackerApiError
from polytracker.reporting.formatters import NO_ACCURACY_MSG, NO_FORECASTS_MSG
from polytracker.utils.logging import configure_logging

config = load_config()
configure_logging(config.logging, debug=config.debug)
_API = config.api


# ── Sidebar ───────────────────────────────────────────────────────────────────

with st.sidebar:
    st.title("PolyTracker")
    st.caption(f"Backend: {_API.base_url}")
    st.divider()

    start_date = st.date_input("Collect forecasts from", value=date.today())
    if st.button("Fetch Forecast"):
        try:
            with st.spinner("Fetching..."):
                keys = trigger_collection(
                    _API.base_url,
                    _API.timeout_seconds,
                    start_date,
                    config.collection.refresh_delay_seconds,
                    config.alignment.display_timezone,
                )
            st.success(f"Refreshed: {', '.join(keys) or 'no series yet'}")
        except (TrackerApiError, ValidationError, ValueError) as exc:
            st.error(str(exc))

    if st.button("Clear cache"):
        st.cache_data.clear()
        st.rerun()


tab_fc, tab_acc = st.tabs(["Forecasts", "Model Accuracy"])


# ══════════════════════════════════════════════════════════════════════════════
# Tab 1: Forecasts
# ══════════════════════════════════════════════════════════════════════════════

with tab_fc:
    st.header("Temperature Forecast vs Actual")

    try:
        frame = load_comparison_frame(
            _API.base_url, _API.timeout_seconds, config.alignment.display_timezone
        )
    except (TrackerApiError, ValidationError, ValueError) as exc:
        st.error(str(exc))
        frame = None

    if frame is None or frame.empty:
        st.info(NO_FORECASTS_MSG)
    else:
        long = (
            frame.reset_index()
            .melt(id_vars="date", var_name="series", value_name="high_f")
            .dropna(subset=["high_f"])
        )
        st.bar_chart(long, x="date", y="high_f", color="series", stack=False)
        st.dataframe(frame, use_container_width=True)


# ══════════════════════════════════════════════════════════════════════════════
# Tab 2: Model Accuracy
# ══════════════════════════════════════════════════════════════════════════════

with tab_acc:
    st.header("Model Accuracy Comparison")

    try:
        board = load_accuracy(
            _API.base_url, _API.timeout_seconds, config.leaderboard.strict_order
        )
    except (TrackerApiError, LeaderboardOrderError, ValidationError) as exc:
        st.error(str(exc))
        board = None

    if board is None or board.is_empty:
        st.info(NO_ACCURACY_MSG)
    else:
        best = board.best
        if best is not None:
            st.metric(
                "Most Accurate Model",
                best.source,
                f"{best.accuracy_percent:g}% within ±2°F",
            )

        rows = pd.DataFrame(
            [
                {
                    "Model": s.source,
                    "MAE (°F)": round(s.mae, 2),
                    "RMSE (°F)": round(s.rmse, 2),
                    "Accuracy %": s.accuracy_percent,
                    "Resolved / Forecasts": f"{s.total_resolved} / {s.total_forecasts}",
                    "MAE < 2°F": is_high_confidence(s),
                }
                for s in board.table
            ],
            index=pd.RangeIndex(1, len(board.table) + 1, name="Rank"),
        )
        st.dataframe(rows, use_container_width=True)
        st.caption(
            "MAE: average error in °F. RMSE: penalizes large misses. "
            "Accuracy: share of forecasts within ±2°F. Lower error is better."
        )
