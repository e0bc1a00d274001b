"""Usage stats Streamlit entrypoint with modular page navigation."""

from __future__ import annotations

import datetime

import streamlit as st

from config import StatsConfig, configure_logging
from dashboard_views import (
    render_data_explorer,
    render_metric_guide,
    render_series,
    render_summary,
)
from dataset import Dataset
from window import make_window

st.set_page_config(page_title="Usage Stats", page_icon="\U0001f4ca", layout="wide")

PAGES = {
    "Summary": None,
    "User Totals": "user_totals",
    "Signups": "signup_totals",
    "Deletions": "deletion_totals",
    "Active 24h": "active_1",
    "Active 7d": "active_7",
    "Active 30d": "active_30",
    "Active 90d": "active_90",
    "Average activity": "active_avg",
}


def _get_dataset(config: StatsConfig) -> Dataset:
    if "dataset" not in st.session_state:
        dataset = Dataset(config)
        dataset.reload()
        st.session_state["dataset"] = dataset
    return st.session_state["dataset"]


def _reset_window(min_date: datetime.date, max_date: datetime.date) -> None:
    st.session_state["window_range"] = (min_date, max_date)


def _init_window(dataset: Dataset) -> tuple[datetime.date, datetime.date] | None:
    total = dataset.series["user_totals"].total_date_range
    if total is None:
        return None
    min_date = total.start.date()
    max_date = total.end.date()
    if min_date >= max_date:
        return min_date, max_date

    if "window_range" not in st.session_state:
        st.session_state["window_range"] = (min_date, max_date)
    else:
        start, end = st.session_state["window_range"]
        if start < min_date or end > max_date:
            st.session_state["window_range"] = (min_date, max_date)

    st.sidebar.button("Show full range", on_click=_reset_window, args=(min_date, max_date))
    st.sidebar.slider(
        "Visible days",
        min_value=min_date,
        max_value=max_date,
        key="window_range",
    )
    return st.session_state["window_range"]


def _apply_window(dataset: Dataset, window_days: tuple[datetime.date, datetime.date] | None) -> None:
    if window_days is None:
        return
    tz = dataset.config.timezone
    window = make_window(window_days[0], window_days[1], tz)
    for series in dataset.series.values():
        series.set_data_window_range(window)


def main() -> None:
    config = StatsConfig.from_env()
    configure_logging(config.log_level)

    st.title("Usage Stats")
    view = st.sidebar.radio("Navigate", [*PAGES, "Data Explorer", "Metric Guide"])

    dataset = _get_dataset(config)
    if st.sidebar.button("Reload data"):
        dataset.reload()
        st.session_state.pop("window_range", None)
    if st.sidebar.button("Clear data"):
        dataset.clear()

    st.sidebar.caption(f"Source: {config.source}")

    if view == "Metric Guide":
        render_metric_guide()
        return

    if not dataset.is_loaded:
        st.warning("No data available. Check the source and use 'Reload data' to try again.")
        return

    st.sidebar.success(f"Loaded {len(dataset.samples):,} samples.")
    _apply_window(dataset, _init_window(dataset))

    if view == "Summary":
        render_summary(dataset.summary)
    elif view == "Data Explorer":
        render_data_explorer(dataset.samples)
    else:
        render_series(dataset.series[PAGES[view]], tick_count=config.tick_count)


if __name__ == "__main__":
    main()
