"""Modular Streamlit page renderers."""

from __future__ import annotations

from typing import Any

import pandas as pd
import streamlit as st

from metric_guide import METRIC_GUIDE
from parsing import SNAPSHOT_COLUMNS, epoch_seconds
from series import Series

COLOR_BY_KEY = {
    "active": "#2e9e44",
    "new": "#2f6fd6",
    "accepted": "#2e9e44",
    "rejected": "#f08c1a",
    "inactive": "#2f6fd6",
    "average": "#2e9e44",
    "selected": "#d62f2f",
}


def _fmt_date(value: Any) -> str:
    return "-" if value is None else pd.Timestamp(value).strftime("%Y-%m-%d")


def _fmt_rate(value: float) -> str:
    return f"{value:,.2f}"


def render_summary(summary: dict[str, Any]) -> None:
    st.header("Summary")

    last_label = "Last sample" if summary["last_sample_was_noon"] else "Last sample (partial day)"
    rows = [
        [
            ("First sample", _fmt_date(summary["first_sample_date"])),
            (last_label, _fmt_date(summary["last_sample_date"])),
            ("Days", f"{int(summary['number_of_days']):,}"),
        ],
        [
            ("Total users", f"{summary['total_users']:,}"),
            ("Active", f"{summary['total_active']:,}"),
            ("Inactive", f"{summary['total_inactive']:,}"),
        ],
        [
            ("Admin deleted", f"{summary['total_admin_deleted']:,}"),
            ("Deleted active", f"{summary['total_admin_active_deleted']:,}"),
            ("Deleted inactive", f"{summary['total_admin_inactive_deleted']:,}"),
        ],
        [
            ("Signup requests", f"{summary['total_requests']:,}"),
            ("Approved", f"{summary['total_approvals']:,}"),
            ("Rejected", f"{summary['total_rejections']:,}"),
        ],
        [
            ("Avg signups / day", _fmt_rate(summary["average_signups_per_day"])),
            ("Avg approved / day", _fmt_rate(summary["average_accepted_per_day"])),
            ("Avg rejected / day", _fmt_rate(summary["average_rejected_per_day"])),
        ],
        [
            ("Avg deletions / day", _fmt_rate(summary["average_deletions_per_day"])),
            ("Avg growth / day", _fmt_rate(summary["average_growth_per_day"])),
            ("", ""),
        ],
    ]

    for row in rows:
        cols = st.columns(3)
        for idx, (label, value) in enumerate(row):
            if label:
                cols[idx].metric(label, value)


def render_series(series: Series, tick_count: int = 4) -> None:
    st.header(series.chart_name)

    frame = series.to_frame(windowed=True)
    if frame.empty:
        st.info("No samples in the selected window.")
        return

    labels = [label for label, _ in series.legend[:-1]]
    colors = [COLOR_BY_KEY.get(key, "#888888") for _, key in series.legend[:-1]]
    st.bar_chart(frame.set_index("Date")[labels], color=colors)

    ticks = series.y_axis_ticks(tick_count)
    dates = series.x_axis_ticks(tick_count)
    st.caption(
        "Gridlines: "
        + ", ".join(str(tick) for tick in ticks)
        + " | Dates: "
        + ", ".join(_fmt_date(date) for date in dates)
    )

    options = list(range(len(series.rows)))
    current = series.selected_index
    choice = st.selectbox(
        "Select a day",
        [None, *options],
        index=0 if current is None else current + 1,
        format_func=lambda idx: "None" if idx is None else _fmt_date(series.rows[idx].date),
        key=f"select_{series.kind.value}_{series.chart_name}",
    )
    if choice is None:
        series.deselect_all_rows()
    else:
        series.select_row(choice, True)
    st.markdown(f"**{series.selection_string.strip() or 'No day selected.'}**")

    legend = " ".join(
        f"<span style='color:{COLOR_BY_KEY.get(key, '#888888')}'>&#9632; {label}</span>"
        for label, key in series.legend
    )
    st.markdown(legend, unsafe_allow_html=True)


def render_data_explorer(samples: pd.DataFrame) -> None:
    st.header("Data Explorer")
    st.caption("Raw samples with derived per-period changes.")
    if samples.empty:
        st.info("No samples loaded.")
        return
    view = samples.copy()
    view["epoch"] = epoch_seconds(view["sample_date"])
    extra = [col for col in view.columns if col not in SNAPSHOT_COLUMNS and col != "epoch"]
    st.dataframe(view[[*SNAPSHOT_COLUMNS, "epoch", *extra]], use_container_width=True, hide_index=True)


def render_metric_guide() -> None:
    st.header("Metric Guide")
    st.caption("Definitions and formulas behind each figure.")
    st.dataframe(pd.DataFrame(METRIC_GUIDE), use_container_width=True, height=520)
