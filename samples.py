"""Per-sample derived metrics (period-over-period deltas)."""

from __future__ import annotations

from typing import Any, Mapping, Optional

import pandas as pd

from parsing import COUNT_COLUMNS, DATE_COLUMN

# Derived column -> raw counter it is the change of.
DELTA_SOURCES = {
    "change_in_total_users": "total_users",
    "change_in_new_users": "new_users",
    "change_in_active_users": "active_users",
    "change_in_never_set_location": "never_set_location",
    "new_requests": "total_requests",
    "new_accepted_requests": "accepted_requests",
    "new_rejected_requests": "rejected_requests",
    "new_deleted_active": "deleted_active",
    "new_deleted_inactive": "deleted_inactive",
}

DERIVED_COLUMNS = ["active_users", *DELTA_SOURCES, "new_self_deleted_active"]

SAMPLE_COLUMNS = [DATE_COLUMN, *COUNT_COLUMNS, *DERIVED_COLUMNS]


def _value(record: Optional[Mapping[str, Any]], key: str) -> int:
    if record is None:
        return 0
    if key == "active_users":
        return _value(record, "total_users") - _value(record, "new_users")
    return int(record[key])


def compute_delta(
    current: Mapping[str, Any],
    previous: Optional[Mapping[str, Any]] = None,
) -> dict[str, int]:
    """
    Derive one sample's fields against the record taken just before it.

    ``previous`` is ``None`` for the first record, in which case every
    previous value counts as zero and the deltas equal the raw values.
    """
    out = {"active_users": _value(current, "active_users")}
    for derived, source in DELTA_SOURCES.items():
        out[derived] = _value(current, source) - _value(previous, source)
    out["new_self_deleted_active"] = max(
        0, out["change_in_active_users"] - out["new_deleted_active"]
    )
    return out


def enrich_samples(raw: pd.DataFrame) -> pd.DataFrame:
    """Add derived columns to every row; row ``i`` is compared with row ``i - 1``."""
    out = raw.reset_index(drop=True).copy()
    if out.empty:
        for col in DERIVED_COLUMNS:
            out[col] = pd.Series(dtype="int64")
        return out

    out["active_users"] = out["total_users"] - out["new_users"]
    for derived, source in DELTA_SOURCES.items():
        out[derived] = out[source] - out[source].shift(1, fill_value=0)
    out["new_self_deleted_active"] = (
        out["change_in_active_users"] - out["new_deleted_active"]
    ).clip(lower=0)
    return out


def daily_samples(samples: pd.DataFrame, by_calendar_day: bool = False) -> pd.DataFrame:
    """
    Reduce the twice-daily samples to one row per day.

    By default this takes every second row (indices 1, 3, 5, ...), the later
    sample of each pair. ``by_calendar_day`` instead keeps the last sample of
    each calendar day, which tolerates gaps and backfilled days.
    """
    if samples.empty:
        return samples.copy()
    if by_calendar_day:
        days = samples[DATE_COLUMN].dt.normalize()
        return samples.loc[~days.duplicated(keep="last")].copy()
    return samples.iloc[1::2].copy()
