"""Whole-dataset summary figures for the dashboard front page."""

from __future__ import annotations

from typing import Any

import pandas as pd

from parsing import DATE_COLUMN

# Half-width, in hours, of the slot around noon_hour counted as the noon sample.
NOON_SLOT_HOURS = 6


def _empty_summary() -> dict[str, Any]:
    return {
        "first_sample_date": None,
        "last_sample_date": None,
        "last_sample_was_noon": False,
        "number_of_days": 0,
        "total_users": 0,
        "total_active": 0,
        "total_inactive": 0,
        "total_admin_active_deleted": 0,
        "total_admin_inactive_deleted": 0,
        "total_admin_deleted": 0,
        "total_requests": 0,
        "total_approvals": 0,
        "total_rejections": 0,
        "average_signups_per_day": 0.0,
        "average_accepted_per_day": 0.0,
        "average_rejected_per_day": 0.0,
        "average_deletions_per_day": 0.0,
        "average_growth_per_day": 0.0,
    }


def is_noon_sample(timestamp: pd.Timestamp, noon_hour: int = 12) -> bool:
    """True if the local time of ``timestamp`` falls in the daily noon slot."""
    return noon_hour - NOON_SLOT_HOURS <= timestamp.hour < noon_hour + NOON_SLOT_HOURS


def calculate_summary(samples: pd.DataFrame, noon_hour: int = 12) -> dict[str, Any]:
    """
    Totals come from the last sample's counters; daily averages divide the
    cumulative totals by the calendar days between the first and last sample
    (at least one).
    """
    if samples.empty:
        return _empty_summary()

    first = samples.iloc[0]
    last = samples.iloc[-1]
    first_date = first[DATE_COLUMN]
    last_date = last[DATE_COLUMN]
    days = max(1, (last_date.date() - first_date.date()).days)

    total_users = int(last["total_users"])
    total_inactive = int(last["new_users"])
    deleted_active = int(last["deleted_active"])
    deleted_inactive = int(last["deleted_inactive"])
    total_deleted = deleted_active + deleted_inactive
    total_requests = int(last["total_requests"])
    total_approvals = int(last["accepted_requests"])
    total_rejections = int(last["rejected_requests"])

    average_accepted = float(total_approvals / days)
    average_deletions = float(total_deleted / days)

    return {
        "first_sample_date": first_date,
        "last_sample_date": last_date,
        "last_sample_was_noon": is_noon_sample(last_date, noon_hour),
        "number_of_days": days,
        "total_users": total_users,
        "total_active": total_users - total_inactive,
        "total_inactive": total_inactive,
        "total_admin_active_deleted": deleted_active,
        "total_admin_inactive_deleted": deleted_inactive,
        "total_admin_deleted": total_deleted,
        "total_requests": total_requests,
        "total_approvals": total_approvals,
        "total_rejections": total_rejections,
        "average_signups_per_day": float(total_requests / days),
        "average_accepted_per_day": average_accepted,
        "average_rejected_per_day": float(total_rejections / days),
        "average_deletions_per_day": average_deletions,
        "average_growth_per_day": average_accepted - average_deletions,
    }
