"""Human-friendly axis break values for value and date axes."""

from __future__ import annotations

import math
from typing import Optional

import pandas as pd

from window import DateWindow, calendar_days, noon_of

# The largest threshold below the maximum value, divided by four, is the step
# granularity: 1, 2, 5, 25, 50 or 100.
VALUE_THRESHOLDS = (4, 8, 20, 100, 200, 400)


def _step_divisor(max_value: float) -> int:
    exceeded = [threshold for threshold in VALUE_THRESHOLDS if threshold < max_value]
    if not exceeded:
        return 1
    return max(1, exceeded[-1] // 4)


def value_ticks(max_value: float, desired_count: int = 4) -> list[int]:
    """
    Evenly spaced integer ticks starting at 0, padded to round steps.

    There are at most ``desired_count`` ticks; the last one may sit above
    ``max_value`` so the tallest bar is always covered.
    """
    if max_value <= 0 or desired_count <= 1:
        return []
    divisor = _step_divisor(max_value)
    raw_step = int(math.ceil(max_value / (desired_count - 1)))
    step = (raw_step // divisor + 1) * divisor
    return list(range(0, desired_count * step, step))


def date_ticks(window: Optional[DateWindow], desired_count: int = 4) -> list[pd.Timestamp]:
    """
    Up to ``desired_count`` dates at noon, always ending on the window's last day.

    Ticks are taken every ``ceil(days / (desired_count - 1))`` days from the
    first day; a tick closer than one day to the last one is dropped.
    """
    if desired_count <= 1 or window is None or window.is_empty:
        return []
    noons = [noon_of(day) for day in calendar_days(window)]
    if len(noons) < 2:
        return []

    last = noons[-1]
    divisor = int(math.ceil(len(noons) / max(1, desired_count - 1)))
    cutoff = last - pd.Timedelta(days=1)
    ticks = [noon for index, noon in enumerate(noons) if index % divisor == 0 and noon < cutoff]
    ticks.append(last)
    return ticks
