"""Inclusive date windows over sample rows."""

from __future__ import annotations

import math
from typing import Any, Callable, Iterable, NamedTuple, Optional, TypeVar

import pandas as pd

T = TypeVar("T")

SECONDS_PER_DAY = 86400


class DateWindow(NamedTuple):
    """Closed interval of timestamps, both ends inclusive."""

    start: pd.Timestamp
    end: pd.Timestamp

    @property
    def is_empty(self) -> bool:
        return self.end < self.start

    def contains(self, value: Any) -> bool:
        ts = as_timestamp(value, self.start.tz)
        return self.start <= ts <= self.end


def as_timestamp(value: Any, tz: Any = None) -> pd.Timestamp:
    """Coerce ``value`` to a Timestamp, localizing naive values into ``tz``."""
    ts = pd.Timestamp(value)
    if tz is None:
        return ts
    if ts.tzinfo is None:
        return ts.tz_localize(tz)
    return ts.tz_convert(tz)


def start_of_day(value: Any) -> pd.Timestamp:
    return pd.Timestamp(value).normalize()


def noon_of(value: Any) -> pd.Timestamp:
    return start_of_day(value).replace(hour=12)


def make_window(start: Any, end: Any, tz: Any = None) -> DateWindow:
    return DateWindow(as_timestamp(start, tz), as_timestamp(end, tz))


def total_date_range(dates: Iterable[Any]) -> Optional[DateWindow]:
    """Day-start of the first date through day-start of the last, or None."""
    values = list(dates)
    if not values:
        return None
    return DateWindow(start_of_day(values[0]), start_of_day(values[-1]))


def clamp_window(
    window: Optional[DateWindow],
    total: Optional[DateWindow],
) -> Optional[DateWindow]:
    """
    Restrict ``window`` to ``total``.

    A missing, inverted or non-overlapping window, or one with a missing
    bound, falls back to the whole total range.
    """
    if total is None:
        return None
    if window is None or pd.isna(window.start) or pd.isna(window.end) or window.is_empty:
        return total
    start = as_timestamp(window.start, total.start.tz)
    end = as_timestamp(window.end, total.start.tz)
    if end < total.start or start > total.end:
        return total
    return DateWindow(max(start, total.start), min(end, total.end))


def filter_by_window(
    rows: Iterable[T],
    window: Optional[DateWindow],
    date_of: Callable[[T], Any],
) -> list[T]:
    """Keep rows whose calendar day (start of day) lies inside ``window``."""
    if window is None or window.is_empty:
        return []
    return [row for row in rows if window.contains(start_of_day(date_of(row)))]


def filter_frame_by_window(
    df: pd.DataFrame,
    window: Optional[DateWindow],
    column: str = "sample_date",
) -> pd.DataFrame:
    """DataFrame flavour of :func:`filter_by_window`."""
    if window is None or window.is_empty or df.empty:
        return df.iloc[0:0].copy()
    days = df[column].dt.normalize()
    tz = days.dt.tz
    mask = days.between(as_timestamp(window.start, tz), as_timestamp(window.end, tz))
    return df.loc[mask].copy()


def number_of_days(window: Optional[DateWindow]) -> int:
    """Whole days spanned by the window, rounding partial days up."""
    if window is None or window.is_empty:
        return 0
    return int(math.ceil((window.end - window.start).total_seconds() / SECONDS_PER_DAY))


def calendar_days(window: Optional[DateWindow]) -> list[pd.Timestamp]:
    """Start of every calendar day from the window's first day to its last."""
    if window is None or window.is_empty:
        return []
    first = start_of_day(window.start)
    last = start_of_day(window.end)
    tz = first.tz
    # Step in wall-clock days so DST transitions neither skip nor repeat a day.
    if tz is None:
        return list(pd.date_range(first, last, freq="D"))
    days = pd.date_range(first.tz_localize(None), last.tz_localize(None), freq="D")
    return list(days.tz_localize(tz))
