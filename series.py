"""Chart-ready series built from enriched samples."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional, Union

import pandas as pd

from axis_ticks import date_ticks, value_ticks
from parsing import DATE_COLUMN
from samples import daily_samples, enrich_samples
from window import (
    DateWindow,
    as_timestamp,
    clamp_window,
    filter_by_window,
    make_window,
    noon_of,
    number_of_days,
    total_date_range,
)

SELECTED_LABEL = "Selected"
SELECTED_COLOR_KEY = "selected"


class SeriesKind(Enum):
    USER_TOTALS = "user_totals"
    SIGNUP_TOTALS = "signup_totals"
    DELETION_TOTALS = "deletion_totals"
    ACTIVITY_PERCENTAGE = "activity_percentage"


class ActivityWindow(Enum):
    """Look-back period of the activity chart, in days (0 is the average mode)."""

    DAY = 1
    WEEK = 7
    MONTH = 30
    QUARTER = 90
    AVERAGE = 0

    @property
    def column(self) -> str:
        if self is ActivityWindow.AVERAGE:
            return "active_avg"
        return f"active_{self.value}"

    @property
    def chart_name(self) -> str:
        if self is ActivityWindow.AVERAGE:
            return "Average Days Since Last Activity"
        if self is ActivityWindow.DAY:
            return "Active In Last 24 Hours"
        return f"Active In Last {self.value} Days"

    @property
    def period_label(self) -> str:
        if self is ActivityWindow.DAY:
            return "in the last 24 hours"
        return f"in the last {self.value} days"


@dataclass(frozen=True)
class PlotComponent:
    label: str
    value: int
    color_key: str


@dataclass
class PlotRow:
    """
    One bar of a chart.

    ``components`` stack bottom to top. ``details`` carries the extra numbers
    the selection description needs; ``degenerate`` marks a value that could
    not be computed from the source row (it is plotted as 0).
    """

    date: pd.Timestamp
    sample_index: int
    components: tuple[PlotComponent, ...]
    details: dict[str, int] = field(default_factory=dict)
    is_selected: bool = False
    degenerate: bool = False

    @property
    def total(self) -> int:
        return sum(component.value for component in self.components)

    def value(self, label: str) -> int:
        for component in self.components:
            if component.label == label:
                return component.value
        raise KeyError(label)

    def color_for(self, component: PlotComponent) -> str:
        return SELECTED_COLOR_KEY if self.is_selected else component.color_key


def _percentage(part: int, whole: int) -> tuple[int, bool]:
    """Integer percentage truncated toward zero; degenerate when ``whole`` is not positive."""
    if whole <= 0:
        return 0, True
    scaled = abs(part) * 100 // whole
    return (scaled if part >= 0 else -scaled), False


def _user_total_rows(samples: pd.DataFrame) -> list[PlotRow]:
    rows = []
    for index, sample in daily_samples(samples).iterrows():
        active = int(sample["active_users"])
        new = int(sample["new_users"])
        rows.append(
            PlotRow(
                date=sample[DATE_COLUMN],
                sample_index=int(index),
                components=(
                    PlotComponent("Active", active, "active"),
                    PlotComponent("New", new, "new"),
                ),
                details={"total": int(sample["total_users"])},
            )
        )
    return rows


def _signup_rows(samples: pd.DataFrame) -> list[PlotRow]:
    return [
        PlotRow(
            date=sample[DATE_COLUMN],
            sample_index=int(index),
            components=(
                PlotComponent("Accepted", int(sample["new_accepted_requests"]), "accepted"),
                PlotComponent("Rejected", int(sample["new_rejected_requests"]), "rejected"),
            ),
            details={"requests": int(sample["new_requests"])},
        )
        for index, sample in samples.iterrows()
    ]


def _deletion_rows(samples: pd.DataFrame) -> list[PlotRow]:
    return [
        PlotRow(
            date=sample[DATE_COLUMN],
            sample_index=int(index),
            components=(
                PlotComponent("Active", int(sample["new_deleted_active"]), "active"),
                PlotComponent("Inactive", int(sample["new_deleted_inactive"]), "inactive"),
            ),
            details={"self_deleted": int(sample["new_self_deleted_active"])},
        )
        for index, sample in samples.iterrows()
    ]


def _activity_rows(samples: pd.DataFrame, activity_window: ActivityWindow) -> list[PlotRow]:
    rows = []
    for index, sample in daily_samples(samples).iterrows():
        count = int(sample[activity_window.column])
        active_users = int(sample["active_users"])
        if activity_window is ActivityWindow.AVERAGE:
            value, degenerate = count, False
            component = PlotComponent("Average Days", value, "average")
        else:
            value, degenerate = _percentage(count, active_users)
            component = PlotComponent("Active", value, "active")
        rows.append(
            PlotRow(
                date=sample[DATE_COLUMN],
                sample_index=int(index),
                components=(component,),
                details={"count": count, "active_users": active_users},
                degenerate=degenerate,
            )
        )
    return rows


def _describe_user_totals(row: PlotRow, day: str, activity_window: Optional[ActivityWindow]) -> str:
    active, new = row.value("Active"), row.value("New")
    return f"{day}: {active} active, {new} new ({row.details.get('total', active + new)} total)"


def _describe_signups(row: PlotRow, day: str, activity_window: Optional[ActivityWindow]) -> str:
    accepted, rejected = row.value("Accepted"), row.value("Rejected")
    return f"{day}: {accepted} accepted, {rejected} rejected ({accepted + rejected} total)"


def _describe_deletions(row: PlotRow, day: str, activity_window: Optional[ActivityWindow]) -> str:
    active, inactive = row.value("Active"), row.value("Inactive")
    return f"{day}: {active} active, {inactive} inactive deleted ({active + inactive} total)"


def _describe_activity(row: PlotRow, day: str, activity_window: Optional[ActivityWindow]) -> str:
    if activity_window is ActivityWindow.AVERAGE:
        return f"{day}: average last activity {row.details['count']} days"
    period = (activity_window or ActivityWindow.DAY).period_label
    return f"{day}: {row.details['count']} active {period} ({row.total}%)"


_DESCRIBERS: dict[SeriesKind, Callable[[PlotRow, str, Optional[ActivityWindow]], str]] = {
    SeriesKind.USER_TOTALS: _describe_user_totals,
    SeriesKind.SIGNUP_TOTALS: _describe_signups,
    SeriesKind.DELETION_TOTALS: _describe_deletions,
    SeriesKind.ACTIVITY_PERCENTAGE: _describe_activity,
}


class Series:
    """
    A named chart view with an adjustable date window and single-row selection.

    ``total_date_range`` is fixed when the series is built; the data window
    starts out equal to it and is always kept inside it.
    """

    def __init__(
        self,
        kind: SeriesKind,
        name: str,
        rows: list[PlotRow],
        activity_window: Optional[ActivityWindow] = None,
    ) -> None:
        self.kind = kind
        self.name = name
        self.rows = rows
        self.activity_window = activity_window
        self._total_date_range = total_date_range(row.date for row in rows)
        self._data_window_range = self._total_date_range

    def __repr__(self) -> str:
        return f"Series({self.kind.value!r}, {self.name!r}, rows={len(self.rows)})"

    @property
    def chart_name(self) -> str:
        return self.name

    @property
    def total_date_range(self) -> Optional[DateWindow]:
        return self._total_date_range

    @property
    def data_window_range(self) -> Optional[DateWindow]:
        return clamp_window(self._data_window_range, self._total_date_range)

    @data_window_range.setter
    def data_window_range(self, window: Any) -> None:
        self.set_data_window_range(window)

    def set_data_window_range(self, window: Any) -> None:
        """Set the visible window; empty or invalid windows reset to the full range."""
        if not window or any(pd.isna(bound) for bound in window):
            window = None
        elif not isinstance(window, DateWindow):
            start, end = window
            tz = self._total_date_range.start.tz if self._total_date_range else None
            window = make_window(start, end, tz)
        self._data_window_range = clamp_window(window, self._total_date_range)

    @property
    def is_maxed(self) -> bool:
        return self.data_window_range == self._total_date_range

    @property
    def number_of_days(self) -> int:
        return number_of_days(self.data_window_range)

    @property
    def windowed_rows(self) -> list[PlotRow]:
        return filter_by_window(self.rows, self.data_window_range, lambda row: row.date)

    @property
    def max_y_value(self) -> int:
        return max((row.total for row in self.rows), default=0)

    @property
    def selected_index(self) -> Optional[int]:
        for index, row in enumerate(self.rows):
            if row.is_selected:
                return index
        return None

    @property
    def selected_row(self) -> Optional[PlotRow]:
        index = self.selected_index
        return None if index is None else self.rows[index]

    @property
    def legend(self) -> list[tuple[str, str]]:
        """Distinct component labels with their color keys, then the selection marker."""
        seen: dict[str, str] = {}
        for row in self.rows:
            for component in row.components:
                seen[component.label] = component.color_key
        return [*seen.items(), (SELECTED_LABEL, SELECTED_COLOR_KEY)]

    @property
    def selection_string(self) -> str:
        row = self.selected_row
        if row is None:
            return " "
        day = row.date.strftime("%Y-%m-%d")
        return _DESCRIBERS[self.kind](row, day, self.activity_window)

    def _resolve_index(self, target: Union[int, PlotRow]) -> Optional[int]:
        if isinstance(target, PlotRow):
            for index, row in enumerate(self.rows):
                if row.date == target.date:
                    return index
            return None
        index = int(target)
        if not 0 <= index < len(self.rows):
            raise IndexError(f"Row index {index} out of range for {len(self.rows)} rows")
        return index

    def select_row(self, target: Union[int, PlotRow], selected: bool = True) -> bool:
        """
        Set one row's selection state and return its previous state.

        Every other row is deselected first. A row instance that is not part
        of this series is ignored and reported as not previously selected.
        """
        index = self._resolve_index(target)
        if index is None:
            return False
        previous = self.rows[index].is_selected
        self.deselect_all_rows()
        self.rows[index].is_selected = selected
        return previous

    def deselect_all_rows(self) -> None:
        for row in self.rows:
            row.is_selected = False

    def nearest_to(self, when: Any) -> Optional[PlotRow]:
        """The row whose day is closest to ``when``'s day; earlier rows win ties."""
        if not self.rows:
            return None
        target = noon_of(as_timestamp(when, self.rows[0].date.tz))
        best = self.rows[0]
        best_gap = abs(noon_of(best.date) - target)
        for row in self.rows[1:]:
            gap = abs(noon_of(row.date) - target)
            if gap < best_gap:
                best, best_gap = row, gap
        return best

    def y_axis_ticks(self, count: int = 4) -> list[int]:
        return value_ticks(self.max_y_value, count)

    def x_axis_ticks(self, count: int = 4) -> list[pd.Timestamp]:
        return date_ticks(self.data_window_range, count)

    def to_frame(self, windowed: bool = True) -> pd.DataFrame:
        """One row per bar: ``Date``, one column per component label, ``Selected``."""
        rows = self.windowed_rows if windowed else self.rows
        labels = [label for label, _ in self.legend[:-1]]
        records = []
        for row in rows:
            record: dict[str, Any] = {"Date": row.date}
            for component in row.components:
                record[component.label] = component.value
            record["Selected"] = row.is_selected
            records.append(record)
        return pd.DataFrame(records, columns=["Date", *labels, "Selected"])


USER_TOTALS_NAME = "User Totals"
SIGNUP_TOTALS_NAME = "Signup Totals"
DELETION_TOTALS_NAME = "Deletions"


def build_series(
    samples: pd.DataFrame,
    kind: SeriesKind,
    activity_window: Optional[ActivityWindow] = None,
) -> Series:
    """Build one chart view; raw snapshot frames are enriched first."""
    if "active_users" not in samples.columns:
        samples = enrich_samples(samples)

    if kind is SeriesKind.USER_TOTALS:
        return Series(kind, USER_TOTALS_NAME, _user_total_rows(samples))
    if kind is SeriesKind.SIGNUP_TOTALS:
        return Series(kind, SIGNUP_TOTALS_NAME, _signup_rows(samples))
    if kind is SeriesKind.DELETION_TOTALS:
        return Series(kind, DELETION_TOTALS_NAME, _deletion_rows(samples))
    if kind is SeriesKind.ACTIVITY_PERCENTAGE:
        if not isinstance(activity_window, ActivityWindow):
            raise ValueError(f"Unsupported activity window: {activity_window}")
        return Series(
            kind,
            activity_window.chart_name,
            _activity_rows(samples, activity_window),
            activity_window=activity_window,
        )
    raise ValueError(f"Unsupported series kind: {kind}")


def build_all_series(samples: pd.DataFrame) -> dict[str, Series]:
    """Every chart view, keyed by a stable identifier."""
    if "active_users" not in samples.columns:
        samples = enrich_samples(samples)
    out = {
        SeriesKind.USER_TOTALS.value: build_series(samples, SeriesKind.USER_TOTALS),
        SeriesKind.SIGNUP_TOTALS.value: build_series(samples, SeriesKind.SIGNUP_TOTALS),
        SeriesKind.DELETION_TOTALS.value: build_series(samples, SeriesKind.DELETION_TOTALS),
    }
    for activity_window in ActivityWindow:
        out[activity_window.column] = build_series(
            samples, SeriesKind.ACTIVITY_PERCENTAGE, activity_window
        )
    return out
