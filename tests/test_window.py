import pandas as pd

from window import (
    DateWindow,
    calendar_days,
    clamp_window,
    filter_by_window,
    filter_frame_by_window,
    make_window,
    number_of_days,
    total_date_range,
)


def _ts(text: str, tz: str = "UTC") -> pd.Timestamp:
    return pd.Timestamp(text, tz=tz)


def _dates() -> list[pd.Timestamp]:
    return [
        _ts("2024-10-15 00:00"),
        _ts("2024-10-15 12:00"),
        _ts("2024-10-16 12:00"),
        _ts("2024-10-17 12:00"),
        _ts("2024-10-18 12:00"),
    ]


def test_total_date_range_spans_first_to_last_day_start() -> None:
    total = total_date_range(_dates())

    assert total == DateWindow(_ts("2024-10-15"), _ts("2024-10-18"))
    assert total_date_range([]) is None


def test_filter_by_window_is_inclusive_on_calendar_days() -> None:
    window = make_window("2024-10-16", "2024-10-17", "UTC")

    out = filter_by_window(_dates(), window, lambda value: value)

    assert out == [_ts("2024-10-16 12:00"), _ts("2024-10-17 12:00")]


def test_filter_by_window_single_day_and_empty_window() -> None:
    single = make_window("2024-10-15", "2024-10-15", "UTC")
    inverted = make_window("2024-10-17", "2024-10-16", "UTC")

    assert len(filter_by_window(_dates(), single, lambda value: value)) == 2
    assert filter_by_window(_dates(), inverted, lambda value: value) == []
    assert filter_by_window(_dates(), None, lambda value: value) == []


def test_filter_frame_by_window_matches_row_filter() -> None:
    df = pd.DataFrame({"sample_date": _dates(), "value": range(5)})
    window = make_window("2024-10-15", "2024-10-16", "UTC")

    out = filter_frame_by_window(df, window)

    assert list(out["value"]) == [0, 1, 2]
    assert filter_frame_by_window(df, None).empty


def test_clamp_window_intersects_with_total_range() -> None:
    total = total_date_range(_dates())

    partial = clamp_window(make_window("2024-10-10", "2024-10-16", "UTC"), total)
    outside = clamp_window(make_window("2024-11-01", "2024-11-05", "UTC"), total)
    inverted = clamp_window(make_window("2024-10-17", "2024-10-16", "UTC"), total)

    assert partial == DateWindow(_ts("2024-10-15"), _ts("2024-10-16"))
    assert outside == total
    assert inverted == total
    assert clamp_window(None, total) == total
    assert clamp_window(partial, None) is None


def test_clamp_window_with_missing_bound_returns_total_range() -> None:
    total = total_date_range(_dates())

    assert clamp_window(DateWindow(pd.NaT, pd.NaT), total) == total
    assert clamp_window(DateWindow(_ts("2024-10-16"), pd.NaT), total) == total


def test_clamp_window_localizes_naive_bounds() -> None:
    total = total_date_range(_dates())

    out = clamp_window(DateWindow(pd.Timestamp("2024-10-16"), pd.Timestamp("2024-10-30")), total)

    assert out == DateWindow(_ts("2024-10-16"), _ts("2024-10-18"))


def test_number_of_days_rounds_partial_days_up() -> None:
    assert number_of_days(make_window("2024-10-15", "2024-10-18", "UTC")) == 3
    assert number_of_days(make_window("2024-10-15", "2024-10-15 06:00", "UTC")) == 1
    assert number_of_days(make_window("2024-10-15", "2024-10-15", "UTC")) == 0
    assert number_of_days(None) == 0


def test_calendar_days_lists_each_day_once() -> None:
    days = calendar_days(make_window("2024-10-15 08:00", "2024-10-17 20:00", "UTC"))

    assert days == [_ts("2024-10-15"), _ts("2024-10-16"), _ts("2024-10-17")]


def test_calendar_days_across_daylight_saving_change() -> None:
    tz = "America/New_York"
    window = make_window("2024-11-01", "2024-11-05", tz)

    days = calendar_days(window)

    assert len(days) == 5
    assert [day.day for day in days] == [1, 2, 3, 4, 5]
    assert all(day.hour == 0 for day in days)
