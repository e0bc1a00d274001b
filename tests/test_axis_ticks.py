import pandas as pd

from axis_ticks import date_ticks, value_ticks
from window import make_window


def test_value_ticks_round_to_step_granularity() -> None:
    assert value_ticks(950) == [0, 400, 800, 1200]
    assert value_ticks(115) == [0, 50, 100, 150]
    assert value_ticks(50) == [0, 20, 40, 60]
    assert value_ticks(3) == [0, 2, 4, 6]


def test_value_ticks_cover_the_maximum() -> None:
    for max_value in (1, 4, 7, 19, 99, 101, 250, 399, 401, 5000):
        ticks = value_ticks(max_value)
        assert len(ticks) == 4
        assert ticks[0] == 0
        assert ticks[-1] >= max_value
        steps = {b - a for a, b in zip(ticks, ticks[1:])}
        assert len(steps) == 1


def test_value_ticks_honour_desired_count() -> None:
    assert value_ticks(950, desired_count=6) == [0, 200, 400, 600, 800, 1000]


def test_value_ticks_degenerate_inputs() -> None:
    assert value_ticks(0) == []
    assert value_ticks(-5) == []
    assert value_ticks(100, desired_count=1) == []


def test_date_ticks_ten_day_window() -> None:
    window = make_window("2024-10-01", "2024-10-10", "UTC")

    ticks = date_ticks(window)

    assert ticks == [
        pd.Timestamp("2024-10-01 12:00", tz="UTC"),
        pd.Timestamp("2024-10-05 12:00", tz="UTC"),
        pd.Timestamp("2024-10-10 12:00", tz="UTC"),
    ]


def test_date_ticks_drop_tick_next_to_last_day() -> None:
    window = make_window("2024-10-01", "2024-10-03", "UTC")

    ticks = date_ticks(window)

    assert ticks == [
        pd.Timestamp("2024-10-01 12:00", tz="UTC"),
        pd.Timestamp("2024-10-03 12:00", tz="UTC"),
    ]


def test_date_ticks_start_on_first_and_end_on_last_day() -> None:
    window = make_window("2024-09-01", "2024-10-15", "UTC")

    ticks = date_ticks(window)

    assert 2 <= len(ticks) <= 4
    assert ticks[0] == pd.Timestamp("2024-09-01 12:00", tz="UTC")
    assert ticks[-1] == pd.Timestamp("2024-10-15 12:00", tz="UTC")
    assert all(later - earlier > pd.Timedelta(days=1) for earlier, later in zip(ticks, ticks[1:]))


def test_date_ticks_two_day_window_keeps_last_day_only() -> None:
    window = make_window("2024-10-01", "2024-10-02", "UTC")

    assert date_ticks(window) == [pd.Timestamp("2024-10-02 12:00", tz="UTC")]


def test_date_ticks_degenerate_windows() -> None:
    assert date_ticks(make_window("2024-10-01", "2024-10-01", "UTC")) == []
    assert date_ticks(make_window("2024-10-05", "2024-10-01", "UTC")) == []
    assert date_ticks(None) == []
    assert date_ticks(make_window("2024-10-01", "2024-10-10", "UTC"), desired_count=1) == []
