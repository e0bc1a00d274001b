import pandas as pd

from parsing import COUNT_COLUMNS, SNAPSHOT_COLUMNS, empty_snapshot, parse_snapshot
from samples import DERIVED_COLUMNS, compute_delta, daily_samples, enrich_samples

BASE = 1728950400  # 2024-10-15 00:00:00 UTC
HALF_DAY = 43200


def _line(ts: int, **values: int) -> str:
    return ",".join([str(ts)] + [str(values.get(col, 0)) for col in COUNT_COLUMNS])


def _raw_df() -> pd.DataFrame:
    lines = [
        _line(BASE, total_users=660, new_users=47, total_requests=10, accepted_requests=6,
              rejected_requests=2, never_set_location=30, deleted_active=1, deleted_inactive=2),
        _line(BASE + HALF_DAY, total_users=667, new_users=53, total_requests=14, accepted_requests=9,
              rejected_requests=3, never_set_location=32, deleted_active=1, deleted_inactive=4),
        _line(BASE + 2 * HALF_DAY, total_users=665, new_users=55, total_requests=15, accepted_requests=9,
              rejected_requests=4, never_set_location=31, deleted_active=2, deleted_inactive=4),
        _line(BASE + 3 * HALF_DAY, total_users=700, new_users=50, total_requests=20, accepted_requests=13,
              rejected_requests=5, never_set_location=33, deleted_active=2, deleted_inactive=5),
    ]
    return parse_snapshot("\n".join([",".join(SNAPSHOT_COLUMNS), *lines]))


def test_enrich_samples_first_row_uses_zero_baseline() -> None:
    out = enrich_samples(_raw_df())
    first = out.iloc[0]

    assert first["active_users"] == 613
    assert first["change_in_total_users"] == 660
    assert first["change_in_new_users"] == 47
    assert first["change_in_active_users"] == 613
    assert first["new_requests"] == 10
    assert first["new_accepted_requests"] == 6
    assert first["new_deleted_inactive"] == 2


def test_enrich_samples_compares_with_previous_row() -> None:
    out = enrich_samples(_raw_df())
    second = out.iloc[1]
    third = out.iloc[2]

    assert second["active_users"] == 614
    assert second["change_in_total_users"] == 7
    assert second["change_in_new_users"] == 6
    assert second["change_in_active_users"] == 1
    assert second["change_in_never_set_location"] == 2
    assert second["new_requests"] == 4
    assert second["new_accepted_requests"] == 3
    assert second["new_rejected_requests"] == 1
    assert second["new_deleted_active"] == 0
    assert second["new_deleted_inactive"] == 2
    assert third["change_in_total_users"] == -2
    assert third["change_in_active_users"] == -4


def test_self_deletions_are_never_negative() -> None:
    out = enrich_samples(_raw_df())

    # active 614 -> 610 with one admin deletion: clamped at zero.
    assert out.iloc[2]["new_self_deleted_active"] == 0
    # active 610 -> 650, no admin deletions of active users.
    assert out.iloc[3]["new_self_deleted_active"] == 40
    assert (out["new_self_deleted_active"] >= 0).all()


def test_active_users_invariant_holds_for_every_row() -> None:
    out = enrich_samples(_raw_df())

    assert (out["active_users"] == out["total_users"] - out["new_users"]).all()
    assert out["sample_date"].is_monotonic_increasing
    assert len(out) == len(_raw_df())


def test_compute_delta_matches_vectorised_enrichment() -> None:
    raw = _raw_df()
    out = enrich_samples(raw)

    previous = None
    for index, record in raw.iterrows():
        expected = compute_delta(record, previous)
        for col in DERIVED_COLUMNS:
            assert out.loc[index, col] == expected[col], col
        previous = record


def test_compute_delta_without_previous_equals_raw_values() -> None:
    current = {col: 0 for col in COUNT_COLUMNS}
    current.update(total_users=10, new_users=4, deleted_active=1, accepted_requests=3)

    out = compute_delta(current)

    assert out["active_users"] == 6
    assert out["change_in_active_users"] == 6
    assert out["new_accepted_requests"] == 3
    assert out["new_deleted_active"] == 1
    assert out["new_self_deleted_active"] == 5


def test_enrich_samples_is_repeatable() -> None:
    raw = _raw_df()

    pd.testing.assert_frame_equal(enrich_samples(raw), enrich_samples(raw))
    # The input frame is left untouched.
    assert list(raw.columns) == SNAPSHOT_COLUMNS


def test_enrich_samples_empty_input_has_derived_columns() -> None:
    out = enrich_samples(empty_snapshot())

    assert out.empty
    for col in DERIVED_COLUMNS:
        assert col in out.columns


def test_daily_samples_takes_later_sample_of_each_pair() -> None:
    out = daily_samples(enrich_samples(_raw_df()))

    assert list(out.index) == [1, 3]
    assert list(out["total_users"]) == [667, 700]


def test_daily_samples_by_calendar_day_handles_gaps() -> None:
    lines = [
        _line(BASE, total_users=1),
        _line(BASE + HALF_DAY, total_users=2),
        # Day two only has its midnight sample.
        _line(BASE + 2 * HALF_DAY, total_users=3),
        _line(BASE + 4 * HALF_DAY, total_users=4),
        _line(BASE + 5 * HALF_DAY, total_users=5),
    ]
    raw = parse_snapshot("\n".join([",".join(SNAPSHOT_COLUMNS), *lines]))

    out = daily_samples(raw, by_calendar_day=True)

    assert list(out["total_users"]) == [2, 3, 5]
