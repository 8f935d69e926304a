from datetime import date, datetime, timedelta

import pytest

from chestnut.dates import (
    dates_in_week,
    day_name,
    default_purchase_date,
    format_short_date,
    format_week_range,
    is_current_or_future_week,
    is_in_week,
    is_week_key,
    parse_date,
    shift_week,
    to_date_key,
    week_end_of,
    week_start_of,
)

SAMPLE_DAYS = [date(2023, 1, 1) + timedelta(days=n) for n in range(0, 800, 13)]


def test_week_start_of_midweek():
    assert week_start_of(date(2024, 1, 10)) == "2024-01-07"
    assert week_start_of("2024-01-13") == "2024-01-07"


def test_week_start_of_sunday_is_itself():
    assert week_start_of(date(2024, 1, 7)) == "2024-01-07"


def test_week_start_of_ignores_time_of_day():
    assert week_start_of(datetime(2024, 1, 13, 23, 59, 59)) == "2024-01-07"
    assert week_start_of(datetime(2024, 1, 7, 0, 0, 1)) == "2024-01-07"


def test_week_start_rolls_back_across_month_and_year():
    assert week_start_of(date(2024, 3, 2)) == "2024-02-25"
    assert week_start_of(date(2025, 1, 1)) == "2024-12-29"


def test_week_end_and_shift_cross_boundaries():
    assert week_end_of("2024-12-29") == "2025-01-04"
    assert shift_week("2024-02-25", 1) == "2024-03-03"
    assert shift_week("2024-01-07", -1) == "2023-12-31"
    assert shift_week("2024-01-07", 0) == "2024-01-07"


@pytest.mark.parametrize("d", SAMPLE_DAYS)
def test_week_start_is_sunday_and_idempotent(d):
    key = week_start_of(d)
    assert parse_date(key).weekday() == 6
    assert week_start_of(parse_date(key)) == key
    assert key <= to_date_key(d) <= week_end_of(key)


@pytest.mark.parametrize("n", [-60, -5, -1, 0, 1, 3, 52, 104])
def test_shift_week_round_trip(n):
    w = "2024-01-07"
    assert shift_week(shift_week(w, n), -n) == w


@pytest.mark.parametrize("d", SAMPLE_DAYS[::5])
def test_dates_in_week_shape(d):
    w = week_start_of(d)
    days = dates_in_week(w)
    assert len(days) == 7
    assert days[0] == w
    assert days[-1] == week_end_of(w)
    assert all(a < b for a, b in zip(days, days[1:]))


def test_dates_in_week_spans_new_year():
    assert dates_in_week("2024-12-29") == [
        "2024-12-29", "2024-12-30", "2024-12-31",
        "2025-01-01", "2025-01-02", "2025-01-03", "2025-01-04",
    ]


def test_is_current_or_future_week():
    today = date(2024, 1, 10)
    assert is_current_or_future_week("2024-01-07", today=today)
    assert is_current_or_future_week("2024-01-14", today=today)
    assert not is_current_or_future_week("2023-12-31", today=today)


def test_is_in_week():
    assert is_in_week("2024-01-13", "2024-01-07")
    assert not is_in_week("2024-01-14", "2024-01-07")


def test_default_purchase_date():
    assert default_purchase_date("2024-01-07", today=date(2024, 1, 10)) == "2024-01-10"
    assert default_purchase_date("2024-01-07", today=date(2024, 2, 1)) == "2024-01-07"


def test_display_labels():
    assert day_name("2024-01-07") == "Sunday"
    assert format_short_date("2024-01-07") == "Jan 7"
    assert format_week_range("2024-01-07") == "Jan 7 – Jan 13"


def test_parse_date_rejects_garbage():
    with pytest.raises(ValueError):
        parse_date("2024/01/07")


def test_is_week_key_only_accepts_canonical_sundays():
    assert is_week_key("2024-01-07")
    assert not is_week_key("2024-01-08")
    assert not is_week_key("2024-1-7")
    assert not is_week_key("not-a-date")
    assert not is_week_key(None)
