from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from lesson_attendance.common.datetime_utils import (
    civil_day_bounds,
    fixed_offset,
    parse_iso_date,
    timestamp,
    to_civil_date,
    unix_seconds,
    week_monday,
)
from lesson_attendance.core.exceptions import ValidationError


@pytest.mark.parametrize(
    "day, monday",
    [
        (date(2024, 3, 4), date(2024, 3, 4)),
        (date(2024, 3, 8), date(2024, 3, 4)),
        (date(2024, 3, 9), date(2024, 3, 11)),
        (date(2024, 3, 10), date(2024, 3, 11)),
        (date(2024, 12, 29), date(2024, 12, 30)),
        (date(2025, 1, 2), date(2024, 12, 30)),
    ],
)
def test_week_monday(day, monday):
    assert week_monday(day) == monday


def test_day_bounds_span_one_civil_day():
    ist = fixed_offset(330)
    start, end = civil_day_bounds(date(2024, 3, 4), ist)

    assert start.astimezone(timezone.utc) == datetime(2024, 3, 3, 18, 30, tzinfo=timezone.utc)
    assert end - start == timedelta(days=1) - timedelta(milliseconds=1)


def test_to_civil_date_crosses_midnight_by_offset():
    instant = datetime(2024, 3, 4, 18, 30, tzinfo=timezone.utc)

    assert to_civil_date(instant, fixed_offset(330)) == date(2024, 3, 5)
    assert to_civil_date(instant, fixed_offset(0)) == date(2024, 3, 4)
    assert to_civil_date(instant.replace(tzinfo=None), fixed_offset(330)) == date(2024, 3, 5)


def test_unix_seconds_treats_naive_as_utc():
    assert unix_seconds(datetime(1970, 1, 1, 0, 15)) == 900


def test_timestamp_keeps_fractions():
    assert timestamp(datetime(1970, 1, 1, 0, 15, 0, 500000)) == 900.5


def test_day_bounds_on_the_last_representable_day():
    start, end = civil_day_bounds(date(9999, 12, 31), fixed_offset(330))

    assert end.isoformat(timespec="milliseconds") == "9999-12-31T23:59:59.999+05:30"
    assert end - start == timedelta(days=1) - timedelta(milliseconds=1)


@pytest.mark.parametrize("value", ["2024-3-4x", "", None, "04/03/2024"])
def test_parse_iso_date_rejects_bad_input(value):
    with pytest.raises(ValidationError):
        parse_iso_date(value)
