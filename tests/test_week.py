from datetime import date, datetime

import pytest

from util.week import (
    day_offset,
    format_start_time,
    parse_start_time,
    resolve_study_date,
    week_key,
    week_number,
    weekday_index,
    weekday_name,
)


def test_weekday_name_and_index():
    assert weekday_name(date(2024, 1, 15)) == "Monday"
    assert weekday_name(datetime(2024, 1, 14, 23, 59)) == "Sunday"
    assert weekday_index("monday") == 1
    assert weekday_index(" Sunday ") == 0
    assert weekday_index("Funday") is None


@pytest.mark.parametrize(
    "day, expected",
    [
        (date(2024, 1, 1), 1),
        (date(2024, 1, 6), 1),
        (date(2024, 1, 7), 2),
        (date(2024, 1, 15), 3),
        (date(2023, 1, 1), 1),
        (date(2023, 12, 31), 53),
    ],
)
def test_week_number_starts_on_sunday(day, expected):
    assert week_number(day) == expected


def test_week_number_ignores_time_of_day():
    assert week_number(datetime(2024, 1, 13, 23, 59)) == week_number(datetime(2024, 1, 13, 0, 0))
    assert week_key(datetime(2024, 1, 15, 18, 0)) == (3, 2024)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("18:00", (18, 0)),
        ("9:05", (9, 5)),
        ("00:00", (0, 0)),
        ("24:00", None),
        ("18:60", None),
        ("1800", None),
        ("", None),
        (None, None),
    ],
)
def test_parse_start_time(value, expected):
    assert parse_start_time(value) == expected


def test_format_start_time_pads():
    assert format_start_time(datetime(2024, 1, 15, 7, 5)) == "07:05"


def test_day_offset_same_day_policy():
    monday = date(2024, 1, 15)
    assert day_offset(1, monday, allow_same_day=True) == 0
    assert day_offset(1, monday, allow_same_day=False) == 7
    assert day_offset(2, monday, allow_same_day=False) == 1
    assert day_offset(0, monday, allow_same_day=True) == 6


def test_resolve_study_date():
    monday = datetime(2024, 1, 15, 9, 0)
    assert resolve_study_date("Wednesday", monday) == date(2024, 1, 17)
    assert resolve_study_date("monday", monday, allow_same_day=True) == date(2024, 1, 15)
    assert resolve_study_date("Monday", monday, allow_same_day=False) == date(2024, 1, 22)
    with pytest.raises(ValueError):
        resolve_study_date("Someday", monday)
