from datetime import datetime

import pytest

from timerclock.core.time_format import format_clock, format_countdown, validate_timer_minutes


@pytest.mark.parametrize(
    "seconds,expected",
    [
        (0, "0:00"),
        (9, "0:09"),
        (59, "0:59"),
        (60, "1:00"),
        (3600, "60:00"),
        (12000, "200:00"),
        (-1, "-0:01"),
        (-59, "-0:59"),
        (-60, "-1:00"),
        (-61, "-1:01"),
        (-3605, "-60:05"),
    ],
)
def test_format_countdown(seconds, expected):
    assert format_countdown(seconds) == expected


def test_format_clock_is_zero_padded_24_hour():
    assert format_clock(datetime(2024, 1, 2, 9, 5, 3)) == "09:05:03"
    assert format_clock(datetime(2024, 1, 2, 23, 59, 59)) == "23:59:59"


@pytest.mark.parametrize("value,expected", [(1, 1), (200, 200), (45, 45), ("15", 15), (" 8 ", 8)])
def test_validate_timer_minutes_accepts_usable_durations(value, expected):
    assert validate_timer_minutes(value) == expected


@pytest.mark.parametrize("value", [0, 201, -1, "", "abc", "1.5", "-3", 1.0, True, False, None, "²"])
def test_validate_timer_minutes_rejects_everything_else(value):
    assert validate_timer_minutes(value) is None
