"""Unit tests for clock and remaining-time formatting."""
from __future__ import annotations

from datetime import datetime

import pytest

from timer_cli.clock import ClockFormat, format_clock, format_remaining
from timer_cli.duration import Duration


@pytest.mark.parametrize(
    "moment, h24, h12",
    [
        (datetime(2024, 1, 1, 23, 59, 59), "23:59:59", "11:59:59 PM"),
        (datetime(2024, 1, 1, 0, 0, 0), "00:00:00", "12:00:00 AM"),
        (datetime(2024, 1, 1, 12, 0, 0), "12:00:00", "12:00:00 PM"),
        (datetime(2024, 1, 1, 9, 5, 7), "09:05:07", "09:05:07 AM"),
    ],
)
def test_same_instant_in_both_formats(moment, h24, h12):
    assert format_clock(moment, ClockFormat.H24) == h24
    assert format_clock(moment, ClockFormat.H12) == h12


def test_format_accepts_raw_value():
    moment = datetime(2024, 1, 1, 13, 0, 0)
    assert format_clock(moment, "12h") == "01:00:00 PM"
    assert format_clock(moment) == "13:00:00"


@pytest.mark.parametrize(
    "ms, text",
    [
        (0, "0.00s"),
        (420, "0.42s"),
        (1000, "00h:00m:01s"),
        (5_400_000, "01h:30m:00s"),
        (3_599_999, "00h:59m:59s"),
    ],
)
def test_format_remaining(ms, text):
    assert format_remaining(Duration(ms)) == text
