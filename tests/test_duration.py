"""Unit tests for the duration parser."""
from __future__ import annotations

import pytest

from timer_cli.duration import (
    MAX_MILLIS,
    SUFFIXES,
    Duration,
    DurationError,
    DurationOverflow,
    DuplicateUnit,
    EmptyDuration,
    Unit,
    UnknownSuffix,
    match_suffix,
    parse,
)


@pytest.mark.parametrize("seconds", [0, 1, 50, 59, 3600, 86_400])
def test_bare_number_is_seconds(seconds):
    assert parse(str(seconds)) == Duration(seconds * 1000)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("1h30m", 5_400_000),
        ("45m", 2_700_000),
        ("500ms", 500),
        ("1h", 3_600_000),
        ("10s", 10_000),
        ("30m1h", 5_400_000),
        ("1h 30m", 5_400_000),
        ("  45m  ", 2_700_000),
        ("1m1ms", 60_001),
        ("2h3m4s5ms", 7_384_005),
    ],
)
def test_suffixed_durations(text, expected):
    assert parse(text).ms == expected


def test_suffix_table_tries_ms_first():
    """Longer suffixes are matched before their prefixes."""
    assert SUFFIXES[0] == ("ms", Unit.MILLISECONDS)
    assert match_suffix("5ms", 1) is Unit.MILLISECONDS
    assert match_suffix("5m", 1) is Unit.MINUTES
    assert match_suffix("5x", 1) is None


@pytest.mark.parametrize("text", ["", "   "])
def test_empty_input(text):
    with pytest.raises(EmptyDuration):
        parse(text)


@pytest.mark.parametrize("text", ["10x", "1h30", "h", "-5", "1.5h", "5 m", "1d"])
def test_unknown_suffix(text):
    with pytest.raises(UnknownSuffix):
        parse(text)


def test_unknown_suffix_reports_position():
    with pytest.raises(UnknownSuffix) as info:
        parse("10x")
    assert info.value.position == 2
    assert "'x'" in str(info.value)


@pytest.mark.parametrize("text", ["1h1h", "1m2s3m", "5ms 5ms"])
def test_duplicate_unit(text):
    with pytest.raises(DuplicateUnit):
        parse(text)


@pytest.mark.parametrize(
    "text",
    [
        "99999999999999999999",
        "99999999999999999999h",
        f"{MAX_MILLIS}ms1s",
        "9" * 5000,
        "1" + "0" * 5000 + "ms",
        "1h" + "9" * 5000 + "s",
    ],
)
def test_overflow(text):
    with pytest.raises(DurationOverflow):
        parse(text)


def test_max_millis_fits():
    assert parse(f"{MAX_MILLIS}ms").ms == MAX_MILLIS


def test_errors_are_value_errors_naming_the_rule():
    """Every failure kind shares a base class and says which rule broke."""
    rules = set()
    for text in ["", "10x", "1h1h", "99999999999999999999"]:
        with pytest.raises(DurationError) as info:
            parse(text)
        assert isinstance(info.value, ValueError)
        assert str(info.value).startswith(info.value.rule)
        rules.add(info.value.rule)
    assert len(rules) == 4


def test_duration_rejects_negative():
    with pytest.raises(ValueError):
        Duration(-1)


@pytest.mark.parametrize(
    "ms, text",
    [(0, "0s"), (500, "500ms"), (5_400_000, "1h 30m"), (61_001, "1m 1s 1ms")],
)
def test_duration_str(ms, text):
    assert str(Duration(ms)) == text


def test_duration_seconds_and_ordering():
    assert Duration(2000).seconds == 2.0
    assert Duration(1).seconds == 0.001
    assert Duration(1) < Duration(2)


def test_leading_zeros_do_not_count_towards_range():
    assert parse("0" * 5000 + "5") == Duration(5000)
    assert parse("0" * 5000 + "7ms") == Duration(7)
