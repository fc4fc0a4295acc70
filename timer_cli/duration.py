"""
duration.py — turn "1h30m", "45m", "500ms" or a bare "50" into a Duration.

Grammar
- One or more tokens, each a non-negative integer followed by a unit suffix.
- Suffixes are tried longest-first: ms, h, m, s.
- Digits only means seconds.
- Whitespace between tokens is ignored; each unit may appear once.
"""

from __future__ import annotations

import dataclasses as dc
from enum import Enum

MAX_MILLIS = 2**64 - 1
MAX_DIGITS = len(str(MAX_MILLIS))


@dc.dataclass(frozen=True, order=True)
class Duration:
    ms: int = 0

    def __post_init__(self) -> None:
        if self.ms < 0:
            raise ValueError(f"Duration cannot be negative: {self.ms}ms")

    @property
    def seconds(self) -> float:
        return self.ms / 1000

    def __str__(self) -> str:
        if self.ms == 0:
            return "0s"
        hours, rest = divmod(self.ms, 3_600_000)
        minutes, rest = divmod(rest, 60_000)
        seconds, millis = divmod(rest, 1000)
        parts = [
            f"{value}{unit.suffix}"
            for value, unit in (
                (hours, Unit.HOURS),
                (minutes, Unit.MINUTES),
                (seconds, Unit.SECONDS),
                (millis, Unit.MILLISECONDS),
            )
            if value
        ]
        return " ".join(parts)


class Unit(Enum):
    HOURS = ("h", 3_600_000)
    MINUTES = ("m", 60_000)
    SECONDS = ("s", 1_000)
    MILLISECONDS = ("ms", 1)

    @property
    def suffix(self) -> str:
        return self.value[0]

    @property
    def millis(self) -> int:
        return self.value[1]


# Longest suffix first so "ms" never reads as minutes followed by "s".
SUFFIXES: tuple[tuple[str, Unit], ...] = tuple(
    sorted(((u.suffix, u) for u in Unit), key=lambda pair: -len(pair[0]))
)


# --------------------------- Errors ---------------------------


class DurationError(ValueError):
    """Base class for every way a duration string can be rejected."""

    rule = "malformed duration"

    def __init__(self, text: str, detail: str, position: int | None = None):
        self.text = text
        self.detail = detail
        self.position = position
        super().__init__(f"{self.rule}: {detail}")


class EmptyDuration(DurationError):
    rule = "empty duration"


class UnknownSuffix(DurationError):
    rule = "unknown unit"


class DuplicateUnit(DurationError):
    rule = "duplicate unit"


class DurationOverflow(DurationError):
    rule = "duration too large"


# --------------------------- Parsing ---------------------------


def match_suffix(text: str, pos: int) -> Unit | None:
    """Return the unit whose suffix starts at ``pos``, preferring longer suffixes."""
    for suffix, unit in SUFFIXES:
        if text.startswith(suffix, pos):
            return unit
    return None


def _magnitude(text: str, digits: str, start: int) -> int:
    # anything wider than MAX_MILLIS is out of range; int() also refuses
    # strings past the interpreter's digit limit
    significant = digits.lstrip("0") or "0"
    if len(significant) > MAX_DIGITS:
        raise DurationOverflow(text, f"{digits[:MAX_DIGITS]}... is out of range", start)
    magnitude = int(significant)
    if magnitude > MAX_MILLIS:
        raise DurationOverflow(text, f"{digits} is out of range", start)
    return magnitude


def tokenize(text: str) -> list[tuple[int, Unit]]:
    """Split a suffixed duration string into (magnitude, unit) tokens."""
    tokens: list[tuple[int, Unit]] = []
    pos = 0
    while pos < len(text):
        if text[pos].isspace():
            pos += 1
            continue

        start = pos
        while pos < len(text) and text[pos].isdecimal():
            pos += 1
        if pos == start:
            raise UnknownSuffix(
                text, f"expected a number at position {pos} in {text!r}", pos
            )
        magnitude = _magnitude(text, text[start:pos], start)

        unit = match_suffix(text, pos)
        if unit is None:
            if pos == len(text) or text[pos].isspace():
                raise UnknownSuffix(
                    text, f"{magnitude} at position {start} has no unit (h, m, s, ms)", pos
                )
            bad = text[pos:].split()[0].lstrip("0123456789") or text[pos]
            raise UnknownSuffix(
                text, f"{bad!r} at position {pos} is not one of h, m, s, ms", pos
            )
        tokens.append((magnitude, unit))
        pos += len(unit.suffix)
    return tokens


def parse(text: str) -> Duration:
    """Parse ``text`` into a :class:`Duration`.

    Raises a :class:`DurationError` subclass naming the rule that was broken.
    """
    stripped = text.strip()
    if not stripped:
        raise EmptyDuration(text, "no duration given")

    if stripped.isdecimal():
        total = _magnitude(text, stripped, 0) * Unit.SECONDS.millis
        if total > MAX_MILLIS:
            raise DurationOverflow(text, f"{stripped} seconds is out of range")
        return Duration(total)

    seen: set[Unit] = set()
    total = 0
    for magnitude, unit in tokenize(stripped):
        if unit in seen:
            raise DuplicateUnit(text, f"{unit.suffix!r} appears more than once in {text!r}")
        seen.add(unit)
        total += magnitude * unit.millis
        if total > MAX_MILLIS:
            raise DurationOverflow(text, f"{text!r} is out of range")
    return Duration(total)
