from __future__ import annotations

from datetime import datetime
from enum import Enum

from .duration import Duration


class ClockFormat(str, Enum):
    H24 = "24h"
    H12 = "12h"


def format_clock(moment: datetime, fmt: ClockFormat = ClockFormat.H24) -> str:
    """Format a wall-clock instant as "23:59:59" or "11:59:59 PM"."""
    if ClockFormat(fmt) is ClockFormat.H12:
        # %p follows the locale; the meridiem is always English here
        meridiem = "AM" if moment.hour < 12 else "PM"
        return f"{moment:%I:%M:%S} {meridiem}"
    return f"{moment:%H:%M:%S}"


def format_remaining(remaining: Duration) -> str:
    if remaining.ms < 1000:
        return f"{remaining.seconds:.2f}s"
    total_seconds = remaining.ms // 1000
    hours, rest = divmod(total_seconds, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{hours:02d}h:{minutes:02d}m:{seconds:02d}s"
