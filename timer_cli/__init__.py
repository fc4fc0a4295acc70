"""A countdown timer for the terminal."""

from .duration import (
    Duration,
    DurationError,
    DuplicateUnit,
    DurationOverflow,
    EmptyDuration,
    UnknownSuffix,
    parse,
)
from .loop import (
    CountdownTimer,
    NotificationFailed,
    RenderFailed,
    TickSnapshot,
    TimerConfig,
    TimerRuntimeError,
    TimerState,
)

__version__ = "0.1.0"
