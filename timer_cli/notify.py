"""Desktop notifications through plyer."""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

from plyer import notification

if TYPE_CHECKING:
    from .loop import TimerConfig

log = logging.getLogger(__name__)

APP_NAME = "timer"
TIMEOUT = 10


def start_message(config: TimerConfig) -> str:
    return f"{config.title} has started ({config.duration})."


def end_message(config: TimerConfig) -> str:
    return f"{config.title} is over!"


def desktop_notify(message: str) -> None:
    """Show ``message`` as a desktop notification.

    Errors from the platform backend (no D-Bus session, missing notifier on
    macOS, ...) are raised to the caller.
    """
    log.debug("notify (%s): %s", sys.platform, message)
    notification.notify(
        title="Timer",
        message=message,
        app_name=APP_NAME,
        timeout=TIMEOUT,
    )
