"""
timer — a friendlier `sleep` with a live progress bar and desktop notifications.

Examples
  # 50 seconds (no unit means seconds)
  timer 50

  # 1 hour 30 minutes, named, 12-hour clock
  timer 1h30m -n "Deep work" -f 12h

  # no desktop notifications
  timer 45m --notify=false
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.text import Text

from . import __version__
from .clock import ClockFormat
from .duration import DurationError, parse
from .loop import CountdownTimer, TimerConfig
from .notify import desktop_notify
from .render import LiveRenderer, cancelled_panel, done_panel

log = logging.getLogger("timer_cli")

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
console = Console()
err_console = Console(stderr=True)


class Toggle(str, Enum):
    true = "true"
    false = "false"


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"timer {__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


# ---------- CLI ----------


@app.command()
def timer(
    duration: str = typer.Argument(
        ...,
        help=(
            "How long to wait: h (hours), m (minutes), s (seconds), ms (milliseconds). "
            "Units combine, e.g. 1h30m. No unit means seconds."
        ),
    ),
    name: Optional[str] = typer.Option(
        None, "--name", "-n", help="A name for the timer."
    ),
    notify: Toggle = typer.Option(
        Toggle.true,
        "--notify",
        envvar="TIMER_NOTIFY",
        case_sensitive=False,
        help="Send a notification when the timer begins and ends.",
    ),
    clock_format: ClockFormat = typer.Option(
        ClockFormat.H24,
        "--format",
        "-f",
        envvar="TIMER_FORMAT",
        case_sensitive=False,
        help="Clock format: 24h (23:59:59) or 12h (11:59:59 PM).",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-V",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
):
    """Wait for DURATION while showing a live progress bar."""
    _configure_logging(verbose)

    try:
        parsed = parse(duration)
    except DurationError as e:
        err_console.print(Text.assemble(("error: ", "bold red"), str(e)), soft_wrap=True)
        raise typer.Exit(code=1)

    config = TimerConfig(
        duration=parsed,
        name=name,
        notify_enabled=notify == Toggle.true,
        clock_format=clock_format,
    )
    log.debug("config: %s", config)

    try:
        with LiveRenderer(console) as render:
            asyncio.run(CountdownTimer(config, desktop_notify, render).run())
    except KeyboardInterrupt:
        console.print(cancelled_panel())
        raise typer.Exit(code=130)

    console.print(done_panel(config.name))


def main() -> None:
    app(prog_name="timer")


if __name__ == "__main__":
    main()
