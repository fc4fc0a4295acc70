"""Rich views for the countdown: the live frame and the closing panels."""

from __future__ import annotations

from typing import Optional

from rich import box
from rich.color import Color
from rich.console import Console, RenderableType
from rich.live import Live
from rich.panel import Panel
from rich.style import Style
from rich.table import Table
from rich.text import Text

from .clock import format_remaining
from .loop import TickSnapshot, TimerState

GRADIENT_START = (102, 63, 242)
GRADIENT_END = (245, 65, 204)
TRACK = (45, 45, 45)
GRADIENT_STEPS = 100

# panel border + padding on each side
_CHROME = 4


def _lerp(a: int, b: int, t: float) -> int:
    return int(a + (b - a) * t)


def gradient(steps: int = GRADIENT_STEPS) -> list[Color]:
    colors = []
    for i in range(steps):
        t = i / steps
        r, g, b = (_lerp(s, e, t) for s, e in zip(GRADIENT_START, GRADIENT_END))
        colors.append(Color.from_rgb(r, g, b))
    return colors


GRADIENT = gradient()


def progress_bar(fraction: float, width: int) -> Text:
    """A row of ``width`` cells, the first ``fraction`` of them gradient-filled."""
    bar = Text()
    if width <= 0:
        return bar
    filled = int(fraction * width)
    track = Style(bgcolor=Color.from_rgb(*TRACK))
    for i in range(width):
        if i < filled:
            color = GRADIENT[int(i / width * len(GRADIENT))]
            bar.append(" ", style=Style(bgcolor=color))
        else:
            bar.append(" ", style=track)
    return bar


def build_frame(snapshot: TickSnapshot, width: int = 80) -> Panel:
    """Render one snapshot. Same snapshot and width always give the same panel."""
    finished = snapshot.state is TimerState.FINISHED
    percent = f"{snapshot.percent}%"

    table = Table.grid(expand=True)
    table.add_column()
    table.add_column(justify="right")
    table.add_row(
        Text.from_markup(f"[dim]Started at:[/] {snapshot.started_at}"),
        Text.from_markup(f"[dim]Now:[/] {snapshot.wall_clock}"),
    )
    table.add_row(
        Text.from_markup(
            f"[dim]Time left:[/] [bold]{format_remaining(snapshot.remaining)}[/bold]"
        ),
        Text(f"{snapshot.elapsed} / {snapshot.total}", style="dim"),
    )
    bar_width = max(0, width - _CHROME - len("100%") - 1)
    table.add_row(
        progress_bar(snapshot.fraction_complete, bar_width),
        Text(percent, style="bold"),
    )

    return Panel(
        table,
        title=f"[bold]{snapshot.name or 'Timer'}[/bold]",
        border_style="green" if finished else "magenta",
        box=box.ROUNDED,
        width=width,
    )


def done_panel(name: Optional[str]) -> Panel:
    return Panel(
        Text.from_markup(
            f"🎉 [bold yellow]Time's up![/bold yellow]\n{name or 'Timer'} is over."
        ),
        title="⏰ Ding!",
        border_style="yellow",
        box=box.HEAVY,
    )


def cancelled_panel() -> Panel:
    return Panel(
        Text.from_markup("🛑 [bold red]Timer cancelled by user[/bold red]"),
        title="Cancelled",
        border_style="red",
        box=box.ROUNDED,
    )


class LiveRenderer:
    """Render capability backed by ``rich.live.Live``.

    Use as a context manager; call the instance with each snapshot.
    """

    def __init__(self, console: Console):
        self.console = console
        self._live = Live(
            Text(""),
            console=console,
            auto_refresh=False,
            transient=False,
        )

    def __enter__(self) -> LiveRenderer:
        self._live.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self._live.stop()

    def __call__(self, snapshot: TickSnapshot) -> None:
        frame: RenderableType = build_frame(snapshot, self.console.width)
        self._live.update(frame, refresh=True)
