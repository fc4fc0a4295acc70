"""
loop.py — the countdown itself.

A CountdownTimer moves through STARTING -> RUNNING -> FINISHED (or CANCELLED),
computing every frame from one monotonic start timestamp. Frames go to the
render capability through a one-slot queue and notifications run in daemon
threads, so neither can hold up the next tick nor the exit of the process.
"""

from __future__ import annotations

import asyncio
import contextlib
import dataclasses as dc
import logging
import threading
import time
from datetime import datetime
from enum import Enum
from typing import Callable, Optional

from .clock import ClockFormat, format_clock
from .duration import Duration
from .notify import end_message, start_message

log = logging.getLogger(__name__)

TICK_INTERVAL = 0.05
NOTIFY_GRACE = 2.0


class TimerState(str, Enum):
    STARTING = "starting"
    RUNNING = "running"
    FINISHED = "finished"
    CANCELLED = "cancelled"


@dc.dataclass(frozen=True)
class TimerConfig:
    duration: Duration
    name: Optional[str] = None
    notify_enabled: bool = True
    clock_format: ClockFormat = ClockFormat.H24

    @property
    def title(self) -> str:
        return self.name or "Timer"


@dc.dataclass(frozen=True)
class TickSnapshot:
    elapsed: Duration
    remaining: Duration
    total: Duration
    fraction_complete: float
    wall_clock: str
    started_at: str
    name: Optional[str] = None
    state: TimerState = TimerState.RUNNING

    @property
    def percent(self) -> int:
        return int(self.fraction_complete * 100)


# --------------------------- Errors ---------------------------


class TimerRuntimeError(Exception):
    """A secondary subsystem failed; the countdown carries on regardless."""


class NotificationFailed(TimerRuntimeError):
    def __init__(self, message: str, cause: BaseException):
        self.message = message
        self.cause = cause
        super().__init__(f"could not deliver notification {message!r}: {cause!r}")


class RenderFailed(TimerRuntimeError):
    def __init__(self, snapshot: TickSnapshot, cause: BaseException):
        self.snapshot = snapshot
        self.cause = cause
        super().__init__(f"dropped frame at {snapshot.elapsed}: {cause!r}")


def _log_runtime_error(error: TimerRuntimeError) -> None:
    log.warning("%s", error)


# --------------------------- Snapshots ---------------------------


def take_snapshot(
    config: TimerConfig,
    elapsed_seconds: float,
    moment: datetime,
    started_at: str,
    state: TimerState = TimerState.RUNNING,
) -> TickSnapshot:
    """Build the frame for a given absolute elapsed time."""
    total = config.duration.ms
    elapsed = min(total, max(0, int(elapsed_seconds * 1000)))
    remaining = max(0, total - elapsed)
    # a zero-length timer is complete the moment it starts
    fraction = 1.0 if total == 0 else min(1.0, elapsed / total)
    return TickSnapshot(
        elapsed=Duration(elapsed),
        remaining=Duration(remaining),
        total=config.duration,
        fraction_complete=fraction,
        wall_clock=format_clock(moment, config.clock_format),
        started_at=started_at,
        name=config.name,
        state=state,
    )


def _settle(future: asyncio.Future, error: Optional[BaseException]) -> None:
    if not future.done():
        future.set_result(error)


def _post(
    loop: asyncio.AbstractEventLoop, future: asyncio.Future, error: Optional[BaseException]
) -> None:
    # the loop is gone once the grace period ran out and run() returned
    with contextlib.suppress(RuntimeError):
        loop.call_soon_threadsafe(_settle, future, error)


# --------------------------- Timer ---------------------------


class CountdownTimer:
    """Run one countdown to completion.

    ``notify(message)`` and ``render(snapshot)`` are plain callables; any
    exception they raise is handed to ``report`` as a NotificationFailed or
    RenderFailed and the countdown continues. ``clock`` must be monotonic and
    ``now`` supplies the wall-clock time shown in frames.
    """

    def __init__(
        self,
        config: TimerConfig,
        notify: Callable[[str], object],
        render: Callable[[TickSnapshot], object],
        *,
        interval: float = TICK_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
        now: Callable[[], datetime] = datetime.now,
        report: Optional[Callable[[TimerRuntimeError], object]] = None,
        notify_grace: float = NOTIFY_GRACE,
    ):
        self.config = config
        self._notify = notify
        self._render = render
        self._interval = interval
        self._clock = clock
        self._now = now
        self._report = report or _log_runtime_error
        self._notify_grace = notify_grace
        self._state = TimerState.STARTING
        self._cancel_event = asyncio.Event()
        self._pending: set[asyncio.Task] = set()
        self._last_delivery: Optional[asyncio.Task] = None

    @property
    def state(self) -> TimerState:
        return self._state

    def cancel(self) -> None:
        """Stop at the next tick boundary without finishing."""
        self._cancel_event.set()

    async def run(self) -> TimerState:
        if self._state is not TimerState.STARTING:
            raise RuntimeError(f"timer already {self._state.value}")

        frames: asyncio.Queue[TickSnapshot] = asyncio.Queue(maxsize=1)
        worker = asyncio.create_task(self._render_worker(frames))
        try:
            if self.config.notify_enabled:
                self._dispatch(start_message(self.config))
            start = self._clock()
            started_at = format_clock(self._now(), self.config.clock_format)
            log.debug("timer %r started for %s", self.config.title, self.config.duration)

            self._state = TimerState.RUNNING
            while True:
                snapshot = take_snapshot(
                    self.config, self._clock() - start, self._now(), started_at
                )
                self._offer(frames, snapshot)
                if snapshot.remaining.ms == 0:
                    break
                if await self._wait_tick():
                    self._state = TimerState.CANCELLED
                    log.debug("timer %r cancelled at %s", self.config.title, snapshot.elapsed)
                    return self._state

            self._state = TimerState.FINISHED
            if self.config.notify_enabled:
                self._dispatch(end_message(self.config))
            final = dc.replace(
                snapshot,
                elapsed=self.config.duration,
                remaining=Duration(0),
                fraction_complete=1.0,
                state=TimerState.FINISHED,
            )
            self._offer(frames, final)
            await frames.join()
            await self._drain_notifications()
            log.debug("timer %r finished", self.config.title)
            return self._state
        except asyncio.CancelledError:
            self._state = TimerState.CANCELLED
            raise
        finally:
            worker.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await worker

    async def _wait_tick(self) -> bool:
        """Sleep one interval; True if cancellation was requested meanwhile."""
        try:
            await asyncio.wait_for(self._cancel_event.wait(), timeout=self._interval)
        except asyncio.TimeoutError:
            return False
        return True

    # ---------- rendering ----------

    @staticmethod
    def _offer(frames: asyncio.Queue[TickSnapshot], snapshot: TickSnapshot) -> None:
        # latest frame wins; a stale one still waiting is dropped
        if frames.full():
            with contextlib.suppress(asyncio.QueueEmpty):
                frames.get_nowait()
                frames.task_done()
        frames.put_nowait(snapshot)

    async def _render_worker(self, frames: asyncio.Queue[TickSnapshot]) -> None:
        while True:
            snapshot = await frames.get()
            try:
                self._render(snapshot)
            except Exception as exc:
                self._report(RenderFailed(snapshot, exc))
            finally:
                frames.task_done()

    # ---------- notifications ----------

    def _dispatch(self, message: str) -> None:
        task = asyncio.create_task(self._deliver(message, self._last_delivery))
        self._last_delivery = task
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _deliver(self, message: str, previous: Optional[asyncio.Task]) -> None:
        # keep "started" ahead of "is over" on the desktop
        if previous is not None:
            await asyncio.wait({previous})

        loop = asyncio.get_running_loop()
        outcome: asyncio.Future[Optional[BaseException]] = loop.create_future()

        def send() -> None:
            error: Optional[BaseException] = None
            try:
                self._notify(message)
            except Exception as exc:
                error = exc
            _post(loop, outcome, error)

        # daemon, so a hung backend never holds the process open
        threading.Thread(target=send, name="timer-notify", daemon=True).start()
        error = await outcome
        if error is not None:
            self._report(NotificationFailed(message, error))

    async def _drain_notifications(self) -> None:
        if not self._pending:
            return
        _, pending = await asyncio.wait(set(self._pending), timeout=self._notify_grace)
        if pending:
            log.debug("%d notification(s) still in flight after %.1fs", len(pending), self._notify_grace)
