"""Clock interface for dependency injection."""

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone

from .pydantic import Tick

logger = logging.getLogger(__name__)

Duration = float | timedelta


def to_seconds(interval: Duration) -> float:
    """Normalize a duration given in seconds or as a timedelta to float seconds."""
    if isinstance(interval, timedelta):
        return interval.total_seconds()
    if isinstance(interval, bool) or not isinstance(interval, int | float):
        raise TypeError(f"Expected seconds or timedelta, got {type(interval).__name__}")
    return float(interval)


class Timer(ABC):
    """Periodic timer interface.

    A timer delivers ticks into its own single-slot ``fired`` queue. A firing
    that finds the slot taken is dropped.
    """

    def __init__(self, interval: float):
        """Store timer configuration for later execution."""
        if interval <= 0:
            raise ValueError("non-positive interval for Timer")
        self.interval = interval
        self.fired: asyncio.Queue[Tick] = asyncio.Queue(maxsize=1)
        self._stopped = False

    @property
    def stopped(self) -> bool:
        """Whether the timer has been stopped."""
        return self._stopped

    def deliver(self, tick: Tick) -> bool:
        """Store a tick in the notification slot, returning whether it was kept."""
        if self._stopped:
            return False
        try:
            self.fired.put_nowait(tick)
        except asyncio.QueueFull:
            return False
        return True

    @abstractmethod
    def start(self) -> None:
        """Start the timer."""

    def stop(self) -> None:
        """Stop the timer. Stopping twice is harmless."""
        self._stopped = True


class Clock(ABC):
    """Clock interface for reading time and creating timers."""

    @abstractmethod
    def now(self) -> Tick:
        """Return the current time."""

    @abstractmethod
    def ticker(self, interval: float) -> Timer:
        """Create an unstarted timer that fires every ``interval`` seconds."""


class AsyncioTimer(Timer):
    """Timer implementation using a background asyncio task."""

    def __init__(self, interval: float, clock: Clock):
        """Bind the timer to the clock it reads timestamps from."""
        super().__init__(interval)
        self._clock = clock
        self._task: asyncio.Task[None] | None = None

    def start(self) -> None:
        """Start the timer."""
        if self._task is None and not self._stopped:
            self._task = asyncio.create_task(self._run(), name=f"tock-timer-{self.interval:g}s")

    def stop(self) -> None:
        """Stop the timer."""
        super().stop()
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def _run(self) -> None:
        loop = asyncio.get_running_loop()
        deadline = loop.time()
        while True:
            deadline += self.interval
            await asyncio.sleep(max(0.0, deadline - loop.time()))
            self.deliver(self._clock.now())

            # Skip deadlines we already missed rather than firing in a burst
            behind = loop.time() - deadline
            if behind >= self.interval:
                missed = int(behind // self.interval)
                logger.debug("Timer fell behind by %d period(s) of %gs", missed, self.interval)
                deadline += missed * self.interval


class AsyncioClock(Clock):
    """Real clock implementation using the running asyncio loop."""

    def now(self) -> Tick:
        """Return the current time."""
        return Tick(at=datetime.now(timezone.utc), monotonic=time.monotonic())

    def ticker(self, interval: float) -> Timer:
        """Create an unstarted timer that fires every ``interval`` seconds."""
        return AsyncioTimer(interval, self)
