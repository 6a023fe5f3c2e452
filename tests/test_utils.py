"""Test utilities and fake implementations."""

import asyncio
import time
from datetime import datetime, timedelta, timezone

from tock.channel import TickChannel
from tock.common.clock import Clock, Timer
from tock.common.pydantic import Tick

EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)


class FakeTimer(Timer):
    """Fake timer that fires when its clock is advanced."""

    def __init__(self, interval: float, clock: "FakeClock"):
        """Schedule the first firing one interval after creation."""
        super().__init__(interval)
        self._clock = clock
        self.started = False
        self.next_fire = clock.monotonic + interval

    def start(self) -> None:
        """Mark the timer as started."""
        self.started = True

    @property
    def live(self) -> bool:
        """Whether the timer is started and not stopped."""
        return self.started and not self.stopped


class FakeClock(Clock):
    """Fake clock that only moves when told to."""

    def __init__(self) -> None:
        """Start the clock at a fixed epoch."""
        self.monotonic = 0.0
        self.timers: list[FakeTimer] = []

    def now(self) -> Tick:
        """Return the fake current time."""
        return Tick(at=EPOCH + timedelta(seconds=self.monotonic), monotonic=self.monotonic)

    def ticker(self, interval: float) -> Timer:
        """Create a fake timer."""
        timer = FakeTimer(interval, self)
        self.timers.append(timer)
        return timer

    @property
    def live_timers(self) -> list[FakeTimer]:
        """Timers that are started and not stopped."""
        return [t for t in self.timers if t.live]

    def advance(self, seconds: float) -> None:
        """Move time forward, firing every live timer whose deadline passed."""
        self.monotonic += seconds
        for timer in self.live_timers:
            while timer.next_fire <= self.monotonic + 1e-9:
                timer.deliver(self.now())
                timer.next_fire += timer.interval


async def settle(rounds: int = 20) -> None:
    """Let other tasks on the loop run until they block."""
    for _ in range(rounds):
        await asyncio.sleep(0)


async def step(clock: FakeClock, seconds: float, times: int = 1) -> None:
    """Advance the clock ``times`` times, letting the ticker react after each."""
    for _ in range(times):
        clock.advance(seconds)
        await settle()


async def measure_ticks(channel: TickChannel, n: int) -> float:
    """Measure the time taken to receive ``n`` ticks."""
    start = time.monotonic()
    for _ in range(n):
        await channel.get()
    return time.monotonic() - start


async def collect_ticks(channel: TickChannel, n: int) -> list[Tick]:
    """Receive ``n`` ticks."""
    return [await channel.get() for _ in range(n)]


class BrokenTimerClock(FakeClock):
    """Fake clock that can create only its first timer."""

    def ticker(self, interval: float) -> Timer:
        """Create the first timer, then fail."""
        if self.timers:
            raise RuntimeError("timer unavailable")
        return super().ticker(interval)
