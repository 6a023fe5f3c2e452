"""Ticker whose cadence can be stopped, resumed and adjusted at runtime.

A ``Ticker`` delivers ticks on a single channel, ``Ticker.ticks``, for its whole
life. Stopping it pauses deliveries without closing the channel, so a reader
sees "no tick yet" rather than "no more ticks". Resuming or adjusting it
restarts deliveries on the same channel.

All state changes travel as commands to one control loop task, which is the
only code that touches the interval and the underlying timer. Ticks are
published without blocking: if the reader has not taken the previous tick, the
new one is dropped.

Example::

    async with Ticker(0.25) as ticker:
        await ticker.stop()
        await ticker.adjust(0.05)
        async for tick in ticker.ticks:
            print(tick.at)
"""

import asyncio
import logging
from typing import Any, Self

from .channel import TickChannel
from .commands import Adjust, Close, Command, Resume, Stop
from .common.clock import AsyncioClock, Clock, Duration, Timer, to_seconds
from .common.pydantic import Tick
from .config import TickerConfig
from .errors import InvalidDurationError, TickerClosedError

logger = logging.getLogger(__name__)


class Ticker:
    """Periodic tick source with stop, resume and adjust controls."""

    def __init__(self, interval: Duration, *, clock: Clock | None = None):
        """Start ticking every ``interval`` seconds.

        Must be called from a running event loop. Raises ``ValueError`` if the
        interval is not positive.
        """
        seconds = to_seconds(interval)
        if seconds <= 0:
            raise ValueError("non-positive interval for Ticker")
        asyncio.get_running_loop()

        self._clock = clock or AsyncioClock()
        self._ticks = TickChannel()
        self._commands: asyncio.Queue[Command] = asyncio.Queue(maxsize=1)
        self._interval = seconds
        self._timer: Timer | None = None
        self._closing = False
        self._start_timer()
        self._task = asyncio.create_task(self._run(), name=f"tock-ticker-{id(self):x}")

    @classmethod
    def from_config(cls, config: TickerConfig, *, clock: Clock | None = None) -> Self:
        """Create a ticker from configuration."""
        return cls(config.interval, clock=clock)

    @property
    def ticks(self) -> TickChannel:
        """Channel on which ticks are delivered."""
        return self._ticks

    @property
    def interval(self) -> float:
        """Interval in seconds the control loop currently uses."""
        return self._interval

    @property
    def running(self) -> bool:
        """Whether a live timer is producing ticks."""
        return self._timer is not None

    @property
    def closed(self) -> bool:
        """Whether the ticker has been closed."""
        return self._closing or self._task.done()

    async def stop(self) -> None:
        """Stop the ticker.

        Ticks stop arriving once the control loop has processed the command.
        The tick channel is not closed.
        """
        await self._send(Stop())

    async def resume(self) -> None:
        """Resume a stopped ticker at its last interval."""
        await self._send(Resume())

    async def adjust(self, interval: Duration) -> None:
        """Change the tick interval, resuming the ticker if it is stopped.

        Raises ``InvalidDurationError`` for a non-positive interval; the ticker
        is left exactly as it was.
        """
        seconds = to_seconds(interval)
        if seconds <= 0:
            raise InvalidDurationError(seconds)
        await self._send(Adjust(interval=seconds))

    async def aclose(self) -> None:
        """Stop the timer, close the tick channel and end the control loop."""
        if not self._closing:
            self._closing = True
            if not self._task.done():
                delivered = False
                try:
                    delivered = await self._deliver(Close())
                finally:
                    # Without a Close in the queue the loop would never exit
                    if not delivered:
                        self._task.cancel()
        await asyncio.wait({self._task})
        if not self._task.cancelled():
            # Already logged by the control loop
            self._task.exception()

    async def __aenter__(self) -> Self:
        """Use the ticker as an async context manager."""
        return self

    async def __aexit__(self, exc_type: Any, exc_value: Any, traceback: Any) -> None:
        """Close the ticker."""
        await self.aclose()

    async def _send(self, command: Command) -> None:
        if self.closed:
            raise TickerClosedError("ticker is closed")
        if not await self._deliver(command):
            raise TickerClosedError("ticker closed before the command was delivered")

    async def _deliver(self, command: Command) -> bool:
        """Enqueue a command, giving up if the control loop ends first."""
        put = asyncio.ensure_future(self._commands.put(command))
        try:
            await asyncio.wait({put, self._task}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            delivered = put.done()
            if not delivered:
                put.cancel()
        return delivered

    async def _run(self) -> None:
        next_command = asyncio.ensure_future(self._commands.get())
        next_fire: asyncio.Future[Tick] | None = None
        try:
            while True:
                if next_fire is None and self._timer is not None:
                    next_fire = asyncio.ensure_future(self._timer.fired.get())
                waiting = {next_command} if next_fire is None else {next_command, next_fire}
                done, _ = await asyncio.wait(waiting, return_when=asyncio.FIRST_COMPLETED)

                if next_fire in done:
                    self._publish(next_fire.result())
                    next_fire = None

                if next_command in done:
                    # The pending read belongs to the timer the command replaces
                    if next_fire is not None:
                        next_fire.cancel()
                        next_fire = None
                    if not self._apply(next_command.result()):
                        return
                    next_command = asyncio.ensure_future(self._commands.get())
        except Exception:
            logger.exception("Ticker control loop failed")
            raise
        finally:
            next_command.cancel()
            if next_fire is not None:
                next_fire.cancel()
            self._stop_timer()
            self._ticks.close()

    def _apply(self, command: Command) -> bool:
        """Apply a command, returning whether the loop should keep running."""
        self._stop_timer()

        if isinstance(command, Stop):
            logger.debug("Ticker stopped")
        elif isinstance(command, Resume):
            self._start_timer()
            logger.debug("Ticker resumed at %gs", self._interval)
        elif isinstance(command, Adjust):
            self._interval = command.interval
            self._start_timer()
            logger.debug("Ticker adjusted to %gs", self._interval)
        elif isinstance(command, Close):
            logger.debug("Ticker closed")
            return False
        return True

    def _publish(self, tick: Tick) -> None:
        if not self._ticks.offer(tick):
            logger.debug("Dropped tick at %s, previous tick not yet consumed", tick.at.isoformat())

    def _start_timer(self) -> None:
        self._timer = self._clock.ticker(self._interval)
        self._timer.start()

    def _stop_timer(self) -> None:
        if self._timer is not None:
            self._timer.stop()
            self._timer = None


def new_ticker(interval: Duration, *, clock: Clock | None = None) -> Ticker:
    """Return a running ticker that ticks every ``interval`` seconds."""
    return Ticker(interval, clock=clock)
