"""Single-slot tick channel."""

import asyncio
from typing import Self

from .common.pydantic import Tick
from .errors import TickerClosedError


class TickChannel:
    """Channel holding at most one unconsumed tick.

    Only the ticker's control loop writes to the channel; a tick offered while
    the slot is taken is dropped. Closing the channel keeps a pending tick
    readable and wakes every waiting reader.
    """

    def __init__(self) -> None:
        """Initialize an empty, open channel."""
        self._slot: Tick | None = None
        self._ready = asyncio.Event()
        self._closed = False
        self.dropped = 0

    @property
    def closed(self) -> bool:
        """Whether the channel has been closed."""
        return self._closed

    @property
    def pending(self) -> int:
        """Number of ticks waiting to be read (0 or 1)."""
        return 0 if self._slot is None else 1

    def offer(self, tick: Tick) -> bool:
        """Publish a tick without blocking, returning whether it was stored."""
        if self._closed:
            return False
        if self._slot is not None:
            self.dropped += 1
            return False
        self._slot = tick
        self._ready.set()
        return True

    def get_nowait(self) -> Tick:
        """Take the pending tick.

        Raises ``asyncio.QueueEmpty`` if no tick is pending, or
        ``TickerClosedError`` if none is pending and the channel is closed.
        """
        tick = self._slot
        if tick is None:
            if self._closed:
                raise TickerClosedError("tick channel is closed")
            raise asyncio.QueueEmpty
        self._slot = None
        if not self._closed:
            self._ready.clear()
        return tick

    async def get(self) -> Tick:
        """Wait for the next tick."""
        while self._slot is None and not self._closed:
            await self._ready.wait()
        return self.get_nowait()

    def close(self) -> None:
        """Close the channel. Closing twice is harmless."""
        self._closed = True
        self._ready.set()

    def __aiter__(self) -> Self:
        """Iterate over ticks until the channel is closed."""
        return self

    async def __anext__(self) -> Tick:
        """Return the next tick."""
        try:
            return await self.get()
        except TickerClosedError:
            raise StopAsyncIteration from None
