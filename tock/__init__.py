"""Ticker that can be stopped, resumed and adjusted without replacing its channel."""

from .channel import TickChannel
from .common.clock import AsyncioClock, Clock, Timer
from .common.pydantic import Tick
from .config import TickerConfig, configure_logging
from .errors import InvalidDurationError, TickerClosedError, TickerError
from .ticker import Ticker, new_ticker

__all__ = [
    "AsyncioClock",
    "Clock",
    "InvalidDurationError",
    "Tick",
    "TickChannel",
    "Ticker",
    "TickerClosedError",
    "TickerConfig",
    "TickerError",
    "Timer",
    "configure_logging",
    "new_ticker",
]
