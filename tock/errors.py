"""Ticker errors."""


class TickerError(Exception):
    """Base class for ticker errors."""


class InvalidDurationError(TickerError, ValueError):
    """A non-positive interval was given to ``Ticker.adjust``."""

    def __init__(self, interval: float):
        """Keep the rejected interval for the caller."""
        super().__init__(f"non-positive interval provided: {interval!r}")
        self.interval = interval


class TickerClosedError(TickerError):
    """The ticker, or its tick channel, has been closed."""
