"""Ticker configuration."""

import logging
import logging.config
import os
from typing import Self

from pydantic import BaseModel, Field

ENV_INTERVAL = "TOCK_INTERVAL"
ENV_DEBUG = "TOCK_DEBUG"


def configure_logging(debug: bool = False) -> None:
    """Send log records to the console.

    Libraries should not configure logging; call this once at application
    startup if nothing else does.
    """
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "standard": {
                    "format": "%(asctime)s %(levelname)-8s %(name)s | %(message)s",
                    "datefmt": "%Y-%m-%d %H:%M:%S",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "standard",
                },
            },
            "root": {
                "handlers": ["console"],
                "level": logging.DEBUG if debug else logging.INFO,
            },
        }
    )


class TickerConfig(BaseModel):
    """Ticker configuration."""

    interval: float = Field(default=1.0, gt=0, description="Seconds between ticks.")
    debug: bool = Field(default=False, description="Log ticker state changes and dropped ticks.")

    @classmethod
    def from_env(cls) -> Self:
        """Read configuration from ``TOCK_INTERVAL`` and ``TOCK_DEBUG``."""
        values: dict[str, str] = {}
        if ENV_INTERVAL in os.environ:
            values["interval"] = os.environ[ENV_INTERVAL]
        if ENV_DEBUG in os.environ:
            values["debug"] = os.environ[ENV_DEBUG]
        return cls.model_validate(values)

    def apply_logging(self) -> None:
        """Configure logging based on this config."""
        configure_logging(self.debug)
