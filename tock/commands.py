"""Commands understood by the ticker control loop."""

from pydantic import Field

from .common.pydantic import FrozenBaseModel


class Command(FrozenBaseModel):
    """Base class for all ticker commands."""


class Stop(Command):
    """Stop publishing ticks. The interval is kept for a later resume."""


class Resume(Command):
    """Start publishing ticks again at the last known interval."""


class Adjust(Command):
    """Switch to a new interval, resuming a stopped ticker."""

    interval: float = Field(gt=0)


class Close(Command):
    """Release the timer, close the tick channel and end the control loop."""
