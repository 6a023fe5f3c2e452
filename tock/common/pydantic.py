"""Pydantic base model."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class FrozenBaseModel(BaseModel):
    """Pydantic frozen base model."""

    model_config = ConfigDict(frozen=True, strict=True)


class Tick(FrozenBaseModel):
    """A moment at which a period elapsed.

    ``at`` is the wall-clock time of the firing, ``monotonic`` the reading of a
    monotonic clock taken at the same moment; only differences between two
    ``monotonic`` values are meaningful.
    """

    at: datetime
    monotonic: float
