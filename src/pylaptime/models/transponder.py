"""Per-transponder timing state."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from pylaptime._constants import FIRST_LAP_TIME


class TransponderState(BaseModel):
    """Running lap timer and counter for one transponder.

    Mutable: the processor updates it in place on every passing.
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    code: str
    last_passing_time: datetime
    """Time of the most recent passing, accepted or debounced."""

    last_lap_time: str = FIRST_LAP_TIME
    """Formatted duration of the most recent accepted lap."""

    lap_count: int = Field(default=0, ge=0)
