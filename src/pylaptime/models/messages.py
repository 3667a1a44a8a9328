"""Inbound websocket message models.

The feed carries two kinds of JSON objects:

* passing records, identified by a ``passing_number`` field::

    {"passing_number": 12, "transponder": "4711", "date": "2024-01-12T09:06:35.944", ...}

* status records reporting whether the decoder is attached::

    {"event": "connected"}

Anything else is ignored so newer feeds can add message kinds without
breaking older clients.
"""

from __future__ import annotations

import json
from datetime import datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from pylaptime.exceptions import LapTimeMessageError


class FeedEvent(StrEnum):
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"


class Passing(BaseModel):
    """A single transponder detection."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        str_strip_whitespace=True,
    )

    passing_number: int
    transponder: str = Field(..., min_length=1)
    date: datetime
    """Absolute passing time (timezone-aware)."""

    time: str | None = None
    rtc_time: str | None = None
    strength: int | None = None
    tran_code: str | None = None
    noise: int | None = None
    hits: int | None = None

    raw: dict[str, Any] = Field(default_factory=dict, exclude=True)
    """Original payload (as received)."""

    @field_validator("transponder", mode="before")
    @classmethod
    def _coerce_code(cls, value: Any) -> Any:
        # Some decoders send numeric codes; keep them opaque strings.
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("date")
    @classmethod
    def _ensure_tz_aware(cls, value: datetime) -> datetime:
        # The converter emits local wall-clock time without an offset.
        if value.tzinfo is None:
            return value.astimezone()
        return value


class StatusMessage(BaseModel):
    """Decoder attachment status reported by the feed server."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    event: FeedEvent


def parse_message(raw: str | bytes) -> Passing | StatusMessage | None:
    """Parse one websocket frame.

    Returns ``None`` for well-formed JSON objects of an unknown kind.

    Raises
    ------
    LapTimeMessageError
        If the frame is not a JSON object, or claims to be a passing but
        does not validate.
    """
    try:
        payload = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise LapTimeMessageError(f"Message is not valid JSON: {exc}", payload=raw) from exc

    if not isinstance(payload, dict):
        raise LapTimeMessageError("Message is not a JSON object", payload=payload)

    if payload.get("passing_number") is not None:
        try:
            return Passing.model_validate({**payload, "raw": payload})
        except ValidationError as exc:
            raise LapTimeMessageError(f"Invalid passing: {exc}", payload=payload) from exc

    if "event" in payload:
        try:
            return StatusMessage.model_validate(payload)
        except ValidationError:
            # Unknown event names are a forward-compatible extension, not an error.
            return None

    return None
