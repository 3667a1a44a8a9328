"""Custom exception hierarchy for pylaptime."""

from __future__ import annotations

from typing import Any


class LapTimeError(Exception):
    """Base exception for all pylaptime errors."""


class LapTimeConfigError(LapTimeError):
    """Invalid or missing configuration."""


class LapTimeTransportError(LapTimeError):
    """Websocket-level failure (connect refused, handshake error, error frame)."""

    def __init__(self, message: str, *, url: str = "") -> None:
        self.url = url
        super().__init__(message)


class LapTimeMessageError(LapTimeError):
    """An inbound message could not be parsed.

    Recovered locally: the connection manager logs the offending payload
    and drops it without changing state.
    """

    def __init__(self, message: str, *, payload: Any = None) -> None:
        self.payload = payload
        super().__init__(message)


class NameMappingError(LapTimeError):
    """The code → name mapping could not be loaded or is malformed."""
