"""Reconnection delay policies."""

from __future__ import annotations

from typing import Protocol

from pylaptime._constants import RECONNECT_INTERVAL_S


class ReconnectPolicy(Protocol):
    def next_delay(self, attempt: int) -> float:
        """Seconds to wait before reconnection *attempt* (1-based)."""
        ...


class FixedIntervalReconnect:
    """Retry every *interval* seconds, forever.

    Appropriate for a local feed server that is expected to come back.
    """

    def __init__(self, interval: float = RECONNECT_INTERVAL_S) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be > 0, got {interval}")
        self.interval = interval

    def next_delay(self, attempt: int) -> float:
        return self.interval


class ExponentialBackoffReconnect:
    """Double the delay after each failed attempt, up to *maximum* seconds."""

    def __init__(self, initial: float = 1.0, maximum: float = 60.0, factor: float = 2.0) -> None:
        if initial <= 0 or maximum < initial or factor < 1:
            raise ValueError("require 0 < initial <= maximum and factor >= 1")
        self.initial = initial
        self.maximum = maximum
        self.factor = factor

    def next_delay(self, attempt: int) -> float:
        exponent = min(max(attempt - 1, 0), 64)
        return min(self.initial * self.factor**exponent, self.maximum)
