"""Data models for the passing feed and per-transponder state."""

from pylaptime.models.messages import FeedEvent, Passing, StatusMessage, parse_message
from pylaptime.models.transponder import TransponderState

__all__ = [
    "FeedEvent",
    "Passing",
    "StatusMessage",
    "TransponderState",
    "parse_message",
]
