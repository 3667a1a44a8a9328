"""pylaptime - Async Python client for live transponder lap timing feeds."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pylaptime")
except PackageNotFoundError:
    __version__ = "0+local"
from pylaptime._format import format_duration
from pylaptime.client import LapTimeClient
from pylaptime.config import LapTimeConfig
from pylaptime.connection import ConnectionManager, ConnectionStatus
from pylaptime.exceptions import (
    LapTimeConfigError,
    LapTimeError,
    LapTimeMessageError,
    LapTimeTransportError,
    NameMappingError,
)
from pylaptime.models import FeedEvent, Passing, StatusMessage, TransponderState, parse_message
from pylaptime.names import NameMapping, fetch_name_mapping, load_name_mapping
from pylaptime.processor import PassingProcessor
from pylaptime.reconnect import ExponentialBackoffReconnect, FixedIntervalReconnect, ReconnectPolicy
from pylaptime.render import Leaderboard, LeaderboardRow, NullRenderer, RenderAdapter
from pylaptime.state import OutOfOrderPolicy, PassingOutcome, TransponderRegistry
from pylaptime.sweeper import ExpirySweeper

__all__ = [
    "__version__",
    "ConnectionManager",
    "ConnectionStatus",
    "ExpirySweeper",
    "ExponentialBackoffReconnect",
    "FeedEvent",
    "FixedIntervalReconnect",
    "LapTimeClient",
    "LapTimeConfig",
    "LapTimeConfigError",
    "LapTimeError",
    "LapTimeMessageError",
    "LapTimeTransportError",
    "Leaderboard",
    "LeaderboardRow",
    "NameMapping",
    "NameMappingError",
    "NullRenderer",
    "OutOfOrderPolicy",
    "Passing",
    "PassingOutcome",
    "PassingProcessor",
    "ReconnectPolicy",
    "RenderAdapter",
    "StatusMessage",
    "TransponderRegistry",
    "TransponderState",
    "format_duration",
    "fetch_name_mapping",
    "load_name_mapping",
    "parse_message",
]
