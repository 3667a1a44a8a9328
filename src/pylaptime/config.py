"""Client configuration for pylaptime."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pylaptime._constants import (
    DEBOUNCE_THRESHOLD_MS,
    DEFAULT_WS_URL,
    INACTIVITY_TIMEOUT_S,
    MARKER_CODE,
    RECONNECT_INTERVAL_S,
    SWEEP_INTERVAL_S,
)
from pylaptime.exceptions import LapTimeConfigError
from pylaptime.state.policy import OutOfOrderPolicy


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class LapTimeConfig:
    """Client configuration.

    Parameters
    ----------
    ws_url : str
        Websocket endpoint publishing passing events. Only ``ws://`` and
        ``wss://`` URLs are accepted.
    name_mapping_source : str or None
        Path or ``http(s)://`` URL of a JSON object mapping transponder
        codes to display names. ``None`` disables name lookup.
    debounce_threshold_ms : float
        Passings of the same transponder closer together than this are
        treated as duplicate detections of one physical pass.
    marker_code : str
        Reserved transponder code denoting a start-line impulse.
    marker_resets_laps : bool
        When ``True`` a marker also resets every lap count and lap time.
        By default it only resynchronises the running timers.
    initial_lap_count : int
        Lap count assigned at the first sighting of a transponder.
    out_of_order_policy : OutOfOrderPolicy
        Treatment of passings older than the stored passing time.
    reconnect_interval : float
        Seconds between reconnection attempts.
    sweep_interval : float
        Seconds between expiry sweeps.
    inactivity_timeout : float
        Seconds without a passing after which a transponder is dropped.
    heartbeat : float or None
        Websocket ping interval in seconds, ``None`` to disable.
    """

    ws_url: str = DEFAULT_WS_URL
    name_mapping_source: str | None = None
    debounce_threshold_ms: float = DEBOUNCE_THRESHOLD_MS
    marker_code: str = MARKER_CODE
    marker_resets_laps: bool = False
    initial_lap_count: int = 0
    out_of_order_policy: OutOfOrderPolicy = OutOfOrderPolicy.DEBOUNCE
    reconnect_interval: float = RECONNECT_INTERVAL_S
    sweep_interval: float = SWEEP_INTERVAL_S
    inactivity_timeout: float = INACTIVITY_TIMEOUT_S
    heartbeat: float | None = None

    def __post_init__(self) -> None:
        if not self.ws_url.startswith(("ws://", "wss://")):
            raise LapTimeConfigError(f"ws_url must be a ws:// or wss:// URL, got {self.ws_url!r}")
        try:
            policy = OutOfOrderPolicy(self.out_of_order_policy)
        except ValueError as exc:
            raise LapTimeConfigError(f"Unknown out_of_order_policy {self.out_of_order_policy!r}") from exc
        # Frozen dataclass: normalise plain strings to the enum member.
        object.__setattr__(self, "out_of_order_policy", policy)

        if self.debounce_threshold_ms < 0:
            raise LapTimeConfigError("debounce_threshold_ms must be >= 0")
        if self.initial_lap_count < 0:
            raise LapTimeConfigError("initial_lap_count must be >= 0")
        for name in ("reconnect_interval", "sweep_interval", "inactivity_timeout"):
            if getattr(self, name) <= 0:
                raise LapTimeConfigError(f"{name} must be > 0")
        if self.heartbeat is not None and self.heartbeat <= 0:
            raise LapTimeConfigError("heartbeat must be > 0 or None")

    @classmethod
    def from_env(cls, **overrides: Any) -> LapTimeConfig:
        """Create configuration from environment variables.

        Reads optional ``LAPTIME_*`` variables. Explicit keyword arguments
        override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        LapTimeConfig
            Populated configuration.

        Raises
        ------
        LapTimeConfigError
            If a numeric variable cannot be parsed.
        """
        env = os.environ

        _ENV_STR_MAP = {
            "LAPTIME_WS_URL": "ws_url",
            "LAPTIME_NAME_MAPPING": "name_mapping_source",
            "LAPTIME_MARKER_CODE": "marker_code",
            "LAPTIME_OUT_OF_ORDER_POLICY": "out_of_order_policy",
        }
        _ENV_FLOAT_MAP = {
            "LAPTIME_DEBOUNCE_MS": "debounce_threshold_ms",
            "LAPTIME_RECONNECT_INTERVAL": "reconnect_interval",
            "LAPTIME_SWEEP_INTERVAL": "sweep_interval",
            "LAPTIME_INACTIVITY_TIMEOUT": "inactivity_timeout",
            "LAPTIME_HEARTBEAT": "heartbeat",
        }

        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_STR_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        for env_key, field_name in _ENV_FLOAT_MAP.items():
            val = env.get(env_key)
            if val is None or field_name in overrides:
                continue
            try:
                config_kwargs[field_name] = float(val)
            except ValueError as exc:
                raise LapTimeConfigError(f"{env_key} must be a number, got {val!r}") from exc

        laps_env = env.get("LAPTIME_INITIAL_LAP_COUNT")
        if laps_env is not None and "initial_lap_count" not in overrides:
            try:
                config_kwargs["initial_lap_count"] = int(laps_env)
            except ValueError as exc:
                raise LapTimeConfigError(f"LAPTIME_INITIAL_LAP_COUNT must be an integer, got {laps_env!r}") from exc

        if "marker_resets_laps" not in overrides:
            config_kwargs["marker_resets_laps"] = _env_bool(env.get("LAPTIME_MARKER_RESETS_LAPS"), False)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
