from __future__ import annotations

import pytest

from pylaptime.config import LapTimeConfig
from pylaptime.exceptions import LapTimeConfigError
from pylaptime.state.policy import OutOfOrderPolicy


def test_defaults_match_observed_system() -> None:
    config = LapTimeConfig()

    assert config.ws_url == "ws://localhost:8080/ws"
    assert config.debounce_threshold_ms == 500.0
    assert config.marker_code == "00000127"
    assert config.reconnect_interval == 5.0
    assert config.sweep_interval == 60.0
    assert config.inactivity_timeout == 600.0
    assert config.initial_lap_count == 0
    assert config.marker_resets_laps is False
    assert config.out_of_order_policy is OutOfOrderPolicy.DEBOUNCE


def test_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LAPTIME_WS_URL", "wss://timing.example/ws")
    monkeypatch.setenv("LAPTIME_DEBOUNCE_MS", "750")
    monkeypatch.setenv("LAPTIME_MARKER_RESETS_LAPS", "yes")
    monkeypatch.setenv("LAPTIME_OUT_OF_ORDER_POLICY", "ignore")
    monkeypatch.setenv("LAPTIME_INITIAL_LAP_COUNT", "1")
    monkeypatch.setenv("LAPTIME_NAME_MAPPING", "/srv/mapping.json")

    config = LapTimeConfig.from_env()

    assert config.ws_url == "wss://timing.example/ws"
    assert config.debounce_threshold_ms == 750.0
    assert config.marker_resets_laps is True
    assert config.out_of_order_policy is OutOfOrderPolicy.IGNORE
    assert config.initial_lap_count == 1
    assert config.name_mapping_source == "/srv/mapping.json"


def test_overrides_win_over_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LAPTIME_DEBOUNCE_MS", "750")
    monkeypatch.setenv("LAPTIME_MARKER_RESETS_LAPS", "true")

    config = LapTimeConfig.from_env(debounce_threshold_ms=200.0, marker_resets_laps=False)

    assert config.debounce_threshold_ms == 200.0
    assert config.marker_resets_laps is False


def test_unparseable_env_number(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LAPTIME_SWEEP_INTERVAL", "often")

    with pytest.raises(LapTimeConfigError):
        LapTimeConfig.from_env()


@pytest.mark.parametrize(
    "kwargs",
    [
        {"ws_url": "http://localhost:8080/ws"},
        {"out_of_order_policy": "reorder"},
        {"debounce_threshold_ms": -1.0},
        {"initial_lap_count": -1},
        {"reconnect_interval": 0.0},
        {"inactivity_timeout": -5.0},
        {"heartbeat": 0.0},
    ],
)
def test_invalid_values_rejected(kwargs: dict[str, object]) -> None:
    with pytest.raises(LapTimeConfigError):
        LapTimeConfig(**kwargs)  # type: ignore[arg-type]
