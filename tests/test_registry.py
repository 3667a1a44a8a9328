from __future__ import annotations

from conftest import T0

from pylaptime.models.transponder import TransponderState
from pylaptime.state.registry import TransponderRegistry


def test_upsert_get_remove() -> None:
    registry = TransponderRegistry()
    state = TransponderState(code="A1", last_passing_time=T0)

    registry.upsert(state)

    assert registry.get("A1") is state
    assert "A1" in registry
    assert registry.remove("A1") is state
    assert registry.remove("A1") is None
    assert registry.get("A1") is None


def test_upsert_replaces_by_code() -> None:
    registry = TransponderRegistry()
    registry.upsert(TransponderState(code="A1", last_passing_time=T0))
    registry.upsert(TransponderState(code="A1", last_passing_time=T0, lap_count=4))

    assert len(registry) == 1
    state = registry.get("A1")
    assert state is not None
    assert state.lap_count == 4


def test_entries_is_a_snapshot() -> None:
    registry = TransponderRegistry()
    for code in ("A1", "B2", "C3"):
        registry.upsert(TransponderState(code=code, last_passing_time=T0))

    for state in registry.entries():
        registry.remove(state.code)

    assert len(registry) == 0


def test_any_string_is_a_valid_code() -> None:
    registry = TransponderRegistry()
    registry.upsert(TransponderState(code="", last_passing_time=T0))
    registry.upsert(TransponderState(code="  weird code ✓ ", last_passing_time=T0))

    assert len(registry) == 2
