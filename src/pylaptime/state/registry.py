"""In-memory transponder registry.

This is the only mutable state shared between the passing processor and
the expiry sweeper. It is not locked; every caller runs on the same event
loop.
"""

from __future__ import annotations

from pylaptime.models.transponder import TransponderState


class TransponderRegistry:
    """Table of timing state keyed by transponder code."""

    def __init__(self) -> None:
        self._states: dict[str, TransponderState] = {}

    def __len__(self) -> int:
        return len(self._states)

    def __contains__(self, code: object) -> bool:
        return code in self._states

    def get(self, code: str) -> TransponderState | None:
        return self._states.get(code)

    def upsert(self, state: TransponderState) -> None:
        """Insert or replace the state stored under ``state.code``."""
        self._states[state.code] = state

    def remove(self, code: str) -> TransponderState | None:
        """Remove and return the state for *code*, if present."""
        return self._states.pop(code, None)

    def entries(self) -> list[TransponderState]:
        """Snapshot of all states, safe to iterate while removing."""
        return list(self._states.values())

    def clear(self) -> None:
        self._states.clear()
