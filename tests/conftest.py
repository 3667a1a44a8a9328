from __future__ import annotations

import asyncio
import json
from collections.abc import AsyncIterator, Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest

from pylaptime.connection import ConnectionStatus
from pylaptime.exceptions import LapTimeTransportError
from pylaptime.models.messages import Passing

T0 = datetime(2026, 1, 1, 12, 0, 0, tzinfo=UTC)


def at(ms: float) -> datetime:
    """Absolute time *ms* milliseconds after ``T0``."""
    return T0 + timedelta(milliseconds=ms)


def make_passing(code: str, when: datetime, number: int = 1) -> Passing:
    return Passing(passing_number=number, transponder=code, date=when)


def passing_frame(code: str, when: datetime, number: int = 1) -> str:
    return json.dumps({"passing_number": number, "transponder": code, "date": when.isoformat()})


@dataclass
class RecordingRenderer:
    statuses: list[ConnectionStatus] = field(default_factory=list)
    updates: list[tuple[str, str, int, str, bool]] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
    first_passing_calls: int = 0

    def on_status_change(self, status: ConnectionStatus) -> None:
        self.statuses.append(status)

    def on_transponder_update(
        self,
        code: str,
        lap_time: str,
        lap_count: int,
        display_name: str,
        is_new_entry: bool,
    ) -> None:
        self.updates.append((code, lap_time, lap_count, display_name, is_new_entry))

    def on_transponder_removed(self, code: str) -> None:
        self.removed.append(code)

    def on_first_passing(self) -> None:
        self.first_passing_calls += 1


@dataclass
class ScriptedConnection:
    """Feed connection replaying fixed frames, then optionally holding open or failing."""

    frames: list[str | bytes] = field(default_factory=list)
    hold: asyncio.Event | None = None
    error: Exception | None = None
    closed: bool = False

    async def messages(self) -> AsyncIterator[str | bytes]:
        for frame in self.frames:
            yield frame
        if self.hold is not None:
            await self.hold.wait()
        if self.error is not None:
            raise self.error

    async def close(self) -> None:
        self.closed = True


@dataclass
class ScriptedTransport:
    """Transport handing out scripted outcomes; refuses once the script runs out."""

    outcomes: list[ScriptedConnection | Exception] = field(default_factory=list)
    opened: int = 0

    async def open(self, url: str) -> ScriptedConnection:
        self.opened += 1
        outcome: ScriptedConnection | Exception = (
            self.outcomes.pop(0) if self.outcomes else LapTimeTransportError("refused", url=url)
        )
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


async def wait_for(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not met before timeout")
        await asyncio.sleep(0.005)


@pytest.fixture
def renderer() -> RecordingRenderer:
    return RecordingRenderer()


def frames(*payloads: Any) -> list[str]:
    return [json.dumps(p) for p in payloads]
