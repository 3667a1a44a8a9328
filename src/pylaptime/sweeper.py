"""Periodic eviction of inactive transponders."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from pylaptime._constants import INACTIVITY_TIMEOUT_S, SWEEP_INTERVAL_S
from pylaptime.render import RenderAdapter
from pylaptime.state.registry import TransponderRegistry

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class ExpirySweeper:
    """Remove transponders with no passing for longer than the timeout."""

    def __init__(
        self,
        registry: TransponderRegistry,
        renderer: RenderAdapter,
        *,
        inactivity_timeout: float = INACTIVITY_TIMEOUT_S,
        interval: float = SWEEP_INTERVAL_S,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._registry = registry
        self._renderer = renderer
        self._timeout = timedelta(seconds=inactivity_timeout)
        self._interval = interval
        self._clock = clock
        self._task: asyncio.Task[None] | None = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def sweep(self, now: datetime | None = None) -> list[str]:
        """Evict stale entries once and return their codes."""
        now = now or self._clock()
        removed: list[str] = []
        for state in self._registry.entries():
            if now - state.last_passing_time <= self._timeout:
                continue
            self._registry.remove(state.code)
            removed.append(state.code)
            _logger.info("Removing inactive transponder: %s", state.code)
            try:
                self._renderer.on_transponder_removed(state.code)
            except Exception:
                _logger.exception("Renderer failed to remove %s", state.code)
        return removed

    def start(self) -> None:
        if self.is_running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def stop(self) -> None:
        task = self._task
        self._task = None
        if task is not None and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                self.sweep()
            except Exception:
                _logger.exception("Expiry sweep failed")
