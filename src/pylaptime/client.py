"""High-level async client for a live passing feed."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

import aiohttp

from pylaptime._transport import Transport, WebSocketTransport
from pylaptime.config import LapTimeConfig
from pylaptime.connection import ConnectionManager, ConnectionStatus
from pylaptime.exceptions import LapTimeError
from pylaptime.names import NameMapping, load_name_mapping
from pylaptime.processor import PassingProcessor
from pylaptime.reconnect import FixedIntervalReconnect, ReconnectPolicy
from pylaptime.render import NullRenderer, RenderAdapter
from pylaptime.state.registry import TransponderRegistry
from pylaptime.sweeper import ExpirySweeper

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class LapTimeClient:
    """Session object owning the registry, connection and timers.

    Usage::

        async with LapTimeClient(config, renderer=board) as client:
            await client.run_forever()

    Each instance is independent: several clients may follow different
    feeds in one process.
    """

    def __init__(
        self,
        config: LapTimeConfig,
        *,
        renderer: RenderAdapter | None = None,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
        reconnect_policy: ReconnectPolicy | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._config = config
        self._renderer: RenderAdapter = renderer or NullRenderer()
        self._external_session = session is not None
        self._http_session = session
        self._transport = transport
        self._reconnect_policy = reconnect_policy or FixedIntervalReconnect(config.reconnect_interval)
        self._registry = TransponderRegistry()
        self._processor = PassingProcessor(config, self._registry, self._renderer)
        self._sweeper = ExpirySweeper(
            self._registry,
            self._renderer,
            inactivity_timeout=config.inactivity_timeout,
            interval=config.sweep_interval,
            clock=clock,
        )
        self._connection: ConnectionManager | None = None
        self._closed: asyncio.Event | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> LapTimeClient:
        self._closed = asyncio.Event()
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        try:
            self._processor.names = await load_name_mapping(
                self._config.name_mapping_source,
                http_session=self._http_session,
            )
        except BaseException:
            if not self._external_session:
                await self._http_session.close()
                self._http_session = None
            raise
        transport = self._transport or WebSocketTransport(self._http_session, heartbeat=self._config.heartbeat)
        self._connection = ConnectionManager(
            self._config.ws_url,
            transport,
            on_passing=self._processor.handle_passing,
            renderer=self._renderer,
            reconnect_policy=self._reconnect_policy,
        )
        self._connection.start()
        self._sweeper.start()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self._sweeper.stop()
        if self._connection is not None:
            await self._connection.stop()
            self._connection = None
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        if self._closed is not None:
            self._closed.set()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def config(self) -> LapTimeConfig:
        return self._config

    @property
    def registry(self) -> TransponderRegistry:
        return self._registry

    @property
    def processor(self) -> PassingProcessor:
        return self._processor

    @property
    def sweeper(self) -> ExpirySweeper:
        return self._sweeper

    @property
    def names(self) -> NameMapping:
        return self._processor.names

    @property
    def first_passing_seen(self) -> bool:
        return self._processor.first_passing_seen

    @property
    def status(self) -> ConnectionStatus:
        if self._connection is None:
            return ConnectionStatus.DISCONNECTED
        return self._connection.status

    def _require_connection(self) -> ConnectionManager:
        if self._connection is None:
            raise LapTimeError("Client not started. Use 'async with LapTimeClient(...) as client:'")
        return self._connection

    @property
    def connection(self) -> ConnectionManager:
        return self._require_connection()

    async def run_forever(self) -> None:
        """Block until :meth:`close` is called or the context exits."""
        self._require_connection()
        assert self._closed is not None  # noqa: S101
        await self._closed.wait()

    def close(self) -> None:
        """Release :meth:`run_forever`; teardown happens on context exit."""
        if self._closed is not None:
            self._closed.set()
