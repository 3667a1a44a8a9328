"""Websocket transport for the passing feed."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from typing import Protocol

import aiohttp

from pylaptime.exceptions import LapTimeTransportError

_logger = logging.getLogger(__name__)


class FeedConnection(Protocol):
    """An open feed connection yielding raw message frames."""

    def messages(self) -> AsyncIterator[str | bytes]: ...

    async def close(self) -> None: ...


class Transport(Protocol):
    """Structural transport interface used by the connection manager.

    Having a protocol here makes it easy to pass scripted test doubles while
    keeping the production implementation (`WebSocketTransport`) concrete.
    """

    async def open(self, url: str) -> FeedConnection: ...


class WebSocketConnection:
    """Adapter from an aiohttp websocket to :class:`FeedConnection`."""

    def __init__(self, ws: aiohttp.ClientWebSocketResponse, url: str) -> None:
        self._ws = ws
        self._url = url

    async def messages(self) -> AsyncIterator[str | bytes]:
        """Yield text/binary frames until the peer closes the socket.

        Raises
        ------
        LapTimeTransportError
            On an error frame or a receive failure.
        """
        try:
            async for msg in self._ws:
                if msg.type in (aiohttp.WSMsgType.TEXT, aiohttp.WSMsgType.BINARY):
                    yield msg.data
                elif msg.type == aiohttp.WSMsgType.ERROR:
                    raise LapTimeTransportError(
                        f"Websocket error on {self._url}: {self._ws.exception()}",
                        url=self._url,
                    )
        except aiohttp.ClientError as exc:
            raise LapTimeTransportError(f"Receive from {self._url} failed: {exc}", url=self._url) from exc
        _logger.debug("Websocket %s closed by peer (code=%s)", self._url, self._ws.close_code)

    async def close(self) -> None:
        if not self._ws.closed:
            await self._ws.close()


class WebSocketTransport:
    """Opens websocket connections through a shared aiohttp session."""

    def __init__(
        self,
        http_session: aiohttp.ClientSession,
        *,
        heartbeat: float | None = None,
    ) -> None:
        self._http = http_session
        self._heartbeat = heartbeat

    async def open(self, url: str) -> WebSocketConnection:
        _logger.debug("Opening websocket %s", url)
        try:
            ws = await self._http.ws_connect(url, heartbeat=self._heartbeat)
        except (aiohttp.ClientError, OSError) as exc:
            raise LapTimeTransportError(f"Connecting to {url} failed: {exc}", url=url) from exc
        return WebSocketConnection(ws, url)
