"""Connection lifecycle: status signalling, message dispatch and reconnection."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable
from enum import StrEnum

from pylaptime._logfmt import clip_for_log
from pylaptime._transport import Transport
from pylaptime.exceptions import LapTimeMessageError, LapTimeTransportError
from pylaptime.models.messages import FeedEvent, Passing, StatusMessage, parse_message
from pylaptime.reconnect import FixedIntervalReconnect, ReconnectPolicy
from pylaptime.render import RenderAdapter

_logger = logging.getLogger(__name__)


class ConnectionStatus(StrEnum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED_NO_DATA = "connected_no_data"
    """Socket is open but the feed has not reported a live decoder yet."""
    CONNECTED_READY = "connected_ready"


class ConnectionManager:
    """Own the feed connection and keep it alive.

    Status transitions::

        * -> CONNECTING                      connection attempt started
        CONNECTING -> CONNECTED_NO_DATA      socket open
        -> CONNECTED_READY                   valid passing or "connected" event
        CONNECTED_READY -> CONNECTED_NO_DATA "disconnected" event
        * -> DISCONNECTED                    socket closed or failed

    Every close or failure arms a single reconnection timer; arming again
    while one is pending is a no-op, and the timer is cancelled as soon as a
    connection opens.
    """

    def __init__(
        self,
        url: str,
        transport: Transport,
        *,
        on_passing: Callable[[Passing], object],
        renderer: RenderAdapter,
        reconnect_policy: ReconnectPolicy | None = None,
    ) -> None:
        self._url = url
        self._transport = transport
        self._on_passing = on_passing
        self._renderer = renderer
        self._reconnect_policy = reconnect_policy or FixedIntervalReconnect()
        self._status = ConnectionStatus.DISCONNECTED
        self._task: asyncio.Task[None] | None = None
        self._reconnect_handle: asyncio.TimerHandle | None = None
        self._attempt = 0
        self._stopped = True

    @property
    def status(self) -> ConnectionStatus:
        return self._status

    @property
    def reconnect_scheduled(self) -> bool:
        """Whether a reconnection timer is currently armed."""
        return self._reconnect_handle is not None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start connecting; must be called from the running event loop."""
        self._stopped = False
        self.connect()

    def connect(self) -> None:
        """Start a connection attempt unless one is already in flight."""
        if self._stopped:
            return
        if self._task is not None and not self._task.done():
            _logger.debug("Connection attempt already in progress")
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def stop(self) -> None:
        """Close the connection and cancel pending reconnection."""
        self._stopped = True
        self._cancel_reconnect()
        task = self._task
        self._task = None
        if task is not None and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        self._set_status(ConnectionStatus.DISCONNECTED)

    async def _run(self) -> None:
        self._set_status(ConnectionStatus.CONNECTING)
        try:
            connection = await self._transport.open(self._url)
        except LapTimeTransportError as exc:
            self.handle_transport_error(exc)
            return
        except Exception as exc:
            _logger.exception("Unexpected error opening %s", self._url)
            self.handle_transport_error(exc)
            return

        self.handle_open()
        try:
            async for raw in connection.messages():
                self.handle_message(raw)
        except LapTimeTransportError as exc:
            _logger.warning("Feed connection failed: %s", exc)
        except Exception:
            _logger.exception("Unexpected error reading from %s", self._url)
        finally:
            try:
                await connection.close()
            except Exception:
                _logger.exception("Closing feed connection to %s failed", self._url)
        self.handle_close()

    # ------------------------------------------------------------------
    # Transport events
    # ------------------------------------------------------------------

    def handle_open(self) -> None:
        _logger.info("Connected to %s", self._url)
        self._cancel_reconnect()
        self._attempt = 0
        self._set_status(ConnectionStatus.CONNECTED_NO_DATA)

    def handle_close(self) -> None:
        _logger.info("Disconnected from %s", self._url)
        self._set_status(ConnectionStatus.DISCONNECTED)
        self.schedule_reconnect()

    def handle_transport_error(self, exc: Exception) -> None:
        _logger.warning("Feed transport error: %s", exc)
        self.handle_close()

    def handle_message(self, raw: str | bytes) -> None:
        """Parse and dispatch one inbound frame."""
        try:
            message = parse_message(raw)
        except LapTimeMessageError as exc:
            _logger.warning("Dropping malformed message: %s payload=%s", exc, clip_for_log(exc.payload))
            return

        if isinstance(message, Passing):
            self._set_status(ConnectionStatus.CONNECTED_READY)
            try:
                self._on_passing(message)
            except Exception:
                _logger.exception("Passing handler failed for %s", message.transponder)
        elif isinstance(message, StatusMessage):
            if message.event == FeedEvent.CONNECTED:
                self._set_status(ConnectionStatus.CONNECTED_READY)
            elif self._status == ConnectionStatus.CONNECTED_READY:
                self._set_status(ConnectionStatus.CONNECTED_NO_DATA)
        else:
            _logger.debug("Ignoring unrecognised message")

    # ------------------------------------------------------------------
    # Reconnection
    # ------------------------------------------------------------------

    def schedule_reconnect(self) -> None:
        if self._stopped or self._reconnect_handle is not None:
            return
        self._attempt += 1
        delay = self._reconnect_policy.next_delay(self._attempt)
        _logger.debug("Reconnect attempt %d in %.1f s", self._attempt, delay)
        self._reconnect_handle = asyncio.get_running_loop().call_later(delay, self._on_reconnect_timer)

    def _on_reconnect_timer(self) -> None:
        self._reconnect_handle = None
        _logger.info("Attempting to reconnect to %s", self._url)
        self.connect()

    def _cancel_reconnect(self) -> None:
        handle = self._reconnect_handle
        self._reconnect_handle = None
        if handle is not None:
            handle.cancel()

    def _set_status(self, status: ConnectionStatus) -> None:
        if status == self._status:
            return
        _logger.info("Status changed to: %s", status.value)
        self._status = status
        try:
            self._renderer.on_status_change(status)
        except Exception:
            _logger.exception("Renderer failed on status change")
