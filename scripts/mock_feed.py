#!/usr/bin/env python3
"""Development passing feed.

Serves a websocket at ``/ws`` that behaves like the decoder converter:
a ``{"event": "connected"}`` status on connect, then passing records for a
handful of simulated transponders. Some passings are followed by a duplicate
detection a few milliseconds later to exercise debouncing.

Usage
-----
::

    python scripts/mock_feed.py --port 8080 --transponders 6 --marker
    python scripts/live_board.py --url ws://localhost:8080/ws
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import random
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any

from aiohttp import WSMsgType, web

_LOG = logging.getLogger("mock_feed")

MARKER_CODE = "00000127"


@dataclass
class FeedState:
    transponders: list[str]
    min_lap: float
    max_lap: float
    duplicate_rate: float
    send_marker: bool
    passing_number: int = 0
    clients: set[web.WebSocketResponse] = field(default_factory=set)

    def next_passing(self, code: str, when: datetime) -> dict[str, Any]:
        self.passing_number += 1
        return {
            "passing_number": self.passing_number,
            "transponder": code,
            "date": when.isoformat(timespec="milliseconds"),
            "time": when.strftime("%H:%M:%S.%f")[:-3],
            "rtc_time": when.isoformat(timespec="milliseconds"),
            "strength": random.randint(40, 120),
            "tran_code": "",
            "noise": 0,
            "hits": random.randint(5, 40),
        }


FEED_STATE = web.AppKey("feed_state", FeedState)
FEED_TASKS = web.AppKey("feed_tasks", list)


async def _broadcast(state: FeedState, message: dict[str, Any]) -> None:
    text = json.dumps(message)
    for ws in list(state.clients):
        try:
            await ws.send_str(text)
        except ConnectionResetError:
            state.clients.discard(ws)


async def _transponder_loop(state: FeedState, code: str) -> None:
    while True:
        await asyncio.sleep(random.uniform(state.min_lap, state.max_lap))
        now = datetime.now(UTC)
        await _broadcast(state, state.next_passing(code, now))
        if random.random() < state.duplicate_rate:
            duplicate_at = now + timedelta(milliseconds=random.randint(20, 300))
            await _broadcast(state, state.next_passing(code, duplicate_at))


async def _ws_handler(request: web.Request) -> web.WebSocketResponse:
    state: FeedState = request.app[FEED_STATE]
    ws = web.WebSocketResponse()
    await ws.prepare(request)
    _LOG.info("Client connected from %s", request.remote)
    state.clients.add(ws)
    await ws.send_str(json.dumps({"event": "connected"}))
    if state.send_marker:
        await ws.send_str(json.dumps(state.next_passing(MARKER_CODE, datetime.now(UTC))))
    try:
        async for msg in ws:
            if msg.type == WSMsgType.ERROR:
                _LOG.warning("Client socket error: %s", ws.exception())
    finally:
        state.clients.discard(ws)
        _LOG.info("Client %s disconnected", request.remote)
    return ws


async def _start_background(app: web.Application) -> None:
    state: FeedState = app[FEED_STATE]
    app[FEED_TASKS] = [asyncio.create_task(_transponder_loop(state, code)) for code in state.transponders]


async def _stop_background(app: web.Application) -> None:
    for task in app[FEED_TASKS]:
        task.cancel()
    await asyncio.gather(*app[FEED_TASKS], return_exceptions=True)


def build_app(state: FeedState) -> web.Application:
    app = web.Application()
    app[FEED_STATE] = state
    app.router.add_get("/ws", _ws_handler)
    app.on_startup.append(_start_background)
    app.on_cleanup.append(_stop_background)
    return app


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Serve a simulated passing feed over websocket.")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8080)
    parser.add_argument("--transponders", type=int, default=5, help="Number of simulated transponders.")
    parser.add_argument("--min-lap", type=float, default=3.0, help="Shortest lap in seconds.")
    parser.add_argument("--max-lap", type=float, default=8.0, help="Longest lap in seconds.")
    parser.add_argument("--duplicate-rate", type=float, default=0.2, help="Probability of a duplicate detection.")
    parser.add_argument("--marker", action="store_true", help="Send a start impulse to each new client.")
    return parser.parse_args()


def main() -> int:
    args = _parse_args()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    codes = [f"{1000000 + i:08d}" for i in range(args.transponders)]
    state = FeedState(
        transponders=codes,
        min_lap=args.min_lap,
        max_lap=args.max_lap,
        duplicate_rate=args.duplicate_rate,
        send_marker=args.marker,
    )
    web.run_app(build_app(state), host=args.host, port=args.port)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
