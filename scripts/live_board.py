#!/usr/bin/env python3
"""Terminal leaderboard for a live passing feed.

Connects to the feed websocket, and redraws the list of transponders
(most recent activity first) whenever a lap is completed.

Usage
-----
::

    python scripts/live_board.py --url ws://localhost:8080/ws --names mapping.json

Every option can also be set through ``LAPTIME_*`` environment variables
(see :class:`pylaptime.LapTimeConfig`).
"""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
import signal
import sys
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pylaptime import ConnectionStatus, LapTimeClient, LapTimeConfig, Leaderboard  # noqa: E402

_STATUS_LABELS = {
    ConnectionStatus.DISCONNECTED: "\x1b[31m● disconnected\x1b[0m",
    ConnectionStatus.CONNECTING: "\x1b[33m● connecting\x1b[0m",
    ConnectionStatus.CONNECTED_NO_DATA: "\x1b[38;5;208m● waiting for decoder\x1b[0m",
    ConnectionStatus.CONNECTED_READY: "\x1b[32m● live\x1b[0m",
}


class TerminalBoard(Leaderboard):
    """Leaderboard that reprints itself after every change."""

    def __init__(self, *, title: str, clear: bool = True) -> None:
        super().__init__()
        self._title = title
        self._clear = clear

    def _draw(self) -> None:
        lines: list[str] = []
        if self._clear:
            lines.append("\x1b[2J\x1b[H")
        status = _STATUS_LABELS.get(self.status, "") if self.status is not None else ""
        lines.append(f"{status}")
        if self.title_visible:
            lines.append(self._title)
        for row in self.rows:
            marker = "\x1b[7m" if row.highlighted else ""
            name = row.display_name
            if name != row.code:
                name = f"{name} ({row.code})"
            lines.append(f"{marker}{name:<32} laps {row.lap_count:>4}   {row.lap_time:>6}\x1b[0m")
        print("\n".join(lines), flush=True)

    def on_status_change(self, status: ConnectionStatus) -> None:
        super().on_status_change(status)
        self._draw()

    def on_transponder_update(self, *args: Any, **kwargs: Any) -> None:
        super().on_transponder_update(*args, **kwargs)
        self._draw()

    def on_transponder_removed(self, code: str) -> None:
        super().on_transponder_removed(code)
        self._draw()

    def on_first_passing(self) -> None:
        super().on_first_passing()
        self._draw()


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Show a live lap-time board in the terminal.")
    parser.add_argument("--url", help="Feed websocket URL (default from LAPTIME_WS_URL).")
    parser.add_argument("--names", help="Path or URL of a JSON code -> name mapping.")
    parser.add_argument("--debounce-ms", type=float, help="Duplicate detection window in milliseconds.")
    parser.add_argument("--marker-code", help="Transponder code of the start impulse.")
    parser.add_argument(
        "--marker-resets-laps",
        action="store_true",
        default=None,
        help="Reset lap counts when the start impulse is received.",
    )
    parser.add_argument("--title", default="Waiting for passings…", help="Placeholder shown before the first passing.")
    parser.add_argument("--no-clear", action="store_true", help="Append output instead of redrawing the screen.")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging.")
    return parser.parse_args()


async def _run(args: argparse.Namespace) -> None:
    overrides: dict[str, Any] = {}
    if args.url:
        overrides["ws_url"] = args.url
    if args.names:
        overrides["name_mapping_source"] = args.names
    if args.debounce_ms is not None:
        overrides["debounce_threshold_ms"] = args.debounce_ms
    if args.marker_code:
        overrides["marker_code"] = args.marker_code
    if args.marker_resets_laps is not None:
        overrides["marker_resets_laps"] = args.marker_resets_laps

    config = LapTimeConfig.from_env(**overrides)
    board = TerminalBoard(title=args.title, clear=not args.no_clear)

    async with LapTimeClient(config, renderer=board) as client:
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            with contextlib.suppress(NotImplementedError):
                loop.add_signal_handler(sig, client.close)
        await client.run_forever()


def main() -> int:
    args = _parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    asyncio.run(_run(args))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
