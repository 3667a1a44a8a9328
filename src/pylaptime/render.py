"""Rendering boundary.

The core never draws anything itself. It reports status changes and
per-transponder updates through the :class:`RenderAdapter` protocol, which a
presentation layer (terminal, web page, LED board) implements.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from pylaptime.connection import ConnectionStatus


class RenderAdapter(Protocol):
    """Structural interface consumed by the core."""

    def on_status_change(self, status: ConnectionStatus) -> None: ...

    def on_transponder_update(
        self,
        code: str,
        lap_time: str,
        lap_count: int,
        display_name: str,
        is_new_entry: bool,
    ) -> None:
        """Draw a row. ``is_new_entry=False`` means move it to the top and highlight it."""
        ...

    def on_transponder_removed(self, code: str) -> None: ...

    def on_first_passing(self) -> None:
        """Called once, before the first competitor row is drawn."""
        ...


class NullRenderer:
    """Renderer that ignores every instruction."""

    def on_status_change(self, status: ConnectionStatus) -> None:
        pass

    def on_transponder_update(
        self,
        code: str,
        lap_time: str,
        lap_count: int,
        display_name: str,
        is_new_entry: bool,
    ) -> None:
        pass

    def on_transponder_removed(self, code: str) -> None:
        pass

    def on_first_passing(self) -> None:
        pass


@dataclass
class LeaderboardRow:
    code: str
    display_name: str
    lap_time: str
    lap_count: int
    highlighted: bool = False


class Leaderboard:
    """In-memory renderer keeping rows ordered by most recent activity.

    New and updated rows move to the top; removed rows disappear. Useful as
    the model behind a concrete display, and in tests.
    """

    def __init__(self) -> None:
        self.rows: list[LeaderboardRow] = []
        self.status: ConnectionStatus | None = None
        self.title_visible = True

    def _pop(self, code: str) -> LeaderboardRow | None:
        for index, row in enumerate(self.rows):
            if row.code == code:
                return self.rows.pop(index)
        return None

    def on_status_change(self, status: ConnectionStatus) -> None:
        self.status = status

    def on_transponder_update(
        self,
        code: str,
        lap_time: str,
        lap_count: int,
        display_name: str,
        is_new_entry: bool,
    ) -> None:
        for row in self.rows:
            row.highlighted = False
        existing = self._pop(code)
        row = LeaderboardRow(
            code=code,
            display_name=display_name,
            lap_time=lap_time,
            lap_count=lap_count,
            highlighted=existing is not None and not is_new_entry,
        )
        self.rows.insert(0, row)

    def on_transponder_removed(self, code: str) -> None:
        self._pop(code)

    def on_first_passing(self) -> None:
        self.title_visible = False

    def codes(self) -> list[str]:
        return [row.code for row in self.rows]
