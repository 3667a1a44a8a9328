from __future__ import annotations

from pylaptime.connection import ConnectionStatus
from pylaptime.render import Leaderboard, NullRenderer


def test_leaderboard_moves_updated_rows_to_top() -> None:
    board = Leaderboard()
    board.on_transponder_update("A1", "0.00", 0, "Alice", True)
    board.on_transponder_update("B2", "0.00", 0, "B2", True)
    assert board.codes() == ["B2", "A1"]

    board.on_transponder_update("A1", "31.20", 1, "Alice", False)

    assert board.codes() == ["A1", "B2"]
    top = board.rows[0]
    assert (top.lap_time, top.lap_count, top.highlighted) == ("31.20", 1, True)
    assert board.rows[1].highlighted is False


def test_leaderboard_new_rows_are_not_highlighted() -> None:
    board = Leaderboard()
    board.on_transponder_update("A1", "0.00", 0, "A1", True)

    assert board.rows[0].highlighted is False


def test_leaderboard_removal_status_and_title() -> None:
    board = Leaderboard()
    board.on_transponder_update("A1", "0.00", 0, "A1", True)
    board.on_status_change(ConnectionStatus.CONNECTED_READY)
    board.on_first_passing()

    board.on_transponder_removed("A1")
    board.on_transponder_removed("unknown")

    assert board.rows == []
    assert board.status == ConnectionStatus.CONNECTED_READY
    assert board.title_visible is False


def test_null_renderer_accepts_everything() -> None:
    renderer = NullRenderer()
    renderer.on_status_change(ConnectionStatus.CONNECTING)
    renderer.on_transponder_update("A1", "0.00", 0, "A1", True)
    renderer.on_transponder_removed("A1")
    renderer.on_first_passing()
