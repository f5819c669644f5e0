"""History tests — undo/redo of put, remove and paint."""

from __future__ import annotations

import pytest

from backend.engine.history import Action, History, HistoryRecord
from backend.errors import InvariantViolationError
from backend.models.board import Board
from backend.models.tile import Color, TileMemory

RED = Color(255, 0, 0)
GREEN = Color(0, 255, 0)

A = TileMemory((0, 0), 0, False, RED)
B = TileMemory((10, 0), 3, False, RED)
C = TileMemory((0, 10), 1, True, GREEN)
CLASHES_WITH_A = TileMemory((1, 0), 0)


def _state(board: Board) -> tuple:
    return (dict(board._placed), board.partial_hexes)


@pytest.fixture
def history() -> History:
    return History(Board())


# -- committing -------------------------------------------------------------------


def test_failed_put_records_nothing(history: History) -> None:
    assert history.put([A])
    assert not history.put([CLASHES_WITH_A])
    assert len(history.undo_records) == 1


def test_empty_batches_are_refused(history: History) -> None:
    assert not history.put([])
    assert not history.remove([])
    assert not history.can_undo


def test_new_action_clears_redo(history: History) -> None:
    history.put([A])
    history.undo()
    assert history.can_redo
    history.put([B])
    assert not history.can_redo


def test_remove_records_current_colours(history: History) -> None:
    history.put([A])
    history.paint((0, 0), GREEN)
    history.remove([TileMemory((0, 0))])
    record = history.undo_records[-1]
    assert record.action is Action.REMOVE
    assert record.tiles[0].color == GREEN


# -- undo / redo ------------------------------------------------------------------


def test_undo_redo_round_trip(history: History) -> None:
    board = history.board
    states = [_state(board)]
    history.put([A, B])
    states.append(_state(board))
    history.put([C])
    states.append(_state(board))
    history.remove([B])
    states.append(_state(board))

    for expected in reversed(states[:-1]):
        assert history.undo() is not None
        assert _state(board) == expected
    assert history.undo() is None

    for expected in states[1:]:
        assert history.redo() is not None
        assert _state(board) == expected
    assert history.redo() is None


def test_undo_batch_removes_whole_batch(history: History) -> None:
    history.put([A, B, C])
    history.undo()
    assert history.board.placed_tile_count() == 0
    assert history.board.occupancy.count() == 0


def test_paint_undo_restores_previous_colour(history: History) -> None:
    history.put([A])
    history.paint((0, 0), GREEN)
    cells = history.board.partial_hexes

    history.undo()
    assert history.board.tile_at((0, 0)).color == RED
    history.redo()
    assert history.board.tile_at((0, 0)).color == GREEN
    assert history.board.partial_hexes == cells


def test_redo_onto_occupied_cells_is_an_invariant_violation(history: History) -> None:
    history.put([A])
    history.undo()
    # Bypass the history so redo finds its cells taken.
    history.board.put([CLASHES_WITH_A])
    with pytest.raises(InvariantViolationError):
        history.redo()


def test_clear(history: History) -> None:
    history.put([A])
    history.undo()
    history.put([B])
    history.clear()
    assert not history.can_undo and not history.can_redo


# -- records ------------------------------------------------------------------------


def test_paint_record_needs_one_tile_and_colour() -> None:
    with pytest.raises(ValueError):
        HistoryRecord(Action.PAINT, (A, B), RED)
    with pytest.raises(ValueError):
        HistoryRecord(Action.PAINT, (A,))


def test_put_record_needs_tiles() -> None:
    with pytest.raises(ValueError):
        HistoryRecord.put([])
