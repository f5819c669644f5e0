"""Undo/redo history of board edits."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import Iterable

from backend.errors import InvariantViolationError
from backend.models.board import Board
from backend.models.tile import Color, TileMemory

logger = logging.getLogger(__name__)


class Action(StrEnum):
    PUT = "put"
    REMOVE = "remove"
    PAINT = "paint"


_INVERSE = {Action.PUT: Action.REMOVE, Action.REMOVE: Action.PUT}


@dataclass(frozen=True)
class HistoryRecord:
    """One reversible edit.

    ``PUT`` / ``REMOVE`` carry an ordered batch that is applied and reverted
    as a unit.  ``PAINT`` carries exactly one tile, holding its new colour,
    plus the colour it replaced.
    """

    action: Action
    tiles: tuple[TileMemory, ...]
    previous_color: Color | None = None

    def __post_init__(self) -> None:
        if self.action is Action.PAINT:
            if len(self.tiles) != 1 or self.previous_color is None:
                raise ValueError("A paint record needs one tile and its previous colour.")
        elif not self.tiles:
            raise ValueError(f"A {self.action} record needs at least one tile.")

    @classmethod
    def put(cls, batch: Iterable[TileMemory]) -> HistoryRecord:
        return cls(Action.PUT, tuple(batch))

    @classmethod
    def remove(cls, batch: Iterable[TileMemory]) -> HistoryRecord:
        return cls(Action.REMOVE, tuple(batch))

    @classmethod
    def paint(cls, tile: TileMemory, previous_color: Color) -> HistoryRecord:
        return cls(Action.PAINT, (tile,), previous_color)


class History:
    """Two stacks of records layered on a board.

    ``undo`` holds committed actions (most recent last), ``redo`` the
    actions that have been undone.  Every newly committed action empties
    ``redo``.
    """

    def __init__(self, board: Board) -> None:
        self.board = board
        self._undo: list[HistoryRecord] = []
        self._redo: list[HistoryRecord] = []

    # -- committing -----------------------------------------------------------

    def put(self, batch: Iterable[TileMemory]) -> bool:
        """Place *batch* and record it. Returns False (and records nothing) on collision."""
        batch = tuple(batch)
        if not batch:
            return False
        if not self.board.put(batch):
            return False
        self.record(HistoryRecord.put(batch))
        return True

    def remove(self, batch: Iterable[TileMemory]) -> bool:
        batch = tuple(batch)
        if not batch:
            return False
        # Record what is actually on the board so undo restores current colours.
        removed = self.board.remove(batch)
        self.record(HistoryRecord.remove(removed))
        return True

    def paint(self, position: tuple[int, int], color: Color) -> bool:
        tile = self.board.require(position)
        previous = self.board.paint(position, color)
        self.record(HistoryRecord.paint(tile.with_color(color), previous))
        return True

    def record(self, record: HistoryRecord) -> None:
        """Push an already-applied record and drop the redo chain."""
        logger.debug("History: %s x%d", record.action, len(record.tiles))
        self._undo.append(record)
        self._redo.clear()

    # -- undo / redo ----------------------------------------------------------

    def undo(self) -> HistoryRecord | None:
        if not self._undo:
            return None
        record = self._undo.pop()
        self._replay(record, forward=False)
        self._redo.append(record)
        return record

    def redo(self) -> HistoryRecord | None:
        if not self._redo:
            return None
        record = self._redo.pop()
        self._replay(record, forward=True)
        self._undo.append(record)
        return record

    # -- queries --------------------------------------------------------------

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    @property
    def undo_records(self) -> tuple[HistoryRecord, ...]:
        return tuple(self._undo)

    @property
    def redo_records(self) -> tuple[HistoryRecord, ...]:
        return tuple(self._redo)

    def clear(self) -> None:
        self._undo.clear()
        self._redo.clear()

    # -- helpers --------------------------------------------------------------

    def _replay(self, record: HistoryRecord, forward: bool) -> None:
        if record.action is Action.PAINT:
            tile = record.tiles[0]
            color = tile.color if forward else record.previous_color
            self.board.paint(tile.position, color)
            return

        action = record.action if forward else _INVERSE[record.action]
        if action is Action.PUT:
            if not self.board.put(record.tiles):
                raise InvariantViolationError(
                    f"Replaying {record.action} could not re-add its cells."
                )
        else:
            self.board.remove(record.tiles)
