"""Puzzle completion check against an answer board."""

from __future__ import annotations

import logging
from enum import StrEnum

from backend.models.board import Board
from backend.models.decomposer import CELLS_PER_TILE
from backend.models.occupancy import OccupancySet

logger = logging.getLogger(__name__)


class MatchStatus(StrEnum):
    UNDER = "under"
    EXACT = "exact"
    OVER = "over"


class WinDetector:
    """Compares live occupancy with the answer board's occupancy.

    The answer board is never mutated.  ``solved`` latches the first time
    the live cells match exactly and never resets.
    """

    def __init__(self, answer: Board) -> None:
        self.answer = answer
        self._target = answer.partial_hexes
        self.solved = False

    @property
    def target_tile_count(self) -> int:
        return len(self._target) // CELLS_PER_TILE

    def status(self, occupancy: OccupancySet) -> MatchStatus:
        live = occupancy.count()
        target = len(self._target)
        if live > target:
            return MatchStatus.OVER
        if live == target and occupancy.contains_all(self._target):
            return MatchStatus.EXACT
        return MatchStatus.UNDER

    def evaluate(self, occupancy: OccupancySet) -> tuple[MatchStatus, bool]:
        """Return the status and whether this call is the one that solved it.

        An empty answer board (e.g. a missing level file) never solves.
        """
        status = self.status(occupancy)
        if status is MatchStatus.EXACT and self._target and not self.solved:
            self.solved = True
            logger.info("Puzzle solved with %d tile(s)", self.target_tile_count)
            return status, True
        return status, False
