"""Core gameplay logic — commits edits, keeps history and checks the puzzle target."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Iterable

from backend.engine.gamestate import SessionContext
from backend.engine.history import History, HistoryRecord
from backend.engine.windetector import MatchStatus, WinDetector
from backend.errors import InvariantViolationError
from backend.models.board import PALETTE_SIZE, Board
from backend.models.decomposer import decompose
from backend.models.hexgrid import Cell
from backend.models.solution import Solution, unique_name
from backend.models.storage import GameMode, SolutionStore
from backend.models.tile import Color, TileMemory

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActionResult:
    """Outcome of one mutating call.

    ``status`` is only set in puzzle mode; ``solved`` is True for the single
    call that first completed the puzzle.
    """

    ok: bool
    tile_count: int
    status: MatchStatus | None = None
    solved: bool = False


class TilingSession:
    """Orchestrates a single editing session.

    The session is the only writer of its board, history and hand.  Every
    mutating method is one critical section under ``_lock``; queries may run
    between them.

    Tiles in hand ("grabbed") are outside the occupancy.  Tiles lifted from
    the board keep their origins until the hand is placed (committed as a
    remove of the origins followed by a put) or discarded (origins restored,
    nothing recorded).  While the hand holds tiles, other edits and
    undo/redo are refused.  Only committed edits can solve a puzzle; hand
    changes report the match status without latching it.
    """

    def __init__(
        self,
        context: SessionContext,
        store: SolutionStore | None = None,
        *,
        board: Board | None = None,
        answer: Board | None = None,
    ) -> None:
        self.context = context
        self.store = store
        self._lock = threading.Lock()

        self.solution = self._load_solution()
        if board is not None:
            self.solution.board = board
        self.board = self.solution.board.copy()
        self.board.read_only = False
        self.board.drop_grabbed()
        self.history = History(self.board)
        self._origins: list[TileMemory] = []
        self._swatch = 0

        self.detector: WinDetector | None = None
        if context.is_puzzle:
            if answer is None:
                answer = (
                    store.load_answer_board(context.level)
                    if store is not None else Board(read_only=True)
                )
            self.detector = WinDetector(answer.frozen())

        logger.debug(
            "Session started: %s, %d tile(s) loaded",
            context.game_mode, self.board.placed_tile_count(),
        )

    @classmethod
    def from_board(cls, board: Board, answer: Board | None = None) -> TilingSession:
        """Create a store-less session over *board* (puzzle mode if *answer* is given)."""
        context = (
            SessionContext.puzzle(slot=1, level=1)
            if answer is not None else SessionContext.creative()
        )
        return cls(context, board=board, answer=answer)

    def _load_solution(self) -> Solution:
        ctx = self.context
        if ctx.solution is not None:
            return ctx.solution
        if ctx.game_mode is GameMode.PUZZLE:
            solution = Solution.new(f"solution{ctx.level}")
        else:
            names = (
                [s.name for s in self.store.load_creative_solutions()]
                if self.store is not None else []
            )
            solution = Solution.new(unique_name("untitled", names))
        if self.store is not None:
            solution.board = self.store.load_board(ctx.game_mode, ctx.slot, ctx.level)
        return solution

    # -- committed edits ------------------------------------------------------

    def put(self, batch: Iterable[TileMemory]) -> ActionResult:
        """Place *batch* atomically; fails without change on any collision."""
        with self._lock:
            if self.board.grabbed_tiles:
                return self._result(False)
            return self._result(self.history.put(batch))

    def remove(self, batch: Iterable[TileMemory]) -> ActionResult:
        """Remove the placed tiles at the positions of *batch*.

        Positions holding no tile are ignored; the call fails if none is left.
        """
        with self._lock:
            if self.board.grabbed_tiles:
                return self._result(False)
            placed = [t for t in batch if self.board.tile_at(t.position) is not None]
            return self._result(self.history.remove(placed))

    def remove_at(self, positions: Iterable[tuple[int, int]]) -> ActionResult:
        return self.remove([TileMemory(p) for p in positions])

    def paint(self, position: tuple[int, int], color: Color | None = None) -> ActionResult:
        """Recolour one placed tile (default: the selected swatch)."""
        with self._lock:
            if self.board.grabbed_tiles or self.board.tile_at(position) is None:
                return self._result(False)
            color = self.current_color if color is None else color
            return self._result(self.history.paint(position, color))

    def undo(self) -> ActionResult:
        with self._lock:
            if self.board.grabbed_tiles:
                return self._result(False)
            return self._result(self.history.undo() is not None)

    def redo(self) -> ActionResult:
        with self._lock:
            if self.board.grabbed_tiles:
                return self._result(False)
            return self._result(self.history.redo() is not None)

    # -- hand -----------------------------------------------------------------

    def spawn(self, position: tuple[int, int], rotation: int = 0, flipped: bool = False) -> ActionResult:
        """Take a new tile of the selected colour into the empty hand."""
        with self._lock:
            if self.board.grabbed_tiles:
                return self._hand_result(False)
            tile = TileMemory(position, rotation % 6, flipped, self.current_color)
            self.board.grabbed_tiles.append(tile)
            return self._hand_result(True)

    def grab(self, positions: Iterable[tuple[int, int]]) -> ActionResult:
        """Lift placed tiles into the empty hand; their cells become free."""
        with self._lock:
            if self.board.grabbed_tiles:
                return self._hand_result(False)
            placed = [p for p in positions if self.board.tile_at(p) is not None]
            if not placed:
                return self._hand_result(False)
            self._origins = self.board.lift(placed)
            return self._hand_result(True)

    def copy(self, positions: Iterable[tuple[int, int]]) -> ActionResult:
        """Take copies of placed tiles into the empty hand."""
        with self._lock:
            if self.board.grabbed_tiles:
                return self._hand_result(False)
            tiles = [t for t in map(self.board.tile_at, positions) if t is not None]
            if not tiles:
                return self._hand_result(False)
            self.board.grabbed_tiles.extend(tiles)
            return self._hand_result(True)

    def rotate_hand(self, steps: int = 1, pivot: tuple[int, int] | None = None) -> ActionResult:
        """Turn the whole hand by ``60°·steps`` about *pivot* (default: its first tile)."""
        with self._lock:
            hand = self.board.grabbed_tiles
            if not hand:
                return self._hand_result(False)
            pivot = hand[0].position if pivot is None else pivot
            self.board.grabbed_tiles = [t.rotated(steps, pivot) for t in hand]
            return self._hand_result(True)

    def flip_hand(self, pivot: tuple[int, int] | None = None) -> ActionResult:
        with self._lock:
            hand = self.board.grabbed_tiles
            if not hand:
                return self._hand_result(False)
            pivot = hand[0].position if pivot is None else pivot
            self.board.grabbed_tiles = [t.mirrored(pivot) for t in hand]
            return self._hand_result(True)

    def move_hand(self, dq: int, dr: int) -> ActionResult:
        with self._lock:
            hand = self.board.grabbed_tiles
            if not hand:
                return self._hand_result(False)
            self.board.grabbed_tiles = [t.translated(dq, dr) for t in hand]
            return self._hand_result(True)

    def place_hand(self) -> ActionResult:
        """Put the hand down. On collision nothing changes and the hand is kept."""
        with self._lock:
            hand = list(self.board.grabbed_tiles)
            if not hand or not self.board.put(hand):
                return self._result(False)
            if self._origins:
                self.history.record(HistoryRecord.remove(self._origins))
            self.history.record(HistoryRecord.put(hand))
            self.board.drop_grabbed()
            self._origins = []
            return self._result(True)

    def stamp_hand(self) -> ActionResult:
        """Put down every in-hand copy that fits, keeping the hand.

        Only for hands of new or copied tiles; a lifted hand must be placed
        or discarded.  Lifted tiles are not a reusable blueprint: they keep
        their origins so that discard can restore them, and stamping them
        would duplicate those tiles.
        """
        with self._lock:
            if self._origins:
                return self._result(False)
            fits = [
                t for t in self.board.grabbed_tiles
                if not self.board.occupancy.contains_any(decompose(t))
            ]
            if not fits or not self.board.put(fits):
                return self._result(False)
            self.history.record(HistoryRecord.put(fits))
            return self._result(True)

    def discard_hand(self) -> ActionResult:
        """Drop the hand without recording anything; lifted tiles go back."""
        with self._lock:
            if not self.board.grabbed_tiles:
                return self._hand_result(False)
            self.board.drop_grabbed()
            if self._origins and not self.board.put(self._origins):
                raise InvariantViolationError("Lifted tiles could not be restored.")
            self._origins = []
            return self._hand_result(True)

    @property
    def hand(self) -> tuple[TileMemory, ...]:
        return tuple(self.board.grabbed_tiles)

    # -- palette --------------------------------------------------------------

    @property
    def palette(self) -> tuple[Color, ...]:
        return tuple(self.board.color_palette)

    @property
    def swatch(self) -> int:
        return self._swatch

    @property
    def current_color(self) -> Color:
        return self.board.color_palette[self._swatch]

    def select_swatch(self, index: int) -> Color:
        with self._lock:
            self._select_swatch(index)
            return self.current_color

    def set_swatch(self, color: Color, index: int | None = None) -> None:
        """Change a palette colour (default: the selected swatch). Not recorded in history."""
        with self._lock:
            if index is not None:
                self._select_swatch(index)
            self.board.color_palette[self._swatch] = color

    def pipette(self, position: tuple[int, int]) -> Color | None:
        """Copy the colour of the tile at *position* into the selected swatch."""
        with self._lock:
            tile = self.board.tile_at(position)
            if tile is None:
                return None
            self.board.color_palette[self._swatch] = tile.color
            return tile.color

    def _select_swatch(self, index: int) -> None:
        if not 0 <= index < PALETTE_SIZE:
            raise ValueError(f"Swatch must be in 0..{PALETTE_SIZE - 1}, got {index}.")
        self._swatch = index

    # -- queries --------------------------------------------------------------

    def placed_tile_count(self) -> int:
        return self.board.placed_tile_count()

    @staticmethod
    def decompose(memory: TileMemory) -> tuple[Cell, ...]:
        return decompose(memory)

    def contains_any(self, cells: Iterable[Cell]) -> bool:
        return self.board.occupancy.contains_any(cells)

    def contains_all(self, cells: Iterable[Cell]) -> bool:
        return self.board.occupancy.contains_all(cells)

    def can_place(self, batch: Iterable[TileMemory]) -> bool:
        """Hover preview: would *batch* fit right now?"""
        return self.board.can_put(batch)

    def match_status(self) -> MatchStatus | None:
        if self.detector is None:
            return None
        return self.detector.status(self.board.occupancy)

    @property
    def target_tile_count(self) -> int | None:
        return self.detector.target_tile_count if self.detector else None

    @property
    def is_solved(self) -> bool:
        return self.detector is not None and self.detector.solved

    @property
    def can_undo(self) -> bool:
        return not self.board.grabbed_tiles and self.history.can_undo

    @property
    def can_redo(self) -> bool:
        return not self.board.grabbed_tiles and self.history.can_redo

    # -- persistence ----------------------------------------------------------

    def snapshot(self) -> Board:
        """Return a detached copy of the board as it would be saved.

        Lifted tiles count as still placed; the hand is not included.
        """
        with self._lock:
            return self._snapshot()

    def save(self) -> Solution:
        """Write the snapshot back through the store and return the solution.

        A solved puzzle is not saved: its in-progress file was already
        cleared when it was solved.
        """
        with self._lock:
            self.solution.touch(self._snapshot())
            if self.store is None or self.is_solved:
                return self.solution
            if self.context.is_puzzle:
                self.store.save_puzzle_solution(self.context.slot, self.context.level, self.solution)
            else:
                self.store.save_creative_solution(self.solution)
            logger.info("Saved %r (%d tile(s))", self.solution.name, self.solution.board.placed_tile_count())
            return self.solution

    # -- helpers --------------------------------------------------------------

    def _snapshot(self) -> Board:
        board = self.board.copy()
        board.drop_grabbed()
        if self._origins and not board.put(self._origins):
            raise InvariantViolationError("Lifted tiles overlap the board.")
        return board

    def _result(self, ok: bool) -> ActionResult:
        """Result of a committed edit; a successful one may latch the puzzle."""
        if not ok or self.detector is None:
            return self._hand_result(ok)
        status, solved = self.detector.evaluate(self.board.occupancy)
        if solved:
            self._on_solved()
        return ActionResult(True, self.board.placed_tile_count(), status, solved)

    def _hand_result(self, ok: bool) -> ActionResult:
        """Result of a rejected edit or a hand change: status only, never solves."""
        if not ok:
            logger.debug("Action rejected")
        status = self.detector.status(self.board.occupancy) if self.detector else None
        return ActionResult(ok, self.board.placed_tile_count(), status)

    def _on_solved(self) -> None:
        if self.store is None:
            return
        ctx = self.context
        self.store.advance_level(ctx.slot, ctx.level)
        self.store.delete_puzzle_solution(ctx.slot, ctx.level)
