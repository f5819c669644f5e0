"""Solution, progress and answer-board persistence as JSON files."""

from __future__ import annotations

import json
import logging
import shutil
from enum import StrEnum
from pathlib import Path

from backend.models.board import Board
from backend.models.solution import Solution, unique_name

logger = logging.getLogger(__name__)

SLOT_COUNT = 3
LEVELS_DIR = Path(__file__).resolve().parent.parent / "data" / "levels"


class GameMode(StrEnum):
    CREATIVE = "creative"
    PUZZLE = "puzzle"


class SolutionStore:
    """Loads and saves solutions, puzzle progress and answer boards.

    Layout under *data_dir*::

        creative/<uuid>.json          free-form solutions (+ .backup)
        puzzle/slot<n>/solution<level>.json
        progress.json                 active slot, unlocked level per slot

    Missing or corrupt files are logged and replaced by empty defaults;
    callers never see a parse error.
    """

    def __init__(self, data_dir: Path, levels_dir: Path = LEVELS_DIR) -> None:
        self.data_dir = data_dir
        self.levels_dir = levels_dir
        self.creative_dir = data_dir / "creative"
        self.puzzle_root = data_dir / "puzzle"
        self.progress_file = data_dir / "progress.json"
        self._active_slot: int = 1
        self._levels: dict[str, int] = {}
        self._load_progress()

    # -- progress -------------------------------------------------------------

    def _load_progress(self) -> None:
        data = self._read_json(self.progress_file)
        if not isinstance(data, dict):
            return
        try:
            slot = int(data.get("active_slot", 1))
            levels = {str(k): int(v) for k, v in (data.get("current_level") or {}).items()}
        except (AttributeError, TypeError, ValueError) as exc:
            logger.error("Ignoring corrupt progress file %s: %s", self.progress_file, exc)
            return
        self._active_slot = slot if 1 <= slot <= SLOT_COUNT else 1
        self._levels = levels

    def save_progress(self) -> None:
        self._write_json(
            self.progress_file,
            {"active_slot": self._active_slot, "current_level": self._levels},
        )

    @property
    def active_slot(self) -> int:
        return self._active_slot

    def set_active_slot(self, slot: int) -> None:
        self._check_slot(slot)
        self._active_slot = slot
        self.save_progress()

    def current_level(self, slot: int) -> int:
        """Highest level solved in *slot* (0 when nothing is solved)."""
        return self._levels.get(str(slot), 0)

    def advance_level(self, slot: int, level: int) -> int:
        """Record *level* as solved; the stored value never decreases."""
        self._check_slot(slot)
        reached = max(level, self.current_level(slot))
        self._levels[str(slot)] = reached
        self.save_progress()
        logger.info("Slot %d progress: level %d", slot, reached)
        return reached

    def delete_slot(self, slot: int) -> None:
        self._check_slot(slot)
        self._levels.pop(str(slot), None)
        self.save_progress()
        slot_dir = self._slot_dir(slot)
        if slot_dir.exists():
            shutil.rmtree(slot_dir)

    # -- creative solutions ---------------------------------------------------

    def load_creative_solutions(self) -> list[Solution]:
        """Return every readable creative solution, oldest update first."""
        result: list[Solution] = []
        if not self.creative_dir.exists():
            return result
        for path in self.creative_dir.glob("*.json"):
            data = self._read_json(path)
            if data is None:
                continue
            try:
                solution = Solution.from_dict(data)
            except ValueError as exc:
                logger.error("Skipping corrupt solution %s: %s", path.name, exc)
                continue
            solution.file_name = path.name
            result.append(solution)
        result.sort(key=lambda s: (s.updated_at, s.name))
        return result

    def find_creative_solution(self, name: str) -> Solution | None:
        for solution in self.load_creative_solutions():
            if solution.name == name:
                return solution
        return None

    def save_creative_solution(self, solution: Solution) -> None:
        path = self.creative_dir / solution.file_name
        self._backup(path)
        self._write_json(path, solution.to_dict())

    def rename_creative_solution(self, solution: Solution, name: str) -> str:
        """Rename and save *solution*; a taken name gets a ``(n)`` suffix."""
        name = name.strip()
        if not name:
            raise ValueError("Solution names cannot be empty.")
        others = [
            s.name for s in self.load_creative_solutions()
            if s.file_name != solution.file_name
        ]
        solution.name = unique_name(name, others)
        self.save_creative_solution(solution)
        logger.info("Renamed solution %s to %r", solution.file_name, solution.name)
        return solution.name

    def delete_creative_solution(self, solution: Solution) -> None:
        path = self.creative_dir / solution.file_name
        if not path.exists():
            return
        self._backup(path)
        path.unlink()

    # -- puzzle solutions -----------------------------------------------------

    def load_puzzle_solution(self, slot: int, level: int) -> Solution | None:
        data = self._read_json(self._puzzle_file(slot, level))
        if data is None:
            return None
        try:
            return Solution.from_dict(data)
        except ValueError as exc:
            logger.error("Ignoring corrupt puzzle solution (slot %d, level %d): %s", slot, level, exc)
            return None

    def save_puzzle_solution(self, slot: int, level: int, solution: Solution) -> None:
        self._write_json(self._puzzle_file(slot, level), solution.to_dict())

    def delete_puzzle_solution(self, slot: int, level: int) -> None:
        path = self._puzzle_file(slot, level)
        if path.exists():
            path.unlink()

    # -- boards ---------------------------------------------------------------

    def load_board(self, game_mode: GameMode, slot: int = 1, level: int = 0) -> Board:
        """Return the board a new session starts from.

        Puzzle mode resumes the level's saved attempt, or an empty board.
        Creative mode always starts empty; saved creative solutions are
        reopened by passing the solution itself to the session.
        """
        if game_mode is GameMode.PUZZLE:
            solution = self.load_puzzle_solution(slot, level)
            if solution is not None:
                return solution.board
        return Board()

    def load_answer_board(self, level: int) -> Board:
        """Return the read-only target board for *level*."""
        path = self.levels_dir / f"level{level}.json"
        data = self._read_json(path)
        if data is None:
            logger.error("No answer board for level %d at %s", level, path)
            return Board(read_only=True)
        try:
            return Board.from_dict(data, read_only=True)
        except ValueError as exc:
            logger.error("Corrupt answer board for level %d: %s", level, exc)
            return Board(read_only=True)

    def total_levels(self) -> int:
        if not self.levels_dir.exists():
            return 0
        return len(list(self.levels_dir.glob("level*.json")))

    # -- helpers --------------------------------------------------------------

    def _slot_dir(self, slot: int) -> Path:
        return self.puzzle_root / f"slot{slot}"

    def _puzzle_file(self, slot: int, level: int) -> Path:
        self._check_slot(slot)
        return self._slot_dir(slot) / f"solution{level}.json"

    @staticmethod
    def _check_slot(slot: int) -> None:
        if not 1 <= slot <= SLOT_COUNT:
            raise ValueError(f"Slot must be in 1..{SLOT_COUNT}, got {slot}.")

    @staticmethod
    def _read_json(path: Path) -> dict | None:
        if not path.exists():
            return None
        try:
            return json.loads(path.read_text())
        except (OSError, ValueError) as exc:
            logger.error("Failed to read %s: %s", path, exc)
            return None

    @staticmethod
    def _write_json(path: Path, data: dict) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=2) + "\n")

    @staticmethod
    def _backup(path: Path) -> None:
        if path.exists():
            shutil.copyfile(path, path.with_name(path.name + ".backup"))
