"""Per-session context handed to the engine at construction."""

from __future__ import annotations

from dataclasses import dataclass

from backend.models.solution import Solution
from backend.models.storage import SLOT_COUNT, GameMode


@dataclass(frozen=True)
class SessionContext:
    """What is being edited: the game mode, and the slot/level or solution.

    Built once by the caller (menu, CLI) and never mutated afterwards.
    """

    game_mode: GameMode
    slot: int = 1
    level: int = 0
    solution: Solution | None = None

    def __post_init__(self) -> None:
        if self.game_mode is GameMode.PUZZLE:
            if not 1 <= self.slot <= SLOT_COUNT:
                raise ValueError(f"Slot must be in 1..{SLOT_COUNT}, got {self.slot}.")
            if self.level < 1:
                raise ValueError(f"Puzzle levels start at 1, got {self.level}.")

    @classmethod
    def creative(cls, solution: Solution | None = None) -> SessionContext:
        return cls(GameMode.CREATIVE, solution=solution)

    @classmethod
    def puzzle(cls, slot: int, level: int) -> SessionContext:
        return cls(GameMode.PUZZLE, slot=slot, level=level)

    @property
    def is_puzzle(self) -> bool:
        return self.game_mode is GameMode.PUZZLE
