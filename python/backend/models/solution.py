"""Saved solutions — a named, timestamped board."""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field

from backend.models.board import Board


def _new_file_name() -> str:
    return uuid.uuid4().hex + ".json"


@dataclass
class Solution:
    name: str
    created_at: float
    updated_at: float
    board: Board = field(default_factory=Board)
    # Not persisted; assigned by the store from the file it was read from.
    file_name: str = field(default_factory=_new_file_name, compare=False)

    @classmethod
    def new(cls, name: str) -> Solution:
        now = time.time()
        return cls(name=name, created_at=now, updated_at=now)

    def touch(self, board: Board) -> None:
        """Replace the board with *board* and bump ``updated_at``."""
        self.board = board
        self.updated_at = time.time()

    # -- serialization --------------------------------------------------------

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "board": self.board.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> Solution:
        try:
            return cls(
                name=str(data["name"]),
                created_at=float(data["created_at"]),
                updated_at=float(data["updated_at"]),
                board=Board.from_dict(data.get("board") or {}),
            )
        except (KeyError, TypeError) as exc:
            raise ValueError(f"Malformed solution data: {exc!r}") from exc


def unique_name(name: str, names: list[str]) -> str:
    """Return *name*, or ``"name (n)"`` with the smallest free ``n``."""
    if name not in names:
        return name
    n = 1
    while f"{name} ({n})" in names:
        n += 1
    return f"{name} ({n})"
