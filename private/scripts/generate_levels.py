#!/usr/bin/env python3
"""Generate the puzzle answer boards shipped with the game.

Run once from the project root::

    python private/scripts/generate_levels.py

Writes one ``level<n>.json`` per level into
``python/backend/data/levels/``.  Each level adds one hat to the previous
one, so the levels grow from a single tile to an interlocking cluster.
Every board is validated through the real ``Board`` (which rejects
overlapping tiles) before it is written.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

# Resolve paths: this script lives in <project_root>/private/scripts/
SCRIPT_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = SCRIPT_DIR.parent.parent
PYTHON_ROOT = PROJECT_ROOT / "python"

if str(PYTHON_ROOT) not in sys.path:
    sys.path.insert(0, str(PYTHON_ROOT))

from backend.models.board import Board  # noqa: E402
from backend.models.tile import Color, TileMemory  # noqa: E402

LEVELS_DIR = PYTHON_ROOT / "backend" / "data" / "levels"

# (position, rotation, flipped, colour), added one per level.
TILES: list[tuple[tuple[int, int], int, bool, str]] = [
    ((0, 0), 0, False, "#f2c14e"),
    # Tucks its two-kite lobe into the free kites 2-3 of hex (0, 0).
    ((-1, 1), 5, False, "#3a86ff"),
    ((2, 1), 0, True, "#b4436c"),
    ((-2, -1), 3, False, "#5fad56"),
]


def _level_board(count: int) -> Board:
    tiles = [
        TileMemory(position, rotation, flipped, Color.from_hex(color))
        for position, rotation, flipped, color in TILES[:count]
    ]
    # Board() raises ValueError if any two tiles overlap.
    return Board(tiles)


def main() -> None:
    LEVELS_DIR.mkdir(parents=True, exist_ok=True)
    for level in range(1, len(TILES) + 1):
        board = _level_board(level)
        path = LEVELS_DIR / f"level{level}.json"
        path.write_text(json.dumps(board.to_dict(), indent=2) + "\n")
        print(f"  → {path.name}  ({board.placed_tile_count()} tiles) ✓")
    print("Done!")


if __name__ == "__main__":
    main()
