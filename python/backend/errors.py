"""Exceptions raised by the tiling engine.

Occupied positions are not errors: they are reported as ``False`` /
``ActionResult(ok=False)``.  These exceptions mark misuse or broken
invariants.
"""

from __future__ import annotations


class TilingError(Exception):
    """Base class for engine errors."""
    pass


class TileNotPlacedError(TilingError, KeyError):
    """A tile was addressed at a position holding no placed tile."""

    def __init__(self, position: tuple[int, int]):
        self.position = position
        super().__init__(f"No placed tile at {position}")


class ReadOnlyBoardError(TilingError):
    """A mutation was attempted on an answer board."""
    pass


class InvariantViolationError(TilingError):
    """Occupancy and history disagree; the board can no longer be trusted."""
    pass
