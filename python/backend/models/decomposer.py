"""Cell decomposer — maps a tile placement to the kites it covers.

The hat covers 8 kites spread over 3 hexes (4 + 2 + 2).  Because every
placement sits on a lattice point and turns in 60° steps, a placed hat is
always an exact union of lattice kites, so "do two hats overlap?" reduces
to "do their kite sets intersect?".
"""

from __future__ import annotations

import math

from backend.models.hexgrid import SQRT3, Cell, Point, hex_center
from backend.models.tile import TileMemory

# Rotation 0, not mirrored, anchored at the origin hex.
HAT_FOOTPRINT: tuple[Cell, ...] = (
    Cell(0, 0, 0), Cell(0, 0, 1), Cell(0, 0, 4), Cell(0, 0, 5),
    Cell(1, 0, 3), Cell(1, 0, 4),
    Cell(1, -1, 1), Cell(1, -1, 2),
)

CELLS_PER_TILE = len(HAT_FOOTPRINT)

# The same hat as a 13-gon in world units, anchored at the origin hex centre.
HAT_OUTLINE: tuple[Point, ...] = tuple(
    (x + 0.5 * y, SQRT3 / 2 * y)
    for x, y in (
        (0, 0), (-1, -1), (0, -2), (2, -2), (2, -1), (4, -2), (5, -1),
        (4, 0), (3, 0), (2, 2), (0, 3), (0, 2), (-1, 2),
    )
)


def _orient(footprint: tuple[Cell, ...], rotation: int, flipped: bool) -> tuple[Cell, ...]:
    cells = footprint
    if flipped:
        cells = tuple(c.mirrored() for c in cells)
    return tuple(c.rotated(rotation) for c in cells)


ALL_ORIENTATIONS: tuple[tuple[Cell, ...], ...] = tuple(
    _orient(HAT_FOOTPRINT, rotation, flipped)
    for flipped in (False, True)
    for rotation in range(6)
)
"""Index 0-5: rotations of the hat. Index 6-11: rotations of its mirror image."""


def orientation_index(rotation: int, flipped: bool) -> int:
    return (rotation % 6) + (6 if flipped else 0)


def decompose(memory: TileMemory) -> tuple[Cell, ...]:
    """Return the 8 cells covered by *memory*, in footprint order."""
    q, r = memory.position
    return tuple(c.translated(q, r) for c in ALL_ORIENTATIONS[memory.orientation])


def decompose_all(memories) -> list[Cell]:
    """Concatenate the decompositions of a batch, keeping duplicates."""
    return [cell for memory in memories for cell in decompose(memory)]


def hat_outline(memory: TileMemory) -> list[Point]:
    """Return the world-space outline of a placed hat.

    Applies the same transform chain as :func:`decompose`: mirror in the
    vertical axis, rotate, then move to the anchor hex centre.
    """
    ox, oy = hex_center(*memory.position)
    angle = math.radians(60 * memory.rotation)
    cos_a, sin_a = math.cos(angle), math.sin(angle)
    points: list[Point] = []
    for x, y in HAT_OUTLINE:
        if memory.flipped:
            x = -x
        points.append((ox + x * cos_a - y * sin_a, oy + x * sin_a + y * cos_a))
    return points
