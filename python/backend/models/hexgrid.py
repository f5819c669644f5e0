"""Hex lattice geometry — axial coordinates and kite cells.

Each hexagon is split into six kites by the segments joining its centre to
its edge midpoints.  Kite ``k`` is the one containing the hexagon vertex at
angle ``60°·k``.  A kite is the atomic collision unit of the board: tiles
are unions of kites, so two tiles overlap exactly when they share a kite.

World layout::

    hex centre (q, r)   -> (3q, √3·(q + 2r))
    hexagon side        =  2
    centre → midpoint   =  √3   (directions 30° + 60°·j)
    centre → vertex     =  2    (directions 60°·k)
"""

from __future__ import annotations

import math
from dataclasses import dataclass

SQRT3 = math.sqrt(3)

# Axial neighbour offsets, counter-clockwise starting at 30°.
HEX_DIRECTIONS: tuple[tuple[int, int], ...] = (
    (1, 0), (0, 1), (-1, 1), (-1, 0), (0, -1), (1, -1),
)

Point = tuple[float, float]


@dataclass(frozen=True, order=True)
class Cell:
    """One kite of the lattice, identified by its hexagon and kite index."""

    q: int
    r: int
    kite: int

    def __post_init__(self) -> None:
        if not 0 <= self.kite < 6:
            raise ValueError(f"Kite index must be in 0..5, got {self.kite}.")

    @property
    def hex(self) -> tuple[int, int]:
        return (self.q, self.r)

    def translated(self, dq: int, dr: int) -> Cell:
        return Cell(self.q + dq, self.r + dr, self.kite)

    def rotated(self, steps: int = 1) -> Cell:
        """Rotate about the origin hex by ``60°·steps`` counter-clockwise."""
        q, r = rotate_hex(self.q, self.r, steps)
        return Cell(q, r, (self.kite + steps) % 6)

    def mirrored(self) -> Cell:
        """Mirror in the vertical axis through the origin hex (x → -x)."""
        q, r = mirror_hex(self.q, self.r)
        return Cell(q, r, (3 - self.kite) % 6)


# -- axial transforms ----------------------------------------------------------


def rotate_hex(q: int, r: int, steps: int = 1) -> tuple[int, int]:
    """Rotate an axial vector counter-clockwise by ``60°·steps``."""
    for _ in range(steps % 6):
        q, r = -r, q + r
    return q, r


def mirror_hex(q: int, r: int) -> tuple[int, int]:
    return -q, q + r


def rotate_about(
    position: tuple[int, int], pivot: tuple[int, int], steps: int
) -> tuple[int, int]:
    dq, dr = rotate_hex(position[0] - pivot[0], position[1] - pivot[1], steps)
    return pivot[0] + dq, pivot[1] + dr


def mirror_about(
    position: tuple[int, int], pivot: tuple[int, int]
) -> tuple[int, int]:
    dq, dr = mirror_hex(position[0] - pivot[0], position[1] - pivot[1])
    return pivot[0] + dq, pivot[1] + dr


# -- world coordinates ---------------------------------------------------------


def hex_center(q: int, r: int) -> Point:
    return (3.0 * q, SQRT3 * (q + 2 * r))


def _polar(radius: float, degrees: float) -> Point:
    rad = math.radians(degrees)
    return (radius * math.cos(rad), radius * math.sin(rad))


def kite_polygon(cell: Cell) -> list[Point]:
    """Return the four world-space corners of *cell*, counter-clockwise."""
    cx, cy = hex_center(cell.q, cell.r)
    angle = 60.0 * cell.kite
    corners = [(0.0, 0.0), _polar(SQRT3, angle - 30), _polar(2.0, angle), _polar(SQRT3, angle + 30)]
    return [(cx + x, cy + y) for x, y in corners]


def kite_centroid(cell: Cell) -> Point:
    corners = kite_polygon(cell)
    return (
        sum(x for x, _ in corners) / 4.0,
        sum(y for _, y in corners) / 4.0,
    )


def nearest_oblique(x: float, y: float) -> tuple[int, int]:
    """Snap a world point to the axial coordinate of the nearest hex centre.

    Uses cube-coordinate rounding: the component with the largest rounding
    error is recomputed from the other two.
    """
    qf = x / 3.0
    rf = (y / SQRT3 - qf) / 2.0
    sf = -qf - rf

    q, r, s = round(qf), round(rf), round(sf)
    dq, dr, ds = abs(q - qf), abs(r - rf), abs(s - sf)
    if dq > dr and dq > ds:
        q = -r - s
    elif dr > ds:
        r = -q - s
    return int(q), int(r)
