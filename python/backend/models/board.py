"""Board model for the tiling game."""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from backend.errors import ReadOnlyBoardError, TileNotPlacedError
from backend.models.decomposer import CELLS_PER_TILE, decompose, decompose_all
from backend.models.hexgrid import Cell
from backend.models.occupancy import OccupancySet
from backend.models.tile import Color, TileMemory

logger = logging.getLogger(__name__)

PALETTE_SIZE = 8

DEFAULT_PALETTE: tuple[Color, ...] = tuple(
    Color.from_hex(h)
    for h in (
        "#ffffff", "#f2c14e", "#f78154", "#5fad56",
        "#4d9078", "#3a86ff", "#b4436c", "#2b2d42",
    )
)


class Board:
    """Placed tiles, their derived occupancy, the hand and the palette.

    Placed tiles are keyed by position: two hats anchored on the same hex
    always share a kite, so a position identifies at most one placed tile.
    The occupancy is kept equal to the union of the placed tiles' cells by
    every mutator; nothing else may touch it.

    A ``read_only`` board is an answer key: it is only ever queried.
    """

    def __init__(
        self,
        placed_tiles: Iterable[TileMemory] = (),
        color_palette: Sequence[Color] | None = None,
        grabbed_tiles: Iterable[TileMemory] = (),
        read_only: bool = False,
    ) -> None:
        palette = list(DEFAULT_PALETTE if color_palette is None else color_palette)
        if len(palette) != PALETTE_SIZE:
            raise ValueError(
                f"Expected {PALETTE_SIZE} palette colours, got {len(palette)}."
            )
        self.color_palette: list[Color] = palette
        self.grabbed_tiles: list[TileMemory] = list(grabbed_tiles)
        self.occupancy = OccupancySet()
        self._placed: dict[tuple[int, int], TileMemory] = {}
        self.read_only = False
        if not self.put(placed_tiles):
            raise ValueError("Placed tiles overlap.")
        self.read_only = read_only

    # -- queries --------------------------------------------------------------

    @property
    def placed_tiles(self) -> list[TileMemory]:
        return list(self._placed.values())

    @property
    def partial_hexes(self) -> frozenset[Cell]:
        return self.occupancy.snapshot()

    def tile_at(self, position: tuple[int, int]) -> TileMemory | None:
        return self._placed.get(tuple(position))

    def require(self, position: tuple[int, int]) -> TileMemory:
        tile = self.tile_at(position)
        if tile is None:
            raise TileNotPlacedError(tuple(position))
        return tile

    def placed_tile_count(self) -> int:
        return self.occupancy.count() // CELLS_PER_TILE

    def can_put(self, batch: Iterable[TileMemory]) -> bool:
        cells = decompose_all(batch)
        return len(set(cells)) == len(cells) and not self.occupancy.contains_any(cells)

    # -- mutation -------------------------------------------------------------

    def put(self, batch: Iterable[TileMemory]) -> bool:
        """Place every tile of *batch*, or none if any cell is taken."""
        self._check_writable()
        batch = list(batch)
        if not self.occupancy.try_add_all(decompose_all(batch)):
            logger.debug("Rejected put of %d tile(s): cells occupied", len(batch))
            return False
        for tile in batch:
            self._placed[tile.position] = tile
        return True

    def remove(self, batch: Iterable[TileMemory]) -> list[TileMemory]:
        """Remove the tiles placed at the positions of *batch*.

        Returns the removed memories as they were stored (current colours).
        Raises :class:`TileNotPlacedError` without mutating anything if a
        position is empty.
        """
        self._check_writable()
        removed = list({t.position: self.require(t.position) for t in batch}.values())
        for tile in removed:
            self.occupancy.remove_all(decompose(tile))
            del self._placed[tile.position]
        return removed

    def paint(self, position: tuple[int, int], color: Color) -> Color:
        """Recolour the tile at *position*; return its previous colour."""
        self._check_writable()
        tile = self.require(position)
        self._placed[tile.position] = tile.with_color(color)
        return tile.color

    # -- hand -----------------------------------------------------------------

    def lift(self, positions: Iterable[tuple[int, int]]) -> list[TileMemory]:
        """Move placed tiles into the hand, releasing their cells."""
        lifted = self.remove([TileMemory(p) for p in positions])
        self.grabbed_tiles.extend(lifted)
        return lifted

    def drop_grabbed(self) -> list[TileMemory]:
        dropped, self.grabbed_tiles = self.grabbed_tiles, []
        return dropped

    # -- construction helpers -------------------------------------------------

    def copy(self) -> Board:
        return Board(
            placed_tiles=self._placed.values(),
            color_palette=self.color_palette,
            grabbed_tiles=self.grabbed_tiles,
            read_only=self.read_only,
        )

    def frozen(self) -> Board:
        """Return a read-only copy, e.g. for use as an answer key."""
        board = self.copy()
        board.read_only = True
        return board

    def to_dict(self) -> dict:
        data: dict = {
            "placed_tiles": [
                self._placed[p].to_dict() for p in sorted(self._placed)
            ],
            "color_palette": [c.to_hex() for c in self.color_palette],
        }
        if self.grabbed_tiles:
            data["grabbed_tiles"] = [t.to_dict() for t in self.grabbed_tiles]
        return data

    @classmethod
    def from_dict(cls, data: dict, read_only: bool = False) -> Board:
        """Rebuild a board from :meth:`to_dict` output.

        Raises ``ValueError`` for malformed or overlapping data.
        """
        try:
            placed = [TileMemory.from_dict(t) for t in data.get("placed_tiles") or []]
            grabbed = [TileMemory.from_dict(t) for t in data.get("grabbed_tiles") or []]
            raw_palette = data.get("color_palette")
            palette = (
                None if raw_palette is None
                else [Color.from_hex(c) for c in raw_palette]
            )
        except (AttributeError, KeyError, TypeError) as exc:
            raise ValueError(f"Malformed board data: {exc!r}") from exc
        return cls(placed, palette, grabbed, read_only=read_only)

    # -- helpers --------------------------------------------------------------

    def _check_writable(self) -> None:
        if self.read_only:
            raise ReadOnlyBoardError("Answer boards cannot be modified.")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return (
            self._placed == other._placed
            and self.color_palette == other.color_palette
        )

    def __repr__(self) -> str:
        return (
            f"Board(tiles={len(self._placed)}, cells={self.occupancy.count()}, "
            f"grabbed={len(self.grabbed_tiles)}, read_only={self.read_only})"
        )
