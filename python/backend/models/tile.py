"""Tile snapshot types: colours and tile memories."""

from __future__ import annotations

from dataclasses import dataclass, replace

from backend.models.hexgrid import mirror_about, nearest_oblique, rotate_about


@dataclass(frozen=True)
class Color:
    """An RGB colour with 0-255 channels."""

    r: int
    g: int
    b: int

    def __post_init__(self) -> None:
        for channel in (self.r, self.g, self.b):
            if not 0 <= channel <= 255:
                raise ValueError(f"Colour channel out of range: {channel}")

    @classmethod
    def from_hex(cls, value: str) -> Color:
        """Parse ``#rrggbb`` (the leading ``#`` is optional)."""
        raw = value.strip().removeprefix("#")
        if len(raw) != 6:
            raise ValueError(f"Expected a #rrggbb colour, got {value!r}.")
        return cls(int(raw[0:2], 16), int(raw[2:4], 16), int(raw[4:6], 16))

    def to_hex(self) -> str:
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"

    def __str__(self) -> str:
        return self.to_hex()


WHITE = Color(255, 255, 255)


@dataclass(frozen=True)
class TileMemory:
    """Serializable snapshot of one placed (or in-hand) tile.

    ``position`` is the axial coordinate of the tile's anchor hex,
    ``rotation`` the number of 60° counter-clockwise turns and ``flipped``
    whether the tile is mirrored before rotating.
    """

    position: tuple[int, int]
    rotation: int = 0
    flipped: bool = False
    color: Color = WHITE

    def __post_init__(self) -> None:
        if not 0 <= self.rotation < 6:
            raise ValueError(f"Rotation must be in 0..5, got {self.rotation}.")
        q, r = self.position
        object.__setattr__(self, "position", (int(q), int(r)))

    # -- construction helpers -------------------------------------------------

    @classmethod
    def at_world_point(
        cls,
        x: float,
        y: float,
        rotation: int = 0,
        flipped: bool = False,
        color: Color = WHITE,
    ) -> TileMemory:
        """Create a tile snapped to the lattice point nearest ``(x, y)``."""
        return cls(nearest_oblique(x, y), rotation % 6, flipped, color)

    # -- derived --------------------------------------------------------------

    @property
    def orientation(self) -> int:
        """Orientation index 0..11: rotations 0-5, then mirrored 6-11."""
        return self.rotation + (6 if self.flipped else 0)

    # -- transforms (all return new memories) ---------------------------------

    def with_color(self, color: Color) -> TileMemory:
        return replace(self, color=color)

    def translated(self, dq: int, dr: int) -> TileMemory:
        q, r = self.position
        return replace(self, position=(q + dq, r + dr))

    def rotated(self, steps: int, pivot: tuple[int, int] | None = None) -> TileMemory:
        pivot = self.position if pivot is None else pivot
        return replace(
            self,
            position=rotate_about(self.position, pivot, steps),
            rotation=(self.rotation + steps) % 6,
        )

    def mirrored(self, pivot: tuple[int, int] | None = None) -> TileMemory:
        # M·R^n·M^f == R^-n·M^(f+1)
        pivot = self.position if pivot is None else pivot
        return replace(
            self,
            position=mirror_about(self.position, pivot),
            rotation=(-self.rotation) % 6,
            flipped=not self.flipped,
        )

    # -- serialization --------------------------------------------------------

    def to_dict(self) -> dict:
        return {
            "position": list(self.position),
            "rotation": self.rotation,
            "flipped": self.flipped,
            "color": self.color.to_hex(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> TileMemory:
        q, r = data["position"]
        return cls(
            position=(int(q), int(r)),
            rotation=int(data.get("rotation", 0)),
            flipped=bool(data.get("flipped", False)),
            color=Color.from_hex(data.get("color", WHITE.to_hex())),
        )
