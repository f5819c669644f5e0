"""Line-command parser for the terminal frontend.

The board is unbounded and tiles are addressed by axial coordinates, so
input is typed as short commands (``put 0 0 2 f``, ``undo``) rather than
read key by key.
"""

from __future__ import annotations

from dataclasses import dataclass

from backend.models.tile import Color


class CommandError(ValueError):
    """The typed line could not be turned into a command."""


@dataclass(frozen=True)
class Command:
    name: str
    args: tuple[str, ...] = ()


# -- shared command table ------------------------------------------------------

HELP: dict[str, str] = {
    "new Q R [ROT] [f]": "take a new tile of the current colour into the hand",
    "grab Q R [Q R ...]": "lift placed tiles into the hand",
    "copy Q R [Q R ...]": "copy placed tiles into the hand",
    "rotate [STEPS]": "turn the hand 60° per step (negative = clockwise)",
    "flip": "mirror the hand",
    "move DQ DR": "shift the hand",
    "place": "put the hand down",
    "stamp": "put down every copy that fits and keep the hand",
    "discard": "drop the hand (lifted tiles go back)",
    "put Q R [ROT] [f]": "place one tile directly",
    "remove Q R [Q R ...]": "remove placed tiles",
    "paint Q R [#RRGGBB]": "recolour a tile",
    "swatch I [#RRGGBB]": "select (and optionally set) a palette colour",
    "pipette Q R": "copy a tile's colour into the current swatch",
    "snap X Y": "show the lattice point nearest a world point",
    "undo / redo": "step through history",
    "save": "save the board",
    "exit": "save and leave",
    "quit": "leave without saving",
}

_ALIASES: dict[str, str] = {
    "n": "new",
    "g": "grab",
    "c": "copy",
    "r": "rotate",
    "f": "flip",
    "m": "move",
    "p": "place",
    "s": "stamp",
    "x": "discard",
    "rm": "remove",
    "delete": "remove",
    "del": "remove",
    "u": "undo",
    "z": "undo",
    "y": "redo",
    "w": "save",
    "q": "quit",
    "h": "help",
    "?": "help",
}

_FLIP_WORDS = {"f", "flip", "flipped", "mirror"}


def parse_command(line: str) -> Command | None:
    """Split *line* into a normalised command, or ``None`` for a blank line."""
    parts = line.strip().split()
    if not parts:
        return None
    name = parts[0].lower()
    return Command(_ALIASES.get(name, name), tuple(parts[1:]))


# -- argument helpers ----------------------------------------------------------


def parse_int(raw: str, what: str = "number") -> int:
    try:
        return int(raw)
    except ValueError:
        raise CommandError(f"Expected a {what}, got {raw!r}.") from None


def parse_float(raw: str, what: str = "number") -> float:
    try:
        return float(raw)
    except ValueError:
        raise CommandError(f"Expected a {what}, got {raw!r}.") from None


def parse_position(args: tuple[str, ...], start: int = 0) -> tuple[int, int]:
    if len(args) < start + 2:
        raise CommandError("Expected a position: Q R.")
    return parse_int(args[start], "q"), parse_int(args[start + 1], "r")


def parse_positions(args: tuple[str, ...]) -> list[tuple[int, int]]:
    if not args or len(args) % 2:
        raise CommandError("Expected one or more positions: Q R [Q R ...].")
    return [parse_position(args, i) for i in range(0, len(args), 2)]


def parse_orientation(args: tuple[str, ...], start: int = 2) -> tuple[int, bool]:
    """Read optional ``[ROT] [f]`` arguments after a position."""
    rest = args[start:]
    rotation = 0
    flipped = False
    for raw in rest:
        if raw.lower() in _FLIP_WORDS:
            flipped = True
        else:
            rotation = parse_int(raw, "rotation") % 6
    return rotation, flipped


def parse_color(raw: str) -> Color:
    try:
        return Color.from_hex(raw)
    except ValueError:
        raise CommandError(f"Expected a colour like #ff8800, got {raw!r}.") from None
