"""Command parsing tests for the terminal frontend."""

from __future__ import annotations

import pytest

from backend.engine.gameplay import TilingSession
from backend.models.board import Board
from backend.models.tile import Color
from frontend.cli.commands import (
    Command,
    CommandError,
    parse_color,
    parse_command,
    parse_orientation,
    parse_positions,
)
from frontend.cli.rich.app import _dispatch


@pytest.mark.parametrize("line", ["", "   ", "\t"])
def test_blank_line_is_no_command(line: str) -> None:
    assert parse_command(line) is None


@pytest.mark.parametrize(
    "line, expected",
    [
        ("put 0 0", Command("put", ("0", "0"))),
        ("  RM 1 -2 ", Command("remove", ("1", "-2"))),
        ("u", Command("undo")),
        ("g 0 0 3 1", Command("grab", ("0", "0", "3", "1"))),
    ],
)
def test_parse_command(line: str, expected: Command) -> None:
    assert parse_command(line) == expected


@pytest.mark.parametrize(
    "args, expected",
    [
        (("0", "0"), (0, False)),
        (("0", "0", "2"), (2, False)),
        (("0", "0", "1"), (1, False)),
        (("0", "0", "7", "f"), (1, True)),
        (("0", "0", "flipped", "-1"), (5, True)),
    ],
)
def test_parse_orientation(args: tuple[str, ...], expected: tuple[int, bool]) -> None:
    assert parse_orientation(args) == expected


def test_parse_positions() -> None:
    assert parse_positions(("1", "2", "-3", "4")) == [(1, 2), (-3, 4)]
    with pytest.raises(CommandError):
        parse_positions(("1", "2", "3"))
    with pytest.raises(CommandError):
        parse_positions(("a", "b"))


def test_parse_color() -> None:
    assert parse_color("#ff8800") == Color(255, 136, 0)
    with pytest.raises(CommandError):
        parse_color("orange")


# -- dispatch -------------------------------------------------------------------------


def test_dispatch_drives_session() -> None:
    session = TilingSession.from_board(Board())
    _, result = _dispatch(session, parse_command("put 0 0 2"))
    assert result.ok
    _, result = _dispatch(session, parse_command("put 10 0 1 f"))
    assert result.ok and result.tile_count == 2
    _, result = _dispatch(session, parse_command("undo"))
    assert result.ok and result.tile_count == 1
    assert session.board.tile_at((0, 0)).rotation == 2


def test_dispatch_swatch_and_pipette() -> None:
    session = TilingSession.from_board(Board())
    _dispatch(session, parse_command("swatch 4 #010203"))
    assert session.swatch == 4
    assert session.current_color == Color(1, 2, 3)
    with pytest.raises(CommandError):
        _dispatch(session, parse_command("swatch 9"))


def test_dispatch_unknown_command() -> None:
    session = TilingSession.from_board(Board())
    with pytest.raises(CommandError):
        _dispatch(session, parse_command("dance"))
