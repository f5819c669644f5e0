"""Storage tests — solution files, progress and the shipped answer boards."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from backend.models.board import Board
from backend.models.solution import Solution, unique_name
from backend.models.storage import LEVELS_DIR, GameMode, SolutionStore
from backend.models.tile import TileMemory

A = TileMemory((0, 0))
B = TileMemory((10, 0), 1)


@pytest.fixture
def store(tmp_path: Path) -> SolutionStore:
    return SolutionStore(tmp_path)


def _solution(name: str, *tiles: TileMemory, updated_at: float = 1.0) -> Solution:
    return Solution(name, created_at=0.0, updated_at=updated_at, board=Board(tiles))


# -- answer boards -------------------------------------------------------------------


@pytest.mark.parametrize("level", [1, 2, 3, 4])
def test_shipped_levels_load(level: int, store: SolutionStore) -> None:
    board = store.load_answer_board(level)
    assert board.read_only
    assert board.placed_tile_count() == level


def test_levels_grow_by_one_tile(store: SolutionStore) -> None:
    for level in range(2, 5):
        smaller = store.load_answer_board(level - 1).partial_hexes
        assert smaller < store.load_answer_board(level).partial_hexes


def test_total_levels(store: SolutionStore) -> None:
    assert store.levels_dir == LEVELS_DIR
    assert store.total_levels() == 4


def test_missing_or_corrupt_level_is_empty(tmp_path: Path) -> None:
    levels = tmp_path / "levels"
    levels.mkdir()
    (levels / "level1.json").write_text("{ not json")
    store = SolutionStore(tmp_path, levels_dir=levels)
    for level in (1, 2):
        board = store.load_answer_board(level)
        assert board.read_only
        assert board.placed_tile_count() == 0


# -- creative solutions ----------------------------------------------------------------


def test_creative_round_trip(store: SolutionStore) -> None:
    solution = _solution("spiral", A, B)
    store.save_creative_solution(solution)
    [loaded] = store.load_creative_solutions()
    assert loaded == solution
    assert loaded.file_name == solution.file_name


def test_creative_solutions_sorted_by_update(store: SolutionStore) -> None:
    store.save_creative_solution(_solution("newer", updated_at=5.0))
    store.save_creative_solution(_solution("older", updated_at=2.0))
    assert [s.name for s in store.load_creative_solutions()] == ["older", "newer"]
    assert store.load_board(GameMode.CREATIVE) == Board()
    assert store.find_creative_solution("older") is not None
    assert store.find_creative_solution("missing") is None


def test_overwrite_keeps_backup(store: SolutionStore) -> None:
    solution = _solution("x", A)
    store.save_creative_solution(solution)
    solution.touch(Board([A, B]))
    store.save_creative_solution(solution)
    backup = store.creative_dir / (solution.file_name + ".backup")
    assert Solution.from_dict(json.loads(backup.read_text())).board.placed_tile_count() == 1


def test_corrupt_creative_file_is_skipped(store: SolutionStore) -> None:
    store.save_creative_solution(_solution("good", A))
    (store.creative_dir / "broken.json").write_text("[1, 2")
    (store.creative_dir / "wrong.json").write_text('{"name": "w"}')
    assert [s.name for s in store.load_creative_solutions()] == ["good"]


def test_delete_creative_solution(store: SolutionStore) -> None:
    solution = _solution("gone", A)
    store.save_creative_solution(solution)
    store.delete_creative_solution(solution)
    assert store.load_creative_solutions() == []


# -- puzzle solutions and progress ---------------------------------------------------------


def test_puzzle_solution_round_trip(store: SolutionStore) -> None:
    store.save_puzzle_solution(2, 3, _solution("solution3", A))
    assert store.load_board(GameMode.PUZZLE, slot=2, level=3).placed_tiles == [A]
    assert store.load_puzzle_solution(1, 3) is None
    store.delete_puzzle_solution(2, 3)
    assert store.load_puzzle_solution(2, 3) is None


def test_progress_is_monotonic_and_persisted(store: SolutionStore, tmp_path: Path) -> None:
    assert store.current_level(1) == 0
    assert store.advance_level(1, 2) == 2
    assert store.advance_level(1, 1) == 2
    store.set_active_slot(3)

    reloaded = SolutionStore(tmp_path)
    assert reloaded.current_level(1) == 2
    assert reloaded.active_slot == 3


def test_corrupt_progress_falls_back_to_defaults(tmp_path: Path) -> None:
    (tmp_path / "progress.json").write_text('{"active_slot": "x"}')
    store = SolutionStore(tmp_path)
    assert store.active_slot == 1
    assert store.current_level(1) == 0


def test_delete_slot(store: SolutionStore) -> None:
    store.advance_level(1, 2)
    store.save_puzzle_solution(1, 3, _solution("solution3", A))
    store.delete_slot(1)
    assert store.current_level(1) == 0
    assert store.load_puzzle_solution(1, 3) is None


@pytest.mark.parametrize("slot", [0, 4])
def test_bad_slot_raises(store: SolutionStore, slot: int) -> None:
    with pytest.raises(ValueError):
        store.advance_level(slot, 1)


# -- names -----------------------------------------------------------------------------------


@pytest.mark.parametrize(
    "names, expected",
    [
        ([], "board"),
        (["board"], "board (1)"),
        (["board", "board (1)", "board (3)"], "board (2)"),
    ],
)
def test_unique_name(names: list[str], expected: str) -> None:
    assert unique_name("board", names) == expected


# -- rename ------------------------------------------------------------------------------------


def test_rename_persists(store: SolutionStore) -> None:
    solution = _solution("draft", A)
    store.save_creative_solution(solution)
    assert store.rename_creative_solution(solution, "  final ") == "final"
    [loaded] = store.load_creative_solutions()
    assert loaded.name == "final"
    assert loaded.file_name == solution.file_name


def test_rename_to_taken_name_gets_suffix(store: SolutionStore) -> None:
    store.save_creative_solution(_solution("tiling"))
    other = _solution("other", updated_at=2.0)
    store.save_creative_solution(other)
    assert store.rename_creative_solution(other, "tiling") == "tiling (1)"


def test_rename_to_own_name_keeps_it(store: SolutionStore) -> None:
    solution = _solution("same")
    store.save_creative_solution(solution)
    assert store.rename_creative_solution(solution, "same") == "same"


def test_rename_rejects_blank_name(store: SolutionStore) -> None:
    solution = _solution("named")
    store.save_creative_solution(solution)
    with pytest.raises(ValueError):
        store.rename_creative_solution(solution, "   ")
    assert store.find_creative_solution("named") is not None


def test_creative_load_board_is_always_empty(store: SolutionStore) -> None:
    store.save_creative_solution(_solution("busy", A, B))
    assert store.load_board(GameMode.CREATIVE).placed_tile_count() == 0
