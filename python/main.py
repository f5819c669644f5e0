#!/usr/bin/env python3
"""Einstein tiling board.

Usage::

    python main.py                          # interactive menu
    python main.py -m creative              # new creative board
    python main.py -m creative -n "Spiral"  # resume a creative solution
    python main.py -m puzzle -l 2           # puzzle level 2 in the active slot
    python main.py --solutions              # list creative solutions
    python main.py --progress               # show puzzle progress
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.logging import RichHandler

ROOT = Path(__file__).resolve().parent  # python/
PROJECT_ROOT = ROOT.parent
DATA_DIR = PROJECT_ROOT / "data"

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from backend.engine.gamestate import SessionContext  # noqa: E402
from backend.models.storage import SLOT_COUNT, GameMode, SolutionStore  # noqa: E402

logger = logging.getLogger(__name__)


# -- helpers ------------------------------------------------------------------


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=verbose)],
    )


def _print_progress(store: SolutionStore) -> None:
    total = store.total_levels()
    print("\n  === PUZZLE PROGRESS ===")
    for slot in range(1, SLOT_COUNT + 1):
        marker = "*" if slot == store.active_slot else " "
        print(f"  {marker} slot {slot}:  {store.current_level(slot):>3} / {total}")
    print()


def _context(
    store: SolutionStore,
    mode: GameMode,
    slot: Optional[int],
    level: Optional[int],
    solution_name: Optional[str],
) -> SessionContext:
    if mode is GameMode.CREATIVE:
        if solution_name is None:
            return SessionContext.creative()
        solution = store.find_creative_solution(solution_name)
        if solution is None:
            raise typer.BadParameter(f"No creative solution named {solution_name!r}.")
        return SessionContext.creative(solution)

    if slot is None:
        slot = store.active_slot
    elif slot != store.active_slot:
        store.set_active_slot(slot)
    total = store.total_levels()
    if total == 0:
        raise typer.BadParameter("No puzzle levels are installed.")
    if level is None:
        level = min(store.current_level(slot) + 1, total)
    if level > total:
        raise typer.BadParameter(f"Level must be in 1..{total}, got {level}.")
    return SessionContext.puzzle(slot, level)


# -- CLI entry point ----------------------------------------------------------

app = typer.Typer(add_completion=False)


@app.command()
def main(
    mode: Optional[GameMode] = typer.Option(
        None, "-m", "--mode",
        help="Game mode to launch. Omit for interactive menu.",
    ),
    level: Optional[int] = typer.Option(
        None, "-l", "--level",
        min=1,
        help="Puzzle level (default: the next unsolved one).",
    ),
    slot: Optional[int] = typer.Option(
        None, "-s", "--slot",
        min=1, max=SLOT_COUNT,
        help="Puzzle save slot (default: the active one).",
    ),
    solution: Optional[str] = typer.Option(
        None, "-n", "--solution",
        help="Name of the creative solution to resume.",
    ),
    data_dir: Path = typer.Option(
        DATA_DIR, "--data-dir",
        file_okay=False,
        help="Where solutions and progress are stored.",
    ),
    solutions: bool = typer.Option(
        False, "--solutions",
        help="List creative solutions and exit.",
    ),
    progress: bool = typer.Option(
        False, "--progress",
        help="Show puzzle progress and exit.",
    ),
    verbose: bool = typer.Option(
        False, "-v", "--verbose",
        help="Log debug output.",
    ),
) -> None:
    """Einstein tiling board."""
    _configure_logging(verbose)

    from frontend.cli.rich import app as rich_app

    store = SolutionStore(data_dir)
    logger.debug("Data directory: %s", data_dir)

    if solutions:
        rich_app.print_solutions(store)
        return
    if progress:
        _print_progress(store)
        return

    if mode is None:
        rich_app.run(store)
        return

    rich_app.run(store, _context(store, mode, slot, level, solution))


if __name__ == "__main__":
    app()
