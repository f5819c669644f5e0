"""Rich terminal frontend — tables, colours, and panels.

Drives a :class:`TilingSession` from typed commands.  The board itself
is listed as a table of tiles; geometry is not drawn.
"""

from __future__ import annotations

from datetime import datetime

import rich.box
from rich.align import Align
from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from backend.engine.gameplay import ActionResult, TilingSession
from backend.engine.gamestate import SessionContext
from backend.engine.windetector import MatchStatus
from backend.models.hexgrid import nearest_oblique
from backend.models.solution import Solution
from backend.models.storage import SLOT_COUNT, SolutionStore
from backend.models.tile import Color, TileMemory
from frontend.cli.commands import (
    HELP,
    Command,
    CommandError,
    parse_color,
    parse_command,
    parse_float,
    parse_int,
    parse_orientation,
    parse_position,
    parse_positions,
)

console = Console()

_STATUS_STYLE = {
    MatchStatus.UNDER: "bold white",
    MatchStatus.EXACT: "bold green",
    MatchStatus.OVER: "bold red",
}


# -- helpers ------------------------------------------------------------------


def _swatch(color: Color, label: str = "  ") -> Text:
    return Text(label, style=f"on {color.to_hex()}")


def _format_date(timestamp: float) -> str:
    return datetime.fromtimestamp(timestamp).strftime("%Y-%m-%d %H:%M")


def _orientation_label(tile: TileMemory) -> str:
    label = f"{tile.rotation * 60}°"
    return label + " flipped" if tile.flipped else label


# -- board rendering ----------------------------------------------------------


def _render_tiles(tiles: list[TileMemory] | tuple[TileMemory, ...], title: str, style: str) -> Table:
    table = Table(
        title=title,
        title_style=style,
        box=rich.box.ROUNDED,
        border_style="dim",
    )
    table.add_column("Position", justify="right")
    table.add_column("Orientation")
    table.add_column("Colour")
    for tile in sorted(tiles, key=lambda t: t.position):
        q, r = tile.position
        table.add_row(
            f"{q}, {r}",
            _orientation_label(tile),
            Text.assemble(_swatch(tile.color), " ", tile.color.to_hex()),
        )
    return table


def _render_palette(session: TilingSession) -> Text:
    text = Text("  Palette: ", style="dim")
    for i, color in enumerate(session.palette):
        label = f" {i} "
        if i == session.swatch:
            text.append_text(Text(f"[{i}]", style=f"bold on {color.to_hex()}"))
        else:
            text.append_text(_swatch(color, label))
        text.append(" ")
    return text


def _render_stats(session: TilingSession) -> Text:
    stats = Text()
    stats.append("  Tiles: ", style="dim")
    n = session.placed_tile_count()
    status = session.match_status()
    if status is None:
        stats.append(str(n), style="bold yellow")
    else:
        stats.append(f"{n} / {session.target_tile_count}", style=_STATUS_STYLE[status])
    stats.append("    Undo: ", style="dim")
    stats.append("yes" if session.can_undo else "no", style="bold cyan")
    stats.append("    Redo: ", style="dim")
    stats.append("yes" if session.can_redo else "no", style="bold cyan")
    return stats


def _draw_session(session: TilingSession, status: str = "") -> None:
    console.clear()

    ctx = session.context
    if ctx.is_puzzle:
        title = f"[bold cyan]Puzzle  slot {ctx.slot}  level {ctx.level}[/bold cyan]"
    else:
        title = f"[bold cyan]Creative  {session.solution.name}[/bold cyan]"

    parts: list = [_render_tiles(session.board.placed_tiles, "Placed", "bold cyan")]
    if session.hand:
        parts.append(_render_tiles(session.hand, "In hand", "bold yellow"))

    panel = Panel(
        Group(*(Align.center(p) for p in parts)),
        title=title,
        border_style="bright_blue",
        padding=(1, 2),
    )

    console.print()
    console.print(Align.center(panel))
    console.print(Align.center(_render_stats(session)))
    console.print(Align.center(_render_palette(session)))
    if status:
        console.print(Align.center(Text.from_markup(f"  {status}")))
    console.print(Align.center(Text("  Type 'help' for commands.", style="dim")))


def _draw_help() -> None:
    table = Table(box=rich.box.SIMPLE, show_header=False)
    table.add_column(style="bold cyan")
    table.add_column(style="dim")
    for usage, text in HELP.items():
        table.add_row(usage, text)
    console.print(Align.center(Panel(table, title="[bold]Commands[/bold]", border_style="cyan")))
    console.input("[dim]  Press Enter to go back.[/dim]")


def _draw_win(session: TilingSession) -> None:
    congrats = Text()
    congrats.append("\n  ★ ", style="bold yellow")
    congrats.append("SOLVED!", style="bold green")
    congrats.append(f"  Level {session.context.level} complete  ", style="green")
    congrats.append("★\n", style="bold yellow")
    console.print(Align.center(Panel(congrats, border_style="bold green")))
    console.input("[dim]  Press Enter to continue editing.[/dim]")


# -- command dispatch ----------------------------------------------------------


def _report(result: ActionResult, done: str, failed: str) -> str:
    if result.ok:
        return f"[green]{done}[/green]"
    return f"[yellow]{failed}[/yellow]"


def _dispatch(session: TilingSession, cmd: Command) -> tuple[str, ActionResult | None]:
    """Apply one command. Returns a status line and the action result, if any."""
    args = cmd.args
    name = cmd.name

    if name == "new":
        rotation, flipped = parse_orientation(args)
        result = session.spawn(parse_position(args), rotation, flipped)
        return _report(result, "New tile in hand.", "Hand is busy."), result
    if name == "grab":
        result = session.grab(parse_positions(args))
        return _report(result, "Grabbed.", "Nothing to grab."), result
    if name == "copy":
        result = session.copy(parse_positions(args))
        return _report(result, "Copied into hand.", "Nothing to copy."), result
    if name == "rotate":
        steps = parse_int(args[0], "step count") if args else 1
        result = session.rotate_hand(steps)
        return _report(result, "Rotated.", "Hand is empty."), result
    if name == "flip":
        result = session.flip_hand()
        return _report(result, "Flipped.", "Hand is empty."), result
    if name == "move":
        dq, dr = parse_position(args)
        result = session.move_hand(dq, dr)
        return _report(result, "Moved.", "Hand is empty."), result
    if name == "place":
        result = session.place_hand()
        return _report(result, "Placed.", "Cannot place here."), result
    if name == "stamp":
        result = session.stamp_hand()
        return _report(result, "Stamped.", "Nothing fits here."), result
    if name == "discard":
        result = session.discard_hand()
        return _report(result, "Discarded.", "Hand is empty."), result
    if name == "put":
        rotation, flipped = parse_orientation(args)
        tile = TileMemory(parse_position(args), rotation, flipped, session.current_color)
        result = session.put([tile])
        return _report(result, "Placed.", "Cannot place here."), result
    if name == "remove":
        result = session.remove_at(parse_positions(args))
        return _report(result, "Removed.", "Nothing to remove."), result
    if name == "paint":
        color = parse_color(args[2]) if len(args) > 2 else None
        result = session.paint(parse_position(args), color)
        return _report(result, "Painted.", "No tile there."), result
    if name == "swatch":
        if not args:
            raise CommandError("Expected a swatch index.")
        index = parse_int(args[0], "swatch index")
        if not 0 <= index < len(session.palette):
            raise CommandError(f"Swatch must be in 0..{len(session.palette) - 1}.")
        if len(args) > 1:
            session.set_swatch(parse_color(args[1]), index)
        else:
            session.select_swatch(index)
        return f"[green]Swatch {index} selected.[/green]", None
    if name == "pipette":
        color = session.pipette(parse_position(args))
        if color is None:
            return "[yellow]No tile there.[/yellow]", None
        return f"[green]Picked {color.to_hex()}.[/green]", None
    if name == "snap":
        if len(args) < 2:
            raise CommandError("Expected a world point: X Y.")
        q, r = nearest_oblique(parse_float(args[0], "x"), parse_float(args[1], "y"))
        return f"[cyan]Nearest lattice point:[/cyan] {q}, {r}", None
    if name == "undo":
        result = session.undo()
        return _report(result, "Undone.", "Nothing to undo."), result
    if name == "redo":
        result = session.redo()
        return _report(result, "Redone.", "Nothing to redo."), result
    if name == "save":
        solution = session.save()
        return f"[green]Saved {solution.name!r}.[/green]", None
    raise CommandError(f"Unknown command {name!r}. Type 'help'.")


# -- session loop ---------------------------------------------------------------


def _play_session(session: TilingSession) -> None:
    status = ""
    while True:
        _draw_session(session, status)
        status = ""

        cmd = parse_command(console.input("[bold cyan]> [/bold cyan]"))
        if cmd is None:
            continue
        if cmd.name == "quit":
            return
        if cmd.name == "exit":
            session.save()
            return
        if cmd.name == "help":
            _draw_help()
            continue

        try:
            status, result = _dispatch(session, cmd)
        except CommandError as exc:
            status = f"[red]{exc}[/red]"
            continue

        if result is not None and result.solved:
            _draw_session(session)
            _draw_win(session)


# -- menu screens ---------------------------------------------------------------


def _draw_solutions(store: SolutionStore) -> list[Solution]:
    solutions = store.load_creative_solutions()
    table = Table(
        title="Creative solutions",
        title_style="bold cyan",
        box=rich.box.ROUNDED,
        border_style="dim",
    )
    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Name")
    table.add_column("Tiles", justify="right", style="yellow")
    table.add_column("Updated", style="dim")
    for i, s in enumerate(solutions, 1):
        table.add_row(str(i), s.name, str(s.board.placed_tile_count()), _format_date(s.updated_at))
    if not solutions:
        console.print(Align.center(Text("  No solutions yet.", style="dim")))
    else:
        console.print(Align.center(table))
    return solutions


def _draw_menu(store: SolutionStore) -> None:
    console.clear()
    slot = store.active_slot
    total = store.total_levels()
    reached = store.current_level(slot)

    progress = Text()
    progress.append(f"  Slot {slot}: ", style="dim")
    progress.append(f"{reached} / {total}", style="bold green" if reached == total else "bold yellow")

    opts = Text()
    opts.append("  1", style="bold cyan")
    opts.append("  Creative    ")
    opts.append("2", style="bold yellow")
    opts.append("  Puzzle    ")
    opts.append("3", style="dim bold")
    opts.append("  Open solution    ", style="dim")
    opts.append("4", style="dim bold")
    opts.append("  Slot    ", style="dim")
    opts.append("5", style="dim bold")
    opts.append("  Rename    ", style="dim")
    opts.append("6", style="dim bold")
    opts.append("  Delete    ", style="dim")
    opts.append("7", style="dim bold")
    opts.append("  Reset slot    ", style="dim")
    opts.append("Q", style="dim bold")
    opts.append("  Quit", style="dim")

    body = Group(Text(""), Align.center(progress), Text(""), Align.center(opts), Text(""))
    panel = Panel(
        body,
        title="[bold]E I N S T E I N   T I L E S[/bold]",
        border_style="bright_blue",
        padding=(1, 4),
    )
    console.print()
    console.print(Align.center(panel))


def _pick_solution(store: SolutionStore) -> Solution | None:
    solutions = _draw_solutions(store)
    raw = console.input("[dim]  Number (blank to cancel): [/dim]").strip()
    if raw.isdigit() and 1 <= int(raw) <= len(solutions):
        return solutions[int(raw) - 1]
    return None


def _confirm(question: str) -> bool:
    return console.input(f"[bold red]  {question} (y/N): [/bold red]").strip().lower() == "y"


def _menu_loop(store: SolutionStore) -> None:
    while True:
        _draw_menu(store)
        choice = console.input("[bold cyan]> [/bold cyan]").strip().lower()

        if choice in ("q", "quit", "0"):
            console.clear()
            console.print(Align.center(Text("\nGoodbye!\n", style="bold cyan")))
            return
        if choice == "1":
            _play_session(TilingSession(SessionContext.creative(), store))
        elif choice == "2":
            total = store.total_levels()
            if total == 0:
                continue
            level = min(store.current_level(store.active_slot) + 1, total)
            _play_session(TilingSession(SessionContext.puzzle(store.active_slot, level), store))
        elif choice == "3":
            solution = _pick_solution(store)
            if solution is not None:
                _play_session(TilingSession(SessionContext.creative(solution), store))
        elif choice == "4":
            raw = console.input(f"[dim]  Slot (1-{SLOT_COUNT}): [/dim]").strip()
            if raw.isdigit() and 1 <= int(raw) <= SLOT_COUNT:
                store.set_active_slot(int(raw))
        elif choice == "5":
            solution = _pick_solution(store)
            if solution is not None:
                name = console.input("[dim]  New name: [/dim]").strip()
                if name:
                    store.rename_creative_solution(solution, name)
        elif choice == "6":
            solution = _pick_solution(store)
            if solution is not None and _confirm(f"Delete {solution.name!r}?"):
                store.delete_creative_solution(solution)
        elif choice == "7":
            slot = store.active_slot
            if _confirm(f"Erase all progress in slot {slot}?"):
                store.delete_slot(slot)


# -- public entry points ----------------------------------------------------------


def run(store: SolutionStore, context: SessionContext | None = None) -> None:
    """Launch the Rich CLI: straight into *context*, or the interactive menu."""
    if context is None:
        _menu_loop(store)
        return
    _play_session(TilingSession(context, store))


def print_solutions(store: SolutionStore) -> None:
    _draw_solutions(store)
