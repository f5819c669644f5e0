"""Occupancy set — the authoritative collision table."""

from __future__ import annotations

from typing import Iterable, Iterator

from backend.models.hexgrid import Cell


class OccupancySet:
    """Set of occupied cells with all-or-nothing bulk insertion.

    Not thread-safe on its own; the owning session serialises access.
    """

    def __init__(self, cells: Iterable[Cell] = ()) -> None:
        self._cells: set[Cell] = set()
        if not self.try_add_all(cells):
            raise ValueError("Initial cells contain duplicates.")

    # -- mutation -------------------------------------------------------------

    def try_add_all(self, cells: Iterable[Cell]) -> bool:
        """Insert every cell, or nothing if any is taken.

        A batch that repeats a cell is rejected too: two tiles of the same
        batch would otherwise overlap each other.
        """
        batch = list(cells)
        unique = set(batch)
        if len(unique) != len(batch) or not self._cells.isdisjoint(unique):
            return False
        self._cells |= unique
        return True

    def remove_all(self, cells: Iterable[Cell]) -> None:
        self._cells.difference_update(cells)

    def clear(self) -> None:
        self._cells.clear()

    # -- queries --------------------------------------------------------------

    def contains_any(self, cells: Iterable[Cell]) -> bool:
        return not self._cells.isdisjoint(cells)

    def contains_all(self, cells: Iterable[Cell]) -> bool:
        return self._cells.issuperset(cells)

    def count(self) -> int:
        return len(self._cells)

    def snapshot(self) -> frozenset[Cell]:
        return frozenset(self._cells)

    def copy(self) -> OccupancySet:
        return OccupancySet(self._cells)

    def __len__(self) -> int:
        return len(self._cells)

    def __contains__(self, cell: object) -> bool:
        return cell in self._cells

    def __iter__(self) -> Iterator[Cell]:
        return iter(self._cells)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OccupancySet):
            return NotImplemented
        return self._cells == other._cells

    def __repr__(self) -> str:
        return f"OccupancySet({len(self._cells)} cells)"
