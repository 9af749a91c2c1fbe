"""
Board - the spatial substrate for every rule.

A rows x cols grid of Cells plus the two flag coordinates. The board keeps a
reverse index (unit id -> position) so that a unit's `pos` and the membership
of the cell it stands on always agree. Relocation is remove-then-place; no
other code writes `Unit.pos`.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple, TYPE_CHECKING

from ..core.types import UNPLACED, GridPos, Team
from .cell import Cell

if TYPE_CHECKING:
    from ..entities.unit import Unit


def manhattan(a: GridPos, b: GridPos) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


class Board:
    """
    Fixed-size grid of cells.

    Attributes:
        rows: Number of rows (y extent)
        cols: Number of columns (x extent)
        flags: Flag coordinate per team
    """

    def __init__(self, rows: int, cols: int, flags: Dict[Team, GridPos]):
        if rows < 1 or cols < 1:
            raise ValueError(f"Board dimensions must be positive, got {rows}x{cols}")
        self.rows = rows
        self.cols = cols
        self._cells: List[List[Cell]] = [[Cell() for _ in range(cols)] for _ in range(rows)]
        self._index: Dict[int, GridPos] = {}

        missing = [team.name for team in Team if team not in flags]
        if missing:
            raise ValueError(f"Missing flag coordinate for: {', '.join(missing)}")
        for team, pos in flags.items():
            if not self.in_bounds(*pos):
                raise ValueError(f"{team.name} flag {pos} is outside the {rows}x{cols} board")
        if flags[Team.RED] == flags[Team.BLUE]:
            raise ValueError(f"Both flags share the coordinate {flags[Team.RED]}")
        self.flags: Dict[Team, GridPos] = {team: tuple(pos) for team, pos in flags.items()}

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def width(self) -> int:
        return self.cols

    @property
    def height(self) -> int:
        return self.rows

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.cols and 0 <= y < self.rows

    def cell(self, x: int, y: int) -> Cell:
        if not self.in_bounds(x, y):
            raise ValueError(f"({x}, {y}) is outside the {self.rows}x{self.cols} board")
        return self._cells[y][x]

    def units_at(self, x: int, y: int) -> Tuple[Unit, ...]:
        """Units on a square in id order (empty tuple when off-board)."""
        if not self.in_bounds(x, y):
            return ()
        return self._cells[y][x].units

    def position_of(self, unit: Unit) -> Optional[GridPos]:
        return self._index.get(unit.id)

    def flag_of(self, team: Team) -> GridPos:
        return self.flags[team]

    def occupied_positions(self) -> List[GridPos]:
        return sorted(set(self._index.values()))

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def place(self, unit: Unit, x: int, y: int) -> None:
        """
        Put an unplaced unit on a square.

        Raises:
            ValueError: If the unit is already on the board or (x, y) is off-board
        """
        if unit.id in self._index:
            raise ValueError(f"{unit.label()} is already on the board at {self._index[unit.id]}")
        self.cell(x, y).add(unit)
        self._index[unit.id] = (x, y)
        unit.pos = (x, y)

    def remove(self, unit: Unit) -> GridPos:
        """
        Take a unit off the board.

        Returns:
            The position it was removed from

        Raises:
            ValueError: If the unit is not on the board
        """
        pos = self._index.pop(unit.id, None)
        if pos is None:
            raise ValueError(f"{unit.label()} is not on the board")
        self._cells[pos[1]][pos[0]].discard(unit)
        unit.pos = UNPLACED
        return pos

    def relocate(self, unit: Unit, x: int, y: int) -> None:
        if not self.in_bounds(x, y):
            raise ValueError(f"({x}, {y}) is outside the {self.rows}x{self.cols} board")
        self.remove(unit)
        self.place(unit, x, y)

    def to_dict(self) -> Dict:
        return {
            "rows": self.rows,
            "cols": self.cols,
            "flags": {team.name: list(pos) for team, pos in self.flags.items()},
            "cells": [
                {"pos": [x, y], "unit_ids": [u.id for u in self._cells[y][x].units]}
                for (x, y) in self.occupied_positions()
            ],
        }

    def __repr__(self) -> str:
        return f"Board({self.rows}x{self.cols}, flags={self.flags})"
