from __future__ import annotations

from typing import List, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from ..entities.unit import Unit


class Cell:
    """One board square: the units standing on it, ordered by id."""

    __slots__ = ("_units",)

    def __init__(self) -> None:
        self._units: List[Unit] = []

    def add(self, unit: Unit) -> None:
        if any(u.id == unit.id for u in self._units):
            raise ValueError(f"{unit.label()} is already in this cell")
        self._units.append(unit)
        self._units.sort(key=lambda u: u.id)

    def discard(self, unit: Unit) -> bool:
        """Remove the unit if present; returns whether anything was removed."""
        before = len(self._units)
        self._units = [u for u in self._units if u.id != unit.id]
        return len(self._units) != before

    @property
    def units(self) -> Tuple[Unit, ...]:
        return tuple(self._units)

    def live_units(self) -> List[Unit]:
        return [u for u in self._units if not u.eliminated]

    def is_empty(self) -> bool:
        return not self._units

    def __len__(self) -> int:
        return len(self._units)

    def __contains__(self, unit: object) -> bool:
        return any(u is unit for u in self._units)

    def __repr__(self) -> str:
        return f"Cell({[u.id for u in self._units]})"
