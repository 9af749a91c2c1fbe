from __future__ import annotations

from dataclasses import dataclass
from typing import List, TYPE_CHECKING

from ctf.core.types import GridPos, Team
from ctf.entities.unit import Unit
from ctf.world.board import manhattan

if TYPE_CHECKING:
    from ctf.world.state import GameState


@dataclass(frozen=True)
class VisibleEnemy:
    """Read-only snapshot of a live enemy unit."""

    id: int
    position: GridPos


@dataclass(frozen=True)
class TeamIntel:
    """
    Per-team view of the game for agent decision-making.

    - friendlies: full Unit objects (all fields are fair for your own team)
    - enemies: snapshots of the live opposing units
    - enemy_flag: the square this team is trying to reach
    """

    team: Team
    friendlies: List[Unit]
    enemies: List[VisibleEnemy]
    enemy_flag: GridPos

    @property
    def alive_friendlies(self) -> List[Unit]:
        return [u for u in self.friendlies if u.alive]

    def distance_to_enemy_flag(self, unit: Unit) -> int:
        return manhattan(unit.pos, self.enemy_flag)

    def by_distance_to_enemy_flag(self) -> List[Unit]:
        """Live friendlies, nearest to the enemy flag first (ties keep roster order)."""
        return sorted(self.alive_friendlies, key=self.distance_to_enemy_flag)

    @classmethod
    def build(cls, world: "GameState", team: Team) -> "TeamIntel":
        enemies = [
            VisibleEnemy(id=unit.id, position=unit.pos)
            for unit in world.get_team_units(team.opponent, alive_only=True)
        ]
        return cls(
            team=team,
            friendlies=world.get_team_units(team, alive_only=False),
            enemies=enemies,
            enemy_flag=world.enemy_flag_of(team),
        )
