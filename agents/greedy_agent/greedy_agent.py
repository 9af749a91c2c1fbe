"""
Greedy agent that heads for the enemy flag and shoots whatever it can.

The agent does not resolve anything itself. It emits an ordered list of
candidate intents and the environment keeps the first one that succeeds:

1. Units are ranked by Manhattan distance to the enemy flag (stable).
2. For the nearest unit:
   a. attack UP, DOWN, LEFT, RIGHT at every range 1..attack_range
   b. move at full capacity along the primary axis towards the flag,
      then along the secondary axis (the axis with the larger gap is
      primary; ties prefer the x axis)
   c. the same attack scan once more
3. With ``try_all_units`` the next-nearest units follow with the same
   sequence; by default only the nearest unit is tried.
"""

from typing import Any, Dict, List, Optional, TYPE_CHECKING

from ctf.core.actions import Intent
from ctf.core.types import MoveDir, Team
from ctf.entities.unit import Unit
from ..base_agent import BaseAgent
from ..registry import register_agent
from ..team_intel import TeamIntel

if TYPE_CHECKING:
    from ctf.environment import StepInfo
    from ctf.world.state import GameState

ATTACK_SCAN_ORDER = (MoveDir.UP, MoveDir.DOWN, MoveDir.LEFT, MoveDir.RIGHT)


@register_agent("greedy")
class GreedyAgent(BaseAgent):
    """
    Flag-seeking heuristic opponent.
    """

    def __init__(
        self,
        team: Team,
        name: str | None = None,
        try_all_units: bool = False,
        **_: Any,
    ):
        """
        Initialize the greedy agent.

        Args:
            team: Team to control
            name: Optional agent name (default: "GreedyAgent")
            try_all_units: Fall back to the next-nearest units when the
                nearest one has nothing that succeeds
        """
        super().__init__(team, name)
        self.try_all_units = try_all_units

    def get_intents(
        self,
        state: Dict[str, Any],
        step_info: Optional["StepInfo"] = None,
        **kwargs: Any,
    ) -> tuple[List[Intent], Dict[str, Any]]:
        world: "GameState" = state["world"]
        intel = TeamIntel.build(world, self.team)

        ranked = intel.by_distance_to_enemy_flag()
        if not ranked:
            return [], {"policy": "greedy", "candidates": 0, "units": []}

        units = ranked if self.try_all_units else ranked[:1]
        intents: List[Intent] = []
        for unit in units:
            intents.extend(self.candidates_for(unit, intel))

        metadata = {
            "policy": "greedy",
            "candidates": len(intents),
            "units": [u.id for u in units],
            "enemy_flag": list(intel.enemy_flag),
            "enemies_left": [e.id for e in intel.enemies],
        }
        return intents, metadata

    def candidates_for(self, unit: Unit, intel: TeamIntel) -> List[Intent]:
        """Attack scan, moves towards the enemy flag, attack scan again."""
        attacks = self._attack_scan(unit)
        moves = [
            Intent.move(unit.id, direction, distance=unit.max_movement)
            for direction in self.approach_directions(unit.pos, intel.enemy_flag)
        ]
        return attacks + moves + list(attacks)

    @staticmethod
    def approach_directions(origin, target) -> List[MoveDir]:
        """Primary then secondary direction towards `target`, skipping zero gaps."""
        dx = target[0] - origin[0]
        dy = target[1] - origin[1]

        horizontal = MoveDir.RIGHT if dx > 0 else MoveDir.LEFT if dx < 0 else None
        vertical = MoveDir.DOWN if dy > 0 else MoveDir.UP if dy < 0 else None

        ordered = [horizontal, vertical] if abs(dx) >= abs(dy) else [vertical, horizontal]
        return [d for d in ordered if d is not None]

    @staticmethod
    def _attack_scan(unit: Unit) -> List[Intent]:
        return [
            Intent.attack(unit.id, direction, attack_range=attack_range)
            for direction in ATTACK_SCAN_ORDER
            for attack_range in range(1, unit.attack_range + 1)
        ]
