"""
Random agent implementation for testing and baseline comparison.

This agent picks a random live unit and a random action for it, then lists
the rest of that unit's options in shuffled order as fallbacks.
"""

import random
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from ctf.core.actions import Intent
from ctf.core.types import MoveDir, Team
from ctf.world.state import GameState
from ..base_agent import BaseAgent
from ..registry import register_agent
from ..team_intel import TeamIntel

if TYPE_CHECKING:
    from ctf.environment import StepInfo


@register_agent("random")
class RandomAgent(BaseAgent):
    """
    Agent that takes random actions.

    Decision process:
    - Shuffle the live units, then for each unit shuffle every move and
      attack (all directions, engine-rolled distance/range).

    This serves as a baseline for comparing the greedy opponent.
    """

    def __init__(
        self,
        team: Team,
        name: str = None,
        seed: Optional[int] = None,
        **_: Any,
    ):
        """
        Initialize random agent.

        Args:
            team: Team to control
            name: Agent name (default: "RandomAgent")
            seed: Random seed for reproducibility (None = random)
        """
        super().__init__(team, name)
        self.rng = random.Random(seed)

    def get_intents(
        self,
        state: Dict[str, Any],
        step_info: Optional["StepInfo"] = None,
        **kwargs: Any,
    ) -> tuple[List[Intent], Dict[str, Any]]:
        """
        Generate shuffled candidate intents for the team's live units.

        Args:
            state: Current game state
            step_info: Optional previous step resolution info (unused)

        Returns:
            Tuple of (intents, metadata)
        """
        world: GameState = state["world"]
        units = TeamIntel.build(world, self.team).alive_friendlies
        self.rng.shuffle(units)

        intents: List[Intent] = []
        for unit in units:
            options = [Intent.move(unit.id, d, distance=None) for d in MoveDir]
            options += [Intent.attack(unit.id, d, attack_range=None) for d in MoveDir]
            self.rng.shuffle(options)
            intents.extend(options)

        metadata = {
            "policy": "random",
            "candidates": len(intents),
        }
        return intents, metadata

