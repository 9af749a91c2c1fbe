"""
Base agent interface for the capture-the-flag game.

Every non-human controller implements this interface so the turn controller
can ask it for intents without knowing how they are chosen.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from ctf.core.actions import Intent
from ctf.core.types import Team

if TYPE_CHECKING:
    from ctf.environment import StepInfo


class BaseAgent(ABC):
    """
    Abstract base class for all agents.

    Agents read the game state and produce an ordered list of candidate
    intents for their team. The environment resolves the candidates one by
    one and keeps the first that succeeds.

    Subclasses must implement:
    - get_intents(): Produce candidate intents for the team's turn

    Attributes:
        team: The team this agent controls (RED or BLUE)
        name: Agent name for logging/identification
    """

    def __init__(self, team: Team, name: str = None):
        """
        Initialize the agent.

        Args:
            team: Team this agent controls
            name: Optional name for the agent (defaults to class name)
        """
        self.team = team
        self.name = name or self.__class__.__name__

    @abstractmethod
    def get_intents(
        self,
        state: Dict[str, Any],
        step_info: Optional["StepInfo"] = None,
        **kwargs: Any,
    ) -> tuple[List[Intent], Dict[str, Any]]:
        """
        Get candidate intents for one turn.

        This is called once per turn of the agent's team. The agent should:
        1. Read its units and the board from the state
        2. Optionally consume the previous StepInfo
        3. Return candidates in preference order, plus metadata

        State structure:
            {
                "world": GameState,
            }

        To get your units:
            world = state["world"]
            my_units = world.get_team_units(self.team, alive_only=True)

        Args:
            state: Current game state from environment
            step_info: Optional resolution info from the previous step
            **kwargs: Reserved for future fields

        Returns:
            Tuple of:
                - Ordered list of candidate intents (may be empty)
                - Metadata dict (policy name, counts, etc.)

        Notes:
            - Candidates that fail validation are skipped by the environment
            - An empty list means the team takes no action this turn
        """
        pass

    def __str__(self) -> str:
        """String representation."""
        return f"{self.name} ({self.team.name})"

    def __repr__(self) -> str:
        """Detailed representation."""
        return f"{self.__class__.__name__}(team={self.team.name}, name='{self.name}')"
