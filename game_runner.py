from __future__ import annotations

from collections import Counter
from typing import Any, Dict, List, Optional

from agents import AgentSpec, PreparedAgent, create_agent_from_spec
from ctf import FlagGameEnv
from ctf.core.actions import Intent
from ctf.core.types import GameResult, Team
from ctf.environment import StepInfo
from ctf.scenario import Scenario, create_random_scenario
from ctf.world.state import GameState
from infra.logger import get_logger

from game_frame import Frame

logger = get_logger(__name__)


class GameRunner:
    """
    Step-by-step game runner that returns UI-friendly frames.

    The human team is driven by intents passed to ``step()`` unless the
    scenario carries an AgentSpec for it (headless play). The opposing team
    is driven by its AgentSpec, or by a greedy agent when none is given.
    """

    def __init__(self, scenario: Scenario):
        self.scenario = scenario.clone()

        self.env = FlagGameEnv()
        self._state = self.env.reset(self.scenario)

        world = self.world
        self._agents: Dict[Team, PreparedAgent] = {}
        for team in Team:
            prepared = self._agent_from_scenario(self.scenario, team)
            if prepared is None and team is world.opponent_team:
                prepared = create_agent_from_spec(AgentSpec(team=team, type="greedy"))
            if prepared is not None:
                self._agents[team] = prepared

        self._last_info: StepInfo | None = None
        self._final_world: GameState | None = None

    # ------------------------------------------------------------------#
    # Properties
    # ------------------------------------------------------------------#
    @property
    def state(self) -> Dict[str, Any]:
        return self._state

    @property
    def world(self) -> GameState:
        return self._state["world"]

    @property
    def done(self) -> bool:
        return self.env.is_game_over

    @property
    def round(self) -> int:
        """Completed rounds, pulled directly from the game state."""
        return self.world.round_count

    @property
    def awaiting_team(self) -> Optional[Team]:
        return self.env.awaiting_team

    @property
    def human_controlled(self) -> bool:
        """True when the human team has no agent and plays through step(intent)."""
        return self.world.human_team not in self._agents

    @property
    def needs_human_input(self) -> bool:
        """True when the next step must be given a human intent."""
        team = self.env.awaiting_team
        return team is not None and team not in self._agents

    # ------------------------------------------------------------------#
    # Core API
    # ------------------------------------------------------------------#
    def step(
        self,
        intent: Intent | None = None,
        injections: Optional[Dict[str, Any]] = None,
    ) -> Frame:
        """
        Execute one turn of the game and return a formatted frame.

        Args:
            intent: Human intent, required when the human team is to act
            injections: Optional dict keyed by team name ("red"/"blue") with
                extra kwargs for that team's agent.
        """
        if self.done:
            if self._final_world is not None:
                final_world = self._final_world
                self._final_world = None
                return Frame(world=final_world, done=True)
            raise RuntimeError("Game is already finished")

        team = self.env.awaiting_team
        injections = injections or {}
        world_before = self.world.clone()

        prepared = self._agents.get(team)
        metadata: Dict[str, Any] | None = None
        if prepared is None:
            if intent is None:
                raise ValueError(f"{team.display_name} is human-controlled; an intent is required")
            intents = [intent]
        else:
            intents, meta = prepared.agent.get_intents(
                self._state,
                step_info=self._last_info,
                **injections.get(team.name.lower(), {}),
            )
            metadata = {team.name.lower(): meta}

        self._state, outcome, done, self._last_info = self.env.step(intents, as_candidates=prepared is not None)

        if done:
            self._final_world = self.world.clone()

        return Frame(
            world=world_before,
            team=team,
            intents=[a.intent for a in self._last_info.attempts],
            outcome=outcome,
            action_metadata=metadata,
            step_info=self._last_info,
            done=done,
        )

    def advance_agents(self) -> List[Frame]:
        """Play agent-controlled turns until a human intent is needed or the game ends."""
        frames: List[Frame] = []
        while not self.done and not self.needs_human_input:
            frames.append(self.step())
        return frames

    def run(self, *, include_history: bool = False) -> Frame | list[Frame]:
        """
        Run the full episode to completion. Both teams need agents.

        Returns the final frame, or the full frame history if include_history
        is True.
        """
        if self.needs_human_input:
            raise RuntimeError("Cannot run to completion: a team is human-controlled")
        frames: list[Frame] = []
        while True:
            frame = self.step()
            frames.append(frame)
            if frame.done:
                break

        return frames if include_history else frames[-1]

    def run_episode(self) -> Frame:
        """Run to completion and return the final frame."""
        return self.run()  # type: ignore[return-value]

    def get_final_frame(self) -> Frame:
        """
        Return the final game state without intents for terminal view.
        """
        return Frame(world=self.world.clone(), done=self.done)

    # Helpers
    def _agent_from_scenario(self, scenario: Scenario, team: Team) -> PreparedAgent | None:
        matches = [spec for spec in scenario.agents or [] if spec.team == team]
        if not matches:
            return None
        if len(matches) > 1:
            raise ValueError(f"Multiple AgentSpecs found for team {team}")
        return create_agent_from_spec(matches[0])


def run_single_game(scenario: Scenario) -> GameState:
    """Play one headless game and return the finished state."""
    runner = GameRunner(scenario)
    runner.run()
    return runner.world


def run_multiple_games(
    num_games: int,
    *,
    rows: int = 5,
    cols: int = 5,
    units_per_team: int = 3,
    seed: int | None = None,
    max_rounds: int | None = 200,
    red_agent: str = "greedy",
    blue_agent: str = "greedy",
) -> Dict[str, Any]:
    """
    Play `num_games` headless games between two registered agent types.

    Game ``i`` uses seed ``seed + i`` when a seed is given.

    Returns:
        Summary with per-result counts, win reasons and average rounds
    """
    results: Counter = Counter()
    reasons: Counter = Counter()
    total_rounds = 0

    for index in range(num_games):
        scenario = create_random_scenario(
            rows=rows,
            cols=cols,
            units_per_team=units_per_team,
            seed=None if seed is None else seed + index,
            max_rounds=max_rounds,
            agents=[
                AgentSpec(team=Team.RED, type=red_agent),
                AgentSpec(team=Team.BLUE, type=blue_agent),
            ],
        )
        world = run_single_game(scenario)
        results[world.result.value] += 1
        if world.win_reason is not None:
            reasons[world.win_reason.value] += 1
        total_rounds += world.round_count
        logger.info(
            "Game %d/%d: %s (%s) after %d rounds",
            index + 1, num_games, world.result.value,
            world.win_reason.value if world.win_reason else "-", world.round_count,
        )

    return {
        "games": num_games,
        "results": {result.value: results.get(result.value, 0) for result in GameResult if result is not GameResult.IN_PROGRESS},
        "win_reasons": dict(reasons),
        "average_rounds": total_rounds / num_games if num_games else 0.0,
    }
