"""
FlagGameEnv - the turn controller.

This is the primary API of the engine. It owns one GameState at a time and
advances it one action per ``step()`` call:

    from ctf import FlagGameEnv, create_random_scenario
    from agents import GreedyAgent

    env = FlagGameEnv()
    state = env.reset(create_random_scenario(seed=7))
    opponent = GreedyAgent(env.state.opponent_team)

    while not env.is_game_over:
        if env.awaiting_human:
            intent = ...  # from the input layer
            state, outcome, done, info = env.step(intent)
            if not outcome.resolved:
                ...  # re-prompt: nothing changed, still the human's turn
        else:
            candidates, _meta = opponent.get_intents(state)
            state, outcome, done, info = env.step(candidates)

Turn state machine:
    ROUND_COMPLETE -> (reset acted flags) -> AWAITING_HUMAN / AWAITING_OPPONENT
    -> the other side -> ROUND_COMPLETE (round_count + 1) ...
    Any resolved action may jump to GAME_OVER.

State Structure:
    {
        "world": GameState
    }
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from infra.logger import get_logger

from .core.actions import ActionOutcome, Intent
from .core.messages import describe_attack, describe_move, describe_rejection
from .core.types import ActionType, GameResult, Team, TurnPhase, WinReason
from .core.validation import validate_intent
from .mechanics import (
    AttackResolver,
    AttackResult,
    MovementResolver,
    MoveResult,
    VictoryConditions,
    VictoryResult,
)
from .scenario import Scenario
from .world.state import GameState

logger = get_logger(__name__)


@dataclass
class ResolvedIntent:
    """One intent pushed through the resolution path, with its raw result."""

    intent: Intent
    outcome: ActionOutcome
    move: Optional[MoveResult] = None
    attack: Optional[AttackResult] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "intent": self.intent.to_dict(),
            "outcome": self.outcome.to_dict(),
            "move": self.move.to_dict() if self.move else None,
            "attack": self.attack.to_dict() if self.attack else None,
        }


@dataclass
class StepInfo:
    """
    Per-step metadata returned by ``step()``.

    Attributes:
        team: Team that acted
        attempts: Every intent tried this step, in order
        victory: Victory check after the step (in progress on a human retry)
        turn_passed: Control moved on (False only when a human intent was rejected)
        round_completed: This step closed the round
    """

    team: Team
    attempts: List[ResolvedIntent] = field(default_factory=list)
    victory: VictoryResult = field(default_factory=VictoryResult.in_progress)
    turn_passed: bool = True
    round_completed: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "team": self.team.name,
            "attempts": [a.to_dict() for a in self.attempts],
            "victory": self.victory.to_dict(),
            "turn_passed": self.turn_passed,
            "round_completed": self.round_completed,
        }


class FlagGameEnv:
    """
    Capture-the-flag turn controller.

    The environment manages:
    - The game state (board, rosters, rng, turn bookkeeping)
    - Intent validation and routing to the movement/attack resolvers
    - Victory checks after every resolved turn
    - Round bookkeeping (acted flags, round counter, optional round cap)
    - The display action log
    """

    def __init__(self):
        self.state: Optional[GameState] = None
        self._scenario: Optional[Scenario] = None

        # Mechanics modules (stateless, can be reused)
        self._movement = MovementResolver()
        self._attacks = AttackResolver()
        self._victory = VictoryConditions()

    def reset(self, scenario: Scenario | Dict[str, Any]) -> Dict[str, Any]:
        """
        Start a new game from a scenario (or its ``to_dict()`` form).

        Returns:
            Initial state dict

        Raises:
            ScenarioError: If the scenario cannot produce a game
        """
        scenario_obj = scenario.clone() if isinstance(scenario, Scenario) else Scenario.from_dict(scenario)
        self._scenario = scenario_obj
        self.state = scenario_obj.build_state()
        self._start_round()
        logger.info(
            "Game started: human=%s, %s acts first",
            self.state.human_team.name, self.state.first_team.name,
        )
        return self._build_state()

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------
    @property
    def scenario(self) -> Optional[Scenario]:
        return self._scenario

    @property
    def phase(self) -> TurnPhase:
        self._require_state()
        return self.state.phase

    @property
    def awaiting_team(self) -> Optional[Team]:
        """Team whose intent the next ``step()`` resolves (None once over)."""
        self._require_state()
        if self.state.game_over:
            return None
        if self.state.phase is TurnPhase.ROUND_COMPLETE:
            return self.state.first_team
        return self.state.active_team

    @property
    def awaiting_human(self) -> bool:
        team = self.awaiting_team
        return team is not None and self.state.is_human(team)

    @property
    def is_game_over(self) -> bool:
        return self.state is not None and self.state.game_over

    @property
    def winner(self) -> Optional[Team]:
        return self.state.winner if self.state else None

    @property
    def rounds_played(self) -> int:
        """Completed rounds plus the round in progress, if any side has acted in it."""
        self._require_state()
        return self.state.round_count + (1 if self.state.teams_acted else 0)

    # ------------------------------------------------------------------
    # Core API
    # ------------------------------------------------------------------
    def step(
        self,
        intents: Intent | Iterable[Intent],
        *,
        as_candidates: bool = False,
    ) -> Tuple[Dict[str, Any], ActionOutcome, bool, StepInfo]:
        """
        Resolve one turn for the team that is to act.

        The human side submits exactly one intent. If it is rejected nothing
        changes and it is still the human's turn. The opponent side submits
        an ordered list of candidates; they are resolved one by one until one
        succeeds, and the turn passes even if none does.

        Args:
            intents: One intent, or an ordered candidate list
            as_candidates: Resolve the human side with the opponent rules too
                (used when an agent plays the human team)

        Returns:
            (state, outcome, done, info)

        Raises:
            RuntimeError: If reset() hasn't been called or the game is over
            ValueError: If the human side submits anything but one intent
        """
        self._require_state()
        state = self.state
        if state.game_over:
            raise RuntimeError("Game is already finished")
        if state.phase is TurnPhase.ROUND_COMPLETE:
            self._start_round()

        team = state.active_team
        candidates = [intents] if isinstance(intents, Intent) else list(intents)
        info = StepInfo(team=team)

        if not state.get_team_units(team, alive_only=True):
            outcome = ActionOutcome.no_action(f"No active units available for the {team.display_name}.")
            state.log_action(team, outcome.message)
        elif state.is_human(team) and not as_candidates:
            if len(candidates) != 1:
                raise ValueError(f"The human side submits exactly one intent per step, got {len(candidates)}")
            attempt = self.resolve_intent(team, candidates[0])
            info.attempts.append(attempt)
            outcome = attempt.outcome
            if not outcome.resolved:
                logger.info("Human intent rejected (%s): %s", outcome.reason.value, outcome.message)
                info.turn_passed = False
                return self._build_state(), outcome, False, info
            state.log_action(team, outcome.message)
        else:
            outcome = None
            for intent in candidates:
                attempt = self.resolve_intent(team, intent)
                info.attempts.append(attempt)
                if attempt.outcome.success:
                    outcome = attempt.outcome
                    break
            if outcome is None:
                outcome = ActionOutcome.no_action(f"{team.display_name} couldn't perform any actions.")
            state.log_action(team, outcome.message)

        logger.info("%s: %s", team.name, outcome.message)
        state.teams_acted.append(team)

        victory = self._victory.check_all(state)
        info.victory = victory
        if victory.is_game_over:
            self._finish(victory)
        else:
            info.round_completed = self._end_turn(team)
            if state.game_over:
                info.victory = VictoryResult(
                    state.result, state.winner, state.win_reason, state.game_over_reason or ""
                )

        return self._build_state(), outcome, state.game_over, info

    def resolve_intent(self, team: Team, intent: Intent) -> ResolvedIntent:
        """
        Validate one intent for `team` and run it through the matching resolver.

        This is the single resolution path for both sides. It does not run
        victory checks or touch turn bookkeeping.
        """
        self._require_state()
        validation, unit = validate_intent(self.state, team, intent)
        if not validation.valid:
            outcome = ActionOutcome(
                success=False,
                message=describe_rejection(validation.reason, validation.message),
                reason=validation.reason,
                unit_id=intent.unit_id,
                kind=intent.kind if isinstance(intent.kind, ActionType) else None,
            )
            return ResolvedIntent(intent=intent, outcome=outcome)

        if intent.kind is ActionType.MOVE:
            move = self._movement.resolve(self.state, unit, intent.direction, intent.amount)
            outcome = ActionOutcome(
                success=move.success,
                message=describe_move(move),
                reason=move.reason,
                unit_id=unit.id,
                kind=ActionType.MOVE,
            )
            return ResolvedIntent(intent=intent, outcome=outcome, move=move)

        attack = self._attacks.resolve(self.state, unit, intent.direction, intent.amount)
        outcome = ActionOutcome(
            success=attack.success,
            message=describe_attack(attack),
            eliminated_unit_ids=frozenset(attack.eliminated_ids),
            reason=attack.reason,
            unit_id=unit.id,
            kind=ActionType.ATTACK,
        )
        return ResolvedIntent(intent=intent, outcome=outcome, attack=attack)

    # ------------------------------------------------------------------
    # Turn bookkeeping
    # ------------------------------------------------------------------
    def _start_round(self) -> None:
        state = self.state
        state.reset_acted_flags()
        state.teams_acted.clear()
        state.active_team = state.first_team
        state.phase = self._phase_for(state.first_team)
        logger.debug("Round %d begins, %s to act", state.round_count + 1, state.first_team.name)

    def _end_turn(self, team: Team) -> bool:
        """Hand control to the other side; returns True when the round closed."""
        state = self.state
        if set(state.teams_acted) >= set(Team):
            state.round_count += 1
            state.teams_acted.clear()
            state.phase = TurnPhase.ROUND_COMPLETE
            logger.info("Round %d complete", state.round_count)
            if state.max_rounds is not None and state.round_count >= state.max_rounds:
                self._finish(VictoryResult(
                    GameResult.DRAW,
                    reason=WinReason.ROUND_LIMIT,
                    message=f"Round limit of {state.max_rounds} reached. The game is a draw.",
                ))
            return True

        state.active_team = team.opponent
        state.phase = self._phase_for(team.opponent)
        return False

    def _finish(self, victory: VictoryResult) -> None:
        state = self.state
        state.game_over = True
        state.phase = TurnPhase.GAME_OVER
        state.result = victory.result
        state.winner = victory.winner
        state.win_reason = victory.reason
        state.game_over_reason = victory.message
        state.log_action(None, victory.message)
        logger.info(
            "Game over: %s (winner=%s, rounds=%d)",
            victory.message, victory.winner.name if victory.winner else "none", self.rounds_played,
        )

    def _phase_for(self, team: Team) -> TurnPhase:
        return TurnPhase.AWAITING_HUMAN if self.state.is_human(team) else TurnPhase.AWAITING_OPPONENT

    def _require_state(self) -> None:
        if self.state is None:
            raise RuntimeError("Must call reset() before using the environment")

    def _build_state(self) -> Dict[str, Any]:
        return {
            "world": self.state,
        }

    def close(self) -> None:
        """Kept for gym-style symmetry; nothing to release."""
        pass
