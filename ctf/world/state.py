"""
GameState - the explicit, single owner of everything a game mutates.

Resolvers and evaluators receive the state by reference; there is no
module-level game object. The state owns the board, both rosters, the random
source, the turn bookkeeping and the display-only action log.
"""

from __future__ import annotations

import copy
import random
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from ..core.types import GameResult, GridPos, Team, TurnPhase, WinReason
from ..entities.unit import Unit
from .board import Board


@dataclass(frozen=True)
class RuleOptions:
    """
    Switches for the two rules whose reading is ambiguous.

    Attributes:
        eliminated_block_sight: Eliminated units still standing on a square
            block line of sight (default: they do not)
        retreat_requires_all_acted: Only judge a retreat once every survivor
            of the retreating team has acted this round (default: off).
            A side resolves one action per round, so with two or more
            survivors this only fires when a candidate loop marked several
            units; in practice it turns retreat off for multi-unit teams.
    """

    eliminated_block_sight: bool = False
    retreat_requires_all_acted: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "eliminated_block_sight": self.eliminated_block_sight,
            "retreat_requires_all_acted": self.retreat_requires_all_acted,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> RuleOptions:
        data = data or {}
        return cls(
            eliminated_block_sight=bool(data.get("eliminated_block_sight", False)),
            retreat_requires_all_acted=bool(data.get("retreat_requires_all_acted", False)),
        )


@dataclass(frozen=True)
class ActionLogEntry:
    team: Optional[Team]
    timestamp: str
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "team": self.team.name if self.team else None,
            "timestamp": self.timestamp,
            "message": self.message,
        }


@dataclass
class GameState:
    board: Board
    units: Dict[int, Unit]
    rng: random.Random
    human_team: Team
    first_team: Team
    rules: RuleOptions = field(default_factory=RuleOptions)
    max_rounds: Optional[int] = None

    active_team: Optional[Team] = None
    phase: TurnPhase = TurnPhase.ROUND_COMPLETE
    round_count: int = 0
    teams_acted: List[Team] = field(default_factory=list)

    game_over: bool = False
    result: GameResult = GameResult.IN_PROGRESS
    winner: Optional[Team] = None
    win_reason: Optional[WinReason] = None
    game_over_reason: Optional[str] = None

    action_log: List[ActionLogEntry] = field(default_factory=list)

    # ------------------------------------------------------------------
    # Roster queries
    # ------------------------------------------------------------------
    @property
    def opponent_team(self) -> Team:
        return self.human_team.opponent

    def get_unit(self, unit_id: int) -> Optional[Unit]:
        return self.units.get(unit_id)

    def get_all_units(self) -> List[Unit]:
        return list(self.units.values())

    def get_team_units(self, team: Team, alive_only: bool = False) -> List[Unit]:
        return [
            u for u in self.units.values()
            if u.team is team and (not alive_only or not u.eliminated)
        ]

    def flag_of(self, team: Team) -> GridPos:
        return self.board.flag_of(team)

    def enemy_flag_of(self, team: Team) -> GridPos:
        return self.board.flag_of(team.opponent)

    def is_human(self, team: Team) -> bool:
        return team is self.human_team

    # ------------------------------------------------------------------
    # Bookkeeping
    # ------------------------------------------------------------------
    def reset_acted_flags(self, units: Iterable[Unit] | None = None) -> None:
        for unit in units if units is not None else self.units.values():
            unit.acted_this_round = False

    def log_action(self, team: Optional[Team], message: str) -> ActionLogEntry:
        entry = ActionLogEntry(team=team, timestamp=time.strftime("%H:%M:%S"), message=message)
        self.action_log.append(entry)
        return entry

    def recent_log(self, count: int = 3) -> List[ActionLogEntry]:
        return self.action_log[-count:] if count > 0 else []

    def team_summary(self, team: Team) -> Dict[str, Any]:
        """Active count and elimination causes, as shown in the team stats panel."""
        units = self.get_team_units(team)
        return {
            "active": sum(1 for u in units if not u.eliminated),
            "eliminated": [
                {"id": u.id, "reason": u.elimination_reason}
                for u in units if u.eliminated
            ],
        }

    def clone(self) -> GameState:
        """Deep copy (board, units and rng state included)."""
        return copy.deepcopy(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "board": self.board.to_dict(),
            "units": [u.to_dict() for u in self.units.values()],
            "human_team": self.human_team.name,
            "first_team": self.first_team.name,
            "active_team": self.active_team.name if self.active_team else None,
            "phase": self.phase.value,
            "round": self.round_count,
            "game_over": self.game_over,
            "result": self.result.value,
            "winner": self.winner.name if self.winner else None,
            "win_reason": self.win_reason.value if self.win_reason else None,
            "game_over_reason": self.game_over_reason,
            "max_rounds": self.max_rounds,
            "rules": self.rules.to_dict(),
            "teams": {team.name: self.team_summary(team) for team in Team},
            "action_log": [e.to_dict() for e in self.action_log],
        }
