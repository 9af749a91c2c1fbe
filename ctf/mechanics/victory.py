"""
VictoryConditions - decides whether the last action ended the game.

Conditions are checked in a fixed priority order and the first one that
holds decides the game:
1. Capture: a live unit stands on the opposing flag
2. Elimination: every unit of a team is eliminated
3. Retreat: every survivor of a team sits on its own flag

Within each condition RED is examined before BLUE. A round limit (draw) is
only checked by the turn controller when a round completes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Optional

from ..core.types import GameResult, Team, WinReason

if TYPE_CHECKING:
    from ..world.state import GameState

TEAM_ORDER = (Team.RED, Team.BLUE)


@dataclass(frozen=True)
class VictoryResult:
    """
    Outcome of a victory check.

    Attributes:
        result: IN_PROGRESS, RED_WINS, BLUE_WINS or DRAW
        winner: Winning team (None while in progress or on a draw)
        reason: Which condition fired
        message: Human-readable explanation
    """

    result: GameResult
    winner: Optional[Team] = None
    reason: Optional[WinReason] = None
    message: str = ""

    @property
    def is_game_over(self) -> bool:
        return self.result is not GameResult.IN_PROGRESS

    @classmethod
    def in_progress(cls) -> VictoryResult:
        return cls(GameResult.IN_PROGRESS)

    @classmethod
    def win(cls, team: Team, reason: WinReason, message: str) -> VictoryResult:
        return cls(GameResult.win_for(team), team, reason, message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "result": self.result.value,
            "winner": self.winner.name if self.winner else None,
            "reason": self.reason.value if self.reason else None,
            "message": self.message,
            "is_game_over": self.is_game_over,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> VictoryResult:
        return cls(
            result=GameResult(data["result"]),
            winner=Team[data["winner"]] if data.get("winner") else None,
            reason=WinReason(data["reason"]) if data.get("reason") else None,
            message=data.get("message", ""),
        )


class VictoryConditions:
    """Stateless evaluator; rule switches are read from the game state."""

    def check_all(self, state: GameState) -> VictoryResult:
        for check in (self.check_capture, self.check_elimination, self.check_retreat):
            result = check(state)
            if result.is_game_over:
                return result
        return VictoryResult.in_progress()

    def check_capture(self, state: GameState) -> VictoryResult:
        for team in TEAM_ORDER:
            target = state.enemy_flag_of(team)
            for unit in state.get_team_units(team, alive_only=True):
                if unit.pos == target:
                    return VictoryResult.win(
                        team,
                        WinReason.CAPTURE,
                        f"{team.display_name} wins by capturing "
                        f"{team.opponent.name.capitalize()}'s flag area!",
                    )
        return VictoryResult.in_progress()

    def check_elimination(self, state: GameState) -> VictoryResult:
        for team in TEAM_ORDER:
            if not state.get_team_units(team, alive_only=True):
                winner = team.opponent
                return VictoryResult.win(
                    winner,
                    WinReason.ELIMINATION,
                    f"{winner.display_name} wins by eliminating all {team.display_name} units!",
                )
        return VictoryResult.in_progress()

    def check_retreat(self, state: GameState) -> VictoryResult:
        for team in TEAM_ORDER:
            survivors = state.get_team_units(team, alive_only=True)
            if not survivors:
                continue
            if state.rules.retreat_requires_all_acted and not all(u.acted_this_round for u in survivors):
                continue
            own_flag = state.flag_of(team)
            if all(u.pos == own_flag for u in survivors):
                winner = team.opponent
                return VictoryResult.win(
                    winner,
                    WinReason.RETREAT,
                    f"All active {team.display_name} units are at their flag area. "
                    f"{winner.display_name} wins by opponent's retreat!",
                )
        return VictoryResult.in_progress()
