"""
Core type definitions shared by every engine module.

Enums for teams, directions, unit classes, action kinds and game results,
plus the per-skill hit profiles that drive attack resolution.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple

# (x, y) board coordinate: x is the column, y is the row.
GridPos = Tuple[int, int]

UNPLACED: GridPos = (-1, -1)


class Team(Enum):
    """The two sides of a game."""

    RED = "red"
    BLUE = "blue"

    @property
    def opponent(self) -> Team:
        return Team.BLUE if self is Team.RED else Team.RED

    @property
    def display_name(self) -> str:
        return f"{self.name.capitalize()} Team"


class MoveDir(Enum):
    """
    Cardinal directions used for both movement and attacks.

    Values keep the numeric codes of the classic control scheme
    (UP=1, LEFT=2, DOWN=3, RIGHT=4).
    """

    UP = 1
    LEFT = 2
    DOWN = 3
    RIGHT = 4

    @property
    def delta(self) -> GridPos:
        return _DIRECTION_DELTAS[self]

    @classmethod
    def parse(cls, value: object) -> MoveDir | None:
        """Accept a MoveDir, its name (any case) or its numeric code."""
        if isinstance(value, MoveDir):
            return value
        if isinstance(value, str):
            return cls.__members__.get(value.strip().upper())
        if isinstance(value, int) and not isinstance(value, bool):
            try:
                return cls(value)
            except ValueError:
                return None
        return None


_DIRECTION_DELTAS: Dict[MoveDir, GridPos] = {
    MoveDir.UP: (0, -1),
    MoveDir.DOWN: (0, 1),
    MoveDir.LEFT: (-1, 0),
    MoveDir.RIGHT: (1, 0),
}


class SpeedClass(Enum):
    FAST = "fast"
    SLOW = "slow"

    @property
    def movement(self) -> int:
        return 2 if self is SpeedClass.FAST else 1


class SkillClass(Enum):
    EXPERT = "expert"
    NOVICE = "novice"


class ActionType(Enum):
    MOVE = "move"
    ATTACK = "attack"


class HitKind(Enum):
    """Outcome tier of a single attack roll."""

    HEAD = "head"
    TORSO = "torso"
    EXTREMITY = "extremity"
    MISS = "miss"


class WinReason(Enum):
    CAPTURE = "capture"
    ELIMINATION = "elimination"
    RETREAT = "retreat"
    ROUND_LIMIT = "round_limit"


class GameResult(Enum):
    IN_PROGRESS = "in_progress"
    RED_WINS = "red_wins"
    BLUE_WINS = "blue_wins"
    DRAW = "draw"

    @classmethod
    def win_for(cls, team: Team) -> GameResult:
        return cls.RED_WINS if team is Team.RED else cls.BLUE_WINS


class TurnPhase(Enum):
    """States of the per-round turn machine."""

    AWAITING_HUMAN = "awaiting_human"
    AWAITING_OPPONENT = "awaiting_opponent"
    ROUND_COMPLETE = "round_complete"
    GAME_OVER = "game_over"


@dataclass(frozen=True)
class HitProfile:
    """
    Hit chances and reach for one skill class.

    Chances are compared cumulatively in the order head, torso, extremity
    against a single uniform roll; anything above all three is a miss.
    """

    head: float
    torso: float
    extremity: float
    max_range: int

    @property
    def thresholds(self) -> Tuple[float, float, float]:
        return (
            self.head,
            self.head + self.torso,
            self.head + self.torso + self.extremity,
        )


HIT_PROFILES: Dict[SkillClass, HitProfile] = {
    SkillClass.EXPERT: HitProfile(head=0.05, torso=0.60, extremity=0.85, max_range=2),
    SkillClass.NOVICE: HitProfile(head=0.25, torso=0.10, extremity=0.50, max_range=1),
}

# Same-team stacking cap for a movement destination.
MAX_UNITS_PER_CELL = 4

# Extremity hits that eliminate a unit.
EXTREMITY_HITS_TO_ELIMINATE = 3
