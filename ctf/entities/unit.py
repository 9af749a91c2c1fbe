from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ..core.types import (
    EXTREMITY_HITS_TO_ELIMINATE,
    HIT_PROFILES,
    UNPLACED,
    GridPos,
    HitProfile,
    SkillClass,
    SpeedClass,
    Team,
)

ELIMINATED_BY_HEADSHOT = "Headshot penalty"
ELIMINATED_BY_TORSO_HIT = "Hit in torso"
ELIMINATED_BY_EXTREMITIES = "3 extremity hits"


@dataclass
class Unit:
    """
    A single combatant on the board.

    Speed decides how far the unit can move in one action, skill decides its
    attack reach and hit profile. Units are never removed from the game:
    elimination only flips `eliminated` and records the cause.

    The position must only change through ``Board.place``/``Board.remove``
    so the board's cell membership stays in sync.
    """

    # Required attributes (NO defaults)
    id: int
    team: Team
    speed: SpeedClass
    skill: SkillClass

    pos: GridPos = UNPLACED
    start_pos: GridPos = UNPLACED
    extremity_hits: int = 0
    eliminated: bool = False
    elimination_reason: Optional[str] = None
    acted_this_round: bool = False
    name: Optional[str] = field(default=None, compare=False)

    def __post_init__(self):
        if self.id < 0:
            raise ValueError(f"Unit id cannot be negative: {self.id}")
        if not 0 <= self.extremity_hits <= EXTREMITY_HITS_TO_ELIMINATE:
            raise ValueError(f"Extremity hits out of range: {self.extremity_hits}")

    # ------------------------------------------------------------------
    # Derived stats
    # ------------------------------------------------------------------
    @property
    def alive(self) -> bool:
        return not self.eliminated

    @property
    def is_fast(self) -> bool:
        return self.speed is SpeedClass.FAST

    @property
    def is_expert(self) -> bool:
        return self.skill is SkillClass.EXPERT

    @property
    def max_movement(self) -> int:
        return self.speed.movement

    @property
    def hit_profile(self) -> HitProfile:
        return HIT_PROFILES[self.skill]

    @property
    def attack_range(self) -> int:
        return self.hit_profile.max_range

    @property
    def is_placed(self) -> bool:
        return self.pos != UNPLACED

    # ------------------------------------------------------------------
    # State changes
    # ------------------------------------------------------------------
    def eliminate(self, reason: str) -> bool:
        """
        Mark the unit as eliminated.

        The first reason sticks; later calls are no-ops.

        Returns:
            True if this call eliminated the unit
        """
        if self.eliminated:
            return False
        self.eliminated = True
        self.elimination_reason = reason
        return True

    def register_extremity_hit(self) -> bool:
        """
        Count one extremity hit.

        Returns:
            True if the hit eliminated the unit
        """
        self.extremity_hits = min(self.extremity_hits + 1, EXTREMITY_HITS_TO_ELIMINATE)
        if self.extremity_hits >= EXTREMITY_HITS_TO_ELIMINATE:
            return self.eliminate(ELIMINATED_BY_EXTREMITIES)
        return False

    # ------------------------------------------------------------------
    # Presentation helpers
    # ------------------------------------------------------------------
    def profile_code(self) -> str:
        """Two-letter class code: E/N for skill, F/S for speed (e.g. "EF")."""
        return ("E" if self.is_expert else "N") + ("F" if self.is_fast else "S")

    def label(self) -> str:
        """
        Human-readable label.

        Returns:
            String like "Unit#3(RED)" or "Scout#1(BLUE)"
        """
        display_name = self.name if self.name else "Unit"
        return f"{display_name}#{self.id}({self.team.name})"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "team": self.team.name,
            "name": self.name,
            "speed": self.speed.value,
            "skill": self.skill.value,
            "pos": list(self.pos),
            "start_pos": list(self.start_pos),
            "extremity_hits": self.extremity_hits,
            "eliminated": self.eliminated,
            "elimination_reason": self.elimination_reason,
            "acted_this_round": self.acted_this_round,
            "max_movement": self.max_movement,
            "attack_range": self.attack_range,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Unit:
        return cls(
            id=data["id"],
            team=Team[data["team"]],
            speed=SpeedClass(data["speed"]),
            skill=SkillClass(data["skill"]),
            pos=tuple(data.get("pos", UNPLACED)),
            start_pos=tuple(data.get("start_pos", UNPLACED)),
            extremity_hits=data.get("extremity_hits", 0),
            eliminated=data.get("eliminated", False),
            elimination_reason=data.get("elimination_reason"),
            acted_this_round=data.get("acted_this_round", False),
            name=data.get("name"),
        )

    def __str__(self) -> str:
        status = "eliminated" if self.eliminated else "active"
        return f"{self.label()} [{self.profile_code()}] at {self.pos} [{status}]"

    def __repr__(self) -> str:
        return (f"Unit(id={self.id}, team={self.team}, pos={self.pos}, "
                f"speed={self.speed.value}, skill={self.skill.value}, eliminated={self.eliminated})")
