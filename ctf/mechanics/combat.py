"""
AttackResolver - line-of-sight shots along one of the four directions.

This module handles:
- Resolving AUTO range (one RNG draw, expert units only)
- Validating direction, range, bounds and line of sight
- Picking the single target (first live opponent in cell order)
- Classifying one uniform roll into head / torso / extremity / miss
- Applying the consequence (attacker penalty, elimination, hit counting)
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

from infra.logger import get_logger

from ..core.actions import Amount, AutoRoll
from ..core.types import GridPos, HitKind, HitProfile, MoveDir
from ..core.validation import ActionValidation, RejectReason
from ..entities.unit import ELIMINATED_BY_HEADSHOT, ELIMINATED_BY_TORSO_HIT

if TYPE_CHECKING:
    from ..entities.unit import Unit
    from ..world.state import GameState

logger = get_logger(__name__)

# Probability that an expert on AUTO shoots at the adjacent square.
EXPERT_SHORT_RANGE_CHANCE = 0.75


def classify_hit(roll: float, profile: HitProfile) -> HitKind:
    """
    Map a uniform roll in [0, 1) to a hit tier.

    The cumulative thresholds are compared in the fixed order head, torso,
    extremity; a roll at or above the last one is a miss.

    Examples:
        >>> from ctf.core.types import HIT_PROFILES, SkillClass
        >>> classify_hit(0.04, HIT_PROFILES[SkillClass.EXPERT])
        <HitKind.HEAD: 'head'>
        >>> classify_hit(0.30, HIT_PROFILES[SkillClass.NOVICE])
        <HitKind.TORSO: 'torso'>
        >>> classify_hit(0.85, HIT_PROFILES[SkillClass.NOVICE])
        <HitKind.MISS: 'miss'>
    """
    head, torso, extremity = profile.thresholds
    if roll < head:
        return HitKind.HEAD
    if roll < torso:
        return HitKind.TORSO
    if roll < extremity:
        return HitKind.EXTREMITY
    return HitKind.MISS


def roll_attack_range(unit: Unit, rng: random.Random) -> int:
    """Range for an AUTO attack: experts usually shoot at 1, sometimes at 2."""
    if unit.is_expert:
        return 1 if rng.random() <= EXPERT_SHORT_RANGE_CHANCE else 2
    return 1


@dataclass
class AttackResult:
    """
    Result of resolving one attack.

    Attributes:
        attacker_id: Unit that attacked
        success: True when a hit landed (head, torso or extremity)
        fired: True when validation passed and the hit roll was drawn
        reason: Rejection code when the attack never fired
        target_id: Chosen target (None if none)
        attack_range: Range after AUTO resolution (None if unresolved)
        target_pos: Square aimed at
        hit_kind: Roll classification (None if not fired)
        roll: The uniform draw (None if not fired)
        target_extremity_hits: Target's hit count after resolution
        eliminated_ids: Units eliminated by this attack
    """

    attacker_id: int
    success: bool
    fired: bool = False
    reason: Optional[RejectReason] = None
    target_id: Optional[int] = None
    attack_range: Optional[int] = None
    target_pos: Optional[GridPos] = None
    hit_kind: Optional[HitKind] = None
    roll: Optional[float] = None
    target_extremity_hits: Optional[int] = None
    eliminated_ids: List[int] = field(default_factory=list)
    detail: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "attacker_id": self.attacker_id,
            "success": self.success,
            "fired": self.fired,
            "reason": self.reason.value if self.reason else None,
            "target_id": self.target_id,
            "attack_range": self.attack_range,
            "target_pos": list(self.target_pos) if self.target_pos else None,
            "hit_kind": self.hit_kind.value if self.hit_kind else None,
            "roll": self.roll,
            "target_extremity_hits": self.target_extremity_hits,
            "eliminated_ids": list(self.eliminated_ids),
            "detail": self.detail,
        }


class AttackResolver:
    """
    Stateless resolver for attack actions.

    Uses the state's random source unless one is injected (tests).
    """

    def __init__(self, rng: random.Random | None = None):
        self._rng = rng

    def resolve(
        self,
        state: GameState,
        attacker: Unit,
        direction: Any,
        amount: Amount,
    ) -> AttackResult:
        attacker.acted_this_round = True
        rng = self._rng if self._rng is not None else state.rng

        if not isinstance(direction, MoveDir):
            return self._rejected(
                attacker,
                ActionValidation.fail(
                    RejectReason.INVALID_DIRECTION,
                    "Invalid attack direction. Must be UP, LEFT, DOWN or RIGHT.",
                ),
            )

        if isinstance(amount, AutoRoll):
            attack_range = roll_attack_range(attacker, rng)
        else:
            attack_range = amount.value

        validation, target = self.validate(state, attacker, direction, attack_range)
        if not validation.valid:
            return self._rejected(attacker, validation, attack_range)

        dx, dy = direction.delta
        target_pos = (attacker.pos[0] + dx * attack_range, attacker.pos[1] + dy * attack_range)
        roll = rng.random()
        hit_kind = classify_hit(roll, attacker.hit_profile)

        eliminated: List[int] = []
        if hit_kind is HitKind.HEAD:
            if attacker.eliminate(ELIMINATED_BY_HEADSHOT):
                eliminated.append(attacker.id)
        elif hit_kind is HitKind.TORSO:
            if target.eliminate(ELIMINATED_BY_TORSO_HIT):
                eliminated.append(target.id)
        elif hit_kind is HitKind.EXTREMITY:
            if target.register_extremity_hit():
                eliminated.append(target.id)

        logger.debug(
            "%s fires at %s (range=%d, roll=%.3f) -> %s",
            attacker.label(), target.label(), attack_range, roll, hit_kind.value,
        )

        return AttackResult(
            attacker_id=attacker.id,
            success=hit_kind is not HitKind.MISS,
            fired=True,
            target_id=target.id,
            attack_range=attack_range,
            target_pos=target_pos,
            hit_kind=hit_kind,
            roll=roll,
            target_extremity_hits=target.extremity_hits,
            eliminated_ids=eliminated,
        )

    def validate(
        self,
        state: GameState,
        attacker: Unit,
        direction: MoveDir,
        attack_range: int,
    ) -> Tuple[ActionValidation, Optional[Unit]]:
        """
        Check an attack with a concrete range and find its target.

        Returns:
            (validation, target) - target is None whenever validation fails
        """
        max_range = attacker.attack_range
        if not 1 <= attack_range <= max_range:
            hint = (
                "Expert units can attack 1-2 squares."
                if attacker.is_expert
                else "Novice units can only attack 1 square."
            )
            return ActionValidation.fail(RejectReason.INVALID_RANGE, f"Invalid attack range. {hint}"), None

        board = state.board
        dx, dy = direction.delta
        x, y = attacker.pos
        tx, ty = x + dx * attack_range, y + dy * attack_range
        if not board.in_bounds(tx, ty):
            return ActionValidation.fail(RejectReason.OUT_OF_BOUNDS, "Attack target is out of bounds."), None

        block_with_eliminated = state.rules.eliminated_block_sight
        for step in range(1, attack_range):
            cell = board.cell(x + dx * step, y + dy * step)
            blockers = cell.units if block_with_eliminated else cell.live_units()
            if blockers:
                return ActionValidation.fail(
                    RejectReason.LINE_OF_SIGHT_BLOCKED,
                    "Line of sight blocked by units in intermediate squares.",
                ), None

        target = next(
            (u for u in board.units_at(tx, ty) if u.team is not attacker.team and not u.eliminated),
            None,
        )
        if target is None:
            return ActionValidation.fail(RejectReason.NO_VALID_TARGET, "No valid targets in range."), None

        return ActionValidation.success(), target

    @staticmethod
    def _rejected(
        attacker: Unit,
        validation: ActionValidation,
        attack_range: Optional[int] = None,
    ) -> AttackResult:
        logger.debug("%s attack rejected: %s", attacker.label(), validation.message)
        return AttackResult(
            attacker_id=attacker.id,
            success=False,
            reason=validation.reason,
            attack_range=attack_range,
            detail=validation.message,
        )
