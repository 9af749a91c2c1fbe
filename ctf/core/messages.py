"""
Human-readable text for resolver results.

Resolvers only return codes and numbers; the wording shown to players and
written to the action log is produced here.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .types import EXTREMITY_HITS_TO_ELIMINATE, HitKind
from .validation import RejectReason

if TYPE_CHECKING:
    from ..mechanics.combat import AttackResult
    from ..mechanics.movement import MoveResult

_REJECTION_TEXT = {
    RejectReason.INVALID_DIRECTION: "Invalid direction.",
    RejectReason.OUT_OF_BOUNDS: "Target square is out of bounds.",
    RejectReason.CAPACITY_EXCEEDED: "Requested distance exceeds the unit's movement.",
    RejectReason.INVALID_DISTANCE: "Distance must be at least 1.",
    RejectReason.BLOCKED_BY_OPPONENT: "Cannot move into or through a cell occupied by opponent units.",
    RejectReason.DESTINATION_FULL: "Destination cell is full.",
    RejectReason.INVALID_RANGE: "Invalid attack range.",
    RejectReason.LINE_OF_SIGHT_BLOCKED: "Line of sight blocked by units in intermediate squares.",
    RejectReason.NO_VALID_TARGET: "No valid targets in range.",
    RejectReason.UNKNOWN_UNIT: "No such unit.",
    RejectReason.WRONG_TEAM: "That unit belongs to the other team.",
    RejectReason.UNIT_ELIMINATED: "That unit has been eliminated.",
    RejectReason.INVALID_ACTION: "Invalid action.",
}


def describe_rejection(reason: RejectReason, detail: str = "") -> str:
    return detail or _REJECTION_TEXT[reason]


def describe_move(result: MoveResult) -> str:
    if not result.success:
        return describe_rejection(result.reason, result.detail)
    x, y = result.destination
    return f"Unit {result.unit_id} moved to ({x}, {y})."


def describe_attack(result: AttackResult) -> str:
    if not result.fired:
        return describe_rejection(result.reason, result.detail)

    attacker, target = result.attacker_id, result.target_id
    if result.hit_kind is HitKind.HEAD:
        return f"Unit {attacker} hit opponent's head and is eliminated due to rule violation!"
    if result.hit_kind is HitKind.TORSO:
        return f"Unit {attacker} hit opponent unit {target}'s torso! Unit {target} is eliminated!"
    if result.hit_kind is HitKind.EXTREMITY:
        text = (
            f"Unit {attacker} hit opponent unit {target}'s extremity! "
            f"({result.target_extremity_hits}/{EXTREMITY_HITS_TO_ELIMINATE} hits)"
        )
        if target in result.eliminated_ids:
            text += (
                f" Unit {target} received {EXTREMITY_HITS_TO_ELIMINATE} hits to extremities "
                f"and is eliminated!"
            )
        return text
    return f"Unit {attacker} missed the shot."
