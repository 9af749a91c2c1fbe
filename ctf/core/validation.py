"""
Rejection codes and the validation result used by every resolver path.

Rejections are ordinary values: a human player is re-prompted and the
opponent strategy moves on to its next candidate. Nothing in here raises.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Optional, Tuple

if TYPE_CHECKING:
    from ..entities.unit import Unit
    from ..world.state import GameState
    from .actions import Intent
    from .types import Team


class RejectReason(Enum):
    # Movement / attack validation
    INVALID_DIRECTION = "invalid_direction"
    OUT_OF_BOUNDS = "out_of_bounds"
    CAPACITY_EXCEEDED = "capacity_exceeded"
    INVALID_DISTANCE = "invalid_distance"
    BLOCKED_BY_OPPONENT = "blocked_by_opponent"
    DESTINATION_FULL = "destination_full"
    INVALID_RANGE = "invalid_range"
    LINE_OF_SIGHT_BLOCKED = "line_of_sight_blocked"
    NO_VALID_TARGET = "no_valid_target"

    # Intent-level checks done by the turn controller
    UNKNOWN_UNIT = "unknown_unit"
    WRONG_TEAM = "wrong_team"
    UNIT_ELIMINATED = "unit_eliminated"
    INVALID_ACTION = "invalid_action"


@dataclass(frozen=True)
class ActionValidation:
    """
    Result of checking whether an action may be carried out.

    Attributes:
        valid: True when the action passed every check
        reason: Rejection code (None when valid)
        message: Optional human-readable detail
    """

    valid: bool
    reason: Optional[RejectReason] = None
    message: str = ""

    @classmethod
    def success(cls, message: str = "") -> ActionValidation:
        return cls(valid=True, message=message)

    @classmethod
    def fail(cls, reason: RejectReason, message: str = "") -> ActionValidation:
        return cls(valid=False, reason=reason, message=message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "valid": self.valid,
            "reason": self.reason.value if self.reason else None,
            "message": self.message,
        }


def validate_intent(state: "GameState", team: "Team", intent: "Intent") -> Tuple[ActionValidation, Optional["Unit"]]:
    """
    Intent-level checks shared by both sides before any resolver runs.

    Confirms the unit exists, belongs to the acting team, is still in the
    game, and that the action kind is known. Direction and distance are left
    to the resolvers.

    Returns:
        (validation, unit) - unit is None when validation fails
    """
    from .types import ActionType

    unit = state.get_unit(intent.unit_id)
    if unit is None:
        return ActionValidation.fail(RejectReason.UNKNOWN_UNIT, f"There is no unit {intent.unit_id}."), None
    if unit.team is not team:
        return ActionValidation.fail(
            RejectReason.WRONG_TEAM, f"{unit.label()} is not on the {team.display_name}."
        ), None
    if unit.eliminated:
        return ActionValidation.fail(
            RejectReason.UNIT_ELIMINATED, f"{unit.label()} has been eliminated and cannot act."
        ), None
    if not isinstance(intent.kind, ActionType):
        return ActionValidation.fail(RejectReason.INVALID_ACTION, f"Unknown action {intent.kind!r}."), None
    return ActionValidation.success(), unit
