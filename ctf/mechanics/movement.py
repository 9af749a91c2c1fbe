"""
MovementResolver - validates and executes a single unit move.

This module handles:
- Turning an AUTO distance into a concrete one (one RNG draw, fast units only)
- Capacity and direction checks
- Walking the path square by square (bounds, opposing units, stacking cap)
- Relocating the unit on success

Validation always finishes before the board is touched, so a rejected move
leaves positions and cell contents exactly as they were. The only field
written on every path is the mover's `acted_this_round`.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Any, Dict, Optional, TYPE_CHECKING

from infra.logger import get_logger

from ..core.actions import Amount, AutoRoll
from ..core.types import MAX_UNITS_PER_CELL, GridPos, MoveDir
from ..core.validation import ActionValidation, RejectReason

if TYPE_CHECKING:
    from ..entities.unit import Unit
    from ..world.state import GameState

logger = get_logger(__name__)

# Probability that a fast unit on AUTO covers two squares.
FAST_DOUBLE_STEP_CHANCE = 0.5


@dataclass
class MoveResult:
    """
    Result of resolving one move.

    Attributes:
        unit_id: Unit that tried to move
        success: Whether the unit was relocated
        reason: Rejection code when not successful
        origin: Position before the call
        destination: Position after a successful move (None otherwise)
        distance: Squares requested after AUTO resolution (None if unresolved)
    """

    unit_id: int
    success: bool
    origin: GridPos
    reason: Optional[RejectReason] = None
    destination: Optional[GridPos] = None
    distance: Optional[int] = None
    detail: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "unit_id": self.unit_id,
            "success": self.success,
            "reason": self.reason.value if self.reason else None,
            "origin": list(self.origin),
            "destination": list(self.destination) if self.destination else None,
            "distance": self.distance,
            "detail": self.detail,
        }


def roll_move_distance(unit: Unit, rng: random.Random) -> int:
    """Distance for an AUTO move: fast units take 2 squares half the time."""
    if unit.is_fast:
        return 2 if rng.random() <= FAST_DOUBLE_STEP_CHANCE else 1
    return 1


class MovementResolver:
    """
    Stateless resolver for move actions.

    Uses the state's random source unless one is injected (tests).
    """

    def __init__(self, rng: random.Random | None = None):
        self._rng = rng

    def resolve(
        self,
        state: GameState,
        unit: Unit,
        direction: Any,
        amount: Amount,
    ) -> MoveResult:
        unit.acted_this_round = True
        origin = unit.pos

        if isinstance(amount, AutoRoll):
            rng = self._rng if self._rng is not None else state.rng
            distance = roll_move_distance(unit, rng)
        else:
            distance = amount.value

        validation = self.validate(state, unit, direction, distance)
        if not validation.valid:
            logger.debug("%s move rejected: %s", unit.label(), validation.message)
            return MoveResult(
                unit_id=unit.id,
                success=False,
                origin=origin,
                reason=validation.reason,
                distance=distance,
                detail=validation.message,
            )

        dx, dy = direction.delta
        destination = (origin[0] + dx * distance, origin[1] + dy * distance)
        state.board.relocate(unit, *destination)
        logger.debug("%s moved %s -> %s", unit.label(), origin, destination)

        return MoveResult(
            unit_id=unit.id,
            success=True,
            origin=origin,
            destination=destination,
            distance=distance,
        )

    def validate(
        self,
        state: GameState,
        unit: Unit,
        direction: Any,
        distance: int,
    ) -> ActionValidation:
        """
        Check a move with a concrete distance without changing anything.

        Checks run in a fixed order: capacity, direction, then the path.
        """
        if distance > unit.max_movement:
            return ActionValidation.fail(
                RejectReason.CAPACITY_EXCEEDED,
                f"Cannot move {distance} squares. Maximum movement is {unit.max_movement}.",
            )
        if distance < 1:
            return ActionValidation.fail(
                RejectReason.INVALID_DISTANCE,
                f"Cannot move {distance} squares. Distance must be at least 1.",
            )
        if not isinstance(direction, MoveDir):
            return ActionValidation.fail(RejectReason.INVALID_DIRECTION, "Invalid direction.")

        board = state.board
        dx, dy = direction.delta
        x, y = unit.pos
        for step in range(1, distance + 1):
            nx, ny = x + dx * step, y + dy * step
            if not board.in_bounds(nx, ny):
                return ActionValidation.fail(
                    RejectReason.OUT_OF_BOUNDS, "Movement would go out of bounds."
                )
            occupants = board.cell(nx, ny).live_units()
            if any(other.team is not unit.team for other in occupants):
                return ActionValidation.fail(
                    RejectReason.BLOCKED_BY_OPPONENT,
                    "Cannot move into or through a cell occupied by opponent units.",
                )
            if step == distance and len(occupants) >= MAX_UNITS_PER_CELL:
                return ActionValidation.fail(
                    RejectReason.DESTINATION_FULL,
                    f"Destination cell is full (max {MAX_UNITS_PER_CELL} units per cell).",
                )

        return ActionValidation.success()
