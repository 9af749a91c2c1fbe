"""
Intents: the single action shape consumed from both the human input layer
and the opponent strategy.

Distance (for moves) and range (for attacks) are either an explicit
``Requested(n)`` or ``AUTO``, which the resolver turns into a concrete value
with one RNG draw before any validation runs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Union

from .types import ActionType, MoveDir


@dataclass(frozen=True)
class Requested:
    """An explicit distance/range chosen by the controlling side."""

    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class AutoRoll:
    """Let the engine roll a distance/range from the unit's class."""

    def __str__(self) -> str:
        return "auto"


AUTO = AutoRoll()

Amount = Union[Requested, AutoRoll]


def parse_amount(value: Any) -> Amount:
    """
    Convert a wire value into an Amount.

    Accepts an Amount, an int, a numeric string or "auto"/None.

    Raises:
        ValueError: For anything else
    """
    if isinstance(value, (Requested, AutoRoll)):
        return value
    if value is None:
        return AUTO
    if isinstance(value, bool):
        raise ValueError(f"Invalid distance/range: {value!r}")
    if isinstance(value, int):
        return Requested(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text == "auto":
            return AUTO
        try:
            return Requested(int(text))
        except ValueError:
            pass
    raise ValueError(f"Invalid distance/range: {value!r}")


@dataclass(frozen=True)
class Intent:
    """
    One unit, one action.

    `direction` is normally a MoveDir; raw values coming from the input
    layer are kept as-is so the resolvers can report INVALID_DIRECTION
    instead of the parser raising.
    """

    unit_id: int
    kind: ActionType
    direction: Any
    amount: Amount = AUTO

    @classmethod
    def move(cls, unit_id: int, direction: MoveDir, distance: int | None = None) -> Intent:
        return cls(unit_id, ActionType.MOVE, direction, AUTO if distance is None else Requested(distance))

    @classmethod
    def attack(cls, unit_id: int, direction: MoveDir, attack_range: int | None = None) -> Intent:
        return cls(unit_id, ActionType.ATTACK, direction, AUTO if attack_range is None else Requested(attack_range))

    def to_dict(self) -> Dict[str, Any]:
        direction = self.direction.name if isinstance(self.direction, MoveDir) else self.direction
        amount = "auto" if isinstance(self.amount, AutoRoll) else self.amount.value
        return {
            "unit_id": self.unit_id,
            "kind": self.kind.value,
            "direction": direction,
            "amount": amount,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Intent:
        """
        Build an intent from its wire form.

        Unknown directions are preserved (they are rejected later with
        INVALID_DIRECTION). An unknown action kind or malformed amount
        raises ValueError.
        """
        kind = ActionType(str(data["kind"]).lower())
        raw_dir = data.get("direction")
        direction = MoveDir.parse(raw_dir)
        return cls(
            unit_id=int(data["unit_id"]),
            kind=kind,
            direction=direction if direction is not None else raw_dir,
            amount=parse_amount(data.get("amount", "auto")),
        )

    def __str__(self) -> str:
        direction = self.direction.name if isinstance(self.direction, MoveDir) else repr(self.direction)
        return f"{self.kind.value.upper()} unit={self.unit_id} dir={direction} amount={self.amount}"


@dataclass(frozen=True)
class ActionOutcome:
    """
    What the caller learns about one turn action.

    Attributes:
        success: The action did what it set out to do (moved, or landed a hit)
        message: Text for the player and the action log
        eliminated_unit_ids: Units eliminated by this action
        reason: Rejection code; None once the action was actually carried out
        unit_id: Acting unit, if any
        kind: Action kind, if any
    """

    success: bool
    message: str
    eliminated_unit_ids: frozenset = frozenset()
    reason: Any = None
    unit_id: int | None = None
    kind: ActionType | None = None

    @property
    def resolved(self) -> bool:
        """False when the action was rejected before anything happened."""
        return self.reason is None

    @classmethod
    def no_action(cls, message: str) -> ActionOutcome:
        return cls(success=False, message=message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "message": self.message,
            "eliminated_unit_ids": sorted(self.eliminated_unit_ids),
            "reason": self.reason.value if self.reason is not None else None,
            "resolved": self.resolved,
            "unit_id": self.unit_id,
            "kind": self.kind.value if self.kind else None,
        }
