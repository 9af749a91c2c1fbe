"""Core types, intents and validation results."""

from .types import (
    GridPos,
    UNPLACED,
    Team,
    MoveDir,
    SpeedClass,
    SkillClass,
    ActionType,
    HitKind,
    WinReason,
    GameResult,
    TurnPhase,
    HitProfile,
    HIT_PROFILES,
    MAX_UNITS_PER_CELL,
    EXTREMITY_HITS_TO_ELIMINATE,
)
from .actions import Intent, ActionOutcome, Requested, AutoRoll, AUTO, Amount, parse_amount
from .validation import RejectReason, ActionValidation, validate_intent

__all__ = [
    "GridPos",
    "UNPLACED",
    "Team",
    "MoveDir",
    "SpeedClass",
    "SkillClass",
    "ActionType",
    "HitKind",
    "WinReason",
    "GameResult",
    "TurnPhase",
    "HitProfile",
    "HIT_PROFILES",
    "MAX_UNITS_PER_CELL",
    "EXTREMITY_HITS_TO_ELIMINATE",
    "Intent",
    "ActionOutcome",
    "Requested",
    "AutoRoll",
    "AUTO",
    "Amount",
    "parse_amount",
    "RejectReason",
    "ActionValidation",
    "validate_intent",
]
