"""
Game mechanics: movement, attacks and victory checks.

Every resolver is stateless and works on a GameState passed in by reference.
"""

from .movement import MovementResolver, MoveResult, roll_move_distance
from .combat import AttackResolver, AttackResult, classify_hit, roll_attack_range
from .victory import VictoryConditions, VictoryResult

__all__ = [
    "MovementResolver",
    "MoveResult",
    "roll_move_distance",
    "AttackResolver",
    "AttackResult",
    "classify_hit",
    "roll_attack_range",
    "VictoryConditions",
    "VictoryResult",
]
