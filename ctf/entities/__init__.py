from .unit import (
    Unit,
    ELIMINATED_BY_HEADSHOT,
    ELIMINATED_BY_TORSO_HIT,
    ELIMINATED_BY_EXTREMITIES,
)

__all__ = [
    "Unit",
    "ELIMINATED_BY_HEADSHOT",
    "ELIMINATED_BY_TORSO_HIT",
    "ELIMINATED_BY_EXTREMITIES",
]
