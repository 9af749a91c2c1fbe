"""
Grid Capture-the-Flag - a turn-based tactical simulation on a square grid.

Two teams of stat-differentiated units take turns moving and shooting until
one side captures the opposing flag, eliminates the other team, or is judged
to have retreated onto its own flag.

Quick Start:
    from ctf import FlagGameEnv, create_random_scenario
    from ctf.core import Intent, MoveDir

    env = FlagGameEnv()
    state = env.reset(create_random_scenario(seed=42))

    # The human side submits one intent per step
    intent = Intent.move(unit_id=0, direction=MoveDir.DOWN)
    state, outcome, done, info = env.step(intent)
"""

__version__ = "1.0.0"

# Main environment interface
from .environment import FlagGameEnv, ResolvedIntent, StepInfo

# Scenario system
from .scenario import (
    Scenario,
    ScenarioError,
    create_random_scenario,
)

# Core types available at package level
from .core import (
    AUTO,
    ActionOutcome,
    ActionType,
    GameResult,
    GridPos,
    Intent,
    MoveDir,
    RejectReason,
    Team,
    TurnPhase,
    WinReason,
)

from .rendering import (
    RenderStateBuilder,
    WebRenderer,
)

__all__ = [
    # Main interface
    "FlagGameEnv",
    "StepInfo",
    "ResolvedIntent",

    # Scenario system
    "Scenario",
    "ScenarioError",
    "create_random_scenario",

    # Core types
    "AUTO",
    "ActionOutcome",
    "ActionType",
    "GameResult",
    "GridPos",
    "Intent",
    "MoveDir",
    "RejectReason",
    "Team",
    "TurnPhase",
    "WinReason",

    # Rendering
    "RenderStateBuilder",
    "WebRenderer",
]
