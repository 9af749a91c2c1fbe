"""
Helper utilities for converting game state into render-friendly payloads.

The browser client and API expect plain JSON data. The builder in this
module translates the internal state objects and the last action outcome
into a serializable dict that can be streamed over REST/WebSocket.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..core.actions import ActionOutcome
from ..core.types import Team
from ..world.state import GameState

RECENT_LOG_ENTRIES = 3


class RenderStateBuilder:
    """Build JSON-serializable render state snapshots."""

    @staticmethod
    def build(
        state: Dict[str, Any],
        outcome: Optional[ActionOutcome] = None,
    ) -> Dict[str, Any]:
        """
        Convert the environment state and last outcome into a JSON-friendly dict.

        Args:
            state: Environment state dict returned by FlagGameEnv
            outcome: Outcome of the action just resolved, if any

        Returns:
            Dictionary ready to send to the browser
        """
        if "world" not in state:
            raise ValueError("State missing 'world' key required for rendering")

        world: GameState = state["world"]
        board = world.board

        return {
            "round": world.round_count,
            "phase": world.phase.value,
            "active_team": world.active_team.name if world.active_team else None,
            "human_team": world.human_team.name,
            "grid": {
                "width": board.width,
                "height": board.height,
            },
            "flags": {team.name: list(board.flag_of(team)) for team in Team},
            "game_over": world.game_over,
            "result": world.result.value,
            "winner": world.winner.name if world.winner else None,
            "game_over_reason": world.game_over_reason,
            "cells": RenderStateBuilder._serialize_cells(world),
            "units": RenderStateBuilder._serialize_units(world),
            "teams": {team.name: world.team_summary(team) for team in Team},
            "recent_actions": [e.to_dict() for e in world.recent_log(RECENT_LOG_ENTRIES)],
            "outcome": outcome.to_dict() if outcome is not None else None,
        }

    @staticmethod
    def _serialize_units(world: GameState) -> List[Dict[str, Any]]:
        """Serialize all units (including eliminated ones) for the frontend."""
        serialized: List[Dict[str, Any]] = []

        for unit in world.get_all_units():
            serialized.append(
                {
                    "id": unit.id,
                    "team": unit.team.name,
                    "profile": unit.profile_code(),
                    "fast": unit.is_fast,
                    "expert": unit.is_expert,
                    "position": list(unit.pos),
                    "alive": unit.alive,
                    "is_alive": unit.alive,  # Friendly alias for JS
                    "extremity_hits": unit.extremity_hits,
                    "acted": unit.acted_this_round,
                    "max_movement": unit.max_movement,
                    "attack_range": unit.attack_range,
                    "elimination_reason": unit.elimination_reason,
                }
            )

        return serialized

    @staticmethod
    def _serialize_cells(world: GameState) -> List[Dict[str, Any]]:
        """Occupied squares only, with unit ids in stacking order."""
        cells: List[Dict[str, Any]] = []
        for pos in world.board.occupied_positions():
            units = world.board.units_at(*pos)
            cells.append(
                {
                    "position": list(pos),
                    "unit_ids": [u.id for u in units],
                    "live_count": sum(1 for u in units if u.alive),
                }
            )
        return cells
