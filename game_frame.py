from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ctf.core.actions import ActionOutcome, Intent
from ctf.core.types import Team
from ctf.environment import StepInfo
from ctf.world.state import GameState


@dataclass
class Frame:
    """
    Snapshot of a single turn, with helpers to serialize for transport.

    ``world`` is the state before the turn was resolved; the final frame of a
    game carries the finished state and no intents.
    """

    world: GameState
    team: Optional[Team] = None
    intents: Optional[Sequence[Intent]] = None
    outcome: Optional[ActionOutcome] = None
    action_metadata: Optional[Mapping[str, Any]] = None
    step_info: Optional[StepInfo] = None
    done: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize the frame into a JSON-friendly dictionary.
        """
        frame: Dict[str, Any] = {
            "round": self.world.round_count,
            "phase": self.world.phase.value,
            "world": self.world.to_dict(),
            "units": self._serialize_units(self.world),
            "done": self.done,
        }

        if self.team is not None:
            frame["team"] = self.team.name
        intents_payload = self._serialize_intents(self.intents or ())
        if intents_payload:
            frame["intents"] = intents_payload
        if self.outcome is not None:
            frame["outcome"] = self.outcome.to_dict()
        if self.action_metadata is not None:
            frame["action_metadata"] = dict(self.action_metadata)
        if self.step_info is not None:
            frame["step_info"] = self.step_info.to_dict()

        return frame

    @staticmethod
    def _serialize_units(world: GameState) -> List[Dict[str, Any]]:
        """
        Serialize units for the frontend without altering canonical world dict.
        """
        serialized: List[Dict[str, Any]] = []

        for unit in world.get_all_units():
            serialized.append(
                {
                    "id": unit.id,
                    "team": unit.team.name,
                    "label": unit.label(),
                    "profile": unit.profile_code(),
                    "position": list(unit.pos),
                    "alive": unit.alive,
                    "is_alive": unit.alive,
                    "extremity_hits": unit.extremity_hits,
                    "acted": unit.acted_this_round,
                    "elimination_reason": unit.elimination_reason,
                }
            )

        return serialized

    @staticmethod
    def _serialize_intents(intents: Sequence[Intent]) -> List[Dict[str, Any]]:
        """Serialize intents to a list for easy iteration client-side."""
        return [{**intent.to_dict(), "label": str(intent)} for intent in intents]
