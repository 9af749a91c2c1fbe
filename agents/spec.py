"""Serializable description of which agent controls a team."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict

from ctf.core.types import Team


@dataclass
class AgentSpec:
    """
    Agent configuration stored on a Scenario.

    Attributes:
        team: Team the agent controls
        type: Registered agent name ("greedy", "random", ...)
        name: Optional display name
        init_params: Extra keyword arguments for the agent constructor
    """

    team: Team
    type: str
    name: str | None = None
    init_params: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "team": self.team.name,
            "type": self.type,
            "init_params": dict(self.init_params),
        }
        if self.name is not None:
            data["name"] = self.name
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AgentSpec":
        team = data["team"]
        return cls(
            team=team if isinstance(team, Team) else Team[str(team).upper()],
            type=data["type"],
            name=data.get("name"),
            init_params=dict(data.get("init_params") or {}),
        )
