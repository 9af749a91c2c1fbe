"""Build agent instances from AgentSpec entries."""

from __future__ import annotations

from dataclasses import dataclass

from infra.logger import get_logger

from .base_agent import BaseAgent
from .registry import resolve_agent_class
from .spec import AgentSpec

logger = get_logger(__name__)


@dataclass
class PreparedAgent:
    """An instantiated agent together with the spec it came from."""

    agent: BaseAgent
    spec: AgentSpec


def create_agent_from_spec(spec: AgentSpec) -> PreparedAgent:
    """
    Instantiate the agent described by `spec`.

    Raises:
        ValueError: If the agent type is not registered
    """
    agent_cls = resolve_agent_class(spec.type)
    agent = agent_cls(team=spec.team, name=spec.name, **spec.init_params)
    logger.debug("Created %r from spec %s", agent, spec.to_dict())
    return PreparedAgent(agent=agent, spec=spec)
