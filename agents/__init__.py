"""
Agent interface and implementations for the capture-the-flag game.

This module provides:
- BaseAgent: Abstract interface for all agents
- GreedyAgent: The flag-seeking opponent heuristic
- RandomAgent: Simple random baseline for headless simulation
"""

from .base_agent import BaseAgent
from .factory import PreparedAgent, create_agent_from_spec

from .registry import register_agent, resolve_agent_class
from .spec import AgentSpec
from .random_agent import RandomAgent
from .greedy_agent import GreedyAgent
from .team_intel import TeamIntel

__all__ = [
    "BaseAgent",
    "AgentSpec",
    "PreparedAgent",
    "create_agent_from_spec",
    "register_agent",
    "resolve_agent_class",
    "RandomAgent",
    "GreedyAgent",
    "TeamIntel",
]
