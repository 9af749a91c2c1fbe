"""
Name -> class registry so agents can be created from config.

Agent modules register themselves with the ``@register_agent("name")``
decorator when the ``agents`` package is imported.
"""

from __future__ import annotations

from typing import Callable, Dict, Type, TypeVar

from .base_agent import BaseAgent

AgentT = TypeVar("AgentT", bound=Type[BaseAgent])

_REGISTRY: Dict[str, Type[BaseAgent]] = {}


def register_agent(name: str) -> Callable[[AgentT], AgentT]:
    """Class decorator that registers an agent under `name`."""
    key = name.lower()

    def decorator(cls: AgentT) -> AgentT:
        existing = _REGISTRY.get(key)
        if existing is not None and existing is not cls:
            raise ValueError(f"Agent type '{name}' is already registered to {existing.__name__}")
        _REGISTRY[key] = cls
        return cls

    return decorator


def resolve_agent_class(name: str) -> Type[BaseAgent]:
    """Look up a registered agent class by name (case-insensitive)."""
    try:
        return _REGISTRY[name.lower()]
    except KeyError:
        known = ", ".join(sorted(_REGISTRY)) or "none"
        raise ValueError(f"Unknown agent type '{name}' (registered: {known})") from None
