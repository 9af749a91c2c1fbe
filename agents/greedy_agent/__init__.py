from .greedy_agent import GreedyAgent

__all__ = ["GreedyAgent"]
