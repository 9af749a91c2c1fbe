from .cell import Cell
from .board import Board, manhattan
from .state import GameState, RuleOptions, ActionLogEntry

__all__ = ["Cell", "Board", "manhattan", "GameState", "RuleOptions", "ActionLogEntry"]
