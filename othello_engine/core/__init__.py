"""Core engine components: board, heuristics, evaluator and search."""

from .board import MoveInfo, OthelloState, Player, Position
from .evaluator import Evaluator, Weights
from .heuristics import Heuristics
from .search import SearchEngine
