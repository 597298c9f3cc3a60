"""Othello move search: minimax, alpha-beta and iterative deepening."""

__version__ = "1.0.0"
