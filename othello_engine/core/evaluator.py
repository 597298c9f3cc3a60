from dataclasses import dataclass
from typing import Optional

from othello_engine.config import CONFIG
from othello_engine.core.board import MoveInfo, OthelloState
from othello_engine.core.heuristics import HeuristicSet, Heuristics

MAX_SCORE = 2**31 - 1   # finished game, "sentinel" scoring
WIN_SCORE = 1_000_000   # finished game, "outcome" scoring


@dataclass(frozen=True)
class Weights:
    coin_parity: int = 1
    mobility: int = 2
    corner: int = 3
    stability: int = 4

    @classmethod
    def from_config(cls, weights: Optional[dict] = None) -> "Weights":
        weights = weights if weights is not None else CONFIG.eval.weights
        return cls(**{k: int(weights[k]) for k in ("coin_parity", "mobility", "corner", "stability")})


class Evaluator:
    def __init__(self, weights: Optional[Weights] = None,
                 heuristics: Optional[HeuristicSet] = None,
                 terminal_scoring: Optional[str] = None):
        self.weights = weights or Weights.from_config()
        self.heuristics = heuristics or Heuristics()
        self.terminal_scoring = terminal_scoring or CONFIG.eval.terminal_scoring
        if self.terminal_scoring not in ("sentinel", "outcome"):
            raise ValueError(f"Unknown terminal scoring: {self.terminal_scoring!r}")

    def evaluate(self, state: OthelloState) -> MoveInfo:
        """Score state for the side to move. The result carries no move."""
        if state.game_over:
            return MoveInfo(score=self._terminal_score(state))

        w = self.weights
        h = self.heuristics
        score = (w.coin_parity * h.coin_parity(state)
                 + w.mobility * h.mobility(state)
                 + w.corner * h.corner(state)
                 + w.stability * h.stability(state))
        return MoveInfo(score=score)

    def _terminal_score(self, state: OthelloState) -> int:
        if self.terminal_scoring == "sentinel":
            # Same value for win, draw and loss.
            return MAX_SCORE
        if state.winner is None:
            return 0
        return WIN_SCORE if state.winner == state.current_player else -WIN_SCORE
