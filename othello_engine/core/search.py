import logging
import threading
import time
from typing import Callable, Iterator, Optional, Tuple

from othello_engine.config import CONFIG
from othello_engine.core.board import MoveInfo, OthelloState
from othello_engine.core.evaluator import Evaluator
from othello_engine.core.utils import format_info

logger = logging.getLogger(__name__)

INF = 2**63


class SearchAborted(Exception):
    """Raised inside a depth when the time budget runs out or stop() is called."""


def expand(state: OthelloState) -> Iterator[Tuple[OthelloState, MoveInfo]]:
    """Yield (child, move_info) for each legal move, in legal_moves order.

    Every child is a private clone with the move applied. Moves that fail
    to apply are skipped.
    """
    for move in list(state.legal_moves):
        child = state.clone()
        ok, move_info = child.make_move(move)
        if not ok:
            logger.debug("skipping move %s: could not be applied", move)
            continue
        yield child, move_info


class SearchEngine:
    def __init__(self, evaluator: Optional[Evaluator] = None, depth: Optional[int] = None,
                 algorithm: Optional[str] = None, iterative_deepening: Optional[bool] = None,
                 time_limit_ms: Optional[int] = None):
        self.evaluator = evaluator or Evaluator()
        self.max_depth = CONFIG.search.depth if depth is None else depth
        self.algorithm = algorithm or CONFIG.search.algorithm
        if self.algorithm not in ("alphabeta", "minimax"):
            raise ValueError(f"Unknown search algorithm: {self.algorithm!r}")
        self.use_iterative_deepening = (CONFIG.search.iterative_deepening
                                        if iterative_deepening is None else iterative_deepening)
        self.time_limit_ms = time_limit_ms if time_limit_ms is not None else CONFIG.search.time_limit_ms

        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._deadline: Optional[float] = None
        self._abortable = False
        self.nodes = 0

    # ------------------------------------------------------------------
    # Public entry points
    # ------------------------------------------------------------------
    def search_best_move(self, state: OthelloState) -> Optional[MoveInfo]:
        """Best move for the side to move using the configured algorithm."""
        if self.algorithm == "minimax":
            return self.minimax(state, self.max_depth)
        if self.use_iterative_deepening:
            return self.iterative_deepening(state, self.max_depth)
        return self.alpha_beta(state, self.max_depth)

    def minimax(self, state: OthelloState, depth: int, maximizing: bool = True) -> MoveInfo:
        self._reset()
        return self._minimax(state, depth, maximizing)

    def alpha_beta(self, state: OthelloState, depth: int, alpha: int = -INF, beta: int = INF,
                   maximizing: bool = True) -> MoveInfo:
        self._reset()
        return self._alpha_beta(state, depth, alpha, beta, maximizing)

    def iterative_deepening(self, state: OthelloState, max_depth: Optional[int] = None,
                            callback: Optional[Callable] = None) -> Optional[MoveInfo]:
        """Alpha-beta at depth 1, 2, ... max_depth; the last completed depth wins.

        Depth 1 always runs to completion. Deeper iterations are abandoned
        when the time budget expires or stop() is called.
        """
        self._reset()
        return self._deepen(state, self.max_depth if max_depth is None else max_depth, callback)

    def start_search(self, state: OthelloState, depth: Optional[int] = None,
                     callback: Optional[Callable] = None):
        """Run iterative deepening on a background thread.

        callback(move_info, depth) is called after every completed depth and
        once more with depth -1 when the search finishes.
        """
        if self._thread and self._thread.is_alive():
            return
        self._reset()
        target_depth = self.max_depth if depth is None else depth
        search_state = state.clone()

        def worker():
            best = self._deepen(search_state, target_depth, callback)
            if callback:
                callback(best, -1)

        self._thread = threading.Thread(target=worker, daemon=True)
        self._thread.start()

    def stop(self):
        self._stop_event.set()
        if self._thread:
            self._thread.join(timeout=0.2)

    def _deepen(self, state: OthelloState, max_depth: int,
                callback: Optional[Callable]) -> Optional[MoveInfo]:
        if self.time_limit_ms:
            self._deadline = time.monotonic() + self.time_limit_ms / 1000.0

        best = None
        start_time = time.monotonic()
        for d in range(1, max_depth + 1):
            self._abortable = d > 1
            if self._abortable and self._out_of_time():
                break
            try:
                current = self._alpha_beta(state, d, -INF, INF, True)
            except SearchAborted:
                logger.info("depth %d abandoned after %d nodes", d, self.nodes)
                break
            if current is None or current.move is None:
                # nothing to play from here; deeper searches will not change that
                if best is None:
                    best = current
                break
            best = current

            elapsed = time.monotonic() - start_time
            logger.info(format_info(d, best.score, self.nodes, elapsed, best.move))
            if callback:
                callback(best, d)

        self._abortable = False
        self._deadline = None
        return best

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------
    # MoveInfo.score is always from the point of view of the side to move at
    # that node, so it is negated on the way up. The best-move choice and the
    # alpha/beta window are kept from the maximizing player's point of view:
    # a maximizing node's own score already is that view, a minimizing node's
    # score is its negation.
    def _minimax(self, state: OthelloState, depth: int, maximizing: bool) -> MoveInfo:
        self.nodes += 1
        if depth <= 0 or not state.legal_moves:
            return self.evaluator.evaluate(state)

        best_move = None
        last_move = None
        best_value = -INF if maximizing else INF

        for child, move_info in expand(state):
            self._check_stop()
            reply = self._minimax(child, depth - 1, not maximizing)
            score = -reply.score
            value = score if maximizing else -score
            last_move = move_info

            if maximizing and value > best_value:
                best_value = value
                best_move = move_info
                best_move.score = score
            elif not maximizing and value < best_value:
                best_value = value
                best_move = move_info
                best_move.score = score

        return self._pick(state, best_move, last_move)

    def _alpha_beta(self, state: OthelloState, depth: int, alpha: int, beta: int,
                    maximizing: bool) -> MoveInfo:
        self.nodes += 1
        if depth <= 0 or not state.legal_moves:
            return self.evaluator.evaluate(state)

        best_move = None
        last_move = None

        if maximizing:
            best_value = -INF
            for child, move_info in expand(state):
                self._check_stop()
                reply = self._alpha_beta(child, depth - 1, alpha, beta, False)
                score = -reply.score
                last_move = move_info

                if score > best_value:
                    best_value = score
                    best_move = move_info
                    best_move.score = score

                alpha = max(alpha, best_value)
                if alpha >= beta:
                    break
        else:
            best_value = INF
            for child, move_info in expand(state):
                self._check_stop()
                reply = self._alpha_beta(child, depth - 1, alpha, beta, True)
                score = -reply.score
                last_move = move_info

                if -score < best_value:
                    best_value = -score
                    best_move = move_info
                    best_move.score = score

                beta = min(beta, best_value)
                if beta <= alpha:
                    break

        return self._pick(state, best_move, last_move)

    def _pick(self, state: OthelloState, best_move: Optional[MoveInfo],
              last_move: Optional[MoveInfo]) -> MoveInfo:
        if best_move is not None:
            return best_move
        if last_move is not None:
            return last_move
        # every listed move failed to apply: score the node like a dead end
        return self.evaluator.evaluate(state)

    # ------------------------------------------------------------------
    # Bookkeeping
    # ------------------------------------------------------------------
    def _reset(self):
        self._stop_event.clear()
        self._abortable = False
        self._deadline = None
        self.nodes = 0

    def _out_of_time(self) -> bool:
        if self._stop_event.is_set():
            return True
        return self._deadline is not None and time.monotonic() >= self._deadline

    def _check_stop(self):
        if self._abortable and self._out_of_time():
            raise SearchAborted()
