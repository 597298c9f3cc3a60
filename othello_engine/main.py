from othello_engine.config import CONFIG
from othello_engine.core.board import OthelloState, Position
from othello_engine.core.evaluator import Evaluator
from othello_engine.core.search import SearchEngine


class Engine:
    def __init__(self, depth=None, size=None):
        self.size = size or CONFIG.ui.board_size
        self.state = OthelloState(self.size)
        self.search = SearchEngine(Evaluator(), depth=depth)

    def get_best_move(self):
        """(move in algebraic notation or None, score) for the side to move."""
        result = self.search.search_best_move(self.state)
        if result is None or result.move is None:
            return None, result.score if result else 0
        return result.move.to_algebraic(), result.score

    def make_move(self, move_str: str) -> bool:
        try:
            move = Position.from_algebraic(move_str)
        except ValueError:
            return False
        ok, _info = self.state.make_move(move)
        return ok

    def reset(self):
        self.state = OthelloState(self.size)

    def print_board(self):
        self.state.print_board()
