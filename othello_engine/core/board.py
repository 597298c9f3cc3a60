"""Othello game state: board array, disc counts, side to move and legal moves."""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, List, NamedTuple, Optional, Sequence, Tuple

DIRECTIONS = [
    (-1, -1), (-1, 0), (-1, 1),
    (0, -1),           (0, 1),
    (1, -1),  (1, 0),  (1, 1),
]

FILES = "abcdefghijklmnop"


class Player(IntEnum):
    EMPTY = 0
    BLACK = 1   # Black moves first
    WHITE = -1

    @property
    def opponent(self) -> "Player":
        return Player(-self.value)

    @property
    def symbol(self) -> str:
        return {Player.EMPTY: ".", Player.BLACK: "B", Player.WHITE: "W"}[self]


class Position(NamedTuple):
    row: int
    col: int

    @classmethod
    def from_algebraic(cls, text: str) -> "Position":
        """Parse 'd3' style notation: file letter then 1-based rank."""
        text = text.strip().lower()
        if len(text) < 2 or text[0] not in FILES or not text[1:].isdigit():
            raise ValueError(f"Invalid square: {text!r}")
        col = FILES.index(text[0])
        row = int(text[1:]) - 1
        if row < 0:
            raise ValueError(f"Invalid square: {text!r}")
        return cls(row, col)

    def to_algebraic(self) -> str:
        return f"{FILES[self.col]}{self.row + 1}"

    def __str__(self):
        return self.to_algebraic()


@dataclass
class MoveInfo:
    """A played move and its score, or a bare evaluation when move is None."""
    move: Optional[Position] = None
    score: int = 0
    player: Optional[Player] = None
    flipped: Tuple[Position, ...] = field(default_factory=tuple)

    @property
    def is_evaluation(self) -> bool:
        return self.move is None


class OthelloState:
    def __init__(self, size: int = 8):
        """Standard opening position on a size x size board."""
        if size < 4 or size % 2 or size > len(FILES):
            raise ValueError(f"Board size must be even and between 4 and {len(FILES)}, got {size}")
        self.size = size
        self.board: List[List[Player]] = [[Player.EMPTY] * size for _ in range(size)]
        mid = size // 2
        self.board[mid - 1][mid - 1] = Player.WHITE
        self.board[mid][mid] = Player.WHITE
        self.board[mid - 1][mid] = Player.BLACK
        self.board[mid][mid - 1] = Player.BLACK
        self.disc_count: Dict[Player, int] = {Player.BLACK: 2, Player.WHITE: 2}
        self.current_player = Player.BLACK
        self.game_over = False
        self.winner: Optional[Player] = None
        self.legal_moves: Dict[Position, List[Position]] = self.legal_moves_for(self.current_player)

    @classmethod
    def from_rows(cls, rows: Sequence[str], to_move: Player = Player.BLACK) -> "OthelloState":
        """Build a position from text rows using 'B', 'W' and '.'."""
        size = len(rows)
        state = cls(size)
        mapping = {"B": Player.BLACK, "W": Player.WHITE, ".": Player.EMPTY, "-": Player.EMPTY}
        for r, line in enumerate(rows):
            line = line.replace(" ", "")
            if len(line) != size:
                raise ValueError(f"Row {r} has {len(line)} cells, expected {size}")
            for c, ch in enumerate(line.upper()):
                if ch not in mapping:
                    raise ValueError(f"Unknown cell {ch!r} in row {r}")
                state.board[r][c] = mapping[ch]
        state.disc_count = {
            Player.BLACK: sum(row.count(Player.BLACK) for row in state.board),
            Player.WHITE: sum(row.count(Player.WHITE) for row in state.board),
        }
        state.current_player = to_move
        state._settle_turn()
        return state

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.size and 0 <= col < self.size

    def corners(self) -> List[Position]:
        last = self.size - 1
        return [Position(0, 0), Position(0, last), Position(last, 0), Position(last, last)]

    def flips_for(self, move: Position, player: Player) -> List[Position]:
        """Discs captured if player plays move; empty if the move is illegal."""
        row, col = move
        if not self.in_bounds(row, col) or self.board[row][col] != Player.EMPTY:
            return []
        opponent = player.opponent
        flipped = []
        for dr, dc in DIRECTIONS:
            r, c = row + dr, col + dc
            line = []
            while self.in_bounds(r, c) and self.board[r][c] == opponent:
                line.append(Position(r, c))
                r += dr
                c += dc
            if line and self.in_bounds(r, c) and self.board[r][c] == player:
                flipped.extend(line)
        return flipped

    def legal_moves_for(self, player: Player) -> Dict[Position, List[Position]]:
        moves = {}
        for r in range(self.size):
            for c in range(self.size):
                flips = self.flips_for(Position(r, c), player)
                if flips:
                    moves[Position(r, c)] = flips
        return moves

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def make_move(self, move: Position) -> Tuple[bool, Optional[MoveInfo]]:
        """Play move for the side to move, in place.

        Returns (False, None) when the game is over, the move is not listed
        in legal_moves, or the listed capture no longer matches the board.
        """
        if self.game_over or move not in self.legal_moves:
            return False, None
        player = self.current_player
        flipped = self.flips_for(move, player)
        if not flipped:
            return False, None

        self.board[move.row][move.col] = player
        for pos in flipped:
            self.board[pos.row][pos.col] = player
        self.disc_count[player] += len(flipped) + 1
        self.disc_count[player.opponent] -= len(flipped)

        self.current_player = player.opponent
        self._settle_turn()
        return True, MoveInfo(move=move, player=player, flipped=tuple(flipped))

    def _settle_turn(self):
        """Recompute legal moves, passing the turn or ending the game as needed."""
        self.legal_moves = self.legal_moves_for(self.current_player)
        if self.legal_moves:
            self.game_over = False
            self.winner = None
            return
        other = self.legal_moves_for(self.current_player.opponent)
        if other:
            # pass
            self.current_player = self.current_player.opponent
            self.legal_moves = other
            return
        self.game_over = True
        black, white = self.disc_count[Player.BLACK], self.disc_count[Player.WHITE]
        if black > white:
            self.winner = Player.BLACK
        elif white > black:
            self.winner = Player.WHITE
        else:
            self.winner = None

    def clone(self) -> "OthelloState":
        """Deep copy sharing no mutable structure with self."""
        clone = OthelloState.__new__(OthelloState)
        clone.size = self.size
        clone.board = [row[:] for row in self.board]
        clone.disc_count = dict(self.disc_count)
        clone.current_player = self.current_player
        clone.game_over = self.game_over
        clone.winner = self.winner
        clone.legal_moves = {pos: list(flips) for pos, flips in self.legal_moves.items()}
        return clone

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------
    def to_rows(self) -> List[str]:
        return ["".join(cell.symbol for cell in row) for row in self.board]

    def to_text(self) -> str:
        header = "  " + " ".join(FILES[: self.size])
        lines = [header]
        for r, row in enumerate(self.board):
            lines.append(f"{r + 1:<2}" + " ".join(cell.symbol for cell in row))
        return "\n".join(lines)

    def print_board(self):
        print(self.to_text())
