"""Positional signals for Othello boards.

Every signal is scored from the point of view of ``state.current_player``
and normalised to ``100 * (mine - theirs) / (mine + theirs)`` so the four
values share a scale before weighting. A signal is 0 when neither side
has anything to count.
"""

from typing import List, Protocol, Set

from othello_engine.core.board import OthelloState, Player, Position

# (dr, dc) for horizontal, vertical and the two diagonals
AXES = [(0, 1), (1, 0), (1, 1), (1, -1)]


def _ratio(mine: int, theirs: int) -> int:
    total = mine + theirs
    if total == 0:
        return 0
    return int(100 * (mine - theirs) / total)


class HeuristicSet(Protocol):
    def coin_parity(self, state: OthelloState) -> int: ...

    def mobility(self, state: OthelloState) -> int: ...

    def corner(self, state: OthelloState) -> int: ...

    def stability(self, state: OthelloState) -> int: ...


class Heuristics:
    def coin_parity(self, state: OthelloState) -> int:
        me = state.current_player
        return _ratio(state.disc_count[me], state.disc_count[me.opponent])

    def mobility(self, state: OthelloState) -> int:
        me = state.current_player
        mine = len(state.legal_moves)
        theirs = len(state.legal_moves_for(me.opponent))
        return _ratio(mine, theirs)

    def corner(self, state: OthelloState) -> int:
        me = state.current_player
        owners = [state.board[p.row][p.col] for p in state.corners()]
        return _ratio(owners.count(me), owners.count(me.opponent))

    def stability(self, state: OthelloState) -> int:
        me = state.current_player
        stable = stable_discs(state)
        mine = sum(1 for p in stable if state.board[p.row][p.col] == me)
        return _ratio(mine, len(stable) - mine)


def _line_full(state: OthelloState, pos: Position, dr: int, dc: int) -> bool:
    for sign in (1, -1):
        r, c = pos.row + sign * dr, pos.col + sign * dc
        while state.in_bounds(r, c):
            if state.board[r][c] == Player.EMPTY:
                return False
            r += sign * dr
            c += sign * dc
    return True


def _anchored(state: OthelloState, stable: Set[Position], pos: Position, dr: int, dc: int) -> bool:
    owner = state.board[pos.row][pos.col]
    for sign in (1, -1):
        r, c = pos.row + sign * dr, pos.col + sign * dc
        if not state.in_bounds(r, c):
            return True
        if (r, c) in stable and state.board[r][c] == owner:
            return True
    return False


def stable_discs(state: OthelloState) -> Set[Position]:
    """Discs that can no longer be flipped by either side.

    A disc is stable when, on every axis through it, the line is full or
    one neighbour on that axis is the edge or a stable disc of the same
    colour. Grown from the corners until nothing changes.
    """
    occupied: List[Position] = [
        Position(r, c)
        for r in range(state.size)
        for c in range(state.size)
        if state.board[r][c] != Player.EMPTY
    ]
    stable: Set[Position] = set()
    changed = True
    while changed:
        changed = False
        for pos in occupied:
            if pos in stable:
                continue
            if all(
                _line_full(state, pos, dr, dc) or _anchored(state, stable, pos, dr, dc)
                for dr, dc in AXES
            ):
                stable.add(pos)
                changed = True
    return stable
