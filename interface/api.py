"""FastAPI REST interface for the engine."""

import threading

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel
from typing import List, Optional

from othello_engine.core.board import OthelloState, Player, Position
from othello_engine.core.evaluator import Evaluator
from othello_engine.core.search import SearchEngine
from othello_engine.core.utils import configure_logging
from othello_engine.config import CONFIG

configure_logging(CONFIG.log_level)
app = FastAPI(title=CONFIG.ui.engine_name, version="1.0.0")

evaluator = Evaluator()
state = OthelloState(CONFIG.ui.board_size)
_state_lock = threading.Lock()

COLORS = {"black": Player.BLACK, "white": Player.WHITE}


class PositionRequest(BaseModel):
    rows: List[str]
    to_move: str = "black"


class MoveRequest(BaseModel):
    move: str  # algebraic e.g. "d3"


class SearchRequest(BaseModel):
    depth: Optional[int] = None
    algorithm: Optional[str] = None


def _describe(s: OthelloState) -> dict:
    return {
        "rows": s.to_rows(),
        "turn": "black" if s.current_player == Player.BLACK else "white",
        "legal_moves": [m.to_algebraic() for m in s.legal_moves],
        "discs": {"black": s.disc_count[Player.BLACK], "white": s.disc_count[Player.WHITE]},
        "is_game_over": s.game_over,
        "winner": None if s.winner is None else ("black" if s.winner == Player.BLACK else "white"),
    }


@app.get("/board")
def get_board():
    with _state_lock:
        return _describe(state)


@app.post("/position")
def set_position(req: PositionRequest):
    global state
    if req.to_move not in COLORS:
        raise HTTPException(status_code=400, detail=f"Invalid side to move: {req.to_move}")
    try:
        new_state = OthelloState.from_rows(req.rows, COLORS[req.to_move])
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Invalid position: {e}")
    with _state_lock:
        state = new_state
        return _describe(state)


@app.post("/move")
def make_move(req: MoveRequest):
    with _state_lock:
        try:
            move = Position.from_algebraic(req.move)
        except ValueError:
            raise HTTPException(status_code=400, detail=f"Invalid move: {req.move}")
        ok, info = state.make_move(move)
        if not ok:
            raise HTTPException(status_code=400, detail=f"Illegal move: {req.move}")
        body = _describe(state)
        body["move"] = req.move
        body["flipped"] = [p.to_algebraic() for p in info.flipped]
        return body


@app.post("/search")
def search_move(req: SearchRequest = SearchRequest()):
    with _state_lock:
        if state.game_over:
            raise HTTPException(status_code=400, detail="Game is already over")
        if req.algorithm is not None and req.algorithm not in ("alphabeta", "minimax"):
            raise HTTPException(status_code=400, detail=f"Unknown algorithm: {req.algorithm}")
        if req.depth is not None and req.depth < 1:
            raise HTTPException(status_code=400, detail="Depth must be positive")
        search_state = state.clone()

    # per-request engine: settings and node count are never shared
    engine = SearchEngine(evaluator, depth=req.depth or CONFIG.search.depth,
                          algorithm=req.algorithm or CONFIG.search.algorithm)
    result = engine.search_best_move(search_state)
    return {
        "best_move": result.move.to_algebraic() if result and result.move else None,
        "score": result.score if result else None,
        "nodes": engine.nodes,
        "depth": engine.max_depth,
        "algorithm": engine.algorithm,
    }


@app.post("/reset")
def reset_board():
    global state
    with _state_lock:
        state = OthelloState(CONFIG.ui.board_size)
        return _describe(state)
