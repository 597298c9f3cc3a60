import logging
from typing import Hashable, Optional

from othello_engine.core.evaluator import MAX_SCORE, WIN_SCORE

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO"):
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)


def format_info(d: int, score: int, nodes: int, elapsed: float, move: Optional[Hashable]) -> str:
    move_str = str(move) if move is not None else "-"
    nps = int(nodes / elapsed) if elapsed > 0 else 0

    if abs(score) in (MAX_SCORE, WIN_SCORE):
        score_str = f"end {'+' if score > 0 else '-'}"
    else:
        score_str = f"eval {score}"

    return (f"info depth {d} score {score_str} nodes {nodes} nps {nps} "
            f"time {int(elapsed * 1000)} move {move_str}")
