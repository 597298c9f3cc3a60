"""Play Othello in the terminal: you are Black, the engine is White."""

from othello_engine.config import CONFIG
from othello_engine.core.board import Player
from othello_engine.core.utils import configure_logging
from othello_engine.main import Engine


def main(depth=None):
    configure_logging(CONFIG.log_level)
    engine = Engine(depth=depth)

    while not engine.state.game_over:
        state = engine.state
        print(state.to_text())
        print("----------------------------")

        if state.current_player == Player.BLACK:
            legal = ", ".join(m.to_algebraic() for m in state.legal_moves)
            user_move = input(f"Your move ({legal}), or 'quit': ").strip()
            if user_move == "quit":
                return
            if not engine.make_move(user_move):
                print("Illegal move, try again.")
                continue
        else:
            move, score = engine.get_best_move()
            print(f"Engine plays: {move} | Eval: {score}")
            engine.make_move(move)

    state = engine.state
    print(state.to_text())
    print("Game Over")
    black, white = state.disc_count[Player.BLACK], state.disc_count[Player.WHITE]
    if state.winner is None:
        print(f"Result: draw {black}-{white}")
    else:
        print(f"Result: {'Black' if state.winner == Player.BLACK else 'White'} wins {black}-{white}")


if __name__ == "__main__":
    main()
