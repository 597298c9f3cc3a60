"""
Integration test suite for the Othello engine.

Tests components working together end-to-end:
- Full game simulations (engine vs engine)
- Engine wrapper
- FastAPI REST API
- Background search lifecycle (start/stop/callback)
- Terminal interface
"""

import threading
from unittest.mock import patch

import pytest

from othello_engine.core.board import OthelloState, Player, Position
from othello_engine.core.evaluator import Evaluator, Weights
from othello_engine.core.search import SearchEngine
from othello_engine.main import Engine


# ════════════════════════════════════════════════════════════════════════════
#  ENGINE VS ENGINE: FULL GAME SIMULATIONS
# ════════════════════════════════════════════════════════════════════════════


class TestFullGame:
    """The engine can play complete games without crashing."""

    def play(self, state, black, white, max_moves=200):
        moves = 0
        while not state.game_over and moves < max_moves:
            engine = black if state.current_player == Player.BLACK else white
            result = engine.search_best_move(state)
            assert result is not None and result.move is not None
            assert result.move in state.legal_moves, f"Illegal move {result.move} at move {moves}"
            ok, _ = state.make_move(result.move)
            assert ok
            moves += 1
        return moves

    def test_engine_vs_engine_completes(self):
        state = OthelloState(6)
        engine = SearchEngine(Evaluator(), depth=2)
        moves = self.play(state, engine, engine)

        assert state.game_over
        assert moves > 10
        total = state.disc_count[Player.BLACK] + state.disc_count[Player.WHITE]
        assert total <= 36
        assert total == sum(1 for row in state.board for cell in row if cell != Player.EMPTY)

    def test_minimax_vs_alphabeta_completes(self):
        state = OthelloState(6)
        black = SearchEngine(Evaluator(), depth=2, algorithm="minimax")
        white = SearchEngine(Evaluator(), depth=2, algorithm="alphabeta")
        self.play(state, black, white)
        assert state.game_over

    def test_same_moves_with_minimax_and_alphabeta(self):
        """Two self-play games, one per algorithm, follow the same line."""
        lines = []
        for algorithm in ("minimax", "alphabeta"):
            state = OthelloState(6)
            engine = SearchEngine(Evaluator(), depth=2, algorithm=algorithm, iterative_deepening=False)
            line = []
            for _ in range(12):
                if state.game_over:
                    break
                result = engine.search_best_move(state)
                line.append((result.move, result.score))
                state.make_move(result.move)
            lines.append(line)
        assert lines[0] == lines[1]

    def test_outcome_scoring_plays_full_game(self):
        state = OthelloState(4)
        engine = SearchEngine(Evaluator(terminal_scoring="outcome"), depth=4)
        self.play(state, engine, engine)
        assert state.game_over

    def test_custom_weights_change_nothing_structural(self):
        state = OthelloState(6)
        greedy = SearchEngine(Evaluator(Weights(1, 0, 0, 0)), depth=1)
        positional = SearchEngine(Evaluator(Weights(0, 1, 5, 5)), depth=2)
        self.play(state, greedy, positional)
        assert state.game_over


# ════════════════════════════════════════════════════════════════════════════
#  ENGINE WRAPPER
# ════════════════════════════════════════════════════════════════════════════


class TestEngineWrapperIntegration:
    def test_best_move_is_legal(self):
        engine = Engine(depth=2)
        move, score = engine.get_best_move()
        assert move in [m.to_algebraic() for m in engine.state.legal_moves]
        assert isinstance(score, int)

    def test_make_move(self):
        engine = Engine(depth=2)
        assert engine.make_move("d3") is True
        assert engine.state.current_player == Player.WHITE
        assert engine.make_move("d3") is False
        assert engine.make_move("zz") is False

    def test_play_engine_move(self):
        engine = Engine(depth=2)
        move, _ = engine.get_best_move()
        assert engine.make_move(move) is True

    def test_reset(self):
        engine = Engine(depth=2)
        engine.make_move("d3")
        engine.reset()
        assert engine.state.to_rows() == OthelloState().to_rows()

    def test_game_over_returns_no_move(self):
        engine = Engine(depth=2)
        engine.state = OthelloState.from_rows(["BBB.", "....", "....", "...."])
        move, _score = engine.get_best_move()
        assert move is None

    def test_small_board(self):
        engine = Engine(depth=2, size=4)
        assert engine.state.size == 4
        move, _ = engine.get_best_move()
        assert move in {"b1", "a2", "d3", "c4"}

    def test_print_board(self, capsys):
        Engine(depth=1).print_board()
        out = capsys.readouterr().out
        assert "a b c d e f g h" in out


# ════════════════════════════════════════════════════════════════════════════
#  BACKGROUND SEARCH
# ════════════════════════════════════════════════════════════════════════════


class TestAsyncSearch:
    def test_start_search_reports_each_depth(self):
        engine = SearchEngine(Evaluator(), depth=3)
        done = threading.Event()
        reports = []

        def callback(move_info, depth):
            reports.append((depth, move_info))
            if depth == -1:
                done.set()

        state = OthelloState()
        engine.start_search(state, depth=3, callback=callback)
        assert done.wait(timeout=30)

        depths = [d for d, _ in reports]
        assert depths == [1, 2, 3, -1]
        final = reports[-1][1]
        assert final == reports[-2][1]
        assert final.move in state.legal_moves

    def test_search_works_on_private_copy(self):
        engine = SearchEngine(Evaluator(), depth=2)
        done = threading.Event()
        state = OthelloState()
        engine.start_search(state, callback=lambda m, d: d == -1 and done.set())
        state.make_move(Position(2, 3))
        assert done.wait(timeout=30)

    def test_stop_returns_completed_depth(self):
        engine = SearchEngine(Evaluator(), depth=20)
        first_depth = threading.Event()
        done = threading.Event()
        reports = []

        def callback(move_info, depth):
            reports.append((depth, move_info))
            if depth == 1:
                first_depth.set()
            if depth == -1:
                done.set()

        state = OthelloState()
        engine.start_search(state, callback=callback)
        assert first_depth.wait(timeout=30)
        engine.stop()
        assert done.wait(timeout=30)

        final_depth, final = reports[-1]
        assert final_depth == -1
        assert final is not None
        assert final.move in state.legal_moves
        assert len(reports) < 21

    def test_second_start_while_running_is_ignored(self):
        engine = SearchEngine(Evaluator(), depth=20)
        done = threading.Event()
        finals = []

        def callback(move_info, depth):
            if depth == -1:
                finals.append(move_info)
                done.set()

        engine.start_search(OthelloState(), callback=callback)
        first_thread = engine._thread
        engine.start_search(OthelloState(), callback=callback)
        assert engine._thread is first_thread
        engine.stop()
        assert done.wait(timeout=30)
        first_thread.join(timeout=30)
        assert len(finals) == 1


# ════════════════════════════════════════════════════════════════════════════
#  REST API INTEGRATION
# ════════════════════════════════════════════════════════════════════════════


class TestAPIIntegration:
    """Tests FastAPI REST API endpoints."""

    @pytest.fixture(autouse=True)
    def setup_client(self):
        from fastapi.testclient import TestClient
        from interface.api import app

        self.client = TestClient(app)
        # Reset state before each test
        self.client.post("/reset")

    def test_get_board_initial(self):
        response = self.client.get("/board")
        assert response.status_code == 200
        data = response.json()
        assert data["rows"] == OthelloState().to_rows()
        assert data["turn"] == "black"
        assert data["is_game_over"] is False
        assert data["legal_moves"] == ["d3", "c4", "f5", "e6"]
        assert data["discs"] == {"black": 2, "white": 2}
        assert data["winner"] is None

    def test_post_move_valid(self):
        response = self.client.post("/move", json={"move": "d3"})
        assert response.status_code == 200
        data = response.json()
        assert data["move"] == "d3"
        assert data["flipped"] == ["d4"]
        assert data["turn"] == "white"
        assert data["discs"] == {"black": 4, "white": 1}

    def test_post_move_illegal(self):
        response = self.client.post("/move", json={"move": "a1"})
        assert response.status_code == 400

    def test_post_move_invalid_format(self):
        response = self.client.post("/move", json={"move": "zz"})
        assert response.status_code == 400

    def test_set_position_valid(self):
        rows = ["BW..", "....", "....", "...."]
        response = self.client.post("/position", json={"rows": rows, "to_move": "white"})
        assert response.status_code == 200
        data = response.json()
        assert data["rows"] == rows
        # white has no move and passes
        assert data["turn"] == "black"
        assert data["legal_moves"] == ["c1"]

    def test_set_position_invalid(self):
        response = self.client.post("/position", json={"rows": ["BX..", "....", "....", "...."]})
        assert response.status_code == 400
        response = self.client.post("/position", json={"rows": ["....", "....", "....", "...."],
                                                       "to_move": "red"})
        assert response.status_code == 400

    def test_search_returns_move(self):
        response = self.client.post("/search", json={"depth": 2})
        assert response.status_code == 200
        data = response.json()
        assert data["best_move"] in ["d3", "c4", "f5", "e6"]
        assert data["depth"] == 2
        assert data["nodes"] > 0

    def test_search_minimax(self):
        ab = self.client.post("/search", json={"depth": 2, "algorithm": "alphabeta"}).json()
        mm = self.client.post("/search", json={"depth": 2, "algorithm": "minimax"}).json()
        assert mm["algorithm"] == "minimax"
        assert mm["score"] == ab["score"]
        assert mm["best_move"] == ab["best_move"]

    def test_search_bad_request(self):
        assert self.client.post("/search", json={"algorithm": "mcts"}).status_code == 400
        assert self.client.post("/search", json={"depth": 0}).status_code == 400

    def test_search_game_over_returns_400(self):
        self.client.post("/position", json={"rows": ["BBB.", "....", "....", "...."]})
        response = self.client.post("/search")
        assert response.status_code == 400

    def test_concurrent_searches_keep_their_own_settings(self):
        requests = [{"depth": 1, "algorithm": "minimax"}, {"depth": 3, "algorithm": "alphabeta"}] * 3
        responses = [None] * len(requests)

        def run(i):
            responses[i] = self.client.post("/search", json=requests[i]).json()

        threads = [threading.Thread(target=run, args=(i,)) for i in range(len(requests))]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=60)

        for req, data in zip(requests, responses):
            assert data["depth"] == req["depth"]
            assert data["algorithm"] == req["algorithm"]
        shallow = [data["nodes"] for req, data in zip(requests, responses) if req["depth"] == 1]
        assert shallow == [5, 5, 5]

    def test_search_leaves_board_alone(self):
        before = self.client.get("/board").json()
        self.client.post("/search", json={"depth": 3})
        assert self.client.get("/board").json() == before

    def test_reset_board(self):
        self.client.post("/move", json={"move": "d3"})
        response = self.client.post("/reset")
        assert response.status_code == 200
        assert response.json()["rows"] == OthelloState().to_rows()

    def test_full_api_game_flow(self):
        r = self.client.get("/board")
        assert r.json()["turn"] == "black"

        self.client.post("/move", json={"move": "d3"})
        r = self.client.get("/board")
        assert r.json()["turn"] == "white"

        r = self.client.post("/search", json={"depth": 2})
        best = r.json()["best_move"]
        assert best in ["c3", "e3", "c5"]

        r = self.client.post("/move", json={"move": best})
        assert r.status_code == 200
        assert r.json()["turn"] == "black"


# ════════════════════════════════════════════════════════════════════════════
#  TERMINAL INTERFACE
# ════════════════════════════════════════════════════════════════════════════


class TestCLI:
    def test_quit_immediately(self, capsys):
        from interface.cli import main

        with patch("builtins.input", return_value="quit"):
            main(depth=1)
        assert "a b c d e f g h" in capsys.readouterr().out

    def test_illegal_then_engine_reply(self, capsys):
        from interface.cli import main

        answers = iter(["a1", "d3", "quit"])
        with patch("builtins.input", side_effect=lambda prompt="": next(answers)):
            main(depth=1)
        out = capsys.readouterr().out
        assert "Illegal move, try again." in out
        assert "Engine plays:" in out
