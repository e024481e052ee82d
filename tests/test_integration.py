"""
Integration test suite for the Tempo chess engine.

Tests components working together end-to-end:
- Short engine-vs-engine games
- Engine wrapper
- UCI protocol (commands, position parsing, go parameters, stop)
- FastAPI REST API
- Time budget driving the iterative-deepening loop
"""

import io
import threading
import time
from unittest.mock import MagicMock

import chess
import pytest

from tempo.config import CONFIG
from tempo.core.position import Position
from tempo.core.search import SearchEngine
from tempo.core.timecontrol import GameTime, allocate
from tempo.core.utils import format_info
from tempo.main import Engine

FOOLS_MATE = "rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 0 1"


# ════════════════════════════════════════════════════════════════════════════
#  ENGINE VS ENGINE
# ════════════════════════════════════════════════════════════════════════════


class TestFullGame:
    """The engine can keep playing legal moves from both sides."""

    def test_engine_vs_engine_short_game(self):
        engine = SearchEngine(depth=1, info_callback=None)
        pos = Position.startpos()

        for ply in range(8):
            move, _ = engine.search_best_move(pos)
            if move is None:
                break
            assert move in pos.legal_moves(), f"Illegal move {move} at ply {ply}"
            assert pos.make_move(move)

        assert pos.move_count == 2 + 8

    def test_engine_plays_from_midgame(self):
        fen = "r1bqkb1r/pppppppp/2n2n2/8/4P3/5N2/PPPP1PPP/RNBQKB1R w KQkq - 2 3"
        engine = SearchEngine(depth=2, info_callback=None)
        pos = Position.from_fen(fen)

        for _ in range(3):
            move, _ = engine.search_best_move(pos)
            assert move in pos.legal_moves()
            pos.make_move(move)

    def test_game_ends_in_mate(self):
        """Black delivers fool's mate and white is left without a move."""
        engine = SearchEngine(depth=2, info_callback=None)
        pos = Position.startpos()
        for mv in ("f2f3", "e7e5", "g2g4"):
            assert pos.make_move(mv)

        move, _ = engine.search_best_move(pos)
        assert move == "d8h4"
        pos.make_move(move)
        assert pos.board.is_checkmate()
        assert engine.search_best_move(pos) == (None, 0.0)


# ════════════════════════════════════════════════════════════════════════════
#  ENGINE WRAPPER
# ════════════════════════════════════════════════════════════════════════════


class TestEngineWrapperIntegration:
    def test_best_move_from_start(self):
        engine = Engine(depth=1)
        move, score = engine.get_best_move()
        assert move in engine.position.legal_moves()
        assert isinstance(score, float)

    def test_make_move_and_reset(self):
        engine = Engine(depth=1)
        assert engine.make_move("e2e4")
        assert not engine.make_move("e2e4")
        assert engine.position.side_to_move == chess.BLACK
        engine.reset()
        assert engine.position.fen() == chess.STARTING_FEN

    def test_set_position_bad_fen(self):
        engine = Engine(depth=1)
        engine.set_position("definitely not fen")
        assert engine.position.fen() == chess.STARTING_FEN

    def test_mated_position(self):
        engine = Engine(depth=2)
        engine.set_position(FOOLS_MATE)
        assert engine.get_best_move() == (None, 0.0)

    def test_print_board(self, capsys):
        Engine(depth=1).print_board()
        out = capsys.readouterr().out
        assert "r n b q k b n r" in out


# ════════════════════════════════════════════════════════════════════════════
#  UCI PROTOCOL
# ════════════════════════════════════════════════════════════════════════════


class TestUCIIntegration:
    """Drives the UCI front-end with an in-memory output stream."""

    def _make_uci(self):
        from interface.uci import UCI

        return UCI(out=io.StringIO())

    def _lines(self, uci):
        return uci.out.getvalue().splitlines()

    def test_uci_handshake(self):
        uci = self._make_uci()
        assert uci.handle("uci") is True
        lines = self._lines(uci)
        assert lines[0] == f"id name {CONFIG.ui.engine_name}"
        assert lines[1].startswith("id author ")
        assert lines[-1] == "uciok"

    def test_isready(self):
        uci = self._make_uci()
        uci.handle("isready")
        assert self._lines(uci) == ["readyok"]

    def test_quit_and_unknown(self):
        uci = self._make_uci()
        assert uci.handle("xyzzy") is True
        assert uci.handle("") is True
        assert uci.handle("quit") is False
        assert self._lines(uci) == []

    def test_position_startpos(self):
        uci = self._make_uci()
        uci._parse_position(["startpos"])
        assert uci.position.fen() == chess.STARTING_FEN

    def test_position_startpos_moves(self):
        uci = self._make_uci()
        uci._parse_position(["startpos", "moves", "e2e4", "e7e5"])
        expected = chess.Board()
        expected.push_uci("e2e4")
        expected.push_uci("e7e5")
        assert uci.position.fen() == expected.fen()
        assert uci.position.move_count == 4

    def test_position_fen(self):
        fen = "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq - 0 1"
        uci = self._make_uci()
        uci._parse_position(["fen"] + fen.split())
        assert uci.position.fen() == fen

    def test_position_fen_with_moves(self):
        fen = "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq - 0 1"
        uci = self._make_uci()
        uci._parse_position(["fen"] + fen.split() + ["moves", "e7e5"])
        expected = chess.Board(fen)
        expected.push_uci("e7e5")
        assert uci.position.fen() == expected.fen()

    def test_position_invalid_fen_uses_start(self):
        uci = self._make_uci()
        uci._parse_position(["startpos", "moves", "e2e4"])
        uci._parse_position(["fen", "invalid", "fen", "string"])
        assert uci.position.fen() == chess.STARTING_FEN

    def test_position_illegal_move_stops_there(self):
        uci = self._make_uci()
        uci._parse_position(["startpos", "moves", "e2e4", "e2e4", "e7e5"])
        expected = chess.Board()
        expected.push_uci("e2e4")
        assert uci.position.fen() == expected.fen()

    def test_position_without_arguments(self):
        uci = self._make_uci()
        uci._parse_position(["startpos", "moves", "d2d4"])
        before = uci.position.fen()
        uci._parse_position([])
        uci._parse_position(["somewhere"])
        assert uci.position.fen() == before

    def test_go_depth_passes_depth(self):
        uci = self._make_uci()
        uci.engine.start_search = MagicMock()
        uci._parse_go(["depth", "3"])
        kwargs = uci.engine.start_search.call_args.kwargs
        assert kwargs["depth"] == 3
        assert kwargs["max_time"] == pytest.approx(CONFIG.search.depth_max_time_ms / 1000.0)

    def test_go_clock_allocates_for_side_to_move(self):
        uci = self._make_uci()
        uci.engine.start_search = MagicMock()
        uci._parse_go(["wtime", "10000", "btime", "3100", "winc", "0", "binc", "0"])
        kwargs = uci.engine.start_search.call_args.kwargs
        assert kwargs["max_time"] == pytest.approx(0.264)
        assert kwargs["depth"] == CONFIG.search.max_depth

        uci._parse_position(["startpos", "moves", "e2e4"])
        uci._parse_go(["wtime", "10000", "btime", "3100"])
        assert uci.engine.start_search.call_args.kwargs["max_time"] == pytest.approx(0.080)

    def test_go_movestogo(self):
        uci = self._make_uci()
        uci.engine.start_search = MagicMock()
        uci._parse_go(["wtime", "10100", "btime", "10100", "movestogo", "10"])
        assert uci.engine.start_search.call_args.kwargs["max_time"] == pytest.approx(0.8)

    def test_go_movetime(self):
        uci = self._make_uci()
        uci.engine.start_search = MagicMock()
        uci._parse_go(["movetime", "1500"])
        assert uci.engine.start_search.call_args.kwargs["max_time"] == pytest.approx(1.5)

    def test_go_bad_numbers_parse_as_zero(self):
        uci = self._make_uci()
        uci.engine.start_search = MagicMock()
        uci._parse_go(["wtime", "lots", "btime", "1000"])
        assert uci.engine.start_search.call_args.kwargs["max_time"] == 0

    def test_go_infinite(self):
        uci = self._make_uci()
        uci.engine.start_search = MagicMock()
        uci._parse_go(["infinite"])
        kwargs = uci.engine.start_search.call_args.kwargs
        assert kwargs["depth"] == CONFIG.search.max_depth
        assert kwargs["max_time"] == pytest.approx(CONFIG.search.infinite_max_time_ms / 1000.0)

    def test_go_depth_end_to_end(self):
        uci = self._make_uci()
        uci.handle("position startpos moves e2e4")
        uci.handle("go depth 1")
        uci.engine.wait(timeout=30)

        lines = self._lines(uci)
        assert lines[0].startswith("info depth 1 score cp ")
        assert lines[-1].startswith("bestmove ")
        move = lines[-1].split()[1]
        assert move in uci.position.legal_moves()

    def test_go_on_mated_position_sends_null_move(self):
        uci = self._make_uci()
        uci.handle("position fen " + FOOLS_MATE)
        uci.handle("go depth 3")
        uci.engine.wait(timeout=30)
        assert self._lines(uci) == ["bestmove 0000"]

    def test_go_infinite_then_stop(self):
        uci = self._make_uci()
        uci.handle("position startpos")
        uci.handle("go infinite")
        time.sleep(0.3)
        uci.handle("stop")

        assert not uci.engine.is_searching
        lines = self._lines(uci)
        assert lines[-1].startswith("bestmove ")
        assert lines[-1].split()[1] in Position.startpos().legal_moves()

    def test_run_reads_stream(self):
        uci = self._make_uci()
        uci.run(io.StringIO("uci\nisready\nquit\nisready\n"))
        lines = self._lines(uci)
        assert "uciok" in lines
        assert lines.count("readyok") == 1

    def test_info_line_format(self):
        assert format_info(3, 1.234, 500, 42, "e2e4") == "info depth 3 score cp 123 nodes 500 time 42 pv e2e4"
        assert format_info(1, -0.5, 1, 0, None).endswith("pv (none)")


# ════════════════════════════════════════════════════════════════════════════
#  REST API
# ════════════════════════════════════════════════════════════════════════════


class TestAPIIntegration:
    """Tests FastAPI REST API endpoints."""

    @pytest.fixture(autouse=True)
    def setup_client(self):
        from fastapi.testclient import TestClient
        from interface.api import app, state

        self.client = TestClient(app)
        state["position"] = Position.startpos()

    def test_get_board_initial(self):
        response = self.client.get("/board")
        assert response.status_code == 200
        data = response.json()
        assert data["fen"] == chess.STARTING_FEN
        assert data["turn"] == "white"
        assert data["move_count"] == 2
        assert data["in_check"] is False
        assert len(data["legal_moves"]) == 20

    def test_post_move_valid(self):
        response = self.client.post("/move", json={"move": "e2e4"})
        assert response.status_code == 200
        data = response.json()
        assert data["move"] == "e2e4"
        assert "4P3" in data["fen"]
        assert self.client.get("/board").json()["turn"] == "black"

    def test_post_move_illegal(self):
        response = self.client.post("/move", json={"move": "e2e5"})
        assert response.status_code == 400

    def test_post_move_malformed(self):
        response = self.client.post("/move", json={"move": "nonsense"})
        assert response.status_code == 400

    def test_set_position(self):
        fen = "4k3/8/8/8/8/8/8/R3K3 w - - 0 1"
        response = self.client.post("/position", json={"fen": fen})
        assert response.status_code == 200
        assert response.json()["fen"] == fen

    def test_set_bad_position_falls_back(self):
        response = self.client.post("/position", json={"fen": "garbage"})
        assert response.status_code == 200
        assert response.json()["fen"] == chess.STARTING_FEN

    def test_search(self):
        response = self.client.post("/search", json={"depth": 1})
        assert response.status_code == 200
        data = response.json()
        assert data["best_move"] in Position.startpos().legal_moves()
        assert isinstance(data["score"], float)

    def test_search_finds_mate(self):
        self.client.post("/position", json={"fen": "6k1/5ppp/8/8/8/8/8/R5K1 w - - 0 1"})
        data = self.client.post("/search", json={"depth": 2}).json()
        assert data["best_move"] == "a1a8"
        assert data["score"] > 9000

    def test_search_without_moves(self):
        self.client.post("/position", json={"fen": FOOLS_MATE})
        data = self.client.post("/search", json={"depth": 2}).json()
        assert data["best_move"] is None
        assert data["score"] == 0.0

    def test_search_does_not_move(self):
        self.client.post("/search", json={"depth": 1})
        assert self.client.get("/board").json()["fen"] == chess.STARTING_FEN

    def test_reset(self):
        self.client.post("/move", json={"move": "d2d4"})
        response = self.client.post("/reset")
        assert response.status_code == 200
        assert response.json()["fen"] == chess.STARTING_FEN


# ════════════════════════════════════════════════════════════════════════════
#  TIME MANAGEMENT
# ════════════════════════════════════════════════════════════════════════════


class TestTimedSearch:
    def test_loop_stops_after_budget(self):
        """Only the last reported depth may finish past the budget."""
        budget_ms = allocate(GameTime(wtime=1600, btime=1600), chess.WHITE)
        assert budget_ms == 40

        reports = []
        engine = SearchEngine(info_callback=lambda d, s, n, t, m: reports.append((d, t)))
        pos = Position.startpos()
        move, _ = engine.pick_move(pos, max_depth=CONFIG.search.max_depth, max_time=budget_ms / 1000.0)

        assert move in pos.legal_moves()
        assert reports
        assert [d for d, _ in reports] == list(range(1, len(reports) + 1))
        for _, elapsed_ms in reports[:-1]:
            assert elapsed_ms < budget_ms

    def test_background_search_respects_budget(self):
        done = threading.Event()
        results = []

        def callback(move, score):
            results.append(move)
            done.set()

        engine = SearchEngine(info_callback=None)
        engine.start_search(Position.startpos(), depth=CONFIG.search.max_depth, max_time=0.0, callback=callback)
        assert done.wait(timeout=30)
        assert results[0] in Position.startpos().legal_moves()
