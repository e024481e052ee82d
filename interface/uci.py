"""
UCI (Universal Chess Interface) front-end.

Reads commands from stdin and writes protocol responses to stdout, flushing
every line. Searches run on the engine's background thread so that ``stop``
and ``quit`` are read while the engine is thinking. Diagnostics go through
``logging`` to stderr; stdout carries protocol output only.
"""

import logging
import sys
from typing import List, Optional, TextIO

from tempo.config import CONFIG
from tempo.core.evaluator import Evaluator
from tempo.core.position import Position
from tempo.core.search import SearchEngine
from tempo.core.timecontrol import GameTime, allocate
from tempo.core.utils import format_info

log = logging.getLogger(__name__)

NULL_MOVE = "0000"


def _to_int(token: str) -> int:
    try:
        return int(token)
    except ValueError:
        return 0


class UCI:
    def __init__(self, out: Optional[TextIO] = None):
        self.out = out
        self.position = Position.startpos()
        self.engine = SearchEngine(Evaluator(), depth=CONFIG.search.depth, info_callback=self._send_info)

    def _send(self, line: str) -> None:
        print(line, file=self.out or sys.stdout, flush=True)

    def _send_info(self, depth: int, score: float, nodes: int, elapsed_ms: int, best_move: Optional[str]) -> None:
        self._send(format_info(depth, score, nodes, elapsed_ms, best_move))

    def _send_bestmove(self, best_move: Optional[str], score: float) -> None:
        if best_move is None:
            log.info("no legal moves, sending null move")
        self._send(f"bestmove {best_move or NULL_MOVE}")

    # --- commands -------------------------------------------------------

    def handle(self, line: str) -> bool:
        """Process one command line. Returns False when the engine should exit."""
        tokens = line.split()
        if not tokens:
            return True
        command, args = tokens[0], tokens[1:]

        if command == "uci":
            self._send(f"id name {CONFIG.ui.engine_name}")
            self._send(f"id author {CONFIG.ui.engine_author}")
            self._send("uciok")
        elif command == "isready":
            self._send("readyok")
        elif command == "ucinewgame":
            self.engine.stop(timeout=None)
            self.position = Position.startpos()
        elif command == "position":
            self._parse_position(args)
        elif command == "go":
            self._parse_go(args)
        elif command == "stop":
            self.engine.stop(timeout=None)
        elif command == "quit":
            self.engine.stop()
            return False
        else:
            log.debug("ignoring unknown command: %s", line.strip())
        return True

    def _parse_position(self, tokens: List[str]) -> None:
        if not tokens:
            return

        if "moves" in tokens:
            idx = tokens.index("moves")
            setup, moves = tokens[:idx], tokens[idx + 1:]
        else:
            setup, moves = tokens, []

        if setup[0] == "startpos":
            position = Position.startpos()
        elif setup[0] == "fen":
            position = Position.from_fen(" ".join(setup[1:]))
        else:
            log.warning("unknown position type: %s", setup[0])
            return

        for mv in moves:
            if not position.make_move(mv):
                log.warning("could not apply move %s, ignoring the rest", mv)
                break
        self.position = position

    def _parse_go(self, tokens: List[str]) -> None:
        cfg = CONFIG.search

        if "infinite" in tokens:
            depth, max_time_ms = cfg.max_depth, cfg.infinite_max_time_ms
        elif "depth" in tokens:
            idx = tokens.index("depth")
            depth = _to_int(tokens[idx + 1]) if idx + 1 < len(tokens) else 1
            depth = max(depth, 1)
            max_time_ms = cfg.depth_max_time_ms
        else:
            game_time = GameTime()
            movetime = None
            for key, value in zip(tokens[::2], tokens[1::2]):
                if key == "wtime":
                    game_time.wtime = _to_int(value)
                elif key == "btime":
                    game_time.btime = _to_int(value)
                elif key == "winc":
                    game_time.winc = _to_int(value)
                elif key == "binc":
                    game_time.binc = _to_int(value)
                elif key == "movestogo":
                    game_time.movestogo = _to_int(value)
                elif key == "movetime":
                    movetime = _to_int(value)

            depth = cfg.max_depth
            if movetime is not None:
                max_time_ms = movetime
            else:
                max_time_ms = allocate(game_time, self.position.side_to_move)
            log.debug("time budget %d ms", max_time_ms)

        self.engine.start_search(
            self.position,
            depth=depth,
            max_time=max_time_ms / 1000.0,
            callback=self._send_bestmove,
        )

    def run(self, stream: Optional[TextIO] = None) -> None:
        for line in stream or sys.stdin:
            if not self.handle(line):
                break


def main() -> None:
    logging.basicConfig(
        level=CONFIG.log_level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    UCI().run()
    sys.exit(0)


if __name__ == "__main__":
    main()
