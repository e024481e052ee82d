from typing import Optional, Tuple

from tempo.config import CONFIG
from tempo.core.evaluator import Evaluator
from tempo.core.position import Position
from tempo.core.search import SearchEngine


class Engine:
    def __init__(self, depth: int = CONFIG.search.depth):
        self.position = Position.startpos()
        self.search = SearchEngine(Evaluator(), depth=depth, info_callback=None)

    def get_best_move(self) -> Tuple[Optional[str], float]:
        return self.search.search_best_move(self.position)

    def make_move(self, move_uci: str) -> bool:
        return self.position.make_move(move_uci)

    def set_position(self, fen: str) -> None:
        self.position = Position.from_fen(fen)

    def reset(self) -> None:
        self.position = Position.startpos()

    def print_board(self):
        print(self.position.board)
