"""Position wrapper over python-chess: board state plus a half-move counter."""

import logging
from typing import List, Optional

import chess

log = logging.getLogger(__name__)


def _half_moves(fen: str) -> int:
    """Fullmove field as half-moves: 0 when absent, 2 when it is not a number."""
    fields = fen.split()
    if len(fields) < 6:
        return 0
    try:
        fullmove = int(fields[5])
    except ValueError:
        fullmove = 1
    if fullmove < 0:
        fullmove = 1
    return fullmove * 2


class Position:
    def __init__(self, board: Optional[chess.Board] = None, move_count: int = 0):
        """Wrap an existing board, or the standard starting position."""
        self.board = board if board is not None else chess.Board()
        self.move_count = move_count

    @classmethod
    def from_fen(cls, fen: str) -> "Position":
        """Build a position from FEN, falling back to the start position on bad input."""
        move_count = _half_moves(fen)
        try:
            board = chess.Board(fen)
        except ValueError:
            log.debug("invalid FEN %r, using the starting position", fen)
            return cls(move_count=move_count)
        return cls(board, move_count)

    @classmethod
    def startpos(cls) -> "Position":
        return cls.from_fen(chess.STARTING_FEN)

    @property
    def side_to_move(self) -> chess.Color:
        return self.board.turn

    def fen(self) -> str:
        return self.board.fen()

    def copy(self) -> "Position":
        """Independent copy; mutating it never touches this position."""
        return Position(self.board.copy(stack=False), self.move_count)

    def make_move(self, move_str: str) -> bool:
        """Apply a UCI move (e.g. 'e2e4'). Returns False and leaves the position alone on failure."""
        try:
            move = chess.Move.from_uci(move_str)
        except ValueError:
            return False
        if move not in self.board.legal_moves:
            return False
        self.board.push(move)
        self.move_count += 1
        return True

    def legal_moves(self) -> List[str]:
        """Return legal moves as UCI strings."""
        return [m.uci() for m in self.board.legal_moves]

    def is_check(self) -> bool:
        return self.board.is_check()

    def is_capture(self, move_str: str) -> bool:
        """True when the move's destination square is occupied."""
        try:
            move = chess.Move.from_uci(move_str)
        except ValueError:
            return False
        return self.board.piece_at(move.to_square) is not None

    def __repr__(self) -> str:
        return f"Position({self.fen()!r}, move_count={self.move_count})"
