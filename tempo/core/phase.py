from enum import Enum

import chess

from tempo.config import CONFIG


class GamePhase(Enum):
    OPENING = "OPENING"
    MIDDLEGAME = "MIDDLEGAME"
    THRESHOLD = "THRESHOLD"
    ENDGAME = "ENDGAME"


def detect_game_phase(board: chess.Board, move_count: int) -> GamePhase:
    """
    Classify the position's stage.

    The first ``opening_moves`` half-moves are the opening whatever the
    material. After that the queens decide: one queen left on the board is
    the threshold phase, none is the endgame, anything else the middlegame.
    """
    if move_count <= CONFIG.eval.opening_moves:
        return GamePhase.OPENING

    white_queens = len(board.pieces(chess.QUEEN, chess.WHITE))
    black_queens = len(board.pieces(chess.QUEEN, chess.BLACK))

    if white_queens == 0 and black_queens == 0:
        return GamePhase.ENDGAME
    if (white_queens == 0) != (black_queens == 0):
        return GamePhase.THRESHOLD
    return GamePhase.MIDDLEGAME
