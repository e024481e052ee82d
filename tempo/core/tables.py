"""
Piece-square tables in pawn units.

Each table is written rank 8 first, the way a board is drawn from White's
side, and stored indexed by python-chess square (A1 = 0). Black pieces look
up the vertically mirrored square.

Only the middlegame and endgame tables exist. The opening and threshold
phases get no positional value at all.
"""

from typing import Dict, Sequence, Tuple

import chess

from tempo.core.phase import GamePhase


def _from_visual(rows: Sequence[Sequence[float]]) -> Tuple[float, ...]:
    return tuple(v for row in reversed(rows) for v in row)


_MG_PAWN = _from_visual((
    (   0.0,   0.0,   0.0,   0.0,   0.0,   0.0,   0.0,   0.0),
    (  0.98,  1.34,  0.61,  0.95,  0.68,  1.26,  0.34, -0.11),
    ( -0.06,  0.07,  0.26,  0.31,  0.65,  0.56,  0.25, -0.20),
    ( -0.14,  0.13,  0.06,  0.21,  0.23,  0.12,  0.17, -0.23),
    ( -0.27, -0.02, -0.05,  0.12,  0.17,  0.06,  0.10, -0.25),
    ( -0.26, -0.04, -0.04, -0.10,  0.03,  0.03,  0.33, -0.12),
    ( -0.35, -0.01, -0.20, -0.23, -0.15,  0.24,  0.38, -0.22),
    (   0.0,   0.0,   0.0,   0.0,   0.0,   0.0,   0.0,   0.0),
))

_EG_PAWN = _from_visual((
    (   0.0,   0.0,   0.0,   0.0,   0.0,   0.0,   0.0,   0.0),
    (  1.78,  1.73,  1.58,  1.34,  1.47,  1.32,  1.65,  1.87),
    (  0.94,  1.00,  0.85,  0.67,  0.56,  0.53,  0.82,  0.84),
    (  0.32,  0.24,  0.13,  0.05, -0.02,  0.04,  0.17,  0.17),
    (  0.13,  0.09, -0.03, -0.07, -0.07, -0.08,  0.03, -0.01),
    (  0.04,  0.07, -0.06,  0.01,   0.0, -0.05, -0.01, -0.08),
    (  0.13,  0.08,  0.08,  0.10,  0.13,   0.0,  0.02, -0.07),
    (   0.0,   0.0,   0.0,   0.0,   0.0,   0.0,   0.0,   0.0),
))

_MG_KNIGHT = _from_visual((
    ( -1.67, -0.89, -0.34, -0.49,  0.61, -0.97, -0.15, -1.07),
    ( -0.73, -0.41,  0.72,  0.36,  0.23,  0.62,  0.07, -0.17),
    ( -0.47,  0.60,  0.37,  0.65,  0.84,  1.29,  0.73,  0.44),
    ( -0.09,  0.17,  0.19,  0.53,  0.37,  0.69,  0.18,  0.22),
    ( -0.13,  0.04,  0.16,  0.13,  0.28,  0.19,  0.21, -0.08),
    ( -0.23, -0.09,  0.12,  0.10,  0.19,  0.17,  0.25, -0.16),
    ( -0.29, -0.53, -0.12, -0.03, -0.01,  0.18, -0.14, -0.19),
    ( -1.05, -0.21, -0.58, -0.33, -0.17, -0.28, -0.19, -0.23),
))

_EG_KNIGHT = _from_visual((
    ( -0.58, -0.38, -0.13, -0.28, -0.31, -0.27, -0.63, -0.99),
    ( -0.25, -0.08, -0.25, -0.02, -0.09, -0.25, -0.24, -0.52),
    ( -0.24, -0.20,  0.10,  0.09, -0.01, -0.09, -0.19, -0.41),
    ( -0.17,  0.03,  0.22,  0.22,  0.22,  0.11,  0.08, -0.18),
    ( -0.18, -0.06,  0.16,  0.25,  0.16,  0.17,  0.04, -0.18),
    ( -0.23, -0.03, -0.01,  0.15,  0.10, -0.03, -0.20, -0.22),
    ( -0.42, -0.20, -0.10, -0.05, -0.02, -0.20, -0.23, -0.44),
    ( -0.29, -0.51, -0.23, -0.15, -0.22, -0.18, -0.50, -0.64),
))

_MG_BISHOP = _from_visual((
    ( -0.29,  0.04, -0.82, -0.37, -0.25, -0.42,  0.07, -0.08),
    ( -0.26,  0.16, -0.18, -0.13,  0.30,  0.59,  0.18, -0.47),
    ( -0.16,  0.37,  0.43,  0.40,  0.35,  0.50,  0.37, -0.02),
    ( -0.04,  0.05,  0.19,  0.50,  0.37,  0.37,  0.07, -0.02),
    ( -0.06,  0.13,  0.13,  0.26,  0.34,  0.12,  0.10,  0.04),
    (   0.0,  0.15,  0.15,  0.15,  0.14,  0.27,  0.18,  0.10),
    (  0.04,  0.15,  0.16,   0.0,  0.07,  0.21,  0.33,  0.01),
    ( -0.33, -0.03, -0.14, -0.21, -0.13, -0.12, -0.39, -0.21),
))

_EG_BISHOP = _from_visual((
    ( -0.14, -0.21, -0.11, -0.08, -0.07, -0.09, -0.17, -0.24),
    ( -0.08, -0.04,  0.07, -0.12, -0.03, -0.13, -0.04, -0.14),
    (  0.02, -0.08,   0.0, -0.01, -0.02,  0.06,   0.0,  0.04),
    ( -0.03,  0.09,  0.12,  0.09,  0.14,  0.10,  0.03,  0.02),
    ( -0.06,  0.03,  0.13,  0.19,  0.07,  0.10, -0.03, -0.09),
    ( -0.12, -0.03,  0.08,  0.10,  0.13,  0.03, -0.07, -0.15),
    ( -0.14, -0.18, -0.07, -0.01,  0.04, -0.09, -0.15, -0.27),
    ( -0.23, -0.09, -0.23, -0.05, -0.09, -0.16, -0.05, -0.17),
))

_MG_ROOK = _from_visual((
    (  0.32,  0.42,  0.32,  0.51,  0.63,  0.09,  0.31,  0.43),
    (  0.27,  0.32,  0.58,  0.62,  0.80,  0.67,  0.26,  0.44),
    ( -0.05,  0.19,  0.26,  0.36,  0.17,  0.45,  0.61,  0.16),
    ( -0.24, -0.11,  0.07,  0.26,  0.24,  0.35, -0.08, -0.20),
    ( -0.36, -0.26, -0.12, -0.01,  0.09, -0.07,  0.06, -0.23),
    ( -0.45, -0.25, -0.16, -0.17,  0.03,  0.00, -0.05, -0.33),
    ( -0.44, -0.16, -0.20, -0.09, -0.01,  0.11, -0.06, -0.71),
    ( -0.19, -0.13,  0.01,  0.17,  0.16,  0.07, -0.37, -0.26),
))

_EG_ROOK = _from_visual((
    (  0.13,  0.10,  0.18,  0.15,  0.12,  0.12,  0.08,  0.05),
    (  0.11,  0.13,  0.13,  0.11, -0.03,  0.03,  0.08,  0.03),
    (  0.07,  0.07,  0.07,  0.05,  0.04, -0.03, -0.05, -0.03),
    (  0.04,  0.03,  0.13,  0.01,  0.02,  0.01, -0.01,  0.02),
    (  0.03,  0.05,  0.08,  0.04, -0.05, -0.06, -0.08, -0.11),
    ( -0.04,  0.00, -0.05, -0.01, -0.07, -0.12, -0.08, -0.16),
    ( -0.06, -0.06,  0.00,  0.02, -0.09, -0.09, -0.11, -0.03),
    ( -0.09,  0.02,  0.03, -0.01, -0.05, -0.13,  0.04, -0.20),
))

_MG_QUEEN = _from_visual((
    ( -0.28,  0.00,  0.29,  0.12,  0.59,  0.44,  0.43,  0.45),
    ( -0.24, -0.39, -0.05,  0.01, -0.16,  0.57,  0.28,  0.54),
    ( -0.13, -0.17,  0.07,  0.08,  0.29,  0.56,  0.47,  0.57),
    ( -0.27, -0.27, -0.16, -0.16, -0.01,  0.17, -0.02,  0.01),
    ( -0.09, -0.26, -0.09, -0.10, -0.02, -0.04,  0.03, -0.03),
    ( -0.14,  0.02, -0.11, -0.02, -0.05,  0.02,  0.14,  0.05),
    ( -0.35, -0.08,  0.11,  0.02,  0.08,  0.15, -0.03,  0.01),
    ( -0.01, -0.18, -0.09,  0.10, -0.15, -0.25, -0.31, -0.50),
))

_EG_QUEEN = _from_visual((
    ( -0.09,  0.22,  0.22,  0.27,  0.27,  0.19,  0.10,  0.20),
    ( -0.17,  0.20,  0.32,  0.41,  0.58,  0.25,  0.30,  0.00),
    ( -0.20,  0.06,  0.09,  0.49,  0.47,  0.35,  0.19,  0.09),
    (  0.03,  0.22,  0.24,  0.45,  0.57,  0.40,  0.57,  0.36),
    ( -0.18,  0.28,  0.19,  0.47,  0.31,  0.34,  0.39,  0.23),
    ( -0.16, -0.27,  0.15,  0.06,  0.09,  0.17,  0.10,  0.05),
    ( -0.22, -0.23, -0.30, -0.16, -0.16, -0.23, -0.36, -0.32),
    ( -0.33, -0.28, -0.22, -0.43, -0.05, -0.32, -0.20, -0.41),
))

_MG_KING = _from_visual((
    ( -0.65,  0.23,  0.16, -0.15, -0.56, -0.34,  0.02,  0.13),
    (  0.29, -0.01, -0.20, -0.07, -0.08, -0.04, -0.38, -0.29),
    ( -0.09,  0.24,  0.02, -0.16, -0.20,  0.06,  0.22, -0.22),
    ( -0.17, -0.20, -0.12, -0.27, -0.30, -0.25, -0.14, -0.36),
    ( -0.49, -0.01, -0.27, -0.39, -0.46, -0.44, -0.33, -0.51),
    ( -0.14, -0.14, -0.22, -0.46, -0.44, -0.30, -0.15, -0.27),
    (  0.01,  0.07, -0.08, -0.64, -0.43, -0.16,  0.09,  0.08),
    ( -0.15,  0.36,  0.12, -0.54,  0.08, -0.28,  0.24,  0.14),
))

_EG_KING = _from_visual((
    ( -0.74, -0.35, -0.18, -0.18, -0.11,  0.15,  0.04, -0.17),
    ( -0.12,  0.17,  0.14,  0.17,  0.17,  0.38,  0.23,  0.11),
    (  0.10,  0.17,  0.23,  0.15,  0.20,  0.45,  0.44,  0.13),
    ( -0.08,  0.22,  0.24,  0.27,  0.26,  0.33,  0.26,  0.03),
    ( -0.18, -0.04,  0.21,  0.24,  0.27,  0.23,  0.09, -0.11),
    ( -0.19, -0.03,  0.11,  0.21,  0.23,  0.16,  0.07, -0.09),
    ( -0.27, -0.11,  0.04,  0.13,  0.14,  0.04, -0.05, -0.17),
    ( -0.53, -0.34, -0.21, -0.11, -0.28, -0.14, -0.24, -0.43),
))

PIECE_SQUARE_TABLES: Dict[Tuple[chess.PieceType, GamePhase], Tuple[float, ...]] = {
    (chess.PAWN, GamePhase.MIDDLEGAME): _MG_PAWN,
    (chess.PAWN, GamePhase.ENDGAME): _EG_PAWN,
    (chess.KNIGHT, GamePhase.MIDDLEGAME): _MG_KNIGHT,
    (chess.KNIGHT, GamePhase.ENDGAME): _EG_KNIGHT,
    (chess.BISHOP, GamePhase.MIDDLEGAME): _MG_BISHOP,
    (chess.BISHOP, GamePhase.ENDGAME): _EG_BISHOP,
    (chess.ROOK, GamePhase.MIDDLEGAME): _MG_ROOK,
    (chess.ROOK, GamePhase.ENDGAME): _EG_ROOK,
    (chess.QUEEN, GamePhase.MIDDLEGAME): _MG_QUEEN,
    (chess.QUEEN, GamePhase.ENDGAME): _EG_QUEEN,
    (chess.KING, GamePhase.MIDDLEGAME): _MG_KING,
    (chess.KING, GamePhase.ENDGAME): _EG_KING,
}


def piece_square_value(piece_type: chess.PieceType, square: chess.Square, color: chess.Color, phase: GamePhase) -> float:
    """Positional bonus for a piece on ``square``; 0.0 where no table applies."""
    table = PIECE_SQUARE_TABLES.get((piece_type, phase))
    if table is None:
        return 0.0
    if color == chess.BLACK:
        square = chess.square_mirror(square)
    return table[square]
