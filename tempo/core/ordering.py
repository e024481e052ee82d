"""Heuristic move ordering used to get alpha-beta cutoffs early."""

from typing import List, Optional

import chess

from tempo.config import CONFIG
from tempo.core.position import Position

CENTER_BAND = range(27, 37)  # d4 .. e5 by square index

CENTER_BONUS = 50
DEVELOPMENT_BONUS = 30
KING_SAFETY_BONUS = 40
REPEAT_MOVE_PENALTY = 20
EARLY_GAME_HALF_MOVES = 10


def _weight(piece_type: chess.PieceType) -> int:
    return CONFIG.eval.piece_values[chess.piece_name(piece_type).upper()]


def _home_rank(piece_type: chess.PieceType, color: chess.Color) -> int:
    if piece_type == chess.PAWN:
        return 1 if color == chess.WHITE else 6
    return 0 if color == chess.WHITE else 7


def mvv_lva(board: chess.Board, move: chess.Move) -> int:
    """10 x victim - attacker in centipawns, 0 when the destination is empty."""
    victim = board.piece_type_at(move.to_square)
    attacker = board.piece_type_at(move.from_square)
    if victim is None or attacker is None:
        return 0
    return 10 * _weight(victim) - _weight(attacker)


def score_move(position: Position, move_str: str) -> int:
    """Ordering score for one move; higher is searched first."""
    board = position.board
    try:
        move = chess.Move.from_uci(move_str)
    except ValueError:
        return 0
    piece: Optional[chess.Piece] = board.piece_at(move.from_square)
    if piece is None:
        return 0

    score = mvv_lva(board, move)

    if move.to_square in CENTER_BAND:
        score += CENTER_BONUS

    from_rank = chess.square_rank(move.from_square)
    early = position.move_count < EARLY_GAME_HALF_MOVES

    if early and piece.piece_type in (chess.KNIGHT, chess.BISHOP) and from_rank == _home_rank(piece.piece_type, piece.color):
        score += DEVELOPMENT_BONUS

    if piece.piece_type == chess.KING and board.is_check():
        score += KING_SAFETY_BONUS

    if (
        early
        and piece.piece_type not in (chess.KING, chess.QUEEN)
        and from_rank != _home_rank(piece.piece_type, piece.color)
    ):
        score -= REPEAT_MOVE_PENALTY

    return score


def order_moves(position: Position, moves: List[str]) -> List[str]:
    """Return ``moves`` best-first; ties keep generation order."""
    return sorted(moves, key=lambda m: score_move(position, m), reverse=True)
