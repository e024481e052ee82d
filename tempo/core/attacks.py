"""
Attack Tables
=============

Per-square attack masks for every piece type, built from the geometric move
pattern of each piece on an otherwise empty board. Sliding pieces cover their
full rays up to the board edge; occupancy is not taken into account.

Tables are built on first use and kept for the lifetime of the process as
tuples, so they can be read from any thread without locking.
"""

from functools import lru_cache
from typing import NamedTuple, Optional, Tuple

import chess

BB_ALL: int = 0xFFFF_FFFF_FFFF_FFFF

FILE_A: int = 0x0101010101010101
FILE_B: int = FILE_A << 1
FILE_G: int = FILE_A << 6
FILE_H: int = FILE_A << 7

FILES: Tuple[int, ...] = tuple(FILE_A << i for i in range(8))
RANKS: Tuple[int, ...] = tuple(0xFF << (8 * i) for i in range(8))


class AttackTables(NamedTuple):
    pawn: Tuple[Tuple[int, ...], Tuple[int, ...]]  # indexed [color][square]
    knight: Tuple[int, ...]
    king: Tuple[int, ...]
    bishop: Tuple[int, ...]
    rook: Tuple[int, ...]
    queen: Tuple[int, ...]
    king_zone: Tuple[int, ...]


def _pawn_attacks(bb: int, color: chess.Color) -> int:
    if color == chess.WHITE:
        return (((bb << 7) & ~FILE_H) | ((bb << 9) & ~FILE_A)) & BB_ALL
    return ((bb >> 7) & ~FILE_A) | ((bb >> 9) & ~FILE_H)


def _knight_attacks(bb: int) -> int:
    return (
        ((bb << 17) & ~FILE_A)
        | ((bb << 15) & ~FILE_H)
        | ((bb << 10) & ~(FILE_A | FILE_B))
        | ((bb << 6) & ~(FILE_G | FILE_H))
        | ((bb >> 6) & ~(FILE_A | FILE_B))
        | ((bb >> 10) & ~(FILE_G | FILE_H))
        | ((bb >> 15) & ~FILE_A)
        | ((bb >> 17) & ~FILE_H)
    ) & BB_ALL


def _king_attacks(bb: int) -> int:
    return (
        (bb << 8)
        | (bb >> 8)
        | ((bb << 1) & ~FILE_A)
        | ((bb >> 1) & ~FILE_H)
        | ((bb << 7) & ~FILE_H)
        | ((bb << 9) & ~FILE_A)
        | ((bb >> 7) & ~FILE_A)
        | ((bb >> 9) & ~FILE_H)
    ) & BB_ALL


def _ray_attacks(sq: int, directions) -> int:
    f, r = chess.square_file(sq), chess.square_rank(sq)
    bb = 0
    for df, dr in directions:
        ff, rr = f + df, r + dr
        while 0 <= ff < 8 and 0 <= rr < 8:
            bb |= 1 << chess.square(ff, rr)
            ff += df
            rr += dr
    return bb


_DIAGONALS = ((1, 1), (-1, 1), (1, -1), (-1, -1))
_ORTHOGONALS = ((1, 0), (-1, 0), (0, 1), (0, -1))


@lru_cache(maxsize=None)
def attack_tables() -> AttackTables:
    """Build (once) and return every attack table."""
    white_pawn, black_pawn, knight, king, bishop, rook = [], [], [], [], [], []
    for sq in chess.SQUARES:
        bb = 1 << sq
        white_pawn.append(_pawn_attacks(bb, chess.WHITE))
        black_pawn.append(_pawn_attacks(bb, chess.BLACK))
        knight.append(_knight_attacks(bb))
        king.append(_king_attacks(bb))
        bishop.append(_ray_attacks(sq, _DIAGONALS))
        rook.append(_ray_attacks(sq, _ORTHOGONALS))

    queen = tuple(b | r for b, r in zip(bishop, rook))
    king = tuple(king)
    return AttackTables(
        pawn=(tuple(black_pawn), tuple(white_pawn)),  # chess.BLACK == 0, chess.WHITE == 1
        knight=tuple(knight),
        king=king,
        bishop=tuple(bishop),
        rook=tuple(rook),
        queen=queen,
        king_zone=king,
    )


def attacks_for(piece_type: chess.PieceType, square: chess.Square, color: Optional[chess.Color] = None) -> int:
    """
    Squares attacked by a piece of the given type standing on ``square``.

    Pawn attacks depend on the pawn's colour, so ``color`` is required for
    pawns and ignored otherwise.
    """
    tables = attack_tables()
    if piece_type == chess.PAWN:
        if color is None:
            raise ValueError("pawn attacks need a color")
        return tables.pawn[int(color)][square]
    if piece_type == chess.KNIGHT:
        return tables.knight[square]
    if piece_type == chess.BISHOP:
        return tables.bishop[square]
    if piece_type == chess.ROOK:
        return tables.rook[square]
    if piece_type == chess.QUEEN:
        return tables.queen[square]
    if piece_type == chess.KING:
        return tables.king[square]
    raise ValueError(f"unknown piece type: {piece_type!r}")


def king_zone(square: chess.Square) -> int:
    """Squares adjacent to a king on ``square``."""
    return attack_tables().king_zone[square]
