"""
Evaluator Module
================

Static evaluation of a position in pawn units, from the point of view of the
side to move.

Each colour is scored on its own and the two totals are subtracted:

    - Positional value from the phase's piece-square tables.
    - Phase-dependent material, with separate first/second rook values, rook
      placement bonuses, a bishop-pair bonus and a flat queen value.
    - Square control: every square the colour attacks, empty or occupied by
      either side, is scored from the value standing on it, the cheapest
      attacker, the number of attackers and defenders, and a one-capture
      exchange estimate. Empty and king squares count as worth nothing, so
      attacking them costs the attacker its own value.
    - Mating motifs (back rank, smothered) against the enemy king.

Attacks come from the precomputed tables in ``tempo.core.attacks``; sliders
are treated as seeing through pieces.
"""

from typing import List

import chess

from tempo.config import CONFIG
from tempo.core.attacks import FILES, RANKS, attack_tables, king_zone
from tempo.core.phase import GamePhase, detect_game_phase
from tempo.core.tables import piece_square_value

ATTACKING_PIECES = (chess.PAWN, chess.KNIGHT, chess.BISHOP, chess.ROOK, chess.QUEEN)


class Evaluator:
    """Stateless apart from configuration; safe to share between searches."""

    def __init__(self) -> None:
        self.cfg = CONFIG.eval
        self.tables = attack_tables()

    def evaluate(self, board: chess.Board, move_count: int) -> float:
        """
        Score ``board`` for the side to move.

        Args:
            board (chess.Board): The position to evaluate.
            move_count (int): Half-moves played, used for phase detection.

        Returns:
            float: Pawn units; positive favours the side to move.
        """
        phase = detect_game_phase(board, move_count)

        totals = {}
        for color in chess.COLORS:
            totals[color] = (
                self._eval_positional(board, color, phase)
                + self._eval_material(board, color, phase)
                + self._eval_attacks(board, color, phase)
                + self._eval_mate_patterns(board, color)
            )

        return totals[board.turn] - totals[not board.turn]

    # --- values ---------------------------------------------------------------

    def piece_value(self, piece_type: chess.PieceType, phase: GamePhase) -> float:
        """Base value of one piece in ``phase``; unknown combinations are 0.0."""
        key = phase.value
        if piece_type == chess.PAWN:
            return self.cfg.pawn_values.get(key, 0.0)
        if piece_type == chess.KNIGHT:
            return self.cfg.knight_values.get(key, 0.0)
        if piece_type == chess.BISHOP:
            return self.cfg.bishop_value
        if piece_type == chess.ROOK:
            return self.cfg.first_rook_values.get(key, 0.0)
        if piece_type == chess.QUEEN:
            return self.cfg.queen_values.get(key, 0.0)
        if piece_type == chess.KING:
            return self.cfg.king_value
        return 0.0

    # --- terms ----------------------------------------------------------------

    def _eval_positional(self, board: chess.Board, color: chess.Color, phase: GamePhase) -> float:
        score = 0.0
        for pt in chess.PIECE_TYPES:
            for sq in board.pieces(pt, color):
                score += piece_square_value(pt, sq, color, phase)
        return score

    def _eval_material(self, board: chess.Board, color: chess.Color, phase: GamePhase) -> float:
        cfg = self.cfg
        key = phase.value
        value = 0.0

        value += len(board.pieces(chess.PAWN, color)) * cfg.pawn_values.get(key, 0.0)
        value += len(board.pieces(chess.KNIGHT, color)) * cfg.knight_values.get(key, 0.0)

        bishops = len(board.pieces(chess.BISHOP, color))
        value += bishops * cfg.bishop_value
        if bishops >= 2:
            value += cfg.bishop_pair_bonus.get(key, 0.0)

        # queen material ignores the phase; extra queens beyond the second add nothing
        queens = len(board.pieces(chess.QUEEN, color))
        if queens == 1:
            value += cfg.queen_value
        elif queens > 1:
            value += cfg.extra_queen_base_value + cfg.second_queen_increment

        value += self._eval_rooks(board, color, key)
        return value

    def _eval_rooks(self, board: chess.Board, color: chess.Color, phase_key: str) -> float:
        cfg = self.cfg
        rooks: List[chess.Square] = list(board.pieces(chess.ROOK, color))  # ascending squares
        if not rooks:
            return 0.0

        first = rooks[0]
        value = cfg.first_rook_values.get(phase_key, 0.0) + self._rook_position_bonus(board, first, color)
        if len(rooks) > 1:
            second = rooks[1]
            value += cfg.second_rook_values.get(phase_key, 0.0) + self._rook_position_bonus(board, second, color)
            if self.tables.rook[first] & (1 << second):
                value += cfg.connected_rooks_bonus
        # only the two lowest rooks are scored
        return value

    def _rook_position_bonus(self, board: chess.Board, square: chess.Square, color: chess.Color) -> float:
        file_mask = FILES[chess.square_file(square)]
        own_pawns = board.pieces_mask(chess.PAWN, color)
        enemy_pawns = board.pieces_mask(chess.PAWN, not color)

        bonus = 0.0
        if not file_mask & (own_pawns | enemy_pawns):
            bonus += self.cfg.rook_open_file_bonus
        elif not file_mask & own_pawns:
            bonus += self.cfg.rook_semi_open_file_bonus

        seventh = RANKS[6] if color == chess.WHITE else RANKS[1]
        if seventh & (1 << square):
            bonus += self.cfg.rook_seventh_rank_bonus
        return bonus

    def _attackers(self, board: chess.Board, square: chess.Square, color: chess.Color, phase: GamePhase) -> List[float]:
        """Values of the ``color`` pieces whose attack table covers ``square``."""
        values = []
        for pt in ATTACKING_PIECES:
            if pt == chess.PAWN:
                # a pawn of `color` hits `square` from where an enemy pawn on `square` would hit
                pattern = self.tables.pawn[int(not color)][square]
            elif pt == chess.KNIGHT:
                pattern = self.tables.knight[square]
            elif pt == chess.BISHOP:
                pattern = self.tables.bishop[square]
            elif pt == chess.ROOK:
                pattern = self.tables.rook[square]
            else:
                pattern = self.tables.queen[square]
            hits = (board.pieces_mask(pt, color) & pattern).bit_count()
            if hits:
                values.extend([self.piece_value(pt, phase)] * hits)
        return values

    def _target_value(self, board: chess.Board, square: chess.Square, phase: GamePhase) -> float:
        """Value of the piece on ``square`` of either colour; 0.0 when empty or a king."""
        piece_type = board.piece_type_at(square)
        if piece_type is None or piece_type == chess.KING:
            return 0.0
        return self.piece_value(piece_type, phase)

    def _square_control(self, board: chess.Board, square: chess.Square, color: chess.Color, phase: GamePhase) -> float:
        """
        Score one square for ``color``.

        Any attacked square counts, empty or not. The exchange estimate looks
        at a single capture by the cheapest attacker and ignores any
        recapture.
        """
        attackers = self._attackers(board, square, color, phase)
        if not attackers:
            return 0.0
        cfg = self.cfg
        defenders = self._attackers(board, square, not color, phase)

        target_value = self._target_value(board, square, phase)
        cheapest = min(attackers)

        score = target_value - cheapest
        score += cfg.attacker_count_bonus.get(min(len(attackers), 4), 0.0)
        score -= cfg.defender_penalty * len(defenders)
        if not defenders:
            score += cfg.hanging_bonus

        # static exchange: one capture by the cheapest attacker
        gain = target_value - cheapest
        score += gain
        if gain > 0:
            score += cfg.winning_exchange_bonus
        return score

    def _attacked_squares(self, board: chess.Board, color: chess.Color) -> int:
        """Union of the attack tables of ``color``'s non-king pieces."""
        tables = self.tables
        mask = 0
        for sq in chess.scan_forward(board.pieces_mask(chess.PAWN, color)):
            mask |= tables.pawn[int(color)][sq]
        for pt, table in (
            (chess.KNIGHT, tables.knight),
            (chess.BISHOP, tables.bishop),
            (chess.ROOK, tables.rook),
            (chess.QUEEN, tables.queen),
        ):
            for sq in chess.scan_forward(board.pieces_mask(pt, color)):
                mask |= table[sq]
        return mask

    def _eval_attacks(self, board: chess.Board, color: chess.Color, phase: GamePhase) -> float:
        """Square-control term for ``color``, summed over the whole board."""
        # squares outside the union have no attackers and score 0.0
        attacked = self._attacked_squares(board, color)
        return sum(
            self._square_control(board, sq, color, phase)
            for sq in chess.SQUARES
            if attacked & chess.BB_SQUARES[sq]
        )

    def _eval_mate_patterns(self, board: chess.Board, color: chess.Color) -> float:
        """Bonus for ``color`` when the enemy king sits in a known mating pattern."""
        king_sq = board.king(not color)
        if king_sq is None:
            return 0.0

        bonus = 0.0
        if self._is_back_rank_pattern(board, king_sq, not color):
            bonus += self.cfg.back_rank_mate_bonus
        if self._is_smothered_pattern(board, king_sq, not color):
            bonus += self.cfg.smothered_mate_bonus
        return bonus

    def _boxed_in(self, board: chess.Board, king_sq: chess.Square, king_color: chess.Color) -> bool:
        zone = king_zone(king_sq)
        return not zone & ~board.occupied_co[king_color]

    def _is_back_rank_pattern(self, board: chess.Board, king_sq: chess.Square, king_color: chess.Color) -> bool:
        back_rank = 0 if king_color == chess.WHITE else 7
        if chess.square_rank(king_sq) != back_rank:
            return False
        if not self._boxed_in(board, king_sq, king_color):
            return False
        heavy = board.pieces_mask(chess.ROOK, not king_color) | board.pieces_mask(chess.QUEEN, not king_color)
        return bool(heavy)

    def _is_smothered_pattern(self, board: chess.Board, king_sq: chess.Square, king_color: chess.Color) -> bool:
        if not self._boxed_in(board, king_sq, king_color):
            return False
        knights = board.pieces_mask(chess.KNIGHT, not king_color)
        return bool(self.tables.knight[king_sq] & knights)

