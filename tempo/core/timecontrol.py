"""Turns the clock state sent by the GUI into a time budget for one move."""

import math
from dataclasses import dataclass
from typing import Optional

import chess

from tempo.config import CONFIG


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


@dataclass
class GameTime:
    # all times in milliseconds
    wtime: int = 0
    btime: int = 0
    winc: int = 0
    binc: int = 0
    movestogo: Optional[int] = None

    def calculate_time(self, color: chess.Color) -> int:
        return allocate(self, color)


def allocate(game_time: GameTime, color: chess.Color) -> int:
    """
    Milliseconds to spend on the current move.

    A safeguard is kept back from the clock and the rest is spread over the
    moves still to go (30 when the GUI does not say). With nothing left on
    the clock only the increment is used.
    """
    cfg = CONFIG.time
    moves_to_go = game_time.movestogo if game_time.movestogo and game_time.movestogo > 0 else cfg.game_length

    if color == chess.WHITE:
        clock, increment = game_time.wtime, game_time.winc
    else:
        clock, increment = game_time.btime, game_time.binc

    base_time = clock - cfg.safeguard_ms
    if base_time <= 0:
        if increment > 0:
            return _round_half_up(increment * cfg.max_usage)
        return 0
    return _round_half_up(base_time * cfg.max_usage / moves_to_go)
