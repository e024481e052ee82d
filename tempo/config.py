# tempo/config.py
import math
import os
import tomllib
from dataclasses import dataclass, field
from typing import Dict, Optional

# Centipawn weights used by move ordering (MVV-LVA)
PIECE_VALUES = {
    "PAWN": 100,
    "KNIGHT": 320,
    "BISHOP": 330,
    "ROOK": 500,
    "QUEEN": 900,
    "KING": 20000,
}


def _by_phase(opening: float, middlegame: float, threshold: float, endgame: float) -> Dict[str, float]:
    return {
        "OPENING": opening,
        "MIDDLEGAME": middlegame,
        "THRESHOLD": threshold,
        "ENDGAME": endgame,
    }


@dataclass
class SearchConfig:
    depth: int = 3
    max_depth: int = 64  # ceiling for clock-driven and infinite searches
    aspiration_window: float = 0.5  # pawns
    aspiration_min_depth: int = 4
    default_max_time_ms: int = 5000
    depth_max_time_ms: int = 300000
    infinite_max_time_ms: int = 3600000


@dataclass
class EvalConfig:
    # half-moves treated as the opening regardless of material
    opening_moves: int = 20

    # material in pawn units
    pawn_values: Dict[str, float] = field(default_factory=lambda: _by_phase(1.0, 0.8, 0.9, 1.0))
    knight_values: Dict[str, float] = field(default_factory=lambda: _by_phase(3.25, 3.2, 3.2, 3.2))
    bishop_value: float = 3.33
    bishop_pair_bonus: Dict[str, float] = field(default_factory=lambda: _by_phase(0.0, 0.3, 0.4, 0.5))
    first_rook_values: Dict[str, float] = field(default_factory=lambda: _by_phase(5.63, 5.73, 5.73, 6.13))
    second_rook_values: Dict[str, float] = field(default_factory=lambda: _by_phase(5.63, 5.53, 5.93, 6.03))
    # per-phase queen value only feeds the square-control term
    queen_values: Dict[str, float] = field(default_factory=lambda: _by_phase(9.5, 9.5, 9.4, 9.5))
    queen_value: float = 9.5
    extra_queen_base_value: float = 9.4  # with two or more queens, plus the increment
    second_queen_increment: float = 8.7
    king_value: float = math.inf

    # rook placement
    rook_open_file_bonus: float = 0.3
    rook_semi_open_file_bonus: float = 0.15
    rook_seventh_rank_bonus: float = 0.25
    connected_rooks_bonus: float = 0.2

    # square control / exchanges
    attacker_count_bonus: Dict[int, float] = field(default_factory=lambda: {2: 0.3, 3: 0.5, 4: 0.7})
    defender_penalty: float = 0.1
    hanging_bonus: float = 0.3
    winning_exchange_bonus: float = 0.2

    # mating motifs
    back_rank_mate_bonus: float = 5.0
    smothered_mate_bonus: float = 4.0

    # ordering weights (centipawns)
    piece_values: Dict[str, int] = field(default_factory=lambda: PIECE_VALUES.copy())


@dataclass
class TimeConfig:
    safeguard_ms: float = 100.0
    game_length: int = 30  # moves assumed left when movestogo is absent
    max_usage: float = 0.8


@dataclass
class UIConfig:
    engine_name: str = "Tempo"
    engine_author: str = "Tempo developers"
    api_port: int = 8000


@dataclass
class Config:
    search: SearchConfig = field(default_factory=SearchConfig)
    eval: EvalConfig = field(default_factory=EvalConfig)
    time: TimeConfig = field(default_factory=TimeConfig)
    ui: UIConfig = field(default_factory=UIConfig)
    log_level: str = "INFO"

    @staticmethod
    def load_from_toml(path: str = "config.toml") -> "Config":
        cfg = Config()
        if not os.path.exists(path):
            return cfg
        with open(path, "rb") as f:
            raw = tomllib.load(f)
        for section in ("search", "eval", "time", "ui"):
            target = getattr(cfg, section)
            for k, v in raw.get(section, {}).items():
                if hasattr(target, k):
                    setattr(target, k, v)
        if "log_level" in raw:
            cfg.log_level = str(raw["log_level"])
        return cfg


def _depth_override() -> Optional[int]:
    value = os.environ.get("TEMPO_SEARCH_DEPTH")
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        return None


# single globally importable config instance
CONFIG = Config.load_from_toml(os.environ.get("TEMPO_CONFIG_TOML", "config.toml"))
# allow env override of depth for quick debugging
if _depth_override() is not None:
    CONFIG.search.depth = _depth_override()
