"""Core engine components: position, attack tables, evaluator, ordering, search and time control."""

from .attacks import attack_tables, attacks_for
from .evaluator import Evaluator
from .phase import GamePhase, detect_game_phase
from .position import Position
from .search import SearchEngine, SearchParams
from .timecontrol import GameTime, allocate
