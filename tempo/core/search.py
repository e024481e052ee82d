import logging
import math
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Optional, Tuple

from tempo.config import CONFIG
from tempo.core.evaluator import Evaluator
from tempo.core.ordering import order_moves
from tempo.core.position import Position
from tempo.core.utils import print_info

log = logging.getLogger(__name__)

INF = math.inf
MATE_SCORE = 10000.0

InfoCallback = Callable[[int, float, int, int, Optional[str]], None]
ResultCallback = Callable[[Optional[str], float], None]


@dataclass
class SearchParams:
    depth: int = 0
    start_time: float = field(default_factory=time.monotonic)
    max_time: float = CONFIG.search.default_max_time_ms / 1000.0  # seconds
    nodes: int = 0

    def elapsed(self) -> float:
        return time.monotonic() - self.start_time

    def elapsed_ms(self) -> int:
        return int(self.elapsed() * 1000)


class SearchEngine:
    """
    Depth-limited minimax with alpha-beta pruning, driven by iterative
    deepening with aspiration windows.

    Scores are in pawns, seen from the side to move at the root: nodes
    flagged ``maximizing`` have the root side to move.
    """

    def __init__(
        self,
        evaluator: Optional[Evaluator] = None,
        depth: int = CONFIG.search.depth,
        info_callback: Optional[InfoCallback] = print_info,
    ):
        self.evaluator = evaluator or Evaluator()
        self.max_depth = depth
        self.info_callback = info_callback
        self.cfg = CONFIG.search

        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self.nodes = 0

    # --- tree search ------------------------------------------------------

    def alpha_beta(
        self,
        position: Position,
        depth: int,
        alpha: float,
        beta: float,
        maximizing: bool,
        params: SearchParams,
        stop_event: Optional[threading.Event] = None,
        ply: int = 0,
    ) -> Tuple[float, Optional[str]]:
        """Return ``(score, best_move)`` for ``position``; ``best_move`` is None at leaves."""
        params.nodes += 1

        stopped = ply > 0 and stop_event is not None and stop_event.is_set()
        if depth <= 0 or stopped:
            return self._leaf_score(position, maximizing), None

        moves = order_moves(position, position.legal_moves())
        if not moves:
            if position.is_check():
                # side to move is mated; fewer plies remaining scores worse
                mated = -MATE_SCORE + depth
                return (mated if maximizing else -mated), None
            return 0.0, None

        best_move = None
        best_value = -INF if maximizing else INF

        for mv in moves:
            child = position.copy()
            if not child.make_move(mv):
                continue
            value, _ = self.alpha_beta(child, depth - 1, alpha, beta, not maximizing, params, stop_event, ply + 1)

            if maximizing and value > best_value:
                best_value = value
                best_move = mv
                alpha = max(alpha, value)
            elif not maximizing and value < best_value:
                best_value = value
                best_move = mv
                beta = min(beta, value)

            if beta <= alpha:
                break

        return best_value, best_move

    def _leaf_score(self, position: Position, maximizing: bool) -> float:
        score = self.evaluator.evaluate(position.board, position.move_count)
        return score if maximizing else -score

    # --- driver -----------------------------------------------------------

    def pick_move(
        self,
        position: Position,
        max_depth: Optional[int] = None,
        max_time: Optional[float] = None,
        stop_event: Optional[threading.Event] = None,
    ) -> Tuple[Optional[str], float]:
        """
        Iteratively deepen from depth 1 and return ``(best_move, score)``.

        ``max_time`` is in seconds and is only checked between depths, so an
        iteration that has started always runs to completion unless the stop
        token is set. Depth 1 always completes. Returns ``(None, 0.0)`` when
        there is no legal move.
        """
        token = stop_event if stop_event is not None else self._stop_event
        params = SearchParams(max_time=max_time if max_time is not None else self.cfg.default_max_time_ms / 1000.0)
        target_depth = max_depth or self.max_depth

        legal = position.legal_moves()
        if not legal:
            log.info("no legal moves in %s", position.fen())
            return None, 0.0

        # always have a move ready
        best_move: Optional[str] = legal[0]
        best_score = 0.0
        previous: Optional[float] = None
        window = self.cfg.aspiration_window

        for depth in range(1, target_depth + 1):
            params.depth = depth
            if depth >= self.cfg.aspiration_min_depth and previous is not None:
                alpha, beta = previous - window, previous + window
            else:
                alpha, beta = -INF, INF

            interrupted = False
            while True:
                score, mv = self.alpha_beta(position, depth, alpha, beta, True, params, token)
                if depth > 1 and token.is_set():
                    interrupted = True
                    break
                if score <= alpha and alpha != -INF:
                    log.debug("depth %d failed low (%.2f <= %.2f), re-searching", depth, score, alpha)
                    alpha = -INF
                    continue
                if score >= beta and beta != INF:
                    log.debug("depth %d failed high (%.2f >= %.2f), re-searching", depth, score, beta)
                    beta = INF
                    continue
                break

            if interrupted:
                log.debug("depth %d interrupted, keeping depth %d result", depth, depth - 1)
                break

            if mv is not None:
                best_move, best_score = mv, score
            previous = score

            if self.info_callback:
                self.info_callback(depth, best_score, params.nodes, params.elapsed_ms(), best_move)

            if params.elapsed() >= params.max_time or token.is_set():
                break

        self.nodes = params.nodes
        return best_move, best_score

    def search_best_move(self, position: Position, depth: Optional[int] = None) -> Tuple[Optional[str], float]:
        """Blocking fixed-depth search with the default time limit."""
        self._stop_event.clear()
        return self.pick_move(position, max_depth=depth or self.max_depth)

    # --- background search ------------------------------------------------

    def start_search(
        self,
        position: Position,
        depth: Optional[int] = None,
        max_time: Optional[float] = None,
        callback: Optional[ResultCallback] = None,
    ) -> None:
        """Run ``pick_move`` on a daemon thread and hand the result to ``callback``."""
        if self._thread and self._thread.is_alive():
            log.warning("search already running, ignoring new request")
            return
        self._stop_event.clear()
        search_position = position.copy()

        def worker():
            best_move, score = self.pick_move(search_position, max_depth=depth, max_time=max_time)
            if callback:
                callback(best_move, score)

        self._thread = threading.Thread(target=worker, daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = 0.2) -> None:
        self._stop_event.set()
        if self._thread:
            self._thread.join(timeout=timeout)

    def wait(self, timeout: Optional[float] = None) -> None:
        if self._thread:
            self._thread.join(timeout=timeout)

    @property
    def is_searching(self) -> bool:
        return self._thread is not None and self._thread.is_alive()
