from typing import Optional


def format_info(depth: int, score: float, nodes: int, elapsed_ms: int, best_move: Optional[str]) -> str:
    """UCI progress line; the score is reported in centipawns."""
    cp = int(score * 100)
    pv = best_move if best_move else "(none)"
    return f"info depth {depth} score cp {cp} nodes {nodes} time {elapsed_ms} pv {pv}"


def print_info(depth: int, score: float, nodes: int, elapsed_ms: int, best_move: Optional[str]) -> None:
    print(format_info(depth, score, nodes, elapsed_ms, best_move), flush=True)
