"""FastAPI REST interface for the engine."""

import threading
from typing import Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from tempo.config import CONFIG
from tempo.core.evaluator import Evaluator
from tempo.core.position import Position
from tempo.core.search import SearchEngine

app = FastAPI(title=CONFIG.ui.engine_name, version="0.1.0")

# Shared engine instance and position.
engine = SearchEngine(Evaluator(), depth=CONFIG.search.depth, info_callback=None)
state = {"position": Position.startpos()}
_position_lock = threading.Lock()


class FenRequest(BaseModel):
    fen: str


class MoveRequest(BaseModel):
    move: str  # UCI format e.g. "e2e4"


class SearchRequest(BaseModel):
    depth: Optional[int] = None


@app.get("/board")
def get_board():
    with _position_lock:
        position = state["position"]
        return {
            "fen": position.fen(),
            "turn": "white" if position.side_to_move else "black",
            "move_count": position.move_count,
            "legal_moves": position.legal_moves(),
            "in_check": position.is_check(),
        }


@app.post("/position")
def set_position(req: FenRequest):
    with _position_lock:
        # malformed FEN falls back to the start position
        state["position"] = Position.from_fen(req.fen)
        return {"fen": state["position"].fen()}


@app.post("/move")
def make_move(req: MoveRequest):
    with _position_lock:
        if not state["position"].make_move(req.move):
            raise HTTPException(status_code=400, detail=f"Illegal or malformed move: {req.move}")
        return {"fen": state["position"].fen(), "move": req.move}


@app.post("/search")
def search_move(req: SearchRequest = SearchRequest()):
    with _position_lock:
        search_position = state["position"].copy()
    depth = req.depth or CONFIG.search.depth

    best, score = engine.search_best_move(search_position, depth=depth)
    return {
        "best_move": best,
        "score": score,
        "fen": search_position.fen(),
    }


@app.post("/reset")
def reset_board():
    with _position_lock:
        state["position"] = Position.startpos()
        return {"fen": state["position"].fen()}
