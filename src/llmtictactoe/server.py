"""
Minimal Flask app that wires the game runner into the browser UI.

Endpoints:
- GET  /                                -> the game page (webui/index.html)
- GET  /health                          -> liveness probe
- POST /api/games                       -> start a human vs AI game (in memory only)
- GET  /api/games/<id>                  -> current game state
- POST /api/games/<id>/move             -> submit a human move {"cell": 0-8}
- POST /api/games/<id>/opponent-move    -> resolve the AI reply (the page calls this after its UI delay)
- POST /api/games/<id>/restart          -> reset to the empty board

Games live in process memory and are dropped after LLMTTT_SESSION_TTL_S of inactivity.
"""
from __future__ import annotations

import argparse
import logging
import threading
import time
import uuid
from pathlib import Path
from typing import Dict, Optional

from flask import Flask, jsonify, request, send_from_directory

from .config import SETTINGS
from .game import GameConfig, GameRunner, MoveRejected, TurnInProgress
from .llm_opponent import LLMOpponent
from .rules import MARKS

WEBUI_DIR = Path(__file__).resolve().parent / "webui"

app = Flask(__name__, static_folder=str(WEBUI_DIR), static_url_path="/static")
games_lock = threading.Lock()

GAMES: Dict[str, dict] = {}


def _cleanup_stale_games(max_age_s: Optional[int] = None):
    max_age_s = SETTINGS.session_ttl_s if max_age_s is None else max_age_s
    now = time.time()
    with games_lock:
        expired = [gid for gid, sess in GAMES.items() if now - sess.get("updated_at", now) > max_age_s]
        for gid in expired:
            GAMES.pop(gid, None)
    if expired:
        logging.info("Dropped %d stale game(s)", len(expired))


def _get_session(game_id: str) -> Optional[dict]:
    _cleanup_stale_games()
    with games_lock:
        session = GAMES.get(game_id)
    if session:
        session["updated_at"] = time.time()
    return session


def _serialize(session: dict, state: Optional[dict] = None) -> dict:
    data = dict(state or session["runner"].export_state())
    data["game_id"] = session["id"]
    data["model"] = session["model"]
    data["opponent"] = session["runner"].opp.label()
    return data


def _rejection(exc: MoveRejected):
    # Wrong-phase requests conflict with game state; bad cells are bad input.
    status = 409 if exc.reason in ("game_over", "not_human_turn", "not_opponent_turn") else 400
    return jsonify({"error": exc.reason}), status


@app.route("/")
def index():
    return send_from_directory(str(WEBUI_DIR), "index.html")


@app.route("/health")
def health():
    return jsonify({"ok": True})


@app.route("/api/games", methods=["POST"])
def create_game():
    """Start a human vs AI game. The human always moves first."""
    _cleanup_stale_games()
    data = request.get_json(silent=True) or {}
    human_mark = str(data.get("human_mark") or "X").upper()
    if human_mark not in MARKS:
        return jsonify({"error": "human_mark must be X or O"}), 400
    model = data.get("model") or SETTINGS.model
    runner = GameRunner(opponent=LLMOpponent(model=model), cfg=GameConfig(human_mark=human_mark))
    game_id = f"ttt_{int(time.time())}_{uuid.uuid4().hex[:6]}"
    session = {
        "id": game_id,
        "runner": runner,
        "model": model,
        "created_at": time.time(),
        "updated_at": time.time(),
    }
    with games_lock:
        GAMES[game_id] = session
    logging.info("Started game %s opponent=%s human=%s", game_id, runner.opp.label(), human_mark)
    return jsonify(_serialize(session)), 201


@app.route("/api/games/<game_id>", methods=["GET"])
def get_game(game_id: str):
    session = _get_session(game_id)
    if not session:
        return jsonify({"error": "not_found"}), 404
    return jsonify(_serialize(session))


@app.route("/api/games/<game_id>/move", methods=["POST"])
def human_move(game_id: str):
    session = _get_session(game_id)
    if not session:
        return jsonify({"error": "not_found"}), 404
    data = request.get_json(silent=True) or {}
    if "cell" not in data:
        return jsonify({"error": "cell is required"}), 400
    try:
        state = session["runner"].human_move(data["cell"])
    except MoveRejected as exc:
        return _rejection(exc)
    return jsonify(_serialize(session, state))


@app.route("/api/games/<game_id>/opponent-move", methods=["POST"])
def opponent_move(game_id: str):
    session = _get_session(game_id)
    if not session:
        return jsonify({"error": "not_found"}), 404
    try:
        state = session["runner"].opponent_turn()
    except TurnInProgress:
        return jsonify({"error": "opponent_move_in_progress"}), 409
    except MoveRejected as exc:
        return _rejection(exc)
    return jsonify(_serialize(session, state))


@app.route("/api/games/<game_id>/restart", methods=["POST"])
def restart_game(game_id: str):
    session = _get_session(game_id)
    if not session:
        return jsonify({"error": "not_found"}), 404
    return jsonify(_serialize(session, session["runner"].restart()))


@app.after_request
def add_no_cache_headers(response):
    # Prevent caching so the UI always sees the freshest board
    response.headers["Cache-Control"] = "no-store, max-age=0"
    return response


def main():
    parser = argparse.ArgumentParser(description="LLM Tic-Tac-Toe web server")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--log-level", default="INFO", help="Python logging level (e.g., INFO, DEBUG)")
    args = parser.parse_args()
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if not (WEBUI_DIR / "index.html").exists():
        logging.warning("Web assets not found under %s", WEBUI_DIR)
    # threaded: one request may sit in a model call while others poll state
    app.run(host=args.host, port=args.port, debug=False, threaded=True)


if __name__ == "__main__":
    main()
