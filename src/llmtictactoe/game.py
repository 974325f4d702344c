"""
Single-game runner and config.

- GameConfig: human mark, UI delay before the opponent move, console logging.
- GameRunner: turn coordinator for one human-vs-LLM game.
  - human_move() places the human's mark and hands the turn to the opponent.
  - opponent_turn() asks the opponent for a move, validates it against the board and
    falls back to the first empty cell when the reply is invalid or the call fails.
  - restart() returns to the canonical empty board.
  - Exposes export_state() for the web layer and status_message() for display.

Phases: human_turn -> opponent_pending -> opponent_resolving -> human_turn, with
terminal entered after any placement that ends the game.
"""
from __future__ import annotations
import logging, threading, time
from dataclasses import dataclass, field
from typing import Literal, Optional

from .config import SETTINGS
from .move_validator import validate_move
from .referee import Referee
from .rules import MARKS, other_mark

Phase = Literal["human_turn", "opponent_pending", "opponent_resolving", "terminal"]

INVALID_MOVE_EXPLANATION = "The AI made an invalid move, so I picked a valid one instead."
ERROR_EXPLANATION = "The AI encountered an error, so I picked a valid move instead."
ERROR_NOTICE = {
    "title": "AI Error",
    "description": "The AI failed to make a move. You can try again or restart.",
}
INVALID_MOVE_NOTICE = {
    "title": "AI Error",
    "description": "The AI picked a cell it cannot play, so the first open cell was used instead.",
}


class MoveRejected(ValueError):
    """A human (or out-of-turn) move that was not applied."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class TurnInProgress(RuntimeError):
    """An opponent move is already being resolved for this game."""


@dataclass
class GameConfig:
    human_mark: str = "X"
    ai_move_delay_ms: int = field(default_factory=lambda: SETTINGS.ai_move_delay_ms)
    # Console logging of moves as they happen
    game_log: bool = False


class GameRunner:
    def __init__(self, opponent, cfg: GameConfig | None = None):
        self.log = logging.getLogger("GameRunner")
        self.opp = opponent
        self.cfg = cfg or GameConfig()
        if self.cfg.human_mark not in MARKS:
            raise ValueError(f"human_mark must be one of {MARKS}, got {self.cfg.human_mark!r}")
        self.human_mark = self.cfg.human_mark
        self.ai_mark = other_mark(self.human_mark)
        self.ref = Referee(first_mark=self.human_mark)
        self._lock = threading.Lock()
        self._generation = 0
        self._reset_state()

    def _reset_state(self):
        self.phase: Phase = "human_turn"
        self.turn = "human"
        self.records: list[dict] = []  # one dict per placement
        self.explanation = ""
        self.notice: Optional[dict] = None

    # ---------------- Human Turn -----------------
    def human_move(self, index) -> dict:
        """Place the human's mark at index. Raises MoveRejected if the move is not allowed."""
        with self._lock:
            if self.phase == "terminal":
                raise MoveRejected("game_over")
            if self.phase != "human_turn":
                raise MoveRejected("not_human_turn")
            check = validate_move(index, self.ref.board)
            if not check.get("ok"):
                raise MoveRejected(check["reason"])
            move = check["move"]
            self.ref.apply(move, self.human_mark)
            self.records.append({"actor": "human", "move": move, "mark": self.human_mark})
            self.explanation = ""
            self.notice = None
            self._log_ply("HUMAN", move)
            self._after_placement(next_turn="opponent")
            return self._export_state_locked()

    # ---------------- Opponent Turn -----------------
    def opponent_turn(self, wait: bool = False) -> dict:
        """Resolve one opponent move. With wait=True, sleep the UI delay first.

        Raises TurnInProgress if another call is resolving, MoveRejected if it is not the opponent's turn.
        """
        with self._lock:
            if self.phase == "opponent_resolving":
                raise TurnInProgress("opponent move already in progress")
            if self.phase != "opponent_pending":
                raise MoveRejected("game_over" if self.phase == "terminal" else "not_opponent_turn")
            self.phase = "opponent_resolving"
            generation = self._generation
            board = self.ref.snapshot()

        if wait and self.cfg.ai_move_delay_ms > 0:
            time.sleep(self.cfg.ai_move_delay_ms / 1000)

        choice = None
        error: Optional[Exception] = None
        try:
            choice = self.opp.choose(board, self.human_mark, self.ai_mark)
        except Exception as exc:  # noqa: BLE001
            self.log.exception("Opponent move failed")
            error = exc

        with self._lock:
            if generation != self._generation:
                # Restarted while the opponent was thinking; the reply belongs to a discarded board.
                self.log.info("Discarding opponent reply for a restarted game")
                return self._export_state_locked()
            self._resolve_opponent_move(choice, error)
            return self._export_state_locked()

    def _resolve_opponent_move(self, choice, error: Optional[Exception]):
        record = {"actor": "opponent", "mark": self.ai_mark, "fallback": False}
        if choice is not None:
            record["raw"] = choice.raw
            record["claimed_move"] = choice.move
            record["meta"] = choice.meta
            check = validate_move(choice.move, self.ref.board)
            if check.get("ok"):
                move = check["move"]
                self.explanation = choice.explanation
                self.notice = None
            else:
                self.log.warning("Opponent claimed invalid cell %r (%s); falling back", choice.move, check.get("reason"))
                move = self.ref.first_empty()
                record["fallback"] = True
                record["fallback_reason"] = check.get("reason")
                self.explanation = INVALID_MOVE_EXPLANATION
                self.notice = dict(INVALID_MOVE_NOTICE)
        else:
            move = self.ref.first_empty()
            record["fallback"] = True
            record["fallback_reason"] = f"error:{error}"
            self.explanation = ERROR_EXPLANATION
            self.notice = dict(ERROR_NOTICE)

        if move is None or not self.ref.apply(move, self.ai_mark):
            # Only reachable if the board was already full; nothing to place.
            self.log.error("No cell available for opponent move")
            self._after_placement(next_turn="human")
            return
        record["move"] = move
        record["explanation"] = self.explanation
        self.records.append(record)
        self._log_ply("AI", move, raw=record.get("raw"), fallback=record["fallback"])
        self._after_placement(next_turn="human")

    # ---------------- Transitions -----------------
    def _after_placement(self, next_turn: str):
        self.turn = next_turn
        status = self.ref.status()
        if status.terminal:
            self.phase = "terminal"
            self.log.info("Game finished outcome=%s line=%s plies=%d", status.outcome, status.line, len(self.records))
        elif next_turn == "opponent":
            self.phase = "opponent_pending"
        else:
            self.phase = "human_turn"

    def restart(self) -> dict:
        with self._lock:
            self._generation += 1
            self.ref.reset()
            self._reset_state()
            return self._export_state_locked()

    def _log_ply(self, actor: str, move: int, raw: Optional[str] = None, fallback: bool = False):
        ply = len(self.records)
        if self.cfg.game_log:
            raw_short = (raw or "").replace("\n", " ")
            if len(raw_short) > 140:
                raw_short = raw_short[:140] + "…"
            self.log.info("[ply %d] %s: cell=%d fallback=%s raw='%s'", ply, actor, move, fallback, raw_short)
        else:
            self.log.debug("Ply %d %s cell %d fallback=%s", ply, actor, move, fallback)

    # ---------------- Export -----------------
    def status_message(self) -> str:
        status = self.ref.status()
        if status.outcome == "draw":
            return "It's a Draw!"
        if status.winner:
            return "Congratulations, You Win!" if status.winner == self.human_mark else "The AI Wins!"
        if self.phase in ("opponent_pending", "opponent_resolving"):
            return "AI is thinking..."
        return "Your Turn"

    def export_state(self) -> dict:
        with self._lock:
            return self._export_state_locked()

    def _export_state_locked(self) -> dict:
        status = self.ref.status()
        data = {
            "board": self.ref.snapshot(),
            "human_mark": self.human_mark,
            "ai_mark": self.ai_mark,
            "phase": self.phase,
            "turn": self.turn,
            "status_message": self.status_message(),
            "explanation": self.explanation,
            "notice": self.notice,
            "moves": [
                {k: v for k, v in rec.items() if k != "meta"}
                for rec in self.records
            ],
            "fallbacks": sum(1 for rec in self.records if rec.get("fallback")),
            "ai_move_delay_ms": self.cfg.ai_move_delay_ms,
        }
        data.update(status.to_dict())
        return data
