"""LLM-backed opponent: prompts the model with the board and returns its claimed move."""
from __future__ import annotations
import logging
import time
from dataclasses import dataclass, field
from typing import Optional, Sequence

from .llm_client import ask_for_move_conversation
from .move_validator import parse_reply
from .prompting import PromptConfig, build_prompt_messages

log = logging.getLogger("llm_opponent")


class OracleError(RuntimeError):
    """The model call failed or produced nothing that names a cell."""


@dataclass
class MoveChoice:
    move: int
    explanation: str
    raw: str
    meta: dict = field(default_factory=dict)


@dataclass
class LLMOpponent:
    model: Optional[str] = None
    prompt_cfg: Optional[PromptConfig] = None
    name: Optional[str] = None

    def label(self) -> str:
        return self.name or self.model or "LLM"

    def choose(self, board: Sequence, human_mark: str, ai_mark: str) -> MoveChoice:
        """Ask the model for a move. The index is NOT checked against the board here.

        Raises OracleError when the transport yields nothing or the reply names no cell.
        """
        cfg = self.prompt_cfg or PromptConfig()
        messages = build_prompt_messages(board, human_mark=human_mark, ai_mark=ai_mark, prompt_cfg=cfg)
        t0 = time.time()
        raw = ask_for_move_conversation(messages, model=self.model)
        latency_ms = int((time.time() - t0) * 1000)
        if not raw:
            raise OracleError("empty reply from model")
        parsed = parse_reply(raw)
        if not parsed.get("ok"):
            log.debug("Unparseable reply (%s): %r", parsed.get("reason"), raw)
            raise OracleError(f"unparseable reply: {parsed.get('reason')}")
        meta = {
            "model": self.model,
            "prompt": messages[-1]["content"],
            "system": messages[0]["content"],
            "latency_ms": latency_ms,
            "parse_source": parsed.get("source"),
        }
        return MoveChoice(move=parsed["move"], explanation=parsed.get("explanation", ""), raw=raw, meta=meta)

    def close(self):
        # Nothing to release for API-based opponents
        return
