"""
Move parsing/validation helpers for LLM replies.

- parse_reply(): pull {"move", "explanation"} out of a raw reply (JSON, possibly
  fenced or wrapped in prose); falls back to the reply normalizer for free text.
- validate_move(): check a claimed index against the board (range, emptiness).
"""
from __future__ import annotations

import json
import re
from typing import Sequence, TypedDict

from .reply_normalizer import normalize
from .rules import BOARD_SIZE

JSON_OBJ_RE = re.compile(r"\{.*?\}", re.DOTALL)
INT_RE = re.compile(r"-?[0-9]+")


class ParsedReply(TypedDict, total=False):
    ok: bool
    move: int
    explanation: str
    reason: str
    source: str  # "json" | "normalizer"


class MoveCheck(TypedDict, total=False):
    ok: bool
    move: int
    reason: str


def _strip_code_fence(text: str) -> str:
    """Remove simple ``` fences if present."""
    text = text.strip()
    if text.startswith("```") and text.endswith("```"):
        inner = text.split("\n", 1)
        if len(inner) == 2:
            return inner[1].rsplit("\n", 1)[0].strip()
    return text


def _as_index(val):
    if isinstance(val, bool):
        return None
    if isinstance(val, int):
        return val
    if isinstance(val, float) and val.is_integer():
        return int(val)
    if isinstance(val, str) and INT_RE.fullmatch(val.strip()):
        return int(val.strip())
    return None


def _load_json_object(text: str):
    try:
        data = json.loads(text)
        if isinstance(data, dict):
            return data
    except ValueError:
        pass
    for m in JSON_OBJ_RE.finditer(text):
        try:
            data = json.loads(m.group(0))
        except ValueError:
            continue
        if isinstance(data, dict):
            return data
    return None


def parse_reply(raw_text: str) -> ParsedReply:
    """Parse the model's reply. Range/emptiness are not checked here."""
    text = _strip_code_fence(raw_text or "")
    if not text:
        return {"ok": False, "reason": "empty_reply"}

    data = _load_json_object(text)
    if data is not None and "move" in data:
        move = _as_index(data.get("move"))
        explanation = data.get("explanation")
        explanation = explanation.strip() if isinstance(explanation, str) else ""
        if move is None:
            return {"ok": False, "reason": "bad_move_value", "explanation": explanation}
        return {"ok": True, "move": move, "explanation": explanation, "source": "json"}

    token = normalize(text)
    move = _as_index(token)
    if move is None:
        return {"ok": False, "reason": "no_move_found"}
    return {"ok": True, "move": move, "explanation": "", "source": "normalizer"}


def validate_move(move, board: Sequence) -> MoveCheck:
    index = _as_index(move)
    if index is None:
        return {"ok": False, "reason": "bad_move_value"}
    if not 0 <= index < BOARD_SIZE:
        return {"ok": False, "move": index, "reason": "out_of_range"}
    if board[index] is not None:
        return {"ok": False, "move": index, "reason": "occupied"}
    return {"ok": True, "move": index}


__all__ = [
    "parse_reply",
    "validate_move",
    "ParsedReply",
    "MoveCheck",
]
