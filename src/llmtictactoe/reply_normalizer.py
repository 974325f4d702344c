"""
Agent-backed normalizer for free-form LLM replies to a cell index.

Flow:
1) Quick regex for a `"move": N` pair, then for a lone digit 0-8.
2) If not found and LLMTTT_USE_GUARD_AGENT is on, ask a tiny guard Agent (Agents SDK) to return the index or NONE.

Returns the index as a string ("0".."8"), or "" when nothing usable was found.
"""
from __future__ import annotations
import asyncio, logging, re
from agents import Agent, Runner, ModelSettings
from .config import SETTINGS

log = logging.getLogger("reply_normalizer")

USE_GUARD_AGENT = SETTINGS.use_guard_agent

INSTRUCTIONS = (
    "You receive a raw reply from a Tic-Tac-Toe player.\n"
    "Cells are numbered 0-8, left to right, top to bottom.\n"
    "Output ONLY the single digit of the cell the reply chooses. If no cell is chosen, output the single word NONE."
)

move_guard = Agent(
    name="CellGuard",
    instructions=INSTRUCTIONS,
    model=SETTINGS.guard_model,
    model_settings=ModelSettings(temperature=0.0),
)

MOVE_KEY_RE = re.compile(r"[\"']?move[\"']?\s*[:=]\s*[\"']?(-?\d+)", re.IGNORECASE)
DIGIT_RE = re.compile(r"(?<![\d.\-])([0-8])(?!\d|\.\d)")


async def _agent_suggest(raw_reply: str) -> str:
    user = f"RAW REPLY: {raw_reply}\nReturn only the cell digit or NONE:"
    result = await Runner.run(move_guard, user)
    return (result.final_output or "").strip()


def _quick_regex(raw: str) -> str | None:
    m = MOVE_KEY_RE.search(raw)
    if m:
        return m.group(1)
    digits = DIGIT_RE.findall(raw)
    # Several digits means the reply is discussing the board, not choosing.
    if len(digits) == 1:
        return digits[0]
    return None


async def normalize_with_agent(raw_reply: str) -> str:
    cand = _quick_regex(raw_reply or "")
    if cand is not None:
        return cand

    if not USE_GUARD_AGENT:
        return ""
    try:
        agent_out = await _agent_suggest(raw_reply)
    except Exception:
        log.exception("Guard agent failed")
        return ""
    token = (agent_out or "").split()[0].strip().strip(".").lower() if agent_out and agent_out.split() else ""
    if token and token != "none" and token.lstrip("-").isdigit():
        return token
    return ""


def normalize(raw_reply: str) -> str:
    """Blocking wrapper for callers outside an event loop (Flask handlers, CLI)."""
    return asyncio.run(normalize_with_agent(raw_reply))
