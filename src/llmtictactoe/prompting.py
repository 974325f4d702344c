"""
Prompt builders and config for LLM move requests using a modular template.

Callers supply system instructions and a template string with placeholders
that are substituted per turn.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Sequence

DEFAULT_SYSTEM_INSTRUCTIONS = "You are an expert Tic-Tac-Toe AI. Always think a step ahead to win."
DEFAULT_TEMPLATE = """Given the current board state, your mark, and your opponent's mark, determine the best move to make.

Current board:
{BOARD}

Your mark: {AI_MARK}
Opponent's mark: {PLAYER_MARK}

Provide the index (0-8) of your move and briefly explain your reasoning. If there is no immediate winning move, choose a move that blocks the opponent from winning, or makes a smart strategic move based on the current board state. Prioritize winning over blocking, and blocking over random moves.
If there are no strategic plays available, make a random move.
Always respond using JSON: {"move": <index 0-8>, "explanation": "<one short sentence>"}"""


@dataclass
class PromptConfig:
    """Configuration for shaping move prompts using a custom template."""

    system_instructions: str = DEFAULT_SYSTEM_INSTRUCTIONS
    template: str = DEFAULT_TEMPLATE


def render_custom_prompt(template: str, values: Dict[str, str]) -> str:
    """Replace known placeholders in the template. Unknown tokens are left intact."""
    rendered = template or ""
    for key, val in values.items():
        rendered = rendered.replace(f"{{{key}}}", val)
    return rendered


def board_listing(board: Sequence) -> str:
    """One line per cell, e.g. '0: X' / '1: ' for an empty cell."""
    return "\n".join(f"{idx}: {cell or ''}".rstrip() for idx, cell in enumerate(board))


def build_prompt_messages(board: Sequence, human_mark: str, ai_mark: str, prompt_cfg: PromptConfig) -> List[Dict[str, str]]:
    values = {
        "BOARD": board_listing(board),
        "AI_MARK": ai_mark,
        "PLAYER_MARK": human_mark,
    }
    return [
        {"role": "system", "content": prompt_cfg.system_instructions},
        {"role": "user", "content": render_custom_prompt(prompt_cfg.template, values)},
    ]
