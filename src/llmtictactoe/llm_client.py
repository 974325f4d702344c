"""
LLM client facade over an OpenAI-compatible chat completions endpoint (base URL configurable).

The rest of the code should not care which SDK is in use. This module talks to
the endpoint with `model` + `messages` and returns raw text responses.
"""
from __future__ import annotations
from functools import lru_cache
from typing import Optional, List, Dict
import logging
import random
import time

from openai import OpenAI

from .config import SETTINGS

log = logging.getLogger("llm_client")


@lru_cache(maxsize=1)
def _client() -> OpenAI:
    return OpenAI(api_key=SETTINGS.llm_api_key or None, base_url=SETTINGS.api_base or None)


# ------------------------- Chat wrappers -------------------------
def ask_for_move_conversation(messages: List[Dict[str, str]], model: Optional[str] = None) -> str:
    """Given a chat-style conversation (including system message), request the next move.

    Returns the stripped reply text, or "" when every attempt failed.
    """
    model = model or SETTINGS.model
    if not model:
        raise ValueError("Model is required; set LLMTTT_MODEL or pass it explicitly.")
    delay = 0.5
    timeout = SETTINGS.responses_timeout_s
    for attempt in range(SETTINGS.responses_retries + 1):
        try:
            rsp = _client().chat.completions.create(
                model=model,
                messages=messages,
                timeout=timeout,
            )
            text = _extract_text(rsp)
            if text:
                return text.strip()
            log.warning("Empty reply from %s (attempt %d)", model, attempt + 1)
        except Exception:
            if attempt >= SETTINGS.responses_retries:
                log.exception("Chat request failed after %d attempts", attempt + 1)
                break
            log.warning("Chat request failed (attempt %d); retrying", attempt + 1)
        if attempt < SETTINGS.responses_retries:
            sleep_s = delay * (2 ** attempt) * (0.8 + 0.4 * random.random())
            time.sleep(min(sleep_s, 10.0))
    return ""


def _extract_text(rsp) -> str:
    try:
        if hasattr(rsp, "choices") and rsp.choices:
            msg = rsp.choices[0].message
            content = getattr(msg, "content", None)
            if isinstance(content, str):
                return content
    except Exception:
        log.exception("Failed to extract text from response")
    return ""
