"""
Configuration and environment loading for LLM Tic-Tac-Toe.

- Loads settings.yml (YAML) from repo root if present; falls back to environment variables.
- Exposes SETTINGS with keys used across the project (API key, model, timeouts, UI delay).
"""
from dataclasses import dataclass
import logging
import os
from typing import Any, Callable

import yaml
from dotenv import load_dotenv

load_dotenv()

log = logging.getLogger("config")


def _repo_root() -> str:
    # this file: src/llmtictactoe/config.py → repo root is two levels up
    return os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))


def _load_yaml(path: str) -> dict:
    if not os.path.isfile(path):
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError):
        log.exception("Failed to read %s; using environment only", path)
        return {}
    return data if isinstance(data, dict) else {}


_cfg = _load_yaml(os.environ.get("LLMTTT_SETTINGS_FILE") or os.path.join(_repo_root(), "settings.yml"))


def _as_bool(val: Any) -> bool:
    if isinstance(val, bool):
        return val
    return str(val).strip().lower() in {"1", "true", "yes", "on"}


def _get(name: str, default: Any, cast: Callable[[Any], Any] | None = None) -> Any:
    if name in _cfg:
        val = _cfg[name]
        return cast(val) if cast else val
    env = os.environ.get(name)
    if env is not None:
        return cast(env) if cast else env
    return default


@dataclass(frozen=True)
class Settings:
    # Auth / endpoint (OpenAI-compatible chat completions)
    llm_api_key: str
    api_base: str
    model: str

    # Tuning knobs
    responses_timeout_s: float
    responses_retries: int
    ai_move_delay_ms: int
    use_guard_agent: bool
    guard_model: str
    session_ttl_s: int


SETTINGS = Settings(
    llm_api_key=_get("LLMTTT_LLM_API_KEY", _get("OPENAI_API_KEY", "")),
    api_base=_get("LLMTTT_LLM_BASE_URL", ""),
    model=_get("LLMTTT_MODEL", "gpt-4o-mini"),
    responses_timeout_s=float(_get("LLMTTT_RESPONSES_TIMEOUT_S", 60.0, cast=float)),
    responses_retries=int(_get("LLMTTT_RESPONSES_RETRIES", 2, cast=int)),
    ai_move_delay_ms=int(_get("LLMTTT_AI_MOVE_DELAY_MS", 750, cast=int)),
    use_guard_agent=_get("LLMTTT_USE_GUARD_AGENT", False, cast=_as_bool),
    guard_model=_get("LLMTTT_GUARD_MODEL", "gpt-4o-mini"),
    session_ttl_s=int(_get("LLMTTT_SESSION_TTL_S", 3600, cast=int)),
)
