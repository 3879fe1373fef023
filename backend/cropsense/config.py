"""Environment-driven configuration.

Values are read from the process environment (optionally populated from a
``.env`` file) with safe defaults. Malformed numbers fall back to the default
instead of crashing the service at import time.
"""

from __future__ import annotations

import logging
import os

from dotenv import load_dotenv

load_dotenv()

_GEMINI_OPENAI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"


def _env_float(key: str, default: float) -> float:
    try:
        return float(os.getenv(key, str(default)))
    except ValueError:
        return default


def _env_int(key: str, default: int) -> int:
    try:
        return int(os.getenv(key, str(default)))
    except ValueError:
        return default


def _env_bool(key: str, default: bool = False) -> bool:
    return os.getenv(key, "true" if default else "false").strip().lower() == "true"


def get_gemini_key() -> str:
    """Read GEMINI_API_KEY from the environment. Empty string means mock mode."""
    return os.getenv("GEMINI_API_KEY", "").strip()


def get_gemini_model() -> str:
    return os.getenv("GEMINI_MODEL", "gemini-2.5-flash").strip()


def get_gemini_base_url() -> str:
    return os.getenv("GEMINI_BASE_URL", _GEMINI_OPENAI_BASE_URL).strip()


def get_ai_timeout() -> float:
    """Hard wall-clock bound for one AI forecast (seconds)."""
    return _env_float("GEMINI_TIMEOUT_SECONDS", 15.0)


def get_thinking_budget() -> int:
    return _env_int("GEMINI_THINKING_BUDGET", 1000)


def get_log_level() -> str:
    """LOG_LEVEL name; unknown names fall back to INFO."""
    level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        return "INFO"
    return level


def is_debug() -> bool:
    return _env_bool("DEBUG")


def get_cors_origins() -> list[str]:
    raw = os.getenv("CORS_ORIGINS", "http://localhost:3000")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]
