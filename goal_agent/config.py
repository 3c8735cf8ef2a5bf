"""
Server-side configuration resolved from environment variables.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Tuple

DEFAULT_MODEL = "gpt-3.5-turbo"
DEFAULT_HUGGING_FACE_MODEL = "gpt2"
DEFAULT_GEMINI_MODEL = "gemini-pro"
DEFAULT_REQUEST_TIMEOUT = 60.0

_TRUTHY = {"1", "true", "yes", "on"}


def parse_api_keys(raw: Optional[str]) -> Tuple[str, ...]:
    """Split a comma-separated credential list, dropping blank entries."""
    if not raw:
        return ()
    return tuple(key.strip() for key in raw.split(",") if key.strip())


def _env_flag(name: str) -> bool:
    return (os.getenv(name) or "").strip().lower() in _TRUTHY


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return float(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {value!r}") from exc


@dataclass(frozen=True)
class ServerConfig:
    """
    Immutable configuration shared by every goal session of the process.

    ``openai_api_keys`` is parsed once and never mutated, so concurrent
    sessions may draw fallback credentials from it without locking.
    """

    openai_api_keys: Tuple[str, ...] = ()
    serp_api_key: Optional[str] = None
    mock_mode: bool = False
    default_model: str = DEFAULT_MODEL
    default_hugging_face_model: str = DEFAULT_HUGGING_FACE_MODEL
    default_gemini_model: str = DEFAULT_GEMINI_MODEL
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT

    @property
    def search_enabled(self) -> bool:
        return bool(self.serp_api_key)

    @classmethod
    def from_env(cls) -> "ServerConfig":
        return cls(
            openai_api_keys=parse_api_keys(os.getenv("OPENAI_API_KEY")),
            serp_api_key=os.getenv("SERP_API_KEY") or None,
            mock_mode=_env_flag("GOAL_AGENT_MOCK_MODE"),
            default_model=os.getenv("DEFAULT_MODEL") or DEFAULT_MODEL,
            default_hugging_face_model=os.getenv("DEFAULT_HUGGING_FACE_MODEL") or DEFAULT_HUGGING_FACE_MODEL,
            default_gemini_model=os.getenv("DEFAULT_GEMINI_MODEL") or DEFAULT_GEMINI_MODEL,
            request_timeout=_env_float("GOAL_AGENT_REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT),
        )


@lru_cache(maxsize=1)
def get_server_config() -> ServerConfig:
    """Return the process-wide configuration, read from the environment once."""
    return ServerConfig.from_env()
