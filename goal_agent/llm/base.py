"""
Base types shared by every language-model backend.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional


class LLMError(RuntimeError):
    """Raised when an LLM request fails."""


class ProviderAuthError(LLMError):
    """Raised when the backend rejects (or never receives) a credential."""


class ProviderRequestError(LLMError):
    """Raised on transport failures, rate limits and malformed responses."""


class ProviderKind(str, Enum):
    """Backend families a model handle can target."""

    OPENAI = "openai"
    HUGGING_FACE = "huggingface"
    GEMINI = "gemini"


@dataclass
class LLMResponse:
    content: str
    finish_reason: Optional[str] = None
    usage: Optional[Dict[str, Any]] = None
    raw: Optional[Any] = None


@dataclass(frozen=True)
class ModelHandle:
    """
    Provider-tagged model configuration that can turn a prompt into a completion.

    ``options`` holds the provider's own parameter names (``max_tokens`` for
    OpenAI and Hugging Face, ``max_output_tokens`` for Gemini), so the exact
    request shape can be inspected without issuing a request.
    """

    kind: ProviderKind
    options: Mapping[str, Any] = field(default_factory=dict)
    base_path: Optional[str] = None
    timeout: float = 60.0

    @property
    def model(self) -> str:
        return str(self.options.get("model") or self.options.get("model_name") or "")

    def complete(self, prompt: str) -> str:
        return self.generate(prompt).content

    def generate(self, prompt: str) -> LLMResponse:
        # Imported lazily: the transports import this module.
        from .providers import get_transport

        return get_transport(self.kind)(self, prompt)
