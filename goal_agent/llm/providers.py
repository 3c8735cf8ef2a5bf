"""
Provider registry and the model factory that maps settings onto a backend.
"""

from __future__ import annotations

import logging
import os
import random
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional, Sequence

from ..config import ServerConfig, get_server_config
from .base import LLMResponse, ModelHandle, ProviderAuthError, ProviderKind

if TYPE_CHECKING:
    from ..settings import ModelSettings


LOGGER = logging.getLogger(__name__)

Transport = Callable[[ModelHandle, str], LLMResponse]


@dataclass(frozen=True)
class ProviderSpec:
    """
    Static facts about one backend family: where it lives and where its
    ambient credential comes from.
    """

    kind: ProviderKind
    api_key_env: Optional[str]
    default_base_url: str
    base_url_env: Optional[str] = None

    def resolve_base_url(self, explicit: Optional[str] = None) -> str:
        env_value = os.getenv(self.base_url_env) if self.base_url_env else None
        return (explicit or env_value or self.default_base_url).rstrip("/")

    def resolve_api_key(self, explicit: Optional[str] = None) -> str:
        if explicit:
            return explicit
        api_key = os.getenv(self.api_key_env) if self.api_key_env else None
        if not api_key:
            raise ProviderAuthError(
                f"API key is required for {self.kind.value}. "
                f"Provide one in the settings or set the {self.api_key_env} environment variable."
            )
        return api_key


_PROVIDER_REGISTRY: Dict[ProviderKind, ProviderSpec] = {
    ProviderKind.OPENAI: ProviderSpec(
        kind=ProviderKind.OPENAI,
        api_key_env="OPENAI_API_KEY",
        default_base_url="https://api.openai.com/v1",
        base_url_env="OPENAI_API_BASE_URL",
    ),
    ProviderKind.HUGGING_FACE: ProviderSpec(
        kind=ProviderKind.HUGGING_FACE,
        api_key_env="HUGGINGFACEHUB_API_KEY",
        default_base_url="https://api-inference.huggingface.co/models",
    ),
    ProviderKind.GEMINI: ProviderSpec(
        kind=ProviderKind.GEMINI,
        api_key_env="GOOGLE_API_KEY",
        default_base_url="https://generativelanguage.googleapis.com/v1beta",
        base_url_env="GEMINI_BASE_URL",
    ),
}

_TRANSPORTS: Dict[ProviderKind, Transport] = {}


def get_provider_spec(kind: ProviderKind) -> ProviderSpec:
    return _PROVIDER_REGISTRY[kind]


def get_transport(kind: ProviderKind) -> Transport:
    if not _TRANSPORTS:
        _load_default_transports()
    try:
        return _TRANSPORTS[kind]
    except KeyError as exc:
        raise ValueError(f"No transport registered for provider '{kind.value}'.") from exc


def _load_default_transports() -> None:
    from . import gemini, huggingface, openai

    _TRANSPORTS[ProviderKind.OPENAI] = openai.complete
    _TRANSPORTS[ProviderKind.HUGGING_FACE] = huggingface.complete
    _TRANSPORTS[ProviderKind.GEMINI] = gemini.complete


def choose_server_key(keys: Sequence[str], rng: Optional[random.Random] = None) -> str:
    """
    Pick one server-side credential uniformly at random.

    Called on every model construction so load spreads across the pool.
    Returns an empty string when no server keys are configured.
    """
    if not keys:
        return ""
    chooser = rng or random
    return chooser.choice(list(keys))


def create_model(
    settings: "ModelSettings",
    *,
    config: Optional[ServerConfig] = None,
    rng: Optional[random.Random] = None,
) -> ModelHandle:
    """
    Build a model handle for ``settings``.

    Hugging Face wins over Gemini, which wins over the OpenAI-compatible
    default, whenever more than one model identifier is set.
    """

    config = config or get_server_config()
    temperature = settings.resolved_temperature()
    max_tokens = settings.resolved_max_tokens()
    custom_api_key = settings.custom_api_key
    custom_end_point = settings.custom_end_point

    if settings.hugging_face_model_name:
        options: Dict[str, Any] = {
            "model": settings.hugging_face_model_name,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if custom_api_key:
            options["api_key"] = custom_api_key
        if custom_end_point:
            options["endpoint"] = custom_end_point
        handle = ModelHandle(ProviderKind.HUGGING_FACE, options, timeout=config.request_timeout)
    elif settings.gemini_model_name:
        # Credentials come from the environment on this path, never from settings.
        options = {
            "model": settings.gemini_model_name,
            "temperature": temperature,
            "max_output_tokens": max_tokens,
        }
        handle = ModelHandle(ProviderKind.GEMINI, options, timeout=config.request_timeout)
    else:
        options = {
            "api_key": custom_api_key or choose_server_key(config.openai_api_keys, rng),
            "temperature": temperature,
            "model_name": settings.custom_model_name or config.default_model,
            "max_tokens": max_tokens,
        }
        handle = ModelHandle(
            ProviderKind.OPENAI,
            options,
            base_path=custom_end_point or None,
            timeout=config.request_timeout,
        )

    LOGGER.debug("Created %s model handle for model %s", handle.kind.value, handle.model)
    return handle
