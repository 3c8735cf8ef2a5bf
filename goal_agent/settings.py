"""
User-facing model settings and their validation.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import Optional

from .config import ServerConfig, get_server_config
from .llm.base import ProviderKind

DEFAULT_TEMPERATURE = 0.9
DEFAULT_MAX_TOKENS = 400
DEFAULT_MAX_LOOPS = 10
DEFAULT_LANGUAGE = "English"

TEMPERATURE_RANGE = (0.0, 1.0)
MAX_TOKENS_RANGE = (50, 8000)
MAX_LOOPS_RANGE = (1, 25)

_OPENAI_KEY_PATTERN = re.compile(r"^(sk-[A-Za-z0-9_-]{20,}|[a-fA-F0-9]{32})$")
_ENDPOINT_PATTERN = re.compile(r"^(https?://)?[\w.-]+\.[a-zA-Z]{2,}(:\d+)?(/\S*)?$")


class InvalidSettingsError(ValueError):
    """Raised when settings are rejected before a session starts."""


class InvalidUserCredentialError(InvalidSettingsError):
    """The supplied API key does not look like a key for the selected provider."""


class InvalidEndpointError(InvalidSettingsError):
    """The custom endpoint is not a usable URL."""


class InvalidSettingValueError(InvalidSettingsError):
    """A numeric setting falls outside its accepted range."""


@dataclass(frozen=True)
class ModelSettings:
    """
    Per-session model configuration.

    Every field is optional; ``None`` means "use the default". Numeric defaults
    are applied only for ``None`` so that explicit zeros are honoured.
    """

    hugging_face_model_name: Optional[str] = None
    gemini_model_name: Optional[str] = None
    custom_api_key: Optional[str] = None
    custom_end_point: Optional[str] = None
    custom_temperature: Optional[float] = None
    custom_max_tokens: Optional[int] = None
    custom_max_loops: Optional[int] = None
    custom_model_name: Optional[str] = None
    custom_language: Optional[str] = None

    @property
    def provider(self) -> ProviderKind:
        if self.hugging_face_model_name:
            return ProviderKind.HUGGING_FACE
        if self.gemini_model_name:
            return ProviderKind.GEMINI
        return ProviderKind.OPENAI

    def resolved_temperature(self) -> float:
        return DEFAULT_TEMPERATURE if self.custom_temperature is None else self.custom_temperature

    def resolved_max_tokens(self) -> int:
        return DEFAULT_MAX_TOKENS if self.custom_max_tokens is None else self.custom_max_tokens

    def resolved_max_loops(self) -> int:
        return DEFAULT_MAX_LOOPS if self.custom_max_loops is None else self.custom_max_loops

    def resolved_language(self) -> str:
        return self.custom_language or DEFAULT_LANGUAGE

    @classmethod
    def for_provider(
        cls,
        kind: ProviderKind,
        *,
        config: Optional[ServerConfig] = None,
        **fields,
    ) -> "ModelSettings":
        """
        Build settings that target exactly one provider.

        Model names belonging to the other providers are cleared and the
        provider's default model is filled in when none was given.
        """
        config = config or get_server_config()
        settings = cls(**fields)
        if kind is ProviderKind.HUGGING_FACE:
            return replace(
                settings,
                custom_model_name=None,
                gemini_model_name=None,
                hugging_face_model_name=settings.hugging_face_model_name or config.default_hugging_face_model,
            )
        if kind is ProviderKind.GEMINI:
            return replace(
                settings,
                custom_model_name=None,
                hugging_face_model_name=None,
                gemini_model_name=settings.gemini_model_name or config.default_gemini_model,
            )
        return replace(
            settings,
            hugging_face_model_name=None,
            gemini_model_name=None,
            custom_model_name=settings.custom_model_name or config.default_model,
        )


def _check_range(name: str, value, bounds) -> None:
    low, high = bounds
    if value is None:
        return
    if not low <= value <= high:
        raise InvalidSettingValueError(f"{name} must be between {low} and {high}, got {value}.")


def validate_settings(settings: ModelSettings) -> ModelSettings:
    """
    Reject settings that cannot produce a working session.

    Returns the settings unchanged so the call can be used inline.
    """
    if settings.provider is ProviderKind.OPENAI and settings.custom_api_key:
        if not _OPENAI_KEY_PATTERN.match(settings.custom_api_key.strip()):
            raise InvalidUserCredentialError(
                "OpenAI API key is invalid, please make sure billing is set up for your OpenAI account."
            )
    if settings.custom_end_point and not _ENDPOINT_PATTERN.match(settings.custom_end_point.strip()):
        raise InvalidEndpointError(
            f"Endpoint URL {settings.custom_end_point!r} is invalid. Please provide a correct URL."
        )
    _check_range("custom_temperature", settings.custom_temperature, TEMPERATURE_RANGE)
    _check_range("custom_max_tokens", settings.custom_max_tokens, MAX_TOKENS_RANGE)
    _check_range("custom_max_loops", settings.custom_max_loops, MAX_LOOPS_RANGE)
    return settings
