"""
Convenience exports for the model-provider layer.
"""

from .base import (
    LLMError,
    LLMResponse,
    ModelHandle,
    ProviderAuthError,
    ProviderKind,
    ProviderRequestError,
)
from .providers import (
    ProviderSpec,
    choose_server_key,
    create_model,
    get_provider_spec,
)

__all__ = [
    "LLMError",
    "LLMResponse",
    "ModelHandle",
    "ProviderAuthError",
    "ProviderKind",
    "ProviderRequestError",
    "ProviderSpec",
    "choose_server_key",
    "create_model",
    "get_provider_spec",
]
