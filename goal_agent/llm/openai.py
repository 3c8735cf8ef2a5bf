"""
Transport for OpenAI-compatible chat completion APIs.
"""

from __future__ import annotations

from typing import Any, Dict

from ..core.primitives.messages import coerce_messages, user_message
from .base import LLMResponse, ModelHandle, ProviderAuthError, ProviderKind, ProviderRequestError
from .http_client import post_json


def build_payload(handle: ModelHandle, prompt: str) -> Dict[str, Any]:
    options = handle.options
    payload: Dict[str, Any] = {
        "model": options["model_name"],
        "temperature": options["temperature"],
        "messages": coerce_messages([user_message(prompt)]),
    }
    if options.get("max_tokens") is not None:
        payload["max_tokens"] = options["max_tokens"]
    return payload


def complete(handle: ModelHandle, prompt: str) -> LLMResponse:
    # Imported here to avoid a cycle with the provider registry.
    from .providers import get_provider_spec

    spec = get_provider_spec(ProviderKind.OPENAI)
    api_key = handle.options.get("api_key")
    if not api_key:
        raise ProviderAuthError(
            "No OpenAI API key available. Provide one in the settings or set OPENAI_API_KEY on the server."
        )
    endpoint = f"{spec.resolve_base_url(handle.base_path)}/chat/completions"
    body = post_json(
        endpoint,
        build_payload(handle, prompt),
        provider="OpenAI",
        headers={"Authorization": f"Bearer {api_key}"},
        timeout=handle.timeout,
    )
    try:
        choice = body["choices"][0]
        content = choice["message"].get("content") or ""
        finish_reason = choice.get("finish_reason")
        usage = body.get("usage")
    except (KeyError, IndexError, TypeError, AttributeError) as exc:
        raise ProviderRequestError(f"Malformed response structure: {body}") from exc
    return LLMResponse(
        content=str(content),
        finish_reason=finish_reason,
        usage=usage,
        raw=body,
    )
