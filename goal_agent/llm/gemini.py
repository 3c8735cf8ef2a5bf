"""
Transport for Gemini's generateContent API.

Credentials are ambient: the key is read from ``GOOGLE_API_KEY`` at request
time and never taken from the user's settings.
"""

from __future__ import annotations

from typing import Any, Dict

from .base import LLMResponse, ModelHandle, ProviderKind, ProviderRequestError
from .http_client import post_json


def build_payload(handle: ModelHandle, prompt: str) -> Dict[str, Any]:
    options = handle.options
    return {
        "contents": [{"role": "user", "parts": [{"text": prompt}]}],
        "generationConfig": {
            "temperature": options["temperature"],
            "maxOutputTokens": options["max_output_tokens"],
        },
    }


def complete(handle: ModelHandle, prompt: str) -> LLMResponse:
    from .providers import get_provider_spec

    spec = get_provider_spec(ProviderKind.GEMINI)
    api_key = spec.resolve_api_key()
    endpoint = f"{spec.resolve_base_url()}/models/{handle.options['model']}:generateContent"
    body = post_json(
        endpoint,
        build_payload(handle, prompt),
        provider="Gemini",
        params={"key": api_key},
        timeout=handle.timeout,
    )
    try:
        candidate = body["candidates"][0]
        parts = candidate["content"]["parts"]
        text = "".join(str(part.get("text", "")) for part in parts if isinstance(part, dict))
        finish_reason = candidate.get("finishReason")
        usage = body.get("usageMetadata")
    except (KeyError, IndexError, TypeError, AttributeError) as exc:
        raise ProviderRequestError(f"Malformed response structure: {body}") from exc
    return LLMResponse(content=text, finish_reason=finish_reason, usage=usage, raw=body)
