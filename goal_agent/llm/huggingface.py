"""
Transport for the Hugging Face text-generation inference API.
"""

from __future__ import annotations

from typing import Any, Dict

from .base import LLMResponse, ModelHandle, ProviderKind, ProviderRequestError
from .http_client import post_json


def build_payload(handle: ModelHandle, prompt: str) -> Dict[str, Any]:
    options = handle.options
    return {
        "inputs": prompt,
        "parameters": {
            "temperature": options["temperature"],
            "max_new_tokens": options["max_tokens"],
            "return_full_text": False,
        },
    }


def complete(handle: ModelHandle, prompt: str) -> LLMResponse:
    from .providers import get_provider_spec

    spec = get_provider_spec(ProviderKind.HUGGING_FACE)
    api_key = spec.resolve_api_key(handle.options.get("api_key"))
    endpoint = handle.options.get("endpoint") or f"{spec.resolve_base_url()}/{handle.options['model']}"
    body = post_json(
        endpoint,
        build_payload(handle, prompt),
        provider="Hugging Face",
        headers={"Authorization": f"Bearer {api_key}"},
        timeout=handle.timeout,
    )
    # The inference API answers with a list for most tasks and a bare object for some endpoints.
    item = body[0] if isinstance(body, list) and body else body
    if not isinstance(item, dict) or "generated_text" not in item:
        raise ProviderRequestError(f"Malformed response structure: {body}")
    return LLMResponse(content=str(item["generated_text"]), raw=body)
