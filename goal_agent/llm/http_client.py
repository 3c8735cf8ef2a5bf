"""
Shared HTTP plumbing for the provider transports.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import requests

from .base import ProviderAuthError, ProviderRequestError

_AUTH_STATUS_CODES = {401, 403}


def post_json(
    url: str,
    payload: Dict[str, Any],
    *,
    provider: str,
    headers: Optional[Dict[str, str]] = None,
    params: Optional[Dict[str, str]] = None,
    timeout: float = 60.0,
) -> Any:
    """
    POST ``payload`` as JSON and return the decoded body.

    Authentication failures raise :class:`ProviderAuthError`; every other
    failure (network, rate limit, server error, non-JSON body) raises
    :class:`ProviderRequestError`.
    """
    request_headers = {"Content-Type": "application/json"}
    if headers:
        request_headers.update(headers)
    try:
        response = requests.post(url, json=payload, headers=request_headers, params=params, timeout=timeout)
    except requests.RequestException as exc:
        raise ProviderRequestError(f"{provider} request failed: {exc}") from exc
    if response.status_code in _AUTH_STATUS_CODES:
        raise ProviderAuthError(f"{provider} rejected the credentials ({response.status_code}): {response.text}")
    if response.status_code >= 400:
        raise ProviderRequestError(f"{provider} request failed ({response.status_code}): {response.text}")
    try:
        return response.json()
    except ValueError as exc:
        raise ProviderRequestError(f"{provider} returned a non-JSON body: {response.text}") from exc
