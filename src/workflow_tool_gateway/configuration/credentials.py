"""API credential helpers."""

from __future__ import annotations

from collections.abc import Mapping

from .runtime_settings import GatewaySettings

API_KEY_HEADER = "x-api-key"


def header_value(headers: Mapping[str, str] | None, name: str) -> str | None:
    """Case-insensitive header lookup."""
    if not headers:
        return None
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value
    return None


def credential_headers(settings: GatewaySettings) -> dict[str, str]:
    """Request headers carrying the configured credentials.

    Explicit headers win over the API key so that deployments can supply their
    own authentication scheme.
    """
    headers = dict(settings.headers)
    if settings.api_key and header_value(headers, API_KEY_HEADER) is None:
        headers[API_KEY_HEADER] = settings.api_key
    return headers


def has_credentials(settings: GatewaySettings) -> bool:
    return bool(settings.api_key) or bool(header_value(settings.headers, API_KEY_HEADER))


def mask_secret(secret: str | None) -> str:
    """Render a secret safely for logs."""
    if not secret:
        return "<none>"
    if len(secret) <= 2:
        return "*" * len(secret)
    if len(secret) <= 8:
        return f"{secret[0]}***{secret[-1]}"
    return f"{secret[:4]}...{secret[-4:]}"
