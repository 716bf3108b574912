"""API error entities."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


class ApiError(Exception):
    """Raised when a REST call fails or returns a non-success status."""

    def __init__(
        self,
        message: str,
        *,
        http_status: int | None = None,
        payload: Any = None,
        method: str | None = None,
        url: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.http_status = http_status
        self.payload = payload
        self.method = method
        self.url = url


def extract_error_message(payload: Any) -> str | None:
    """Pull a human readable message out of the common API error shapes."""
    if isinstance(payload, str):
        return payload.strip() or None
    if not isinstance(payload, Mapping):
        return None

    error = payload.get("error")
    if isinstance(error, Mapping) and isinstance(error.get("message"), str):
        return error["message"]
    for key in ("message", "error_description", "detail", "title"):
        value = payload.get(key)
        if isinstance(value, str) and value.strip():
            return value
    if isinstance(error, str) and error.strip():
        return error

    errors = payload.get("errors")
    if isinstance(errors, list):
        messages = [
            item["message"]
            for item in errors
            if isinstance(item, Mapping) and isinstance(item.get("message"), str)
        ]
        if messages:
            return "; ".join(messages)
    return None
