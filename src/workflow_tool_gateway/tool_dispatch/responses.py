"""Tool response envelopes and error formatting."""

from __future__ import annotations

import json
import logging
from typing import Any

from workflow_tool_gateway.api_client import ApiError

logger = logging.getLogger(__name__)

INVALID_REQUEST_CODE = -32600
METHOD_NOT_FOUND_CODE = -32601
INTERNAL_ERROR_CODE = -32603

ToolResponse = dict[str, Any]


def text_response(text: str) -> ToolResponse:
    return {"content": [{"type": "text", "text": text}]}


def json_response(result: Any) -> ToolResponse:
    """Serialize a relinked result as pretty-printed JSON text."""
    return text_response(json.dumps(result, indent=2, ensure_ascii=False))


def error_response(code: int, message: str) -> ToolResponse:
    return {"isError": True, "content": [{"type": "text", "text": message, "code": code}]}


def is_error(response: ToolResponse) -> bool:
    return bool(response.get("isError"))


def response_text(response: ToolResponse) -> str:
    """Concatenated text of all text content items."""
    return "\n".join(
        item.get("text", "") for item in response.get("content", []) if item.get("type") == "text"
    )


def format_error(exc: BaseException) -> ToolResponse:
    """Convert an exception raised during a tool call into an error envelope.

    Client errors reported by the API keep their message verbatim. Everything
    else is reported as an internal error; unexpected exceptions are logged with
    their stack trace, which never reaches the response.
    """
    if isinstance(exc, ApiError) and exc.http_status is not None:
        status = exc.http_status
        if 400 <= status < 500 and exc.message:
            return error_response(INVALID_REQUEST_CODE, exc.message)
        detail = exc.message or "no error details returned"
        return error_response(INTERNAL_ERROR_CODE, f"HTTP {status}: {detail}")

    logger.error("Tool invocation failed: %s", exc, exc_info=exc)
    return error_response(
        INTERNAL_ERROR_CODE, f"An unexpected error occurred: {_describe_chain(exc)}"
    )


def _describe_chain(exc: BaseException) -> str:
    parts = [str(exc) or type(exc).__name__]
    cause = exc.__cause__
    while cause is not None:
        parts.append(f"caused by: {str(cause) or type(cause).__name__}")
        cause = cause.__cause__
    return " ".join(parts)
