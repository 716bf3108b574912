"""Tool dispatch exports."""

from .dispatcher import (
    Middleware,
    ToolDefinition,
    ToolDispatcher,
    error_boundary,
    logged,
    require_credentials,
)
from .responses import (
    INTERNAL_ERROR_CODE,
    INVALID_REQUEST_CODE,
    METHOD_NOT_FOUND_CODE,
    ToolResponse,
    error_response,
    format_error,
    is_error,
    json_response,
    response_text,
    text_response,
)
from .server import (
    SERVER_NAME,
    build_dispatcher,
    build_relinker,
    build_server,
    build_tool_catalogue,
)

__all__ = [
    "INTERNAL_ERROR_CODE",
    "INVALID_REQUEST_CODE",
    "METHOD_NOT_FOUND_CODE",
    "Middleware",
    "SERVER_NAME",
    "ToolDefinition",
    "ToolDispatcher",
    "ToolResponse",
    "build_dispatcher",
    "build_relinker",
    "build_server",
    "build_tool_catalogue",
    "error_boundary",
    "error_response",
    "format_error",
    "is_error",
    "json_response",
    "logged",
    "require_credentials",
    "response_text",
    "text_response",
]
