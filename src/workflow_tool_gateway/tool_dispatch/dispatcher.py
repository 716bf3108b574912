"""Tool registry with explicit middleware composition."""

from __future__ import annotations

import functools
import inspect
import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from fastmcp.exceptions import ToolError

from workflow_tool_gateway.configuration import GatewaySettings, has_credentials

from .responses import (
    INTERNAL_ERROR_CODE,
    METHOD_NOT_FOUND_CODE,
    ToolResponse,
    error_response,
    format_error,
    is_error,
    response_text,
)

logger = logging.getLogger(__name__)

Handler = Callable[..., ToolResponse]


@dataclass(frozen=True)
class ToolDefinition:
    """A named tool: description for the agent plus the handler implementing it.

    The handler's parameters (names, annotations and defaults) form the tool's
    input contract.
    """

    name: str
    description: str
    handler: Handler


Middleware = Callable[[ToolDefinition, Handler], Handler]


class ToolServer(Protocol):  # pylint: disable=too-few-public-methods
    """The part of the FastMCP server API used for registration."""

    def tool(self, *args: Any, **kwargs: Any) -> Any: ...


def error_boundary(definition: ToolDefinition, handler: Handler) -> Handler:
    """Turn every exception raised by ``handler`` into an error envelope."""

    @functools.wraps(handler)
    def wrapper(**arguments: Any) -> ToolResponse:
        try:
            return handler(**arguments)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            logger.debug("Tool %s raised %s", definition.name, type(exc).__name__)
            return format_error(exc)

    return wrapper


def logged(definition: ToolDefinition, handler: Handler) -> Handler:
    """Log each call with its argument names and whether it failed."""

    @functools.wraps(handler)
    def wrapper(**arguments: Any) -> ToolResponse:
        logger.info("%s called with arguments: %s", definition.name, sorted(arguments))
        response = handler(**arguments)
        if is_error(response):
            logger.warning("%s failed: %s", definition.name, response_text(response))
        else:
            logger.info("%s completed", definition.name)
        return response

    return wrapper


def require_credentials(settings: GatewaySettings) -> Middleware:
    """Reject calls while no API credentials are configured."""

    def middleware(definition: ToolDefinition, handler: Handler) -> Handler:
        @functools.wraps(handler)
        def wrapper(**arguments: Any) -> ToolResponse:
            if not has_credentials(settings):
                logger.error("%s rejected: no API key configured", definition.name)
                return error_response(
                    INTERNAL_ERROR_CODE,
                    "No Workflow86 API key is configured (set W86_API_KEY or W86_HEADERS).",
                )
            return handler(**arguments)

        return wrapper

    return middleware


class ToolDispatcher:
    """Holds tool definitions and invokes them through a middleware chain.

    The first middleware in the sequence is the outermost wrapper.
    """

    def __init__(
        self, definitions: Iterable[ToolDefinition], middleware: Sequence[Middleware] = ()
    ) -> None:
        self._definitions: dict[str, ToolDefinition] = {}
        self._handlers: dict[str, Handler] = {}
        for definition in definitions:
            if definition.name in self._definitions:
                raise ValueError(f"Duplicate tool name: {definition.name}")
            handler = definition.handler
            for layer in reversed(middleware):
                handler = layer(definition, handler)
            self._definitions[definition.name] = definition
            self._handlers[definition.name] = handler

    def names(self) -> list[str]:
        return list(self._definitions)

    def definition(self, name: str) -> ToolDefinition:
        return self._definitions[name]

    def call(self, name: str, arguments: Mapping[str, Any] | None = None) -> ToolResponse:
        handler = self._handlers.get(name)
        if handler is None:
            return error_response(METHOD_NOT_FOUND_CODE, f"Unknown tool: {name}")
        return handler(**dict(arguments or {}))

    def register_with(self, server: ToolServer) -> None:
        """Register every tool with a FastMCP server."""
        for name, definition in self._definitions.items():
            server.tool(name=name, description=definition.description)(
                _text_adapter(self._handlers[name])
            )


def _text_adapter(handler: Handler) -> Callable[..., str]:
    """Expose a handler as a FastMCP tool returning text and raising ToolError."""

    @functools.wraps(handler)
    def adapter(**arguments: Any) -> str:
        response = handler(**arguments)
        if is_error(response):
            raise ToolError(response_text(response))
        return response_text(response)

    signature = inspect.signature(handler)
    adapter.__signature__ = signature.replace(return_annotation=str)  # type: ignore[attr-defined]
    adapter.__annotations__ = {**getattr(handler, "__annotations__", {}), "return": str}
    return adapter
