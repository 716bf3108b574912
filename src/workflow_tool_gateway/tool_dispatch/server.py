"""Assemble the tool catalogue and expose it as a FastMCP server."""

from __future__ import annotations

import logging

from fastmcp import FastMCP

from workflow_tool_gateway.api_client import WorkflowApiClient
from workflow_tool_gateway.configuration import GatewaySettings
from workflow_tool_gateway.response_relinking import ResponseRelinker
from workflow_tool_gateway.schema_management import SchemaResolver, load_schema_document

from .component_tools import build_component_tools
from .dispatcher import (
    ToolDefinition,
    ToolDispatcher,
    error_boundary,
    logged,
    require_credentials,
)
from .session_tools import build_session_tools
from .table_tools import build_table_tools
from .task_tools import build_task_tools
from .workflow_tools import build_workflow_tools

logger = logging.getLogger(__name__)

SERVER_NAME = "workflow86"


def build_relinker(settings: GatewaySettings) -> ResponseRelinker:
    """Load the schema document named by ``settings`` and wrap it in a relinker."""
    document = load_schema_document(settings.schema_path)
    logger.debug("Loaded %d schema types from %s", len(document), document.source)
    return ResponseRelinker(SchemaResolver(document), app_url=settings.app_url)


def build_tool_catalogue(
    client: WorkflowApiClient, relinker: ResponseRelinker
) -> list[ToolDefinition]:
    return [
        *build_workflow_tools(client, relinker),
        *build_session_tools(client, relinker),
        *build_table_tools(client, relinker),
        *build_task_tools(client, relinker),
        *build_component_tools(client, relinker),
    ]


def build_dispatcher(
    settings: GatewaySettings,
    client: WorkflowApiClient | None = None,
    relinker: ResponseRelinker | None = None,
) -> ToolDispatcher:
    """Build the dispatcher with logging outermost and the credential check innermost."""
    client = client or WorkflowApiClient(settings)
    relinker = relinker or build_relinker(settings)
    return ToolDispatcher(
        build_tool_catalogue(client, relinker),
        middleware=(logged, error_boundary, require_credentials(settings)),
    )


def build_server(settings: GatewaySettings, dispatcher: ToolDispatcher | None = None) -> FastMCP:
    dispatcher = dispatcher or build_dispatcher(settings)
    server = FastMCP(SERVER_NAME)
    dispatcher.register_with(server)
    logger.info("Registered %d tools against %s", len(dispatcher.names()), settings.base_url)
    return server
