"""AI-assisted component editing tools."""

from typing import Annotated, Any, Optional

from pydantic import Field

from workflow_tool_gateway.api_client import WorkflowApiClient
from workflow_tool_gateway.response_relinking import ResponseRelinker

from .dispatcher import ToolDefinition
from .responses import ToolResponse, json_response

NameList = Optional[list[str]]


def build_component_tools(
    client: WorkflowApiClient, relinker: ResponseRelinker
) -> list[ToolDefinition]:
    def edit_component(
        workflowId: Annotated[
            str, Field(description="The ID of the workflow (use 'new' for new workflows)")
        ],
        userRequirement: Annotated[
            str, Field(description="User requirement or problem description")
        ],
        type: Annotated[  # pylint: disable=redefined-builtin
            Optional[str], Field(description="Component type (required if workflowId is 'new')")
        ] = None,
        componentId: Annotated[
            Optional[str],
            Field(description="ID of component to edit (optional for new components)"),
        ] = None,
        context: Annotated[
            Optional[dict[str, Any]],
            Field(description="Context from previous messages or chat history"),
        ] = None,
        availableCredentials: Annotated[
            NameList, Field(description="Available credentials for API/code components")
        ] = None,
        availableDatabase: Annotated[
            NameList, Field(description="Available databases for DB components")
        ] = None,
        triggerApps: Annotated[
            NameList, Field(description="Available trigger apps for external app components")
        ] = None,
    ) -> ToolResponse:
        response = client.start_component_edit(
            {
                "workflowId": workflowId,
                "type": type,
                "componentId": componentId,
                "userRequirement": userRequirement,
                "context": context,
                "availableCredentials": availableCredentials,
                "availableDatabase": availableDatabase,
                "triggerApps": triggerApps,
            }
        )
        return json_response(relinker.relink_component_edit_response(response))

    def get_component_edit_status(
        sessionId: Annotated[str, Field(description="Session ID from edit-component response")],
    ) -> ToolResponse:
        response = client.get_component_edit_status(sessionId)
        return json_response(relinker.relink_component_edit_status(response))

    return [
        ToolDefinition(
            "edit-component",
            "Edit an existing workflow component or create a new one using AI assistance. "
            "Returns a session ID for polling the edit status.",
            edit_component,
        ),
        ToolDefinition(
            "get-component-edit-status",
            "Get the status of a component edit operation. Returns questions if AI needs "
            "clarification, or component ID if edit was successful.",
            get_component_edit_status,
        ),
    ]
