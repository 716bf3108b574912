"""Session tools."""

from typing import Annotated, Literal

from pydantic import Field

from workflow_tool_gateway.api_client import WorkflowApiClient
from workflow_tool_gateway.response_relinking import ResponseRelinker

from .dispatcher import ToolDefinition
from .responses import ToolResponse, json_response, text_response
from .tool_inputs import PageNumber, empty_page_message
from .workflow_tools import embedded_items

SessionId = Annotated[str, Field(description="The ID of the workflow session")]
ThreadId = Annotated[
    str, Field(description="The ID of the thread, 'root' unless run in a parallel branch")
]


def build_session_tools(
    client: WorkflowApiClient, relinker: ResponseRelinker
) -> list[ToolDefinition]:
    resolver = relinker.resolver

    def list_sessions(
        workflowId: Annotated[
            str, Field(description="The ID of the workflow to list sessions for")
        ],
        sessionMode: Annotated[
            Literal["PROD", "TEST"],
            Field(description="Optional filter to return PROD or TEST sessions"),
        ] = "PROD",
        pageNumber: PageNumber = 0,
    ) -> ToolResponse:
        response = client.list_sessions(
            workflowId, session_mode=sessionMode, page_number=pageNumber
        )
        if not embedded_items(response):
            return text_response(
                empty_page_message(
                    pageNumber,
                    f"This workflow has never been run in {sessionMode} mode",
                    "This page contains no additional sessions",
                )
            )
        return json_response(relinker.relink_session_page(response))

    def get_session(
        sessionId: Annotated[
            str, Field(description="The ID of the workflow session to get the details of")
        ],
    ) -> ToolResponse:
        return json_response(relinker.relink_session_result(client.get_session(sessionId)))

    def terminate_entire_session(
        sessionId: Annotated[
            str, Field(description="The ID of the workflow session to terminate")
        ],
    ) -> ToolResponse:
        response = client.terminate_entire_session(sessionId)
        return json_response(resolver.attach_metadata(response, "RetryWorkflowResponse"))

    def terminate_component(
        sessionId: SessionId,
        componentId: Annotated[str, Field(description="The ID of the component to terminate")],
        threadId: ThreadId = "root",
    ) -> ToolResponse:
        response = client.terminate_component(sessionId, componentId, threadId)
        return json_response(resolver.attach_metadata(response, "RetryWorkflowResponse"))

    def retry_failed_component(
        sessionId: SessionId,
        componentId: Annotated[str, Field(description="The ID of the component to retry")],
        threadId: ThreadId = "root",
    ) -> ToolResponse:
        response = client.retry_failed_component(sessionId, componentId, threadId)
        return json_response(resolver.attach_metadata(response, "RetryWorkflowResponse"))

    return [
        ToolDefinition(
            "list-sessions",
            "Get a paginated list of all execution sessions for a workflow, including session "
            "IDs, status, timestamps, and execution mode. Can filter between production and "
            "test runs of draft workflows.",
            list_sessions,
        ),
        ToolDefinition(
            "get-session",
            "Retrieve details of a specific workflow execution session, including session "
            "status, component execution states, inputs and outputs of each component, and "
            "links to terminate or retry individual components.",
            get_session,
        ),
        ToolDefinition(
            "terminate-entire-session",
            "Immediately stop and terminate an entire workflow session, ending execution of "
            "all active components.",
            terminate_entire_session,
        ),
        ToolDefinition(
            "terminate-component",
            "Terminate a specific component thread within a workflow session while allowing "
            "other components to continue running.",
            terminate_component,
        ),
        ToolDefinition(
            "retry-failed-component",
            "Restart execution of a failed component and continue the workflow from that "
            "point forward, reusing the existing session data and placeholder values.",
            retry_failed_component,
        ),
    ]
