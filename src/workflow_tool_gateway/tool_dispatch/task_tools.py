"""Task and form tools."""

from typing import Annotated, Literal, Optional

from pydantic import Field

from workflow_tool_gateway.api_client import WorkflowApiClient
from workflow_tool_gateway.response_relinking import ResponseRelinker

from .dispatcher import ToolDefinition
from .responses import ToolResponse, json_response, text_response
from .tool_inputs import PageNumber, empty_page_message
from .workflow_tools import embedded_items

TaskStatus = Literal["TODO", "DONE", "TERMINATED", "ERROR"]

ALL_TASKS_DONE_MESSAGE = "🎉 All tasks completed! No TODO items remaining."
NO_MATCHING_TASKS_MESSAGE = "No tasks match this query filter"
NO_MORE_TASKS_MESSAGE = "This page contains no additional tasks"


def no_tasks_message(
    status_to_include: Optional[list[str]], last_task_token: Optional[str]
) -> str:
    """Text returned when a task query yields nothing."""
    if last_task_token:
        return NO_MORE_TASKS_MESSAGE
    if status_to_include == ["TODO"]:
        return ALL_TASKS_DONE_MESSAGE
    return NO_MATCHING_TASKS_MESSAGE


def build_task_tools(
    client: WorkflowApiClient, relinker: ResponseRelinker
) -> list[ToolDefinition]:
    def list_tasks(
        queryString: Annotated[
            Optional[str],
            Field(
                description=(
                    "Text search query to filter tasks by content. Omit it entirely when "
                    "there is no search query rather than passing an empty string."
                )
            ),
        ] = None,
        workflowId: Annotated[
            Optional[str], Field(description="Filter tasks by specific workflow ID")
        ] = None,
        statusToInclude: Annotated[
            Optional[list[TaskStatus]],
            Field(description="Task statuses to include in results"),
        ] = None,
        startDate: Annotated[
            Optional[str],
            Field(description="Start date filter in ISO format (e.g., '2023-01-01T00:00:00Z')"),
        ] = None,
        endDate: Annotated[
            Optional[str],
            Field(description="End date filter in ISO format (e.g., '2023-12-31T23:59:59Z')"),
        ] = None,
        lastTaskToken: Annotated[
            Optional[str],
            Field(
                description=(
                    "Pagination token in format 'ISO-date:taskId' taken from the "
                    "lastTaskToken of the previous response"
                )
            ),
        ] = None,
    ) -> ToolResponse:
        response = client.list_tasks(
            query_string=queryString,
            workflow_id=workflowId,
            status_to_include=statusToInclude,
            start_date=startDate,
            end_date=endDate,
            last_task_token=lastTaskToken,
        )
        if not embedded_items(response):
            return text_response(no_tasks_message(statusToInclude, lastTaskToken))
        return json_response(relinker.relink_task_page(response))

    def list_forms(pageNumber: PageNumber = 0) -> ToolResponse:
        response = client.list_forms(page_number=pageNumber)
        if not embedded_items(response):
            return text_response(
                empty_page_message(
                    pageNumber,
                    "There are no forms available for this user",
                    "This page contains no additional forms",
                )
            )
        return json_response(relinker.relink_form_page(response))

    return [
        ToolDefinition(
            "list-tasks",
            "Get a filtered list of task summaries with text search, workflow, status and "
            "date range filters. Returns task names, descriptions, URLs and workflow "
            "information. Pass lastTaskToken from a previous response to fetch more.",
            list_tasks,
        ),
        ToolDefinition(
            "list-forms",
            "Get a paginated list of available forms including form names, URLs, associated "
            "workflow IDs and names.",
            list_forms,
        ),
    ]
