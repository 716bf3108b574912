"""Workflow tools."""

# Annotations are evaluated eagerly: FastMCP reads them to build input contracts.

from collections.abc import Mapping
from typing import Annotated, Any, Literal, Optional

from pydantic import Field

from workflow_tool_gateway.api_client import ApiError, WorkflowApiClient
from workflow_tool_gateway.response_relinking import ResponseRelinker

from .dispatcher import ToolDefinition
from .responses import ToolResponse, json_response, text_response
from .tool_inputs import PageNumber, empty_page_message, schema_field

WorkflowId = Annotated[str, Field(description="The ID of the workflow")]


def embedded_items(response: Any) -> list[Any]:
    """Items of a hypermedia page, or an empty list for malformed responses."""
    if not isinstance(response, Mapping):
        return []
    items = response.get("_embedded")
    return items if isinstance(items, list) else []


def build_workflow_tools(
    client: WorkflowApiClient, relinker: ResponseRelinker
) -> list[ToolDefinition]:
    resolver = relinker.resolver

    def list_workflows(
        status: Annotated[
            Literal["ALL", "PUBLISHED"],
            Field(description="Optional parameter to filter results by publication status"),
        ] = "ALL",
        pageNumber: PageNumber = 0,
        orderBy: Annotated[
            Literal["name", "lastModified"], Field(description="Field to sort by")
        ] = "name",
        orderDirection: Annotated[
            Literal["ASC", "DESC"], Field(description="Sort direction")
        ] = "ASC",
    ) -> ToolResponse:
        response = client.list_workflows(
            status=status,
            page_number=pageNumber,
            order_by=orderBy,
            order_direction=orderDirection,
        )
        if not embedded_items(response):
            return text_response(
                empty_page_message(
                    pageNumber,
                    "There are no workflows defined for this client",
                    "This page contains no additional workflows",
                )
            )
        return json_response(relinker.relink_workflow_page(response))

    def get_workflow_history(workflowId: WorkflowId, pageNumber: PageNumber = 0) -> ToolResponse:
        response = client.get_workflow_history(workflowId, page_number=pageNumber)
        return json_response(relinker.relink_workflow_history_page(workflowId, response))

    def get_workflow(
        workflowId: WorkflowId,
        workflowVersion: Annotated[
            str, Field(description="DEFAULT, PUBLISHED, DRAFT, or an integer workflow version")
        ] = "DEFAULT",
    ) -> ToolResponse:
        try:
            response = client.get_workflow_version(workflowId, workflowVersion)
        except ApiError as exc:
            if exc.http_status == 410 and workflowVersion == "PUBLISHED":
                return text_response("This project has not been published")
            raise
        return json_response(relinker.relink_workflow_version(response))

    def run_workflow(
        workflowId: Annotated[str, Field(description="The ID of the workflow to run")],
        componentId: Annotated[
            str,
            schema_field(resolver, "RunWorkflowCommand", "componentId", with_example=True),
        ],
        placeholderValues: Annotated[
            Optional[dict[str, Any]],
            schema_field(resolver, "RunWorkflowCommand", "placeholderValues"),
        ] = None,
        workflowVersion: Annotated[
            Optional[str],
            schema_field(resolver, "RunWorkflowCommand", "workflowVersion"),
        ] = None,
    ) -> ToolResponse:
        response = client.run_workflow(
            workflowId,
            component_id=componentId,
            placeholder_values=placeholderValues,
            workflow_version=workflowVersion,
        )
        return json_response(relinker.relink_run_workflow_response(response, workflowId))

    def rerun_workflow(
        workflowId: Annotated[str, Field(description="The ID of the workflow to rerun")],
        sessionId: Annotated[
            str,
            schema_field(resolver, "RerunWorkflowCommand", "originalSessionId"),
        ],
        componentId: Annotated[
            str,
            schema_field(resolver, "RerunWorkflowCommand", "componentId", with_example=True),
        ],
        projectVersion: Annotated[
            Optional[str],
            schema_field(resolver, "RerunWorkflowCommand", "workflowVersion"),
        ] = None,
    ) -> ToolResponse:
        response = client.rerun_workflow(
            workflowId,
            component_id=componentId,
            original_session_id=sessionId,
            workflow_version=projectVersion,
        )
        return json_response(relinker.relink_run_workflow_response(response, workflowId))

    def publish_workflow(
        workflowId: Annotated[str, Field(description="The ID of the workflow to publish")],
        comment: Annotated[
            Optional[str],
            schema_field(resolver, "PublishWorkflowCommand", "comment"),
        ] = None,
        description: Annotated[
            Optional[str],
            schema_field(resolver, "PublishWorkflowCommand", "description"),
        ] = None,
    ) -> ToolResponse:
        response = client.publish_workflow(workflowId, comment=comment, description=description)
        return json_response(resolver.attach_metadata(response, "PublishWorkflowResponse"))

    def unpublish_workflow(
        workflowId: Annotated[str, Field(description="The ID of the workflow to unpublish")],
    ) -> ToolResponse:
        response = client.unpublish_workflow(workflowId)
        return json_response(resolver.attach_metadata(response, "UnpublishWorkflowResponse"))

    def generate_workflow_plan(
        userRequirement: Annotated[
            str,
            Field(
                description=(
                    "Description of what the workflow should do or how it should be modified"
                )
            ),
        ],
        workflowId: Annotated[
            Optional[str],
            Field(
                description=(
                    "The ID of an existing workflow to edit, or leave blank for new workflow"
                )
            ),
        ] = None,
        context: Annotated[
            Optional[dict[str, Any]],
            Field(description="Optional context object with additional information for the AI"),
        ] = None,
    ) -> ToolResponse:
        response = client.generate_workflow_plan(
            user_requirement=userRequirement, workflow_id=workflowId or None, context=context
        )
        return json_response(resolver.attach_metadata(response, "GenerateWorkflowResponse"))

    def get_workflow_plan(
        sessionId: Annotated[
            str, Field(description="Session ID returned from generate-workflow-plan")
        ],
    ) -> ToolResponse:
        response = client.get_workflow_plan(sessionId)
        return json_response(resolver.attach_metadata(response, "GetWorkflowPlanResponse"))

    def apply_workflow_plan_skeleton(
        sessionId: Annotated[
            str, Field(description="Session ID returned from generate-workflow-plan")
        ],
    ) -> ToolResponse:
        response = client.apply_workflow_plan_skeleton(sessionId)
        return json_response(resolver.attach_metadata(response, "GenerateWorkflowResponse"))

    def update_workflow_details(
        workflowId: Annotated[str, Field(description="The ID of the workflow to update")],
        workflowName: Annotated[
            Optional[str],
            Field(
                description=(
                    "Optional new name for the workflow. "
                    "If not provided, the name will not be changed"
                )
            ),
        ] = None,
        workflowDescription: Annotated[
            Optional[str],
            Field(
                description=(
                    "Optional new description for the workflow. "
                    "If not provided, the description will not be changed"
                )
            ),
        ] = None,
    ) -> ToolResponse:
        response = client.update_workflow_details(
            workflowId, workflow_name=workflowName, workflow_description=workflowDescription
        )
        return json_response(relinker.relink_workflow_version(response))

    return [
        ToolDefinition(
            "list-workflows",
            "Get a paginated list of workflow summaries including workflow IDs, names, "
            "publication status, draft versions, and navigation links. Returns structured "
            "metadata for each workflow with pagination controls and links to detailed "
            "workflow information.",
            list_workflows,
        ),
        ToolDefinition(
            "get-workflow-history",
            "Retrieve a paginated history of all versions for a specific workflow, including "
            "version numbers, timestamps, status changes, and metadata for each version.",
            get_workflow_history,
        ),
        ToolDefinition(
            "get-workflow",
            "Get comprehensive workflow details including metadata, the full workflow "
            "description, component definitions, placeholder mappings between components, "
            "and links to related operations like session management.",
            get_workflow,
        ),
        ToolDefinition("run-workflow", resolver.describe_type("RunWorkflowCommand"), run_workflow),
        ToolDefinition(
            "rerun-workflow", resolver.describe_type("RerunWorkflowCommand"), rerun_workflow
        ),
        ToolDefinition(
            "publish-workflow",
            "Publish an existing workflow DRAFT, making it available for production execution. "
            "Creates a new published version and increments the draft version number.",
            publish_workflow,
        ),
        ToolDefinition(
            "unpublish-workflow",
            "Unpublish an existing workflow, making it unavailable for normal execution. Only "
            "the draft version remains available.",
            unpublish_workflow,
        ),
        ToolDefinition(
            "generate-workflow-plan",
            "Generate a workflow edit plan using AI from a requirement description. Returns a "
            "session ID that can be used to poll for the generated plan.",
            generate_workflow_plan,
        ),
        ToolDefinition(
            "get-workflow-plan",
            "Retrieve the status and latest AI response of a workflow plan generation.",
            get_workflow_plan,
        ),
        ToolDefinition(
            "apply-workflow-plan-skeleton",
            "Apply the workflow edit changes generated by the AI for a plan session.",
            apply_workflow_plan_skeleton,
        ),
        ToolDefinition(
            "update-workflow-details",
            "Update workflow name and/or description. Omitted fields remain unchanged.",
            update_workflow_details,
        ),
    ]
