"""Workflow86 public REST API client.

One method per API operation. Responses are returned as decoded JSON in their
raw hypermedia shape; relinking happens in the tool layer. Requests are not
retried: a failure surfaces as ``ApiError``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any
from urllib.parse import quote

import requests

from workflow_tool_gateway.configuration import GatewaySettings, credential_headers

from .api_errors import ApiError, extract_error_message

logger = logging.getLogger(__name__)


def _segment(value: Any) -> str:
    return quote(str(value), safe="")


def _compact(values: Mapping[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in values.items() if value is not None}


class WorkflowApiClient:
    """Synchronous client for the Workflow86 REST API."""

    def __init__(
        self, settings: GatewaySettings, session: requests.Session | None = None
    ) -> None:
        self._settings = settings
        self._session = session or requests.Session()

    @property
    def settings(self) -> GatewaySettings:
        return self._settings

    # Workflows

    def list_workflows(
        self,
        *,
        status: str = "ALL",
        page_number: int = 0,
        order_by: str = "name",
        order_direction: str = "ASC",
    ) -> Any:
        return self._request(
            "GET",
            "/v1/workflow",
            params={
                "status": status,
                "pageNumber": page_number,
                "orderBy": order_by,
                "orderDirection": order_direction,
            },
        )

    def get_workflow_history(self, workflow_id: str, *, page_number: int = 0) -> Any:
        return self._request(
            "GET",
            f"/v1/workflow/{_segment(workflow_id)}/history",
            params={"pageNumber": page_number},
        )

    def get_workflow_version(self, workflow_id: str, workflow_version: str) -> Any:
        return self._request(
            "GET", f"/v1/workflow/{_segment(workflow_id)}/version/{_segment(workflow_version)}"
        )

    def run_workflow(
        self,
        workflow_id: str,
        *,
        component_id: str,
        placeholder_values: Mapping[str, Any] | None = None,
        workflow_version: str | None = None,
    ) -> Any:
        return self._request(
            "POST",
            f"/v1/workflow/{_segment(workflow_id)}/run",
            json_body=_compact(
                {
                    "componentId": component_id,
                    "placeholderValues": placeholder_values,
                    "workflowVersion": workflow_version,
                }
            ),
        )

    def rerun_workflow(
        self,
        workflow_id: str,
        *,
        component_id: str,
        original_session_id: str,
        workflow_version: str | None = None,
    ) -> Any:
        return self._request(
            "POST",
            f"/v1/workflow/{_segment(workflow_id)}/rerun",
            json_body=_compact(
                {
                    "componentId": component_id,
                    "originalSessionId": original_session_id,
                    "workflowVersion": workflow_version,
                }
            ),
        )

    def publish_workflow(
        self, workflow_id: str, *, comment: str | None = None, description: str | None = None
    ) -> Any:
        return self._request(
            "POST",
            f"/v1/workflow/{_segment(workflow_id)}/publish",
            json_body=_compact({"comment": comment, "description": description}),
        )

    def unpublish_workflow(self, workflow_id: str) -> Any:
        return self._request("POST", f"/v1/workflow/{_segment(workflow_id)}/unpublish")

    def generate_workflow_plan(
        self,
        *,
        user_requirement: str,
        workflow_id: str | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> Any:
        return self._request(
            "POST",
            "/v1/workflow/plan",
            params={"workflowId": workflow_id, "userRequirement": user_requirement},
            json_body=dict(context) if context else None,
        )

    def get_workflow_plan(self, plan_session_id: str) -> Any:
        return self._request("GET", f"/v1/workflow/plan/{_segment(plan_session_id)}")

    def apply_workflow_plan_skeleton(self, session_id: str) -> Any:
        return self._request("POST", f"/v1/workflow/plan/{_segment(session_id)}/apply")

    def update_workflow_details(
        self,
        workflow_id: str,
        *,
        workflow_name: str | None = None,
        workflow_description: str | None = None,
    ) -> Any:
        return self._request(
            "PATCH",
            f"/v1/workflow/{_segment(workflow_id)}",
            json_body=_compact(
                {"workflowName": workflow_name, "workflowDescription": workflow_description}
            ),
        )

    # Sessions

    def list_sessions(
        self, workflow_id: str, *, session_mode: str = "PROD", page_number: int = 0
    ) -> Any:
        return self._request(
            "GET",
            f"/v1/workflow/{_segment(workflow_id)}/sessions",
            params={"sessionMode": session_mode, "pageNumber": page_number},
        )

    def get_session(self, session_id: str) -> Any:
        return self._request("GET", f"/v1/session/{_segment(session_id)}")

    def terminate_entire_session(self, session_id: str) -> Any:
        return self._request("POST", f"/v1/session/{_segment(session_id)}/terminate")

    def terminate_component(self, session_id: str, component_id: str, thread_id: str) -> Any:
        path = self._thread_path(session_id, component_id, thread_id, "terminate")
        return self._request("POST", path)

    def retry_failed_component(self, session_id: str, component_id: str, thread_id: str) -> Any:
        path = self._thread_path(session_id, component_id, thread_id, "retry")
        return self._request("POST", path)

    # Tables

    def list_tables(self, *, page_number: int = 0) -> Any:
        return self._request("GET", "/v1/table", params={"pageNumber": page_number})

    def get_table(self, table_id: str) -> Any:
        return self._request("GET", f"/v1/table/{_segment(table_id)}")

    def create_table(self, table_name: str, columns: Sequence[Mapping[str, Any]]) -> Any:
        return self._request(
            "POST",
            "/v1/table",
            json_body={"tableName": table_name, "columns": [dict(column) for column in columns]},
        )

    def add_column(self, table_id: str, column_name: str, column_type: str) -> Any:
        return self._request(
            "POST",
            f"/v1/table/{_segment(table_id)}/column",
            json_body={"columnName": column_name, "columnType": column_type},
        )

    def rename_column(self, table_id: str, original_column_name: str, new_column_name: str) -> Any:
        return self._request(
            "PUT",
            f"/v1/table/{_segment(table_id)}/column/{_segment(original_column_name)}",
            params={"newColumnName": new_column_name},
        )

    def delete_column(self, table_id: str, column_name: str) -> Any:
        return self._request(
            "DELETE", f"/v1/table/{_segment(table_id)}/column/{_segment(column_name)}"
        )

    # Tasks and forms

    def list_tasks(
        self,
        *,
        query_string: str | None = None,
        workflow_id: str | None = None,
        status_to_include: Sequence[str] | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
        last_task_token: str | None = None,
    ) -> Any:
        params = {
            "queryString": query_string or None,
            "workflowId": workflow_id or None,
            "statusToInclude": list(status_to_include) if status_to_include else None,
            "startDate": start_date or None,
            "endDate": end_date or None,
            "lastTaskToken": last_task_token or None,
        }
        return self._request("GET", "/v1/task", params=params)

    def list_forms(self, *, page_number: int = 0) -> Any:
        return self._request("GET", "/v1/form", params={"pageNumber": page_number})

    # Component editing

    def start_component_edit(self, request: Mapping[str, Any]) -> Any:
        return self._request("POST", "/v1/component/edit", json_body=_compact(request))

    def get_component_edit_status(self, session_id: str) -> Any:
        return self._request("GET", f"/v1/component/edit/{_segment(session_id)}")

    def _thread_path(self, session_id: str, component_id: str, thread_id: str, action: str) -> str:
        return (
            f"/v1/session/{_segment(session_id)}/component/{_segment(component_id)}"
            f"/thread/{_segment(thread_id)}/{action}"
        )

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        json_body: Any = None,
    ) -> Any:
        url = f"{self._settings.base_url}{path}"
        logger.debug("%s %s", method, url)
        try:
            response = self._session.request(
                method,
                url,
                params=_compact(params) if params else None,
                json=json_body,
                headers=credential_headers(self._settings),
                timeout=self._settings.timeout_seconds,
            )
        except requests.RequestException as exc:
            raise ApiError(
                f"Request to {method} {path} failed: {exc}", method=method, url=url
            ) from exc

        payload = _decode(response)
        if not response.ok:
            message = extract_error_message(payload) or response.reason or ""
            raise ApiError(
                message,
                http_status=response.status_code,
                payload=payload,
                method=method,
                url=url,
            )
        return payload


def _decode(response: requests.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text
