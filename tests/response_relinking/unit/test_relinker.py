"""Response relinker tests."""

from __future__ import annotations

from typing import Any

import pytest
from workflow_tool_gateway.configuration import GatewaySettings
from workflow_tool_gateway.response_relinking import RelinkError, ResponseRelinker
from workflow_tool_gateway.schema_management import SchemaResolver, load_schema_document

APP_URL = "https://app.example.com"
WORKFLOW_ID = "0f8fad5b-d9cb-469f-a165-70867728950e"
SESSIONS_URL = f"https://rest.workflow86.com/v1/workflow/{WORKFLOW_ID}/sessions"


@pytest.fixture(name="relinker")
def _relinker() -> ResponseRelinker:
    return ResponseRelinker(SchemaResolver(load_schema_document()), app_url=APP_URL)


def _workflow_page(page_number: int, last_page: Any) -> dict[str, Any]:
    page: dict[str, Any] = {
        "_embedded": [{"workflowId": "w1", "name": "W", "published": False, "_links": {}}],
        "_pageNumber": page_number,
        "_links": {"self": {"href": "https://rest.workflow86.com/v1/workflow"}},
    }
    if last_page is not None:
        page["_lastPage"] = last_page
    return page


@pytest.mark.parametrize(
    ("page_number", "last_page", "expected"),
    [
        (0, True, {}),
        (0, False, {"nextPage": {"name": "list-workflows", "arguments": {"pageNumber": 1}}}),
        (2, True, {"previousPage": {"name": "list-workflows", "arguments": {"pageNumber": 1}}}),
        (
            1,
            None,
            {
                "previousPage": {"name": "list-workflows", "arguments": {"pageNumber": 0}},
                "nextPage": {"name": "list-workflows", "arguments": {"pageNumber": 2}},
            },
        ),
    ],
)
def test_pagination_links_follow_page_position(
    relinker: ResponseRelinker, page_number: int, last_page: Any, expected: dict[str, Any]
) -> None:
    result = relinker.relink_workflow_page(_workflow_page(page_number, last_page))

    assert result["@links"] == expected
    assert result["@pageNumber"] == page_number
    assert result["@hasMorePages"] is (last_page is not True)


def test_missing_page_number_defaults_to_first_page(relinker: ResponseRelinker) -> None:
    page = _workflow_page(0, False)
    del page["_pageNumber"]

    result = relinker.relink_workflow_page(page)

    assert result["@pageNumber"] == 0
    assert "previousPage" not in result["@links"]


def test_schema_is_attached_once_at_top_level(relinker: ResponseRelinker) -> None:
    result = relinker.relink_workflow_page(_workflow_page(0, True))

    assert "@schema" in result
    assert all("@schema" not in item for item in result["workflows"])
    assert all(not key.startswith("_") for key in result)
    assert all(not key.startswith("_") for item in result["workflows"] for key in item)


def test_history_page_carries_workflow_id_into_links(relinker: ResponseRelinker) -> None:
    raw = {
        "_embedded": [{"version": 3, "status": "PUBLISHED", "_links": {}}],
        "_pageNumber": 1,
        "_lastPage": False,
        "_links": {},
    }

    result = relinker.relink_workflow_history_page("wf-1", raw)

    assert list(result)[0] == "workflowId"
    assert result["workflowId"] == "wf-1"
    assert result["history"][0]["@links"] == {
        "version-3-details": {
            "name": "get-workflow",
            "arguments": {"workflowId": "wf-1", "workflowVersion": 3},
        }
    }
    assert result["@links"] == {
        "previousPage": {
            "name": "get-workflow-history",
            "arguments": {"workflowId": "wf-1", "pageNumber": 0},
        },
        "nextPage": {
            "name": "get-workflow-history",
            "arguments": {"workflowId": "wf-1", "pageNumber": 2},
        },
    }


def test_session_page_extracts_workflow_id_from_links(relinker: ResponseRelinker) -> None:
    raw = {
        "_embedded": [{"sessionId": "s1", "status": "SUCCESSFUL", "_links": {}}],
        "_pageNumber": 0,
        "_lastPage": False,
        "_links": {
            "self": {"href": f"{SESSIONS_URL}?pageNumber=0"},
            "nextPage": {"href": f"{SESSIONS_URL}?pageNumber=1"},
        },
    }

    result = relinker.relink_session_page(raw)

    assert result["session"][0]["@links"] == {
        "details": {"name": "get-session", "arguments": {"sessionId": "s1"}}
    }
    assert result["@links"] == {
        "nextPage": {
            "name": "list-sessions",
            "arguments": {"workflowId": WORKFLOW_ID, "pageNumber": 1},
        }
    }
    assert "session" in result["@schema"]


def test_session_page_without_usable_links_uses_unknown_workflow(
    relinker: ResponseRelinker,
) -> None:
    raw = {"_embedded": [], "_pageNumber": 3, "_lastPage": True, "_links": {}}

    result = relinker.relink_session_page(raw)

    assert result["session"] == []
    assert result["@links"] == {
        "previousPage": {
            "name": "list-sessions",
            "arguments": {"workflowId": "unknown", "pageNumber": 2},
        }
    }


def test_session_result_links_follow_component_capabilities(
    relinker: ResponseRelinker,
) -> None:
    raw = {
        "sessionId": "s1",
        "status": "FAILED",
        "componentResults": [
            {
                "componentId": "c1",
                "thread": "root",
                "status": "FAILED",
                "_links": {"retryFailedComponent": {"href": "https://api/retry"}},
            },
            {
                "componentId": "c2",
                "thread": "t-2",
                "status": "RUNNING",
                "_links": {"terminateComponent": "https://api/terminate"},
            },
            {"componentId": "c3", "thread": "root", "status": "SUCCESSFUL", "_links": {}},
        ],
        "_links": {"self": {"href": "https://api/session/s1"}},
    }

    result = relinker.relink_session_result(raw)
    first, second, third = result["componentResults"]

    assert first["@links"] == {
        "retryFailedComponent": {
            "name": "retry-failed-component",
            "arguments": {"sessionId": "s1", "componentId": "c1", "threadId": "root"},
        }
    }
    assert second["@links"] == {
        "terminateComponent": {
            "name": "terminate-component",
            "arguments": {"sessionId": "s1", "componentId": "c2", "threadId": "t-2"},
        }
    }
    assert third["@links"] == {}
    assert result["@links"] == {}
    assert result["@schema"]["componentResults"]["status"] == (
        "The status of the execution of this Component"
    )


def test_run_response_gets_session_url_and_details_link(relinker: ResponseRelinker) -> None:
    result = relinker.relink_run_workflow_response(
        {"sessionId": "s9", "sessionMode": "TEST", "sessionStatus": "RUNNING"}, "wf-1"
    )

    assert result["sessionUrl"] == f"{APP_URL}/project/logs/progress_view/wf-1/s9?test=true"
    assert result["@links"] == {
        "session-details": {"name": "get-session", "arguments": {"sessionId": "s9"}}
    }


def test_prod_run_response_links_to_live_view(relinker: ResponseRelinker) -> None:
    result = relinker.relink_run_workflow_response({"sessionId": "s9"}, "wf-1")

    assert result["sessionUrl"].endswith("/wf-1/s9?test=false")


def test_default_app_url_matches_gateway_settings() -> None:
    relinker = ResponseRelinker(SchemaResolver(load_schema_document()))

    result = relinker.relink_run_workflow_response({"sessionId": "s9"}, "wf-1")

    assert result["sessionUrl"].startswith(f"{GatewaySettings().app_url}/project/logs/")


def test_table_details_links_offer_column_operations(relinker: ResponseRelinker) -> None:
    raw = {
        "tableId": "t1",
        "name": "Customers",
        "columns": [{"columnName": "email", "columnType": "varchar"}],
        "_links": {},
    }

    result = relinker.relink_table_details(raw)

    assert result["columns"] == raw["columns"]
    assert result["@links"] == {
        "table-details": {"name": "get-table", "arguments": {"tableId": "t1"}},
        "add-column": {"name": "add-column", "arguments": {"tableId": "t1"}},
        "rename-column": {
            "name": "rename-column",
            "arguments": {
                "tableId": "t1",
                "originalColumnName": "{originalColumnName}",
                "newColumnName": "{newColumnName}",
            },
        },
        "delete-column": {"name": "delete-column", "arguments": {"tableId": "t1"}},
    }
    assert "@schema" in result


def test_table_summary_is_relinked_without_schema(relinker: ResponseRelinker) -> None:
    result = relinker.relink_table_summary({"tableId": "t1", "name": "T", "_links": {}})

    assert result == {
        "tableId": "t1",
        "name": "T",
        "@links": {"table-details": {"name": "get-table", "arguments": {"tableId": "t1"}}},
    }


def test_workflow_version_relinks_tables_and_omits_empty_ones(
    relinker: ResponseRelinker,
) -> None:
    with_tables = relinker.relink_workflow_version(
        {
            "workflowId": "w1",
            "version": 2,
            "tables": [{"tableId": "t1", "name": "T", "_links": {}}],
            "_links": {},
        }
    )
    without_tables = relinker.relink_workflow_version(
        {"workflowId": "w1", "version": 2, "tables": [], "_links": {}}
    )

    assert with_tables["tables"][0]["@links"]["table-details"]["arguments"] == {"tableId": "t1"}
    assert "tables" not in without_tables
    assert list(without_tables["@links"]) == ["prod-sessions", "test-sessions"]


def test_component_edit_status_links_depend_on_progress(relinker: ResponseRelinker) -> None:
    in_progress = relinker.relink_component_edit_status(
        {"sessionId": "e1", "status": "in_progress"}
    )
    finished = relinker.relink_component_edit_status(
        {"sessionId": "e1", "status": "success", "componentId": "c1"}
    )

    assert list(in_progress["@links"]) == ["check-status-again"]
    assert finished["@links"] == {
        "get-workflow": {
            "name": "get-workflow",
            "arguments": {
                "workflowId": "workflow-containing-component",
                "workflowVersion": "PUBLISHED",
            },
        }
    }
    assert "@schema" not in finished


def test_component_edit_response_links_to_status_poll(relinker: ResponseRelinker) -> None:
    result = relinker.relink_component_edit_response({"sessionId": "e1", "status": "started"})

    assert result["@links"] == {
        "check-status": {"name": "get-component-edit-status", "arguments": {"sessionId": "e1"}}
    }


def test_task_page_is_not_page_number_paginated(relinker: ResponseRelinker) -> None:
    raw = {
        "_embedded": [{"taskId": "k1", "name": "Review", "status": "TODO", "_links": {}}],
        "lastTaskToken": "2023-11-15T14:30:00Z:k1",
        "_links": {},
    }

    result = relinker.relink_task_page(raw)

    assert result["lastTaskToken"] == "2023-11-15T14:30:00Z:k1"
    assert result["tasks"][0] == {
        "taskId": "k1",
        "name": "Review",
        "status": "TODO",
        "@links": {},
    }
    assert result["@links"] == {}
    assert "@pageNumber" not in result
    assert "@hasMorePages" not in result


def test_non_objects_are_returned_unchanged(relinker: ResponseRelinker) -> None:
    assert relinker.relink_workflow_page(None) is None
    assert relinker.relink_table_details("deleted") == "deleted"
    assert relinker.relink_session_result([1, 2]) == [1, 2]


def test_malformed_embedded_collection_becomes_empty(relinker: ResponseRelinker) -> None:
    result = relinker.relink_table_page({"_embedded": "oops", "_lastPage": True})

    assert result["tables"] == []


def test_unregistered_kinds_raise(relinker: ResponseRelinker) -> None:
    with pytest.raises(RelinkError, match="entity type: Nope"):
        relinker.relink_entity("Nope", {})
    with pytest.raises(RelinkError, match="collection type: Nope"):
        relinker.relink_page("Nope", {})
