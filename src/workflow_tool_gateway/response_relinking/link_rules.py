"""Declarative link rules per entity type.

Each entity type lists the tool calls an agent may follow from one of its
instances. A rule fires when its predicate holds for the raw entity (which
still carries its ``_links`` capability flags) and the relink context (values
inherited from the enclosing response, such as the owning workflow or session).
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

Entity = Mapping[str, Any]
Context = Mapping[str, Any]
ArgumentBuilder = Callable[[Entity, Context], dict[str, Any]]
Predicate = Callable[[Entity, Context], bool]

UNKNOWN_ID = "unknown"
APP_URL_CONTEXT_KEY = "appUrl"
_SESSIONS_URL_PATTERN = re.compile(r"/v1/workflow/([a-f0-9-]{36})/sessions")


def _always(_entity: Entity, _context: Context) -> bool:
    return True


@dataclass(frozen=True)
class LinkRule:
    """One synthesized link: name, target tool, arguments and firing condition."""

    name: str | Callable[[Entity, Context], str]
    tool: str
    arguments: ArgumentBuilder
    when: Predicate = _always

    def link_name(self, entity: Entity, context: Context) -> str:
        return self.name(entity, context) if callable(self.name) else self.name


@dataclass(frozen=True)
class NestedCollection:
    """A list field whose items are relinked as another entity type."""

    field: str
    kind: str
    inherit: tuple[str, ...] = ()
    omit_empty: bool = False


@dataclass(frozen=True)
class EntityRules:
    """Relinking rules for one entity type."""

    kind: str
    links: tuple[LinkRule, ...] = ()
    nested: tuple[NestedCollection, ...] = ()
    schema_type: str | None = None
    derived: Callable[[Entity, Context], dict[str, Any]] | None = None


@dataclass(frozen=True)
class PageRules:
    """Relinking rules for one paginated collection type."""

    kind: str
    collection_field: str
    item_kind: str
    list_tool: str
    page_arguments: Callable[[Entity, Context, str], dict[str, Any]] = field(
        default=lambda _page, _context, _relation: {}
    )
    context_fields: tuple[str, ...] = ()
    paginated: bool = True
    schema_type: str | None = None


def has_capability(relation: str) -> Predicate:
    """Predicate that holds when the server advertised ``relation`` in ``_links``."""

    def predicate(entity: Entity, _context: Context) -> bool:
        links = entity.get("_links")
        return isinstance(links, Mapping) and bool(links.get(relation))

    return predicate


def link_href(links: Any, relation: str) -> str | None:
    """Return the URL of a hypermedia relation given as a string or ``{"href": ...}``."""
    if not isinstance(links, Mapping):
        return None
    value = links.get(relation)
    if isinstance(value, Mapping):
        value = value.get("href")
    return value if isinstance(value, str) else None


def workflow_id_from_url(url: str | None) -> str:
    """Extract the workflow UUID from a session-list URL, or ``"unknown"``."""
    if not url:
        return UNKNOWN_ID
    match = _SESSIONS_URL_PATTERN.search(url)
    return match.group(1) if match else UNKNOWN_ID


def _workflow_links() -> tuple[LinkRule, ...]:
    return (
        LinkRule(
            "prod-sessions",
            "list-sessions",
            lambda entity, _ctx: {"workflowId": entity.get("workflowId"), "sessionMode": "PROD"},
        ),
        LinkRule(
            "test-sessions",
            "list-sessions",
            lambda entity, _ctx: {"workflowId": entity.get("workflowId"), "sessionMode": "TEST"},
        ),
    )


def _component_action(relation: str, tool: str) -> LinkRule:
    return LinkRule(
        relation,
        tool,
        lambda entity, ctx: {
            "sessionId": ctx.get("sessionId"),
            "componentId": entity.get("componentId"),
            "threadId": entity.get("thread"),
        },
        when=has_capability(relation),
    )


def _table_details_link() -> LinkRule:
    return LinkRule(
        "table-details", "get-table", lambda entity, _ctx: {"tableId": entity.get("tableId")}
    )


def _session_url(entity: Entity, context: Context) -> dict[str, Any]:
    app_url = str(context.get(APP_URL_CONTEXT_KEY, "")).rstrip("/")
    is_test = "true" if entity.get("sessionMode") == "TEST" else "false"
    return {
        "sessionUrl": (
            f"{app_url}/project/logs/progress_view/"
            f"{context.get('workflowId')}/{entity.get('sessionId')}?test={is_test}"
        )
    }


def _session_page_arguments(page: Entity, _context: Context, relation: str) -> dict[str, Any]:
    links = page.get("_links")
    url = link_href(links, relation) or link_href(links, "self")
    return {"workflowId": workflow_id_from_url(url)}


ENTITY_RULES: Mapping[str, EntityRules] = {
    rules.kind: rules
    for rules in (
        EntityRules(
            kind="WorkflowSummary",
            links=(
                LinkRule(
                    "published-workflow-details",
                    "get-workflow",
                    lambda entity, _ctx: {
                        "workflowId": entity.get("workflowId"),
                        "workflowVersion": "PUBLISHED",
                    },
                    when=lambda entity, _ctx: bool(entity.get("published")),
                ),
                LinkRule(
                    "draft-workflow-details",
                    "get-workflow",
                    lambda entity, _ctx: {
                        "workflowId": entity.get("workflowId"),
                        "workflowVersion": "DRAFT",
                    },
                ),
                *_workflow_links(),
            ),
            schema_type="WorkflowSummary",
        ),
        EntityRules(
            kind="WorkflowHistory",
            links=(
                LinkRule(
                    lambda entity, _ctx: f"version-{entity.get('version')}-details",
                    "get-workflow",
                    lambda entity, ctx: {
                        "workflowId": ctx.get("workflowId"),
                        "workflowVersion": entity.get("version"),
                    },
                ),
            ),
            schema_type="WorkflowHistory",
        ),
        EntityRules(
            kind="WorkflowVersionDetails",
            links=_workflow_links(),
            nested=(NestedCollection("tables", "TableSummary", omit_empty=True),),
            schema_type="WorkflowVersionDetails",
        ),
        EntityRules(
            kind="RunWorkflowResponse",
            links=(
                LinkRule(
                    "session-details",
                    "get-session",
                    lambda entity, _ctx: {"sessionId": entity.get("sessionId")},
                    when=lambda entity, _ctx: bool(entity.get("sessionId")),
                ),
            ),
            schema_type="RunWorkflowResponse",
            derived=_session_url,
        ),
        EntityRules(
            kind="SessionSummary",
            links=(
                LinkRule(
                    "details",
                    "get-session",
                    lambda entity, _ctx: {"sessionId": entity.get("sessionId")},
                ),
            ),
            schema_type="SessionSummary",
        ),
        EntityRules(
            kind="SessionResult",
            nested=(
                NestedCollection("componentResults", "ComponentResult", inherit=("sessionId",)),
            ),
            schema_type="SessionResult",
        ),
        EntityRules(
            kind="ComponentResult",
            links=(
                _component_action("terminateComponent", "terminate-component"),
                _component_action("retryFailedComponent", "retry-failed-component"),
            ),
            schema_type="ComponentResult",
        ),
        EntityRules(
            kind="TableSummary",
            links=(_table_details_link(),),
            schema_type="TableSummary",
        ),
        EntityRules(
            kind="TableDetails",
            links=(
                _table_details_link(),
                LinkRule(
                    "add-column",
                    "add-column",
                    lambda entity, _ctx: {"tableId": entity.get("tableId")},
                ),
                LinkRule(
                    "rename-column",
                    "rename-column",
                    lambda entity, _ctx: {
                        "tableId": entity.get("tableId"),
                        "originalColumnName": "{originalColumnName}",
                        "newColumnName": "{newColumnName}",
                    },
                ),
                LinkRule(
                    "delete-column",
                    "delete-column",
                    lambda entity, _ctx: {"tableId": entity.get("tableId")},
                ),
            ),
            schema_type="TableDetails",
        ),
        EntityRules(
            kind="ComponentEditResponse",
            links=(
                LinkRule(
                    "check-status",
                    "get-component-edit-status",
                    lambda entity, _ctx: {"sessionId": entity.get("sessionId")},
                    when=lambda entity, _ctx: bool(entity.get("sessionId")),
                ),
            ),
        ),
        EntityRules(
            kind="ComponentEditStatus",
            links=(
                LinkRule(
                    "check-status-again",
                    "get-component-edit-status",
                    lambda entity, _ctx: {"sessionId": entity.get("sessionId")},
                    when=lambda entity, _ctx: (
                        entity.get("status") == "in_progress" and bool(entity.get("sessionId"))
                    ),
                ),
                LinkRule(
                    "get-workflow",
                    "get-workflow",
                    lambda _entity, _ctx: {
                        "workflowId": "workflow-containing-component",
                        "workflowVersion": "PUBLISHED",
                    },
                    when=lambda entity, _ctx: bool(entity.get("componentId")),
                ),
            ),
        ),
        EntityRules(kind="FormSummary", schema_type="FormSummary"),
        EntityRules(kind="TaskSummary", schema_type="TaskSummary"),
    )
}


PAGE_RULES: Mapping[str, PageRules] = {
    rules.kind: rules
    for rules in (
        PageRules(
            kind="PageOfWorkflowSummary",
            collection_field="workflows",
            item_kind="WorkflowSummary",
            list_tool="list-workflows",
            schema_type="PageOfWorkflowSummary",
        ),
        PageRules(
            kind="PageOfWorkflowHistory",
            collection_field="history",
            item_kind="WorkflowHistory",
            list_tool="get-workflow-history",
            page_arguments=lambda _page, ctx, _relation: {"workflowId": ctx.get("workflowId")},
            context_fields=("workflowId",),
            schema_type="PageOfWorkflowHistory",
        ),
        PageRules(
            kind="PageOfSessionSummary",
            collection_field="session",
            item_kind="SessionSummary",
            list_tool="list-sessions",
            page_arguments=_session_page_arguments,
            schema_type="PageOfSessionSummary",
        ),
        PageRules(
            kind="PageOfTableSummary",
            collection_field="tables",
            item_kind="TableSummary",
            list_tool="list-tables",
            schema_type="PageOfTableSummary",
        ),
        PageRules(
            kind="PageOfFormSummary",
            collection_field="forms",
            item_kind="FormSummary",
            list_tool="list-forms",
            schema_type="PageOfFormSummary",
        ),
        PageRules(
            kind="PageOfTaskSummary",
            collection_field="tasks",
            item_kind="TaskSummary",
            list_tool="list-tasks",
            paginated=False,
            schema_type="PageOfTaskSummary",
        ),
    )
}
