"""Response relinking service.

Turns hypermedia-shaped API responses into agent-facing objects: underscore
fields removed, ``_embedded`` renamed to a domain collection field, pagination
exposed as ``@pageNumber``/``@hasMorePages`` and every next action expressed as
a tool call under ``@links``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from workflow_tool_gateway.configuration.runtime_settings import DEFAULT_APP_URL
from workflow_tool_gateway.schema_management import SchemaResolver

from .link_rules import (
    APP_URL_CONTEXT_KEY,
    ENTITY_RULES,
    PAGE_RULES,
    Context,
    EntityRules,
    LinkRule,
    PageRules,
)
from .tool_calls import HAS_MORE_PAGES_KEY, LINKS_KEY, PAGE_NUMBER_KEY, ToolCall


class RelinkError(Exception):
    """Raised when relinking is requested for an unregistered entity or page type."""


def strip_hypermedia(raw: Mapping[str, Any]) -> dict[str, Any]:
    """Shallow copy of ``raw`` without underscore-prefixed hypermedia fields."""
    return {key: value for key, value in raw.items() if not str(key).startswith("_")}


def build_links(
    rules: tuple[LinkRule, ...], entity: Mapping[str, Any], context: Context
) -> dict[str, dict[str, Any]]:
    """Evaluate link rules against one raw entity."""
    links: dict[str, dict[str, Any]] = {}
    for rule in rules:
        if rule.when(entity, context):
            call = ToolCall(rule.tool, rule.arguments(entity, context))
            links[rule.link_name(entity, context)] = call.to_dict()
    return links


def pagination_links(
    rules: PageRules, page: Mapping[str, Any], context: Context
) -> dict[str, dict[str, Any]]:
    """Build previousPage/nextPage tool calls for a page-number paginated response."""
    page_number = page_number_of(page)
    links: dict[str, dict[str, Any]] = {}
    if page_number > 0:
        arguments = rules.page_arguments(page, context, "previousPage")
        links["previousPage"] = ToolCall(
            rules.list_tool, {**arguments, "pageNumber": page_number - 1}
        ).to_dict()
    if not is_last_page(page):
        arguments = rules.page_arguments(page, context, "nextPage")
        links["nextPage"] = ToolCall(
            rules.list_tool, {**arguments, "pageNumber": page_number + 1}
        ).to_dict()
    return links


def page_number_of(page: Mapping[str, Any]) -> int:
    value = page.get("_pageNumber")
    if isinstance(value, bool) or not isinstance(value, int):
        return 0
    return value


def is_last_page(page: Mapping[str, Any]) -> bool:
    return page.get("_lastPage") is True


class ResponseRelinker:
    """Applies the link rule tables to raw responses and attaches schema metadata."""

    def __init__(
        self,
        resolver: SchemaResolver,
        *,
        app_url: str = DEFAULT_APP_URL,
        entity_rules: Mapping[str, EntityRules] | None = None,
        page_rules: Mapping[str, PageRules] | None = None,
    ) -> None:
        self._resolver = resolver
        self._app_url = app_url
        self._entity_rules = ENTITY_RULES if entity_rules is None else entity_rules
        self._page_rules = PAGE_RULES if page_rules is None else page_rules

    @property
    def resolver(self) -> SchemaResolver:
        return self._resolver

    def relink_entity(
        self,
        kind: str,
        raw: Any,
        context: Context | None = None,
        *,
        attach_schema: bool = True,
    ) -> Any:
        """Relink one singular response; non-mapping input is returned unchanged."""
        if not isinstance(raw, Mapping):
            return raw
        rules = self._lookup_entity(kind)
        result = self._relink_item(rules, raw, self._context(context))
        if attach_schema and rules.schema_type:
            return self._resolver.attach_metadata(result, rules.schema_type)
        return result

    def relink_page(
        self,
        kind: str,
        raw: Any,
        context: Context | None = None,
        *,
        attach_schema: bool = True,
    ) -> Any:
        """Relink one paginated collection response."""
        if not isinstance(raw, Mapping):
            return raw
        rules = self._lookup_page(kind)
        item_rules = self._lookup_entity(rules.item_kind)
        resolved_context = self._context(context)

        result: dict[str, Any] = {
            name: resolved_context[name]
            for name in rules.context_fields
            if name in resolved_context
        }
        result.update(strip_hypermedia(raw))
        items = raw.get("_embedded")
        result[rules.collection_field] = [
            self._relink_item(item_rules, item, resolved_context)
            for item in (items if isinstance(items, list) else [])
        ]
        if rules.paginated:
            result[PAGE_NUMBER_KEY] = page_number_of(raw)
            result[HAS_MORE_PAGES_KEY] = not is_last_page(raw)
            result[LINKS_KEY] = pagination_links(rules, raw, resolved_context)
        else:
            result[LINKS_KEY] = {}

        if attach_schema and rules.schema_type:
            return self._resolver.attach_metadata(
                result, rules.schema_type, rules.collection_field
            )
        return result

    def relink_workflow_page(self, page: Any) -> Any:
        return self.relink_page("PageOfWorkflowSummary", page)

    def relink_workflow_history_page(self, workflow_id: str, page: Any) -> Any:
        return self.relink_page("PageOfWorkflowHistory", page, {"workflowId": workflow_id})

    def relink_workflow_version(self, workflow: Any) -> Any:
        return self.relink_entity("WorkflowVersionDetails", workflow)

    def relink_run_workflow_response(self, response: Any, workflow_id: str) -> Any:
        return self.relink_entity("RunWorkflowResponse", response, {"workflowId": workflow_id})

    def relink_session_page(self, page: Any) -> Any:
        return self.relink_page("PageOfSessionSummary", page)

    def relink_session_result(self, session: Any) -> Any:
        return self.relink_entity("SessionResult", session)

    def relink_table_page(self, page: Any) -> Any:
        return self.relink_page("PageOfTableSummary", page)

    def relink_table_summary(self, table: Any) -> Any:
        return self.relink_entity("TableSummary", table, attach_schema=False)

    def relink_table_details(self, table: Any) -> Any:
        return self.relink_entity("TableDetails", table)

    def relink_component_edit_response(self, response: Any) -> Any:
        return self.relink_entity("ComponentEditResponse", response)

    def relink_component_edit_status(self, response: Any) -> Any:
        return self.relink_entity("ComponentEditStatus", response)

    def relink_form_page(self, page: Any) -> Any:
        return self.relink_page("PageOfFormSummary", page)

    def relink_task_page(self, page: Any) -> Any:
        return self.relink_page("PageOfTaskSummary", page)

    def _relink_item(self, rules: EntityRules, raw: Any, context: Context) -> Any:
        if not isinstance(raw, Mapping):
            return raw
        result = strip_hypermedia(raw)
        for nested in rules.nested:
            children = raw.get(nested.field)
            if nested.omit_empty and not children:
                result.pop(nested.field, None)
                continue
            if not isinstance(children, list):
                continue
            child_rules = self._lookup_entity(nested.kind)
            child_context = {**context, **{name: raw.get(name) for name in nested.inherit}}
            result[nested.field] = [
                self._relink_item(child_rules, child, child_context) for child in children
            ]
        if rules.derived is not None:
            result.update(rules.derived(raw, context))
        result[LINKS_KEY] = build_links(rules.links, raw, context)
        return result

    def _context(self, context: Context | None) -> dict[str, Any]:
        return {APP_URL_CONTEXT_KEY: self._app_url, **(context or {})}

    def _lookup_entity(self, kind: str) -> EntityRules:
        try:
            return self._entity_rules[kind]
        except KeyError:
            raise RelinkError(f"No link rules registered for entity type: {kind}") from None

    def _lookup_page(self, kind: str) -> PageRules:
        try:
            return self._page_rules[kind]
        except KeyError:
            raise RelinkError(f"No page rules registered for collection type: {kind}") from None
