"""Response relinking exports."""

from .link_rules import (
    ENTITY_RULES,
    PAGE_RULES,
    EntityRules,
    LinkRule,
    NestedCollection,
    PageRules,
    has_capability,
    link_href,
    workflow_id_from_url,
)
from .relinker import (
    RelinkError,
    ResponseRelinker,
    build_links,
    pagination_links,
    strip_hypermedia,
)
from .tool_calls import HAS_MORE_PAGES_KEY, LINKS_KEY, PAGE_NUMBER_KEY, ToolCall

__all__ = [
    "ENTITY_RULES",
    "EntityRules",
    "HAS_MORE_PAGES_KEY",
    "LINKS_KEY",
    "LinkRule",
    "NestedCollection",
    "PAGE_NUMBER_KEY",
    "PAGE_RULES",
    "PageRules",
    "RelinkError",
    "ResponseRelinker",
    "ToolCall",
    "build_links",
    "has_capability",
    "link_href",
    "pagination_links",
    "strip_hypermedia",
    "workflow_id_from_url",
]
