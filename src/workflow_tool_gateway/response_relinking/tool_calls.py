"""Tool-call descriptors used in place of hypermedia links."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

LINKS_KEY = "@links"
PAGE_NUMBER_KEY = "@pageNumber"
HAS_MORE_PAGES_KEY = "@hasMorePages"


@dataclass(frozen=True)
class ToolCall:
    """The next callable action: a tool name plus the arguments to call it with."""

    name: str
    arguments: Mapping[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "arguments": dict(self.arguments)}
