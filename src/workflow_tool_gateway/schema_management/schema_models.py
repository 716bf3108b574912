"""Schema management entities."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any, Union


@dataclass(frozen=True)
class RefNode:
    """Pointer to a named type of the schema document."""

    ref: str
    description: str | None = None
    example: Any = None

    @property
    def type_name(self) -> str:
        return self.ref.rsplit("/", 1)[-1]


@dataclass(frozen=True)
class ArrayNode:
    """Array whose element shape is described by ``items``."""

    items: SchemaNode | None
    description: str | None = None
    example: Any = None


@dataclass(frozen=True)
class ObjectNode:
    """Object with declared properties."""

    properties: Mapping[str, SchemaNode]
    description: str | None = None
    example: Any = None


@dataclass(frozen=True)
class MapNode:
    """Object whose values share the ``additionalProperties`` shape."""

    additional_properties: SchemaNode
    description: str | None = None
    example: Any = None


@dataclass(frozen=True)
class EnumNode:
    """Value restricted to an ordered set of literals."""

    values: tuple[Any, ...]
    type: str | None = None
    description: str | None = None
    example: Any = None


@dataclass(frozen=True)
class ScalarNode:
    """Leaf value (string, number, boolean, untyped JSON)."""

    type: str | None = None
    format: str | None = None
    description: str | None = None
    example: Any = None


SchemaNode = Union[RefNode, ArrayNode, ObjectNode, MapNode, EnumNode, ScalarNode]


@dataclass(frozen=True)
class SchemaDocument(Mapping[str, SchemaNode]):
    """Read-only mapping from type name to parsed schema node."""

    types: Mapping[str, SchemaNode] = field(default_factory=dict)
    source: str | None = None

    def __getitem__(self, type_name: str) -> SchemaNode:
        return self.types[type_name]

    def __iter__(self) -> Iterator[str]:
        return iter(self.types)

    def __len__(self) -> int:
        return len(self.types)
