"""Schema loading and description resolution service."""

from __future__ import annotations

import json
from collections.abc import Mapping
from importlib import resources
from pathlib import Path
from typing import Any, Literal

import yaml

from .schema_models import (
    ArrayNode,
    EnumNode,
    MapNode,
    ObjectNode,
    RefNode,
    ScalarNode,
    SchemaDocument,
    SchemaNode,
)

BUNDLED_SCHEMA_RESOURCE = "workflow86_schemas.yaml"
EMBEDDED_FIELD = "_embedded"
SCHEMA_KEY = "@schema"

# Output field that replaces _embedded for each page type.
EMBEDDED_FIELD_MAPPING: Mapping[str, str] = {
    "PageOfWorkflowSummary": "workflows",
    "PageOfWorkflowHistory": "history",
    "PageOfSessionSummary": "session",
    "PageOfTableSummary": "tables",
    "PageOfFormSummary": "forms",
    "PageOfTaskSummary": "tasks",
}

DescriptionTree = dict[str, Any]


class SchemaError(Exception):
    """Raised for schema parsing or resolution failures."""


class UnknownSchemaTypeError(SchemaError):
    """Raised when a type name is absent from the schema document."""

    def __init__(self, type_name: str) -> None:
        super().__init__(f"Unknown schema type: {type_name}")
        self.type_name = type_name


def parse_schema_node(raw: Any) -> SchemaNode:
    """Convert one JSON-Schema fragment into its tagged node variant."""
    if not isinstance(raw, Mapping):
        raise SchemaError("Schema nodes must be objects.")

    description = raw.get("description")
    if description is not None and not isinstance(description, str):
        raise SchemaError("Schema descriptions must be strings.")
    example = raw.get("example")
    node_type = raw.get("type")

    if "$ref" in raw:
        ref = raw["$ref"]
        if not isinstance(ref, str) or not ref.strip():
            raise SchemaError("$ref must be a non-empty string.")
        return RefNode(ref=ref, description=description, example=example)
    if "enum" in raw:
        values = raw["enum"]
        if not isinstance(values, list):
            raise SchemaError("enum must be a list of literals.")
        return EnumNode(
            values=tuple(values), type=node_type, description=description, example=example
        )
    if node_type == "array":
        items = raw.get("items")
        return ArrayNode(
            items=parse_schema_node(items) if items is not None else None,
            description=description,
            example=example,
        )

    properties = raw.get("properties")
    additional = raw.get("additionalProperties")
    if isinstance(additional, Mapping) and (properties is None or "properties" in additional):
        return MapNode(
            additional_properties=parse_schema_node(additional),
            description=description,
            example=example,
        )
    if properties is not None:
        if not isinstance(properties, Mapping):
            raise SchemaError("properties must be a mapping.")
        return ObjectNode(
            properties={
                str(name): parse_schema_node(child) for name, child in properties.items()
            },
            description=description,
            example=example,
        )
    return ScalarNode(
        type=node_type if isinstance(node_type, str) else None,
        format=raw.get("format"),
        description=description,
        example=example,
    )


def build_schema_document(raw: Any, *, source: str | None = None) -> SchemaDocument:
    """Build a document from a parsed OpenAPI file or a bare type mapping."""
    if not isinstance(raw, Mapping):
        raise SchemaError("Schema document root must be a mapping.")
    components = raw.get("components")
    schemas = components.get("schemas") if isinstance(components, Mapping) else raw
    if not isinstance(schemas, Mapping) or not schemas:
        raise SchemaError("Schema document does not define any schemas.")
    types = {str(name): parse_schema_node(node) for name, node in schemas.items()}
    return SchemaDocument(types=types, source=source)


def load_schema_document(path: Path | str | None = None) -> SchemaDocument:
    """Load a YAML/JSON schema document, defaulting to the bundled API schemas."""
    if path is None:
        resource = resources.files(__package__).joinpath(BUNDLED_SCHEMA_RESOURCE)
        text = resource.read_text(encoding="utf-8")
        source = BUNDLED_SCHEMA_RESOURCE
    else:
        schema_path = Path(path)
        if not schema_path.exists():
            raise SchemaError(f"Schema file not found: {schema_path}")
        text = schema_path.read_text(encoding="utf-8")
        source = str(schema_path)

    try:
        raw = json.loads(text) if source.endswith(".json") else yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise SchemaError(f"Invalid schema document {source}: {exc}") from exc
    return build_schema_document(raw, source=source)


class SchemaResolver:
    """Resolves named types and schema fragments into field description trees."""

    def __init__(self, document: SchemaDocument) -> None:
        self._document = document

    @property
    def document(self) -> SchemaDocument:
        return self._document

    def resolve_type(self, type_name: str) -> SchemaNode:
        """Return the schema node registered under ``type_name``."""
        try:
            return self._document[type_name]
        except KeyError:
            raise UnknownSchemaTypeError(type_name) from None

    def describe_properties(self, node: SchemaNode | Mapping[str, Any]) -> DescriptionTree:
        """Build the sparse description tree for the properties of ``node``."""
        return self._describe(_as_node(node), visiting=())

    def resolve_metadata(
        self,
        schema: str | SchemaNode | Mapping[str, Any],
        embedded_field_name: str | None = None,
    ) -> dict[str, DescriptionTree]:
        """Return ``{"@schema": tree}`` with _embedded renamed to its output field."""
        if isinstance(schema, str):
            node = self.resolve_type(schema)
            visiting: tuple[str, ...] = (schema,)
            embedded_field_name = embedded_field_name or EMBEDDED_FIELD_MAPPING.get(schema)
        else:
            node = _as_node(schema)
            visiting = ()

        tree = self._describe(node, visiting=visiting)
        if embedded_field_name and EMBEDDED_FIELD in tree:
            tree[embedded_field_name] = tree.pop(EMBEDDED_FIELD)
        return {SCHEMA_KEY: tree}

    def attach_metadata(
        self,
        obj: Any,
        schema: str | SchemaNode | Mapping[str, Any],
        embedded_field_name: str | None = None,
    ) -> Any:
        """Return a shallow copy of ``obj`` carrying ``@schema``; non-objects pass through."""
        if not isinstance(obj, Mapping):
            return obj
        return {**obj, **self.resolve_metadata(schema, embedded_field_name)}

    def describe_type(self, type_name: str) -> str:
        """Return the top-level description of a named type."""
        return self.resolve_type(type_name).description or ""

    def describe_property(
        self, type_name: str, property_name: str, *, with_example: bool = False
    ) -> str:
        """Return a property description, optionally followed by its example."""
        node = self.resolve_type(type_name)
        if not isinstance(node, ObjectNode) or property_name not in node.properties:
            return ""
        prop = node.properties[property_name]
        description = prop.description or ""
        if not with_example or prop.example is None:
            return description
        example = prop.example
        rendered = json.dumps(example, indent=2) if isinstance(example, (dict, list)) else example
        return f"{description}\nExample: {rendered}"

    def property_node(self, type_name: str, property_name: str) -> SchemaNode:
        """Return the schema node of one property of a named object type."""
        node = self.resolve_type(type_name)
        if not isinstance(node, ObjectNode) or property_name not in node.properties:
            raise SchemaError(f"{type_name} has no property named {property_name}.")
        return node.properties[property_name]

    def _describe(self, node: SchemaNode, *, visiting: tuple[str, ...]) -> DescriptionTree:
        if isinstance(node, RefNode):
            return self._expand_ref(node, visiting=visiting)
        if not isinstance(node, ObjectNode):
            return {}
        descriptions: DescriptionTree = {}
        for name, prop in node.properties.items():
            if "_" in name and name != EMBEDDED_FIELD:
                continue
            value = self._describe_property(prop, visiting=visiting)
            if value:
                descriptions[name] = value
        return descriptions

    def _describe_property(
        self, prop: SchemaNode, *, visiting: tuple[str, ...]
    ) -> str | DescriptionTree | None:
        match prop:
            case RefNode():
                return self._describe_ref(prop, visiting=visiting)
            case ArrayNode(items=RefNode() as items):
                return self._expand_ref(items, visiting=visiting)
            case ArrayNode(items=ObjectNode() as items):
                return self._describe(items, visiting=visiting)
            case MapNode(additional_properties=ObjectNode() as values):
                return self._describe(values, visiting=visiting)
            case ObjectNode():
                return self._describe(prop, visiting=visiting)
            case ArrayNode() | MapNode() | EnumNode() | ScalarNode():
                return prop.description
        raise SchemaError(f"Unsupported schema node: {prop!r}")

    def _describe_ref(self, ref: RefNode, *, visiting: tuple[str, ...]) -> str | DescriptionTree:
        target = self.resolve_type(ref.type_name)
        nested = self._expand_ref(ref, visiting=visiting)
        if not nested and target.description:
            return target.description
        return nested

    def _expand_ref(self, ref: RefNode, *, visiting: tuple[str, ...]) -> DescriptionTree:
        type_name = ref.type_name
        target = self.resolve_type(type_name)
        if type_name in visiting:
            return {}
        return self._describe(target, visiting=(*visiting, type_name))


def input_contract(node: SchemaNode) -> tuple[Any, str | None]:
    """Map a scalar or enum schema node onto a Python annotation and description."""
    match node:
        case EnumNode(values=values):
            return Literal[values], node.description  # type: ignore[valid-type]
        case ScalarNode(type="string") | ScalarNode(type=None):
            return str, node.description
        case ScalarNode(type="integer"):
            return int, node.description
        case ScalarNode(type="number"):
            return float, node.description
        case ScalarNode(type="boolean"):
            return bool, node.description
    raise SchemaError(f"Arrays and objects must be mapped to tool inputs manually: {node!r}")


def _as_node(schema: SchemaNode | Mapping[str, Any]) -> SchemaNode:
    if isinstance(schema, (RefNode, ArrayNode, ObjectNode, MapNode, EnumNode, ScalarNode)):
        return schema
    return parse_schema_node(schema)
