"""Schema management exports."""

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
from .schema_resolution import (
    EMBEDDED_FIELD_MAPPING,
    SCHEMA_KEY,
    DescriptionTree,
    SchemaError,
    SchemaResolver,
    UnknownSchemaTypeError,
    build_schema_document,
    input_contract,
    load_schema_document,
    parse_schema_node,
)

__all__ = [
    "ArrayNode",
    "DescriptionTree",
    "EMBEDDED_FIELD_MAPPING",
    "EnumNode",
    "MapNode",
    "ObjectNode",
    "RefNode",
    "SCHEMA_KEY",
    "ScalarNode",
    "SchemaDocument",
    "SchemaError",
    "SchemaNode",
    "SchemaResolver",
    "UnknownSchemaTypeError",
    "build_schema_document",
    "input_contract",
    "load_schema_document",
    "parse_schema_node",
]
