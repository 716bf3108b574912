"""Shared tool input annotations."""

from typing import Annotated, Any

from pydantic import Field

from workflow_tool_gateway.schema_management import SchemaResolver, input_contract

PageNumber = Annotated[
    int, Field(ge=0, description="The zero-indexed page number of the response data")
]


def schema_input(resolver: SchemaResolver, type_name: str, property_name: str) -> Any:
    """Annotated input type derived from a scalar or enum property of a schema type."""
    annotation, description = input_contract(resolver.property_node(type_name, property_name))
    return Annotated[annotation, Field(description=description or "")]


def empty_page_message(page_number: int, first_page: str, later_page: str) -> str:
    return first_page if page_number == 0 else later_page


def schema_field(
    resolver: SchemaResolver, type_name: str, property_name: str, *, with_example: bool = False
) -> Any:
    """Pydantic field carrying a schema property's resolved description."""
    return Field(
        description=resolver.describe_property(
            type_name, property_name, with_example=with_example
        )
    )
