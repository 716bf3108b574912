"""Table tools."""

from typing import Annotated, get_args

from pydantic import Field

from workflow_tool_gateway.api_client import WorkflowApiClient
from workflow_tool_gateway.response_relinking import ResponseRelinker
from workflow_tool_gateway.schema_management import input_contract

from .dispatcher import ToolDefinition
from .responses import ToolResponse, json_response, text_response
from .tool_inputs import PageNumber, empty_page_message, schema_input
from .workflow_tools import embedded_items

TableToEdit = Annotated[str, Field(description="The UUID identifier of the table to edit")]


def build_table_tools(
    client: WorkflowApiClient, relinker: ResponseRelinker
) -> list[ToolDefinition]:
    resolver = relinker.resolver
    column_type_contract, _ = input_contract(resolver.property_node("ColumnDetails", "columnType"))
    column_types = ", ".join(get_args(column_type_contract))
    columns_description = (
        f"{resolver.describe_property('CreateTableCommand', 'columns')}. "
        f"Each column is an object with columnName and columnType ({column_types})"
    )

    def list_tables(pageNumber: PageNumber = 0) -> ToolResponse:
        response = client.list_tables(page_number=pageNumber)
        if not embedded_items(response):
            return text_response(
                empty_page_message(
                    pageNumber,
                    "There are no tables defined for this client",
                    "This page contains no additional tables",
                )
            )
        return json_response(relinker.relink_table_page(response))

    def get_table(
        tableId: Annotated[
            str, Field(description="The UUID identifier of the table to retrieve")
        ],
    ) -> ToolResponse:
        return json_response(relinker.relink_table_details(client.get_table(tableId)))

    table_name = schema_input(resolver, "CreateTableCommand", "tableName")
    column_name = schema_input(resolver, "CreateColumnCommand", "columnName")
    column_type = schema_input(resolver, "CreateColumnCommand", "columnType")

    def create_table(
        tableName: table_name,  # type: ignore[valid-type]
        columns: Annotated[list[dict[str, str]], Field(description=columns_description)],
    ) -> ToolResponse:
        response = client.create_table(tableName, columns)
        return json_response(relinker.relink_table_details(response))

    def add_column(
        tableId: Annotated[str, Field(description="The UUID identifier of the table to add to")],
        columnName: column_name,  # type: ignore[valid-type]
        columnType: column_type,  # type: ignore[valid-type]
    ) -> ToolResponse:
        response = client.add_column(tableId, columnName, columnType)
        return json_response(relinker.relink_table_details(response))

    def rename_column(
        tableId: TableToEdit,
        originalColumnName: Annotated[
            str, Field(description="The name of the existing column to rename")
        ],
        newColumnName: Annotated[str, Field(description="The new name for the column")],
    ) -> ToolResponse:
        response = client.rename_column(tableId, originalColumnName, newColumnName)
        return json_response(relinker.relink_table_details(response))

    def delete_column(
        tableId: TableToEdit,
        columnName: Annotated[str, Field(description="The name of the column to delete")],
    ) -> ToolResponse:
        response = client.delete_column(tableId, columnName)
        return json_response(relinker.relink_table_details(response))

    return [
        ToolDefinition(
            "list-tables",
            "Get a paginated list of all tables for the authenticated client. Returns table "
            "summaries including table IDs, names, and pagination controls.",
            list_tables,
        ),
        ToolDefinition(
            "get-table",
            "Retrieve detailed information about a specific table including its ID, name, and "
            "complete column definitions.",
            get_table,
        ),
        ToolDefinition(
            "create-table", "Create a new Table with the given name and columns", create_table
        ),
        ToolDefinition("add-column", "Add a column to an existing table.", add_column),
        ToolDefinition("rename-column", "Rename a column in an existing table.", rename_column),
        ToolDefinition("delete-column", "Delete a column from an existing table.", delete_column),
    ]
