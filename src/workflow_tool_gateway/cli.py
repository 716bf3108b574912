"""Command line interface entry point."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click

from workflow_tool_gateway.configuration import (
    DEFAULT_CONFIG_FILENAME,
    ConfigurationError,
    GatewaySettings,
    load_configuration,
    mask_secret,
    write_placeholder_configuration,
)
from workflow_tool_gateway.response_relinking import (
    ENTITY_RULES,
    PAGE_RULES,
    RelinkError,
    ResponseRelinker,
)
from workflow_tool_gateway.schema_management import (
    SchemaError,
    SchemaResolver,
    load_schema_document,
)
from workflow_tool_gateway.tool_dispatch import build_server

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
RELINK_KINDS = sorted({*ENTITY_RULES, *PAGE_RULES})


class CliError(Exception):
    """Custom CLI error."""


def _load_settings(config_path: str | None) -> GatewaySettings:
    try:
        return load_configuration(config_path)
    except ConfigurationError as exc:
        raise CliError(str(exc)) from exc


def _load_resolver(schema_path: str | None) -> SchemaResolver:
    try:
        return SchemaResolver(load_schema_document(schema_path))
    except (SchemaError, OSError) as exc:
        raise CliError(str(exc)) from exc


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="workflow-tool-gateway")
def cli() -> None:
    """Workflow86 tool-call gateway."""


@cli.command(name="serve")
@click.option(
    "--config",
    "config_path",
    required=False,
    type=click.Path(path_type=str),
    help="Optional YAML/JSON gateway configuration file",
)
@click.option(
    "--log-level",
    default="INFO",
    show_default=True,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Logging level for messages written to stderr",
)
def serve(config_path: str | None, log_level: str) -> None:
    """Serve the Workflow86 tools over the MCP stdio transport."""
    logging.basicConfig(stream=sys.stderr, level=log_level.upper(), format=LOG_FORMAT)
    settings = _load_settings(config_path)
    logger.info(
        "Starting gateway for %s (api key %s)", settings.base_url, mask_secret(settings.api_key)
    )
    try:
        server = build_server(settings)
    except SchemaError as exc:
        raise CliError(str(exc)) from exc
    server.run()


@cli.command(name="generate-config")
@click.option(
    "--output",
    "output_path",
    required=False,
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML gateway configuration template to write",
)
def generate_config(output_path: str) -> None:
    """Generate a placeholder YAML gateway configuration with guidance comments."""
    try:
        resolved_output = write_placeholder_configuration(output_path)
    except (FileExistsError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


@cli.command(name="describe-schema")
@click.argument("type_name")
@click.option(
    "--schema",
    "schema_path",
    required=False,
    type=click.Path(path_type=str),
    help="OpenAPI document to read instead of the bundled Workflow86 schemas",
)
@click.option(
    "--embedded-field",
    "embedded_field",
    required=False,
    help="Collection field name to use in place of _embedded",
)
def describe_schema(type_name: str, schema_path: str | None, embedded_field: str | None) -> None:
    """Print the @schema metadata an agent receives for TYPE_NAME."""
    resolver = _load_resolver(schema_path)
    try:
        metadata = resolver.resolve_metadata(type_name, embedded_field)
    except SchemaError as exc:
        raise CliError(str(exc)) from exc
    click.echo(json.dumps(metadata, indent=2, ensure_ascii=False))


@cli.command(name="relink")
@click.argument("kind", type=click.Choice(RELINK_KINDS))
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--workflow-id",
    "workflow_id",
    required=False,
    help="Workflow the response belongs to (history pages and run responses)",
)
@click.option(
    "--schema",
    "schema_path",
    required=False,
    type=click.Path(path_type=str),
    help="OpenAPI document to read instead of the bundled Workflow86 schemas",
)
@click.option(
    "--app-url",
    "app_url",
    default=None,
    help="Workflow86 app URL used for session links",
)
def relink(
    kind: str,
    input_path: Path,
    workflow_id: str | None,
    schema_path: str | None,
    app_url: str | None,
) -> None:
    """Relink a saved raw API response of KIND and print the agent-facing result."""
    try:
        raw = json.loads(input_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise CliError(f"Unable to read {input_path}: {exc}") from exc

    options = {"app_url": app_url} if app_url else {}
    relinker = ResponseRelinker(_load_resolver(schema_path), **options)
    context = {"workflowId": workflow_id} if workflow_id else None
    try:
        if kind in PAGE_RULES:
            result = relinker.relink_page(kind, raw, context)
        else:
            result = relinker.relink_entity(kind, raw, context)
    except (RelinkError, SchemaError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(json.dumps(result, indent=2, ensure_ascii=False))


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=list(argv), standalone_mode=False)
    except CliError as exc:
        click.echo(str(exc), err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
