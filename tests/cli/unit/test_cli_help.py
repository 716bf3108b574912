"""CLI smoke tests."""

from click.testing import CliRunner
from workflow_tool_gateway.cli import RELINK_KINDS, cli
from workflow_tool_gateway.response_relinking import ENTITY_RULES, PAGE_RULES


def test_cli_displays_help() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    for command in ("serve", "generate-config", "describe-schema", "relink"):
        assert command in result.output


def test_relink_accepts_every_page_and_entity_kind() -> None:
    result = CliRunner().invoke(cli, ["relink", "--help"])

    assert result.exit_code == 0
    assert {"PageOfWorkflowSummary", "PageOfTaskSummary", "TableDetails"} <= set(RELINK_KINDS)
    assert RELINK_KINDS == sorted({*ENTITY_RULES, *PAGE_RULES})
    assert "--workflow-id" in result.output
