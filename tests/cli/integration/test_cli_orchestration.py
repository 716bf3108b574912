"""CLI orchestration integration tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner
from workflow_tool_gateway import cli as cli_module
from workflow_tool_gateway.cli import cli
from workflow_tool_gateway.configuration import GatewaySettings


class _FakeServer:
    def __init__(self) -> None:
        self.ran = False

    def run(self) -> None:
        self.ran = True


def test_serve_builds_server_from_configuration(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    config_path = tmp_path / "gateway.yaml"
    config_path.write_text("gateway:\n  timeout_seconds: 5\n", encoding="utf-8")
    built: list[GatewaySettings] = []
    server = _FakeServer()

    def fake_build_server(settings: GatewaySettings) -> _FakeServer:
        built.append(settings)
        return server

    monkeypatch.setattr(cli_module, "build_server", fake_build_server)
    monkeypatch.setenv("W86_API_KEY", "env-key")

    result = CliRunner().invoke(
        cli, ["serve", "--config", str(config_path), "--log-level", "debug"]
    )

    assert result.exit_code == 0, result.output
    assert server.ran
    assert built[0].timeout_seconds == 5
    assert built[0].api_key == "env-key"


def test_generate_config_command_writes_default_file(tmp_path: Path) -> None:
    runner = CliRunner()

    with runner.isolated_filesystem(temp_dir=tmp_path):
        result = runner.invoke(cli, ["generate-config"])

        output_path = Path("gateway.yaml").resolve()
        assert result.exit_code == 0
        assert output_path.exists()
        assert "gateway:" in output_path.read_text(encoding="utf-8")
        assert str(output_path) in result.output


def test_generate_config_command_refuses_to_overwrite(tmp_path: Path) -> None:
    output_path = tmp_path / "gateway.yaml"
    output_path.write_text("already-there", encoding="utf-8")

    result = CliRunner().invoke(cli, ["generate-config", "--output", str(output_path)])

    assert result.exit_code != 0
    assert "already exists" in str(result.exception).lower()
    assert output_path.read_text(encoding="utf-8") == "already-there"


def test_describe_schema_prints_metadata() -> None:
    result = CliRunner().invoke(cli, ["describe-schema", "PageOfTableSummary"])

    assert result.exit_code == 0
    assert json.loads(result.output) == {
        "@schema": {
            "tables": {
                "tableId": "UUID identifier of the table",
                "name": "The name of the table",
            }
        }
    }


def test_describe_schema_reads_custom_document(tmp_path: Path) -> None:
    schema_path = tmp_path / "schemas.yaml"
    schema_path.write_text(
        "Widget:\n  type: object\n  properties:\n    size:\n      description: Widget size\n",
        encoding="utf-8",
    )

    result = CliRunner().invoke(cli, ["describe-schema", "Widget", "--schema", str(schema_path)])

    assert result.exit_code == 0
    assert json.loads(result.output) == {"@schema": {"size": "Widget size"}}


def test_relink_command_relinks_saved_history_page(tmp_path: Path) -> None:
    raw: dict[str, Any] = {
        "_embedded": [{"version": 1, "status": "PUBLISHED", "_links": {}}],
        "_pageNumber": 0,
        "_lastPage": True,
        "_links": {},
    }
    input_path = tmp_path / "history.json"
    input_path.write_text(json.dumps(raw), encoding="utf-8")

    result = CliRunner().invoke(
        cli, ["relink", "PageOfWorkflowHistory", str(input_path), "--workflow-id", "w1"]
    )

    assert result.exit_code == 0
    relinked = json.loads(result.output)
    assert relinked["workflowId"] == "w1"
    assert relinked["history"][0]["@links"]["version-1-details"]["arguments"] == {
        "workflowId": "w1",
        "workflowVersion": 1,
    }
    assert relinked["@links"] == {}


def test_relink_command_uses_app_url_for_run_responses(tmp_path: Path) -> None:
    input_path = tmp_path / "run.json"
    input_path.write_text(json.dumps({"sessionId": "s1"}), encoding="utf-8")

    result = CliRunner().invoke(
        cli,
        [
            "relink",
            "RunWorkflowResponse",
            str(input_path),
            "--workflow-id",
            "w1",
            "--app-url",
            "https://eu.example.com",
        ],
    )

    assert result.exit_code == 0
    relinked = json.loads(result.output)
    assert relinked["sessionUrl"] == (
        "https://eu.example.com/project/logs/progress_view/w1/s1?test=false"
    )
