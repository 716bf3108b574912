"""Configuration scaffold builder tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from workflow_tool_gateway.configuration.config_scaffold_builder import (
    build_placeholder_configuration,
    write_placeholder_configuration,
)


def test_build_placeholder_configuration_documents_every_setting() -> None:
    scaffold = build_placeholder_configuration()

    assert "gateway:" in scaffold
    assert "base_url:" in scaffold
    assert "# api_key:" in scaffold
    assert "timeout_seconds:" in scaffold
    assert "app_url:" in scaffold
    assert "# schema_path:" in scaffold
    assert "W86_API_KEY" in scaffold
    assert "<OPTIONAL>" in scaffold


def test_write_placeholder_configuration_writes_file(tmp_path: Path) -> None:
    output_path = tmp_path / "gateway.yaml"

    written_path = write_placeholder_configuration(output_path)

    assert written_path == output_path.resolve()
    assert output_path.read_text(encoding="utf-8") == build_placeholder_configuration()


def test_write_placeholder_configuration_fails_when_file_exists(tmp_path: Path) -> None:
    output_path = tmp_path / "gateway.yaml"
    output_path.write_text("existing", encoding="utf-8")

    with pytest.raises(FileExistsError):
        write_placeholder_configuration(output_path)
    assert output_path.read_text(encoding="utf-8") == "existing"
