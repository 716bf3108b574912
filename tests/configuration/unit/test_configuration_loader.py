"""Configuration loader tests."""

from __future__ import annotations

import json
import re
from pathlib import Path

import pytest
import yaml
from workflow_tool_gateway.configuration.config_scaffold_builder import (
    build_placeholder_configuration,
)
from workflow_tool_gateway.configuration.loader import ConfigurationError, load_configuration


def _write_file(path: Path, contents: str) -> Path:
    path.write_text(contents, encoding="utf-8")
    return path


def test_defaults_apply_without_file_or_environment() -> None:
    settings = load_configuration(environ={})

    assert settings.base_url == "https://rest.workflow86.com"
    assert settings.app_url == "https://app.workflow86.com"
    assert settings.api_key is None
    assert settings.headers == {}
    assert settings.timeout_seconds == 30
    assert settings.schema_path is None
    assert settings.config_path is None


def test_loads_gateway_section_from_yaml(tmp_path: Path) -> None:
    schema_path = _write_file(tmp_path / "schemas.yaml", "Thing:\n  type: string\n")
    config_path = _write_file(
        tmp_path / "gateway.yaml",
        """
gateway:
  base_url: "https://rest.example.com/"
  api_key: "  file-key  "
  headers:
    X-Trace: "on"
  timeout_seconds: 12
  app_url: "https://app.example.com"
  schema_path: "schemas.yaml"
""",
    )

    settings = load_configuration(config_path, environ={})

    assert settings.base_url == "https://rest.example.com"
    assert settings.api_key == "file-key"
    assert settings.headers == {"X-Trace": "on"}
    assert settings.timeout_seconds == 12
    assert settings.app_url == "https://app.example.com"
    assert settings.schema_path == schema_path.resolve()
    assert settings.config_path == config_path


def test_environment_overrides_file_values(tmp_path: Path) -> None:
    config_path = _write_file(
        tmp_path / "gateway.json",
        json.dumps({"gateway": {"base_url": "https://file.example.com", "api_key": "file"}}),
    )

    settings = load_configuration(
        config_path,
        environ={
            "W86_DOMAIN": "https://env.example.com",
            "W86_API_KEY": "env-key",
            "W86_HEADERS": '{"x-api-key": "header-key"}',
            "W86_TIMEOUT_SECONDS": " 45 ",
        },
    )

    assert settings.base_url == "https://env.example.com"
    assert settings.api_key == "env-key"
    assert settings.headers == {"x-api-key": "header-key"}
    assert settings.timeout_seconds == 45


def test_generated_scaffold_loads_with_defaults(tmp_path: Path) -> None:
    config_path = _write_file(tmp_path / "gateway.yaml", build_placeholder_configuration())

    settings = load_configuration(config_path, environ={})

    assert yaml.safe_load(build_placeholder_configuration())["gateway"]["timeout_seconds"] == 30
    assert settings.base_url == "https://rest.workflow86.com"
    assert settings.api_key is None


def test_empty_file_and_section_are_accepted(tmp_path: Path) -> None:
    empty = _write_file(tmp_path / "empty.yaml", "")
    no_section = _write_file(tmp_path / "other.yaml", "gateway:\n")

    assert load_configuration(empty, environ={}).timeout_seconds == 30
    assert load_configuration(no_section, environ={}).timeout_seconds == 30


@pytest.mark.parametrize(
    ("contents", "environ", "message"),
    [
        ("- a list\n", {}, "root must be a mapping"),
        ("gateway: [1, 2]\n", {}, "'gateway' must be a mapping"),
        ("gateway:\n  base_url: ftp://example.com\n", {}, "must be an http(s) URL"),
        ("gateway:\n  base_url: '  '\n", {}, "must not be empty"),
        ("gateway:\n  timeout_seconds: 0\n", {}, "greater than zero"),
        ("gateway:\n  timeout_seconds: true\n", {}, "must be an integer"),
        ("gateway:\n  headers: [a]\n", {}, "mapping of header names"),
        ("gateway:\n  headers:\n    x-api-key: 5\n", {}, "entries must be strings"),
        ("gateway:\n  api_key: 5\n", {}, "api_key must be a string"),
        ("gateway:\n  schema_path: missing.yaml\n", {}, "Schema file not found"),
        ("gateway: {}\n", {"W86_HEADERS": "not json"}, "W86_HEADERS must be a JSON object"),
        ("gateway: {}\n", {"W86_TIMEOUT_SECONDS": "soon"}, "W86_TIMEOUT_SECONDS"),
    ],
)
def test_invalid_configuration_is_rejected(
    tmp_path: Path, contents: str, environ: dict[str, str], message: str
) -> None:
    config_path = _write_file(tmp_path / "gateway.yaml", contents)

    with pytest.raises(ConfigurationError, match=re.escape(message)):
        load_configuration(config_path, environ=environ)


def test_missing_configuration_file_is_reported(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="Configuration file not found"):
        load_configuration(tmp_path / "absent.yaml", environ={})
