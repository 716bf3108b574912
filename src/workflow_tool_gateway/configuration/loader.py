"""Configuration loader service."""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from .runtime_settings import (
    DEFAULT_APP_URL,
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT_SECONDS,
    GatewaySettings,
)

ENV_DOMAIN = "W86_DOMAIN"
ENV_API_KEY = "W86_API_KEY"
ENV_HEADERS = "W86_HEADERS"
ENV_TIMEOUT_SECONDS = "W86_TIMEOUT_SECONDS"


class ConfigurationError(Exception):
    """Raised when the configuration file or environment is invalid."""


def load_configuration(
    config_path: Path | str | None = None,
    environ: Mapping[str, str] | None = None,
) -> GatewaySettings:
    """Load the optional configuration file and apply environment overrides."""
    environ = os.environ if environ is None else environ
    path = Path(config_path) if config_path is not None else None
    section: Mapping[str, Any] = {}
    if path is not None:
        section = _read_gateway_section(path)

    base_url = _require_url(
        environ.get(ENV_DOMAIN) or section.get("base_url", DEFAULT_BASE_URL), "gateway.base_url"
    )
    app_url = _require_url(section.get("app_url", DEFAULT_APP_URL), "gateway.app_url")
    api_key = _optional_string(environ.get(ENV_API_KEY) or section.get("api_key"), "api_key")
    headers = _parse_headers(environ.get(ENV_HEADERS), section.get("headers"))
    timeout_raw: Any = section.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS)
    if environ.get(ENV_TIMEOUT_SECONDS):
        timeout_raw = _parse_int(environ[ENV_TIMEOUT_SECONDS], ENV_TIMEOUT_SECONDS)
    timeout_seconds = _require_positive_int(timeout_raw, "gateway.timeout_seconds")

    schema_path = None
    schema_value = _optional_string(section.get("schema_path"), "gateway.schema_path")
    if schema_value:
        base_path = path.parent if path is not None else Path.cwd()
        schema_path = _resolve_path(base_path, schema_value)
        if not schema_path.exists():
            raise ConfigurationError(f"Schema file not found: {schema_path}")

    return GatewaySettings(
        base_url=base_url,
        api_key=api_key,
        headers=headers,
        timeout_seconds=timeout_seconds,
        app_url=app_url,
        schema_path=schema_path,
        config_path=path,
    )


def _read_gateway_section(path: Path) -> Mapping[str, Any]:
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:  # pragma: no cover - exercised indirectly
        raise ConfigurationError(f"Failed to parse configuration file: {exc}") from exc

    if parsed is None:
        parsed = {}
    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Configuration root must be a mapping.")

    section = parsed.get("gateway", {})
    if section is None:
        return {}
    if not isinstance(section, Mapping):
        raise ConfigurationError("Configuration section 'gateway' must be a mapping.")
    return section


def _parse_headers(env_value: str | None, file_value: Any) -> dict[str, str]:
    if env_value:
        try:
            parsed = json.loads(env_value)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"{ENV_HEADERS} must be a JSON object: {exc}") from exc
        return _require_string_mapping(parsed, ENV_HEADERS)
    if file_value is None:
        return {}
    return _require_string_mapping(file_value, "gateway.headers")


def _require_string_mapping(value: Any, field_name: str) -> dict[str, str]:
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"{field_name} must be a mapping of header names to values.")
    headers: dict[str, str] = {}
    for key, item in value.items():
        if not isinstance(key, str) or not isinstance(item, str):
            raise ConfigurationError(f"{field_name} entries must be strings.")
        headers[key] = item
    return headers


def _require_url(value: Any, field_name: str) -> str:
    url = _require_non_empty_string(value, field_name)
    if not url.startswith(("http://", "https://")):
        raise ConfigurationError(f"{field_name} must be an http(s) URL.")
    return url.rstrip("/")


def _parse_int(value: str, field_name: str) -> int:
    try:
        return int(value.strip())
    except ValueError as exc:
        raise ConfigurationError(f"{field_name} must be an integer.") from exc


def _resolve_path(base_path: Path, raw_path: str) -> Path:
    candidate = Path(raw_path)
    if not candidate.is_absolute():
        return (base_path / candidate).resolve()
    return candidate


def _require_non_empty_string(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    if not stripped:
        raise ConfigurationError(f"{field_name} must not be empty.")
    return stripped


def _optional_string(value: Any, field_name: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    return stripped or None


def _require_positive_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if value <= 0:
        raise ConfigurationError(f"{field_name} must be greater than zero.")
    return value
