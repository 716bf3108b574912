"""Configuration domain entities."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_BASE_URL = "https://rest.workflow86.com"
DEFAULT_APP_URL = "https://app.workflow86.com"
DEFAULT_TIMEOUT_SECONDS = 30


@dataclass(frozen=True)
class GatewaySettings:
    """Connection settings for the Workflow86 REST API."""

    base_url: str = DEFAULT_BASE_URL
    api_key: str | None = None
    headers: Mapping[str, str] = field(default_factory=dict)
    timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS
    app_url: str = DEFAULT_APP_URL
    schema_path: Path | None = None
    config_path: Path | None = None
