"""Configuration scaffold generation helpers."""

from __future__ import annotations

from pathlib import Path

DEFAULT_CONFIG_FILENAME = "gateway.yaml"

_CONFIG_SCAFFOLD_TEMPLATE = """# Gateway configuration for workflow-tool-gateway.
# Every value may be overridden by the environment:
#   W86_DOMAIN, W86_API_KEY, W86_HEADERS (JSON object), W86_TIMEOUT_SECONDS.
# Replace <OPTIONAL> placeholders only when your setup needs them.

gateway:
  base_url: "https://rest.workflow86.com"
  # Prefer W86_API_KEY over storing the key in this file.
  # api_key: "<OPTIONAL>"
  # Extra request headers; an x-api-key header replaces api_key.
  # headers:
  #   x-api-key: "<OPTIONAL>"
  timeout_seconds: 30
  # Base URL used when linking to session progress views.
  app_url: "https://app.workflow86.com"
  # Alternative schema document (YAML/JSON, OpenAPI components.schemas).
  # schema_path: "<OPTIONAL>"
"""


def build_placeholder_configuration() -> str:
    """Build a YAML gateway configuration template with inline guidance."""
    return _CONFIG_SCAFFOLD_TEMPLATE


def write_placeholder_configuration(output_path: Path | str) -> Path:
    """Write the placeholder configuration template to the requested output path.

    Args:
      output_path: Destination file path for the scaffold.

    Returns:
      The resolved destination path.

    Raises:
      FileExistsError: If the destination file already exists.
      OSError: If writing the scaffold fails.
    """
    destination = Path(output_path)
    if destination.exists():
        raise FileExistsError(f"Configuration file already exists: {destination.resolve()}")
    destination.write_text(build_placeholder_configuration(), encoding="utf-8")
    return destination.resolve()
