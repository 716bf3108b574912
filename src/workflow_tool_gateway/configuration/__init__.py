"""Configuration domain exports."""

from .config_scaffold_builder import (
    DEFAULT_CONFIG_FILENAME,
    build_placeholder_configuration,
    write_placeholder_configuration,
)
from .credentials import (
    API_KEY_HEADER,
    credential_headers,
    has_credentials,
    header_value,
    mask_secret,
)
from .loader import ConfigurationError, load_configuration
from .runtime_settings import GatewaySettings

__all__ = [
    "API_KEY_HEADER",
    "ConfigurationError",
    "DEFAULT_CONFIG_FILENAME",
    "GatewaySettings",
    "build_placeholder_configuration",
    "credential_headers",
    "has_credentials",
    "header_value",
    "load_configuration",
    "mask_secret",
    "write_placeholder_configuration",
]
