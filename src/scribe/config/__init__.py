"""Configuration loading and validation."""

from scribe.config.loader import load_config
from scribe.config.schema import (
    GeneralConfig,
    LoggingConfig,
    ProviderConfig,
    ScribeConfig,
    ToolsConfig,
)

__all__ = [
    "GeneralConfig",
    "LoggingConfig",
    "ProviderConfig",
    "ScribeConfig",
    "ToolsConfig",
    "load_config",
]
