"""Core errors shared by every scribe module."""

from scribe.core.errors import (
    AgentError,
    ConfigError,
    ModelNotFoundError,
    ProviderAuthError,
    ProviderError,
    ProviderOverloadedError,
    ProviderRateLimitError,
    ProviderTimeoutError,
    ScribeError,
    ToolValidationError,
)

__all__ = [
    "AgentError",
    "ConfigError",
    "ModelNotFoundError",
    "ProviderAuthError",
    "ProviderError",
    "ProviderOverloadedError",
    "ProviderRateLimitError",
    "ProviderTimeoutError",
    "ScribeError",
    "ToolValidationError",
]
