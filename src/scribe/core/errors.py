"""Exception hierarchy for scribe.

Every module imports from here. The hierarchy is:

    ScribeError
    ├── ProviderError(provider_id)
    │   ├── ProviderAuthError
    │   ├── ProviderRateLimitError(retry_after)
    │   ├── ProviderTimeoutError
    │   ├── ProviderOverloadedError
    │   └── ModelNotFoundError
    ├── ToolValidationError(tool_name)
    ├── AgentError
    └── ConfigError
"""

from __future__ import annotations


class ScribeError(Exception):
    """Base exception for all scribe errors."""


# ─── Provider Errors ──────────────────────────────────────────


class ProviderError(ScribeError):
    """Base for model transport errors. Fatal to the current run."""

    def __init__(self, provider_id: str, message: str) -> None:
        self.provider_id = provider_id
        super().__init__(f"[{provider_id}] {message}")


class ProviderAuthError(ProviderError):
    """Invalid or missing API key."""


class ProviderRateLimitError(ProviderError):
    """Rate limit exceeded. Includes retry_after if available."""

    def __init__(self, provider_id: str, retry_after: float | None = None) -> None:
        self.retry_after = retry_after
        msg = "Rate limited"
        if retry_after is not None:
            msg += f" (retry after {retry_after}s)"
        super().__init__(provider_id, msg)


class ProviderTimeoutError(ProviderError):
    """Model call timed out."""


class ProviderOverloadedError(ProviderError):
    """Provider is overloaded (529, 503) or failed in an unclassified way."""


class ModelNotFoundError(ProviderError):
    """Requested model not available from this provider."""


# ─── Tool Errors ──────────────────────────────────────────────


class ToolValidationError(ScribeError):
    """A tool was called with arguments it cannot accept.

    Never fatal: the agent reports it back to the model as an error
    tool result.
    """

    def __init__(self, tool_name: str, message: str) -> None:
        self.tool_name = tool_name
        super().__init__(message)


# ─── Agent Errors ─────────────────────────────────────────────


class AgentError(ScribeError):
    """Illegal use of the agent turn loop (e.g. an invalid state transition)."""


# ─── Configuration Errors ─────────────────────────────────────


class ConfigError(ScribeError):
    """Invalid configuration."""
