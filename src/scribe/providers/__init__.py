"""Model transports."""

from scribe.providers.base import ModelResponse, ModelTransport, TokenUsage

__all__ = [
    "ModelResponse",
    "ModelTransport",
    "TokenUsage",
]
