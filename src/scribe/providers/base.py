"""Model transport interface and data classes.

The agent talks to the hosted model through the ``ModelTransport``
protocol: hand it the conversation and the exported tool schemas, get
back the model's content blocks. Data classes are immutable where
possible (frozen dataclasses with slots).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from scribe.conversation import TextBlock, ToolUseBlock, Turn


@dataclass(frozen=True, slots=True)
class TokenUsage:
    """Token counts from a single model call."""

    input_tokens: int
    output_tokens: int
    cache_read_tokens: int = 0
    cache_write_tokens: int = 0


@dataclass(slots=True)
class ModelResponse:
    """Complete response from a model call."""

    content: list[TextBlock | ToolUseBlock]
    model_id: str
    usage: TokenUsage
    stop_reason: str  # "end_turn", "max_tokens", "tool_use"
    latency_ms: float

    @property
    def tool_uses(self) -> list[ToolUseBlock]:
        from scribe.conversation import ToolUseBlock

        return [b for b in self.content if isinstance(b, ToolUseBlock)]


@runtime_checkable
class ModelTransport(Protocol):
    """Protocol that every model transport must satisfy.

    Transports are stateless: they hold connection config but no
    conversation state. The agent owns the conversation.
    """

    @property
    def provider_id(self) -> str:
        """Unique identifier for this transport (e.g. 'anthropic')."""
        ...

    async def send(
        self,
        conversation: Sequence[Turn],
        tools: list[dict[str, Any]],
    ) -> ModelResponse:
        """Send the full conversation and wait for the complete response.

        Args:
            conversation: Every turn so far, oldest first.
            tools: Exported tool schemas (``ToolDescriptor.to_param()``).

        Raises ProviderError on failure.
        """
        ...
