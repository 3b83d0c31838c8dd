"""Anthropic (Claude) provider adapter."""

from __future__ import annotations

import contextlib
import time
from typing import TYPE_CHECKING, Any

import anthropic

from scribe.conversation import TextBlock, ToolUseBlock
from scribe.core.errors import (
    ModelNotFoundError,
    ProviderAuthError,
    ProviderOverloadedError,
    ProviderRateLimitError,
    ProviderTimeoutError,
)
from scribe.providers.base import ModelResponse, TokenUsage

if TYPE_CHECKING:
    from collections.abc import Sequence

    from scribe.conversation import Turn

PROVIDER_ID = "anthropic"
DEFAULT_MODEL = "claude-3-5-sonnet-latest"


def _map_error(e: anthropic.APIError) -> Exception:
    """Map Anthropic SDK errors to scribe's error hierarchy."""
    if isinstance(e, anthropic.AuthenticationError):
        return ProviderAuthError(PROVIDER_ID, str(e))
    if isinstance(e, anthropic.RateLimitError):
        retry_after = None
        if hasattr(e, "response") and e.response is not None:
            raw = e.response.headers.get("retry-after")
            if raw is not None:
                with contextlib.suppress(ValueError):
                    retry_after = float(raw)
        return ProviderRateLimitError(PROVIDER_ID, retry_after=retry_after)
    if isinstance(e, anthropic.APITimeoutError):
        return ProviderTimeoutError(PROVIDER_ID, str(e))
    if isinstance(e, anthropic.InternalServerError):
        return ProviderOverloadedError(PROVIDER_ID, str(e))
    if isinstance(e, anthropic.NotFoundError):
        return ModelNotFoundError(PROVIDER_ID, str(e))
    # Fallback for unknown API errors (including connection failures)
    return ProviderOverloadedError(PROVIDER_ID, str(e))


def _build_messages(conversation: Sequence[Turn]) -> list[dict[str, Any]]:
    """Render turns into Anthropic's messages format."""
    return [turn.to_param() for turn in conversation]


def _parse_content(blocks: Sequence[Any]) -> list[TextBlock | ToolUseBlock]:
    """Convert SDK content blocks into conversation blocks, keeping order.

    Block types the agent does not act on (thinking, etc.) are dropped.
    """
    content: list[TextBlock | ToolUseBlock] = []
    for block in blocks:
        block_type = getattr(block, "type", None)
        if block_type == "text":
            content.append(TextBlock(text=block.text))
        elif block_type == "tool_use":
            content.append(
                ToolUseBlock(id=block.id, name=block.name, input=dict(block.input))
            )
    return content


class AnthropicProvider:
    """Model transport for Anthropic's Messages API."""

    def __init__(
        self,
        api_key: str | None = None,
        *,
        model_id: str = DEFAULT_MODEL,
        max_tokens: int = 1024,
        system: str = "",
        base_url: str | None = None,
        timeout: float | None = None,
        client: anthropic.AsyncAnthropic | None = None,
    ) -> None:
        if client is None:
            kwargs: dict[str, Any] = {"api_key": api_key, "max_retries": 0}
            if base_url:
                kwargs["base_url"] = base_url
            if timeout is not None:
                kwargs["timeout"] = timeout
            client = anthropic.AsyncAnthropic(**kwargs)
        self._client = client
        self._model_id = model_id
        self._max_tokens = max_tokens
        self._system = system

    @property
    def provider_id(self) -> str:
        return PROVIDER_ID

    @property
    def model_id(self) -> str:
        return self._model_id

    async def send(
        self,
        conversation: Sequence[Turn],
        tools: list[dict[str, Any]],
    ) -> ModelResponse:
        kwargs: dict[str, Any] = {
            "model": self._model_id,
            "max_tokens": self._max_tokens,
            "messages": _build_messages(conversation),
        }
        if self._system:
            kwargs["system"] = self._system
        if tools:
            kwargs["tools"] = tools

        start = time.monotonic()
        try:
            response = await self._client.messages.create(**kwargs)
        except anthropic.APIError as e:
            raise _map_error(e) from e

        latency_ms = (time.monotonic() - start) * 1000

        usage = TokenUsage(
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
            cache_read_tokens=getattr(response.usage, "cache_read_input_tokens", 0)
            or 0,
            cache_write_tokens=getattr(response.usage, "cache_creation_input_tokens", 0)
            or 0,
        )

        return ModelResponse(
            content=_parse_content(response.content),
            model_id=self._model_id,
            usage=usage,
            stop_reason=response.stop_reason or "end_turn",
            latency_ms=latency_ms,
        )
