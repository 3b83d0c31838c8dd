"""Tests for Anthropic provider adapter (mocked SDK)."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import anthropic
import httpx
import pytest

from scribe.conversation import (
    AssistantMessage,
    TextBlock,
    ToolResultBlock,
    ToolUseBlock,
    UserMessage,
)
from scribe.core.errors import (
    ModelNotFoundError,
    ProviderAuthError,
    ProviderOverloadedError,
    ProviderRateLimitError,
    ProviderTimeoutError,
)
from scribe.providers.anthropic import (
    PROVIDER_ID,
    AnthropicProvider,
    _build_messages,
    _map_error,
    _parse_content,
)
from scribe.providers.base import ModelResponse, ModelTransport
from scribe.tools import default_tools

# ─── Helpers ──────────────────────────────────────────────────


def _make_usage(input_tokens: int = 100, output_tokens: int = 50) -> MagicMock:
    usage = MagicMock()
    usage.input_tokens = input_tokens
    usage.output_tokens = output_tokens
    usage.cache_read_input_tokens = 0
    usage.cache_creation_input_tokens = 0
    return usage


def _text_block(text: str) -> MagicMock:
    block = MagicMock()
    block.type = "text"
    block.text = text
    return block


def _tool_use_block(id: str, name: str, input: dict[str, Any]) -> MagicMock:
    block = MagicMock()
    block.type = "tool_use"
    block.id = id
    block.name = name
    block.input = input
    return block


def _make_response(
    content: list[Any] | None = None,
    stop_reason: str = "end_turn",
) -> MagicMock:
    response = MagicMock()
    response.content = content if content is not None else [_text_block("Hello")]
    response.usage = _make_usage()
    response.stop_reason = stop_reason
    return response


def _make_client(response: Any = None) -> MagicMock:
    """Create a mocked AsyncAnthropic client."""
    client = MagicMock(spec=anthropic.AsyncAnthropic)
    client.messages = MagicMock()
    client.messages.create = AsyncMock(return_value=response or _make_response())
    return client


def _http_response(
    status: int, headers: dict[str, str] | None = None
) -> httpx.Response:
    request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
    return httpx.Response(status, headers=headers or {}, request=request)


# ─── Protocol ─────────────────────────────────────────────────


class TestProtocol:
    def test_provider_id(self):
        provider = AnthropicProvider(client=_make_client())
        assert provider.provider_id == PROVIDER_ID

    def test_satisfies_protocol(self):
        provider = AnthropicProvider(client=_make_client())
        assert isinstance(provider, ModelTransport)

    def test_default_model(self):
        provider = AnthropicProvider(client=_make_client())
        assert provider.model_id == "claude-3-5-sonnet-latest"


# ─── Message building ─────────────────────────────────────────


class TestBuildMessages:
    def test_user_and_assistant_turns(self):
        turns = [
            UserMessage(content="list files"),
            AssistantMessage(
                content=(
                    TextBlock(text="Sure."),
                    ToolUseBlock(id="tu-1", name="list_files", input={}),
                )
            ),
            UserMessage(content=(ToolResultBlock(tool_use_id="tu-1", content="{}"),)),
        ]
        assert _build_messages(turns) == [
            {"role": "user", "content": "list files"},
            {
                "role": "assistant",
                "content": [
                    {"type": "text", "text": "Sure."},
                    {
                        "type": "tool_use",
                        "id": "tu-1",
                        "name": "list_files",
                        "input": {},
                    },
                ],
            },
            {
                "role": "user",
                "content": [
                    {"type": "tool_result", "tool_use_id": "tu-1", "content": "{}"}
                ],
            },
        ]

    def test_empty(self):
        assert _build_messages([]) == []


class TestParseContent:
    def test_keeps_order(self):
        blocks = [
            _text_block("first"),
            _tool_use_block("tu-1", "read_file", {"path": "a"}),
            _text_block("second"),
        ]
        assert _parse_content(blocks) == [
            TextBlock(text="first"),
            ToolUseBlock(id="tu-1", name="read_file", input={"path": "a"}),
            TextBlock(text="second"),
        ]

    def test_drops_unknown_blocks(self):
        thinking = MagicMock()
        thinking.type = "thinking"
        assert _parse_content([thinking, _text_block("hi")]) == [TextBlock(text="hi")]


# ─── send ─────────────────────────────────────────────────────


class TestSend:
    async def test_returns_model_response(self):
        provider = AnthropicProvider(client=_make_client())
        response = await provider.send([UserMessage(content="Hi")], [])
        assert isinstance(response, ModelResponse)
        assert response.content == [TextBlock(text="Hello")]
        assert response.usage.input_tokens == 100
        assert response.usage.output_tokens == 50
        assert response.stop_reason == "end_turn"
        assert response.latency_ms >= 0

    async def test_passes_model_settings(self):
        client = _make_client()
        provider = AnthropicProvider(
            client=client, model_id="claude-test", max_tokens=256, system="Be brief."
        )
        await provider.send([UserMessage(content="Hi")], [])
        kwargs = client.messages.create.call_args.kwargs
        assert kwargs["model"] == "claude-test"
        assert kwargs["max_tokens"] == 256
        assert kwargs["system"] == "Be brief."
        assert kwargs["messages"] == [{"role": "user", "content": "Hi"}]

    async def test_omits_empty_system_and_tools(self):
        client = _make_client()
        provider = AnthropicProvider(client=client)
        await provider.send([UserMessage(content="Hi")], [])
        kwargs = client.messages.create.call_args.kwargs
        assert "system" not in kwargs
        assert "tools" not in kwargs

    async def test_passes_tools(self):
        client = _make_client()
        provider = AnthropicProvider(client=client)
        tools = default_tools().to_params()
        await provider.send([UserMessage(content="Hi")], tools)
        kwargs = client.messages.create.call_args.kwargs
        assert [t["name"] for t in kwargs["tools"]] == [
            "read_file",
            "list_files",
            "edit_file",
        ]

    async def test_tool_use_response(self):
        response = _make_response(
            content=[
                _text_block("Reading it."),
                _tool_use_block("tu-1", "read_file", {"path": "main.py"}),
            ],
            stop_reason="tool_use",
        )
        provider = AnthropicProvider(client=_make_client(response))
        result = await provider.send([UserMessage(content="show main.py")], [])
        assert result.stop_reason == "tool_use"
        assert result.tool_uses == [
            ToolUseBlock(id="tu-1", name="read_file", input={"path": "main.py"})
        ]

    async def test_sdk_error_is_mapped(self):
        client = _make_client()
        client.messages.create = AsyncMock(
            side_effect=anthropic.AuthenticationError(
                "invalid x-api-key", response=_http_response(401), body=None
            )
        )
        provider = AnthropicProvider(client=client)
        with pytest.raises(ProviderAuthError) as exc:
            await provider.send([UserMessage(content="Hi")], [])
        assert isinstance(exc.value.__cause__, anthropic.AuthenticationError)

    async def test_non_api_errors_propagate(self):
        client = _make_client()
        client.messages.create = AsyncMock(side_effect=RuntimeError("bug"))
        provider = AnthropicProvider(client=client)
        with pytest.raises(RuntimeError, match="bug"):
            await provider.send([UserMessage(content="Hi")], [])


# ─── Error mapping ────────────────────────────────────────────


class TestMapError:
    def test_auth(self):
        err = anthropic.AuthenticationError(
            "bad", response=_http_response(401), body=None
        )
        assert isinstance(_map_error(err), ProviderAuthError)

    def test_rate_limit_with_retry_after(self):
        err = anthropic.RateLimitError(
            "slow down",
            response=_http_response(429, {"retry-after": "12"}),
            body=None,
        )
        mapped = _map_error(err)
        assert isinstance(mapped, ProviderRateLimitError)
        assert mapped.retry_after == 12.0

    def test_rate_limit_bad_retry_after(self):
        err = anthropic.RateLimitError(
            "slow down",
            response=_http_response(429, {"retry-after": "soon"}),
            body=None,
        )
        mapped = _map_error(err)
        assert isinstance(mapped, ProviderRateLimitError)
        assert mapped.retry_after is None

    def test_timeout(self):
        request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
        err = anthropic.APITimeoutError(request=request)
        assert isinstance(_map_error(err), ProviderTimeoutError)

    def test_server_error(self):
        err = anthropic.InternalServerError(
            "overloaded", response=_http_response(529), body=None
        )
        assert isinstance(_map_error(err), ProviderOverloadedError)

    def test_not_found(self):
        err = anthropic.NotFoundError(
            "no model", response=_http_response(404), body=None
        )
        assert isinstance(_map_error(err), ModelNotFoundError)

    def test_connection_error_falls_back(self):
        request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
        err = anthropic.APIConnectionError(request=request)
        mapped = _map_error(err)
        assert isinstance(mapped, ProviderOverloadedError)
        assert mapped.provider_id == PROVIDER_ID
