"""Agent turn loop - user input, model calls, tool dispatch.

The agent owns the conversation and the tool registry. Each model
response is processed block by block: text is shown, tool uses are
dispatched in order, and their results go back to the model as one
user turn without prompting the user. A response with no tool uses
hands control back to the user.

Tool failures are data: they reach the model as error tool results.
Only transport errors and unexpected faults end the run.
"""

from __future__ import annotations

import enum
import json
import logging
from typing import TYPE_CHECKING, Any

from scribe.conversation import (
    AssistantMessage,
    Conversation,
    TextBlock,
    ToolResultBlock,
    ToolUseBlock,
    UserMessage,
)
from scribe.core.errors import AgentError, ProviderError, ToolValidationError
from scribe.tools.base import is_error_payload
from scribe.tools.registry import ToolRegistry

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping

    from scribe.cli.display import AgentDisplay
    from scribe.providers.base import ModelTransport
    from scribe.tools.base import Tool, ToolOutput

logger = logging.getLogger(__name__)

TOOL_NOT_FOUND = "tool not found"


class AgentState(enum.Enum):
    """States of the agent turn loop."""

    AWAITING_USER_INPUT = "awaiting_user_input"
    AWAITING_MODEL_RESPONSE = "awaiting_model_response"
    PROCESSING_TOOL_CALLS = "processing_tool_calls"
    STOPPED = "stopped"
    FAILED = "failed"


# FAILED can be reached from any non-terminal state (handled separately).
_VALID_TRANSITIONS: dict[AgentState, frozenset[AgentState]] = {
    AgentState.AWAITING_USER_INPUT: frozenset(
        {AgentState.AWAITING_MODEL_RESPONSE, AgentState.STOPPED}
    ),
    AgentState.AWAITING_MODEL_RESPONSE: frozenset({AgentState.PROCESSING_TOOL_CALLS}),
    AgentState.PROCESSING_TOOL_CALLS: frozenset(
        {AgentState.AWAITING_USER_INPUT, AgentState.AWAITING_MODEL_RESPONSE}
    ),
    AgentState.STOPPED: frozenset(),
    AgentState.FAILED: frozenset(),
}

_TERMINAL_STATES: frozenset[AgentState] = frozenset(
    {AgentState.STOPPED, AgentState.FAILED}
)


def _to_tool_result(tool_use_id: str, output: ToolOutput) -> ToolResultBlock:
    """Wrap a tool's return value as a tool result block."""
    if isinstance(output, str):
        return ToolResultBlock(tool_use_id=tool_use_id, content=output)
    return ToolResultBlock(
        tool_use_id=tool_use_id,
        content=json.dumps(output, ensure_ascii=False),
        is_error=is_error_payload(output),
    )


class Agent:
    """One chat session: conversation, tools and the turn loop.

    Args:
        transport: Channel to the hosted model.
        tools: Registry (or iterable) of tools offered to the model.
        get_user_message: Returns the next line of user input, or None
            when input has ended.
        display: Console trace; defaults to a fresh :class:`AgentDisplay`.
        max_tool_rounds: Consecutive tool rounds allowed before control
            returns to the user. None means unbounded.
    """

    def __init__(
        self,
        transport: ModelTransport,
        tools: ToolRegistry | Iterable[Tool],
        get_user_message: Callable[[], str | None],
        *,
        display: AgentDisplay | None = None,
        max_tool_rounds: int | None = None,
    ) -> None:
        if display is None:
            from scribe.cli.display import AgentDisplay

            display = AgentDisplay()
        self._transport = transport
        self._tools = tools if isinstance(tools, ToolRegistry) else ToolRegistry(tools)
        self._get_user_message = get_user_message
        self._display = display
        self._max_tool_rounds = max_tool_rounds
        self._conversation = Conversation()
        self._state = AgentState.AWAITING_USER_INPUT

    @property
    def conversation(self) -> Conversation:
        return self._conversation

    @property
    def tools(self) -> ToolRegistry:
        return self._tools

    @property
    def state(self) -> AgentState:
        return self._state

    @property
    def awaiting_user_input(self) -> bool:
        return self._state == AgentState.AWAITING_USER_INPUT

    # ── Tool dispatch ─────────────────────────────────────────

    async def execute_tool(
        self, id: str, name: str, input: Mapping[str, Any]
    ) -> ToolResultBlock:
        """Run one tool use and return its result block.

        Never raises for tool-level problems: an unknown tool, bad
        arguments, or a transport error inside the tool all come back
        as ``is_error`` results.
        """
        tool = self._tools.find(name)
        if tool is None:
            logger.warning("Model requested unknown tool %r", name)
            return ToolResultBlock(
                tool_use_id=id, content=TOOL_NOT_FOUND, is_error=True
            )

        self._display.show_tool_call(name, input)
        try:
            output = await tool.execute(input)
        except ToolValidationError as e:
            logger.info("Rejected arguments for %s: %s", name, e)
            return ToolResultBlock(tool_use_id=id, content=str(e), is_error=True)
        except ProviderError as e:
            logger.error("Transport error while running %s: %s", name, e)
            self._display.show_error(str(e))
            return ToolResultBlock(tool_use_id=id, content=str(e), is_error=True)

        return _to_tool_result(id, output)

    # ── Turn loop ─────────────────────────────────────────────

    async def run(self) -> str | None:
        """Run the chat loop until input ends or a fatal error occurs.

        Returns:
            None after a clean end of input, otherwise the message of
            the error that ended the run.

        Raises:
            AgentError: If the loop has already finished.
        """
        if self._state in _TERMINAL_STATES:
            msg = f"Agent already finished ({self._state.value})"
            raise AgentError(msg)

        self._display.show_welcome()
        try:
            await self._loop()
        except ProviderError as e:
            logger.exception("Model transport failed")
            self._display.show_api_error(str(e))
            self._fail()
            return str(e)
        except Exception as e:
            logger.exception("Agent loop failed")
            self._display.show_error(str(e))
            self._fail()
            return str(e)
        return None

    async def _loop(self) -> None:
        tool_rounds = 0
        while True:
            if self._state == AgentState.AWAITING_USER_INPUT:
                user_input = self._get_user_message()
                if user_input is None:
                    self._transition(AgentState.STOPPED)
                    return
                if not user_input.strip():
                    continue
                self._conversation.append(UserMessage(content=user_input))
                tool_rounds = 0
                self._transition(AgentState.AWAITING_MODEL_RESPONSE)

            response = await self._transport.send(
                self._conversation.turns, self._tools.to_params()
            )
            logger.debug(
                "Model %s replied in %.0fms (%d in / %d out tokens, stop=%s)",
                response.model_id,
                response.latency_ms,
                response.usage.input_tokens,
                response.usage.output_tokens,
                response.stop_reason,
            )
            message = AssistantMessage(content=tuple(response.content))
            self._conversation.append(message)
            self._transition(AgentState.PROCESSING_TOOL_CALLS)

            tool_results = await self._process(message)
            if not tool_results:
                self._transition(AgentState.AWAITING_USER_INPUT)
                continue

            self._conversation.append(UserMessage(content=tuple(tool_results)))
            tool_rounds += 1
            limit = self._max_tool_rounds
            if limit is not None and tool_rounds >= limit:
                logger.warning("Tool round limit (%d) reached", limit)
                self._display.show_warning(
                    f"Stopped after {tool_rounds} consecutive tool rounds; "
                    "waiting for input."
                )
                self._transition(AgentState.AWAITING_USER_INPUT)
            else:
                self._transition(AgentState.AWAITING_MODEL_RESPONSE)

    async def _process(self, message: AssistantMessage) -> list[ToolResultBlock]:
        """Show text blocks and run tool uses, in response order."""
        results: list[ToolResultBlock] = []
        for block in message.content:
            if isinstance(block, TextBlock):
                self._display.show_text(block.text)
            elif isinstance(block, ToolUseBlock):
                result = await self.execute_tool(block.id, block.name, block.input)
                results.append(result)
        return results

    # ── State machine ─────────────────────────────────────────

    def _transition(self, to: AgentState) -> None:
        if to not in _VALID_TRANSITIONS[self._state]:
            msg = f"Invalid transition: {self._state.value} -> {to.value}"
            raise AgentError(msg)
        self._state = to

    def _fail(self) -> None:
        if self._state not in _TERMINAL_STATES:
            self._state = AgentState.FAILED
