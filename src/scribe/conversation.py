"""Conversation history: content blocks and turns.

A conversation is an ordered, append-only sequence of turns. User turns
carry either plain text or the tool results answering the previous
assistant turn; assistant turns carry an ordered tuple of content
blocks. Every ``tool_use`` block must be answered by exactly one
``tool_result`` block (matched by id) before another assistant turn
is appended.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterator


# ── Content blocks ────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class TextBlock:
    """Plain text produced by the model."""

    text: str

    def to_param(self) -> dict[str, Any]:
        return {"type": "text", "text": self.text}


@dataclass(frozen=True, slots=True)
class ToolUseBlock:
    """A tool invocation requested by the model."""

    id: str
    name: str
    input: dict[str, Any] = field(default_factory=dict)

    def to_param(self) -> dict[str, Any]:
        return {
            "type": "tool_use",
            "id": self.id,
            "name": self.name,
            "input": dict(self.input),
        }


@dataclass(frozen=True, slots=True)
class ToolResultBlock:
    """The answer to one :class:`ToolUseBlock`."""

    tool_use_id: str
    content: str
    is_error: bool = False

    def to_param(self) -> dict[str, Any]:
        param: dict[str, Any] = {
            "type": "tool_result",
            "tool_use_id": self.tool_use_id,
            "content": self.content,
        }
        if self.is_error:
            param["is_error"] = True
        return param


ContentBlock = TextBlock | ToolUseBlock | ToolResultBlock


# ── Turns ─────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class UserMessage:
    """A user turn: typed text, or the results of the last tool calls."""

    content: str | tuple[ToolResultBlock, ...]

    @property
    def role(self) -> str:
        return "user"

    @property
    def tool_results(self) -> tuple[ToolResultBlock, ...]:
        if isinstance(self.content, str):
            return ()
        return self.content

    def to_param(self) -> dict[str, Any]:
        if isinstance(self.content, str):
            return {"role": "user", "content": self.content}
        return {"role": "user", "content": [b.to_param() for b in self.content]}


@dataclass(frozen=True, slots=True)
class AssistantMessage:
    """An assistant turn: the model's content blocks, in order."""

    content: tuple[TextBlock | ToolUseBlock, ...]

    @property
    def role(self) -> str:
        return "assistant"

    @property
    def tool_uses(self) -> tuple[ToolUseBlock, ...]:
        return tuple(b for b in self.content if isinstance(b, ToolUseBlock))

    def to_param(self) -> dict[str, Any]:
        return {"role": "assistant", "content": [b.to_param() for b in self.content]}


Turn = UserMessage | AssistantMessage


class Conversation:
    """Append-only sequence of turns.

    Turns are immutable values, and there is no way to remove or
    replace one once appended. :meth:`append` enforces that pending
    tool uses are answered before the next assistant turn.
    """

    def __init__(self) -> None:
        self._turns: list[Turn] = []

    def append(self, turn: Turn) -> None:
        """Append a turn.

        Raises:
            ValueError: If the turn would leave a tool use unanswered,
                or answers tool uses that were never requested.
        """
        pending = self.pending_tool_use_ids()
        if isinstance(turn, AssistantMessage) and pending:
            msg = f"Unanswered tool uses before assistant turn: {sorted(pending)}"
            raise ValueError(msg)
        if isinstance(turn, UserMessage) and turn.tool_results:
            answered = [r.tool_use_id for r in turn.tool_results]
            if len(answered) != len(set(answered)) or set(answered) != pending:
                msg = (
                    f"Tool results {answered} do not answer "
                    f"pending tool uses {sorted(pending)}"
                )
                raise ValueError(msg)
        self._turns.append(turn)

    def pending_tool_use_ids(self) -> set[str]:
        """Ids of tool uses in the last assistant turn still awaiting results."""
        if not self._turns or not isinstance(self._turns[-1], AssistantMessage):
            return set()
        return {b.id for b in self._turns[-1].tool_uses}

    @property
    def turns(self) -> tuple[Turn, ...]:
        """Snapshot of all turns, oldest first."""
        return tuple(self._turns)

    def __len__(self) -> int:
        return len(self._turns)

    def __iter__(self) -> Iterator[Turn]:
        return iter(tuple(self._turns))
