"""Tool registry - the ordered set of tools offered to the model.

Provides registration, lookup by exact name, and schema export of
tools that implement the :class:`Tool` protocol.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from scribe.tools.base import Tool


class ToolRegistry:
    """Ordered registry of tools.

    Filled once at startup and only read afterwards. Tools are exported
    to the model in registration order.
    """

    def __init__(self, tools: Iterable[Tool] = ()) -> None:
        self._tools: list[Tool] = []
        for tool in tools:
            self.register(tool)

    def register(self, tool: Tool) -> None:
        """Register a tool.

        Raises:
            ValueError: If a tool with the same name is already registered.
        """
        name = tool.descriptor.name
        if name in self:
            msg = f"Tool already registered: {name}"
            raise ValueError(msg)
        self._tools.append(tool)

    def find(self, name: str) -> Tool | None:
        """Return the first tool whose name equals ``name`` exactly, or None."""
        for tool in self._tools:
            if tool.descriptor.name == name:
                return tool
        return None

    def to_params(self) -> list[dict[str, Any]]:
        """Exported definitions of every tool, in registration order."""
        return [t.descriptor.to_param() for t in self._tools]

    def names(self) -> list[str]:
        """Return names of all registered tools."""
        return [t.descriptor.name for t in self._tools]

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: object) -> bool:
        return any(t.descriptor.name == name for t in self._tools)

    def __iter__(self) -> Iterator[Tool]:
        return iter(tuple(self._tools))
