"""Rich console trace for the chat session.

Prints the welcome line, the user prompt, assistant text as it is
processed, one line per tool dispatch, and errors. None of this output
is part of the conversation.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.console import Console
from rich.markup import escape

if TYPE_CHECKING:
    from collections.abc import Mapping


def _format_input(arguments: Mapping[str, Any]) -> str:
    try:
        return json.dumps(dict(arguments), ensure_ascii=False)
    except (TypeError, ValueError):
        return repr(dict(arguments))


class AgentDisplay:
    """Console output for the agent loop.

    Accepts an optional :class:`~rich.console.Console` for dependency
    injection in tests.
    """

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console()

    @property
    def console(self) -> Console:
        return self._console

    def show_welcome(self) -> None:
        self._console.print("Chat with Claude (use 'ctrl-c' to quit)")

    def prompt(self) -> str:
        """Read one line from the terminal.

        Raises:
            EOFError: When input has ended.
        """
        return self._console.input("[bold blue]You[/bold blue]: ")

    def show_text(self, text: str) -> None:
        """Print one assistant text block."""
        self._console.print(
            f"[bold yellow]Claude[/bold yellow]: {escape(text)}",
            highlight=False,
        )

    def show_tool_call(self, name: str, arguments: Mapping[str, Any]) -> None:
        """Print the tool about to run and its raw input, unwrapped and in full."""
        self._console.print(
            f"[bold green]tool[/bold green]: {escape(name)}"
            f"({escape(_format_input(arguments))})",
            highlight=False,
            soft_wrap=True,
        )

    def show_error(self, message: str) -> None:
        self._console.print(f"[bold red]ERROR[/bold red]: {escape(message)}")

    def show_api_error(self, message: str) -> None:
        self._console.print(f"[bold red]API ERROR[/bold red]: {escape(message)}")

    def show_warning(self, message: str) -> None:
        self._console.print(f"[bold yellow]Warning:[/bold yellow] {escape(message)}")
