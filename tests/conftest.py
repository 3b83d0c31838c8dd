"""Shared test fixtures for scribe."""

from __future__ import annotations

import io
from typing import Any

import pytest
from rich.console import Console

from scribe.cli.display import AgentDisplay


@pytest.fixture
def console_buffer() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def display(console_buffer: io.StringIO) -> AgentDisplay:
    """AgentDisplay writing plain text into ``console_buffer``."""
    console = Console(file=console_buffer, width=200, no_color=True)
    return AgentDisplay(console=console)


@pytest.fixture
def make_inputs() -> Any:
    """Factory for user-input sources that replay lines, then signal EOF.

    The returned callable exposes ``reads`` (number of calls made).
    """

    def _make(*lines: str) -> Any:
        pending = list(lines)

        def _read() -> str | None:
            _read.reads += 1  # type: ignore[attr-defined]
            if not pending:
                return None
            return pending.pop(0)

        _read.reads = 0  # type: ignore[attr-defined]
        return _read

    return _make
