"""Tests for the Rich console trace."""

from __future__ import annotations

import io

import pytest
from rich.console import Console

from scribe.cli.display import AgentDisplay, _format_input


def _make_display() -> tuple[AgentDisplay, io.StringIO]:
    """Create a display with captured output."""
    buf = io.StringIO()
    console = Console(file=buf, width=120, no_color=True)
    return AgentDisplay(console=console), buf


# ── Helpers ───────────────────────────────────────────────────


class TestFormatInput:
    def test_json(self) -> None:
        assert _format_input({"path": "a.txt"}) == '{"path": "a.txt"}'

    def test_unserializable_falls_back_to_repr(self) -> None:
        assert _format_input({"x": {1, 2}}).startswith("{'x'")


# ── Output ────────────────────────────────────────────────────


class TestOutput:
    def test_welcome(self) -> None:
        display, buf = _make_display()
        display.show_welcome()
        assert "Chat with Claude (use 'ctrl-c' to quit)" in buf.getvalue()

    def test_text(self) -> None:
        display, buf = _make_display()
        display.show_text("Here is the file.")
        assert buf.getvalue() == "Claude: Here is the file.\n"

    def test_text_with_brackets_is_not_markup(self) -> None:
        display, buf = _make_display()
        display.show_text("use [bold] and x[0]")
        assert "use [bold] and x[0]" in buf.getvalue()

    def test_tool_call(self) -> None:
        display, buf = _make_display()
        display.show_tool_call("read_file", {"path": "main.py"})
        assert buf.getvalue() == 'tool: read_file({"path": "main.py"})\n'

    def test_tool_call_shows_full_input(self) -> None:
        display, buf = _make_display()
        text = "x" * 600
        display.show_tool_call("edit_file", {"new_str": text})
        assert buf.getvalue() == f'tool: edit_file({{"new_str": "{text}"}})\n'

    def test_errors(self) -> None:
        display, buf = _make_display()
        display.show_error("tool broke")
        display.show_api_error("[anthropic] Rate limited")
        out = buf.getvalue()
        assert "ERROR: tool broke" in out
        assert "API ERROR: [anthropic] Rate limited" in out

    def test_warning(self) -> None:
        display, buf = _make_display()
        display.show_warning("careful")
        assert "Warning: careful" in buf.getvalue()


class TestPrompt:
    def test_reads_line(self, monkeypatch: pytest.MonkeyPatch) -> None:
        display, _ = _make_display()
        monkeypatch.setattr("sys.stdin", io.StringIO("hello there\n"))
        assert display.prompt() == "hello there"

    def test_eof_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        display, _ = _make_display()
        monkeypatch.setattr("sys.stdin", io.StringIO(""))
        with pytest.raises(EOFError):
            display.prompt()
