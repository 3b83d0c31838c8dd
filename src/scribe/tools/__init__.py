"""File-system tools the model can call.

Provides the tool protocol, the registry, and the three built-in
tools: ``read_file``, ``list_files`` and ``edit_file``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from scribe.tools.edit_file import EditFileTool
from scribe.tools.list_files import DEFAULT_IGNORE_DIRS, ListFilesTool
from scribe.tools.read_file import ReadFileTool
from scribe.tools.registry import ToolRegistry

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path


def default_tools(
    *,
    root: str | Path = ".",
    ignore_dirs: Iterable[str] = DEFAULT_IGNORE_DIRS,
) -> ToolRegistry:
    """Registry of the built-in tools: read_file, list_files, edit_file."""
    return ToolRegistry(
        [
            ReadFileTool(root=root),
            ListFilesTool(root=root, ignore_dirs=ignore_dirs),
            EditFileTool(root=root),
        ]
    )


__all__ = [
    "EditFileTool",
    "ListFilesTool",
    "ReadFileTool",
    "ToolRegistry",
    "default_tools",
]
