"""read_file tool - returns the text of a file."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

from scribe.tools.base import (
    ParameterSpec,
    ToolDescriptor,
    error_payload,
    string_argument,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

    from scribe.tools.base import ToolOutput

DESCRIPTOR = ToolDescriptor(
    name="read_file",
    description=(
        "Read the contents of a given relative file path. Use this when you "
        "want to see what's inside a file. Do not use this with directory "
        "names. No need to verify exact name and location."
    ),
    parameters=(
        ParameterSpec(
            name="path",
            description="The relative path of a file in the working directory.",
        ),
    ),
)


class ReadFileTool:
    """Reads UTF-8 text files relative to a root directory.

    Implements the :class:`Tool` protocol.
    """

    def __init__(self, *, root: str | Path = ".") -> None:
        self._root = Path(root)

    @property
    def descriptor(self) -> ToolDescriptor:
        return DESCRIPTOR

    async def execute(self, arguments: Mapping[str, Any]) -> ToolOutput:
        path_str = string_argument(DESCRIPTOR.name, arguments, "path")
        try:
            return (self._root / path_str).read_text(encoding="utf-8")
        except (OSError, ValueError) as e:
            return error_payload(str(e))
