"""edit_file tool - creates files or replaces text inside them.

Replacement is global: every occurrence of ``old_str`` is replaced.
When nothing matches, the file is left untouched and the tool returns
an empty result.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from scribe.core.errors import ToolValidationError
from scribe.tools.base import (
    ParameterSpec,
    ToolDescriptor,
    error_payload,
    string_argument,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

    from scribe.tools.base import ToolOutput

logger = logging.getLogger(__name__)

NO_CHANGES = ""

DESCRIPTOR = ToolDescriptor(
    name="edit_file",
    description=(
        "Make edits to a text file.\n\n"
        "Replaces every occurrence of 'old_str' with 'new_str' in the given "
        "file. 'old_str' and 'new_str' MUST be different from each other.\n\n"
        "If the file specified with path doesn't exist and 'old_str' is "
        "empty, it will be created with 'new_str' as its content."
    ),
    parameters=(
        ParameterSpec(name="path", description="The path to the file"),
        ParameterSpec(
            name="old_str",
            description=(
                "Text to search for - must match exactly. Every occurrence "
                "is replaced."
            ),
        ),
        ParameterSpec(name="new_str", description="Text to replace old_str with"),
    ),
)


class EditFileTool:
    """Global search-and-replace editor that can also create files.

    Implements the :class:`Tool` protocol.
    """

    def __init__(self, *, root: str | Path = ".") -> None:
        self._root = Path(root)

    @property
    def descriptor(self) -> ToolDescriptor:
        return DESCRIPTOR

    async def execute(self, arguments: Mapping[str, Any]) -> ToolOutput:
        """Create or edit a file.

        Returns:
            A confirmation for a created file, ``"OK"`` for an edit, or
            ``NO_CHANGES`` when ``old_str`` does not occur in the file.

        Raises:
            ToolValidationError: If ``path`` is empty or ``old_str`` equals
                ``new_str``.
        """
        path_str = string_argument(DESCRIPTOR.name, arguments, "path")
        old_str = string_argument(DESCRIPTOR.name, arguments, "old_str")
        new_str = string_argument(DESCRIPTOR.name, arguments, "new_str")
        if not path_str or old_str == new_str:
            msg = (
                "Invalid arguments: path must be non-empty and "
                "old_str must differ from new_str."
            )
            raise ToolValidationError(DESCRIPTOR.name, msg)

        path = self._root / path_str
        if not path.exists() and old_str == "":
            return self._create_file(path, path_str, new_str)

        try:
            old_content = path.read_text(encoding="utf-8")
        except (OSError, ValueError) as e:
            return error_payload(str(e))

        new_content = old_content.replace(old_str, new_str)
        if new_content == old_content:
            logger.warning("No changes made to %s", path_str)
            return NO_CHANGES

        try:
            path.write_text(new_content, encoding="utf-8")
        except (OSError, ValueError) as e:
            return error_payload(str(e))
        return "OK"

    def _create_file(self, path: Path, path_str: str, content: str) -> ToolOutput:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except (OSError, ValueError) as e:
            return error_payload(str(e))
        return f"Successfully created file {path_str}"
