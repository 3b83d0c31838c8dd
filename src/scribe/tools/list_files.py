"""list_files tool - nested listing of a directory tree."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from scribe.tools.base import (
    ParameterSpec,
    ToolDescriptor,
    error_payload,
    string_argument,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from scribe.tools.base import ToolOutput

logger = logging.getLogger(__name__)

DEFAULT_IGNORE_DIRS = frozenset({".git", ".hg", ".svn"})

DESCRIPTOR = ToolDescriptor(
    name="list_files",
    description=(
        "List files and directories at a given path. If no path is provided, "
        "lists files in the current directory. Directories map to their own "
        "listing, files map to null."
    ),
    parameters=(
        ParameterSpec(
            name="path",
            description=(
                "Optional relative path to list files from. Defaults to "
                "current directory if not provided."
            ),
            required=False,
        ),
    ),
)

# Nested mapping: directory entries map to subtrees, files map to None.
Tree = dict[str, "Tree | None"]


class ListFilesTool:
    """Recursive directory listing.

    Implements the :class:`Tool` protocol.
    """

    def __init__(
        self,
        *,
        root: str | Path = ".",
        ignore_dirs: Iterable[str] = DEFAULT_IGNORE_DIRS,
    ) -> None:
        self._root = Path(root)
        self._ignore = frozenset(ignore_dirs)

    @property
    def descriptor(self) -> ToolDescriptor:
        return DESCRIPTOR

    async def execute(self, arguments: Mapping[str, Any]) -> ToolOutput:
        path_str = string_argument(DESCRIPTOR.name, arguments, "path", default=".")
        target = self._root / (path_str or ".")
        if not target.is_dir():
            return error_payload(f"{path_str} does not exist or is not a directory")
        try:
            return self._build_tree(target)
        except (OSError, ValueError) as e:
            return error_payload(str(e))

    def _build_tree(self, path: Path) -> Tree:
        tree: Tree = {}
        for entry in sorted(path.iterdir(), key=lambda p: p.name):
            if entry.name in self._ignore:
                continue
            if entry.is_symlink() and entry.is_dir():
                tree[entry.name] = {}
            elif entry.is_dir():
                try:
                    tree[entry.name] = self._build_tree(entry)
                except PermissionError:
                    logger.debug("Cannot list %s", entry)
                    tree[entry.name] = {}
            else:
                tree[entry.name] = None
        return tree
