"""Tool protocol and descriptor types.

Defines the ``Tool`` protocol that all tool implementations must
satisfy, plus the immutable descriptor that tells the model what a
tool is called and which parameters it takes.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from scribe.core.errors import ToolValidationError

if TYPE_CHECKING:
    from collections.abc import Mapping

# A tool returns text, or a structured value the agent JSON-encodes.
ToolOutput = str | dict[str, Any] | list[Any]


class ParamType(enum.StrEnum):
    """JSON Schema types a tool parameter may declare."""

    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    OBJECT = "object"
    ARRAY = "array"


@dataclass(frozen=True, slots=True)
class ParameterSpec:
    """One named parameter of a tool."""

    name: str
    description: str
    type: ParamType = ParamType.STRING
    required: bool = True


@dataclass(frozen=True, slots=True)
class ToolDescriptor:
    """Name, description and ordered parameters of a tool.

    Built once when the tool is constructed and never changed.
    """

    name: str
    description: str
    parameters: tuple[ParameterSpec, ...] = ()

    def __post_init__(self) -> None:
        if not self.name:
            msg = "Tool name must be non-empty"
            raise ValueError(msg)
        names = [p.name for p in self.parameters]
        if len(names) != len(set(names)):
            msg = f"Duplicate parameter names in tool {self.name!r}: {names}"
            raise ValueError(msg)

    def parameter(self, name: str) -> ParameterSpec | None:
        """Return the parameter named ``name``, or None if there is none."""
        for p in self.parameters:
            if p.name == name:
                return p
        return None

    def input_schema(self) -> dict[str, Any]:
        """JSON Schema object describing the tool's input.

        Pure: builds a fresh dict on every call.
        """
        return {
            "type": "object",
            "properties": {
                p.name: {"type": str(p.type), "description": p.description}
                for p in self.parameters
            },
            "required": [p.name for p in self.parameters if p.required],
        }

    def to_param(self) -> dict[str, Any]:
        """The tool definition in the shape the Messages API expects."""
        return {
            "name": self.name,
            "description": self.description,
            "input_schema": self.input_schema(),
        }


@runtime_checkable
class Tool(Protocol):
    """Protocol that all tool implementations must satisfy."""

    @property
    def descriptor(self) -> ToolDescriptor:
        """Immutable description of this tool."""
        ...

    async def execute(self, arguments: Mapping[str, Any]) -> ToolOutput:
        """Run the tool.

        Resource failures (missing files and the like) are returned as
        an :func:`error_payload`, never raised.

        Raises:
            ToolValidationError: If the arguments are unusable.
        """
        ...


def error_payload(message: str) -> dict[str, str]:
    """Build the structured error a tool returns instead of raising."""
    return {"error": message}


def is_error_payload(output: ToolOutput) -> bool:
    """True if ``output`` is an :func:`error_payload`.

    The message must be a string: a directory tree holding a single
    entry named ``error`` maps it to None or a subtree instead.
    """
    return (
        isinstance(output, dict)
        and set(output) == {"error"}
        and isinstance(output["error"], str)
    )


def string_argument(
    tool_name: str,
    arguments: Mapping[str, Any],
    key: str,
    *,
    default: str | None = None,
) -> str:
    """Fetch a string argument, raising ToolValidationError if it is unusable.

    ``default`` is returned when the key is absent or null; without a
    default the argument is required.
    """
    value = arguments.get(key)
    if value is None:
        if default is not None:
            return default
        msg = f"Parameter '{key}' is required."
        raise ToolValidationError(tool_name, msg)
    if not isinstance(value, str):
        msg = f"Parameter '{key}' must be a string, got {type(value).__name__}."
        raise ToolValidationError(tool_name, msg)
    return value
