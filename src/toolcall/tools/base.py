"""Tool definitions and the registry type.

A tool is a description, a parameter schema and an ``execute`` callable.
Tools are keyed by name in a registry mapping that is fixed at startup.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from toolcall.params.schema import ParamSchema
from toolcall.params.validator import check_schema
from toolcall.params.wire import translate
from toolcall.protocol.tools import McpToolDefinition

ExecuteFn = Callable[..., Any]


@dataclass(frozen=True)
class ToolDefinition:
    """Definition of a tool.

    The tool's name is its key in the registry, not part of the definition.
    """

    description: str
    parameters: ParamSchema
    execute: ExecuteFn

    def to_mcp(self, name: str) -> McpToolDefinition:
        """Convert to the wire form advertised by ``tools/list``.

        Args:
            name: Registry key of this tool.

        Returns:
            McpToolDefinition with the translated input schema.
        """
        return McpToolDefinition(
            name=name,
            description=self.description,
            input_schema=translate(self.parameters),
        )


ToolRegistry = Mapping[str, ToolDefinition]


def tool(
    *,
    description: str,
    parameters: ParamSchema,
    execute: ExecuteFn,
) -> ToolDefinition:
    """Define a tool.

    Example:

        greet = tool(
            description="Greet someone",
            parameters=obj(name=string(description="Name to greet")),
            execute=lambda name: f"Hello, {name}!",
        )

    Object-shaped parameters are passed to ``execute`` as keyword arguments,
    with None for optional fields the caller left out. Any other schema is
    passed as a single positional value. ``execute`` may be a coroutine
    function.

    Raises:
        InvalidSchemaError: If ``parameters`` does not render to a valid
            JSON Schema.
        TypeError: If ``execute`` is not callable.
    """
    if not callable(execute):
        raise TypeError(f"execute must be callable, got {type(execute).__name__}")
    check_schema(parameters)
    return ToolDefinition(description=description, parameters=parameters, execute=execute)
