"""MCP tools/list and tools/call payloads.

Defines the wire form of tool definitions and how tool return values are
rendered into ``tools/call`` content.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class McpToolDefinition:
    """A tool as described to clients by ``tools/list``."""

    name: str
    description: str
    input_schema: dict[str, Any] = field(
        default_factory=lambda: {"type": "object", "properties": {}}
    )

    def to_dict(self) -> dict[str, Any]:
        """Convert to MCP tool format.

        Returns:
            Dictionary in MCP tools/list format.
        """
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> McpToolDefinition:
        return cls(
            name=data["name"],
            description=data.get("description", ""),
            input_schema=data.get("inputSchema") or {"type": "object", "properties": {}},
        )


@dataclass(frozen=True)
class TextOutput:
    """A tool result that is already text."""

    text: str


@dataclass(frozen=True)
class StructuredOutput:
    """A tool result that must be serialized before sending."""

    value: Any


ToolOutput = TextOutput | StructuredOutput


def to_output(value: Any) -> ToolOutput:
    """Classify a raw tool return value."""
    if isinstance(value, str):
        return TextOutput(value)
    return StructuredOutput(value)


def render(output: ToolOutput) -> str:
    """Render a tool output as the text of a content item.

    Structured values are pretty-printed JSON; values JSON cannot encode
    fall back to ``str()``.
    """
    if isinstance(output, TextOutput):
        return output.text
    return json.dumps(output.value, indent=2, default=str)


@dataclass
class ToolsListResult:
    """Result of tools/list request."""

    tools: list[McpToolDefinition]

    def to_dict(self) -> dict[str, Any]:
        """Convert to MCP result format.

        Returns:
            Dictionary in MCP tools/list result format.
        """
        return {"tools": [tool.to_dict() for tool in self.tools]}


@dataclass
class ToolsCallResult:
    """Result of tools/call request."""

    output: ToolOutput

    def to_dict(self) -> dict[str, Any]:
        """Convert to MCP result format.

        Returns:
            Dictionary with a single text content item.
        """
        return {"content": [{"type": "text", "text": render(self.output)}]}


def first_text(result: Any) -> str:
    """Extract the text of the first content item of a tools/call result."""
    if not isinstance(result, dict):
        return ""
    content = result.get("content") or []
    if not content or not isinstance(content[0], dict):
        return ""
    return str(content[0].get("text", ""))


def parse_text(text: str) -> Any:
    """Undo ``render``: decode JSON text, or return the text unchanged."""
    try:
        return json.loads(text)
    except ValueError:
        return text
