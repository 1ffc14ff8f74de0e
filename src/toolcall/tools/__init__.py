"""Tool definitions, dispatch and loading."""

from toolcall.tools.base import ToolDefinition, ToolRegistry, tool
from toolcall.tools.dispatcher import ToolDispatcher, redact_arguments
from toolcall.tools.loader import load_tools

__all__ = [
    "ToolDefinition",
    "ToolDispatcher",
    "ToolRegistry",
    "load_tools",
    "redact_arguments",
    "tool",
]
