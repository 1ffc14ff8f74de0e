"""toolcall - MCP servers and clients with schema-validated tools.

Example:

    from toolcall import ServerConfig, obj, number, serve, string, tool

    serve(ServerConfig(
        name="my-server",
        tools={
            "greet": tool(
                description="Greet someone",
                parameters=obj(name=string(description="Name to greet")),
                execute=lambda name: f"Hello, {name}!",
            ),
            "add": tool(
                description="Add two numbers",
                parameters=obj(a=number(), b=number()),
                execute=lambda a, b: a + b,
            ),
        },
    ))
"""

from toolcall.client import McpClient, connect
from toolcall.config import ServerConfig, load_config
from toolcall.errors import (
    ConfigError,
    ConnectionClosedError,
    McpCallError,
    McpClientError,
    ToolcallError,
)
from toolcall.params import (
    array,
    boolean,
    enum,
    integer,
    number,
    obj,
    safe_validate,
    string,
    translate,
)
from toolcall.protocol.tools import McpToolDefinition
from toolcall.server import McpServer, serve, serve_async
from toolcall.tools import ToolDefinition, ToolRegistry, tool

__version__ = "1.0.0"

__all__ = [
    "ConfigError",
    "ConnectionClosedError",
    "McpCallError",
    "McpClient",
    "McpClientError",
    "McpServer",
    "McpToolDefinition",
    "ServerConfig",
    "ToolDefinition",
    "ToolRegistry",
    "ToolcallError",
    "array",
    "boolean",
    "connect",
    "enum",
    "integer",
    "load_config",
    "number",
    "obj",
    "safe_validate",
    "serve",
    "serve_async",
    "string",
    "tool",
    "translate",
]
