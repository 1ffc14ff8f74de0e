"""MCP Server - request dispatch and startup.

Maps each JSON-RPC method to its behavior and converts every failure into
an error envelope carrying the request's id.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from toolcall.config import ServerConfig
from toolcall.errors import ToolNotFoundError, ToolValidationError
from toolcall.protocol.jsonrpc import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    METHOD_NOT_FOUND,
    JsonRpcRequest,
    JsonRpcResponse,
)
from toolcall.protocol.lifecycle import InitializeResult, ServerInfo
from toolcall.protocol.tools import McpToolDefinition, ToolsCallResult, ToolsListResult
from toolcall.protocol.transport import StreamTransport, run_http
from toolcall.tools.base import ToolRegistry
from toolcall.tools.dispatcher import ToolDispatcher

logger = logging.getLogger(__name__)

MethodHandler = Callable[[Any], Awaitable[Any]]


class McpServer:
    """MCP Server implementation.

    Handles:
    - initialize / notifications/initialized handshake
    - tools/list and tools/call
    - ping

    The server keeps no per-connection state, so one instance can serve any
    number of concurrent requests.
    """

    def __init__(
        self,
        tools: ToolRegistry,
        name: str = "toolcall-server",
        version: str = "1.0.0",
        tool_timeout: float | None = None,
    ) -> None:
        """Initialize the server.

        Args:
            tools: Registry of tools to expose.
            name: Server name reported to clients.
            version: Server version reported to clients.
            tool_timeout: Optional limit in seconds for asynchronous tools.
        """
        self._server_info = ServerInfo(name=name, version=version)
        self._dispatcher = ToolDispatcher(tools, tool_timeout=tool_timeout)
        self._routes: dict[str, MethodHandler] = {
            "initialize": self._handle_initialize,
            "notifications/initialized": self._handle_empty,
            "tools/list": self._handle_tools_list,
            "tools/call": self._handle_tools_call,
            "ping": self._handle_empty,
        }

    @classmethod
    def from_config(cls, config: ServerConfig) -> McpServer:
        return cls(
            config.tools,
            name=config.name,
            version=config.version,
            tool_timeout=config.tool_timeout,
        )

    @property
    def server_info(self) -> ServerInfo:
        return self._server_info

    def list_tools(self) -> list[McpToolDefinition]:
        """List all registered tools in wire format."""
        return self._dispatcher.list_tools()

    async def handle(self, request: JsonRpcRequest) -> JsonRpcResponse:
        """Handle a parsed request.

        Never raises for request-level failures: unknown methods, unknown
        tools, invalid arguments and tool exceptions all become error
        responses with the request's id.

        Args:
            request: The request to handle.

        Returns:
            JSON-RPC response.
        """
        msg_id = request.id
        route = self._routes.get(request.method)
        if route is None:
            return JsonRpcResponse.failure(
                msg_id, METHOD_NOT_FOUND, f"Method not found: {request.method}"
            )

        try:
            result = await route(request.params)
        except ToolNotFoundError as e:
            return JsonRpcResponse.failure(msg_id, INVALID_PARAMS, str(e))
        except ToolValidationError as e:
            return JsonRpcResponse.failure(msg_id, INVALID_PARAMS, "Invalid parameters", e.report)
        except Exception as e:
            logger.warning("Internal error handling %s: %s", request.method, e)
            return JsonRpcResponse.failure(msg_id, INTERNAL_ERROR, "Internal error", str(e))

        return JsonRpcResponse.success(msg_id, result)

    async def _handle_initialize(self, params: Any) -> dict[str, Any]:
        # Client version and info are advisory only
        if isinstance(params, dict):
            logger.info(
                "Initialize from %s (protocol %s)",
                params.get("clientInfo", "unknown client"),
                params.get("protocolVersion", "unspecified"),
            )
        return InitializeResult(server_info=self._server_info).to_dict()

    async def _handle_empty(self, params: Any) -> dict[str, Any]:
        return {}

    async def _handle_tools_list(self, params: Any) -> dict[str, Any]:
        return ToolsListResult(tools=self.list_tools()).to_dict()

    async def _handle_tools_call(self, params: Any) -> dict[str, Any]:
        if not isinstance(params, dict):
            raise TypeError("tools/call params must be an object")
        name = params.get("name")
        arguments = params.get("arguments")
        if arguments is None:
            arguments = {}

        output = await self._dispatcher.call_tool(name, arguments)
        return ToolsCallResult(output=output).to_dict()


async def serve_async(config: ServerConfig) -> None:
    """Run a server until its transport finishes.

    Args:
        config: Server identity, transport selection and tool registry.
    """
    server = McpServer.from_config(config)
    logger.info(
        "Starting %s %s on %s transport with %d tool(s)",
        config.name,
        config.version,
        config.transport,
        len(config.tools),
    )
    if config.transport == "http":
        await run_http(server.handle, host=config.host, port=config.port)
    else:
        await StreamTransport(server.handle).run()


def serve(config: ServerConfig) -> None:
    """Create and run an MCP server, blocking until it stops.

    Example:

        serve(ServerConfig(
            name="my-server",
            tools={
                "greet": tool(
                    description="Greet someone",
                    parameters=obj(name=string()),
                    execute=lambda name: f"Hello, {name}!",
                ),
            },
        ))
    """
    asyncio.run(serve_async(config))
