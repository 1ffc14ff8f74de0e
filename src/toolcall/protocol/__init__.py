"""MCP Protocol layer for JSON-RPC communication."""

from toolcall.protocol.jsonrpc import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    JsonRpcError,
    JsonRpcRequest,
    JsonRpcResponse,
    parse_message,
)
from toolcall.protocol.lifecycle import MCP_PROTOCOL_VERSION, ClientState, ServerInfo
from toolcall.protocol.tools import McpToolDefinition, ToolsCallResult, ToolsListResult
from toolcall.protocol.transport import StreamTransport, create_http_app, run_http

__all__ = [
    "INTERNAL_ERROR",
    "INVALID_PARAMS",
    "METHOD_NOT_FOUND",
    "MCP_PROTOCOL_VERSION",
    "PARSE_ERROR",
    "ClientState",
    "JsonRpcError",
    "JsonRpcRequest",
    "JsonRpcResponse",
    "McpToolDefinition",
    "ServerInfo",
    "StreamTransport",
    "ToolsCallResult",
    "ToolsListResult",
    "create_http_app",
    "parse_message",
    "run_http",
]
