"""Exception hierarchy shared by the server and client sides."""

from __future__ import annotations

from typing import Any


class ToolcallError(Exception):
    """Base error for all toolcall failures."""

    pass


class ConfigError(ToolcallError):
    """Raised when server configuration is missing or invalid."""

    pass


class ToolLoadError(ToolcallError):
    """Raised when a tool registry reference cannot be resolved."""

    pass


class ToolNotFoundError(ToolcallError):
    """Raised when a tool is not registered."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown tool: {name}")


class ToolValidationError(ToolcallError):
    """Raised when tool arguments fail parameter validation.

    Attributes:
        report: Mapping of field path to human-readable reasons.
    """

    def __init__(self, name: str, report: dict[str, list[str]]) -> None:
        self.name = name
        self.report = report
        super().__init__("Invalid parameters")


class ToolTimeoutError(ToolcallError):
    """Raised when a tool does not settle within the configured timeout."""

    def __init__(self, name: str, timeout: float) -> None:
        self.name = name
        self.timeout = timeout
        super().__init__(f"Tool '{name}' timed out after {timeout:g}s")


class McpClientError(ToolcallError):
    """Base error for client-side failures."""

    pass


class NotConnectedError(McpClientError):
    """Raised when a request is issued on a client that is not connected."""

    pass


class ConnectionClosedError(McpClientError):
    """Raised for requests still pending when the connection goes away."""

    pass


class McpCallError(McpClientError):
    """Raised by the client when the server answers with an error envelope."""

    def __init__(self, code: int, message: str, data: Any | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.data = data
