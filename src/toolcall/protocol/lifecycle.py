"""MCP lifecycle management.

Holds the protocol version exchanged in ``initialize``, the server identity
advertised to clients, and the connection states a client moves through.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# Version advertised by both sides of the handshake
MCP_PROTOCOL_VERSION = "2024-11-05"

CLIENT_NAME = "toolcall-client"
CLIENT_VERSION = "1.0.0"


class ClientState(Enum):
    """Client connection lifecycle states."""

    UNCONNECTED = "unconnected"
    CONNECTING = "connecting"
    READY = "ready"
    CLOSED = "closed"


@dataclass(frozen=True)
class ServerInfo:
    """Identity reported in the ``initialize`` result."""

    name: str = "toolcall-server"
    version: str = "1.0.0"

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "version": self.version}


@dataclass(frozen=True)
class InitializeResult:
    """Result of the ``initialize`` request."""

    server_info: ServerInfo
    protocol_version: str = MCP_PROTOCOL_VERSION
    capabilities: dict[str, Any] = field(default_factory=lambda: {"tools": {}})

    def to_dict(self) -> dict[str, Any]:
        """Convert to MCP result format.

        Returns:
            Dictionary with protocolVersion, capabilities and serverInfo.
        """
        return {
            "protocolVersion": self.protocol_version,
            "capabilities": self.capabilities,
            "serverInfo": self.server_info.to_dict(),
        }


def initialize_params() -> dict[str, Any]:
    """Params a client sends with ``initialize``."""
    return {
        "protocolVersion": MCP_PROTOCOL_VERSION,
        "capabilities": {},
        "clientInfo": {"name": CLIENT_NAME, "version": CLIENT_VERSION},
    }
