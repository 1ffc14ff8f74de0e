"""JSON-RPC 2.0 message parsing and formatting.

Implements the envelope used by every MCP exchange: requests carry an opaque
id that responses echo verbatim, and a response holds either a result or an
error, never both.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

JSONRPC_VERSION = "2.0"

# Standard JSON-RPC 2.0 error codes
PARSE_ERROR = -32700
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

# Id used when a message failed before its own id could be read
PARSE_ERROR_ID = 0

# Ids are opaque: any JSON number or string, echoed as received
RequestId = int | float | str


class JsonRpcError(Exception):
    """JSON-RPC error with code and message."""

    def __init__(
        self,
        code: int,
        message: str,
        data: Any | None = None,
        msg_id: RequestId | None = None,
    ) -> None:
        """Initialize the error.

        Args:
            code: JSON-RPC error code.
            message: Human-readable error message.
            data: Optional additional error data.
            msg_id: Id of the offending message, if it could be read.
        """
        super().__init__(message)
        self.code = code
        self.message = message
        self.data = data
        self.msg_id = msg_id

    def to_response(self) -> JsonRpcResponse:
        """Convert to an error envelope, falling back to the sentinel id."""
        msg_id = self.msg_id if self.msg_id is not None else PARSE_ERROR_ID
        return JsonRpcResponse.failure(msg_id, self.code, self.message, self.data)


@dataclass
class JsonRpcRequest:
    """Represents a JSON-RPC request.

    A request without an id is a notification and gets no response.
    """

    method: str
    id: RequestId | None = None
    params: Any = None

    @property
    def is_notification(self) -> bool:
        return self.id is None

    def to_dict(self) -> dict[str, Any]:
        message: dict[str, Any] = {"jsonrpc": JSONRPC_VERSION}
        if self.id is not None:
            message["id"] = self.id
        message["method"] = self.method
        if self.params is not None:
            message["params"] = self.params
        return message


@dataclass
class ErrorObject:
    """The ``error`` member of a failed response."""

    code: int
    message: str
    data: Any = None

    def to_dict(self) -> dict[str, Any]:
        error: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            error["data"] = self.data
        return error


@dataclass
class JsonRpcResponse:
    """Represents a JSON-RPC response.

    ``error`` takes precedence: a response with an error never serializes a
    result.
    """

    id: RequestId | None
    result: Any = None
    error: ErrorObject | None = None

    @classmethod
    def success(cls, msg_id: RequestId | None, result: Any) -> JsonRpcResponse:
        return cls(id=msg_id, result=result)

    @classmethod
    def failure(
        cls,
        msg_id: RequestId | None,
        code: int,
        message: str,
        data: Any | None = None,
    ) -> JsonRpcResponse:
        return cls(id=msg_id, error=ErrorObject(code=code, message=message, data=data))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> JsonRpcResponse:
        """Build a response from a decoded message.

        Raises:
            JsonRpcError: If the message is not a response envelope.
        """
        if not isinstance(data, dict) or "id" not in data:
            raise JsonRpcError(PARSE_ERROR, "Invalid response: missing id")
        msg_id = data["id"]
        if msg_id is not None and (isinstance(msg_id, bool) or not isinstance(msg_id, RequestId)):
            raise JsonRpcError(PARSE_ERROR, f"Invalid response: bad id {msg_id!r}")
        error = data.get("error")
        if error is not None:
            if not isinstance(error, dict):
                raise JsonRpcError(PARSE_ERROR, "Invalid response: error must be an object")
            code = error.get("code", INTERNAL_ERROR)
            if isinstance(code, bool) or not isinstance(code, int):
                raise JsonRpcError(PARSE_ERROR, f"Invalid response: bad error code {code!r}")
            return cls.failure(
                msg_id,
                code,
                str(error.get("message", "")),
                error.get("data"),
            )
        return cls.success(msg_id, data.get("result"))

    @property
    def is_error(self) -> bool:
        return self.error is not None

    def to_dict(self) -> dict[str, Any]:
        """Convert to wire format.

        Returns:
            Dictionary with exactly one of ``result`` or ``error``.
        """
        response: dict[str, Any] = {"jsonrpc": JSONRPC_VERSION, "id": self.id}
        if self.error is not None:
            response["error"] = self.error.to_dict()
        else:
            response["result"] = self.result
        return response

    def to_json(self) -> str:
        return json.dumps(self.to_dict())


def parse_message(raw: str | bytes) -> JsonRpcRequest:
    """Parse a JSON-RPC request from a string.

    Args:
        raw: Raw JSON text.

    Returns:
        Parsed request (``id`` is None for notifications).

    Raises:
        JsonRpcError: With PARSE_ERROR if the message is malformed. The
            error carries the message id when it could be read.
    """
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise JsonRpcError(PARSE_ERROR, "Parse error", str(e)) from e

    if not isinstance(data, dict):
        raise JsonRpcError(PARSE_ERROR, "Parse error", "Message must be a JSON object")

    msg_id = data.get("id")
    # bool is an int subclass but never a valid id
    if msg_id is not None and (isinstance(msg_id, bool) or not isinstance(msg_id, RequestId)):
        raise JsonRpcError(PARSE_ERROR, "Parse error", "id must be a number or string")

    if data.get("jsonrpc") != JSONRPC_VERSION:
        raise JsonRpcError(
            PARSE_ERROR, "Parse error", f"jsonrpc must be '{JSONRPC_VERSION}'", msg_id=msg_id
        )

    method = data.get("method")
    if not isinstance(method, str):
        raise JsonRpcError(PARSE_ERROR, "Parse error", "method must be a string", msg_id=msg_id)

    return JsonRpcRequest(method=method, id=msg_id, params=data.get("params"))
