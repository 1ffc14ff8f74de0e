"""Transport layers for MCP communication.

Both transports deliver parsed requests to the same handler contract,
``handler(request) -> response``, and serialize what it returns:

- ``StreamTransport``: newline-delimited JSON over a pair of text streams
  (stdin/stdout by default).
- ``create_http_app`` / ``run_http``: one JSON-RPC message per HTTP POST,
  served by uvicorn.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from collections.abc import Awaitable, Callable
from typing import BinaryIO, TextIO

import uvicorn
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse, PlainTextResponse, Response
from starlette.routing import Route

from toolcall.protocol.jsonrpc import (
    INTERNAL_ERROR,
    JsonRpcError,
    JsonRpcRequest,
    JsonRpcResponse,
    parse_message,
)

logger = logging.getLogger(__name__)

Handler = Callable[[JsonRpcRequest], Awaitable[JsonRpcResponse]]


async def _dispatch(handler: Handler, request: JsonRpcRequest) -> JsonRpcResponse:
    """Call the handler, turning an escaped exception into an error response."""
    try:
        return await handler(request)
    except Exception as e:
        logger.exception("Handler raised for %s", request.method)
        return JsonRpcResponse.failure(request.id, INTERNAL_ERROR, "Internal error", str(e))


class StreamTransport:
    """Line-delimited JSON-RPC over text streams.

    Each non-blank input line is one request. Requests are handled
    concurrently, so responses are written in completion order; every
    response carries its own request's id.
    """

    def __init__(
        self,
        handler: Handler,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            handler: Coroutine turning a request into a response.
            stdin: Input stream (defaults to sys.stdin).
            stdout: Output stream (defaults to sys.stdout).
        """
        self._handler = handler
        stdin = stdin or sys.stdin
        # Undecoded bytes when the stream exposes its buffer; parse_message decodes
        self._stdin: TextIO | BinaryIO = getattr(stdin, "buffer", stdin)
        self._stdout = stdout or sys.stdout

    async def read_message(self) -> str | bytes | None:
        """Read the next non-blank line.

        Returns:
            Message (stripped), as bytes when read from a binary buffer, or
            None on EOF.
        """
        loop = asyncio.get_running_loop()
        while True:
            line = await loop.run_in_executor(None, self._stdin.readline)
            if not line:  # EOF
                return None

            line = line.strip()
            if line:  # Skip empty lines
                return line

    def write_message(self, message: str) -> None:
        """Write one message followed by a newline.

        Args:
            message: JSON string to write.
        """
        self._stdout.write(message + "\n")
        self._stdout.flush()

    async def process_line(self, line: str | bytes) -> None:
        """Handle one input line and write its response, if any."""
        try:
            request = parse_message(line)
        except JsonRpcError as e:
            logger.warning("Rejected malformed message: %s", e.data)
            self.write_message(e.to_response().to_json())
            return

        response = await _dispatch(self._handler, request)
        if not request.is_notification:
            self.write_message(response.to_json())

    async def run(self) -> None:
        """Serve until the input stream closes.

        Requests still in flight at EOF are allowed to finish.
        """
        pending: set[asyncio.Task[None]] = set()
        while True:
            line = await self.read_message()
            if line is None:
                logger.info("EOF received, shutting down")
                break
            task = asyncio.create_task(self.process_line(line))
            pending.add(task)
            task.add_done_callback(pending.discard)

        if pending:
            await asyncio.gather(*pending)


CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

_ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def create_http_app(handler: Handler) -> Starlette:
    """Build an ASGI app that serves JSON-RPC over HTTP POST.

    Protocol errors travel inside the JSON-RPC envelope with status 200; only
    OPTIONS (204), notifications (202) and other methods (405) use distinct
    status codes.

    Args:
        handler: Coroutine turning a request into a response.

    Returns:
        Starlette application accepting any path.
    """

    async def endpoint(request: Request) -> Response:
        if request.method == "OPTIONS":
            return Response(status_code=204, headers=CORS_HEADERS)

        if request.method != "POST":
            return PlainTextResponse("Method not allowed", status_code=405, headers=CORS_HEADERS)

        body = await request.body()
        try:
            rpc_request = parse_message(body)
        except JsonRpcError as e:
            logger.warning("Rejected malformed message: %s", e.data)
            return JSONResponse(e.to_response().to_dict(), headers=CORS_HEADERS)

        response = await _dispatch(handler, rpc_request)
        if rpc_request.is_notification:
            return Response(status_code=202, headers=CORS_HEADERS)
        return JSONResponse(response.to_dict(), headers=CORS_HEADERS)

    return Starlette(routes=[Route("/{path:path}", endpoint, methods=_ALL_METHODS)])


async def run_http(handler: Handler, host: str = "127.0.0.1", port: int = 3000) -> None:
    """Serve ``handler`` over HTTP until interrupted.

    Args:
        handler: Coroutine turning a request into a response.
        host: Interface to bind.
        port: Port to listen on.
    """
    config = uvicorn.Config(create_http_app(handler), host=host, port=port, log_level="info")
    server = uvicorn.Server(config)
    logger.info("MCP server listening on http://%s:%d", host, port)
    await server.serve()
