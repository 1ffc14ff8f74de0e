"""McpClient - connects to an MCP server and calls its tools.

Usage::

    # Connect to a stdio server
    client = await connect("python examples/server.py")

    # Or to an HTTP server
    async with await connect("http://localhost:3000") as client:
        result = await client.call("greet", {"name": "World"})
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
import shlex
from typing import Any, Protocol

import httpx

from toolcall.errors import (
    ConnectionClosedError,
    McpCallError,
    McpClientError,
    NotConnectedError,
)
from toolcall.protocol.jsonrpc import JsonRpcError, JsonRpcRequest, JsonRpcResponse, RequestId
from toolcall.protocol.lifecycle import ClientState, initialize_params
from toolcall.protocol.tools import McpToolDefinition, first_text, parse_text

logger = logging.getLogger(__name__)

# Largest single response line accepted from a stdio server
STREAM_LIMIT = 16 * 1024 * 1024


class Connection(Protocol):
    """One way of exchanging a request for its response."""

    async def request(self, request: JsonRpcRequest) -> JsonRpcResponse: ...
    async def close(self) -> None: ...


class HttpConnection:
    """Sends each request as its own HTTP POST.

    No correlation is needed since every exchange returns its own response.
    """

    def __init__(self, url: str, http_client: httpx.AsyncClient | None = None) -> None:
        """Initialize the connection.

        Args:
            url: Server endpoint.
            http_client: Client to use; one is created (and later closed)
                when omitted.
        """
        self._url = url
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=None)

    async def request(self, request: JsonRpcRequest) -> JsonRpcResponse:
        try:
            response = await self._client.post(self._url, json=request.to_dict())
            response.raise_for_status()
            return JsonRpcResponse.from_dict(response.json())
        except httpx.HTTPError as e:
            raise McpClientError(f"HTTP request to {self._url} failed: {e}") from e
        except (ValueError, JsonRpcError) as e:
            raise McpClientError(f"Invalid response from {self._url}: {e}") from e

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()


class StdioConnection:
    """Talks to a subordinate process over its standard streams.

    Responses may arrive in any order; a reader task matches each one to
    the pending request with the same id.
    """

    def __init__(self, command: str) -> None:
        self._command = command
        self._process: asyncio.subprocess.Process | None = None
        self._reader: asyncio.Task[None] | None = None
        self._pending: dict[RequestId, asyncio.Future[JsonRpcResponse]] = {}

    async def start(self) -> None:
        """Launch the subprocess and start reading its output.

        Raises:
            McpClientError: If the command is empty or cannot be started.
        """
        argv = shlex.split(self._command)
        if not argv:
            raise McpClientError("Empty server command")
        try:
            self._process = await asyncio.create_subprocess_exec(
                *argv,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                limit=STREAM_LIMIT,
            )
        except OSError as e:
            raise McpClientError(f"Cannot start '{self._command}': {e}") from e
        self._reader = asyncio.create_task(self._read_loop(self._process))

    async def _read_loop(self, process: asyncio.subprocess.Process) -> None:
        assert process.stdout is not None
        try:
            while True:
                try:
                    line = await process.stdout.readline()
                except ValueError:
                    logger.error("Server output line exceeds %d bytes", STREAM_LIMIT)
                    break
                if not line:
                    break
                line = line.strip()
                if not line:
                    continue
                try:
                    response = JsonRpcResponse.from_dict(json.loads(line))
                except (ValueError, TypeError, JsonRpcError):
                    logger.debug("Ignoring unparseable server output: %r", line[:200])
                    continue
                self._settle(response)
        finally:
            logger.info("Server process '%s' exited", self._command)
            self._fail_pending(ConnectionClosedError("Process exited"))

    def _settle(self, response: JsonRpcResponse) -> None:
        future = self._pending.pop(response.id, None)
        if future is not None and not future.done():
            future.set_result(response)

    def _fail_pending(self, error: Exception) -> None:
        pending, self._pending = self._pending, {}
        for future in pending.values():
            if not future.done():
                future.set_exception(error)

    async def request(self, request: JsonRpcRequest) -> JsonRpcResponse:
        """Write a request and wait for the response with its id.

        Raises:
            ConnectionClosedError: If the process is gone, or exits before
                answering.
        """
        process = self._process
        if process is None or process.stdin is None:
            raise NotConnectedError("Not connected")
        if self._reader is None or self._reader.done():
            raise ConnectionClosedError("Process exited")

        future: asyncio.Future[JsonRpcResponse] = asyncio.get_running_loop().create_future()
        self._pending[request.id] = future
        try:
            process.stdin.write((json.dumps(request.to_dict()) + "\n").encode())
            await process.stdin.drain()
            return await future
        except (BrokenPipeError, ConnectionResetError) as e:
            raise ConnectionClosedError("Process exited") from e
        finally:
            if self._pending.get(request.id) is future:
                del self._pending[request.id]

    async def close(self) -> None:
        """Terminate the subprocess; pending requests fail."""
        process, self._process = self._process, None
        if process is None:
            return
        if process.stdin is not None:
            process.stdin.close()
        if process.returncode is None:
            with contextlib.suppress(ProcessLookupError):
                process.terminate()
        await process.wait()
        if self._reader is not None:
            await self._reader


class McpClient:
    """Client side of the protocol.

    Performs the handshake on connect, caches the discovered tools and
    exposes ``call`` to invoke them by name. Use ``connect()`` to create one.
    """

    def __init__(self) -> None:
        self._state = ClientState.UNCONNECTED
        self._connection: Connection | None = None
        self._request_id = 0
        self._tools: list[McpToolDefinition] = []
        self._server_info: dict[str, Any] = {}

    @classmethod
    async def connect(
        cls,
        target: str,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> McpClient:
        """Connect to an MCP server.

        Args:
            target: Either an HTTP(S) URL, or a command line that starts a
                stdio server (e.g. ``"python server.py"``).
            http_client: Optional httpx client for HTTP targets.

        Returns:
            A ready client with its tool list cached.

        Raises:
            McpClientError: If any step of connecting or the handshake fails.
        """
        client = cls()
        await client._open(target, http_client)
        return client

    async def _open(self, target: str, http_client: httpx.AsyncClient | None) -> None:
        self._state = ClientState.CONNECTING
        try:
            if target.startswith(("http://", "https://")):
                self._connection = HttpConnection(target, http_client)
            else:
                connection = StdioConnection(target)
                self._connection = connection
                await connection.start()
            await self._handshake()
        except BaseException:
            await self.close()
            raise
        self._state = ClientState.READY

    async def _handshake(self) -> None:
        init = await self._request("initialize", initialize_params())
        self._server_info = dict(init.get("serverInfo") or {}) if isinstance(init, dict) else {}
        await self._request("notifications/initialized", {})

        listed = await self._request("tools/list", {})
        raw_tools = listed.get("tools", []) if isinstance(listed, dict) else []
        self._tools = [McpToolDefinition.from_dict(raw) for raw in raw_tools]

    async def _send(self, method: str, params: Any) -> JsonRpcResponse:
        if self._state not in (ClientState.CONNECTING, ClientState.READY):
            raise NotConnectedError("Not connected")
        assert self._connection is not None

        # No await between allocating and registering the id
        self._request_id += 1
        request = JsonRpcRequest(method=method, id=self._request_id, params=params)
        return await self._connection.request(request)

    async def _request(self, method: str, params: Any) -> Any:
        response = await self._send(method, params)
        if response.error is not None:
            raise McpCallError(response.error.code, response.error.message, response.error.data)
        return response.result

    @property
    def state(self) -> ClientState:
        return self._state

    @property
    def server_info(self) -> dict[str, Any]:
        return dict(self._server_info)

    def list_tools(self) -> list[McpToolDefinition]:
        """Tools discovered during the handshake."""
        return list(self._tools)

    async def call(self, name: str, args: dict[str, Any] | None = None) -> Any:
        """Call a tool by name.

        Args:
            name: Tool name.
            args: Tool arguments (defaults to an empty object).

        Returns:
            The decoded JSON result, or the raw text if it is not JSON.

        Raises:
            McpCallError: If the server answers with an error.
        """
        result = await self._request("tools/call", {"name": name, "arguments": args or {}})
        return parse_text(first_text(result))

    async def ping(self) -> None:
        await self._request("ping", {})

    async def close(self) -> None:
        """Close the connection. Safe to call more than once."""
        if self._state is ClientState.CLOSED:
            return
        self._state = ClientState.CLOSED
        connection, self._connection = self._connection, None
        if connection is not None:
            await connection.close()

    async def __aenter__(self) -> McpClient:
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.close()


connect = McpClient.connect
