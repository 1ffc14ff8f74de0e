"""Tests for McpClient over HTTP and stdio."""

import asyncio
from types import SimpleNamespace

import httpx
import pytest

from toolcall import McpClient, connect
from toolcall.client import StdioConnection
from toolcall.errors import (
    ConnectionClosedError,
    McpCallError,
    McpClientError,
    NotConnectedError,
)
from toolcall.protocol.jsonrpc import INTERNAL_ERROR, INVALID_PARAMS, JsonRpcResponse
from toolcall.protocol.lifecycle import ClientState
from toolcall.protocol.transport import create_http_app


@pytest.fixture
async def http_client(server):
    transport = httpx.ASGITransport(app=create_http_app(server.handle))
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
async def client(http_client):
    mcp = await connect("http://test/", http_client=http_client)
    yield mcp
    await mcp.close()


class TestHttpClient:
    """Tests for the client against an in-process HTTP server."""

    async def test_handshake(self, client):
        """Should be ready with server info and tools after connecting."""
        assert client.state is ClientState.READY
        assert client.server_info == {"name": "test-server", "version": "9.9.9"}
        assert [t.name for t in client.list_tools()][:2] == ["greet", "add"]

    async def test_tool_schemas(self, client):
        """Should expose the advertised input schemas."""
        search = next(t for t in client.list_tools() if t.name == "search")

        assert search.input_schema["required"] == ["query"]
        assert search.input_schema["properties"]["limit"]["default"] == 10

    async def test_call_text(self, client):
        """Should return text results as strings."""
        assert await client.call("greet", {"name": "World"}) == "Hello, World!"

    async def test_call_structured(self, client):
        """Should decode structured results."""
        assert await client.call("add", {"a": 5, "b": 3}) == {"result": 8}

    async def test_call_without_args(self, client):
        """Should send an empty object when args are omitted."""
        with pytest.raises(McpCallError) as exc_info:
            await client.call("crash")

        assert exc_info.value.code == INTERNAL_ERROR
        assert exc_info.value.data == "Intentional crash for testing"

    async def test_unknown_tool(self, client):
        """Should raise the server's error."""
        with pytest.raises(McpCallError) as exc_info:
            await client.call("nope", {})

        assert exc_info.value.code == INVALID_PARAMS
        assert str(exc_info.value) == "Unknown tool: nope"

    async def test_invalid_arguments(self, client):
        """Should carry the validation report."""
        with pytest.raises(McpCallError) as exc_info:
            await client.call("greet", {})

        assert exc_info.value.data == {"name": ["Required"]}

    async def test_ping(self, client):
        """Should answer ping."""
        await client.ping()

    async def test_close_is_idempotent(self, client):
        """Should allow closing twice and refuse calls afterwards."""
        await client.close()
        await client.close()

        assert client.state is ClientState.CLOSED
        with pytest.raises(NotConnectedError):
            await client.call("greet", {"name": "x"})

    async def test_context_manager(self, http_client):
        """Should close on leaving the context."""
        async with await McpClient.connect("http://test/", http_client=http_client) as mcp:
            assert await mcp.call("greet", {"name": "ctx"}) == "Hello, ctx!"

        assert mcp.state is ClientState.CLOSED

    async def test_http_failure(self):
        """Should wrap transport failures."""

        def refuse(request):
            raise httpx.ConnectError("refused", request=request)

        failing = httpx.AsyncClient(transport=httpx.MockTransport(refuse))
        with pytest.raises(McpClientError, match="failed"):
            await connect("http://test/", http_client=failing)
        await failing.aclose()

    async def test_non_json_response(self):
        """Should reject responses that are not JSON-RPC."""
        garbage = httpx.AsyncClient(
            transport=httpx.MockTransport(lambda request: httpx.Response(200, text="<html>"))
        )
        with pytest.raises(McpClientError, match="Invalid response"):
            await connect("http://test/", http_client=garbage)
        await garbage.aclose()


class TestStdioClient:
    """Tests for the client against a real subprocess."""

    async def test_handshake_and_call(self, stdio_server_command):
        """Should start the process, handshake and call tools."""
        async with await connect(stdio_server_command) as mcp:
            assert mcp.server_info == {"name": "fixture-server", "version": "0.1.0"}
            assert {t.name for t in mcp.list_tools()} == {"greet", "add", "sleep_then", "die"}
            assert await mcp.call("greet", {"name": "stdio"}) == "Hello, stdio!"
            assert await mcp.call("add", {"a": 2, "b": 2}) == {"result": 4}

    async def test_out_of_order_responses(self, stdio_server_command):
        """Should match responses to requests by id."""
        async with await connect(stdio_server_command) as mcp:
            slow, fast = await asyncio.gather(
                mcp.call("sleep_then", {"text": "slow", "delay": 0.3}),
                mcp.call("sleep_then", {"text": "fast", "delay": 0}),
            )

        assert (slow, fast) == ("slow", "fast")

    async def test_process_exit_fails_pending(self, stdio_server_command):
        """Should fail in-flight and later requests once the process exits."""
        mcp = await connect(stdio_server_command)
        try:
            pending = asyncio.ensure_future(
                mcp.call("sleep_then", {"text": "never", "delay": 10})
            )
            await asyncio.sleep(0.1)

            with pytest.raises(ConnectionClosedError, match="Process exited"):
                await mcp.call("die", {})
            with pytest.raises(ConnectionClosedError, match="Process exited"):
                await pending
            with pytest.raises(ConnectionClosedError):
                await mcp.call("greet", {"name": "late"})
        finally:
            await mcp.close()

    async def test_close_is_idempotent(self, stdio_server_command):
        """Should terminate the process once."""
        mcp = await connect(stdio_server_command)
        await mcp.close()
        await mcp.close()

        assert mcp.state is ClientState.CLOSED

    async def test_bad_command(self):
        """Should fail to connect when the command cannot start."""
        with pytest.raises(McpClientError, match="Cannot start"):
            await connect("definitely-not-a-real-command-xyz")

    async def test_empty_command(self):
        """Should reject an empty command line."""
        with pytest.raises(McpClientError, match="Empty server command"):
            await connect("   ")

    async def test_skips_malformed_responses(self):
        """Should ignore unusable output lines and keep matching later responses."""
        connection = StdioConnection("unused")
        future = asyncio.get_running_loop().create_future()
        connection._pending[2] = future
        reader = asyncio.StreamReader()
        reader.feed_data(
            b"not json\n"
            b'{"jsonrpc": "2.0", "id": 1, "error": {"code": null}}\n'
            b'{"jsonrpc": "2.0", "id": [1], "result": {}}\n'
            b'{"jsonrpc": "2.0", "id": 2, "result": {"ok": true}}\n'
        )
        reader.feed_eof()

        await connection._read_loop(SimpleNamespace(stdout=reader))

        assert future.result() == JsonRpcResponse.success(2, {"ok": True})
