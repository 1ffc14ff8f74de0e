"""Pytest configuration and shared fixtures."""

import asyncio
import sys
from pathlib import Path

import pytest

from toolcall import enum, integer, number, obj, string, tool
from toolcall.server import McpServer

FIXTURES = Path(__file__).parent / "fixtures"


def _explode(**_: object) -> None:
    raise RuntimeError("Intentional crash for testing")


async def _slow_echo(text: str, delay: float) -> str:
    await asyncio.sleep(delay)
    return text


@pytest.fixture
def registry() -> dict:
    """Registry covering text, structured, async, failing and defaulted tools."""
    return {
        "greet": tool(
            description="Greet someone",
            parameters=obj(name=string(description="Name to greet")),
            execute=lambda name: f"Hello, {name}!",
        ),
        "add": tool(
            description="Add two numbers",
            parameters=obj(a=number(), b=number()),
            execute=lambda a, b: {"result": a + b},
        ),
        "slow_echo": tool(
            description="Echo after a delay",
            parameters=obj(text=string(), delay=number(minimum=0).default(0)),
            execute=_slow_echo,
        ),
        "crash": tool(
            description="Always crashes",
            parameters=obj(),
            execute=_explode,
        ),
        "search": tool(
            description="Search with options",
            parameters=obj(
                query=string(min_length=1),
                filters=obj(
                    category=enum("a", "b", "c"),
                    min_price=number().optional(),
                ).optional(),
                limit=integer(minimum=1, maximum=100).default(10),
            ),
            execute=lambda query, limit, filters=None: {
                "query": query,
                "limit": limit,
                "filters": filters,
            },
        ),
        "shout": tool(
            description="Upper-case a bare string",
            parameters=string(),
            execute=lambda value: value.upper(),
        ),
    }


@pytest.fixture
def server(registry: dict) -> McpServer:
    """Server exposing the shared registry."""
    return McpServer(registry, name="test-server", version="9.9.9")


@pytest.fixture
def stdio_server_command() -> str:
    """Command line that starts the fixture server over stdio."""
    return f'"{sys.executable}" "{FIXTURES / "stdio_server.py"}"'
