"""Server used by client tests over a real stdio subprocess."""

import asyncio
import os

from toolcall import ServerConfig, number, obj, serve, string, tool


async def sleep_then(text: str, delay: float) -> str:
    await asyncio.sleep(delay)
    return text


def die(code: int) -> None:
    os._exit(code)


tools = {
    "greet": tool(
        description="Greet someone",
        parameters=obj(name=string()),
        execute=lambda name: f"Hello, {name}!",
    ),
    "add": tool(
        description="Add two numbers",
        parameters=obj(a=number(), b=number()),
        execute=lambda a, b: {"result": a + b},
    ),
    "sleep_then": tool(
        description="Return text after a delay",
        parameters=obj(text=string(), delay=number(minimum=0)),
        execute=sleep_then,
    ),
    "die": tool(
        description="Exit the server process immediately",
        parameters=obj(code=number().default(3)),
        execute=lambda code: die(int(code)),
    ),
}

if __name__ == "__main__":
    serve(ServerConfig(name="fixture-server", version="0.1.0", tools=tools))
