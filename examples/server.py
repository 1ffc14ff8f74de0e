"""Example MCP server.

Run over stdio:

    python examples/server.py

or over HTTP:

    toolcall serve --tools examples/server.py:tools --transport http --port 3000
"""

from __future__ import annotations

import asyncio
import logging
import random
import sys

from toolcall import ServerConfig, enum, integer, number, obj, serve, string, tool


async def get_weather(city: str, unit: str) -> dict:
    # Simulated weather data
    await asyncio.sleep(0)
    temp = round(random.random() * 30 + 10)
    if unit == "fahrenheit":
        temp = round(temp * 9 / 5 + 32)
    return {
        "city": city,
        "temperature": temp,
        "unit": unit,
        "condition": random.choice(["sunny", "cloudy", "rainy"]),
    }


async def search(query: str, limit: int) -> dict:
    # Simulated search results
    return {
        "query": query,
        "results": [
            {"title": f'Result {i} for "{query}"', "url": f"https://example.com/result/{i}"}
            for i in range(1, min(limit, 3) + 1)
        ],
    }


tools = {
    "greet": tool(
        description="Greet someone by name",
        parameters=obj(name=string(description="The name of the person to greet")),
        execute=lambda name: f"Hello, {name}!",
    ),
    "add": tool(
        description="Add two numbers together",
        parameters=obj(
            a=number(description="First number"),
            b=number(description="Second number"),
        ),
        execute=lambda a, b: {"result": a + b},
    ),
    "get_weather": tool(
        description="Get the current weather for a city",
        parameters=obj(
            city=string(description="City name"),
            unit=enum("celsius", "fahrenheit").default("celsius").describe("Temperature unit"),
        ),
        execute=get_weather,
    ),
    "search": tool(
        description="Search for information",
        parameters=obj(
            query=string(description="Search query"),
            limit=integer(minimum=1, maximum=100).default(10).describe("Maximum results"),
        ),
        execute=search,
    ),
}


if __name__ == "__main__":
    logging.basicConfig(stream=sys.stderr, level=logging.INFO, format="[example] %(message)s")
    serve(ServerConfig(name="example-server", version="1.0.0", tools=tools))
