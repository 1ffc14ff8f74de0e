"""Command line entry point.

    toolcall serve --tools examples/server.py:tools --transport http --port 3000
    toolcall serve --config config/server.yaml
    toolcall tools "python examples/server.py"
    toolcall call http://localhost:3000 add --args '{"a": 5, "b": 3}'
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any

from toolcall import __version__
from toolcall.client import McpClient
from toolcall.config import TRANSPORTS, ServerConfig, load_config
from toolcall.errors import ToolcallError
from toolcall.server import serve
from toolcall.tools.loader import load_tools

LOG_FORMAT = "[toolcall] %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str) -> None:
    """Send log records to stderr; stdout is reserved for the protocol."""
    logging.basicConfig(stream=sys.stderr, level=level.upper(), format=LOG_FORMAT, force=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="toolcall", description="MCP tool server and client")
    parser.add_argument("--version", "-v", action="version", version=f"toolcall {__version__}")
    commands = parser.add_subparsers(dest="command", required=True)

    serve_cmd = commands.add_parser("serve", help="Run an MCP server")
    serve_cmd.add_argument("--config", "-c", type=Path, help="Path to YAML config file")
    serve_cmd.add_argument("--tools", "-t", help="Tool registry as module:attribute")
    serve_cmd.add_argument("--transport", choices=TRANSPORTS)
    serve_cmd.add_argument("--host")
    serve_cmd.add_argument("--port", "-p", type=int)
    serve_cmd.add_argument("--name")
    serve_cmd.add_argument("--log-level")

    tools_cmd = commands.add_parser("tools", help="List the tools of a server")
    tools_cmd.add_argument("target", help="Server URL or command line")

    call_cmd = commands.add_parser("call", help="Call a tool on a server")
    call_cmd.add_argument("target", help="Server URL or command line")
    call_cmd.add_argument("tool", help="Tool name")
    call_cmd.add_argument("--args", "-a", default="{}", help="Tool arguments as a JSON object")

    return parser


def _server_config(args: argparse.Namespace) -> ServerConfig:
    config = load_config(args.config) if args.config else ServerConfig()

    overrides: dict[str, Any] = {}
    if args.tools:
        overrides["tools"] = load_tools(args.tools)
    for key in ("transport", "host", "port", "name", "log_level"):
        value = getattr(args, key)
        if value is not None:
            overrides[key] = value
    return replace(config, **overrides) if overrides else config


async def _list_tools(target: str) -> None:
    async with await McpClient.connect(target) as client:
        for definition in client.list_tools():
            print(f"{definition.name}: {definition.description}")


async def _call_tool(target: str, name: str, arguments: dict[str, Any]) -> None:
    async with await McpClient.connect(target) as client:
        result = await client.call(name, arguments)
    print(result if isinstance(result, str) else json.dumps(result, indent=2))


def main(argv: list[str] | None = None) -> int:
    """Run the command line.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    args = build_parser().parse_args(argv)

    try:
        if args.command == "serve":
            config = _server_config(args)
            configure_logging(config.log_level)
            serve(config)
        elif args.command == "tools":
            configure_logging("WARNING")
            asyncio.run(_list_tools(args.target))
        else:
            configure_logging("WARNING")
            try:
                arguments = json.loads(args.args)
            except json.JSONDecodeError as e:
                print(f"Error: --args is not valid JSON: {e}", file=sys.stderr)
                return 1
            asyncio.run(_call_tool(args.target, args.tool, arguments))

    except KeyboardInterrupt:
        return 130  # Standard exit code for SIGINT

    except ToolcallError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
