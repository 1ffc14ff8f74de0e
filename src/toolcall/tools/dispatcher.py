"""Tool dispatcher - validates arguments and runs the named tool."""

from __future__ import annotations

import asyncio
import inspect
import logging
import re
import time
from functools import cached_property
from types import MappingProxyType
from typing import Any

from toolcall.errors import ToolNotFoundError, ToolTimeoutError, ToolValidationError
from toolcall.params.validator import safe_validate
from toolcall.params.wire import WRAPPED_VALUE_KEY, is_object_schema
from toolcall.protocol.tools import McpToolDefinition, ToolOutput, to_output
from toolcall.tools.base import ToolDefinition, ToolRegistry

logger = logging.getLogger(__name__)

# Patterns for sensitive argument keys
SENSITIVE_PATTERNS = [
    re.compile(r"password", re.IGNORECASE),
    re.compile(r"secret", re.IGNORECASE),
    re.compile(r"api[_-]?key", re.IGNORECASE),
    re.compile(r"token", re.IGNORECASE),
    re.compile(r"(^|[_-])auth(entication|orization)?($|[_-])", re.IGNORECASE),
    re.compile(r"credential", re.IGNORECASE),
    re.compile(r"private[_-]?key", re.IGNORECASE),
]


def _is_sensitive_key(key: str) -> bool:
    """Check if a key name indicates sensitive data."""
    return any(pattern.search(key) for pattern in SENSITIVE_PATTERNS)


def redact_arguments(arguments: Any) -> Any:
    """Return a copy of ``arguments`` safe for logging.

    Args:
        arguments: Raw tool arguments.

    Returns:
        Same structure with values under sensitive keys replaced.
    """
    if not isinstance(arguments, dict):
        return arguments
    redacted = {}
    for key, value in arguments.items():
        if _is_sensitive_key(str(key)):
            redacted[key] = "[REDACTED]"
        else:
            redacted[key] = redact_arguments(value)
    return redacted


class ToolDispatcher:
    """Routes tool calls to registered tools.

    Holds a read-only snapshot of the registry, so it can be shared by
    concurrent calls without locking.
    """

    def __init__(self, tools: ToolRegistry, tool_timeout: float | None = None) -> None:
        """Initialize the dispatcher.

        Args:
            tools: Mapping of tool name to definition.
            tool_timeout: Seconds to wait for an asynchronous tool before
                giving up, or None to wait indefinitely.
        """
        self._tools: ToolRegistry = MappingProxyType(dict(tools))
        self._tool_timeout = tool_timeout

    @property
    def tools(self) -> ToolRegistry:
        return self._tools

    @cached_property
    def _definitions(self) -> tuple[McpToolDefinition, ...]:
        return tuple(definition.to_mcp(name) for name, definition in self._tools.items())

    def list_tools(self) -> list[McpToolDefinition]:
        """List all tools in wire format, in registry order."""
        return list(self._definitions)

    def _select_input(self, name: str, definition: ToolDefinition, arguments: Any) -> Any:
        """Pick the value to validate, unwrapping non-object parameter schemas."""
        if is_object_schema(definition.parameters):
            return arguments
        if isinstance(arguments, dict) and WRAPPED_VALUE_KEY in arguments:
            return arguments[WRAPPED_VALUE_KEY]
        raise ToolValidationError(name, {WRAPPED_VALUE_KEY: ["Required"]})

    async def _execute(self, name: str, definition: ToolDefinition, data: Any) -> Any:
        parameters = definition.parameters
        if is_object_schema(parameters):
            # Omitted optional fields are passed as None
            kwargs = {field: data.get(field) for field, _ in parameters.fields}
            result = definition.execute(**kwargs)
        else:
            result = definition.execute(data)

        if not inspect.isawaitable(result):
            return result
        if self._tool_timeout is None:
            return await result
        try:
            return await asyncio.wait_for(result, timeout=self._tool_timeout)
        except TimeoutError:
            raise ToolTimeoutError(name, self._tool_timeout) from None

    async def call_tool(self, name: str, arguments: Any) -> ToolOutput:
        """Validate arguments and run a tool.

        Args:
            name: Name of the tool to call.
            arguments: Raw arguments from the request.

        Returns:
            The tool's return value, classified for rendering.

        Raises:
            ToolNotFoundError: If the tool is not registered.
            ToolValidationError: If the arguments fail validation.
            ToolTimeoutError: If the tool exceeds the configured timeout.
            Exception: Anything the tool itself raises.
        """
        definition = self._tools.get(name) if isinstance(name, str) else None
        if definition is None:
            raise ToolNotFoundError(name)

        logger.debug("Calling tool %s with %s", name, redact_arguments(arguments))

        validation = safe_validate(
            definition.parameters, self._select_input(name, definition, arguments)
        )
        if not validation.success:
            logger.info("Rejected arguments for tool %s: %s", name, validation.errors)
            raise ToolValidationError(name, validation.errors)

        started = time.perf_counter()
        try:
            result = await self._execute(name, definition, validation.data)
        except Exception:
            duration_ms = (time.perf_counter() - started) * 1000
            logger.warning("Tool %s failed after %.1f ms", name, duration_ms, exc_info=True)
            raise

        duration_ms = (time.perf_counter() - started) * 1000
        logger.debug("Tool %s finished in %.1f ms", name, duration_ms)
        return to_output(result)
