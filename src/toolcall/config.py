"""Server configuration and YAML config loading.

``ServerConfig`` is what ``serve()`` consumes. ``load_config`` is used by
the command line to build one from a YAML file such as:

    name: example-server
    version: 1.0.0
    transport: http
    host: 127.0.0.1
    port: ${TOOLCALL_PORT}
    tools: examples/server.py:tools
    tool_timeout: 30
    log_level: INFO
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from toolcall.errors import ConfigError, ToolLoadError
from toolcall.tools.base import ToolRegistry
from toolcall.tools.loader import load_tools

TRANSPORTS = ("stdio", "http")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_ENV_PATTERN = re.compile(r"\$\{([^}]+)\}")


def expand_env_vars(value: str) -> str:
    """Expand environment variables in a string.

    Supports ${VAR_NAME} syntax. Unknown variables are left unchanged.

    Args:
        value: String potentially containing environment variable references.

    Returns:
        String with known environment variables expanded.
    """

    def replacer(match: re.Match[str]) -> str:
        env_value = os.environ.get(match.group(1))
        if env_value is not None:
            return env_value
        return match.group(0)

    return _ENV_PATTERN.sub(replacer, value)


@dataclass
class ServerConfig:
    """Everything needed to start a server."""

    tools: ToolRegistry = field(default_factory=dict)
    name: str = "toolcall-server"
    version: str = "1.0.0"
    transport: str = "stdio"
    host: str = "127.0.0.1"
    port: int = 3000
    tool_timeout: float | None = None
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Check field values.

        Raises:
            ConfigError: If any field is out of range.
        """
        if self.transport not in TRANSPORTS:
            raise ConfigError(
                f"Unknown transport '{self.transport}', expected one of {', '.join(TRANSPORTS)}"
            )
        if isinstance(self.port, bool) or not isinstance(self.port, int):
            raise ConfigError(f"port must be an integer, got {self.port!r}")
        if not 0 <= self.port <= 65535:
            raise ConfigError(f"port out of range: {self.port}")
        if self.tool_timeout is not None and self.tool_timeout <= 0:
            raise ConfigError(f"tool_timeout must be positive, got {self.tool_timeout}")
        if self.log_level.upper() not in LOG_LEVELS:
            raise ConfigError(f"Unknown log level '{self.log_level}'")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ServerConfig:
        """Build a config from a parsed YAML mapping.

        String values have ``${VAR}`` references expanded. ``tools`` may be a
        ``"module:attribute"`` reference, resolved via the tool loader.

        Raises:
            ConfigError: If the mapping has unknown keys or invalid values.
        """
        known = {"tools", "name", "version", "transport", "host", "port", "tool_timeout",
                 "log_level"}
        unknown = set(data) - known
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(sorted(unknown))}")

        values = {
            key: expand_env_vars(value) if isinstance(value, str) else value
            for key, value in data.items()
        }

        tools = values.get("tools", {})
        if isinstance(tools, str):
            try:
                values["tools"] = load_tools(tools)
            except ToolLoadError as e:
                raise ConfigError(str(e)) from e
        elif tools is None:
            values["tools"] = {}

        for key, convert in (("port", int), ("tool_timeout", float)):
            if isinstance(values.get(key), str):
                try:
                    values[key] = convert(values[key])
                except ValueError as e:
                    raise ConfigError(f"Invalid {key}: {values[key]!r}") from e

        for key in ("name", "version"):
            if key in values and values[key] is not None:
                values[key] = str(values[key])

        return cls(**values)


def load_config(path: Path) -> ServerConfig:
    """Load server configuration from a YAML file.

    Args:
        path: Path to the YAML config file.

    Returns:
        Parsed ServerConfig.

    Raises:
        ConfigError: If the file is missing, malformed or invalid.
    """
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError("Config file must contain a mapping")

    return ServerConfig.from_dict(data)
