"""Tool loader - resolves a tool registry from an import reference."""

from __future__ import annotations

import importlib
import importlib.util
import sys
from collections.abc import Mapping
from pathlib import Path

from toolcall.errors import ToolLoadError
from toolcall.tools.base import ToolDefinition, ToolRegistry


def _import_module(module_ref: str):
    """Import a module by dotted name, or from a ``.py`` file path."""
    if module_ref.endswith(".py"):
        path = Path(module_ref)
        if not path.exists():
            raise ToolLoadError(f"Tools module not found: {path}")
        spec = importlib.util.spec_from_file_location(f"toolcall_tools.{path.stem}", path)
        if spec is None or spec.loader is None:
            raise ToolLoadError(f"Cannot load tools from {path}")
        module = importlib.util.module_from_spec(spec)
        sys.modules[spec.name] = module
        spec.loader.exec_module(module)
        return module

    try:
        return importlib.import_module(module_ref)
    except ImportError as e:
        raise ToolLoadError(f"Cannot import tools module '{module_ref}': {e}") from e


def load_tools(reference: str) -> ToolRegistry:
    """Load a tool registry from ``"module:attribute"``.

    The module part may be a dotted module name or a path to a ``.py`` file.
    The attribute defaults to ``tools`` when omitted.

    Args:
        reference: Import reference to the registry mapping.

    Returns:
        The registry mapping tool names to definitions.

    Raises:
        ToolLoadError: If the reference cannot be resolved or does not
            point at a mapping of ToolDefinition values.
    """
    module_ref, _, attribute = reference.rpartition(":")
    if not module_ref:
        module_ref, attribute = attribute, "tools"

    module = _import_module(module_ref)
    if not hasattr(module, attribute):
        raise ToolLoadError(f"No attribute '{attribute}' in {module_ref}")

    registry = getattr(module, attribute)
    if not isinstance(registry, Mapping):
        raise ToolLoadError(f"{reference} is not a mapping of tools")

    for name, definition in registry.items():
        if not isinstance(definition, ToolDefinition):
            raise ToolLoadError(f"Tool '{name}' in {reference} is not a ToolDefinition")

    return registry
