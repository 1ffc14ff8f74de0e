"""Translate parameter schemas into the JSON Schema form sent to clients.

``translate`` produces the ``inputSchema`` of a ``tools/list`` entry, which
must always be object-shaped. ``field_schema`` renders any single schema and
is also what the validator checks arguments against.
"""

from __future__ import annotations

import copy
from collections.abc import Callable
from typing import Any

from toolcall.params.schema import (
    ArraySchema,
    BooleanSchema,
    EnumSchema,
    IntegerSchema,
    NumberSchema,
    ObjectSchema,
    ParamSchema,
    SchemaKind,
    StringSchema,
)

# Name of the single property used to expose non-object root schemas
WRAPPED_VALUE_KEY = "value"


def _string(schema: StringSchema) -> dict[str, Any]:
    out: dict[str, Any] = {"type": "string"}
    if schema.min_length is not None:
        out["minLength"] = schema.min_length
    if schema.max_length is not None:
        out["maxLength"] = schema.max_length
    if schema.pattern is not None:
        out["pattern"] = schema.pattern
    return out


def _bounded(type_name: str, schema: NumberSchema | IntegerSchema) -> dict[str, Any]:
    out: dict[str, Any] = {"type": type_name}
    if schema.minimum is not None:
        out["minimum"] = schema.minimum
    if schema.maximum is not None:
        out["maximum"] = schema.maximum
    return out


def _number(schema: NumberSchema) -> dict[str, Any]:
    return _bounded("number", schema)


def _integer(schema: IntegerSchema) -> dict[str, Any]:
    return _bounded("integer", schema)


def _boolean(schema: BooleanSchema) -> dict[str, Any]:
    return {"type": "boolean"}


def _enum(schema: EnumSchema) -> dict[str, Any]:
    out: dict[str, Any] = {"enum": list(schema.values)}
    # Homogeneous string enums also advertise their type
    if all(isinstance(v, str) for v in schema.values):
        out = {"type": "string", **out}
    return out


def _array(schema: ArraySchema) -> dict[str, Any]:
    out: dict[str, Any] = {"type": "array"}
    if schema.items is not None:
        out["items"] = field_schema(schema.items)
    if schema.min_items is not None:
        out["minItems"] = schema.min_items
    if schema.max_items is not None:
        out["maxItems"] = schema.max_items
    return out


def _object(schema: ObjectSchema) -> dict[str, Any]:
    out: dict[str, Any] = {
        "type": "object",
        "properties": {name: field_schema(sub) for name, sub in schema.fields},
    }
    required = schema.required_fields
    if required:
        out["required"] = required
    return out


_TRANSLATORS: dict[SchemaKind, Callable[[Any], dict[str, Any]]] = {
    SchemaKind.STRING: _string,
    SchemaKind.NUMBER: _number,
    SchemaKind.INTEGER: _integer,
    SchemaKind.BOOLEAN: _boolean,
    SchemaKind.ENUM: _enum,
    SchemaKind.ARRAY: _array,
    SchemaKind.OBJECT: _object,
}

_untranslated = set(SchemaKind) - set(_TRANSLATORS)
if _untranslated:
    names = ", ".join(sorted(kind.name for kind in _untranslated))
    raise RuntimeError(f"No wire translation for schema kinds: {names}")


def field_schema(schema: ParamSchema) -> dict[str, Any]:
    """Render one parameter schema as a JSON Schema fragment.

    Args:
        schema: Schema to render.

    Returns:
        JSON Schema dictionary carrying description and default, if set.

    Raises:
        TypeError: If ``schema`` is not a parameter schema.
    """
    if not isinstance(schema, ParamSchema):
        raise TypeError(f"Not a parameter schema: {schema!r}")

    out = _TRANSLATORS[schema.kind](schema)
    if schema.description is not None:
        out["description"] = schema.description
    if schema.has_default:
        out["default"] = copy.deepcopy(schema.default_value)
    return out


def is_object_schema(schema: ParamSchema) -> bool:
    return schema.kind is SchemaKind.OBJECT


def translate(schema: ParamSchema) -> dict[str, Any]:
    """Convert a tool's parameter schema into an MCP ``inputSchema``.

    Object schemas map to ``{type, properties, required?}``. Any other root
    is wrapped as a single required ``value`` property, since tool arguments
    are always an object on the wire.

    Args:
        schema: Root parameter schema of a tool.

    Returns:
        Object-shaped JSON Schema. ``required`` is omitted when empty.
    """
    if not is_object_schema(schema):
        return {
            "type": "object",
            "properties": {WRAPPED_VALUE_KEY: field_schema(schema)},
            "required": [WRAPPED_VALUE_KEY],
        }

    rendered = field_schema(schema)
    result: dict[str, Any] = {
        "type": "object",
        "properties": rendered["properties"],
    }
    if "required" in rendered:
        result["required"] = rendered["required"]
    return result
