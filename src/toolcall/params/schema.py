"""Parameter schema model for tool inputs.

A schema is an immutable value describing the shape a tool accepts. Each
kind is its own dataclass; the common modifiers (description, optional,
default) live on the base so every kind supports them.

Example:

    params = obj(
        city=string(description="City name"),
        unit=enum("celsius", "fahrenheit").default("celsius"),
        days=integer(minimum=1, maximum=14).optional(),
    )
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, ClassVar


class SchemaKind(Enum):
    """Closed set of parameter schema kinds."""

    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    ENUM = "enum"
    ARRAY = "array"
    OBJECT = "object"


class _Missing:
    """Sentinel type for an absent default."""

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


@dataclass(frozen=True)
class ParamSchema:
    """Base for all parameter schemas."""

    description: str | None = field(default=None, kw_only=True)
    is_optional: bool = field(default=False, kw_only=True)
    default_value: Any = field(default=MISSING, kw_only=True)

    kind: ClassVar[SchemaKind]

    @property
    def has_default(self) -> bool:
        return self.default_value is not MISSING

    @property
    def is_required(self) -> bool:
        """Whether an enclosing object must supply this field."""
        return not (self.is_optional or self.has_default)

    def describe(self, text: str) -> ParamSchema:
        return replace(self, description=text)

    def optional(self) -> ParamSchema:
        return replace(self, is_optional=True)

    def default(self, value: Any) -> ParamSchema:
        """Return a copy of this schema that falls back to ``value`` when omitted."""
        return replace(self, default_value=copy.deepcopy(value))


@dataclass(frozen=True)
class StringSchema(ParamSchema):
    min_length: int | None = None
    max_length: int | None = None
    pattern: str | None = None

    kind = SchemaKind.STRING


@dataclass(frozen=True)
class NumberSchema(ParamSchema):
    minimum: float | None = None
    maximum: float | None = None

    kind = SchemaKind.NUMBER


@dataclass(frozen=True)
class IntegerSchema(ParamSchema):
    minimum: int | None = None
    maximum: int | None = None

    kind = SchemaKind.INTEGER


@dataclass(frozen=True)
class BooleanSchema(ParamSchema):
    kind = SchemaKind.BOOLEAN


@dataclass(frozen=True)
class EnumSchema(ParamSchema):
    """A closed set of literal values."""

    values: tuple[Any, ...] = ()

    kind = SchemaKind.ENUM


@dataclass(frozen=True)
class ArraySchema(ParamSchema):
    items: ParamSchema | None = None
    min_items: int | None = None
    max_items: int | None = None

    kind = SchemaKind.ARRAY


@dataclass(frozen=True)
class ObjectSchema(ParamSchema):
    """An object with named fields, kept in declaration order."""

    fields: tuple[tuple[str, ParamSchema], ...] = ()

    kind = SchemaKind.OBJECT

    @property
    def field_map(self) -> dict[str, ParamSchema]:
        return dict(self.fields)

    @property
    def required_fields(self) -> list[str]:
        return [name for name, schema in self.fields if schema.is_required]


def string(
    *,
    min_length: int | None = None,
    max_length: int | None = None,
    pattern: str | None = None,
    description: str | None = None,
) -> StringSchema:
    return StringSchema(
        min_length=min_length, max_length=max_length, pattern=pattern, description=description
    )


def number(
    *,
    minimum: float | None = None,
    maximum: float | None = None,
    description: str | None = None,
) -> NumberSchema:
    return NumberSchema(minimum=minimum, maximum=maximum, description=description)


def integer(
    *,
    minimum: int | None = None,
    maximum: int | None = None,
    description: str | None = None,
) -> IntegerSchema:
    return IntegerSchema(minimum=minimum, maximum=maximum, description=description)


def boolean(*, description: str | None = None) -> BooleanSchema:
    return BooleanSchema(description=description)


def enum(*values: Any, description: str | None = None) -> EnumSchema:
    if not values:
        raise ValueError("enum() requires at least one value")
    return EnumSchema(values=tuple(values), description=description)


def array(
    items: ParamSchema | None = None,
    *,
    min_items: int | None = None,
    max_items: int | None = None,
    description: str | None = None,
) -> ArraySchema:
    return ArraySchema(
        items=items, min_items=min_items, max_items=max_items, description=description
    )


def obj(
    fields: dict[str, ParamSchema] | None = None,
    /,
    *,
    description: str | None = None,
    **named: ParamSchema,
) -> ObjectSchema:
    """Build an object schema.

    Fields may be given as a mapping (for names that are not valid Python
    identifiers) and/or as keyword arguments. Declaration order is kept.
    """
    merged: dict[str, ParamSchema] = dict(fields or {})
    merged.update(named)
    for name, schema in merged.items():
        if not isinstance(schema, ParamSchema):
            raise TypeError(f"Field '{name}' is not a parameter schema: {schema!r}")
    return ObjectSchema(fields=tuple(merged.items()), description=description)
