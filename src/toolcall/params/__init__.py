"""Parameter schemas: model, wire translation and validation."""

from toolcall.params.schema import (
    MISSING,
    ArraySchema,
    BooleanSchema,
    EnumSchema,
    IntegerSchema,
    NumberSchema,
    ObjectSchema,
    ParamSchema,
    SchemaKind,
    StringSchema,
    array,
    boolean,
    enum,
    integer,
    number,
    obj,
    string,
)
from toolcall.params.validator import ValidationResult, check_schema, safe_validate
from toolcall.params.wire import field_schema, translate

__all__ = [
    "MISSING",
    "ArraySchema",
    "BooleanSchema",
    "EnumSchema",
    "IntegerSchema",
    "NumberSchema",
    "ObjectSchema",
    "ParamSchema",
    "SchemaKind",
    "StringSchema",
    "ValidationResult",
    "array",
    "boolean",
    "check_schema",
    "enum",
    "field_schema",
    "integer",
    "number",
    "obj",
    "safe_validate",
    "string",
    "translate",
]
