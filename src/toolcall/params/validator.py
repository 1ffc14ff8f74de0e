"""Validation of raw tool arguments against a parameter schema.

Structural checks are delegated to JSON Schema (Draft 2020-12) run against
the schema's wire rendering; afterwards the accepted input is rebuilt from
the declared fields with defaults applied.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any

from jsonschema import Draft202012Validator
from jsonschema.exceptions import SchemaError

from toolcall.errors import ToolcallError
from toolcall.params.schema import ArraySchema, ObjectSchema, ParamSchema
from toolcall.params.wire import field_schema

# Report key used for errors that concern the whole input
ROOT_PATH = "root"


class InvalidSchemaError(ToolcallError):
    """Raised when a parameter schema does not render to a valid JSON Schema."""

    pass


@dataclass
class ValidationResult:
    """Outcome of ``safe_validate``.

    Exactly one of ``data`` (on success) or ``errors`` (on failure) is
    meaningful.
    """

    success: bool
    data: Any = None
    errors: dict[str, list[str]] = field(default_factory=dict)


def _format_path(parts: list[Any]) -> str:
    return ".".join(str(p) for p in parts) if parts else ROOT_PATH


def _add_reason(report: dict[str, list[str]], path: str, reason: str) -> None:
    reasons = report.setdefault(path, [])
    if reason not in reasons:
        reasons.append(reason)


def _collect_errors(validator: Draft202012Validator, data: Any) -> dict[str, list[str]]:
    """Gather every schema violation into a field path -> reasons mapping."""
    report: dict[str, list[str]] = {}
    for error in validator.iter_errors(data):
        path = list(error.absolute_path)
        if error.validator == "required" and isinstance(error.instance, dict):
            # Report missing fields under their own path, not the parent's
            for name in error.validator_value:
                if name not in error.instance:
                    _add_reason(report, _format_path([*path, name]), "Required")
            continue
        _add_reason(report, _format_path(path), error.message)
    return report


def _apply_defaults(schema: ParamSchema, value: Any) -> Any:
    """Rebuild an already-valid value, filling defaults and dropping unknown keys."""
    if isinstance(schema, ObjectSchema):
        result: dict[str, Any] = {}
        for name, sub in schema.fields:
            if name in value:
                result[name] = _apply_defaults(sub, value[name])
            elif sub.has_default:
                result[name] = _apply_defaults(sub, copy.deepcopy(sub.default_value))
        return result
    if isinstance(schema, ArraySchema):
        if schema.items is None:
            return list(value)
        return [_apply_defaults(schema.items, item) for item in value]
    return value


def check_schema(schema: ParamSchema) -> None:
    """Verify that a parameter schema renders to a usable JSON Schema.

    Raises:
        InvalidSchemaError: If the rendered schema is rejected.
    """
    try:
        Draft202012Validator.check_schema(field_schema(schema))
    except SchemaError as e:
        raise InvalidSchemaError(f"Invalid parameter schema: {e.message}") from e


def safe_validate(schema: ParamSchema, data: Any) -> ValidationResult:
    """Validate ``data`` without raising on invalid input.

    Args:
        schema: Parameter schema to validate against.
        data: Raw, untyped input (usually decoded JSON).

    Returns:
        ValidationResult with the defaulted output, or a report mapping each
        offending field path to the reasons it was rejected.
    """
    validator = Draft202012Validator(field_schema(schema))
    errors = _collect_errors(validator, data)
    if errors:
        return ValidationResult(success=False, errors=errors)
    return ValidationResult(success=True, data=_apply_defaults(schema, data))
