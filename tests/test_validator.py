"""Tests for argument validation against parameter schemas."""

import pytest

from toolcall.params import array, boolean, enum, integer, number, obj, safe_validate, string
from toolcall.params.validator import InvalidSchemaError, check_schema


class TestSafeValidate:
    """Tests for successful validation."""

    def test_accepts_valid_input(self):
        """Should return the validated data."""
        result = safe_validate(obj(name=string()), {"name": "World"})

        assert result.success
        assert result.data == {"name": "World"}
        assert result.errors == {}

    def test_applies_defaults(self):
        """Should fill in defaults for omitted fields."""
        schema = obj(city=string(), unit=enum("celsius", "fahrenheit").default("celsius"))

        result = safe_validate(schema, {"city": "Paris"})

        assert result.data == {"city": "Paris", "unit": "celsius"}

    def test_keeps_supplied_value_over_default(self):
        """Should not overwrite a supplied value with the default."""
        result = safe_validate(obj(limit=integer().default(10)), {"limit": 3})

        assert result.data == {"limit": 3}

    def test_applies_nested_defaults(self):
        """Should apply defaults inside nested objects and defaulted objects."""
        schema = obj(
            options=obj(
                verbose=boolean().default(False),
                depth=integer().default(1),
            ).default({}),
        )

        result = safe_validate(schema, {})

        assert result.data == {"options": {"verbose": False, "depth": 1}}

    def test_default_values_are_copied(self):
        """Should hand each call its own copy of a mutable default."""
        schema = obj(tags=array(string()).default(["a"]))

        first = safe_validate(schema, {}).data
        first["tags"].append("b")
        second = safe_validate(schema, {}).data

        assert second == {"tags": ["a"]}

    def test_omits_missing_optional_fields(self):
        """Should leave missing optional fields absent."""
        result = safe_validate(obj(a=string(), b=string().optional()), {"a": "x"})

        assert result.data == {"a": "x"}

    def test_drops_undeclared_fields(self):
        """Should strip keys the schema does not declare."""
        result = safe_validate(obj(a=string()), {"a": "x", "extra": 1})

        assert result.data == {"a": "x"}

    def test_does_not_mutate_input(self):
        """Should build a new value rather than editing the input."""
        data = {"a": "x"}
        safe_validate(obj(a=string(), b=number().default(1)), data)

        assert data == {"a": "x"}

    def test_validates_primitives(self):
        """Should validate non-object schemas directly."""
        assert safe_validate(string(), "hi").data == "hi"
        assert not safe_validate(string(), 5).success


class TestValidationFailures:
    """Tests for the field-level error report."""

    def test_reports_missing_field_by_name(self):
        """Should report a missing required field under its own name."""
        result = safe_validate(obj(name=string()), {})

        assert not result.success
        assert result.errors == {"name": ["Required"]}

    def test_reports_every_missing_field(self):
        """Should report all missing fields, not just the first."""
        result = safe_validate(obj(a=number(), b=number()), {})

        assert set(result.errors) == {"a", "b"}

    def test_reports_wrong_type(self):
        """Should report a type mismatch under the field path."""
        result = safe_validate(obj(a=number()), {"a": "five"})

        assert "a" in result.errors
        assert "number" in result.errors["a"][0]

    def test_rejects_bool_for_number(self):
        """Should not accept booleans as numbers."""
        assert not safe_validate(obj(a=number()), {"a": True}).success

    def test_rejects_float_for_integer(self):
        """Should reject non-integral numbers for integer fields."""
        assert not safe_validate(obj(n=integer()), {"n": 1.5}).success

    @pytest.mark.parametrize(
        ("schema", "value"),
        [
            (number(minimum=0, maximum=10), 11),
            (number(minimum=0, maximum=10), -1),
            (string(min_length=2), "a"),
            (string(max_length=2), "abc"),
            (string(pattern="^[0-9]+$"), "12a"),
            (enum("a", "b"), "c"),
            (array(string(), max_items=1), ["a", "b"]),
        ],
    )
    def test_reports_constraint_violations(self, schema, value):
        """Should enforce bounds, patterns, enumerations and item counts."""
        result = safe_validate(obj(field=schema), {"field": value})

        assert not result.success
        assert "field" in result.errors

    def test_nested_paths(self):
        """Should report nested failures with dotted paths."""
        schema = obj(user=obj(name=string(), age=integer()))

        result = safe_validate(schema, {"user": {"age": "old"}})

        assert result.errors["user.name"] == ["Required"]
        assert "user.age" in result.errors

    def test_array_item_paths(self):
        """Should include the item index in the path."""
        result = safe_validate(obj(tags=array(string())), {"tags": ["ok", 3]})

        assert "tags.1" in result.errors

    def test_root_type_error(self):
        """Should report a non-object input at the root."""
        result = safe_validate(obj(a=string()), ["not", "an", "object"])

        assert "root" in result.errors

    def test_null_is_not_optional(self):
        """Should reject null for an optional field."""
        assert not safe_validate(obj(a=string().optional()), {"a": None}).success


class TestCheckSchema:
    """Tests for schema sanity checks."""

    def test_accepts_valid_schema(self):
        """Should accept well-formed schemas."""
        check_schema(obj(a=string(), b=array(integer(minimum=0))))

    def test_rejects_invalid_bounds(self):
        """Should reject schemas JSON Schema cannot express."""
        with pytest.raises(InvalidSchemaError):
            check_schema(string(min_length=-1))
