"""Tests for ValidationFailure and ValidationResult."""

import json

import pytest
from pydantic import ValidationError

from optval.engine.result import ValidationFailure, ValidationResult


class TestValidationResult:
    def test_empty_is_valid(self) -> None:
        result = ValidationResult()
        assert result.is_valid is True
        assert result.failures == []
        assert result.meta is None

    def test_with_failures(self) -> None:
        failure = ValidationFailure(property_name="age", message="'Age' must not be empty.")
        result = ValidationResult(failures=[failure])
        assert result.is_valid is False
        assert result.failures[0].error_code == ""
        assert result.failures[0].attempted_value is None

    def test_errors_for(self) -> None:
        result = ValidationResult(
            failures=[
                ValidationFailure(property_name="age", message="a"),
                ValidationFailure(property_name="name", message="b"),
                ValidationFailure(property_name="age", message="c"),
            ]
        )
        assert [f.message for f in result.errors_for("age")] == ["a", "c"]
        assert result.errors_for("missing") == []

    def test_str_joins_messages(self) -> None:
        result = ValidationResult(
            failures=[
                ValidationFailure(property_name="age", message="first"),
                ValidationFailure(property_name="name", message="second"),
            ]
        )
        assert str(result) == "first\nsecond"
        assert str(result.failures[0]) == "first"

    def test_json_serialization(self) -> None:
        result = ValidationResult(
            failures=[
                ValidationFailure(
                    property_name="age",
                    message="too small",
                    attempted_value=-1,
                    error_code="GreaterThanValidator",
                )
            ],
            meta={"duration_ms": 3},
        )
        parsed = json.loads(result.model_dump_json())
        assert parsed["is_valid"] is False
        assert parsed["failures"][0]["attempted_value"] == -1
        assert parsed["failures"][0]["error_code"] == "GreaterThanValidator"
        assert parsed["meta"]["duration_ms"] == 3

    def test_frozen(self) -> None:
        result = ValidationResult()
        with pytest.raises(ValidationError):
            result.meta = {"x": 1}  # type: ignore[misc]
        failure = ValidationFailure(property_name="age", message="m")
        with pytest.raises(ValidationError):
            failure.message = "other"  # type: ignore[misc]
