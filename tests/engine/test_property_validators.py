"""Tests for the built-in property validators."""

from __future__ import annotations

from typing import Any

import pytest

from optval.engine.validators import (
    BetweenValidator,
    EmptyValidator,
    EqualValidator,
    ExclusiveBetweenValidator,
    GreaterThanOrEqualValidator,
    GreaterThanValidator,
    LengthValidator,
    LessThanOrEqualValidator,
    LessThanValidator,
    NotEmptyValidator,
    NotEqualValidator,
    NotNullValidator,
    NullValidator,
    PredicateValidator,
    RegexValidator,
    ValidationContext,
)


def ctx(value: Any, instance: Any = None) -> ValidationContext:
    return ValidationContext(
        instance=instance,
        property_name="field",
        display_name="Field",
        value=value,
    )


class TestNullness:
    def test_not_null(self) -> None:
        assert NotNullValidator().is_valid(ctx(0))
        assert not NotNullValidator().is_valid(ctx(None))

    def test_null(self) -> None:
        assert NullValidator().is_valid(ctx(None))
        assert not NullValidator().is_valid(ctx(""))

    @pytest.mark.parametrize("value", [None, "", "   ", [], {}, ()])
    def test_empty_values(self, value: Any) -> None:
        assert not NotEmptyValidator().is_valid(ctx(value))
        assert EmptyValidator().is_valid(ctx(value))

    @pytest.mark.parametrize("value", ["a", [1], 0, False])
    def test_non_empty_values(self, value: Any) -> None:
        assert NotEmptyValidator().is_valid(ctx(value))


class TestComparison:
    def test_equal(self) -> None:
        assert EqualValidator("Age").is_valid(ctx("Age"))
        assert not EqualValidator("Age").is_valid(ctx("NotAge"))

    def test_equal_none_is_compared(self) -> None:
        assert not EqualValidator("Age").is_valid(ctx(None))

    def test_not_equal(self) -> None:
        assert NotEqualValidator(1).is_valid(ctx(2))
        assert not NotEqualValidator(1).is_valid(ctx(1))

    def test_callable_comparison_reads_root(self) -> None:
        validator = EqualValidator(lambda root: root["expected"])
        assert validator.is_valid(ctx(3, instance={"expected": 3}))
        assert not validator.is_valid(ctx(4, instance={"expected": 3}))

    @pytest.mark.parametrize(
        ("validator", "value", "expected"),
        [
            (GreaterThanValidator(0), 1, True),
            (GreaterThanValidator(0), 0, False),
            (GreaterThanOrEqualValidator(0), 0, True),
            (GreaterThanOrEqualValidator(0), -1, False),
            (LessThanValidator(10), 9, True),
            (LessThanValidator(10), 10, False),
            (LessThanOrEqualValidator(10), 10, True),
            (LessThanOrEqualValidator(10), 11, False),
        ],
    )
    def test_ordering(self, validator: Any, value: int, expected: bool) -> None:
        assert validator.is_valid(ctx(value)) is expected

    def test_none_passes_ordering(self) -> None:
        assert GreaterThanValidator(0).is_valid(ctx(None))

    def test_message_arguments(self) -> None:
        args = GreaterThanOrEqualValidator(5).message_arguments(ctx(1))
        assert args == {"ComparisonValue": 5}


class TestBetween:
    def test_inclusive(self) -> None:
        v = BetweenValidator(0, 10)
        assert v.is_valid(ctx(0))
        assert v.is_valid(ctx(10))
        assert not v.is_valid(ctx(11))
        assert v.error_code == "InclusiveBetweenValidator"

    def test_exclusive(self) -> None:
        v = ExclusiveBetweenValidator(0, 10)
        assert not v.is_valid(ctx(0))
        assert v.is_valid(ctx(5))
        assert v.error_code == "ExclusiveBetweenValidator"

    def test_inverted_range(self) -> None:
        with pytest.raises(ValueError, match="less than lower bound"):
            BetweenValidator(10, 0)


class TestStrings:
    def test_length(self) -> None:
        v = LengthValidator(2, 4)
        assert v.is_valid(ctx("abc"))
        assert not v.is_valid(ctx("a"))
        assert not v.is_valid(ctx("abcde"))
        assert v.message_arguments(ctx("a"))["TotalLength"] == 1

    def test_length_unbounded(self) -> None:
        assert LengthValidator(1).is_valid(ctx("x" * 1000))

    def test_regex(self) -> None:
        v = RegexValidator(r"^\d+$")
        assert v.is_valid(ctx("123"))
        assert not v.is_valid(ctx("12a"))


class TestPredicate:
    def test_value_only(self) -> None:
        assert PredicateValidator(lambda v: v % 2 == 0).is_valid(ctx(4))

    def test_with_root(self) -> None:
        v = PredicateValidator(lambda root, value: value in root, with_root=True)
        assert v.is_valid(ctx("a", instance={"a"}))
        assert not v.is_valid(ctx("b", instance={"a"}))

    def test_default_error_code_is_class_name(self) -> None:
        assert PredicateValidator(bool).error_code == "PredicateValidator"
