"""Tests for property expression resolution."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import pytest

from optval.domain.errors import InvalidPropertyBindingError, NullArgumentError
from optval.domain.expressions import (
    PropertyExpression,
    is_option_type,
    option_inner_type,
    resolve_expression,
    trace_attribute_path,
)
from optval.domain.option import Option


@dataclass
class Address:
    city: str
    postcode: Option[str]


@dataclass
class Person:
    name: str
    age: Option[int]
    address: Address


class Account:
    owner: str

    def __init__(self, owner: str, limit: int | None) -> None:
        self.owner = owner
        self._limit = limit

    @property
    def limit(self) -> Option[int]:
        return Option.some(self._limit) if self._limit is not None else Option.none()


def person_age(p: Person) -> Option[int]:
    return p.age


class TestTypeInspection:
    def test_is_option_type(self) -> None:
        assert is_option_type(Option)
        assert is_option_type(Option[int])
        assert not is_option_type(int)
        assert not is_option_type(Any)

    def test_option_inner_type(self) -> None:
        assert option_inner_type(Option[int]) is int
        assert option_inner_type(Option[list[str]]) == list[str]
        assert option_inner_type(Option) is Any
        assert option_inner_type(Any) is Any

    def test_option_inner_type_rejects_plain(self) -> None:
        with pytest.raises(InvalidPropertyBindingError, match="'name'"):
            option_inner_type(str, "name")


class TestResolvePath:
    def test_simple_path(self) -> None:
        expr = resolve_expression("age", Person)
        assert expr.name == "age"
        assert expr.declared_type == Option[int]
        assert expr.is_option
        person = Person(name="A", age=Option.some(3), address=Address("X", Option.none()))
        assert expr(person) == Option.some(3)

    def test_nested_path(self) -> None:
        expr = resolve_expression("address.postcode", Person)
        assert expr.declared_type == Option[str]
        person = Person(name="A", age=Option.none(), address=Address("X", Option.some("N1")))
        assert expr(person) == Option.some("N1")

    def test_property_return_annotation(self) -> None:
        expr = resolve_expression("limit", Account)
        assert expr.declared_type == Option[int]
        assert expr(Account("a", 5)) == Option.some(5)

    def test_unknown_root_is_untyped(self) -> None:
        expr = resolve_expression("age")
        assert expr.declared_type is Any
        assert not expr.is_typed

    def test_missing_attribute_fails_fast(self) -> None:
        with pytest.raises(InvalidPropertyBindingError, match="no property 'agee'"):
            resolve_expression("agee", Person)

    @pytest.mark.parametrize("path", ["", "  ", "a..b", "1abc", "a-b"])
    def test_invalid_paths(self, path: str) -> None:
        with pytest.raises(InvalidPropertyBindingError):
            resolve_expression(path, Person)

    def test_explicit_name(self) -> None:
        expr = resolve_expression("age", Person, name="years")
        assert expr.name == "years"


class TestResolveCallable:
    def test_annotated_function(self) -> None:
        expr = resolve_expression(person_age, Person)
        assert expr.name == "person_age"
        assert expr.declared_type == Option[int]

    def test_lambda_requires_name(self) -> None:
        with pytest.raises(InvalidPropertyBindingError, match="name="):
            resolve_expression(lambda p: p.age, Person)

    def test_lambda_with_name(self) -> None:
        expr = resolve_expression(lambda p: p.age, Person, name="age")
        assert expr.name == "age"
        assert expr.declared_type is Any

    def test_lambda_without_name_when_not_required(self) -> None:
        expr = resolve_expression(lambda p: p.age, Person, require_name=False)
        assert expr.name == "age"
        assert expr.path == "age"

    def test_untraceable_lambda_without_name(self) -> None:
        expr = resolve_expression(lambda p: p.tags[0], Person, require_name=False)
        assert expr.name == ""
        assert expr.path is None


class TestResolveOther:
    def test_none_rejected(self) -> None:
        with pytest.raises(NullArgumentError) as exc_info:
            resolve_expression(None, Person)
        assert exc_info.value.argument == "expression"

    def test_passthrough(self) -> None:
        expr = PropertyExpression(name="x", accessor=lambda r: r, declared_type=int)
        assert resolve_expression(expr) is expr

    def test_passthrough_renamed(self) -> None:
        expr = PropertyExpression(name="x", accessor=lambda r: r, declared_type=int)
        renamed = resolve_expression(expr, name="y")
        assert renamed.name == "y"
        assert renamed.declared_type is int

    def test_unsupported(self) -> None:
        with pytest.raises(InvalidPropertyBindingError, match="Unsupported"):
            resolve_expression(42, Person)  # type: ignore[arg-type]


class TestTracePath:
    def test_lambda(self) -> None:
        assert trace_attribute_path(lambda p: p.age) == "age"

    def test_nested(self) -> None:
        assert trace_attribute_path(lambda p: p.address.postcode) == "address.postcode"

    def test_named_function(self) -> None:
        assert trace_attribute_path(person_age) == "age"

    @pytest.mark.parametrize(
        "accessor",
        [
            lambda p: p,
            lambda p: p.age.map(str),
            lambda p: len(p.name),
            lambda p: 42,
        ],
    )
    def test_untraceable(self, accessor: Any) -> None:
        assert trace_attribute_path(accessor) is None

    def test_accessor_errors_are_not_raised(self) -> None:
        def boom(_: Any) -> Option[int]:
            raise RuntimeError("accessor failed")

        assert trace_attribute_path(boom) is None


class TestRefersTo:
    def test_same_path(self) -> None:
        by_path = resolve_expression("age", Person)
        assert by_path.refers_to(resolve_expression(lambda p: p.age, Person, name="years"))
        assert by_path.refers_to(resolve_expression(person_age, Person))

    def test_same_name_different_property(self) -> None:
        by_path = resolve_expression("age", Person)
        assert not by_path.refers_to(resolve_expression(lambda p: p.name, Person, name="age"))

    def test_same_accessor(self) -> None:
        expr = PropertyExpression(name="a", accessor=person_age)
        assert expr.refers_to(PropertyExpression(name="b", accessor=person_age))

    def test_untraced_expressions_differ(self) -> None:
        a = PropertyExpression(name="age", accessor=lambda p: p.age)
        b = PropertyExpression(name="age", accessor=lambda p: p.age)
        assert not a.refers_to(b)
