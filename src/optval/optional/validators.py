"""Presence validators for rules declared directly on ``Option`` properties."""

from __future__ import annotations

from typing import Any

from optval.domain.errors import InvalidPropertyBindingError
from optval.domain.expressions import is_option_type
from optval.domain.option import Option
from optval.engine.builder import RuleBuilder
from optval.engine.validators import PropertyValidator, ValidationContext


class MustBePresentValidator(PropertyValidator):
    """Valid only for an Option holding a value; anything else fails."""

    default_message = "'{PropertyName}' must contain a value."

    def is_valid(self, context: ValidationContext) -> bool:
        return isinstance(context.value, Option) and context.value.has_value


class MustBeAbsentValidator(PropertyValidator):
    """Valid only for an empty Option; anything else fails."""

    default_message = "'{PropertyName}' must not contain a value."

    def is_valid(self, context: ValidationContext) -> bool:
        return isinstance(context.value, Option) and not context.value.has_value


def _check_option_view(rule: RuleBuilder[Any, Any], operation: str) -> None:
    declared = rule.declared_type
    if declared is not Any and not is_option_type(declared):
        msg = (
            f"{operation}() needs a rule on an Option property; "
            f"{rule.rule.property_name!r} is viewed as {declared!r}"
        )
        raise InvalidPropertyBindingError(msg)
    if rule.rule.transformer is not None:
        msg = (
            f"{operation}() cannot be added to {rule.rule.property_name!r} after it was unwrapped; "
            "declare a separate rule_for() for the Option itself"
        )
        raise InvalidPropertyBindingError(msg)


def must_be_present[B: RuleBuilder[Any, Any]](rule: B) -> B:
    _check_option_view(rule, "must_be_present")
    return rule.set_validator(MustBePresentValidator())


def must_be_absent[B: RuleBuilder[Any, Any]](rule: B) -> B:
    _check_option_view(rule, "must_be_absent")
    return rule.set_validator(MustBeAbsentValidator())
