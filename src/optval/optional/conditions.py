"""Presence conditions — gate validators on whether an Option holds a value.

A presence condition re-evaluates the property expression against the
root instance on every call. Nothing is cached: the same condition is
shared by every instance a validator sees.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from optval.domain.errors import InvalidPropertyBindingError, require
from optval.domain.expressions import PropertyExpression, is_option_type, resolve_expression
from optval.domain.option import Option
from optval.engine.rule import ApplyConditionTo

if TYPE_CHECKING:
    from optval.engine.builder import Expression, RuleBuilder


class Polarity(StrEnum):
    """Which presence state lets gated validators run."""

    WHEN_SOME = "when_some"
    WHEN_NONE = "when_none"


@dataclass(frozen=True)
class PresenceCondition:
    """``root -> bool`` predicate over an ``Option`` property."""

    expression: PropertyExpression
    polarity: Polarity

    @property
    def presence_of(self) -> PropertyExpression:
        """The expression whose presence this condition tests."""
        return self.expression

    def __call__(self, instance: Any) -> bool:
        # Errors raised by the accessor propagate unchanged
        value = self.expression(instance)
        if not isinstance(value, Option):
            msg = (
                f"Presence condition on {self.expression.name!r} expected an Option, "
                f"got {type(value).__qualname__}"
            )
            raise InvalidPropertyBindingError(msg)
        if self.polarity == Polarity.WHEN_SOME:
            return value.has_value
        return not value.has_value


def synthesize_presence_condition(
    expression: PropertyExpression,
    polarity: Polarity,
) -> PresenceCondition:
    """Build the presence predicate for *expression*.

    Raises:
        NullArgumentError: If *expression* is None.
        InvalidPropertyBindingError: If the expression is declared with a
            type other than ``Option[T]``.
    """
    require(expression, "expression")
    if expression.is_typed and not is_option_type(expression.declared_type):
        msg = (
            f"Cannot gate on presence of {expression.name!r}: declared as "
            f"{expression.declared_type!r}, not Option[T]"
        )
        raise InvalidPropertyBindingError(msg)
    return PresenceCondition(expression=expression, polarity=Polarity(polarity))


def gate_on_presence[B: RuleBuilder[Any, Any]](
    rule: B,
    expression: Expression | None,
    polarity: Polarity,
    apply_to: ApplyConditionTo = ApplyConditionTo.ALL_VALIDATORS,
) -> B:
    """Attach a presence condition to *rule*'s validators.

    With *expression* None the condition tests the rule's own property,
    which is how a deferred ``unwrap()`` chain is completed. Otherwise it
    may name any ``Option`` property of the root type, e.g. "Name must
    equal X, but only when Age is present".
    """
    require(rule, "rule")
    if expression is None:
        prop = rule.rule.expression
    else:
        prop = resolve_expression(
            expression,
            rule.parent_validator.get_root_type(),
            require_name=False,
        )
    condition = synthesize_presence_condition(prop, polarity)
    rule.rule.apply_condition(condition, ApplyConditionTo(apply_to))
    return rule
