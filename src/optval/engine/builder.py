"""RuleBuilder — the chaining API over one rule.

A builder is a typed *view* of a :class:`PropertyRule`: it pairs the
rule with its owning validator and the declared type the author is
working with. Several builders may share one rule (for example the
``Option[int]`` view returned by ``rule_for`` and the ``int`` view
returned by ``unwrap``); every validator chained through any of them
lands on the same rule.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Self

from optval.domain.errors import require
from optval.domain.expressions import PropertyExpression, is_option_type
from optval.engine.rule import (
    ApplyConditionTo,
    CascadeMode,
    Condition,
    Negated,
    PropertyRule,
    RuleComponent,
)
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
    PropertyValidator,
    RegexValidator,
)

if TYPE_CHECKING:
    from optval.engine.validator import AbstractValidator
    from optval.optional.conditions import Polarity

Expression = str | Callable[[Any], Any] | PropertyExpression


class RuleBuilder[R, P]:
    """Fluent view of a rule on root type ``R`` at declared type ``P``."""

    def __init__(
        self,
        rule: PropertyRule,
        parent: AbstractValidator[R],
        declared_type: Any = Any,
        *,
        requires_gate: bool = False,
    ) -> None:
        self._rule = rule
        self._parent = parent
        self._declared_type = declared_type
        self._requires_gate = requires_gate

    def __repr__(self) -> str:
        return f"RuleBuilder({self._rule.property_name!r}, declared_type={self._declared_type!r})"

    @property
    def rule(self) -> PropertyRule:
        return self._rule

    @property
    def parent_validator(self) -> AbstractValidator[R]:
        return self._parent

    @property
    def declared_type(self) -> Any:
        return self._declared_type

    @property
    def requires_gate(self) -> bool:
        return self._requires_gate

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    def set_validator(self, validator: PropertyValidator) -> Self:
        """Append *validator* to the rule's chain."""
        require(validator, "validator")
        self._parent.ensure_mutable()
        self._rule.add_component(
            RuleComponent(
                validator=validator,
                optional_view=is_option_type(self._declared_type),
                requires_gate=self._requires_gate,
            )
        )
        return self

    def not_null(self) -> Self:
        return self.set_validator(NotNullValidator())

    def null(self) -> Self:
        return self.set_validator(NullValidator())

    def not_empty(self) -> Self:
        return self.set_validator(NotEmptyValidator())

    def empty(self) -> Self:
        return self.set_validator(EmptyValidator())

    def equal(self, comparison: Any) -> Self:
        """Property must equal *comparison* (a value or ``root -> value``)."""
        return self.set_validator(EqualValidator(comparison))

    def not_equal(self, comparison: Any) -> Self:
        return self.set_validator(NotEqualValidator(comparison))

    def greater_than(self, comparison: Any) -> Self:
        return self.set_validator(GreaterThanValidator(comparison))

    def greater_than_or_equal_to(self, comparison: Any) -> Self:
        return self.set_validator(GreaterThanOrEqualValidator(comparison))

    def less_than(self, comparison: Any) -> Self:
        return self.set_validator(LessThanValidator(comparison))

    def less_than_or_equal_to(self, comparison: Any) -> Self:
        return self.set_validator(LessThanOrEqualValidator(comparison))

    def inclusive_between(self, from_: Any, to: Any) -> Self:
        return self.set_validator(BetweenValidator(from_, to))

    def exclusive_between(self, from_: Any, to: Any) -> Self:
        return self.set_validator(ExclusiveBetweenValidator(from_, to))

    def length(self, min_length: int, max_length: int | None = None) -> Self:
        return self.set_validator(LengthValidator(min_length, max_length))

    def matches(self, pattern: str | re.Pattern[str]) -> Self:
        return self.set_validator(RegexValidator(pattern))

    def must(self, predicate: Callable[..., bool], *, with_root: bool = False) -> Self:
        require(predicate, "predicate")
        return self.set_validator(PredicateValidator(predicate, with_root=with_root))

    # ------------------------------------------------------------------
    # Options
    # ------------------------------------------------------------------

    def with_message(self, message: str) -> Self:
        """Override the current validator's message template."""
        require(message, "message")
        self._rule.current_component.custom_message = message
        return self

    def with_error_code(self, code: str) -> Self:
        require(code, "code")
        self._rule.current_component.error_code = code
        return self

    def with_name(self, name: str) -> Self:
        """Override the display name used for ``{PropertyName}``."""
        require(name, "name")
        self._rule.display_name = name
        return self

    def cascade(self, mode: CascadeMode) -> Self:
        self._rule.cascade_mode = CascadeMode(mode)
        return self

    def when(
        self,
        condition: Condition,
        apply_to: ApplyConditionTo = ApplyConditionTo.ALL_VALIDATORS,
    ) -> Self:
        """Only run validators when ``condition(root)`` is true."""
        require(condition, "condition")
        self._rule.apply_condition(condition, apply_to)
        return self

    def unless(
        self,
        condition: Condition,
        apply_to: ApplyConditionTo = ApplyConditionTo.ALL_VALIDATORS,
    ) -> Self:
        """Only run validators when ``condition(root)`` is false."""
        require(condition, "condition")
        self._rule.apply_condition(Negated(condition), apply_to)
        return self

    # ------------------------------------------------------------------
    # Option support (see optval.optional)
    # ------------------------------------------------------------------

    def must_be_present(self) -> Self:
        """Fail when the ``Option`` property is absent."""
        from optval.optional.validators import must_be_present

        return must_be_present(self)

    def must_be_absent(self) -> Self:
        """Fail when the ``Option`` property holds a value."""
        from optval.optional.validators import must_be_absent

        return must_be_absent(self)

    def with_present_value(
        self,
        configure: Callable[[RuleBuilder[R, Any]], RuleBuilder[R, Any] | None],
        *,
        inner_type: Any = None,
    ) -> RuleBuilder[R, Any]:
        """Configure validators on the contained value; they run only when present."""
        from optval.optional.unwrap import with_present_value

        return with_present_value(self, configure, inner_type=inner_type)

    def unwrap(self, inner_type: Any = None) -> RuleBuilder[R, Any]:
        """Rebind to the contained value; gate the chain with ``when_present()``."""
        from optval.optional.unwrap import unwrap

        return unwrap(self, inner_type=inner_type)

    def unwrap_or_default(
        self,
        default: Any = None,
        *,
        inner_type: Any = None,
    ) -> RuleBuilder[R, Any]:
        """Rebind to the contained value, substituting *default* when absent."""
        from optval.optional.unwrap import unwrap_or_default

        return unwrap_or_default(self, default, inner_type=inner_type)

    def gate_on_presence(
        self,
        expression: Expression | None,
        polarity: Polarity,
        apply_to: ApplyConditionTo = ApplyConditionTo.ALL_VALIDATORS,
    ) -> Self:
        from optval.optional.conditions import gate_on_presence

        return gate_on_presence(self, expression, polarity, apply_to)

    def when_present(
        self,
        expression: Expression | None = None,
        apply_to: ApplyConditionTo = ApplyConditionTo.ALL_VALIDATORS,
    ) -> Self:
        """Run validators only when *expression* (default: this rule) holds a value."""
        from optval.optional.conditions import Polarity, gate_on_presence

        return gate_on_presence(self, expression, Polarity.WHEN_SOME, apply_to)

    def unless_present(
        self,
        expression: Expression | None = None,
        apply_to: ApplyConditionTo = ApplyConditionTo.ALL_VALIDATORS,
    ) -> Self:
        """Run validators only when *expression* (default: this rule) is absent."""
        from optval.optional.conditions import Polarity, gate_on_presence

        return gate_on_presence(self, expression, Polarity.WHEN_NONE, apply_to)
