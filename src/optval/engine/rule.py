"""PropertyRule — the engine's model of one declared rule.

A rule is bound to exactly one property expression. It owns an ordered
list of components (validator + conditions + message overrides) and an
optional ``transformer`` applied to the raw property value before any
validator sees it.

INVARIANT: A rule has at most one live transformer. Installing a new one
replaces the previous one; transformers never compose.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from optval.domain.errors import RuleConfigurationError
from optval.domain.expressions import PropertyExpression
from optval.engine.messages import DisplayNameStyle, display_name, format_message
from optval.engine.result import ValidationFailure
from optval.engine.validators import PropertyValidator, ValidationContext

logger = logging.getLogger(__name__)

Condition = Callable[[Any], bool]
Transformer = Callable[[Any], Any]


class ApplyConditionTo(StrEnum):
    """Scope of a ``when``/``unless`` condition."""

    ALL_VALIDATORS = "all_validators"
    CURRENT_VALIDATOR = "current_validator"


class CascadeMode(StrEnum):
    """Whether a rule keeps evaluating validators after the first failure."""

    CONTINUE = "continue"
    STOP = "stop"


@dataclass(frozen=True)
class Negated:
    """Condition wrapper produced by ``unless``."""

    condition: Condition

    def __call__(self, instance: Any) -> bool:
        return not self.condition(instance)


@dataclass
class RuleComponent:
    """One validator in a rule's chain, with its gating conditions."""

    validator: PropertyValidator
    conditions: list[Condition] = field(default_factory=list)
    custom_message: str | None = None
    error_code: str | None = None
    optional_view: bool = False  # attached through an Option-typed view
    requires_gate: bool = False  # attached through a deferred unwrap() view

    def should_run(self, instance: Any) -> bool:
        return all(condition(instance) for condition in self.conditions)

    def is_presence_gated(self, expression: PropertyExpression) -> bool:
        """True if some condition tests the presence of the property *expression* reads."""
        for condition in self.conditions:
            target = getattr(condition, "presence_of", None)
            if isinstance(target, PropertyExpression) and target.refers_to(expression):
                return True
        return False


_UNSET = object()


class PropertyRule:
    """Rule descriptor: expression, transformer, and validator chain."""

    def __init__(
        self,
        expression: PropertyExpression,
        *,
        cascade_mode: CascadeMode = CascadeMode.CONTINUE,
    ) -> None:
        self.expression = expression
        self.transformer: Transformer | None = None
        self.components: list[RuleComponent] = []
        self.display_name: str | None = None
        self.cascade_mode = cascade_mode

    def __repr__(self) -> str:
        return f"PropertyRule({self.expression.name!r}, components={len(self.components)})"

    @property
    def property_name(self) -> str:
        return self.expression.name

    @property
    def current_component(self) -> RuleComponent:
        if not self.components:
            msg = f"Rule for {self.property_name!r} has no validator to configure yet"
            raise RuleConfigurationError(msg)
        return self.components[-1]

    def get_display_name(self, style: DisplayNameStyle = "title") -> str:
        if self.display_name:
            return self.display_name
        return display_name(self.property_name, style)

    # ------------------------------------------------------------------
    # Declaration-time mutation
    # ------------------------------------------------------------------

    def add_component(self, component: RuleComponent) -> None:
        self.components.append(component)

    def ungated_components(self) -> list[RuleComponent]:
        """Components from a deferred unwrap that no presence gate covers."""
        return [
            c
            for c in self.components
            if c.requires_gate and not c.is_presence_gated(self.expression)
        ]

    def install_transformer(self, transformer: Transformer) -> None:
        """Replace the transformer (last write wins)."""
        if self.transformer is not None:
            logger.debug("Replacing transformer on rule %s", self.property_name)
        self.transformer = transformer

    def apply_condition(
        self,
        condition: Condition,
        apply_to: ApplyConditionTo = ApplyConditionTo.ALL_VALIDATORS,
    ) -> None:
        """Gate the current validator, or every validator declared so far.

        With an empty chain, gating all validators is a no-op.
        """
        if apply_to == ApplyConditionTo.CURRENT_VALIDATOR:
            self.current_component.conditions.append(condition)
            return
        for component in self.components:
            component.conditions.append(condition)

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def resolve_value(self, instance: Any) -> Any:
        """Read the property and apply the transformer, if any."""
        raw = self.expression(instance)
        if self.transformer is None:
            return raw
        return self.transformer(raw)

    def validate(
        self,
        instance: Any,
        *,
        display_style: DisplayNameStyle = "title",
    ) -> list[ValidationFailure]:
        """Run every component whose conditions hold against *instance*.

        The property is read at most once, and only if some component runs.
        """
        failures: list[ValidationFailure] = []
        value: Any = _UNSET
        name = self.get_display_name(display_style)

        for component in self.components:
            if not component.should_run(instance):
                continue
            if value is _UNSET:
                value = self.resolve_value(instance)
            context = ValidationContext(
                instance=instance,
                property_name=self.property_name,
                display_name=name,
                value=value,
            )
            if component.validator.is_valid(context):
                continue

            arguments = {
                "PropertyName": name,
                "PropertyValue": value,
                **component.validator.message_arguments(context),
            }
            template = component.custom_message or component.validator.default_message
            failures.append(
                ValidationFailure(
                    property_name=self.property_name,
                    message=format_message(template, arguments),
                    attempted_value=value,
                    error_code=component.error_code or component.validator.error_code,
                )
            )
            if self.cascade_mode == CascadeMode.STOP:
                break

        return failures
