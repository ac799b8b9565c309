"""Unwrap operators — validate the value inside an ``Option`` property.

Each form installs a transformer on the shared rule so the engine hands
validators the contained value instead of the ``Option``, then rebinds
the view to the inner type:

* :func:`with_present_value` — configure validators in a callback; they
  are gated on presence of the property and skipped entirely when absent.
* :func:`unwrap` — return the inner view for chaining; the chain must be
  gated with ``when_present()`` / ``unless_present()`` before the
  validator is first used.
* :func:`unwrap_or_default` — explicitly validate a substituted default
  when absent; no gate required.

INVARIANT: Unwrapping again replaces the transformer; the Option is
never unwrapped twice.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from optval.domain.errors import InvalidPropertyBindingError, require
from optval.domain.option import Option
from optval.engine.builder import RuleBuilder
from optval.engine.rule import ApplyConditionTo, PropertyRule
from optval.optional.adapter import rebind
from optval.optional.conditions import Polarity, synthesize_presence_condition

logger = logging.getLogger(__name__)


class UnwrapTransformer:
    """Rule transformer: ``Option`` -> contained value or *default*."""

    def __init__(self, property_name: str, default: Any = None) -> None:
        self.property_name = property_name
        self.default = default

    def __repr__(self) -> str:
        return f"UnwrapTransformer({self.property_name!r}, default={self.default!r})"

    def __call__(self, value: Any) -> Any:
        if not isinstance(value, Option):
            msg = (
                f"Property {self.property_name!r} yielded "
                f"{type(value).__qualname__}, not an Option"
            )
            raise InvalidPropertyBindingError(msg)
        return value.value_or(self.default)


def _check_unwrappable(rule: PropertyRule) -> None:
    bound = [c for c in rule.components if c.optional_view]
    if bound:
        names = ", ".join(type(c.validator).__name__ for c in bound)
        msg = (
            f"Rule {rule.property_name!r} already has validators on the Option itself ({names}); "
            "declare a separate rule_for() to validate the contained value"
        )
        raise InvalidPropertyBindingError(msg)


def _install(
    view: RuleBuilder[Any, Any],
    inner_type: Any,
    default: Any,
    *,
    requires_gate: bool,
) -> RuleBuilder[Any, Any]:
    require(view, "rule")
    rule = view.rule
    view.parent_validator.ensure_mutable()
    # Rebind first so a bad binding fails before the rule is touched
    inner = rebind(view, inner_type, requires_gate=requires_gate)
    _check_unwrappable(rule)
    rule.install_transformer(UnwrapTransformer(rule.property_name, default))
    logger.debug("Unwrapped rule %s to %r", rule.property_name, inner.declared_type)
    return inner


def with_present_value[R](
    rule: RuleBuilder[R, Any],
    configure: Callable[[RuleBuilder[R, Any]], RuleBuilder[R, Any] | None],
    *,
    inner_type: Any = None,
) -> RuleBuilder[R, Any]:
    """Validate the contained value, only when the Option holds one.

    *configure* receives the inner view and chains validators on it.
    Every validator on the rule is then gated on presence of the
    original property, so when it is absent none of them runs.

    Raises:
        NullArgumentError: If *rule* or *configure* is None.
        InvalidPropertyBindingError: If the rule's property is not an Option.
        TypeMismatchError: If *inner_type* disagrees with the Option's type.
    """
    require(rule, "rule")
    require(configure, "configure")
    inner = _install(rule, inner_type, None, requires_gate=True)
    configured = configure(inner)
    result = configured if configured is not None else inner
    condition = synthesize_presence_condition(result.rule.expression, Polarity.WHEN_SOME)
    result.rule.apply_condition(condition, ApplyConditionTo.ALL_VALIDATORS)
    return result


def unwrap[R](rule: RuleBuilder[R, Any], *, inner_type: Any = None) -> RuleBuilder[R, Any]:
    """Rebind *rule* to the contained value without gating it.

    Validators chained on the returned view must be gated with
    ``when_present()`` or ``unless_present()``; otherwise the owning
    validator raises :class:`~optval.domain.errors.UngatedUnwrapError`
    on first use (see ``validation.require_presence_gate``).
    """
    return _install(rule, inner_type, None, requires_gate=True)


def unwrap_or_default[R](
    rule: RuleBuilder[R, Any],
    default: Any = None,
    *,
    inner_type: Any = None,
) -> RuleBuilder[R, Any]:
    """Rebind *rule* to the contained value, or *default* when absent.

    Validators run on every instance; an absent Option is validated as
    *default*.
    """
    return _install(rule, inner_type, default, requires_gate=False)
