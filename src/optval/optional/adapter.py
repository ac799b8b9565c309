"""Rule view adapter — re-type a rule from ``Option[T]`` to ``T``.

Rebinding never touches the rule itself: it returns a second
:class:`RuleBuilder` over the *same* :class:`PropertyRule`, so validators
chained through either view land on one rule. What the engine actually
evaluates is decided by the rule's transformer (see
:mod:`optval.optional.unwrap`), not by the view's declared type.
"""

from __future__ import annotations

from typing import Any

from optval.domain.errors import TypeMismatchError, require
from optval.domain.expressions import option_inner_type
from optval.engine.builder import RuleBuilder
from optval.engine.rule import PropertyRule


def _types_agree(requested: Any, declared: Any) -> bool:
    if requested is Any or declared is Any:
        return True
    return bool(requested == declared)


def declared_inner_type(rule: PropertyRule, inner_type: Any = None) -> Any:
    """Return the ``T`` of the rule's ``Option[T]`` expression.

    Raises:
        InvalidPropertyBindingError: If the expression is not declared as
            an ``Option``.
        TypeMismatchError: If *inner_type* is given and differs from ``T``.
    """
    declared = option_inner_type(rule.expression.declared_type, rule.property_name)
    if inner_type is None:
        return declared
    if not _types_agree(inner_type, declared):
        msg = (
            f"Rule {rule.property_name!r} is declared as Option[{_name(declared)}], "
            f"cannot rebind it to {_name(inner_type)}"
        )
        raise TypeMismatchError(msg, expected=inner_type, actual=declared)
    return declared if declared is not Any else inner_type


def _name(tp: Any) -> str:
    return getattr(tp, "__qualname__", None) or repr(tp)


def rebind[R](
    view: RuleBuilder[R, Any],
    inner_type: Any = None,
    *,
    requires_gate: bool = False,
) -> RuleBuilder[R, Any]:
    """Return a view of *view*'s rule typed at the Option's inner type.

    The rule is not modified.
    """
    require(view, "rule")
    resolved = declared_inner_type(view.rule, inner_type)
    return RuleBuilder(
        view.rule,
        view.parent_validator,
        resolved,
        requires_gate=requires_gate,
    )
