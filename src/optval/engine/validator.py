"""AbstractValidator — declare rules for a root type, then validate instances.

Lifecycle is build, then freeze, then evaluate:

1. Rules are declared in the subclass ``__init__`` via :meth:`rule_for`.
2. The first :meth:`validate` call freezes the validator; declaring
   rules afterwards raises :class:`RuleConfigurationError`.
3. Evaluation reads the frozen rules only, so one validator may be
   shared across threads validating different instances.

Usage::

    class PersonValidator(AbstractValidator[Person]):
        def __init__(self) -> None:
            super().__init__()
            self.rule_for("name").not_empty()
            self.rule_for("age").with_present_value(
                lambda age: age.greater_than_or_equal_to(0)
            )
"""

from __future__ import annotations

import logging
from typing import Any, ClassVar, TypeVar, get_args, get_origin

from optval.config.settings import OptvalSettings
from optval.domain.errors import (
    NullArgumentError,
    RuleConfigurationError,
    TypeMismatchError,
    UngatedUnwrapError,
)
from optval.domain.expressions import resolve_expression
from optval.engine.builder import Expression, RuleBuilder
from optval.engine.result import ValidationFailure, ValidationResult
from optval.engine.rule import CascadeMode, PropertyRule
from optval.engine.telemetry import trace_span, traced

logger = logging.getLogger(__name__)


def _root_type_from_bases(cls: type) -> Any:
    for base in getattr(cls, "__orig_bases__", ()):
        origin = get_origin(base)
        if isinstance(origin, type) and issubclass(origin, AbstractValidator):
            args = get_args(base)
            if args and not isinstance(args[0], TypeVar):
                return args[0]
    return None


class AbstractValidator[T]:
    """Base class for validators of root type ``T``.

    The root type is taken from the generic base
    (``AbstractValidator[Person]``) or from an explicit ``root_type``
    class attribute. It drives type resolution of property paths.
    """

    root_type: ClassVar[Any] = None

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if "root_type" not in cls.__dict__:
            resolved = _root_type_from_bases(cls)
            if resolved is not None:
                cls.root_type = resolved

    def __init__(self, settings: OptvalSettings | None = None) -> None:
        self._settings = settings if settings is not None else OptvalSettings()
        self._rules: list[PropertyRule] = []
        self._frozen = False

    def get_root_type(self) -> Any:
        """The class-level root type, or the one given by ``AbstractValidator[T]()``."""
        if self.root_type is not None:
            return self.root_type
        orig = getattr(self, "__orig_class__", None)
        args = get_args(orig) if orig is not None else ()
        if args and not isinstance(args[0], TypeVar):
            return args[0]
        return None

    @property
    def settings(self) -> OptvalSettings:
        return self._settings

    @property
    def rules(self) -> tuple[PropertyRule, ...]:
        return tuple(self._rules)

    @property
    def frozen(self) -> bool:
        return self._frozen

    # ------------------------------------------------------------------
    # Declaration
    # ------------------------------------------------------------------

    def rule_for(self, expression: Expression, *, name: str | None = None) -> RuleBuilder[T, Any]:
        """Declare a rule on the property named by *expression*.

        *expression* is an attribute path (``"age"``, ``"address.city"``)
        or a ``root -> value`` callable; lambdas need *name*.
        """
        self.ensure_mutable()
        prop = resolve_expression(expression, self.get_root_type(), name=name)
        rule = PropertyRule(
            prop,
            cascade_mode=CascadeMode(self._settings.validation.cascade_mode),
        )
        self._rules.append(rule)
        logger.debug("Declared rule %s (%r)", prop.name, prop.declared_type)
        return RuleBuilder(rule, self, prop.declared_type)

    def ensure_mutable(self) -> None:
        if self._frozen:
            msg = (
                f"{type(self).__name__} is frozen; "
                "rules must be declared before the first validate()"
            )
            raise RuleConfigurationError(msg)

    def freeze(self) -> None:
        """End the declaration phase, checking deferred unwrap chains.

        Raises:
            UngatedUnwrapError: If a validator chained on an ``unwrap()``
                view has no presence gate and the settings require one.
        """
        if self._frozen:
            return
        ungated = [rule.property_name for rule in self._rules if rule.ungated_components()]
        if ungated:
            msg = (
                f"unwrap() chains on {', '.join(repr(n) for n in ungated)} are not gated on "
                "presence; add when_present()/unless_present() or use unwrap_or_default()"
            )
            if self._settings.validation.require_presence_gate:
                raise UngatedUnwrapError(msg)
            logger.warning(msg)
        self._frozen = True

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    @traced
    def validate(self, instance: T) -> ValidationResult:
        """Run every rule against *instance*.

        Data failures are reported in the result, never raised.

        Raises:
            NullArgumentError: If *instance* is None.
            TypeMismatchError: If *instance* is not of the root type.
        """
        if instance is None:
            raise NullArgumentError("instance")
        root = self.get_root_type()
        if isinstance(root, type) and not isinstance(instance, root):
            msg = (
                f"{type(self).__name__} validates {root.__qualname__}, "
                f"got {type(instance).__qualname__}"
            )
            raise TypeMismatchError(msg, expected=root, actual=type(instance))

        self.freeze()
        style = self._settings.validation.display_names
        failures: list[ValidationFailure] = []
        for rule in self._rules:
            with trace_span(f"rule:{rule.property_name}") as span:
                rule_failures = rule.validate(instance, display_style=style)
                if span is not None:
                    span.annotate("failures", len(rule_failures))
            failures.extend(rule_failures)

        logger.debug(
            "Validated %s against %d rule(s): %d failure(s)",
            type(instance).__name__,
            len(self._rules),
            len(failures),
        )
        return ValidationResult(failures=failures)
