"""Exception taxonomy for rule declaration misuse.

INVARIANT: These are raised only for programming errors in validator
setup. Data that fails validation is reported through
:class:`~optval.engine.result.ValidationResult`, never raised.
"""

from __future__ import annotations


class RuleConfigurationError(Exception):
    """Base class for errors raised while declaring rules."""


class InvalidPropertyBindingError(RuleConfigurationError, TypeError):
    """An expression does not resolve to the ``Option`` property an operation needs."""


class TypeMismatchError(RuleConfigurationError, TypeError):
    """A rebind requested an inner type the declared ``Option`` does not hold."""

    def __init__(self, message: str, *, expected: object = None, actual: object = None) -> None:
        super().__init__(message)
        self.expected = expected
        self.actual = actual


class NullArgumentError(RuleConfigurationError, ValueError):
    """A required argument (rule, expression, callback) was ``None``."""

    def __init__(self, argument: str) -> None:
        super().__init__(f"Argument {argument!r} must not be None")
        self.argument = argument


class UngatedUnwrapError(RuleConfigurationError):
    """A deferred ``unwrap()`` chain was never gated on presence."""


def require(value: object, argument: str) -> None:
    """Raise :class:`NullArgumentError` if *value* is None."""
    if value is None:
        raise NullArgumentError(argument)
