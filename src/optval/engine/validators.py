"""Property validators — the checks a rule chains together.

Each validator answers one question about a single (already transformed)
property value. Validators hold no per-instance state and may be shared
across evaluations.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Callable, Sized
from dataclasses import dataclass
from typing import Any, ClassVar


@dataclass(frozen=True)
class ValidationContext:
    """Everything a validator may look at for one evaluation."""

    instance: Any
    property_name: str
    display_name: str
    value: Any


class PropertyValidator(ABC):
    """Base class for all validators.

    Subclasses set :attr:`default_message` and implement :meth:`is_valid`.
    :meth:`message_arguments` supplies extra template placeholders.
    """

    default_message: ClassVar[str] = "'{PropertyName}' is not valid."

    @property
    def error_code(self) -> str:
        return type(self).__name__

    @abstractmethod
    def is_valid(self, context: ValidationContext) -> bool: ...

    def message_arguments(self, context: ValidationContext) -> dict[str, Any]:
        return {}


# ---------------------------------------------------------------------------
# Nullness / emptiness
# ---------------------------------------------------------------------------


class NotNullValidator(PropertyValidator):
    default_message = "'{PropertyName}' must not be empty."

    def is_valid(self, context: ValidationContext) -> bool:
        return context.value is not None


class NullValidator(PropertyValidator):
    default_message = "'{PropertyName}' must be empty."

    def is_valid(self, context: ValidationContext) -> bool:
        return context.value is None


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, Sized):
        return len(value) == 0
    return False


class NotEmptyValidator(PropertyValidator):
    """Fails for None, blank strings and empty collections."""

    default_message = "'{PropertyName}' must not be empty."

    def is_valid(self, context: ValidationContext) -> bool:
        return not _is_empty(context.value)


class EmptyValidator(PropertyValidator):
    default_message = "'{PropertyName}' must be empty."

    def is_valid(self, context: ValidationContext) -> bool:
        return _is_empty(context.value)


# ---------------------------------------------------------------------------
# Comparison
# ---------------------------------------------------------------------------


class ComparisonValidator(PropertyValidator):
    """Compare the property against a fixed value or a ``root -> value`` callable.

    ``None`` property values are considered valid; pair with
    :class:`NotNullValidator` to reject them.
    """

    def __init__(self, comparison: Any) -> None:
        self._comparison = comparison

    def comparison_value(self, context: ValidationContext) -> Any:
        if callable(self._comparison):
            return self._comparison(context.instance)
        return self._comparison

    def is_valid(self, context: ValidationContext) -> bool:
        if context.value is None:
            return True
        return self.compare(context.value, self.comparison_value(context))

    @abstractmethod
    def compare(self, value: Any, comparison: Any) -> bool: ...

    def message_arguments(self, context: ValidationContext) -> dict[str, Any]:
        return {"ComparisonValue": self.comparison_value(context)}


class EqualValidator(ComparisonValidator):
    default_message = "'{PropertyName}' must be equal to '{ComparisonValue}'."

    def is_valid(self, context: ValidationContext) -> bool:
        return self.compare(context.value, self.comparison_value(context))

    def compare(self, value: Any, comparison: Any) -> bool:
        return bool(value == comparison)


class NotEqualValidator(ComparisonValidator):
    default_message = "'{PropertyName}' must not be equal to '{ComparisonValue}'."

    def is_valid(self, context: ValidationContext) -> bool:
        return self.compare(context.value, self.comparison_value(context))

    def compare(self, value: Any, comparison: Any) -> bool:
        return bool(value != comparison)


class GreaterThanValidator(ComparisonValidator):
    default_message = "'{PropertyName}' must be greater than '{ComparisonValue}'."

    def compare(self, value: Any, comparison: Any) -> bool:
        return bool(value > comparison)


class GreaterThanOrEqualValidator(ComparisonValidator):
    default_message = "'{PropertyName}' must be greater than or equal to '{ComparisonValue}'."

    def compare(self, value: Any, comparison: Any) -> bool:
        return bool(value >= comparison)


class LessThanValidator(ComparisonValidator):
    default_message = "'{PropertyName}' must be less than '{ComparisonValue}'."

    def compare(self, value: Any, comparison: Any) -> bool:
        return bool(value < comparison)


class LessThanOrEqualValidator(ComparisonValidator):
    default_message = "'{PropertyName}' must be less than or equal to '{ComparisonValue}'."

    def compare(self, value: Any, comparison: Any) -> bool:
        return bool(value <= comparison)


class BetweenValidator(PropertyValidator):
    default_message = (
        "'{PropertyName}' must be between {From} and {To}. You entered {PropertyValue}."
    )

    def __init__(self, from_: Any, to: Any, *, inclusive: bool = True) -> None:
        if to < from_:
            msg = f"Range upper bound {to!r} is less than lower bound {from_!r}"
            raise ValueError(msg)
        self.from_ = from_
        self.to = to
        self.inclusive = inclusive

    @property
    def error_code(self) -> str:
        return "InclusiveBetweenValidator" if self.inclusive else "ExclusiveBetweenValidator"

    def is_valid(self, context: ValidationContext) -> bool:
        value = context.value
        if value is None:
            return True
        if self.inclusive:
            return bool(self.from_ <= value <= self.to)
        return bool(self.from_ < value < self.to)

    def message_arguments(self, context: ValidationContext) -> dict[str, Any]:
        return {"From": self.from_, "To": self.to, "PropertyValue": context.value}


class ExclusiveBetweenValidator(BetweenValidator):
    default_message = (
        "'{PropertyName}' must be between {From} and {To} (exclusive). You entered {PropertyValue}."
    )

    def __init__(self, from_: Any, to: Any) -> None:
        super().__init__(from_, to, inclusive=False)


# ---------------------------------------------------------------------------
# Strings / custom predicates
# ---------------------------------------------------------------------------


class LengthValidator(PropertyValidator):
    default_message = (
        "'{PropertyName}' must be between {MinLength} and {MaxLength} characters. "
        "You entered {TotalLength} characters."
    )

    def __init__(self, min_length: int, max_length: int | None = None) -> None:
        self.min_length = min_length
        self.max_length = max_length

    def is_valid(self, context: ValidationContext) -> bool:
        if context.value is None:
            return True
        length = len(context.value)
        if length < self.min_length:
            return False
        return self.max_length is None or length <= self.max_length

    def message_arguments(self, context: ValidationContext) -> dict[str, Any]:
        total = len(context.value) if context.value is not None else 0
        return {
            "MinLength": self.min_length,
            "MaxLength": self.max_length if self.max_length is not None else "unbounded",
            "TotalLength": total,
        }


class RegexValidator(PropertyValidator):
    default_message = "'{PropertyName}' is not in the correct format."

    def __init__(self, pattern: str | re.Pattern[str]) -> None:
        self.pattern = re.compile(pattern) if isinstance(pattern, str) else pattern

    def is_valid(self, context: ValidationContext) -> bool:
        if context.value is None:
            return True
        return self.pattern.search(str(context.value)) is not None


class PredicateValidator(PropertyValidator):
    """Wrap a user predicate.

    The predicate receives ``(value)`` or, with ``with_root=True``,
    ``(root, value)``.
    """

    default_message = "The specified condition was not met for '{PropertyName}'."

    def __init__(self, predicate: Callable[..., bool], *, with_root: bool = False) -> None:
        self.predicate = predicate
        self.with_root = with_root

    def is_valid(self, context: ValidationContext) -> bool:
        if self.with_root:
            return bool(self.predicate(context.instance, context.value))
        return bool(self.predicate(context.value))
