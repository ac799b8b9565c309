"""optval — fluent property validation with first-class Option support."""

from optval.domain.errors import (
    InvalidPropertyBindingError,
    NullArgumentError,
    RuleConfigurationError,
    TypeMismatchError,
    UngatedUnwrapError,
)
from optval.domain.option import Option, none, some
from optval.engine.builder import RuleBuilder
from optval.engine.result import ValidationFailure, ValidationResult
from optval.engine.rule import ApplyConditionTo, CascadeMode
from optval.engine.validator import AbstractValidator
from optval.optional.conditions import Polarity

__version__ = "0.1.0"

__all__ = [
    "AbstractValidator",
    "ApplyConditionTo",
    "CascadeMode",
    "InvalidPropertyBindingError",
    "NullArgumentError",
    "Option",
    "Polarity",
    "RuleBuilder",
    "RuleConfigurationError",
    "TypeMismatchError",
    "UngatedUnwrapError",
    "ValidationFailure",
    "ValidationResult",
    "__version__",
    "none",
    "some",
]
