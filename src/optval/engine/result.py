"""ValidationFailure and ValidationResult — the outcome of a validation run.

INVARIANT: ``AbstractValidator.validate`` always returns a
ValidationResult for data problems; it never raises for them.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, computed_field


class ValidationFailure(BaseModel):
    """One unmet validator on one property."""

    model_config = {"frozen": True}

    property_name: str
    message: str
    attempted_value: Any = None
    error_code: str = ""

    def __str__(self) -> str:
        return self.message


class ValidationResult(BaseModel):
    """Ordered failures of a validation run.

    Attributes:
        failures: One entry per unmet validator, in rule declaration order.
        meta: Optional metadata (telemetry span tree when enabled).
    """

    model_config = {"frozen": True}

    failures: list[ValidationFailure] = Field(default_factory=list)
    meta: dict[str, Any] | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_valid(self) -> bool:
        return not self.failures

    def errors_for(self, property_name: str) -> list[ValidationFailure]:
        """Failures recorded against *property_name*."""
        return [f for f in self.failures if f.property_name == property_name]

    def __str__(self) -> str:
        return "\n".join(f.message for f in self.failures)
