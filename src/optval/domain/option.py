"""Option — a single value that is either present or absent.

Distinct from ``None``: an ``Option`` is always an object, and "absent"
is a variant of it rather than a missing reference.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Option[T]:
    """Immutable present-or-absent box.

    Construct through :meth:`some` and :meth:`none` (or the module-level
    :func:`some` / :func:`none` helpers) rather than directly.
    """

    value: T | None = None
    has_value: bool = False

    def __post_init__(self) -> None:
        if not self.has_value and self.value is not None:
            msg = "An absent Option cannot carry a value"
            raise ValueError(msg)

    @classmethod
    def some(cls, value: T) -> Option[T]:
        return cls(value=value, has_value=True)

    @classmethod
    def none(cls) -> Option[T]:
        return cls()

    def is_present(self) -> bool:
        return self.has_value

    def is_absent(self) -> bool:
        return not self.has_value

    def value_or_default(self) -> T | None:
        """Return the contained value, or ``None`` when absent."""
        return self.value if self.has_value else None

    def value_or(self, default: T) -> T:
        return self.value if self.has_value else default  # type: ignore[return-value]

    def value_or_else(self, factory: Callable[[], T]) -> T:
        return self.value if self.has_value else factory()  # type: ignore[return-value]

    def map[U](self, fn: Callable[[T], U]) -> Option[U]:
        if not self.has_value:
            return Option()
        return Option.some(fn(self.value))  # type: ignore[arg-type]

    def __repr__(self) -> str:
        if self.has_value:
            return f"Option.some({self.value!r})"
        return "Option.none()"


def some(value: Any) -> Option[Any]:
    """Shorthand for :meth:`Option.some`."""
    return Option.some(value)


def none() -> Option[Any]:
    """Shorthand for :meth:`Option.none`."""
    return Option.none()
