"""Property expressions — the inspectable source of every rule.

A rule is declared against a property of the root type. The expression
keeps three things together: a display-independent ``name`` (dotted
attribute path), the ``accessor`` closure that reads it from a root
instance, and the ``declared_type`` the property was annotated with.

The declared type is what lets the optional-unwrapping operations check,
at declaration time, that a property really holds an ``Option[T]``.
"""

from __future__ import annotations

import dataclasses
import logging
import operator
import typing
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, get_args, get_origin

from optval.domain.errors import InvalidPropertyBindingError, NullArgumentError
from optval.domain.option import Option

logger = logging.getLogger(__name__)

_LAMBDA_NAME = "<lambda>"


@dataclass(frozen=True)
class PropertyExpression:
    """Named, typed accessor for one property of a root instance.

    ``path`` is the attribute path the accessor reads (``"address.city"``),
    or None when it could not be determined. It identifies the property
    independently of the display ``name``.
    """

    name: str
    accessor: Callable[[Any], Any] = field(compare=False)
    declared_type: Any = Any
    path: str | None = None

    def __call__(self, instance: Any) -> Any:
        return self.accessor(instance)

    @property
    def is_typed(self) -> bool:
        """True when the declared type was resolved from annotations."""
        return self.declared_type is not Any

    @property
    def is_option(self) -> bool:
        return is_option_type(self.declared_type)

    def refers_to(self, other: PropertyExpression) -> bool:
        """True if *other* reads the same property of the root."""
        if self is other or self.accessor is other.accessor:
            return True
        return self.path is not None and self.path == other.path


class _PathRecorder:
    """Stand-in root that records the attributes an accessor reads."""

    __slots__ = ("_path",)

    def __init__(self, path: tuple[str, ...] = ()) -> None:
        self._path = path

    def __getattr__(self, attribute: str) -> _PathRecorder:
        if attribute.startswith("__"):
            raise AttributeError(attribute)
        return _PathRecorder((*self._path, attribute))


def trace_attribute_path(accessor: Callable[[Any], Any]) -> str | None:
    """Return the attribute path a plain ``root -> root.a.b`` accessor reads.

    The accessor is called once with a recording stand-in. Accessors that
    do anything beyond attribute access (indexing, arithmetic, method
    calls on the value) yield None.
    """
    try:
        result = accessor(_PathRecorder())
    except Exception:  # noqa: BLE001
        logger.debug("Could not trace attribute path of %r", accessor, exc_info=True)
        return None
    if type(result) is _PathRecorder and result._path:
        return ".".join(result._path)
    return None


# ---------------------------------------------------------------------------
# Type inspection
# ---------------------------------------------------------------------------


def is_option_type(tp: Any) -> bool:
    """Check whether *tp* is ``Option`` or a parameterized ``Option[T]``."""
    return tp is Option or get_origin(tp) is Option


def option_inner_type(tp: Any, name: str = "<expression>") -> Any:
    """Return ``T`` for ``Option[T]``.

    Bare ``Option`` and unresolved (``Any``) types yield ``Any``.

    Raises:
        InvalidPropertyBindingError: If *tp* is known and is not an Option.
    """
    if tp is Any or tp is Option:
        return Any
    if get_origin(tp) is Option:
        args = get_args(tp)
        return args[0] if args else Any
    msg = f"Property {name!r} is declared as {_type_name(tp)}, not Option[T]"
    raise InvalidPropertyBindingError(msg)


def _type_name(tp: Any) -> str:
    if isinstance(tp, type) and not get_args(tp):
        return tp.__qualname__
    return repr(tp)


def _type_hints(target: Any) -> dict[str, Any] | None:
    try:
        return typing.get_type_hints(target)
    except (NameError, TypeError):
        logger.debug("Could not resolve type hints for %r", target, exc_info=True)
        return None


def _attribute_type(owner: Any, attribute: str, path: str) -> Any:
    """Resolve the annotated type of *attribute* on class *owner*."""
    if not isinstance(owner, type):
        return Any
    hints = _type_hints(owner)
    if hints is None:
        return Any
    if attribute in hints:
        return hints[attribute]

    member = getattr(owner, attribute, None)
    if isinstance(member, property) and member.fget is not None:
        fget_hints = _type_hints(member.fget) or {}
        return fget_hints.get("return", Any)
    if member is not None:
        return Any
    if dataclasses.is_dataclass(owner) or hints:
        msg = f"{owner.__qualname__} has no property {attribute!r} (in {path!r})"
        raise InvalidPropertyBindingError(msg)
    return Any


def _resolve_path_type(root_type: Any, path: str) -> Any:
    current = root_type
    for part in path.split("."):
        current = _attribute_type(current, part, path)
        if current is Any:
            break
    return current


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


def resolve_expression(
    expression: str | Callable[[Any], Any] | PropertyExpression | None,
    root_type: Any = None,
    *,
    name: str | None = None,
    require_name: bool = True,
) -> PropertyExpression:
    """Build a :class:`PropertyExpression` from a path, callable, or expression.

    * ``"age"`` / ``"address.city"`` — attribute path; the declared type is
      looked up in *root_type*'s annotations.
    * A callable ``root -> value`` — the declared type is its return
      annotation (``Any`` for lambdas). Lambdas need an explicit *name*
      when *require_name* is set. Otherwise an unnamed lambda is named
      after the attribute path it reads.

    Raises:
        NullArgumentError: If *expression* is None.
        InvalidPropertyBindingError: If the expression cannot be bound.
    """
    if expression is None:
        raise NullArgumentError("expression")

    if isinstance(expression, PropertyExpression):
        if name and name != expression.name:
            return dataclasses.replace(expression, name=name)
        return expression

    if isinstance(expression, str):
        path = expression.strip()
        if not path or any(not part.isidentifier() for part in path.split(".")):
            msg = f"Invalid property path {expression!r}"
            raise InvalidPropertyBindingError(msg)
        return PropertyExpression(
            name=name or path,
            accessor=operator.attrgetter(path),
            declared_type=_resolve_path_type(root_type, path),
            path=path,
        )

    if callable(expression):
        fn_name = getattr(expression, "__name__", "")
        resolved_name = name or ("" if fn_name == _LAMBDA_NAME else fn_name)
        if require_name and not resolved_name:
            msg = "Property name could not be determined for a lambda expression; pass name=..."
            raise InvalidPropertyBindingError(msg)
        traced = trace_attribute_path(expression)
        hints = _type_hints(expression) or {}
        return PropertyExpression(
            name=resolved_name or traced or "",
            accessor=expression,
            declared_type=hints.get("return", Any),
            path=traced,
        )

    msg = f"Unsupported property expression: {expression!r}"
    raise InvalidPropertyBindingError(msg)
