"""Failure message templates and property display names.

Templates use ``{Placeholder}`` tokens, e.g. ``"'{PropertyName}' must
not be empty."``. Unknown placeholders are left untouched so that user
messages containing braces render verbatim.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any, Literal

_PLACEHOLDER = re.compile(r"\{([A-Za-z][A-Za-z0-9_]*)\}")
_WORD_SEPARATOR = re.compile(r"[._]+")
_CASE_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")

DisplayNameStyle = Literal["title", "raw"]


def format_message(template: str, arguments: Mapping[str, Any]) -> str:
    """Substitute ``{Name}`` placeholders from *arguments*."""

    def _sub(match: re.Match[str]) -> str:
        key = match.group(1)
        if key not in arguments:
            return match.group(0)
        return str(arguments[key])

    return _PLACEHOLDER.sub(_sub, template)


def display_name(property_name: str, style: DisplayNameStyle = "title") -> str:
    """Humanize a property path.

    ``"optional_int"``, ``"optionalInt"`` and ``"OptionalInt"`` all render
    as ``"Optional Int"``; acronyms stay together (``"HTTPStatus"`` ->
    ``"HTTP Status"``).
    """
    if style == "raw" or not property_name:
        return property_name
    words = [
        word
        for part in _WORD_SEPARATOR.split(property_name)
        for word in _CASE_BOUNDARY.split(part)
        if word
    ]
    return " ".join(w[:1].upper() + w[1:] for w in words)
