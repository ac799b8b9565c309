"""Config file discovery.

Walk-up finder locates ``optval.toml``, or a ``pyproject.toml`` that has
a ``[tool.optval]`` table, similar to how git finds .git/. The
``OPTVAL_CONFIG`` env var overrides discovery.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

CONFIG_FILENAME = "optval.toml"
PYPROJECT_FILENAME = "pyproject.toml"
CONFIG_ENV_VAR = "OPTVAL_CONFIG"


def _has_tool_table(pyproject: Path) -> bool:
    try:
        data = tomllib.loads(pyproject.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError:
        return False
    return "optval" in data.get("tool", {})


def find_config(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for a config file.

    In each directory ``optval.toml`` wins over ``pyproject.toml``.
    Returns None if nothing is found, or if ``OPTVAL_CONFIG`` names a
    missing file.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        return p if p.is_file() else None

    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        pyproject = current / PYPROJECT_FILENAME
        if pyproject.is_file() and _has_tool_table(pyproject):
            return pyproject
        if current.parent == current:
            return None
        current = current.parent


def read_config_table(path: Path) -> dict[str, Any]:
    """Return the optval settings table stored in *path*.

    For ``pyproject.toml`` that is ``[tool.optval]``; any other file is
    read whole.

    Raises:
        tomllib.TOMLDecodeError: If the file is not valid TOML.
    """
    data = tomllib.loads(path.read_text(encoding="utf-8"))
    if path.name == PYPROJECT_FILENAME:
        return dict(data.get("tool", {}).get("optval", {}))
    return data
