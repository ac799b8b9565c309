"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, optval.toml only contains overrides.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel


class ValidationConfig(BaseModel):
    """[validation] section."""

    model_config = {"frozen": True}

    cascade_mode: Literal["continue", "stop"] = "continue"
    require_presence_gate: bool = True
    display_names: Literal["title", "raw"] = "title"
