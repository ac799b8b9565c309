"""Tests for config models — defaults and sparse overrides."""

import pytest
from pydantic import ValidationError

from optval.config.models import ValidationConfig


class TestValidationConfig:
    def test_defaults(self) -> None:
        cfg = ValidationConfig()
        assert cfg.cascade_mode == "continue"
        assert cfg.require_presence_gate is True
        assert cfg.display_names == "title"

    def test_rejects_unknown_cascade_mode(self) -> None:
        with pytest.raises(ValidationError):
            ValidationConfig(cascade_mode="sometimes")  # type: ignore[arg-type]

    def test_frozen(self) -> None:
        cfg = ValidationConfig()
        with pytest.raises(ValidationError):
            cfg.cascade_mode = "stop"  # type: ignore[misc]
