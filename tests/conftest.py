"""Shared pytest fixtures for optval tests."""

from __future__ import annotations

import logging
import os
from collections.abc import Generator

import pytest
import structlog

from optval.engine.telemetry import _current_span, disable_telemetry


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch) -> Generator[None]:
    """Keep OPTVAL_* env vars from the host out of every test."""
    for key in list(os.environ):
        if key.startswith("OPTVAL_"):
            monkeypatch.delenv(key)
    yield
    disable_telemetry()
    _current_span.set(None)


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Undo configure_logging() so caplog keeps seeing optval records."""
    optval = logging.getLogger("optval")
    handlers = optval.handlers[:]
    level = optval.level
    propagate = optval.propagate
    yield
    optval.handlers = handlers
    optval.setLevel(level)
    optval.propagate = propagate
    structlog.reset_defaults()
