"""Runtime bootstrap — apply settings to logging and telemetry.

Call once at application start-up, before building validators::

    settings = OptvalSettings.discover()
    configure_runtime(settings)
"""

from __future__ import annotations

from optval.config.logging import configure_logging
from optval.config.settings import OptvalSettings
from optval.engine.telemetry import disable_telemetry, enable_telemetry


def configure_runtime(settings: OptvalSettings | None = None) -> OptvalSettings:
    """Configure structured logging and telemetry from *settings*.

    Returns the settings used, so callers can hand them to validators.
    """
    if settings is None:
        settings = OptvalSettings.discover()

    configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    # Telemetry spans follow verbose mode
    if settings.verbose:
        enable_telemetry()
    else:
        disable_telemetry()
    return settings
