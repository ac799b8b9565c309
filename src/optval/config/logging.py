"""structlog configuration for optval.

optval is a library: nothing here runs on import, and the root logger is
left to the application. :func:`configure_logging` (or
:func:`optval.context.configure_runtime`) attaches one handler to the
``optval`` logger and renders both structlog events (telemetry spans) and
stdlib records from the engine through the same processor chain:

- Human (default): console output to stderr, colored on a TTY
- JSON (log_json): one JSON object per line to stderr
"""

from __future__ import annotations

import logging
import sys

import structlog

LOGGER_NAME = "optval"

# Marks the handler installed here so repeated calls replace it
_HANDLER_FLAG = "_optval_handler"


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]


def _exception_processors(log_json: bool) -> list[structlog.types.Processor]:
    # ConsoleRenderer formats exc_info itself
    return [structlog.processors.format_exc_info] if log_json else []


def _renderer(log_json: bool) -> structlog.types.Processor:
    if log_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
) -> None:
    """Route ``optval`` logging to stderr through structlog.

    Args:
        verbose: Emit DEBUG records (rule declaration, unwrap rebinding,
            telemetry spans). When False, only WARNING+.
        log_json: Use JSON renderer instead of console renderer.
    """
    shared = _shared_processors()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        # Stdlib records from the engine: keep ``extra=`` fields as event keys
        foreign_pre_chain=[*shared, structlog.stdlib.ExtraAdder()],
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            *_exception_processors(log_json),
            _renderer(log_json),
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    setattr(handler, _HANDLER_FLAG, True)

    logger = logging.getLogger(LOGGER_NAME)
    for existing in [h for h in logger.handlers if getattr(h, _HANDLER_FLAG, False)]:
        logger.removeHandler(existing)
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    # Rendered here; do not duplicate through the application's root handlers
    logger.propagate = False
