"""Logfire setup for taskboard, plus the span and structured-log helpers
the board engine, task store client and project registry share.

Modules log through logging.getLogger(__name__); once configure_logfire has
run those records flow into Logfire alongside the spans.
"""

import logging

import logfire
from fastapi import FastAPI

from taskboard.core.config import settings


def configure_logfire() -> None:
    """Configure Logfire for the taskboard service; nothing leaves the process without a token."""
    logfire.configure(
        token=settings.logfire_token,
        service_name="taskboard",
        service_version="0.1.0",
        environment=settings.environment,
        send_to_logfire="if-token-present",
    )
    logging.basicConfig(handlers=[logfire.LogfireLoggingHandler()], level=logging.INFO)

    logging.getLogger(__name__).info("Logfire configured for %s", settings.environment)


def instrument_fastapi(app: FastAPI) -> None:
    """Add Logfire instrumentation to FastAPI application."""
    logfire.instrument_fastapi(app)
    logging.getLogger(__name__).debug("Board routes instrumented")


def span(name: str, **attributes: object) -> logfire.LogfireSpan:
    """Span around a task store call or a registry load/persist."""
    return logfire.span(name, **attributes)


def log_with_context(
    logger: logging.Logger,
    level: str,
    message: str,
    **context: object,
) -> None:
    """Log with structured extra fields, e.g. operation, task_id and error category of a failed sync.

    Args:
        logger: Logger instance to use
        level: Level name ("debug", "info", "warning", ...)
        message: Log message
        **context: Fields attached to the record as attributes
    """
    log_method = getattr(logger, level.lower())
    log_method(message, extra=context)
