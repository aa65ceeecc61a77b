"""Structured logging utilities using structlog for verification run context."""

import sys
from typing import Any, Optional
import structlog
from structlog.processors import JSONRenderer
from structlog.contextvars import merge_contextvars

from research_verifier.config.settings import settings

# Development mode: TTY and log_format=console
IS_TTY = sys.stderr.isatty()
LOG_FORMAT = settings.log_format.lower()
LOG_LEVEL = settings.log_level.upper()


def configure_structured_logging() -> None:
    """
    Configure structured logging with appropriate processors and renderers.

    Uses:
    - Console renderer for development (colorized, human-readable)
    - JSON renderer for production (structured, machine-readable)
    - Context binding for session_id
    """
    processors = [
        merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if IS_TTY and LOG_FORMAT == "console":
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=True,
                exception_formatter=structlog.dev.plain_traceback,
            )
        )
    else:
        processors.append(JSONRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(LOG_LEVEL),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_structured_logger(
    name: str,
    session_id: Optional[str] = None,
    **additional_context: Any,
) -> structlog.BoundLogger:
    """
    Get a structured logger with bound context.

    Args:
        name: Logger name (typically module name)
        session_id: Optional research session ID to bind
        **additional_context: Additional context to bind

    Returns:
        Configured BoundLogger instance with context

    Example:
        >>> logger = get_structured_logger("verification.engine", session_id="s-1")
        >>> logger.info("round_complete", round=3, confidence=0.71)
    """
    logger = structlog.get_logger(name)

    if session_id:
        logger = logger.bind(session_id=session_id)

    if additional_context:
        logger = logger.bind(**additional_context)

    return logger


# Configure on module import
configure_structured_logging()


__all__ = [
    "get_structured_logger",
    "configure_structured_logging",
]
