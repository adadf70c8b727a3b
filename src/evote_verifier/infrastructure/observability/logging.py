"""Structured logging configuration with structlog.

Logs go to stderr so that reports on stdout stay machine-readable.

Supports a production mode (JSON lines for archiving next to the audit
report) and a development mode (colored console output).

Log Entry Format (production):
    {
        "timestamp": "2024-01-01T00:00:00.000000Z",
        "level": "info",
        "event": "verification_finished",
        "run_id": "uuid",
        "service": "Runner",
        ...additional context
    }

Usage:
    from evote_verifier.infrastructure.observability import configure_structlog

    configure_structlog(environment="production")  # JSON output
    configure_structlog(environment="development")  # Console output
"""

import logging
import os
import sys
from typing import cast

import structlog
from structlog.typing import Processor

from evote_verifier.infrastructure.observability.run_context import run_id_processor

# Environment variable for log level (default: INFO)
LOG_LEVEL_ENV = "LOG_LEVEL"
DEFAULT_LOG_LEVEL = "INFO"


def _get_log_level(level: str | None = None) -> int:
    """Resolve a level name, falling back to LOG_LEVEL and then INFO."""
    level_name = (level or os.getenv(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL)).upper()
    return getattr(logging, level_name, logging.INFO)


def configure_structlog(environment: str = "production", level: str | None = None) -> None:
    """Configure structlog for the verifier.

    Should be called once at start-up, before the first logger is used.

    Args:
        environment: 'production' for JSON output, 'development' for console.
        level: Optional level name overriding the LOG_LEVEL environment variable.
    """
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        cast(Processor, run_id_processor),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if environment == "production":
        final_processor: Processor = structlog.processors.JSONRenderer()
    else:
        final_processor = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=shared_processors + [final_processor],
        wrapper_class=structlog.make_filtering_bound_logger(_get_log_level(level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )
