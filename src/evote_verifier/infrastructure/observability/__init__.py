"""Observability: structured logging and run id correlation."""

from evote_verifier.infrastructure.observability.logging import configure_structlog
from evote_verifier.infrastructure.observability.run_context import (
    generate_run_id,
    get_run_id,
    run_id_processor,
    set_run_id,
)

__all__ = [
    "configure_structlog",
    "generate_run_id",
    "get_run_id",
    "run_id_processor",
    "set_run_id",
]
