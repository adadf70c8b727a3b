"""Run id management for log correlation.

Every log entry emitted during a verification run carries the run id, so
the entries of concurrent or consecutive runs can be told apart.

Usage:
    set_run_id(generate_run_id())
    processors = [..., run_id_processor, ...]
"""

from contextvars import ContextVar
from typing import Any
from uuid import uuid4

# Empty string when no run is active
_run_id: ContextVar[str] = ContextVar("run_id", default="")


def generate_run_id() -> str:
    """Generate a new run id (UUID4)."""
    return str(uuid4())


def get_run_id() -> str:
    """Get the current run id, or an empty string outside a run."""
    return _run_id.get()


def set_run_id(run_id: str) -> None:
    """Set the run id in the current context."""
    _run_id.set(run_id)


def run_id_processor(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Structlog processor adding run_id to every log entry.

    An explicitly bound run_id is left untouched.
    """
    run_id = get_run_id()
    if run_id and "run_id" not in event_dict:
        event_dict["run_id"] = run_id
    return event_dict
