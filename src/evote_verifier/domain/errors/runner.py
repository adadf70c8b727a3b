"""Runner and configuration errors.

These errors abort a run before any verification executes, or signal a
misuse of the runner state machine.
"""

from __future__ import annotations

from evote_verifier.domain.exceptions import VerifierError


class RunnerError(VerifierError):
    """Base class for runner errors."""


class RunnerIsRunningError(RunnerError):
    """Raised when run_all() is called while a run is in progress."""

    def __init__(self) -> None:
        super().__init__("Runner is already running")


class RunnerHasAlreadyRunError(RunnerError):
    """Raised when run_all() is called on a finished runner without reset()."""

    def __init__(self) -> None:
        super().__init__("Runner has already run; call reset() first")


class RunnerStartupError(RunnerError):
    """Raised when a start-up check on the dataset fails."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Start-up check failed: {reason}")
        self.reason = reason


class RunnerConfigurationError(RunnerError):
    """Raised when the verification table and metadata disagree.

    Examples: a metadata id without an implementation, or an exclusion
    naming an unknown verification id.
    """

    def __init__(self, reason: str) -> None:
        super().__init__(f"Invalid runner configuration: {reason}")
        self.reason = reason


class MetadataLoadError(RunnerError):
    """Raised when the verification metadata manifest cannot be loaded."""

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"Cannot load verification metadata from {source}: {reason}")
        self.source = source
        self.reason = reason
