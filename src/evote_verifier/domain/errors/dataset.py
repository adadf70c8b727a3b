"""Dataset access errors.

Raised by the file-structure layer when a payload cannot be read or decoded,
or when a directory of the wrong period is requested.
"""

from __future__ import annotations

from evote_verifier.domain.exceptions import VerifierError


class DatasetError(VerifierError):
    """Base class for dataset access errors."""


class PayloadDecodeError(DatasetError):
    """Raised when a payload file is missing, unreadable, or malformed."""

    def __init__(self, path: str, reason: str) -> None:
        """Initialize with the payload path and reason.

        Args:
            path: Path of the payload file.
            reason: Description of the read or decode failure.
        """
        super().__init__(f"{path} cannot be read: {reason}")
        self.path = path
        self.reason = reason


class WrongPeriodError(DatasetError):
    """Raised when a directory of another period is requested.

    A setup dataset has no tally directory and vice versa. Asking for it is
    a programming error at the call site.
    """

    def __init__(self, requested: str, actual: str) -> None:
        super().__init__(
            f"Directory of period {requested} requested on a {actual} dataset"
        )
        self.requested = requested
        self.actual = actual
