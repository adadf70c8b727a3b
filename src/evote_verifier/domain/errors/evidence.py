"""Evidence verification errors."""

from __future__ import annotations

from evote_verifier.domain.exceptions import VerifierError


class ProofVerifierUnavailableError(VerifierError):
    """Raised when an evidence verification needs a proof verifier and none is configured."""

    def __init__(self) -> None:
        super().__init__("No zero-knowledge proof verifier configured")
