"""Read-only context handed to every verification."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from evote_verifier.application.ports.proof_verifier import ProofVerifierProtocol
from evote_verifier.application.ports.trust_store import TrustStoreProtocol
from evote_verifier.config.verifier_config import DEFAULT_VERIFIER_CONFIG, VerifierConfig
from evote_verifier.domain.errors.evidence import ProofVerifierUnavailableError


@dataclass(frozen=True)
class VerificationContext:
    """Shared, immutable collaborators of a run.

    Attributes:
        config: Verifier configuration.
        trust_store: Loaded trust store, or None when it could not be loaded.
        trust_store_error: Why the trust store is missing, if it is.
        proof_verifier: Zero-knowledge proof verifier, or None.
        at: Time at which certificates must be valid; None means now.
    """

    config: VerifierConfig = DEFAULT_VERIFIER_CONFIG
    trust_store: TrustStoreProtocol | None = None
    trust_store_error: str | None = None
    proof_verifier: ProofVerifierProtocol | None = None
    at: datetime | None = None

    def require_proof_verifier(self) -> ProofVerifierProtocol:
        """Return the proof verifier.

        Raises:
            ProofVerifierUnavailableError: If none is configured.
        """
        if self.proof_verifier is None:
            raise ProofVerifierUnavailableError()
        return self.proof_verifier
