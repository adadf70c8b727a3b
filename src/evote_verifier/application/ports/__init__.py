"""Application ports: interfaces implemented by infrastructure adapters."""

from evote_verifier.application.ports.proof_verifier import ProofVerifierProtocol
from evote_verifier.application.ports.trust_store import TrustStoreProtocol

__all__ = [
    "ProofVerifierProtocol",
    "TrustStoreProtocol",
]
