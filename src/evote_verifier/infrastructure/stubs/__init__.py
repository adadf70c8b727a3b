"""Stub implementations of application ports for development and testing."""

from evote_verifier.infrastructure.stubs.proof_verifier_stub import (
    ProofCall,
    ProofVerifierStub,
)

__all__ = [
    "ProofCall",
    "ProofVerifierStub",
]
