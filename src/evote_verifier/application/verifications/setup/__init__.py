"""Setup verifications, concatenated in category execution order."""

from evote_verifier.application.verifications.setup import (
    authenticity,
    completeness,
    consistency,
    evidence,
    integrity,
)
from evote_verifier.application.verifications.suite import VerificationDescriptor

VERIFICATIONS: tuple[VerificationDescriptor, ...] = (
    *authenticity.VERIFICATIONS,
    *completeness.VERIFICATIONS,
    *consistency.VERIFICATIONS,
    *evidence.VERIFICATIONS,
    *integrity.VERIFICATIONS,
)

__all__ = ["VERIFICATIONS"]
