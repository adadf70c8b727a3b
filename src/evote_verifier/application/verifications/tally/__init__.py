"""Tally verifications, concatenated in category execution order."""

from evote_verifier.application.verifications.suite import VerificationDescriptor
from evote_verifier.application.verifications.tally import (
    authenticity,
    completeness,
    consistency,
    evidence,
    integrity,
)

VERIFICATIONS: tuple[VerificationDescriptor, ...] = (
    *authenticity.VERIFICATIONS,
    *completeness.VERIFICATIONS,
    *consistency.VERIFICATIONS,
    *evidence.VERIFICATIONS,
    *integrity.VERIFICATIONS,
)

__all__ = ["VERIFICATIONS"]
