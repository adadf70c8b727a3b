"""Check table: the closed list of implemented verifications per period."""

from __future__ import annotations

from evote_verifier.application.verifications import setup, tally
from evote_verifier.application.verifications.suite import VerificationDescriptor
from evote_verifier.domain.models.verification_meta_data import VerificationPeriod

_TABLES: dict[VerificationPeriod, tuple[VerificationDescriptor, ...]] = {
    VerificationPeriod.SETUP: setup.VERIFICATIONS,
    VerificationPeriod.TALLY: tally.VERIFICATIONS,
}


def verification_table(period: VerificationPeriod) -> tuple[VerificationDescriptor, ...]:
    """Descriptors of a period in execution order."""
    return _TABLES[period]
