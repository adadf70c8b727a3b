"""Tally integrity: every context and tally payload decodes."""

from __future__ import annotations

from evote_verifier.application.verifications.context import VerificationContext
from evote_verifier.application.verifications.setup.integrity import check_context_integrity
from evote_verifier.application.verifications.suite import VerificationDescriptor
from evote_verifier.application.verifications.tally.consistency import ballot_box_payloads
from evote_verifier.domain.models.verification_meta_data import VerificationCategory
from evote_verifier.domain.models.verification_result import VerificationResult
from evote_verifier.infrastructure.file_structure.directories import VerificationDirectory


def verify_tally_integrity(
    directory: VerificationDirectory, context: VerificationContext, result: VerificationResult
) -> None:
    check_context_integrity(directory.context, result)
    for bb_dir in directory.tally.bb_directories():
        bb_result = VerificationResult()
        ballot_box_payloads(bb_dir, bb_result)
        result.append_with_context(bb_result, bb_dir.name)


VERIFICATIONS: tuple[VerificationDescriptor, ...] = (
    VerificationDescriptor(
        id="09.01",
        name="VerifyTallyIntegrity",
        category=VerificationCategory.INTEGRITY,
        function=verify_tally_integrity,
    ),
)
