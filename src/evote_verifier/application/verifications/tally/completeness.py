"""Tally completeness: context files and every ballot box's payloads are present."""

from __future__ import annotations

from evote_verifier.application.verifications.context import VerificationContext
from evote_verifier.application.verifications.setup.completeness import (
    check_context_completeness,
    check_node_files,
)
from evote_verifier.application.verifications.suite import VerificationDescriptor
from evote_verifier.domain.models.verification_meta_data import VerificationCategory
from evote_verifier.domain.models.verification_result import (
    VerificationEvent,
    VerificationResult,
)
from evote_verifier.infrastructure.file_structure.directories import VerificationDirectory


def verify_tally_completeness(
    directory: VerificationDirectory, context: VerificationContext, result: VerificationResult
) -> None:
    check_context_completeness(directory.context, result)

    bb_dirs = directory.tally.bb_directories()
    if not bb_dirs:
        result.push(VerificationEvent.failure("No ballot box in tally directory"))
    for bb_dir in bb_dirs:
        bb_result = VerificationResult()
        for file in (
            bb_dir.tally_component_votes_payload_file,
            bb_dir.tally_component_shuffle_payload_file,
        ):
            if not file.exists():
                bb_result.push(VerificationEvent.failure(f"{file.name} is missing"))
        check_node_files(bb_dir.control_component_ballot_box_payload_group, bb_result)
        check_node_files(bb_dir.control_component_shuffle_payload_group, bb_result)
        result.append_with_context(bb_result, bb_dir.name)


VERIFICATIONS: tuple[VerificationDescriptor, ...] = (
    VerificationDescriptor(
        id="06.01",
        name="VerifyTallyCompleteness",
        category=VerificationCategory.COMPLETENESS,
        function=verify_tally_completeness,
    ),
)
