"""Tally authenticity: signatures of the ballot box, shuffle and votes payloads."""

from __future__ import annotations

from evote_verifier.application.verifications.common import (
    verify_file_signature,
    verify_group_signatures,
)
from evote_verifier.application.verifications.context import VerificationContext
from evote_verifier.application.verifications.suite import VerificationDescriptor
from evote_verifier.domain.models.verification_meta_data import VerificationCategory
from evote_verifier.domain.models.verification_result import VerificationResult
from evote_verifier.infrastructure.file_structure.directories import VerificationDirectory


def verify_signature_control_component_ballot_box(
    directory: VerificationDirectory, context: VerificationContext, result: VerificationResult
) -> None:
    for bb_dir in directory.tally.bb_directories():
        bb_result = VerificationResult()
        verify_group_signatures(bb_dir.control_component_ballot_box_payload_group, context, bb_result)
        result.append_with_context(bb_result, bb_dir.name)


def verify_signature_control_component_shuffle(
    directory: VerificationDirectory, context: VerificationContext, result: VerificationResult
) -> None:
    for bb_dir in directory.tally.bb_directories():
        bb_result = VerificationResult()
        verify_group_signatures(bb_dir.control_component_shuffle_payload_group, context, bb_result)
        result.append_with_context(bb_result, bb_dir.name)


def verify_signature_tally_component_shuffle(
    directory: VerificationDirectory, context: VerificationContext, result: VerificationResult
) -> None:
    for bb_dir in directory.tally.bb_directories():
        bb_result = VerificationResult()
        verify_file_signature(bb_dir.tally_component_shuffle_payload_file, context, bb_result)
        result.append_with_context(bb_result, bb_dir.name)


def verify_signature_tally_component_votes(
    directory: VerificationDirectory, context: VerificationContext, result: VerificationResult
) -> None:
    for bb_dir in directory.tally.bb_directories():
        bb_result = VerificationResult()
        verify_file_signature(bb_dir.tally_component_votes_payload_file, context, bb_result)
        result.append_with_context(bb_result, bb_dir.name)


VERIFICATIONS: tuple[VerificationDescriptor, ...] = (
    VerificationDescriptor(
        id="07.01",
        name="VerifySignatureControlComponentBallotBox",
        category=VerificationCategory.AUTHENTICITY,
        function=verify_signature_control_component_ballot_box,
    ),
    VerificationDescriptor(
        id="07.02",
        name="VerifySignatureControlComponentShuffle",
        category=VerificationCategory.AUTHENTICITY,
        function=verify_signature_control_component_shuffle,
    ),
    VerificationDescriptor(
        id="07.03",
        name="VerifySignatureTallyComponentShuffle",
        category=VerificationCategory.AUTHENTICITY,
        function=verify_signature_tally_component_shuffle,
    ),
    VerificationDescriptor(
        id="07.04",
        name="VerifySignatureTallyComponentVotes",
        category=VerificationCategory.AUTHENTICITY,
        function=verify_signature_tally_component_votes,
    ),
)
