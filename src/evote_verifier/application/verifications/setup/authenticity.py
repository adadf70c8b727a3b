"""Setup authenticity: signatures of all context and setup payloads.

A cryptographically wrong signature is a FAILURE. A missing trust store,
certificate or signature, an expired certificate, or an unreadable payload
is an ERROR.
"""

from __future__ import annotations

from evote_verifier.application.dtos.payloads import ControlComponentCodeSharesPayload
from evote_verifier.application.verifications.common import (
    verify_file_signature,
    verify_group_signatures,
    verify_signature,
)
from evote_verifier.application.verifications.context import VerificationContext
from evote_verifier.application.verifications.suite import VerificationDescriptor
from evote_verifier.domain.models.verification_meta_data import VerificationCategory
from evote_verifier.domain.models.verification_result import (
    VerificationEvent,
    VerificationResult,
)
from evote_verifier.infrastructure.file_structure.directories import VerificationDirectory


def verify_signature_setup_component_public_keys(
    directory: VerificationDirectory, context: VerificationContext, result: VerificationResult
) -> None:
    verify_file_signature(
        directory.context.setup_component_public_keys_payload_file, context, result
    )


def verify_signature_control_component_public_keys(
    directory: VerificationDirectory, context: VerificationContext, result: VerificationResult
) -> None:
    verify_group_signatures(
        directory.context.control_component_public_keys_payload_group, context, result
    )


def verify_signature_setup_component_tally_data(
    directory: VerificationDirectory, context: VerificationContext, result: VerificationResult
) -> None:
    for vcs_dir in directory.context.vcs_directories():
        vcs_result = VerificationResult()
        verify_file_signature(vcs_dir.setup_component_tally_data_payload_file, context, vcs_result)
        result.append_with_context(vcs_result, vcs_dir.name)


def verify_signature_election_event_context(
    directory: VerificationDirectory, context: VerificationContext, result: VerificationResult
) -> None:
    verify_file_signature(
        directory.context.election_event_context_payload_file, context, result
    )


def verify_signature_setup_component_verification_data(
    directory: VerificationDirectory, context: VerificationContext, result: VerificationResult
) -> None:
    for vcs_dir in directory.setup.vcs_directories():
        vcs_result = VerificationResult()
        verify_group_signatures(
            vcs_dir.setup_component_verification_data_payload_group, context, vcs_result
        )
        result.append_with_context(vcs_result, vcs_dir.name)


def _verify_code_shares(
    entries: ControlComponentCodeSharesPayload,
    context: VerificationContext,
    result: VerificationResult,
) -> None:
    for position, inner in enumerate(entries):
        result.append_with_context(
            verify_signature(inner, context), f"node {inner.node_id} (entry {position})"
        )


def verify_signature_control_component_code_shares(
    directory: VerificationDirectory, context: VerificationContext, result: VerificationResult
) -> None:
    for vcs_dir in directory.setup.vcs_directories():
        vcs_result = VerificationResult()
        for entry in vcs_dir.control_component_code_shares_payload_group:
            if entry.error is not None:
                vcs_result.push(VerificationEvent.error(str(entry.error)))
            elif entry.payload is not None:
                file_result = VerificationResult()
                _verify_code_shares(entry.payload, context, file_result)
                vcs_result.append_with_context(file_result, entry.file.name)
        result.append_with_context(vcs_result, vcs_dir.name)


VERIFICATIONS: tuple[VerificationDescriptor, ...] = (
    VerificationDescriptor(
        id="02.02",
        name="VerifySignatureSetupComponentPublicKeys",
        category=VerificationCategory.AUTHENTICITY,
        function=verify_signature_setup_component_public_keys,
    ),
    VerificationDescriptor(
        id="02.03",
        name="VerifySignatureControlComponentPublicKeys",
        category=VerificationCategory.AUTHENTICITY,
        function=verify_signature_control_component_public_keys,
    ),
    VerificationDescriptor(
        id="02.04",
        name="VerifySignatureSetupComponentTallyData",
        category=VerificationCategory.AUTHENTICITY,
        function=verify_signature_setup_component_tally_data,
    ),
    VerificationDescriptor(
        id="02.05",
        name="VerifySignatureElectionEventContext",
        category=VerificationCategory.AUTHENTICITY,
        function=verify_signature_election_event_context,
    ),
    VerificationDescriptor(
        id="02.06",
        name="VerifySignatureSetupComponentVerificationData",
        category=VerificationCategory.AUTHENTICITY,
        function=verify_signature_setup_component_verification_data,
    ),
    VerificationDescriptor(
        id="02.07",
        name="VerifySignatureControlComponentCodeShares",
        category=VerificationCategory.AUTHENTICITY,
        function=verify_signature_control_component_code_shares,
    ),
)
