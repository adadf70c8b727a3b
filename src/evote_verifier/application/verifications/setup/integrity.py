"""Setup integrity: every payload decodes and its group elements lie in Z_p*."""

from __future__ import annotations

from collections.abc import Iterable

from evote_verifier.application.dtos.payloads import EncryptionGroup
from evote_verifier.application.verifications.common import (
    decode_group,
    decode_or_error,
)
from evote_verifier.application.verifications.context import VerificationContext
from evote_verifier.application.verifications.suite import VerificationDescriptor
from evote_verifier.domain.models.verification_meta_data import VerificationCategory
from evote_verifier.domain.models.verification_result import (
    VerificationEvent,
    VerificationResult,
)
from evote_verifier.infrastructure.file_structure.directories import (
    ContextDirectory,
    VerificationDirectory,
)


def check_elements(
    group: EncryptionGroup,
    elements: Iterable[int],
    label: str,
    source: str,
    result: VerificationResult,
) -> None:
    """Record a FAILURE per element outside [1, p - 1]."""
    for position, element in enumerate(elements):
        if not 0 < element < group.p:
            result.push_with_context(
                VerificationEvent.failure(f"{label}[{position}] is not in Z_p*"), source
            )


def check_context_integrity(context_dir: ContextDirectory, result: VerificationResult) -> None:
    """Decode all context payloads and check their public key elements."""
    decode_or_error(context_dir.election_event_context_payload_file, result)

    public_keys_file = context_dir.setup_component_public_keys_payload_file
    public_keys = decode_or_error(public_keys_file, result)
    if public_keys is not None:
        keys = public_keys.setup_component_public_keys
        group = public_keys.encryption_group
        check_elements(group, keys.election_public_key, "election public key", public_keys_file.name, result)
        check_elements(
            group,
            keys.choice_return_codes_encryption_public_key,
            "choice return codes encryption public key",
            public_keys_file.name,
            result,
        )
        check_elements(
            group, keys.electoral_board_public_key, "electoral board public key", public_keys_file.name, result
        )

    cc_group = context_dir.control_component_public_keys_payload_group
    for index, payload in decode_group(cc_group, result):
        keys = payload.control_component_public_keys
        source = cc_group.file_name(index)
        check_elements(
            payload.encryption_group, keys.ccmj_election_public_key, "CCM election public key", source, result
        )
        check_elements(
            payload.encryption_group,
            keys.ccrj_choice_return_codes_encryption_public_key,
            "CCR choice return codes encryption public key",
            source,
            result,
        )

    for vcs_dir in context_dir.vcs_directories():
        vcs_result = VerificationResult()
        decode_or_error(vcs_dir.setup_component_tally_data_payload_file, vcs_result)
        result.append_with_context(vcs_result, vcs_dir.name)


def verify_setup_integrity(
    directory: VerificationDirectory, context: VerificationContext, result: VerificationResult
) -> None:
    check_context_integrity(directory.context, result)
    for vcs_dir in directory.setup.vcs_directories():
        vcs_result = VerificationResult()
        decode_group(vcs_dir.setup_component_verification_data_payload_group, vcs_result)
        decode_group(vcs_dir.control_component_code_shares_payload_group, vcs_result)
        result.append_with_context(vcs_result, vcs_dir.name)


VERIFICATIONS: tuple[VerificationDescriptor, ...] = (
    VerificationDescriptor(
        id="04.01",
        name="VerifySetupIntegrity",
        category=VerificationCategory.INTEGRITY,
        function=verify_setup_integrity,
    ),
)
