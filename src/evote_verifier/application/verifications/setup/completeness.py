"""Setup completeness: every expected file and directory is present.

Missing items are FAILURE events; nothing is decoded here.
"""

from __future__ import annotations

from typing import Any

from evote_verifier.application.verifications.context import VerificationContext
from evote_verifier.application.verifications.suite import VerificationDescriptor
from evote_verifier.domain.models.certificate_authority import CONTROL_COMPONENT_NODE_IDS
from evote_verifier.domain.models.verification_meta_data import VerificationCategory
from evote_verifier.domain.models.verification_result import (
    VerificationEvent,
    VerificationResult,
)
from evote_verifier.infrastructure.file_structure.directories import (
    ContextDirectory,
    VerificationDirectory,
)
from evote_verifier.infrastructure.file_structure.payload_file import FileGroup


def check_node_files(group: FileGroup[Any], result: VerificationResult) -> None:
    """Record a FAILURE per control component node without a file in the group."""
    present = set(group.numbers())
    for node_id in CONTROL_COMPONENT_NODE_IDS:
        if node_id not in present:
            result.push(VerificationEvent.failure(f"{group.file_name(node_id)} is missing"))


def check_context_completeness(context_dir: ContextDirectory, result: VerificationResult) -> None:
    """Completeness of the context directory shared by both periods."""
    for file in (
        context_dir.election_event_context_payload_file,
        context_dir.setup_component_public_keys_payload_file,
    ):
        if not file.exists():
            result.push(VerificationEvent.failure(f"{file.name} is missing"))
    check_node_files(context_dir.control_component_public_keys_payload_group, result)


def verify_setup_completeness(
    directory: VerificationDirectory, context: VerificationContext, result: VerificationResult
) -> None:
    check_context_completeness(directory.context, result)

    context_vcs_dirs = directory.context.vcs_directories()
    if not context_vcs_dirs:
        result.push(VerificationEvent.failure("No verification card set in context directory"))
    for vcs_dir in context_vcs_dirs:
        file = vcs_dir.setup_component_tally_data_payload_file
        if not file.exists():
            result.push_with_context(
                VerificationEvent.failure(f"{file.name} is missing"), vcs_dir.name
            )

    setup_vcs_dirs = directory.setup.vcs_directories()
    if not setup_vcs_dirs:
        result.push(VerificationEvent.failure("No verification card set in setup directory"))
    for vcs_dir in setup_vcs_dirs:
        for group in (
            vcs_dir.setup_component_verification_data_payload_group,
            vcs_dir.control_component_code_shares_payload_group,
        ):
            if not group.has_elements():
                result.push_with_context(
                    VerificationEvent.failure(f"No file {group.file_name_pattern}"),
                    vcs_dir.name,
                )


VERIFICATIONS: tuple[VerificationDescriptor, ...] = (
    VerificationDescriptor(
        id="01.01",
        name="VerifySetupCompleteness",
        category=VerificationCategory.COMPLETENESS,
        function=verify_setup_completeness,
    ),
)
