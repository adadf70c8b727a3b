"""Setup consistency: values repeated across independently signed payloads agree.

The election event context payload is the reference. Each disagreement is a
FAILURE naming the payload it was found in; unreadable payloads are ERRORs.
"""

from __future__ import annotations

from evote_verifier.application.dtos.payloads import EncryptionGroup
from evote_verifier.application.verifications.common import (
    decode_group,
    decode_or_error,
    decode_whole_group,
)
from evote_verifier.application.verifications.context import VerificationContext
from evote_verifier.application.verifications.suite import VerificationDescriptor
from evote_verifier.domain.models.certificate_authority import CONTROL_COMPONENT_NODE_IDS
from evote_verifier.domain.models.verification_meta_data import VerificationCategory
from evote_verifier.domain.models.verification_result import (
    VerificationEvent,
    VerificationResult,
)
from evote_verifier.infrastructure.file_structure.directories import VerificationDirectory

EXPECTED_NODE_IDS = frozenset(CONTROL_COMPONENT_NODE_IDS)


def _fail(result: VerificationResult, message: str, context: str | None = None) -> None:
    event = VerificationEvent.failure(message)
    if context is None:
        result.push(event)
    else:
        result.push_with_context(event, context)


def _check_group(
    reference: EncryptionGroup, group: EncryptionGroup, source: str, result: VerificationResult
) -> None:
    if group != reference:
        _fail(result, "Encryption group differs from the election event context", source)


def verify_encryption_group_consistency(
    directory: VerificationDirectory, context: VerificationContext, result: VerificationResult
) -> None:
    ee_context = decode_or_error(directory.context.election_event_context_payload_file, result)
    if ee_context is None:
        return
    reference = ee_context.encryption_group

    public_keys_file = directory.context.setup_component_public_keys_payload_file
    public_keys = decode_or_error(public_keys_file, result)
    if public_keys is not None:
        _check_group(reference, public_keys.encryption_group, public_keys_file.name, result)

    cc_group = directory.context.control_component_public_keys_payload_group
    for index, payload in decode_group(cc_group, result):
        _check_group(reference, payload.encryption_group, cc_group.file_name(index), result)

    for vcs_dir in directory.context.vcs_directories():
        file = vcs_dir.setup_component_tally_data_payload_file
        tally_data = decode_or_error(file, result, vcs_dir.name)
        if tally_data is not None:
            _check_group(reference, tally_data.encryption_group, f"{vcs_dir.name}/{file.name}", result)

    for vcs_dir in directory.setup.vcs_directories():
        vd_group = vcs_dir.setup_component_verification_data_payload_group
        for index, payload in decode_group(vd_group, result, vcs_dir.name):
            source = f"{vcs_dir.name}/{vd_group.file_name(index)}"
            _check_group(reference, payload.encryption_group, source, result)
        cs_group = vcs_dir.control_component_code_shares_payload_group
        for index, shares in decode_group(cs_group, result, vcs_dir.name):
            for inner in shares:
                source = f"{vcs_dir.name}/{cs_group.file_name(index)} node {inner.node_id}"
                _check_group(reference, inner.encryption_group, source, result)


def verify_setup_file_names_consistency(
    directory: VerificationDirectory, context: VerificationContext, result: VerificationResult
) -> None:
    context_names = {d.name for d in directory.context.vcs_directories()}
    setup_dirs = directory.setup.vcs_directories()
    setup_names = {d.name for d in setup_dirs}
    for name in sorted(context_names - setup_names):
        _fail(result, f"Verification card set {name} missing in setup directory")
    for name in sorted(setup_names - context_names):
        _fail(result, f"Verification card set {name} missing in context directory")

    for vcs_dir in setup_dirs:
        vd_group = vcs_dir.setup_component_verification_data_payload_group
        cs_group = vcs_dir.control_component_code_shares_payload_group
        vd_chunks = set(vd_group.numbers())
        cs_chunks = set(cs_group.numbers())
        for chunk in sorted(vd_chunks - cs_chunks):
            _fail(result, f"{cs_group.file_name(chunk)} missing for chunk {chunk}", vcs_dir.name)
        for chunk in sorted(cs_chunks - vd_chunks):
            _fail(result, f"{vd_group.file_name(chunk)} missing for chunk {chunk}", vcs_dir.name)
        if vd_chunks and sorted(vd_chunks) != list(range(len(vd_chunks))):
            _fail(result, f"Chunk numbers {sorted(vd_chunks)} are not contiguous from 0", vcs_dir.name)

        for index, payload in decode_group(vd_group, result, vcs_dir.name):
            if payload.chunk_id != index:
                _fail(
                    result,
                    f"Chunk id {payload.chunk_id} does not match file name",
                    f"{vcs_dir.name}/{vd_group.file_name(index)}",
                )
        for index, shares in decode_group(cs_group, result, vcs_dir.name):
            for inner in shares:
                if inner.chunk_id != index:
                    _fail(
                        result,
                        f"Chunk id {inner.chunk_id} of node {inner.node_id} does not match file name",
                        f"{vcs_dir.name}/{cs_group.file_name(index)}",
                    )


def verify_ccm_election_public_key_consistency(
    directory: VerificationDirectory, context: VerificationContext, result: VerificationResult
) -> None:
    public_keys = decode_or_error(directory.context.setup_component_public_keys_payload_file, result)
    if public_keys is None:
        return
    combined = {
        keys.node_id: keys.ccmj_election_public_key
        for keys in public_keys.setup_component_public_keys.combined_control_component_public_keys
    }
    cc_group = directory.context.control_component_public_keys_payload_group
    for index, payload in decode_group(cc_group, result):
        node_id = payload.node_id
        if node_id not in combined:
            _fail(result, f"No combined keys for node {node_id}", cc_group.file_name(index))
        elif payload.control_component_public_keys.ccmj_election_public_key != combined[node_id]:
            _fail(
                result,
                f"CCM election public key of node {node_id} differs from the setup component public keys",
                cc_group.file_name(index),
            )


def verify_election_event_id_consistency(
    directory: VerificationDirectory, context: VerificationContext, result: VerificationResult
) -> None:
    ee_context = decode_or_error(directory.context.election_event_context_payload_file, result)
    if ee_context is None:
        return
    expected = ee_context.election_event_id

    def check(found: str, source: str) -> None:
        if found != expected:
            _fail(result, f"Election event id {found} differs from {expected}", source)

    public_keys_file = directory.context.setup_component_public_keys_payload_file
    public_keys = decode_or_error(public_keys_file, result)
    if public_keys is not None:
        check(public_keys.election_event_id, public_keys_file.name)

    cc_group = directory.context.control_component_public_keys_payload_group
    for index, payload in decode_group(cc_group, result):
        check(payload.election_event_id, cc_group.file_name(index))

    for vcs_dir in directory.context.vcs_directories():
        file = vcs_dir.setup_component_tally_data_payload_file
        tally_data = decode_or_error(file, result, vcs_dir.name)
        if tally_data is not None:
            check(tally_data.election_event_id, f"{vcs_dir.name}/{file.name}")

    for vcs_dir in directory.setup.vcs_directories():
        vd_group = vcs_dir.setup_component_verification_data_payload_group
        for index, payload in decode_group(vd_group, result, vcs_dir.name):
            check(payload.election_event_id, f"{vcs_dir.name}/{vd_group.file_name(index)}")
        cs_group = vcs_dir.control_component_code_shares_payload_group
        for index, shares in decode_group(cs_group, result, vcs_dir.name):
            for inner in shares:
                source = f"{vcs_dir.name}/{cs_group.file_name(index)} node {inner.node_id}"
                check(inner.election_event_id, source)


def verify_verification_card_set_ids_consistency(
    directory: VerificationDirectory, context: VerificationContext, result: VerificationResult
) -> None:
    ee_context = decode_or_error(directory.context.election_event_context_payload_file, result)
    if ee_context is None:
        return
    expected = {
        vcs.verification_card_set_id
        for vcs in ee_context.election_event_context.verification_card_set_contexts
    }
    directory_names = {d.name for d in directory.context.vcs_directories()}
    for name in sorted(expected - directory_names):
        _fail(result, f"Verification card set {name} of the context has no directory")
    for name in sorted(directory_names - expected):
        _fail(result, f"Directory {name} is not a verification card set of the context")

    for vcs_dir in directory.context.vcs_directories():
        file = vcs_dir.setup_component_tally_data_payload_file
        tally_data = decode_or_error(file, result, vcs_dir.name)
        if tally_data is not None and tally_data.verification_card_set_id != vcs_dir.name:
            _fail(
                result,
                f"Verification card set id {tally_data.verification_card_set_id} differs from directory",
                f"{vcs_dir.name}/{file.name}",
            )

    for vcs_dir in directory.setup.vcs_directories():
        vd_group = vcs_dir.setup_component_verification_data_payload_group
        for index, payload in decode_group(vd_group, result, vcs_dir.name):
            if payload.verification_card_set_id != vcs_dir.name:
                _fail(
                    result,
                    f"Verification card set id {payload.verification_card_set_id} differs from directory",
                    f"{vcs_dir.name}/{vd_group.file_name(index)}",
                )
        cs_group = vcs_dir.control_component_code_shares_payload_group
        for index, shares in decode_group(cs_group, result, vcs_dir.name):
            for inner in shares:
                if inner.verification_card_set_id != vcs_dir.name:
                    _fail(
                        result,
                        f"Verification card set id {inner.verification_card_set_id} "
                        f"of node {inner.node_id} differs from directory",
                        f"{vcs_dir.name}/{cs_group.file_name(index)}",
                    )


def verify_total_voters_consistency(
    directory: VerificationDirectory, context: VerificationContext, result: VerificationResult
) -> None:
    ee_context = decode_or_error(directory.context.election_event_context_payload_file, result)
    if ee_context is None:
        return
    expected = {
        vcs.verification_card_set_id: vcs.number_of_voting_cards
        for vcs in ee_context.election_event_context.verification_card_set_contexts
    }

    for vcs_dir in directory.context.vcs_directories():
        tally_data = decode_or_error(
            vcs_dir.setup_component_tally_data_payload_file, result, vcs_dir.name
        )
        if tally_data is None or vcs_dir.name not in expected:
            continue
        count = len(tally_data.verification_card_ids)
        if count != expected[vcs_dir.name]:
            _fail(
                result,
                f"Tally data holds {count} verification cards, context expects {expected[vcs_dir.name]}",
                vcs_dir.name,
            )

    for vcs_dir in directory.setup.vcs_directories():
        if vcs_dir.name not in expected:
            continue
        chunks, complete = decode_whole_group(
            vcs_dir.setup_component_verification_data_payload_group, result, vcs_dir.name
        )
        if not complete:
            continue
        count = sum(len(payload.setup_component_verification_data) for _, payload in chunks)
        if count != expected[vcs_dir.name]:
            _fail(
                result,
                f"Verification data holds {count} verification cards, context expects {expected[vcs_dir.name]}",
                vcs_dir.name,
            )


def verify_node_ids_consistency(
    directory: VerificationDirectory, context: VerificationContext, result: VerificationResult
) -> None:
    cc_group = directory.context.control_component_public_keys_payload_group
    file_node_ids: set[int] = set()
    decoded, complete = decode_whole_group(cc_group, result)
    for index, payload in decoded:
        file_node_ids.add(payload.node_id)
        if payload.node_id != index:
            _fail(result, f"Node id {payload.node_id} does not match file name", cc_group.file_name(index))
    if complete and file_node_ids != EXPECTED_NODE_IDS:
        _fail(
            result,
            f"Control component public keys cover nodes {sorted(file_node_ids)}, "
            f"expected {sorted(EXPECTED_NODE_IDS)}",
        )

    public_keys_file = directory.context.setup_component_public_keys_payload_file
    public_keys = decode_or_error(public_keys_file, result)
    if public_keys is not None:
        combined = [
            keys.node_id
            for keys in public_keys.setup_component_public_keys.combined_control_component_public_keys
        ]
        if sorted(combined) != sorted(EXPECTED_NODE_IDS):
            _fail(result, f"Combined keys cover nodes {combined}", public_keys_file.name)

    for vcs_dir in directory.setup.vcs_directories():
        cs_group = vcs_dir.control_component_code_shares_payload_group
        for index, shares in decode_group(cs_group, result, vcs_dir.name):
            node_ids = sorted(inner.node_id for inner in shares)
            if node_ids != sorted(EXPECTED_NODE_IDS):
                _fail(
                    result,
                    f"Code shares cover nodes {node_ids}",
                    f"{vcs_dir.name}/{cs_group.file_name(index)}",
                )


VERIFICATIONS: tuple[VerificationDescriptor, ...] = (
    VerificationDescriptor(
        id="03.01",
        name="VerifyEncryptionGroupConsistency",
        category=VerificationCategory.CONSISTENCY,
        function=verify_encryption_group_consistency,
    ),
    VerificationDescriptor(
        id="03.02",
        name="VerifySetupFileNamesConsistency",
        category=VerificationCategory.CONSISTENCY,
        function=verify_setup_file_names_consistency,
    ),
    VerificationDescriptor(
        id="03.04",
        name="VerifyCCMElectionPublicKeyConsistency",
        category=VerificationCategory.CONSISTENCY,
        function=verify_ccm_election_public_key_consistency,
    ),
    VerificationDescriptor(
        id="03.09",
        name="VerifyElectionEventIdConsistency",
        category=VerificationCategory.CONSISTENCY,
        function=verify_election_event_id_consistency,
    ),
    VerificationDescriptor(
        id="03.10",
        name="VerifyVerificationCardSetIdsConsistency",
        category=VerificationCategory.CONSISTENCY,
        function=verify_verification_card_set_ids_consistency,
    ),
    VerificationDescriptor(
        id="03.13",
        name="VerifyTotalVotersConsistency",
        category=VerificationCategory.CONSISTENCY,
        function=verify_total_voters_consistency,
    ),
    VerificationDescriptor(
        id="03.14",
        name="VerifyNodeIdsConsistency",
        category=VerificationCategory.CONSISTENCY,
        function=verify_node_ids_consistency,
    ),
)
