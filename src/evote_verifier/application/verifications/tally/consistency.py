"""Tally consistency: ballot box ids, election event id, node ids, groups.

The election event context payload is the reference for the election event
id, the encryption group and the set of ballot boxes.
"""

from __future__ import annotations

from typing import Union

from evote_verifier.application.dtos.payloads import (
    ControlComponentBallotBoxPayload,
    ControlComponentShufflePayload,
    TallyComponentShufflePayload,
    TallyComponentVotesPayload,
)
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
from evote_verifier.infrastructure.file_structure.directories import (
    BallotBoxDirectory,
    VerificationDirectory,
)

TallyPayload = Union[
    ControlComponentBallotBoxPayload,
    ControlComponentShufflePayload,
    TallyComponentShufflePayload,
    TallyComponentVotesPayload,
]


def ballot_box_payloads(
    bb_dir: BallotBoxDirectory, result: VerificationResult
) -> list[tuple[str, TallyPayload]]:
    """Decode all payloads of a ballot box as (file name, payload) pairs.

    Unreadable files are recorded as ERROR events and left out.
    """
    payloads: list[tuple[str, TallyPayload]] = []
    for file in (
        bb_dir.tally_component_votes_payload_file,
        bb_dir.tally_component_shuffle_payload_file,
    ):
        payload = decode_or_error(file, result)
        if payload is not None:
            payloads.append((file.name, payload))
    for group in (
        bb_dir.control_component_ballot_box_payload_group,
        bb_dir.control_component_shuffle_payload_group,
    ):
        for index, payload in decode_group(group, result):
            payloads.append((group.file_name(index), payload))
    return payloads


def verify_ballot_box_ids_consistency(
    directory: VerificationDirectory, context: VerificationContext, result: VerificationResult
) -> None:
    ee_context = decode_or_error(directory.context.election_event_context_payload_file, result)
    if ee_context is None:
        return
    expected = {
        vcs.ballot_box_id
        for vcs in ee_context.election_event_context.verification_card_set_contexts
    }
    found = {bb_dir.name for bb_dir in directory.tally.bb_directories()}
    for name in sorted(found - expected):
        result.push(
            VerificationEvent.failure(f"Ballot box {name} is not a ballot box of the election event")
        )
    for name in sorted(expected - found):
        result.push(VerificationEvent.failure(f"Ballot box {name} has no directory"))


def verify_file_name_ballot_box_ids_consistency(
    directory: VerificationDirectory, context: VerificationContext, result: VerificationResult
) -> None:
    for bb_dir in directory.tally.bb_directories():
        bb_result = VerificationResult()
        for source, payload in ballot_box_payloads(bb_dir, bb_result):
            if payload.ballot_box_id != bb_dir.name:
                bb_result.push_with_context(
                    VerificationEvent.failure(
                        f"Ballot box id {payload.ballot_box_id} differs from directory name"
                    ),
                    source,
                )
        result.append_with_context(bb_result, bb_dir.name)


def verify_election_event_id_consistency(
    directory: VerificationDirectory, context: VerificationContext, result: VerificationResult
) -> None:
    ee_context = decode_or_error(directory.context.election_event_context_payload_file, result)
    if ee_context is None:
        return
    expected = ee_context.election_event_id
    for bb_dir in directory.tally.bb_directories():
        bb_result = VerificationResult()
        for source, payload in ballot_box_payloads(bb_dir, bb_result):
            if payload.election_event_id != expected:
                bb_result.push_with_context(
                    VerificationEvent.failure(
                        f"Election event id {payload.election_event_id} differs from {expected}"
                    ),
                    source,
                )
            if isinstance(payload, ControlComponentBallotBoxPayload):
                for position, vote in enumerate(payload.confirmed_encrypted_votes):
                    if vote.context_ids.election_event_id != expected:
                        bb_result.push_with_context(
                            VerificationEvent.failure(
                                f"Election event id of confirmed vote {position} differs from {expected}"
                            ),
                            source,
                        )
        result.append_with_context(bb_result, bb_dir.name)


def verify_node_ids_consistency(
    directory: VerificationDirectory, context: VerificationContext, result: VerificationResult
) -> None:
    expected = sorted(CONTROL_COMPONENT_NODE_IDS)
    for bb_dir in directory.tally.bb_directories():
        bb_result = VerificationResult()
        for group in (
            bb_dir.control_component_ballot_box_payload_group,
            bb_dir.control_component_shuffle_payload_group,
        ):
            node_ids = []
            decoded, complete = decode_whole_group(group, bb_result)
            for index, payload in decoded:
                node_ids.append(payload.node_id)
                if payload.node_id != index:
                    bb_result.push_with_context(
                        VerificationEvent.failure(
                            f"Node id {payload.node_id} does not match file name"
                        ),
                        group.file_name(index),
                    )
            if complete and sorted(node_ids) != expected:
                bb_result.push(
                    VerificationEvent.failure(
                        f"{group.file_name_pattern} covers nodes {sorted(node_ids)}, expected {expected}"
                    )
                )
        result.append_with_context(bb_result, bb_dir.name)


def verify_encryption_group_consistency(
    directory: VerificationDirectory, context: VerificationContext, result: VerificationResult
) -> None:
    ee_context = decode_or_error(directory.context.election_event_context_payload_file, result)
    if ee_context is None:
        return
    reference = ee_context.encryption_group
    for bb_dir in directory.tally.bb_directories():
        bb_result = VerificationResult()
        for source, payload in ballot_box_payloads(bb_dir, bb_result):
            if payload.encryption_group != reference:
                bb_result.push_with_context(
                    VerificationEvent.failure(
                        "Encryption group differs from the election event context"
                    ),
                    source,
                )
        result.append_with_context(bb_result, bb_dir.name)


VERIFICATIONS: tuple[VerificationDescriptor, ...] = (
    VerificationDescriptor(
        id="08.05",
        name="VerifyBallotBoxIdsConsistency",
        category=VerificationCategory.CONSISTENCY,
        function=verify_ballot_box_ids_consistency,
    ),
    VerificationDescriptor(
        id="08.06",
        name="VerifyFileNameBallotBoxIdsConsistency",
        category=VerificationCategory.CONSISTENCY,
        function=verify_file_name_ballot_box_ids_consistency,
    ),
    VerificationDescriptor(
        id="08.08",
        name="VerifyElectionEventIdConsistency",
        category=VerificationCategory.CONSISTENCY,
        function=verify_election_event_id_consistency,
    ),
    VerificationDescriptor(
        id="08.09",
        name="VerifyNodeIdsConsistency",
        category=VerificationCategory.CONSISTENCY,
        function=verify_node_ids_consistency,
    ),
    VerificationDescriptor(
        id="08.11",
        name="VerifyEncryptionGroupConsistency",
        category=VerificationCategory.CONSISTENCY,
        function=verify_encryption_group_consistency,
    ),
)
