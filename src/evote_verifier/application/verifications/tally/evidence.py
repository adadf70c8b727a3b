"""Tally evidence: the mix-net of the online and offline control components.

10.01 walks the chain of the four online control components of every ballot
box: node 1 shuffles the confirmed votes, every node partially decrypts its
shuffled output, and node j + 1 shuffles node j's partial decryptions.

10.02 checks the offline tally component: it shuffles node 4's output and
decrypts it to plaintext, and the decrypted votes it publishes must be the
ones in the tally component votes payload.

Proof mathematics is delegated to the configured proof verifier.
"""

from __future__ import annotations

from evote_verifier.application.dtos.payloads import (
    Ciphertext,
    ControlComponentShufflePayload,
    SetupComponentPublicKeysPayload,
)
from evote_verifier.application.ports.proof_verifier import ProofVerifierProtocol
from evote_verifier.application.verifications.common import (
    decode_group,
    decode_or_error,
    proof_outcome,
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

ONLINE_MIX_LABEL = "MixDecOnline"
OFFLINE_MIX_LABEL = "MixDecOffline"
LAST_ONLINE_NODE = CONTROL_COMPONENT_NODE_IDS[-1]


def _shuffle_payloads(
    bb_dir: BallotBoxDirectory, result: VerificationResult
) -> dict[int, ControlComponentShufflePayload]:
    group = bb_dir.control_component_shuffle_payload_group
    return {payload.node_id: payload for _, payload in decode_group(group, result)}


def _verify_online_ballot_box(
    bb_dir: BallotBoxDirectory,
    public_keys: SetupComponentPublicKeysPayload,
    verifier: ProofVerifierProtocol,
    result: VerificationResult,
) -> None:
    ballot_boxes = dict(decode_group(bb_dir.control_component_ballot_box_payload_group, result))
    first = ballot_boxes.get(CONTROL_COMPONENT_NODE_IDS[0])
    if first is None:
        result.push(VerificationEvent.error("No ballot box payload of node 1"))
        return
    for node_id, payload in sorted(ballot_boxes.items()):
        if payload.confirmed_encrypted_votes != first.confirmed_encrypted_votes:
            result.push(
                VerificationEvent.failure(
                    f"Confirmed votes of node {node_id} differ from those of node 1"
                )
            )

    shuffles = _shuffle_payloads(bb_dir, result)
    ccm_keys = {
        keys.node_id: keys.ccmj_election_public_key
        for keys in public_keys.setup_component_public_keys.combined_control_component_public_keys
    }
    election_public_key = public_keys.setup_component_public_keys.election_public_key

    ciphertexts: list[Ciphertext] = [vote.encrypted_vote for vote in first.confirmed_encrypted_votes]
    for node_id in CONTROL_COMPONENT_NODE_IDS:
        shuffle = shuffles.get(node_id)
        if shuffle is None:
            result.push(VerificationEvent.error(f"No shuffle payload of node {node_id}"))
            return
        if node_id not in ccm_keys:
            result.push(VerificationEvent.error(f"No CCM election public key of node {node_id}"))
            return
        shuffled = shuffle.verifiable_shuffle.shuffled_ciphertexts
        decryptions = shuffle.verifiable_decryptions
        if len(shuffled) != len(ciphertexts):
            result.push(
                VerificationEvent.failure(
                    f"Node {node_id} shuffled {len(shuffled)} ciphertexts, expected {len(ciphertexts)}"
                )
            )
        elif (
            proof_outcome(
                f"Shuffle proof of node {node_id}",
                result,
                verifier.verify_shuffle,
                shuffle.encryption_group,
                ciphertexts,
                shuffled,
                shuffle.verifiable_shuffle.shuffle_argument,
                election_public_key,
            )
            is False
        ):
            result.push(VerificationEvent.failure(f"Shuffle proof of node {node_id} is invalid"))
        decrypted = proof_outcome(
            f"Decryption proofs of node {node_id}",
            result,
            verifier.verify_decryptions,
            shuffle.encryption_group,
            shuffled,
            decryptions.ciphertexts,
            decryptions.decryption_proofs,
            ccm_keys[node_id],
            (shuffle.election_event_id, shuffle.ballot_box_id, ONLINE_MIX_LABEL, str(node_id)),
        )
        if decrypted is False:
            result.push(VerificationEvent.failure(f"Decryption proofs of node {node_id} are invalid"))
        ciphertexts = list(decryptions.ciphertexts)


def verify_online_control_components(
    directory: VerificationDirectory, context: VerificationContext, result: VerificationResult
) -> None:
    verifier = context.require_proof_verifier()
    public_keys = decode_or_error(directory.context.setup_component_public_keys_payload_file, result)
    if public_keys is None:
        return
    for bb_dir in directory.tally.bb_directories():
        bb_result = VerificationResult()
        _verify_online_ballot_box(bb_dir, public_keys, verifier, bb_result)
        result.append_with_context(bb_result, bb_dir.name)


def _verify_offline_ballot_box(
    bb_dir: BallotBoxDirectory,
    public_keys: SetupComponentPublicKeysPayload,
    verifier: ProofVerifierProtocol,
    result: VerificationResult,
) -> None:
    last_online = _shuffle_payloads(bb_dir, result).get(LAST_ONLINE_NODE)
    if last_online is None:
        result.push(VerificationEvent.error(f"No shuffle payload of node {LAST_ONLINE_NODE}"))
        return
    tally_shuffle = decode_or_error(bb_dir.tally_component_shuffle_payload_file, result)
    votes = decode_or_error(bb_dir.tally_component_votes_payload_file, result)
    if tally_shuffle is None:
        return

    electoral_board_key = public_keys.setup_component_public_keys.electoral_board_public_key
    ciphertexts = last_online.verifiable_decryptions.ciphertexts
    shuffled = tally_shuffle.verifiable_shuffle.shuffled_ciphertexts
    decryption = tally_shuffle.verifiable_plaintext_decryption

    shuffle_valid = proof_outcome(
        "Shuffle proof of the tally component",
        result,
        verifier.verify_shuffle,
        tally_shuffle.encryption_group,
        ciphertexts,
        shuffled,
        tally_shuffle.verifiable_shuffle.shuffle_argument,
        electoral_board_key,
    )
    if shuffle_valid is False:
        result.push(VerificationEvent.failure("Shuffle proof of the tally component is invalid"))
    decryption_valid = proof_outcome(
        "Decryption proofs of the tally component",
        result,
        verifier.verify_plaintext_decryptions,
        tally_shuffle.encryption_group,
        shuffled,
        decryption.decrypted_votes,
        decryption.decryption_proofs,
        electoral_board_key,
        (tally_shuffle.election_event_id, tally_shuffle.ballot_box_id, OFFLINE_MIX_LABEL),
    )
    if decryption_valid is False:
        result.push(VerificationEvent.failure("Decryption proofs of the tally component are invalid"))

    if votes is not None and votes.decrypted_votes != decryption.decrypted_votes:
        result.push(
            VerificationEvent.failure(
                "Decrypted votes differ between tally component shuffle and votes payloads"
            )
        )


def verify_tally_control_component(
    directory: VerificationDirectory, context: VerificationContext, result: VerificationResult
) -> None:
    verifier = context.require_proof_verifier()
    public_keys = decode_or_error(directory.context.setup_component_public_keys_payload_file, result)
    if public_keys is None:
        return
    for bb_dir in directory.tally.bb_directories():
        bb_result = VerificationResult()
        _verify_offline_ballot_box(bb_dir, public_keys, verifier, bb_result)
        result.append_with_context(bb_result, bb_dir.name)


VERIFICATIONS: tuple[VerificationDescriptor, ...] = (
    VerificationDescriptor(
        id="10.01",
        name="VerifyOnlineControlComponents",
        category=VerificationCategory.EVIDENCE,
        function=verify_online_control_components,
    ),
    VerificationDescriptor(
        id="10.02",
        name="VerifyTallyControlComponent",
        category=VerificationCategory.EVIDENCE,
        function=verify_tally_control_component,
    ),
)
