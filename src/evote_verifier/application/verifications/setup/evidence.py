"""Setup evidence: domain parameters, small primes, Schnorr proofs.

05.01 and 05.02 recompute values from the seed and compare. 05.04 hands each
Schnorr proof to the configured proof verifier; a rejected proof is a
FAILURE, a missing verifier an ERROR.
"""

from __future__ import annotations

from collections.abc import Sequence

from evote_verifier.application.dtos.payloads import EncryptionGroup, SchnorrProof
from evote_verifier.application.ports.proof_verifier import ProofVerifierProtocol
from evote_verifier.application.verifications.common import (
    decode_group,
    decode_or_error,
    proof_outcome,
)
from evote_verifier.application.verifications.context import VerificationContext
from evote_verifier.application.verifications.suite import VerificationDescriptor
from evote_verifier.domain.errors.number_theory import NumberTheoryError
from evote_verifier.domain.models.verification_meta_data import VerificationCategory
from evote_verifier.domain.models.verification_result import (
    VerificationEvent,
    VerificationResult,
)
from evote_verifier.domain.services.elgamal import (
    derive_parameters,
    small_prime_subgroup_members,
)
from evote_verifier.infrastructure.file_structure.directories import VerificationDirectory

CCR_KEY_GENERATION_LABEL = "GenKeysCCR"
CCM_KEY_GENERATION_LABEL = "SetupTallyCCM"
ELECTORAL_BOARD_LABEL = "SetupTallyEB"


def verify_encryption_parameters(
    directory: VerificationDirectory, context: VerificationContext, result: VerificationResult
) -> None:
    ee_context = decode_or_error(directory.context.election_event_context_payload_file, result)
    if ee_context is None:
        return
    try:
        derived = derive_parameters(ee_context.seed, context.config.group_bit_length)
    except NumberTheoryError as exc:
        result.push(VerificationEvent.error(f"Cannot derive parameters from seed: {exc}"))
        return
    group = ee_context.encryption_group
    for name, expected, found in (
        ("p", derived.p, group.p),
        ("q", derived.q, group.q),
        ("g", derived.g, group.g),
    ):
        if expected != found:
            result.push(
                VerificationEvent.failure(
                    f"Encryption parameter {name} differs from the value derived from the seed"
                )
            )


def verify_small_prime_group_members(
    directory: VerificationDirectory, context: VerificationContext, result: VerificationResult
) -> None:
    ee_context = decode_or_error(directory.context.election_event_context_payload_file, result)
    if ee_context is None:
        return
    try:
        expected = small_prime_subgroup_members(
            ee_context.encryption_group.p, len(ee_context.small_primes)
        )
    except NumberTheoryError as exc:
        result.push(VerificationEvent.error(f"Cannot compute small prime group members: {exc}"))
        return
    if expected != list(ee_context.small_primes):
        result.push(
            VerificationEvent.failure(
                f"Small primes {ee_context.small_primes} differ from the expected {expected}"
            )
        )


def _verify_proofs(
    verifier: ProofVerifierProtocol,
    group: EncryptionGroup,
    proofs: Sequence[SchnorrProof],
    statements: Sequence[int],
    auxiliary_data: Sequence[str],
    label: str,
    result: VerificationResult,
) -> None:
    if len(proofs) != len(statements):
        result.push(
            VerificationEvent.failure(
                f"{len(proofs)} Schnorr proofs for {len(statements)} {label} elements"
            )
        )
        return
    for position, (proof, statement) in enumerate(zip(proofs, statements)):
        subject = f"Schnorr proof of {label}[{position}]"
        valid = proof_outcome(
            subject,
            result,
            verifier.verify_schnorr_proof,
            group,
            proof,
            statement,
            auxiliary_data,
        )
        if valid is False:
            result.push(VerificationEvent.failure(f"{subject} is invalid"))


def verify_schnorr_proofs(
    directory: VerificationDirectory, context: VerificationContext, result: VerificationResult
) -> None:
    verifier = context.require_proof_verifier()

    cc_group = directory.context.control_component_public_keys_payload_group
    for index, payload in decode_group(cc_group, result):
        keys = payload.control_component_public_keys
        eeid = payload.election_event_id
        file_result = VerificationResult()
        _verify_proofs(
            verifier,
            payload.encryption_group,
            keys.ccrj_schnorr_proofs,
            keys.ccrj_choice_return_codes_encryption_public_key,
            (eeid, CCR_KEY_GENERATION_LABEL),
            "CCR choice return codes encryption public key",
            file_result,
        )
        _verify_proofs(
            verifier,
            payload.encryption_group,
            keys.ccmj_schnorr_proofs,
            keys.ccmj_election_public_key,
            (eeid, CCM_KEY_GENERATION_LABEL, str(keys.node_id)),
            "CCM election public key",
            file_result,
        )
        result.append_with_context(file_result, cc_group.file_name(index))

    public_keys_file = directory.context.setup_component_public_keys_payload_file
    public_keys = decode_or_error(public_keys_file, result)
    if public_keys is not None:
        keys = public_keys.setup_component_public_keys
        file_result = VerificationResult()
        _verify_proofs(
            verifier,
            public_keys.encryption_group,
            keys.electoral_board_schnorr_proofs,
            keys.electoral_board_public_key,
            (public_keys.election_event_id, ELECTORAL_BOARD_LABEL),
            "electoral board public key",
            file_result,
        )
        result.append_with_context(file_result, public_keys_file.name)


VERIFICATIONS: tuple[VerificationDescriptor, ...] = (
    VerificationDescriptor(
        id="05.01",
        name="VerifyEncryptionParameters",
        category=VerificationCategory.EVIDENCE,
        function=verify_encryption_parameters,
    ),
    VerificationDescriptor(
        id="05.02",
        name="VerifySmallPrimeGroupMembers",
        category=VerificationCategory.EVIDENCE,
        function=verify_small_prime_group_members,
    ),
    VerificationDescriptor(
        id="05.04",
        name="VerifySchnorrProofs",
        category=VerificationCategory.EVIDENCE,
        function=verify_schnorr_proofs,
    ),
)
