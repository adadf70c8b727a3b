"""Conversion of payload models into hashable value trees.

Each signed payload type has exactly one registered conversion returning its
SignedContent: the hashable form of the payload (fields in declaration
order, signature excluded), the signature context, and the authority whose
certificate verifies it. Conversions know nothing about the hash algorithm.

Optional fields that are absent convert to the no-value marker, booleans to
the strings "true" and "false".
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from functools import singledispatch
from typing import Any, Optional

from evote_verifier.application.dtos.payloads import (
    Ciphertext,
    ConfirmedEncryptedVote,
    ControlComponentBallotBoxPayload,
    ControlComponentCodeShare,
    ControlComponentCodeSharesPayloadInner,
    ControlComponentPublicKeys,
    ControlComponentPublicKeysPayload,
    ControlComponentShufflePayload,
    DecryptionProof,
    ElectionEventContext,
    ElectionEventContextPayload,
    EncryptionGroup,
    ExponentiationProof,
    HadamardArgument,
    MultiExponentiationArgument,
    PlaintextEqualityProof,
    ProductArgument,
    SchnorrProof,
    SetupComponentPublicKeys,
    SetupComponentPublicKeysPayload,
    SetupComponentTallyDataPayload,
    SetupComponentVerificationData,
    SetupComponentVerificationDataPayload,
    ShuffleArgument,
    SingleValueProductArgument,
    TallyComponentShufflePayload,
    TallyComponentVotesPayload,
    VerifiableDecryptions,
    VerifiablePlaintextDecryption,
    VerifiableShuffle,
    VerificationCardSetContext,
    ZeroArgument,
)
from evote_verifier.domain.models.certificate_authority import CertificateAuthority
from evote_verifier.domain.models.hashable import (
    NO_VALUE,
    HashableInteger,
    HashableSequence,
    HashableString,
    HashableValue,
    context_value,
    integer_sequence,
    string_sequence,
)


@dataclass(frozen=True)
class SignedContent:
    """What a signature over a payload covers, and who signed it.

    Attributes:
        message: Hashable form of the payload without its signature.
        context: Signature context binding the payload to its role.
        authority: Authority whose certificate verifies the signature.
    """

    message: HashableValue
    context: HashableValue
    authority: CertificateAuthority


def _seq(*elements: HashableValue) -> HashableSequence:
    return HashableSequence(elements)


def _int(value: int) -> HashableInteger:
    return HashableInteger(value)


def _str(value: str) -> HashableString:
    return HashableString(value)


def _bool(value: bool) -> HashableString:
    return HashableString("true" if value else "false")


def _optional_int(value: Optional[int]) -> HashableValue:
    return NO_VALUE if value is None else HashableInteger(value)


def _each(values: Iterable[Any], convert: Callable[[Any], HashableValue]) -> HashableSequence:
    return HashableSequence(tuple(convert(value) for value in values))


# Shared building blocks


def encryption_group_hashable(group: EncryptionGroup) -> HashableSequence:
    return integer_sequence((group.p, group.q, group.g))


def ciphertext_hashable(ciphertext: Ciphertext) -> HashableSequence:
    return integer_sequence((ciphertext.gamma, *ciphertext.phis))


def schnorr_proof_hashable(proof: SchnorrProof) -> HashableSequence:
    return integer_sequence((proof.e, proof.z))


def exponentiation_proof_hashable(proof: ExponentiationProof) -> HashableSequence:
    return integer_sequence((proof.e, proof.z))


def plaintext_equality_proof_hashable(proof: PlaintextEqualityProof) -> HashableSequence:
    return _seq(_int(proof.e), integer_sequence(proof.z))


def decryption_proof_hashable(proof: DecryptionProof) -> HashableSequence:
    return _seq(_int(proof.e), integer_sequence(proof.z))


def _zero_argument_hashable(argument: ZeroArgument) -> HashableSequence:
    return _seq(
        _int(argument.c_a_0),
        _int(argument.c_b_m),
        integer_sequence(argument.c_d),
        integer_sequence(argument.a_prime),
        integer_sequence(argument.b_prime),
        _int(argument.r_prime),
        _int(argument.s_prime),
        _int(argument.t_prime),
    )


def _hadamard_argument_hashable(argument: Optional[HadamardArgument]) -> HashableValue:
    if argument is None:
        return NO_VALUE
    return _seq(
        integer_sequence(argument.c_upper_b),
        _zero_argument_hashable(argument.zero_argument),
    )


def _single_value_product_argument_hashable(
    argument: SingleValueProductArgument,
) -> HashableSequence:
    return _seq(
        _int(argument.c_d),
        _int(argument.c_lower_delta),
        _int(argument.c_upper_delta),
        integer_sequence(argument.a_tilde),
        integer_sequence(argument.b_tilde),
        _int(argument.r_tilde),
        _int(argument.s_tilde),
    )


def _product_argument_hashable(argument: ProductArgument) -> HashableSequence:
    return _seq(
        _optional_int(argument.c_b),
        _hadamard_argument_hashable(argument.hadamard_argument),
        _single_value_product_argument_hashable(argument.single_value_product_argument),
    )


def _multi_exponentiation_argument_hashable(
    argument: MultiExponentiationArgument,
) -> HashableSequence:
    return _seq(
        _int(argument.c_a_0),
        integer_sequence(argument.c_b),
        _each(argument.e, ciphertext_hashable),
        integer_sequence(argument.a),
        _int(argument.r),
        _int(argument.b),
        _int(argument.s),
        _int(argument.tau),
    )


def shuffle_argument_hashable(argument: ShuffleArgument) -> HashableSequence:
    return _seq(
        integer_sequence(argument.c_a),
        integer_sequence(argument.c_b),
        _product_argument_hashable(argument.product_argument),
        _multi_exponentiation_argument_hashable(argument.multi_exponentiation_argument),
    )


def _verifiable_shuffle_hashable(shuffle: VerifiableShuffle) -> HashableSequence:
    return _seq(
        _each(shuffle.shuffled_ciphertexts, ciphertext_hashable),
        shuffle_argument_hashable(shuffle.shuffle_argument),
    )


def _verifiable_decryptions_hashable(decryptions: VerifiableDecryptions) -> HashableSequence:
    return _seq(
        _each(decryptions.ciphertexts, ciphertext_hashable),
        _each(decryptions.decryption_proofs, decryption_proof_hashable),
    )


def _verifiable_plaintext_decryption_hashable(
    decryption: VerifiablePlaintextDecryption,
) -> HashableSequence:
    return _seq(
        _each(decryption.decrypted_votes, integer_sequence),
        _each(decryption.decryption_proofs, decryption_proof_hashable),
    )


# Context payload parts


def _verification_card_set_context_hashable(
    context: VerificationCardSetContext,
) -> HashableSequence:
    return _seq(
        _str(context.verification_card_set_id),
        _str(context.verification_card_set_alias),
        _str(context.verification_card_set_description),
        _str(context.ballot_box_id),
        _str(context.ballot_box_start_time),
        _str(context.ballot_box_finish_time),
        _bool(context.test_ballot_box),
        _int(context.number_of_voting_cards),
        _int(context.grace_period),
    )


def _election_event_context_hashable(context: ElectionEventContext) -> HashableSequence:
    return _seq(
        _str(context.election_event_id),
        _str(context.election_event_alias),
        _str(context.election_event_description),
        _each(context.verification_card_set_contexts, _verification_card_set_context_hashable),
        _str(context.start_time),
        _str(context.finish_time),
        _int(context.max_number_of_voting_options),
        _int(context.max_number_of_selections),
        _int(context.max_number_of_write_ins_plus_one),
    )


def _control_component_public_keys_hashable(
    keys: ControlComponentPublicKeys,
) -> HashableSequence:
    return _seq(
        _int(keys.node_id),
        integer_sequence(keys.ccrj_choice_return_codes_encryption_public_key),
        _each(keys.ccrj_schnorr_proofs, schnorr_proof_hashable),
        integer_sequence(keys.ccmj_election_public_key),
        _each(keys.ccmj_schnorr_proofs, schnorr_proof_hashable),
    )


def _setup_component_public_keys_hashable(keys: SetupComponentPublicKeys) -> HashableSequence:
    return _seq(
        _each(keys.combined_control_component_public_keys, _control_component_public_keys_hashable),
        integer_sequence(keys.electoral_board_public_key),
        _each(keys.electoral_board_schnorr_proofs, schnorr_proof_hashable),
        integer_sequence(keys.election_public_key),
        integer_sequence(keys.choice_return_codes_encryption_public_key),
    )


def _setup_component_verification_data_hashable(
    data: SetupComponentVerificationData,
) -> HashableSequence:
    return _seq(
        _str(data.verification_card_id),
        ciphertext_hashable(data.encrypted_hashed_squared_confirmation_key),
        ciphertext_hashable(data.encrypted_hashed_squared_partial_choice_return_codes),
    )


def _control_component_code_share_hashable(share: ControlComponentCodeShare) -> HashableSequence:
    return _seq(
        _str(share.verification_card_id),
        integer_sequence(share.voter_choice_return_code_generation_public_key),
        integer_sequence(share.voter_vote_cast_return_code_generation_public_key),
        ciphertext_hashable(share.exponentiated_encrypted_partial_choice_return_codes),
        exponentiation_proof_hashable(
            share.encrypted_partial_choice_return_code_exponentiation_proof
        ),
        ciphertext_hashable(share.exponentiated_encrypted_confirmation_key),
        exponentiation_proof_hashable(share.encrypted_confirmation_key_exponentiation_proof),
    )


def _confirmed_encrypted_vote_hashable(vote: ConfirmedEncryptedVote) -> HashableSequence:
    return _seq(
        string_sequence(
            (
                vote.context_ids.election_event_id,
                vote.context_ids.verification_card_set_id,
                vote.context_ids.verification_card_id,
            )
        ),
        ciphertext_hashable(vote.encrypted_vote),
        ciphertext_hashable(vote.exponentiated_encrypted_vote),
        ciphertext_hashable(vote.encrypted_partial_choice_return_codes),
        exponentiation_proof_hashable(vote.exponentiation_proof),
        plaintext_equality_proof_hashable(vote.plaintext_equality_proof),
    )


# Signed payloads


@singledispatch
def signed_content(payload: object) -> SignedContent:
    """Return the signed content of a payload.

    Raises:
        TypeError: If the payload type has no registered conversion.
        ValueError: If a control component payload carries an invalid node id.
    """
    raise TypeError(f"No hashable conversion for {type(payload).__name__}")


@signed_content.register(ElectionEventContextPayload)
def _(payload: ElectionEventContextPayload) -> SignedContent:
    return SignedContent(
        message=_seq(
            encryption_group_hashable(payload.encryption_group),
            _str(payload.seed),
            integer_sequence(payload.small_primes),
            _election_event_context_hashable(payload.election_event_context),
        ),
        context=context_value(
            (_str("election event context"), _str(payload.election_event_id))
        ),
        authority=CertificateAuthority.SDM_CONFIG,
    )


@signed_content.register(SetupComponentPublicKeysPayload)
def _(payload: SetupComponentPublicKeysPayload) -> SignedContent:
    return SignedContent(
        message=_seq(
            encryption_group_hashable(payload.encryption_group),
            _str(payload.election_event_id),
            _setup_component_public_keys_hashable(payload.setup_component_public_keys),
        ),
        context=context_value(
            (_str("public keys"), _str("setup"), _str(payload.election_event_id))
        ),
        authority=CertificateAuthority.SDM_CONFIG,
    )


@signed_content.register(ControlComponentPublicKeysPayload)
def _(payload: ControlComponentPublicKeysPayload) -> SignedContent:
    return SignedContent(
        message=_seq(
            encryption_group_hashable(payload.encryption_group),
            _str(payload.election_event_id),
            _control_component_public_keys_hashable(payload.control_component_public_keys),
        ),
        context=context_value(
            (_str("OnlineCC keys"), _int(payload.node_id), _str(payload.election_event_id))
        ),
        authority=CertificateAuthority.from_node_id(payload.node_id),
    )


@signed_content.register(SetupComponentTallyDataPayload)
def _(payload: SetupComponentTallyDataPayload) -> SignedContent:
    return SignedContent(
        message=_seq(
            _str(payload.election_event_id),
            _str(payload.verification_card_set_id),
            _str(payload.ballot_box_default_title),
            encryption_group_hashable(payload.encryption_group),
            string_sequence(payload.verification_card_ids),
            _each(payload.verification_card_public_keys, integer_sequence),
        ),
        context=context_value(
            (
                _str("tally data"),
                _str(payload.election_event_id),
                _str(payload.verification_card_set_id),
            )
        ),
        authority=CertificateAuthority.SDM_CONFIG,
    )


@signed_content.register(SetupComponentVerificationDataPayload)
def _(payload: SetupComponentVerificationDataPayload) -> SignedContent:
    return SignedContent(
        message=_seq(
            _str(payload.election_event_id),
            _str(payload.verification_card_set_id),
            string_sequence(payload.partial_choice_return_codes_allow_list),
            _int(payload.chunk_id),
            encryption_group_hashable(payload.encryption_group),
            _each(
                payload.setup_component_verification_data,
                _setup_component_verification_data_hashable,
            ),
        ),
        context=context_value(
            (
                _str("verification data"),
                _str(payload.election_event_id),
                _str(payload.verification_card_set_id),
            )
        ),
        authority=CertificateAuthority.SDM_CONFIG,
    )


@signed_content.register(ControlComponentCodeSharesPayloadInner)
def _(payload: ControlComponentCodeSharesPayloadInner) -> SignedContent:
    return SignedContent(
        message=_seq(
            _str(payload.election_event_id),
            _str(payload.verification_card_set_id),
            _int(payload.chunk_id),
            _each(payload.control_component_code_shares, _control_component_code_share_hashable),
            encryption_group_hashable(payload.encryption_group),
            _int(payload.node_id),
        ),
        context=context_value(
            (
                _str("encrypted code shares"),
                _int(payload.node_id),
                _str(payload.election_event_id),
                _str(payload.verification_card_set_id),
            )
        ),
        authority=CertificateAuthority.from_node_id(payload.node_id),
    )


@signed_content.register(ControlComponentBallotBoxPayload)
def _(payload: ControlComponentBallotBoxPayload) -> SignedContent:
    return SignedContent(
        message=_seq(
            encryption_group_hashable(payload.encryption_group),
            _str(payload.election_event_id),
            _str(payload.ballot_box_id),
            _int(payload.node_id),
            _each(payload.confirmed_encrypted_votes, _confirmed_encrypted_vote_hashable),
        ),
        context=context_value(
            (
                _str("ballotbox"),
                _int(payload.node_id),
                _str(payload.election_event_id),
                _str(payload.ballot_box_id),
            )
        ),
        authority=CertificateAuthority.from_node_id(payload.node_id),
    )


@signed_content.register(ControlComponentShufflePayload)
def _(payload: ControlComponentShufflePayload) -> SignedContent:
    return SignedContent(
        message=_seq(
            encryption_group_hashable(payload.encryption_group),
            _str(payload.election_event_id),
            _str(payload.ballot_box_id),
            _int(payload.node_id),
            _verifiable_shuffle_hashable(payload.verifiable_shuffle),
            _verifiable_decryptions_hashable(payload.verifiable_decryptions),
        ),
        context=context_value(
            (
                _str("shuffle"),
                _int(payload.node_id),
                _str(payload.election_event_id),
                _str(payload.ballot_box_id),
            )
        ),
        authority=CertificateAuthority.from_node_id(payload.node_id),
    )


@signed_content.register(TallyComponentShufflePayload)
def _(payload: TallyComponentShufflePayload) -> SignedContent:
    return SignedContent(
        message=_seq(
            encryption_group_hashable(payload.encryption_group),
            _str(payload.election_event_id),
            _str(payload.ballot_box_id),
            _verifiable_shuffle_hashable(payload.verifiable_shuffle),
            _verifiable_plaintext_decryption_hashable(payload.verifiable_plaintext_decryption),
        ),
        context=context_value(
            (
                _str("shuffle"),
                _str("offline"),
                _str(payload.election_event_id),
                _str(payload.ballot_box_id),
            )
        ),
        authority=CertificateAuthority.SDM_TALLY,
    )


@signed_content.register(TallyComponentVotesPayload)
def _(payload: TallyComponentVotesPayload) -> SignedContent:
    return SignedContent(
        message=_seq(
            encryption_group_hashable(payload.encryption_group),
            _str(payload.election_event_id),
            _str(payload.ballot_id),
            _str(payload.ballot_box_id),
            _each(payload.decrypted_votes, integer_sequence),
            _each(payload.decoded_votes, string_sequence),
            _each(payload.decoded_write_in_votes, string_sequence),
        ),
        context=context_value(
            (
                _str("decoded votes"),
                _str(payload.election_event_id),
                _str(payload.ballot_box_id),
            )
        ),
        authority=CertificateAuthority.SDM_TALLY,
    )


def hashable_of(payload: object) -> HashableValue:
    """Hashable form of a signed payload, without its signature."""
    return signed_content(payload).message
