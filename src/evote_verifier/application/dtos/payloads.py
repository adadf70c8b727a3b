"""Payload models for the context, setup and tally datasets.

Payloads are JSON documents with camelCase field names. Large integers
(group elements, exponents, proof values) are transported as base64 of
their big-endian bytes; small integers (node ids, counts, chunk ids) and
the small primes are plain JSON numbers.

Each signed payload carries a `signature` whose contents are base64. The
signature is excluded from the hashable form of the payload.
"""

from __future__ import annotations

import base64
import binascii
from collections.abc import Iterator
from typing import Annotated, Optional

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    PlainSerializer,
    RootModel,
)
from pydantic.alias_generators import to_camel

from evote_verifier.domain.services.recursive_hash import integer_to_bytes


def _decode_base64_integer(value: object) -> object:
    if isinstance(value, str):
        try:
            return int.from_bytes(base64.b64decode(value, validate=True), "big")
        except (binascii.Error, ValueError) as exc:
            raise ValueError(f"invalid base64 integer {value!r}") from exc
    return value


def _encode_base64_integer(value: int) -> str:
    return base64.b64encode(integer_to_bytes(value)).decode("ascii")


def _decode_base64_bytes(value: object) -> object:
    if isinstance(value, str):
        try:
            return base64.b64decode(value, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ValueError("invalid base64 content") from exc
    return value


def _encode_base64_bytes(value: bytes) -> str:
    return base64.b64encode(value).decode("ascii")


Base64Int = Annotated[
    int,
    BeforeValidator(_decode_base64_integer),
    Field(ge=0),
    PlainSerializer(_encode_base64_integer, return_type=str, when_used="json"),
]

Base64Bytes = Annotated[
    bytes,
    BeforeValidator(_decode_base64_bytes),
    PlainSerializer(_encode_base64_bytes, return_type=str, when_used="json"),
]


class PayloadModel(BaseModel):
    """Base for all payload models (camelCase aliases, immutable)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


# Shared building blocks


class EncryptionGroup(PayloadModel):
    """ElGamal group (p, q, g) as transported in every payload."""

    p: Base64Int
    q: Base64Int
    g: Base64Int


class Signature(PayloadModel):
    signature_contents: Base64Bytes


class SchnorrProof(PayloadModel):
    e: Base64Int
    z: Base64Int


class ExponentiationProof(PayloadModel):
    e: Base64Int
    z: Base64Int


class PlaintextEqualityProof(PayloadModel):
    e: Base64Int
    z: list[Base64Int]


class DecryptionProof(PayloadModel):
    e: Base64Int
    z: list[Base64Int]


class Ciphertext(PayloadModel):
    """ElGamal ciphertext (gamma, phi_0, ..., phi_{l-1})."""

    gamma: Base64Int
    phis: list[Base64Int]


# Shuffle argument


class ZeroArgument(PayloadModel):
    c_a_0: Base64Int
    c_b_m: Base64Int
    c_d: list[Base64Int]
    a_prime: list[Base64Int]
    b_prime: list[Base64Int]
    r_prime: Base64Int
    s_prime: Base64Int
    t_prime: Base64Int


class HadamardArgument(PayloadModel):
    c_upper_b: list[Base64Int]
    zero_argument: ZeroArgument


class SingleValueProductArgument(PayloadModel):
    c_d: Base64Int
    c_lower_delta: Base64Int
    c_upper_delta: Base64Int
    a_tilde: list[Base64Int]
    b_tilde: list[Base64Int]
    r_tilde: Base64Int
    s_tilde: Base64Int


class ProductArgument(PayloadModel):
    """Product argument; c_b and the Hadamard argument are absent for m = 1."""

    c_b: Optional[Base64Int] = None
    hadamard_argument: Optional[HadamardArgument] = None
    single_value_product_argument: SingleValueProductArgument


class MultiExponentiationArgument(PayloadModel):
    c_a_0: Base64Int
    c_b: list[Base64Int]
    e: list[Ciphertext]
    a: list[Base64Int]
    r: Base64Int
    b: Base64Int
    s: Base64Int
    tau: Base64Int


class ShuffleArgument(PayloadModel):
    c_a: list[Base64Int]
    c_b: list[Base64Int]
    product_argument: ProductArgument
    multi_exponentiation_argument: MultiExponentiationArgument


class VerifiableShuffle(PayloadModel):
    shuffled_ciphertexts: list[Ciphertext]
    shuffle_argument: ShuffleArgument


class VerifiableDecryptions(PayloadModel):
    ciphertexts: list[Ciphertext]
    decryption_proofs: list[DecryptionProof]


class VerifiablePlaintextDecryption(PayloadModel):
    decrypted_votes: list[list[Base64Int]]
    decryption_proofs: list[DecryptionProof]


# Context payloads


class VerificationCardSetContext(PayloadModel):
    verification_card_set_id: str
    verification_card_set_alias: str
    verification_card_set_description: str
    ballot_box_id: str
    ballot_box_start_time: str
    ballot_box_finish_time: str
    test_ballot_box: bool
    number_of_voting_cards: int = Field(ge=0)
    grace_period: int = Field(ge=0)


class ElectionEventContext(PayloadModel):
    election_event_id: str
    election_event_alias: str
    election_event_description: str
    verification_card_set_contexts: list[VerificationCardSetContext]
    start_time: str
    finish_time: str
    max_number_of_voting_options: int = Field(ge=0)
    max_number_of_selections: int = Field(ge=0)
    max_number_of_write_ins_plus_one: int = Field(ge=0)


class ElectionEventContextPayload(PayloadModel):
    encryption_group: EncryptionGroup
    seed: str
    small_primes: list[int]
    election_event_context: ElectionEventContext
    signature: Optional[Signature] = None

    @property
    def election_event_id(self) -> str:
        return self.election_event_context.election_event_id


class ControlComponentPublicKeys(PayloadModel):
    node_id: int
    ccrj_choice_return_codes_encryption_public_key: list[Base64Int]
    ccrj_schnorr_proofs: list[SchnorrProof]
    ccmj_election_public_key: list[Base64Int]
    ccmj_schnorr_proofs: list[SchnorrProof]


class SetupComponentPublicKeys(PayloadModel):
    combined_control_component_public_keys: list[ControlComponentPublicKeys]
    electoral_board_public_key: list[Base64Int]
    electoral_board_schnorr_proofs: list[SchnorrProof]
    election_public_key: list[Base64Int]
    choice_return_codes_encryption_public_key: list[Base64Int]


class SetupComponentPublicKeysPayload(PayloadModel):
    encryption_group: EncryptionGroup
    election_event_id: str
    setup_component_public_keys: SetupComponentPublicKeys
    signature: Optional[Signature] = None


class ControlComponentPublicKeysPayload(PayloadModel):
    encryption_group: EncryptionGroup
    election_event_id: str
    control_component_public_keys: ControlComponentPublicKeys
    signature: Optional[Signature] = None

    @property
    def node_id(self) -> int:
        return self.control_component_public_keys.node_id


class SetupComponentTallyDataPayload(PayloadModel):
    election_event_id: str
    verification_card_set_id: str
    ballot_box_default_title: str
    encryption_group: EncryptionGroup
    verification_card_ids: list[str]
    verification_card_public_keys: list[list[Base64Int]]
    signature: Optional[Signature] = None


# Setup payloads


class SetupComponentVerificationData(PayloadModel):
    verification_card_id: str
    encrypted_hashed_squared_confirmation_key: Ciphertext
    encrypted_hashed_squared_partial_choice_return_codes: Ciphertext


class SetupComponentVerificationDataPayload(PayloadModel):
    election_event_id: str
    verification_card_set_id: str
    partial_choice_return_codes_allow_list: list[str]
    chunk_id: int = Field(ge=0)
    encryption_group: EncryptionGroup
    setup_component_verification_data: list[SetupComponentVerificationData]
    signature: Optional[Signature] = None


class ControlComponentCodeShare(PayloadModel):
    verification_card_id: str
    voter_choice_return_code_generation_public_key: list[Base64Int]
    voter_vote_cast_return_code_generation_public_key: list[Base64Int]
    exponentiated_encrypted_partial_choice_return_codes: Ciphertext
    encrypted_partial_choice_return_code_exponentiation_proof: ExponentiationProof
    exponentiated_encrypted_confirmation_key: Ciphertext
    encrypted_confirmation_key_exponentiation_proof: ExponentiationProof


class ControlComponentCodeSharesPayloadInner(PayloadModel):
    election_event_id: str
    verification_card_set_id: str
    chunk_id: int = Field(ge=0)
    control_component_code_shares: list[ControlComponentCodeShare]
    encryption_group: EncryptionGroup
    node_id: int
    signature: Optional[Signature] = None


class ControlComponentCodeSharesPayload(RootModel[list[ControlComponentCodeSharesPayloadInner]]):
    """One file per chunk: the code shares of all four control components."""

    def __iter__(self) -> Iterator[ControlComponentCodeSharesPayloadInner]:  # type: ignore[override]
        return iter(self.root)

    def __len__(self) -> int:
        return len(self.root)


# Tally payloads


class ContextIds(PayloadModel):
    election_event_id: str
    verification_card_set_id: str
    verification_card_id: str


class ConfirmedEncryptedVote(PayloadModel):
    context_ids: ContextIds
    encrypted_vote: Ciphertext
    exponentiated_encrypted_vote: Ciphertext
    encrypted_partial_choice_return_codes: Ciphertext
    exponentiation_proof: ExponentiationProof
    plaintext_equality_proof: PlaintextEqualityProof


class ControlComponentBallotBoxPayload(PayloadModel):
    encryption_group: EncryptionGroup
    election_event_id: str
    ballot_box_id: str
    node_id: int
    confirmed_encrypted_votes: list[ConfirmedEncryptedVote]
    signature: Optional[Signature] = None


class ControlComponentShufflePayload(PayloadModel):
    encryption_group: EncryptionGroup
    election_event_id: str
    ballot_box_id: str
    node_id: int
    verifiable_shuffle: VerifiableShuffle
    verifiable_decryptions: VerifiableDecryptions
    signature: Optional[Signature] = None


class TallyComponentShufflePayload(PayloadModel):
    encryption_group: EncryptionGroup
    election_event_id: str
    ballot_box_id: str
    verifiable_shuffle: VerifiableShuffle
    verifiable_plaintext_decryption: VerifiablePlaintextDecryption
    signature: Optional[Signature] = None


class TallyComponentVotesPayload(PayloadModel):
    election_event_id: str
    ballot_id: str
    ballot_box_id: str
    encryption_group: EncryptionGroup
    decrypted_votes: list[list[Base64Int]]
    decoded_votes: list[list[str]]
    decoded_write_in_votes: list[list[str]]
    signature: Optional[Signature] = None


SignedPayload = (
    ElectionEventContextPayload
    | SetupComponentPublicKeysPayload
    | ControlComponentPublicKeysPayload
    | SetupComponentTallyDataPayload
    | SetupComponentVerificationDataPayload
    | ControlComponentCodeSharesPayloadInner
    | ControlComponentBallotBoxPayload
    | ControlComponentShufflePayload
    | TallyComponentShufflePayload
    | TallyComponentVotesPayload
)
