"""Data transfer objects: JSON payload models of the dataset."""

from evote_verifier.application.dtos.payloads import (
    Ciphertext,
    ControlComponentBallotBoxPayload,
    ControlComponentCodeSharesPayload,
    ControlComponentCodeSharesPayloadInner,
    ControlComponentPublicKeysPayload,
    ControlComponentShufflePayload,
    DecryptionProof,
    ElectionEventContextPayload,
    EncryptionGroup,
    SchnorrProof,
    SetupComponentPublicKeysPayload,
    SetupComponentTallyDataPayload,
    SetupComponentVerificationDataPayload,
    ShuffleArgument,
    Signature,
    SignedPayload,
    TallyComponentShufflePayload,
    TallyComponentVotesPayload,
)

__all__ = [
    "Ciphertext",
    "ControlComponentBallotBoxPayload",
    "ControlComponentCodeSharesPayload",
    "ControlComponentCodeSharesPayloadInner",
    "ControlComponentPublicKeysPayload",
    "ControlComponentShufflePayload",
    "DecryptionProof",
    "ElectionEventContextPayload",
    "EncryptionGroup",
    "SchnorrProof",
    "SetupComponentPublicKeysPayload",
    "SetupComponentTallyDataPayload",
    "SetupComponentVerificationDataPayload",
    "ShuffleArgument",
    "Signature",
    "SignedPayload",
    "TallyComponentShufflePayload",
    "TallyComponentVotesPayload",
]
