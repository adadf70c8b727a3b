"""Domain models for evote-verifier."""

from evote_verifier.domain.models.certificate_authority import (
    CONTROL_COMPONENT_NODE_IDS,
    CertificateAuthority,
)
from evote_verifier.domain.models.domain_parameters import DomainParameters
from evote_verifier.domain.models.hashable import (
    NO_VALUE,
    HashableBytes,
    HashableInteger,
    HashableNoValue,
    HashableSequence,
    HashableString,
    HashableValue,
    context_value,
    integer_sequence,
    string_sequence,
)
from evote_verifier.domain.models.verification_meta_data import (
    VerificationCategory,
    VerificationMetaData,
    VerificationMetaDataList,
    VerificationPeriod,
)
from evote_verifier.domain.models.verification_result import (
    VerificationEvent,
    VerificationEventKind,
    VerificationResult,
)

__all__: list[str] = [
    "CONTROL_COMPONENT_NODE_IDS",
    "CertificateAuthority",
    "DomainParameters",
    "HashableBytes",
    "HashableInteger",
    "HashableNoValue",
    "HashableSequence",
    "HashableString",
    "HashableValue",
    "NO_VALUE",
    "VerificationCategory",
    "VerificationEvent",
    "VerificationEventKind",
    "VerificationMetaData",
    "VerificationMetaDataList",
    "VerificationPeriod",
    "VerificationResult",
    "context_value",
    "integer_sequence",
    "string_sequence",
]
