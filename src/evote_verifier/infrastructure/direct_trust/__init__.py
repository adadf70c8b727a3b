"""Direct-trust keystore adapter."""

from evote_verifier.infrastructure.direct_trust.trust_store import (
    KEYSTORE_FILE_NAME,
    PASSWORD_FILE_NAME,
    DirectTrustStore,
    SigningCertificate,
    signature_digest,
)

__all__ = [
    "DirectTrustStore",
    "KEYSTORE_FILE_NAME",
    "PASSWORD_FILE_NAME",
    "SigningCertificate",
    "signature_digest",
]
