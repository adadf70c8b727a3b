"""Trust store protocol definition.

Defines the interface the authenticity verifications use to check payload
signatures. The direct-trust keystore adapter implements it.

Signature scheme:
- Digest: recursive hash of the two-element sequence [message, context]
- Signature: RSASSA-PSS with SHA-256, MGF1-SHA-256, salt length 32
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from evote_verifier.domain.models.certificate_authority import CertificateAuthority
from evote_verifier.domain.models.hashable import HashableValue


class TrustStoreProtocol(ABC):
    """Abstract protocol for signature verification against trusted certificates.

    Implementations are read-only after construction and may be shared
    between threads without locking.
    """

    @abstractmethod
    def verify_signature(
        self,
        message: HashableValue,
        context: HashableValue,
        signature: bytes,
        authority: CertificateAuthority,
        *,
        at: datetime | None = None,
    ) -> bool:
        """Verify a signature over a canonically hashed (message, context) pair.

        Args:
            message: Hashable form of the signed payload.
            context: Signature context of the payload type.
            signature: Raw signature bytes.
            authority: Authority whose certificate verifies the signature.
            at: Verification time; defaults to now (UTC).

        Returns:
            True if the signature is valid, False if it is cryptographically
            invalid.

        Raises:
            CertificateNotFoundError: If the authority has no certificate.
            CertificateTimeError: If `at` lies outside the validity window.
            SignatureFormatError: If the key or signature is structurally
                unusable.
        """
        ...

    @abstractmethod
    def fingerprints(self) -> dict[CertificateAuthority, str]:
        """SHA-256 fingerprints (hex) of the certificates present, per authority."""
        ...
