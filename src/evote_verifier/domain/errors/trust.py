"""Trust store and signature errors.

This module defines exception classes raised while loading the direct-trust
keystore and verifying signatures against it.

Error Semantics:
- KeystoreError: keystore missing, unreadable, or not decryptable (fatal
  for authenticity verifications)
- CertificateNotFoundError: no certificate bound to an authority
- CertificateTimeError: verification time outside the validity window
- SignatureFormatError: structurally unusable key or signature
"""

from __future__ import annotations

from datetime import datetime

from evote_verifier.domain.exceptions import VerifierError


class TrustError(VerifierError):
    """Base class for trust store and signature errors."""


class KeystoreError(TrustError):
    """Raised when the keystore cannot be opened.

    Covers a missing keystore or password file, unreadable files, and
    decryption failures (wrong password, corrupt PKCS#12 data).
    """

    def __init__(self, path: str, reason: str) -> None:
        """Initialize with the offending path and reason.

        Args:
            path: Keystore or password file path.
            reason: Description of why loading failed.
        """
        super().__init__(f"Cannot open keystore {path}: {reason}")
        self.path = path
        self.reason = reason


class CertificateNotFoundError(TrustError):
    """Raised when the keystore holds no certificate for an authority."""

    def __init__(self, authority: str) -> None:
        super().__init__(f"No certificate found for authority {authority}")
        self.authority = authority


class CertificateTimeError(TrustError):
    """Raised when a certificate is not valid at the verification time."""

    def __init__(
        self,
        authority: str,
        at: datetime,
        not_before: datetime,
        not_after: datetime,
    ) -> None:
        """Initialize with the validity window that was violated.

        Args:
            authority: Authority whose certificate was checked.
            at: Time at which validity was evaluated.
            not_before: Start of the validity window.
            not_after: End of the validity window.
        """
        super().__init__(
            f"Certificate of {authority} not valid at {at.isoformat()} "
            f"(valid from {not_before.isoformat()} to {not_after.isoformat()})"
        )
        self.authority = authority
        self.at = at
        self.not_before = not_before
        self.not_after = not_after


class SignatureFormatError(TrustError):
    """Raised when a key or signature cannot be used for RSA-PSS verification."""

    def __init__(self, authority: str, reason: str) -> None:
        super().__init__(f"Signature of {authority} malformed: {reason}")
        self.authority = authority
        self.reason = reason
