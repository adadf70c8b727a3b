"""Signing keys, certificates and PKCS#12 keystores for tests.

One RSA key and one self-signed certificate per CertificateAuthority. The
certificate's common name and the keystore friendly name are both the
authority's keystore name, as in a real direct-trust keystore.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from cryptography.hazmat.primitives.serialization import BestAvailableEncryption, pkcs12
from cryptography.x509.oid import NameOID

from evote_verifier.application.dtos.payloads import Signature
from evote_verifier.application.services.hashable_conversion import signed_content
from evote_verifier.domain.models.certificate_authority import CertificateAuthority
from evote_verifier.domain.models.hashable import HashableValue
from evote_verifier.infrastructure.direct_trust import (
    KEYSTORE_FILE_NAME,
    PASSWORD_FILE_NAME,
    signature_digest,
)
from evote_verifier.infrastructure.direct_trust.trust_store import PSS_SALT_LENGTH

VALID_FROM = datetime(2020, 1, 1, tzinfo=timezone.utc)
VALID_UNTIL = datetime(2040, 1, 1, tzinfo=timezone.utc)
KEYSTORE_PASSWORD = "verifier-test-password"

_PSS = padding.PSS(mgf=padding.MGF1(hashes.SHA256()), salt_length=PSS_SALT_LENGTH)


def make_certificate(
    name: str,
    key: rsa.RSAPrivateKey,
    not_before: datetime = VALID_FROM,
    not_after: datetime = VALID_UNTIL,
) -> x509.Certificate:
    """Self-signed certificate with common name `name`."""
    subject = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, name)])
    return (
        x509.CertificateBuilder()
        .subject_name(subject)
        .issuer_name(subject)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(not_before)
        .not_valid_after(not_after)
        .sign(key, hashes.SHA256())
    )


@dataclass
class SigningKeys:
    """Private keys and certificates of all authorities."""

    private_keys: dict[CertificateAuthority, rsa.RSAPrivateKey]
    certificates: dict[CertificateAuthority, x509.Certificate]

    @classmethod
    def generate(cls, key_size: int = 2048) -> SigningKeys:
        private_keys: dict[CertificateAuthority, rsa.RSAPrivateKey] = {}
        certificates: dict[CertificateAuthority, x509.Certificate] = {}
        for authority in CertificateAuthority:
            key = rsa.generate_private_key(public_exponent=65537, key_size=key_size)
            private_keys[authority] = key
            certificates[authority] = make_certificate(authority.keystore_name, key)
        return cls(private_keys, certificates)

    def sign_raw(
        self, message: HashableValue, context: HashableValue, authority: CertificateAuthority
    ) -> bytes:
        """RSA-PSS signature over the recursive hash of (message, context)."""
        return self.private_keys[authority].sign(
            signature_digest(message, context), _PSS, hashes.SHA256()
        )

    def sign(self, payload):
        """Return a copy of a payload model carrying a valid signature."""
        content = signed_content(payload)
        signature = self.sign_raw(content.message, content.context, content.authority)
        return payload.model_copy(update={"signature": Signature(signature_contents=signature)})

    def pkcs12(
        self,
        password: str = KEYSTORE_PASSWORD,
        authorities: tuple[CertificateAuthority, ...] | None = None,
    ) -> bytes:
        """Keystore bytes holding the certificates of some or all authorities."""
        selected = authorities or tuple(CertificateAuthority)
        cas = [
            pkcs12.PKCS12Certificate(
                self.certificates[authority], authority.keystore_name.encode("utf-8")
            )
            for authority in selected
        ]
        return pkcs12.serialize_key_and_certificates(
            name=None,
            key=None,
            cert=None,
            cas=cas,
            encryption_algorithm=BestAvailableEncryption(password.encode("utf-8")),
        )

    def write_direct_trust(
        self,
        directory: Path,
        password: str = KEYSTORE_PASSWORD,
        authorities: tuple[CertificateAuthority, ...] | None = None,
    ) -> Path:
        """Write keystore and password file into a direct-trust directory."""
        directory.mkdir(parents=True, exist_ok=True)
        (directory / KEYSTORE_FILE_NAME).write_bytes(self.pkcs12(password, authorities))
        (directory / PASSWORD_FILE_NAME).write_text(password + "\n", encoding="utf-8")
        return directory
