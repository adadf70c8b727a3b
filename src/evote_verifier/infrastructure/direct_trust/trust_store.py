"""Direct-trust keystore adapter.

Loads the verifier's PKCS#12 keystore once per run and verifies payload
signatures against the certificate bound to each authority.

Keystore layout:
- <directory>/public_keys_keystore_verifier.p12: certificates, one per
  authority, identified by friendly name (keystore alias) or common name
- <directory>/public_keys_keystore_verifier_pw.txt: keystore password;
  trailing line breaks are ignored

Verification:
1. Resolve the authority's certificate
2. Check the verification time against the validity window
3. Digest = recursive hash of [message, context]
4. RSASSA-PSS (SHA-256, MGF1-SHA-256, salt length 32) over the digest
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from cryptography import x509
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from cryptography.hazmat.primitives.serialization import pkcs12
from cryptography.x509.oid import NameOID

from evote_verifier.application.ports.trust_store import TrustStoreProtocol
from evote_verifier.application.services.base import LoggingMixin
from evote_verifier.domain.errors.trust import (
    CertificateNotFoundError,
    CertificateTimeError,
    KeystoreError,
    SignatureFormatError,
)
from evote_verifier.domain.models.certificate_authority import CertificateAuthority
from evote_verifier.domain.models.hashable import HashableSequence, HashableValue
from evote_verifier.domain.services.recursive_hash import recursive_hash

KEYSTORE_FILE_NAME = "public_keys_keystore_verifier.p12"
PASSWORD_FILE_NAME = "public_keys_keystore_verifier_pw.txt"

PSS_SALT_LENGTH = 32


def _utc_now() -> datetime:
    """Return current UTC time with timezone info."""
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _common_names(name: x509.Name) -> list[str]:
    return [str(attribute.value) for attribute in name.get_attributes_for_oid(NameOID.COMMON_NAME)]


def signature_digest(message: HashableValue, context: HashableValue) -> bytes:
    """Digest that is signed for a (message, context) pair."""
    return recursive_hash(HashableSequence((message, context)))


@dataclass(frozen=True)
class SigningCertificate:
    """Certificate bound to one authority.

    Attributes:
        authority: Authority the certificate belongs to.
        certificate: The X.509 certificate.
    """

    authority: CertificateAuthority
    certificate: x509.Certificate

    @property
    def not_before(self) -> datetime:
        return self.certificate.not_valid_before_utc

    @property
    def not_after(self) -> datetime:
        return self.certificate.not_valid_after_utc

    @property
    def fingerprint(self) -> str:
        """SHA-256 fingerprint as lowercase hex."""
        return self.certificate.fingerprint(hashes.SHA256()).hex()

    def is_valid_at(self, at: datetime) -> bool:
        """True if at lies within [not_before, not_after]."""
        moment = _as_utc(at)
        return self.not_before <= moment <= self.not_after

    def check_validity(self, at: datetime) -> None:
        """Raise CertificateTimeError if at lies outside the validity window."""
        if not self.is_valid_at(at):
            raise CertificateTimeError(
                self.authority.keystore_name, _as_utc(at), self.not_before, self.not_after
            )


def _match_authorities(
    entries: Iterable[tuple[str | None, x509.Certificate]],
) -> dict[CertificateAuthority, SigningCertificate]:
    """Bind keystore entries to authorities.

    An entry matches by friendly name first, then by subject or issuer
    common name. The first match per authority wins.
    """
    names = {authority.keystore_name: authority for authority in CertificateAuthority}
    found: dict[CertificateAuthority, SigningCertificate] = {}
    for friendly_name, certificate in entries:
        candidates = [friendly_name] if friendly_name else []
        candidates += _common_names(certificate.subject) + _common_names(certificate.issuer)
        for candidate in candidates:
            authority = names.get(candidate)
            if authority is not None and authority not in found:
                found[authority] = SigningCertificate(authority, certificate)
                break
    return found


class DirectTrustStore(TrustStoreProtocol, LoggingMixin):
    """Trust store backed by the verifier's PKCS#12 keystore.

    Immutable after construction; safe to share between worker threads.
    """

    def __init__(self, certificates: Mapping[CertificateAuthority, SigningCertificate]) -> None:
        self._certificates = dict(certificates)
        self._init_logger(component="trust")

    @classmethod
    def open(cls, directory: Path, password_file: Path | None = None) -> DirectTrustStore:
        """Load the keystore from a direct-trust directory.

        Args:
            directory: Directory holding the keystore file.
            password_file: Password file; defaults to the standard name in
                the same directory.

        Raises:
            KeystoreError: If a file is missing or unreadable, or the keystore
                cannot be decrypted.
        """
        keystore_path = Path(directory) / KEYSTORE_FILE_NAME
        password_path = password_file or Path(directory) / PASSWORD_FILE_NAME
        try:
            data = keystore_path.read_bytes()
        except OSError as exc:
            raise KeystoreError(str(keystore_path), exc.strerror or str(exc)) from exc
        try:
            password = password_path.read_text(encoding="utf-8").rstrip("\r\n")
        except (OSError, UnicodeDecodeError) as exc:
            raise KeystoreError(str(password_path), str(exc)) from exc
        return cls.from_pkcs12(data, password.encode("utf-8"), source=str(keystore_path))

    @classmethod
    def from_pkcs12(
        cls, data: bytes, password: bytes | None, source: str = "<memory>"
    ) -> DirectTrustStore:
        """Load the keystore from PKCS#12 bytes.

        Raises:
            KeystoreError: If the data cannot be decrypted or parsed.
        """
        try:
            bundle = pkcs12.load_pkcs12(data, password)
        except ValueError as exc:
            raise KeystoreError(source, f"cannot decrypt keystore ({exc})") from exc

        entries: list[tuple[str | None, x509.Certificate]] = []
        if bundle.cert is not None:
            entries.append((_friendly_name(bundle.cert), bundle.cert.certificate))
        entries += [(_friendly_name(c), c.certificate) for c in bundle.additional_certs]

        store = cls(_match_authorities(entries))
        store._log_operation("open", source=source).info(
            "keystore_loaded",
            certificates=len(entries),
            authorities=sorted(a.keystore_name for a in store._certificates),
        )
        return store

    def authorities(self) -> list[CertificateAuthority]:
        """Authorities with a certificate in the keystore."""
        return list(self._certificates)

    def certificate(self, authority: CertificateAuthority) -> SigningCertificate:
        """Return the certificate of an authority.

        Raises:
            CertificateNotFoundError: If the keystore holds none.
        """
        try:
            return self._certificates[authority]
        except KeyError:
            raise CertificateNotFoundError(authority.keystore_name) from None

    def fingerprints(self) -> dict[CertificateAuthority, str]:
        return {
            authority: certificate.fingerprint
            for authority, certificate in self._certificates.items()
        }

    def verify_signature(
        self,
        message: HashableValue,
        context: HashableValue,
        signature: bytes,
        authority: CertificateAuthority,
        *,
        at: datetime | None = None,
    ) -> bool:
        signing_certificate = self.certificate(authority)
        signing_certificate.check_validity(at or _utc_now())

        public_key = signing_certificate.certificate.public_key()
        if not isinstance(public_key, rsa.RSAPublicKey):
            raise SignatureFormatError(authority.keystore_name, "certificate key is not RSA")
        expected_length = (public_key.key_size + 7) // 8
        if len(signature) != expected_length:
            raise SignatureFormatError(
                authority.keystore_name,
                f"signature has {len(signature)} bytes, expected {expected_length}",
            )

        digest = signature_digest(message, context)
        try:
            public_key.verify(
                signature,
                digest,
                padding.PSS(mgf=padding.MGF1(hashes.SHA256()), salt_length=PSS_SALT_LENGTH),
                hashes.SHA256(),
            )
        except InvalidSignature:
            self._log_operation("verify_signature", authority=authority.keystore_name).warning(
                "signature_invalid"
            )
            return False
        return True


def _friendly_name(entry: pkcs12.PKCS12Certificate) -> str | None:
    if entry.friendly_name is None:
        return None
    return entry.friendly_name.decode("utf-8", errors="replace")
