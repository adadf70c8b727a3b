"""Unit tests for the direct-trust keystore adapter.

Signatures are RSA-PSS (SHA-256, MGF1-SHA-256, salt 32) over the recursive
hash of (message, context).
"""

from datetime import datetime, timezone
from pathlib import Path

import pytest
from cryptography.hazmat.primitives.asymmetric import rsa

from evote_verifier.domain.errors import KeystoreError
from evote_verifier.domain.errors.trust import (
    CertificateNotFoundError,
    CertificateTimeError,
    SignatureFormatError,
)
from evote_verifier.domain.models.certificate_authority import CertificateAuthority
from evote_verifier.domain.models.hashable import HashableSequence, HashableString
from evote_verifier.infrastructure.direct_trust import (
    KEYSTORE_FILE_NAME,
    PASSWORD_FILE_NAME,
    DirectTrustStore,
    SigningCertificate,
)
from tests.helpers.keystore import (
    KEYSTORE_PASSWORD,
    SigningKeys,
    make_certificate,
)

MESSAGE = HashableSequence.of(HashableString("election"), HashableString("event"))
CONTEXT = HashableString("test context")
AT = datetime(2030, 6, 1, tzinfo=timezone.utc)


class TestOpen:
    """Tests for loading the keystore from a direct-trust directory."""

    def test_open_binds_every_authority(self, direct_trust_dir: Path) -> None:
        """Every authority is found by its keystore name."""
        store = DirectTrustStore.open(direct_trust_dir)

        assert set(store.authorities()) == set(CertificateAuthority)

    def test_open_with_explicit_password_file(
        self, tmp_path: Path, signing_keys: SigningKeys
    ) -> None:
        """A password file outside the directory can be given."""
        directory = tmp_path / "keystore"
        directory.mkdir()
        (directory / KEYSTORE_FILE_NAME).write_bytes(signing_keys.pkcs12())
        password_file = tmp_path / "secret.txt"
        password_file.write_text(KEYSTORE_PASSWORD, encoding="utf-8")

        store = DirectTrustStore.open(directory, password_file=password_file)

        assert len(store.authorities()) == len(CertificateAuthority)

    def test_wrong_password_raises(self, direct_trust_dir: Path) -> None:
        """A password that does not decrypt the keystore is a KeystoreError."""
        (direct_trust_dir / PASSWORD_FILE_NAME).write_text("not-the-password\n")

        with pytest.raises(KeystoreError) as exc_info:
            DirectTrustStore.open(direct_trust_dir)

        assert "cannot decrypt" in exc_info.value.reason

    def test_missing_keystore_raises(self, tmp_path: Path) -> None:
        """An empty directory has no keystore."""
        with pytest.raises(KeystoreError) as exc_info:
            DirectTrustStore.open(tmp_path)

        assert exc_info.value.path.endswith(KEYSTORE_FILE_NAME)

    def test_missing_password_file_raises(self, direct_trust_dir: Path) -> None:
        """The password file is required next to the keystore."""
        (direct_trust_dir / PASSWORD_FILE_NAME).unlink()

        with pytest.raises(KeystoreError) as exc_info:
            DirectTrustStore.open(direct_trust_dir)

        assert exc_info.value.path.endswith(PASSWORD_FILE_NAME)

    def test_corrupt_keystore_raises(self, direct_trust_dir: Path) -> None:
        """Bytes that are not PKCS#12 cannot be loaded."""
        (direct_trust_dir / KEYSTORE_FILE_NAME).write_bytes(b"not a keystore")

        with pytest.raises(KeystoreError):
            DirectTrustStore.open(direct_trust_dir)


class TestCertificateLookup:
    """Tests for binding certificates to authorities."""

    def test_missing_authority_raises(self, signing_keys: SigningKeys) -> None:
        """An authority absent from the keystore has no certificate."""
        data = signing_keys.pkcs12(authorities=(CertificateAuthority.CANTON,))
        store = DirectTrustStore.from_pkcs12(data, KEYSTORE_PASSWORD.encode("utf-8"))

        assert store.authorities() == [CertificateAuthority.CANTON]
        with pytest.raises(CertificateNotFoundError) as exc_info:
            store.certificate(CertificateAuthority.SDM_TALLY)

        assert exc_info.value.authority == CertificateAuthority.SDM_TALLY.keystore_name

    def test_fingerprints_are_sha256_hex(self, trust_store: DirectTrustStore) -> None:
        """One 64-digit hex fingerprint per authority."""
        fingerprints = trust_store.fingerprints()

        assert set(fingerprints) == set(CertificateAuthority)
        for fingerprint in fingerprints.values():
            assert len(fingerprint) == 64
            int(fingerprint, 16)

    def test_fingerprints_differ_between_authorities(
        self, trust_store: DirectTrustStore
    ) -> None:
        """Each authority has its own key and certificate."""
        assert len(set(trust_store.fingerprints().values())) == len(CertificateAuthority)


class TestValidityWindow:
    """Tests for certificate validity at the verification time."""

    def _certificate(self, not_before: datetime, not_after: datetime) -> SigningCertificate:
        key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
        certificate = make_certificate("canton", key, not_before, not_after)
        return SigningCertificate(CertificateAuthority.CANTON, certificate)

    def test_bounds_are_inclusive(self) -> None:
        """Both ends of the window count as valid."""
        start = datetime(2024, 1, 1, tzinfo=timezone.utc)
        end = datetime(2025, 1, 1, tzinfo=timezone.utc)
        certificate = self._certificate(start, end)

        assert certificate.is_valid_at(start)
        assert certificate.is_valid_at(end)

    def test_outside_window_raises(self) -> None:
        """A time after not_after raises CertificateTimeError."""
        start = datetime(2024, 1, 1, tzinfo=timezone.utc)
        end = datetime(2025, 1, 1, tzinfo=timezone.utc)
        certificate = self._certificate(start, end)
        late = datetime(2025, 1, 2, tzinfo=timezone.utc)

        with pytest.raises(CertificateTimeError) as exc_info:
            certificate.check_validity(late)

        assert exc_info.value.at == late
        assert exc_info.value.not_after == end


class TestVerifySignature:
    """Tests for DirectTrustStore.verify_signature."""

    @pytest.mark.parametrize("authority", list(CertificateAuthority))
    def test_valid_signature(
        self,
        trust_store: DirectTrustStore,
        signing_keys: SigningKeys,
        authority: CertificateAuthority,
    ) -> None:
        """A signature by the bound key verifies."""
        signature = signing_keys.sign_raw(MESSAGE, CONTEXT, authority)

        assert trust_store.verify_signature(MESSAGE, CONTEXT, signature, authority, at=AT)

    def test_tampered_message_fails(
        self, trust_store: DirectTrustStore, signing_keys: SigningKeys
    ) -> None:
        """A changed message does not verify."""
        authority = CertificateAuthority.SDM_CONFIG
        signature = signing_keys.sign_raw(MESSAGE, CONTEXT, authority)
        other = HashableSequence.of(HashableString("election"), HashableString("other"))

        assert not trust_store.verify_signature(other, CONTEXT, signature, authority, at=AT)

    def test_changed_context_fails(
        self, trust_store: DirectTrustStore, signing_keys: SigningKeys
    ) -> None:
        """The context is covered by the signature."""
        authority = CertificateAuthority.SDM_CONFIG
        signature = signing_keys.sign_raw(MESSAGE, CONTEXT, authority)

        assert not trust_store.verify_signature(
            MESSAGE, HashableString("other context"), signature, authority, at=AT
        )

    def test_signature_of_other_authority_fails(
        self, trust_store: DirectTrustStore, signing_keys: SigningKeys
    ) -> None:
        """A signature is only valid under the signer's own certificate."""
        signature = signing_keys.sign_raw(MESSAGE, CONTEXT, CertificateAuthority.CANTON)

        assert not trust_store.verify_signature(
            MESSAGE, CONTEXT, signature, CertificateAuthority.SDM_TALLY, at=AT
        )

    def test_wrong_signature_length_raises(self, trust_store: DirectTrustStore) -> None:
        """A signature of the wrong size is structurally unusable."""
        with pytest.raises(SignatureFormatError) as exc_info:
            trust_store.verify_signature(
                MESSAGE, CONTEXT, b"\x00" * 10, CertificateAuthority.CANTON, at=AT
            )

        assert "10 bytes" in exc_info.value.reason

    def test_expired_certificate_raises(
        self, trust_store: DirectTrustStore, signing_keys: SigningKeys
    ) -> None:
        """Verifying at a time outside the window raises CertificateTimeError."""
        authority = CertificateAuthority.CANTON
        signature = signing_keys.sign_raw(MESSAGE, CONTEXT, authority)

        with pytest.raises(CertificateTimeError):
            trust_store.verify_signature(
                MESSAGE,
                CONTEXT,
                signature,
                authority,
                at=datetime(2050, 1, 1, tzinfo=timezone.utc),
            )
