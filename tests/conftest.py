"""
Pytest configuration and shared fixtures for the verifier tests.

Testing Standards:
- Unit tests go in tests/unit/, mirroring the package layout
- Signing keys are generated once per session
- Datasets are written to tmp_path by DatasetBuilder and are valid unless a
  test tampers with them
"""

from pathlib import Path

import pytest
import structlog

from evote_verifier.application.services.metadata_loader import load_metadata
from evote_verifier.application.verifications.context import VerificationContext
from evote_verifier.config.verifier_config import VerifierConfig
from evote_verifier.domain.models.verification_meta_data import VerificationMetaDataList
from evote_verifier.infrastructure.direct_trust import DirectTrustStore
from evote_verifier.infrastructure.stubs import ProofVerifierStub
from tests.helpers.dataset import GROUP_BIT_LENGTH, DatasetBuilder
from tests.helpers.keystore import KEYSTORE_PASSWORD, SigningKeys


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo any structlog configuration a test applied."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def project_version() -> str:
    """Provide the current project version for tests."""
    from evote_verifier import __version__

    return __version__


@pytest.fixture(scope="session")
def signing_keys() -> SigningKeys:
    """RSA keys and certificates for every authority."""
    return SigningKeys.generate()


@pytest.fixture(scope="session")
def metadata() -> VerificationMetaDataList:
    """The packaged verification metadata manifest."""
    return load_metadata()


@pytest.fixture
def trust_store(signing_keys: SigningKeys) -> DirectTrustStore:
    """Trust store holding the certificates of all authorities."""
    return DirectTrustStore.from_pkcs12(
        signing_keys.pkcs12(), KEYSTORE_PASSWORD.encode("utf-8")
    )


@pytest.fixture
def direct_trust_dir(tmp_path: Path, signing_keys: SigningKeys) -> Path:
    """Direct-trust directory with keystore and password file."""
    return signing_keys.write_direct_trust(tmp_path / "direct-trust")


@pytest.fixture
def proof_verifier() -> ProofVerifierStub:
    """Proof verifier accepting every proof."""
    return ProofVerifierStub()


@pytest.fixture
def verifier_config() -> VerifierConfig:
    """Configuration matching the small test groups."""
    return VerifierConfig(group_bit_length=GROUP_BIT_LENGTH)


@pytest.fixture
def verification_context(
    verifier_config: VerifierConfig,
    trust_store: DirectTrustStore,
    proof_verifier: ProofVerifierStub,
) -> VerificationContext:
    """Context with every collaborator available."""
    return VerificationContext(
        config=verifier_config,
        trust_store=trust_store,
        proof_verifier=proof_verifier,
    )


@pytest.fixture
def dataset_builder(tmp_path: Path, signing_keys: SigningKeys) -> DatasetBuilder:
    """Builder writing into a fresh dataset directory."""
    return DatasetBuilder(tmp_path / "dataset", signing_keys)


@pytest.fixture
def setup_dataset(dataset_builder: DatasetBuilder) -> Path:
    """Complete, validly signed setup dataset."""
    return dataset_builder.write_setup()


@pytest.fixture
def tally_dataset(dataset_builder: DatasetBuilder) -> Path:
    """Complete, validly signed tally dataset."""
    return dataset_builder.write_tally()
