"""Domain error classes for evote-verifier."""

from evote_verifier.domain.errors.dataset import (
    DatasetError,
    PayloadDecodeError,
    WrongPeriodError,
)
from evote_verifier.domain.errors.evidence import ProofVerifierUnavailableError
from evote_verifier.domain.errors.number_theory import (
    NotPrimeError,
    NumberRangeError,
    NumberTheoryError,
    TooFewSmallPrimesError,
)
from evote_verifier.domain.errors.runner import (
    MetadataLoadError,
    RunnerConfigurationError,
    RunnerError,
    RunnerHasAlreadyRunError,
    RunnerIsRunningError,
    RunnerStartupError,
)
from evote_verifier.domain.errors.trust import (
    CertificateNotFoundError,
    CertificateTimeError,
    KeystoreError,
    SignatureFormatError,
    TrustError,
)

__all__: list[str] = [
    "CertificateNotFoundError",
    "CertificateTimeError",
    "DatasetError",
    "KeystoreError",
    "MetadataLoadError",
    "NotPrimeError",
    "NumberRangeError",
    "NumberTheoryError",
    "PayloadDecodeError",
    "ProofVerifierUnavailableError",
    "RunnerConfigurationError",
    "RunnerError",
    "RunnerHasAlreadyRunError",
    "RunnerIsRunningError",
    "RunnerStartupError",
    "SignatureFormatError",
    "TooFewSmallPrimesError",
    "TrustError",
    "WrongPeriodError",
]
