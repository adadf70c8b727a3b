"""Base exception classes for the evote-verifier domain layer."""


class VerifierError(Exception):
    """Base exception for all domain errors.

    All domain-specific exceptions MUST inherit from this class.
    This lets the runner tell verifier errors apart from programming errors
    raised inside a verification.

    Subclasses live in evote_verifier.domain.errors:
    - KeystoreError, CertificateTimeError, SignatureFormatError
    - NotPrimeError, TooFewSmallPrimesError
    - RunnerIsRunningError, MetadataLoadError
    - PayloadDecodeError, WrongPeriodError
    """

    def __init__(self, message: str = "") -> None:
        """Initialize the exception with an optional message.

        Args:
            message: Human-readable error description.
        """
        super().__init__(message)
