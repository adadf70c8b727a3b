"""Number-theoretic errors raised during domain parameter derivation."""

from __future__ import annotations

from evote_verifier.domain.exceptions import VerifierError


class NumberTheoryError(VerifierError):
    """Base class for number-theoretic errors."""


class NotPrimeError(NumberTheoryError):
    """Raised when a derived modulus fails the final primality check."""

    def __init__(self, name: str, value: int) -> None:
        """Initialize with the name of the failing value.

        Args:
            name: Which value failed ("p" or "q").
            value: The composite candidate.
        """
        super().__init__(f"Derived {name} is not prime ({value.bit_length()} bits)")
        self.name = name
        self.value = value


class TooFewSmallPrimesError(NumberTheoryError):
    """Raised when fewer small primes than requested are group members."""

    def __init__(self, requested: int, found: int) -> None:
        super().__init__(
            f"Only {found} small prime group members found, {requested} requested"
        )
        self.requested = requested
        self.found = found


class NumberRangeError(NumberTheoryError):
    """Raised when a value is outside the range supported by an operation."""

    def __init__(self, value: int, reason: str) -> None:
        super().__init__(f"Value {value} out of range: {reason}")
        self.value = value
        self.reason = reason
