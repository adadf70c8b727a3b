"""Number-theoretic helpers backed by gmpy2.

Primality testing uses Miller-Rabin via gmpy2.is_prime. Small primes (below
2^31) are checked deterministically by trial division.
"""

from __future__ import annotations

import gmpy2

from evote_verifier.domain.errors.number_theory import NumberRangeError
from evote_verifier.domain.models.domain_parameters import DomainParameters

# Rounds for the final primality re-check of derived parameters
MILLER_RABIN_ROUNDS = 64

# Rounds while searching candidates; confirmed by the final re-check
SEARCH_ROUNDS = 25

SMALL_PRIME_LIMIT = 2**31


def is_probable_prime(n: int, rounds: int = SEARCH_ROUNDS) -> bool:
    """Miller-Rabin probable prime test."""
    if n < 2:
        return False
    return bool(gmpy2.is_prime(n, rounds))


def is_quadratic_residue(x: int, p: int) -> bool:
    """True if x is a non-zero quadratic residue modulo the odd prime p."""
    return gmpy2.legendre(x % p, p) == 1


def is_small_prime(n: int) -> bool:
    """Deterministic primality for 0 < n < 2^31.

    Raises:
        NumberRangeError: If n is zero, negative, or not below 2^31.
    """
    if n <= 0:
        raise NumberRangeError(n, "must be positive")
    if n >= SMALL_PRIME_LIMIT:
        raise NumberRangeError(n, "must be below 2^31")
    if n == 1:
        return False
    if n <= 3:
        return True
    if n % 2 == 0 or n % 3 == 0:
        return False
    i = 5
    while i * i <= n:
        if n % i == 0 or n % (i + 2) == 0:
            return False
        i += 6
    return True


def primes_below(limit: int) -> tuple[int, ...]:
    """All primes strictly below limit, enumerated with gmpy2.next_prime."""
    primes: list[int] = []
    prime = gmpy2.mpz(2)
    while prime < limit:
        primes.append(int(prime))
        prime = gmpy2.next_prime(prime)
    return tuple(primes)


def verify_domain(params: DomainParameters, rounds: int = MILLER_RABIN_ROUNDS) -> list[str]:
    """Check the number-theoretic invariants of domain parameters.

    Returns:
        Descriptions of the violated invariants; empty when all hold.
    """
    violations: list[str] = []
    if not is_probable_prime(params.q, rounds):
        violations.append("q is not prime")
    if not is_probable_prime(params.p, rounds):
        violations.append("p is not prime")
    if not is_quadratic_residue(params.g, params.p):
        violations.append(f"g = {params.g} is not a quadratic residue modulo p")
    return violations
