"""Deterministic derivation of ElGamal domain parameters from a seed.

Algorithm:
1. Expand the seed with SHAKE128 to bit_length / 8 bytes
2. Prepend the byte 0x02, read big-endian, shift right by 3 -> q'
3. q0 = q' - (q' mod 6) + 5
4. Step delta by 6, skipping candidates where a small prime divides
   q0 + delta or 2(q0 + delta) + 1, until q = q0 + delta and p = 2q + 1
   are both probable primes
5. g = 2 if 2 is a quadratic residue modulo p, else 3
6. Re-check p and q with 64 Miller-Rabin rounds

Same seed and bit length always give the same (p, q, g).
"""

from __future__ import annotations

from functools import lru_cache

from evote_verifier.domain.errors.number_theory import (
    NotPrimeError,
    TooFewSmallPrimesError,
)
from evote_verifier.domain.models.domain_parameters import DomainParameters
from evote_verifier.domain.services.number_theory import (
    MILLER_RABIN_ROUNDS,
    SMALL_PRIME_LIMIT,
    is_probable_prime,
    is_quadratic_residue,
    is_small_prime,
    primes_below,
)
from evote_verifier.domain.services.recursive_hash import bytes_to_integer, shake128

DEFAULT_BIT_LENGTH = 3072

# Odd primes used to sieve candidates before primality testing
SIEVE_PRIMES: tuple[int, ...] = primes_below(10_000)[1:]

_SEED_PREFIX = b"\x02"
_JUMP = 6
_FIRST_SUBGROUP_CANDIDATE = 5


def _sieve_rejects(residues: list[int], delta: int) -> bool:
    for residue, prime in zip(residues, SIEVE_PRIMES):
        candidate = residue + delta
        if candidate % prime == 0 or (2 * candidate + 1) % prime == 0:
            return True
    return False


@lru_cache(maxsize=8)
def derive_parameters(seed: str, bit_length: int = DEFAULT_BIT_LENGTH) -> DomainParameters:
    """Derive (p, q, g) from a seed string.

    Results are cached per (seed, bit_length) for the lifetime of the process.

    Args:
        seed: Seed string, encoded as UTF-8.
        bit_length: Target bit length of p; must be a multiple of 8.

    Returns:
        The derived domain parameters.

    Raises:
        ValueError: If bit_length is not a positive multiple of 8.
        NotPrimeError: If the final primality re-check fails.
    """
    if bit_length <= 0 or bit_length % 8 != 0:
        raise ValueError(f"bit_length must be a positive multiple of 8, got {bit_length}")

    expanded = shake128(seed.encode("utf-8"), bit_length // 8)
    q_prime = bytes_to_integer(_SEED_PREFIX + expanded) >> 3
    q0 = q_prime - (q_prime % 6) + 5

    residues = [q0 % prime for prime in SIEVE_PRIMES]
    delta = 0
    while True:
        delta += _JUMP
        while _sieve_rejects(residues, delta):
            delta += _JUMP
        q = q0 + delta
        if is_probable_prime(q) and is_probable_prime(2 * q + 1):
            break

    p = 2 * q + 1
    g = 2 if is_quadratic_residue(2, p) else 3

    if not is_probable_prime(q, MILLER_RABIN_ROUNDS):
        raise NotPrimeError("q", q)
    if not is_probable_prime(p, MILLER_RABIN_ROUNDS):
        raise NotPrimeError("p", p)

    return DomainParameters(p=p, q=q, g=g)


def small_prime_subgroup_members(p: int, count: int) -> list[int]:
    """The first count primes from 5 upwards that are quadratic residues mod p.

    Candidates are odd integers below both p and 2^31.

    Raises:
        TooFewSmallPrimesError: If the candidates run out before count members
            are found.
    """
    members: list[int] = []
    current = _FIRST_SUBGROUP_CANDIDATE
    while len(members) < count and current < p and current < SMALL_PRIME_LIMIT:
        if is_small_prime(current) and is_quadratic_residue(current, p):
            members.append(current)
        current += 2
    if len(members) < count:
        raise TooFewSmallPrimesError(count, len(members))
    return members
