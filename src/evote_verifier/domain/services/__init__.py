"""Domain services: hashing, number theory, parameter derivation."""

from evote_verifier.domain.services.elgamal import (
    DEFAULT_BIT_LENGTH,
    derive_parameters,
    small_prime_subgroup_members,
)
from evote_verifier.domain.services.number_theory import (
    is_probable_prime,
    is_quadratic_residue,
    is_small_prime,
    verify_domain,
)
from evote_verifier.domain.services.recursive_hash import (
    HashAlgorithm,
    recursive_hash,
)

__all__: list[str] = [
    "DEFAULT_BIT_LENGTH",
    "HashAlgorithm",
    "derive_parameters",
    "is_probable_prime",
    "is_quadratic_residue",
    "is_small_prime",
    "recursive_hash",
    "small_prime_subgroup_members",
    "verify_domain",
]
