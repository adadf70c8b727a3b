"""ElGamal domain parameters.

Constraints:
- p is a safe prime, q = (p - 1) / 2 is prime
- g is 2 or 3 and a quadratic residue modulo p, hence of order q
"""

from __future__ import annotations

from dataclasses import dataclass

ALLOWED_GENERATORS: tuple[int, ...] = (2, 3)


@dataclass(frozen=True)
class DomainParameters:
    """Frozen (p, q, g) triple.

    Construction only checks the cheap structural invariants. Primality is
    checked by verify_domain() in the number theory service since it needs
    big-integer primality testing.

    Attributes:
        p: Safe prime modulus.
        q: Sophie Germain prime, order of the subgroup of quadratic residues.
        g: Generator of that subgroup.
    """

    p: int
    q: int
    g: int

    def __post_init__(self) -> None:
        if self.p != 2 * self.q + 1:
            raise ValueError("Domain parameters require p = 2q + 1")
        if self.g not in ALLOWED_GENERATORS:
            raise ValueError(f"Generator must be one of {ALLOWED_GENERATORS}, got {self.g}")

    @property
    def bit_length(self) -> int:
        """Bit length of p."""
        return self.p.bit_length()

    def matches(self, p: int, q: int, g: int) -> bool:
        """Return True if the given triple equals these parameters."""
        return (self.p, self.q, self.g) == (p, q, g)
