"""
Domain layer - Pure cryptographic and verification logic.

This layer contains:
- Hashable value trees and the recursive hash
- Certificate authorities and domain parameters
- Verification metadata and results
- Domain exceptions

CRITICAL: This layer must NOT import from application, infrastructure, or cli.
"""

from evote_verifier.domain.exceptions import VerifierError

__all__: list[str] = [
    "VerifierError",
]
