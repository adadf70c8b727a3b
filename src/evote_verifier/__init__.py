"""
evote-verifier - Independent verifier for e-voting cryptographic evidence

Audits the setup and tally datasets of an electronic-voting protocol run
without trusting the voting system's own software:
- Canonical recursive hashing of structured protocol data
- Direct-trust certificate store and RSA-PSS signature verification
- Deterministic derivation of safe-prime ElGamal domain parameters
- Orchestration of independent verifications with error/failure separation
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
