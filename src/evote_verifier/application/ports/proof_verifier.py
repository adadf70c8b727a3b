"""Zero-knowledge proof verifier protocol.

The mathematics of Schnorr proofs, mix-net shuffle arguments and decryption
proofs live in an external crypto library. The evidence verifications call
it through this protocol and only interpret the boolean outcome:

- True: proof valid
- False: proof invalid, recorded as a FAILURE
- exception: verification could not complete, recorded as an ERROR
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from evote_verifier.application.dtos.payloads import (
    Ciphertext,
    DecryptionProof,
    EncryptionGroup,
    SchnorrProof,
    ShuffleArgument,
)


class ProofVerifierProtocol(ABC):
    """Abstract protocol for zero-knowledge proof verification."""

    @abstractmethod
    def verify_schnorr_proof(
        self,
        group: EncryptionGroup,
        proof: SchnorrProof,
        statement: int,
        auxiliary_data: Sequence[str],
    ) -> bool:
        """Verify a Schnorr proof of knowledge of the discrete log of statement."""
        ...

    @abstractmethod
    def verify_shuffle(
        self,
        group: EncryptionGroup,
        ciphertexts: Sequence[Ciphertext],
        shuffled_ciphertexts: Sequence[Ciphertext],
        argument: ShuffleArgument,
        public_key: Sequence[int],
    ) -> bool:
        """Verify that shuffled_ciphertexts is a re-encrypting permutation of ciphertexts."""
        ...

    @abstractmethod
    def verify_decryptions(
        self,
        group: EncryptionGroup,
        ciphertexts: Sequence[Ciphertext],
        partially_decrypted: Sequence[Ciphertext],
        proofs: Sequence[DecryptionProof],
        public_key: Sequence[int],
        auxiliary_data: Sequence[str],
    ) -> bool:
        """Verify partial decryptions of ciphertexts under one key share."""
        ...

    @abstractmethod
    def verify_plaintext_decryptions(
        self,
        group: EncryptionGroup,
        ciphertexts: Sequence[Ciphertext],
        plaintexts: Sequence[Sequence[int]],
        proofs: Sequence[DecryptionProof],
        public_key: Sequence[int],
        auxiliary_data: Sequence[str],
    ) -> bool:
        """Verify the final decryption of ciphertexts into plaintexts."""
        ...
