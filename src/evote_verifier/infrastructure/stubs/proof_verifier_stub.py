"""Proof verifier stub implementation.

In-memory stub of ProofVerifierProtocol for development and testing. It
does not check any mathematics.

Testing Features:
- Configurable outcome per proof kind
- Optional exception to simulate a crashing crypto library, on every call
  or only on the calls a predicate selects
- Call recording for assertions
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from evote_verifier.application.dtos.payloads import (
    Ciphertext,
    DecryptionProof,
    EncryptionGroup,
    SchnorrProof,
    ShuffleArgument,
)
from evote_verifier.application.ports.proof_verifier import ProofVerifierProtocol

SCHNORR = "schnorr"
SHUFFLE = "shuffle"
DECRYPTION = "decryption"
PLAINTEXT_DECRYPTION = "plaintext_decryption"


@dataclass(frozen=True)
class ProofCall:
    """Record of one proof verification call.

    Attributes:
        kind: Which method was called.
        auxiliary_data: Auxiliary data passed, empty for shuffles.
        size: Number of statements or ciphertexts covered.
    """

    kind: str
    auxiliary_data: tuple[str, ...] = field(default_factory=tuple)
    size: int = 1


class ProofVerifierStub(ProofVerifierProtocol):
    """Stub answering every proof check with a configured outcome.

    NOT suitable for production use.

    Attributes:
        outcomes: Outcome per proof kind, True unless overridden.
        raise_error: Exception raised by the selected calls when set.
        raise_when: Selects the calls that raise; every call when None.
        calls: Recorded calls, in order.
    """

    def __init__(
        self,
        outcomes: dict[str, bool] | None = None,
        raise_error: Exception | None = None,
        raise_when: Callable[[ProofCall], bool] | None = None,
    ) -> None:
        self.outcomes: dict[str, bool] = {
            SCHNORR: True,
            SHUFFLE: True,
            DECRYPTION: True,
            PLAINTEXT_DECRYPTION: True,
        }
        self.outcomes.update(outcomes or {})
        self.raise_error = raise_error
        self.raise_when = raise_when
        self.calls: list[ProofCall] = []

    def _answer(self, call: ProofCall) -> bool:
        self.calls.append(call)
        if self.raise_error is not None and (
            self.raise_when is None or self.raise_when(call)
        ):
            raise self.raise_error
        return self.outcomes[call.kind]

    def calls_of(self, kind: str) -> list[ProofCall]:
        return [call for call in self.calls if call.kind == kind]

    def verify_schnorr_proof(
        self,
        group: EncryptionGroup,
        proof: SchnorrProof,
        statement: int,
        auxiliary_data: Sequence[str],
    ) -> bool:
        return self._answer(ProofCall(SCHNORR, tuple(auxiliary_data)))

    def verify_shuffle(
        self,
        group: EncryptionGroup,
        ciphertexts: Sequence[Ciphertext],
        shuffled_ciphertexts: Sequence[Ciphertext],
        argument: ShuffleArgument,
        public_key: Sequence[int],
    ) -> bool:
        return self._answer(ProofCall(SHUFFLE, size=len(ciphertexts)))

    def verify_decryptions(
        self,
        group: EncryptionGroup,
        ciphertexts: Sequence[Ciphertext],
        partially_decrypted: Sequence[Ciphertext],
        proofs: Sequence[DecryptionProof],
        public_key: Sequence[int],
        auxiliary_data: Sequence[str],
    ) -> bool:
        return self._answer(ProofCall(DECRYPTION, tuple(auxiliary_data), len(ciphertexts)))

    def verify_plaintext_decryptions(
        self,
        group: EncryptionGroup,
        ciphertexts: Sequence[Ciphertext],
        plaintexts: Sequence[Sequence[int]],
        proofs: Sequence[DecryptionProof],
        public_key: Sequence[int],
        auxiliary_data: Sequence[str],
    ) -> bool:
        return self._answer(
            ProofCall(PLAINTEXT_DECRYPTION, tuple(auxiliary_data), len(ciphertexts))
        )
