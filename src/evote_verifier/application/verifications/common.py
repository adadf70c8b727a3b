"""Helpers shared by the verification modules.

Decoding and signature checks report into a VerificationResult instead of
raising, so one broken file never hides the findings on the others.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any, TypeVar

from pydantic import BaseModel

from evote_verifier.application.dtos.payloads import EncryptionGroup, SignedPayload
from evote_verifier.application.services.hashable_conversion import signed_content
from evote_verifier.application.verifications.context import VerificationContext
from evote_verifier.domain.errors.dataset import PayloadDecodeError
from evote_verifier.domain.exceptions import VerifierError
from evote_verifier.domain.models.verification_result import (
    VerificationEvent,
    VerificationResult,
)
from evote_verifier.infrastructure.file_structure.payload_file import FileGroup, PayloadFile

T = TypeVar("T", bound=BaseModel)

WRONG_SIGNATURE = "Wrong signature"


def _record_error(result: VerificationResult, message: str, location: str | None) -> None:
    event = VerificationEvent.error(message)
    if location is None:
        result.push(event)
    else:
        result.push_with_context(event, location)


def decode_or_error(
    file: PayloadFile[T], result: VerificationResult, location: str | None = None
) -> T | None:
    """Decode a payload, recording an ERROR and returning None on failure.

    location, when given, tags the ERROR with the directory the file sits in.
    """
    try:
        return file.decode()
    except PayloadDecodeError as exc:
        _record_error(result, str(exc), location)
        return None


def decode_group(
    group: FileGroup[T], result: VerificationResult, location: str | None = None
) -> list[tuple[int, T]]:
    """Decode every member of a group, recording an ERROR per broken file."""
    decoded: list[tuple[int, T]] = []
    for entry in group:
        if entry.error is not None:
            _record_error(result, str(entry.error), location)
        elif entry.payload is not None:
            decoded.append((entry.index, entry.payload))
    return decoded


def decode_whole_group(
    group: FileGroup[T], result: VerificationResult, location: str | None = None
) -> tuple[list[tuple[int, T]], bool]:
    """Decode a group and report whether every member could be read.

    Checks comparing a property of the group as a whole (node coverage,
    totals) skip that comparison when a member is unreadable. The ERROR
    already recorded for that member is the only finding.
    """
    local = VerificationResult()
    decoded = decode_group(group, local, location)
    result.append(local)
    return decoded, not local.has_errors()


def verify_signature(payload: SignedPayload, context: VerificationContext) -> VerificationResult:
    """Verify the signature of a decoded payload.

    Returns a result with no event when the signature is valid, one FAILURE
    when it is cryptographically wrong, and one ERROR when the check could
    not be carried out.
    """
    result = VerificationResult()
    if context.trust_store is None:
        reason = context.trust_store_error or "no direct trust directory configured"
        result.push(VerificationEvent.error(f"Trust store not available: {reason}"))
        return result
    if payload.signature is None:
        result.push(VerificationEvent.error("Signature missing"))
        return result
    try:
        content = signed_content(payload)
    except ValueError as exc:
        result.push(VerificationEvent.error(f"Cannot determine signing authority: {exc}"))
        return result
    try:
        valid = context.trust_store.verify_signature(
            content.message,
            content.context,
            payload.signature.signature_contents,
            content.authority,
            at=context.at,
        )
    except VerifierError as exc:
        result.push(VerificationEvent.error(str(exc)))
        return result
    if not valid:
        result.push(VerificationEvent.failure(WRONG_SIGNATURE))
    return result


def verify_file_signature(
    file: PayloadFile[T], context: VerificationContext, result: VerificationResult
) -> None:
    """Decode a payload file and verify its signature, tagging events with the file name."""
    payload = decode_or_error(file, result)
    if payload is not None:
        result.append_with_context(verify_signature(payload, context), file.name)  # type: ignore[arg-type]


def verify_group_signatures(
    group: FileGroup[T], context: VerificationContext, result: VerificationResult
) -> None:
    """Verify the signature of every member of a file group."""
    for entry in group:
        if entry.error is not None:
            result.push(VerificationEvent.error(str(entry.error)))
        elif entry.payload is not None:
            result.append_with_context(
                verify_signature(entry.payload, context), entry.file.name  # type: ignore[arg-type]
            )


def group_differences(
    reference: EncryptionGroup, others: Iterable[tuple[str, EncryptionGroup]]
) -> list[str]:
    """Names of the sources whose encryption group differs from the reference."""
    return [name for name, group in others if group != reference]


def proof_outcome(
    subject: str, result: VerificationResult, call: Callable[..., bool], *args: Any
) -> bool | None:
    """Run one proof verifier call as call(*args).

    An exception raised by the proof library becomes an ERROR tagged with
    the proof's subject and None is returned, so the caller can go on with
    the next proof.
    """
    try:
        return call(*args)
    except Exception as exc:
        result.push_with_context(
            VerificationEvent.error(
                f"Exception during verification: {type(exc).__name__}: {exc}"
            ),
            subject,
        )
        return None
