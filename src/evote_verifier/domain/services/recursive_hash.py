"""Canonical recursive hash over HashableValue trees.

Every node is hashed with a one-byte type tag prepended to its encoding:

    bytes      H(0x00 || value)
    integer    H(0x01 || big-endian minimal bytes)    zero encodes as 0x00
    string     H(0x02 || UTF-8)
    sequence   H(0x03 || H(e1) || H(e2) || ... || H(en))
    no value   H(0x04)

Traversal is depth-first and left to right with no memoisation across
trees. The function is pure: equal trees always give equal digests.

SHA3-256 is the default; SHA-256 is selectable per call site.
"""

from __future__ import annotations

import hashlib
from enum import Enum

from evote_verifier.domain.models.hashable import (
    HashableBytes,
    HashableInteger,
    HashableNoValue,
    HashableSequence,
    HashableString,
    HashableValue,
)

TAG_BYTES = b"\x00"
TAG_INTEGER = b"\x01"
TAG_STRING = b"\x02"
TAG_SEQUENCE = b"\x03"
TAG_NO_VALUE = b"\x04"

DIGEST_SIZE = 32


class HashAlgorithm(str, Enum):
    """Digest used by the recursive hash."""

    SHA3_256 = "sha3-256"
    SHA256 = "sha256"


def sha256(data: bytes) -> bytes:
    """SHA-256 digest of data."""
    return hashlib.sha256(data).digest()


def sha3_256(data: bytes) -> bytes:
    """SHA3-256 digest of data."""
    return hashlib.sha3_256(data).digest()


def shake128(data: bytes, length: int) -> bytes:
    """SHAKE128 output of the requested length in bytes."""
    return hashlib.shake_128(data).digest(length)


def integer_to_bytes(value: int) -> bytes:
    """Big-endian minimal encoding of a non-negative integer.

    Zero encodes as a single 0x00 byte.
    """
    if value < 0:
        raise ValueError("Only non-negative integers can be encoded")
    if value == 0:
        return b"\x00"
    return value.to_bytes((value.bit_length() + 7) // 8, "big")


def bytes_to_integer(data: bytes) -> int:
    """Inverse of integer_to_bytes for big-endian data."""
    return int.from_bytes(data, "big")


def _digest(data: bytes, algorithm: HashAlgorithm) -> bytes:
    if algorithm is HashAlgorithm.SHA256:
        return sha256(data)
    return sha3_256(data)


def recursive_hash(
    value: HashableValue, algorithm: HashAlgorithm = HashAlgorithm.SHA3_256
) -> bytes:
    """Compute the canonical digest of a hashable value tree.

    Args:
        value: Root of the tree.
        algorithm: Digest algorithm, SHA3-256 unless a call site selects SHA-256.

    Returns:
        32-byte digest.

    Raises:
        TypeError: If the tree contains a node that is not a HashableValue.
    """
    if isinstance(value, HashableBytes):
        return _digest(TAG_BYTES + value.value, algorithm)
    if isinstance(value, HashableInteger):
        return _digest(TAG_INTEGER + integer_to_bytes(value.value), algorithm)
    if isinstance(value, HashableString):
        return _digest(TAG_STRING + value.value.encode("utf-8"), algorithm)
    if isinstance(value, HashableSequence):
        inner = b"".join(recursive_hash(element, algorithm) for element in value.elements)
        return _digest(TAG_SEQUENCE + inner, algorithm)
    if isinstance(value, HashableNoValue):
        return _digest(TAG_NO_VALUE, algorithm)
    raise TypeError(f"Cannot hash value of type {type(value).__name__}")
