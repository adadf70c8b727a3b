"""Hashable value trees for canonical recursive hashing.

A HashableValue is a closed union of five immutable node types. Payloads are
converted into such trees on demand, hashed, and discarded; trees are never
persisted.

Invariants:
- Integers are non-negative (the encoding is unsigned big-endian)
- Sequences hold HashableValue nodes only
- Two semantically equal payloads convert to structurally equal trees
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class HashableBytes:
    """Raw byte sequence."""

    value: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.value, (bytes, bytearray)):
            raise TypeError(f"HashableBytes requires bytes, got {type(self.value).__name__}")
        object.__setattr__(self, "value", bytes(self.value))


@dataclass(frozen=True)
class HashableInteger:
    """Unsigned arbitrary-precision integer."""

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError(f"HashableInteger requires int, got {type(self.value).__name__}")
        if self.value < 0:
            raise ValueError("HashableInteger must be non-negative")


@dataclass(frozen=True)
class HashableString:
    """UTF-8 text."""

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise TypeError(f"HashableString requires str, got {type(self.value).__name__}")


@dataclass(frozen=True)
class HashableNoValue:
    """Marker for an absent optional field."""


@dataclass(frozen=True)
class HashableSequence:
    """Ordered sequence of hashable values."""

    elements: tuple[HashableValue, ...]

    def __post_init__(self) -> None:
        elements = tuple(self.elements)
        for element in elements:
            if not isinstance(element, _HASHABLE_TYPES):
                raise TypeError(
                    f"HashableSequence element must be a HashableValue, "
                    f"got {type(element).__name__}"
                )
        object.__setattr__(self, "elements", elements)

    def __len__(self) -> int:
        return len(self.elements)

    @classmethod
    def of(cls, *elements: HashableValue) -> HashableSequence:
        """Build a sequence from positional elements."""
        return cls(elements)


HashableValue = Union[
    HashableBytes, HashableInteger, HashableString, HashableSequence, HashableNoValue
]

_HASHABLE_TYPES = (
    HashableBytes,
    HashableInteger,
    HashableString,
    HashableSequence,
    HashableNoValue,
)

NO_VALUE = HashableNoValue()


def string_sequence(values: Iterable[str]) -> HashableSequence:
    """Convert an iterable of strings into a sequence of HashableString."""
    return HashableSequence(tuple(HashableString(v) for v in values))


def integer_sequence(values: Iterable[int]) -> HashableSequence:
    """Convert an iterable of integers into a sequence of HashableInteger."""
    return HashableSequence(tuple(HashableInteger(v) for v in values))


def context_value(elements: Iterable[HashableValue]) -> HashableValue:
    """Build a signature context from its elements.

    A single-element context is used as-is, otherwise the elements form a
    sequence.
    """
    items = tuple(elements)
    if len(items) == 1:
        return items[0]
    return HashableSequence(items)
