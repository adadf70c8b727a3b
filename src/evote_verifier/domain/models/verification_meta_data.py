"""Verification metadata (id, name, period, category).

Metadata is loaded once per run from the packaged manifest, is immutable,
and is indexed by the dotted verification id (e.g. "03.09").
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum

VERIFICATION_ID_PATTERN = re.compile(r"^\d{2}\.\d{2}$")


class VerificationPeriod(str, Enum):
    """Protocol phase a verification belongs to."""

    SETUP = "setup"
    TALLY = "tally"


class VerificationCategory(str, Enum):
    """Kind of property a verification establishes.

    Declaration order is the execution order of the categories.
    """

    AUTHENTICITY = "authenticity"
    COMPLETENESS = "completeness"
    CONSISTENCY = "consistency"
    EVIDENCE = "evidence"
    INTEGRITY = "integrity"


@dataclass(frozen=True)
class VerificationMetaData:
    """Descriptive record of one verification.

    Attributes:
        id: Dotted identifier, two digits each side ("05.01").
        name: Stable verification name.
        algorithm: Reference to the algorithm being checked.
        description: Human-readable description.
        period: Setup or tally.
        category: Property category.
    """

    id: str
    name: str
    algorithm: str
    description: str
    period: VerificationPeriod
    category: VerificationCategory

    def __post_init__(self) -> None:
        if not VERIFICATION_ID_PATTERN.match(self.id):
            raise ValueError(f"Verification id must look like '01.02', got {self.id!r}")
        if not self.name:
            raise ValueError("Verification name must not be empty")


class VerificationMetaDataList:
    """Immutable collection of verification metadata indexed by id."""

    def __init__(self, records: Iterable[VerificationMetaData]) -> None:
        self._records: tuple[VerificationMetaData, ...] = tuple(records)
        self._by_id: dict[str, VerificationMetaData] = {}
        for record in self._records:
            if record.id in self._by_id:
                raise ValueError(f"Duplicate verification id {record.id}")
            self._by_id[record.id] = record

    def __iter__(self) -> Iterator[VerificationMetaData]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, verification_id: object) -> bool:
        return verification_id in self._by_id

    def get(self, verification_id: str) -> VerificationMetaData | None:
        """Return the record for an id, or None."""
        return self._by_id.get(verification_id)

    def ids(self) -> list[str]:
        """All ids in manifest order."""
        return [record.id for record in self._records]

    def for_period(self, period: VerificationPeriod) -> list[VerificationMetaData]:
        """Records belonging to one period, in manifest order."""
        return [record for record in self._records if record.period == period]
