"""Verification descriptors, execution units and the active suite.

The check table of a period is a closed tuple of VerificationDescriptor
records. build_suite() joins it with the metadata manifest and the user's
exclusions into a VerificationSuite: the active Verification units in table
order, plus the excluded metadata.

Every Verification owns its result. execute() never raises: an exception
escaping the check function becomes exactly one ERROR event.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

import structlog

from evote_verifier.domain.errors.runner import RunnerConfigurationError
from evote_verifier.domain.models.verification_meta_data import (
    VerificationCategory,
    VerificationMetaData,
    VerificationMetaDataList,
    VerificationPeriod,
)
from evote_verifier.domain.models.verification_result import (
    VerificationEvent,
    VerificationResult,
)

if TYPE_CHECKING:
    from evote_verifier.application.verifications.context import VerificationContext
    from evote_verifier.infrastructure.file_structure.directories import (
        VerificationDirectory,
    )

logger = structlog.get_logger()

VerificationFunction = Callable[
    ["VerificationDirectory", "VerificationContext", VerificationResult], None
]


@dataclass(frozen=True)
class VerificationDescriptor:
    """Static entry of the check table.

    Attributes:
        id: Verification id, matching the metadata manifest.
        name: Verification name, matching the metadata manifest.
        category: Category, matching the metadata manifest.
        function: Check implementation.
    """

    id: str
    name: str
    category: VerificationCategory
    function: VerificationFunction


class VerificationStatus(str, Enum):
    """Lifecycle status of a verification."""

    NOT_STARTED = "not_started"
    RUNNING = "running"
    FINISHED_SUCCESSFULLY = "finished_successfully"
    FINISHED_WITH_FAILURES = "finished_with_failures"
    FINISHED_WITH_ERRORS = "finished_with_errors"
    SKIPPED = "skipped"


class Verification:
    """One active verification of a run."""

    def __init__(self, meta_data: VerificationMetaData, function: VerificationFunction) -> None:
        self.meta_data = meta_data
        self.function = function
        self.status = VerificationStatus.NOT_STARTED
        self.result = VerificationResult()
        self.duration: float | None = None

    def __repr__(self) -> str:
        return f"Verification({self.id} {self.name}, {self.status.value})"

    @property
    def id(self) -> str:
        return self.meta_data.id

    @property
    def name(self) -> str:
        return self.meta_data.name

    def execute(
        self, directory: VerificationDirectory, context: VerificationContext
    ) -> tuple[VerificationResult, float]:
        """Run the check function into a fresh result.

        Does not touch the state of this object, so it can run on a worker
        thread while the owner decides what to record.

        Returns:
            The result and the duration in seconds.
        """
        result = VerificationResult()
        started = time.perf_counter()
        try:
            self.function(directory, context, result)
        except Exception as exc:
            logger.error(
                "verification_raised",
                verification_id=self.id,
                error_type=type(exc).__name__,
                error=str(exc),
            )
            result.push(
                VerificationEvent.error(
                    f"Exception during verification: {type(exc).__name__}: {exc}"
                )
            )
        return result, time.perf_counter() - started

    def mark_running(self) -> None:
        self.status = VerificationStatus.RUNNING

    def record(self, result: VerificationResult, duration: float) -> None:
        """Store the outcome of execute() and derive the final status."""
        self.result = result
        self.duration = duration
        if result.has_errors():
            self.status = VerificationStatus.FINISHED_WITH_ERRORS
        elif result.has_failures():
            self.status = VerificationStatus.FINISHED_WITH_FAILURES
        else:
            self.status = VerificationStatus.FINISHED_SUCCESSFULLY

    def record_timeout(self, timeout: float) -> None:
        """Record that the check did not finish within timeout seconds."""
        result = VerificationResult()
        result.push(VerificationEvent.error(f"Verification timed out after {timeout:g} s"))
        self.record(result, timeout)

    def run(self, directory: VerificationDirectory, context: VerificationContext) -> None:
        """Execute and record in the calling thread."""
        self.mark_running()
        self.record(*self.execute(directory, context))


@dataclass(frozen=True)
class VerificationSuite:
    """Active and excluded verifications of one run.

    Attributes:
        period: Period of the run.
        verifications: Active verifications in execution order.
        excluded: Metadata of the excluded verifications.
    """

    period: VerificationPeriod
    verifications: tuple[Verification, ...]
    excluded: tuple[VerificationMetaData, ...]

    def __len__(self) -> int:
        return len(self.verifications)

    def ids(self) -> list[str]:
        return [verification.id for verification in self.verifications]

    def get(self, verification_id: str) -> Verification | None:
        for verification in self.verifications:
            if verification.id == verification_id:
                return verification
        return None


def build_suite(
    period: VerificationPeriod,
    table: Iterable[VerificationDescriptor],
    metadata: VerificationMetaDataList,
    exclusions: Iterable[str] = (),
) -> VerificationSuite:
    """Filter the check table by period and exclusions.

    Raises:
        RunnerConfigurationError: If an exclusion names an unknown id, if a
            metadata record of the period has no implementation, or if a
            table entry disagrees with its metadata.
    """
    descriptors = list(table)
    excluded_ids = set(exclusions)

    unknown = sorted(excluded_ids - set(metadata.ids()))
    if unknown:
        raise RunnerConfigurationError(f"unknown verification ids excluded: {', '.join(unknown)}")

    implemented = {descriptor.id for descriptor in descriptors}
    missing = [m.id for m in metadata.for_period(period) if m.id not in implemented]
    if missing:
        raise RunnerConfigurationError(
            f"no implementation for {period.value} verifications: {', '.join(missing)}"
        )

    active: list[Verification] = []
    excluded: list[VerificationMetaData] = []
    for descriptor in descriptors:
        meta_data = metadata.get(descriptor.id)
        if meta_data is None:
            raise RunnerConfigurationError(f"verification {descriptor.id} has no metadata")
        if meta_data.period != period:
            raise RunnerConfigurationError(
                f"verification {descriptor.id} belongs to period {meta_data.period.value}"
            )
        if meta_data.name != descriptor.name or meta_data.category != descriptor.category:
            raise RunnerConfigurationError(
                f"verification {descriptor.id} does not match its metadata "
                f"({descriptor.name}/{descriptor.category.value} vs "
                f"{meta_data.name}/{meta_data.category.value})"
            )
        if descriptor.id in excluded_ids:
            excluded.append(meta_data)
        else:
            active.append(Verification(meta_data, descriptor.function))

    return VerificationSuite(period=period, verifications=tuple(active), excluded=tuple(excluded))
