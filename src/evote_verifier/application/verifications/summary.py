"""Run summary: whole-run aggregate of verification outcomes.

Exit status:
- 0: no errors and no failures
- 1: at least one failure (a protocol violation was found)
- 2: errors only (the run is inconclusive)
- 3: fatal start-up error (set by the CLI, never by a summary)
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from evote_verifier.application.verifications.suite import (
    Verification,
    VerificationStatus,
)
from evote_verifier.domain.models.verification_meta_data import (
    VerificationCategory,
    VerificationPeriod,
)
from evote_verifier.domain.models.verification_result import VerificationEvent

EXIT_OK = 0
EXIT_FAILURES = 1
EXIT_ERRORS = 2
EXIT_FATAL = 3


@dataclass(frozen=True)
class VerificationOutcome:
    """Outcome of one finished verification.

    Attributes:
        id: Verification id.
        name: Verification name.
        category: Verification category.
        status: Final status.
        duration: Duration in seconds.
        errors: ERROR events in order.
        failures: FAILURE events in order.
    """

    id: str
    name: str
    category: VerificationCategory
    status: VerificationStatus
    duration: float
    errors: tuple[VerificationEvent, ...]
    failures: tuple[VerificationEvent, ...]

    @classmethod
    def from_verification(cls, verification: Verification) -> VerificationOutcome:
        return cls(
            id=verification.id,
            name=verification.name,
            category=verification.meta_data.category,
            status=verification.status,
            duration=verification.duration or 0.0,
            errors=tuple(verification.result.errors()),
            failures=tuple(verification.result.failures()),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category.value,
            "status": self.status.value,
            "duration": round(self.duration, 6),
            "errors": [str(event) for event in self.errors],
            "failures": [str(event) for event in self.failures],
        }


@dataclass(frozen=True)
class RunSummary:
    """Aggregate of a finished run.

    Attributes:
        period: Period of the run.
        start_time: When the run started (UTC).
        duration: Run duration in seconds.
        outcomes: One outcome per active verification, in execution order.
        skipped: Ids of the excluded verifications.
    """

    period: VerificationPeriod
    start_time: datetime
    duration: float
    outcomes: tuple[VerificationOutcome, ...]
    skipped: tuple[str, ...] = ()

    @classmethod
    def from_verifications(
        cls,
        period: VerificationPeriod,
        start_time: datetime,
        duration: float,
        verifications: Iterable[Verification],
        skipped: Iterable[str] = (),
    ) -> RunSummary:
        return cls(
            period=period,
            start_time=start_time,
            duration=duration,
            outcomes=tuple(VerificationOutcome.from_verification(v) for v in verifications),
            skipped=tuple(skipped),
        )

    @property
    def error_count(self) -> int:
        return sum(len(outcome.errors) for outcome in self.outcomes)

    @property
    def failure_count(self) -> int:
        return sum(len(outcome.failures) for outcome in self.outcomes)

    def has_errors(self) -> bool:
        return self.error_count > 0

    def has_failures(self) -> bool:
        return self.failure_count > 0

    def is_ok(self) -> bool:
        return not self.has_errors() and not self.has_failures()

    def per_check(self) -> dict[str, tuple[int, int]]:
        """Map of verification id to (errors, failures)."""
        return {o.id: (len(o.errors), len(o.failures)) for o in self.outcomes}

    def outcome(self, verification_id: str) -> VerificationOutcome | None:
        for outcome in self.outcomes:
            if outcome.id == verification_id:
                return outcome
        return None

    @property
    def exit_code(self) -> int:
        if self.has_failures():
            return EXIT_FAILURES
        if self.has_errors():
            return EXIT_ERRORS
        return EXIT_OK

    def to_dict(self) -> dict[str, Any]:
        return {
            "period": self.period.value,
            "start_time": self.start_time.isoformat(),
            "duration": round(self.duration, 6),
            "errors": self.error_count,
            "failures": self.failure_count,
            "ok": self.is_ok(),
            "skipped": list(self.skipped),
            "verifications": [outcome.to_dict() for outcome in self.outcomes],
        }
