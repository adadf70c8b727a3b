"""Verification runner.

Drives one audit run over a dataset: start-up checks, execution of the
active verifications, and aggregation into a RunSummary.

State machine (derived from start time and duration):
    NotStarted --run_all()--> Running --> Finished --reset()--> NotStarted

Guarantees:
- A verification that raises yields exactly one ERROR event; the remaining
  verifications still run
- Excluded verifications are logged as skipped and never executed
- Start-up failures abort before any verification runs
"""

from __future__ import annotations

import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from evote_verifier.application.services.base import LoggingMixin
from evote_verifier.application.services.run_strategy import (
    RunStrategy,
    SequentialStrategy,
)
from evote_verifier.application.verifications.context import VerificationContext
from evote_verifier.application.verifications.suite import (
    Verification,
    VerificationDescriptor,
    VerificationSuite,
    build_suite,
)
from evote_verifier.application.verifications.summary import (
    RunSummary,
    VerificationOutcome,
)
from evote_verifier.application.verifications.table import verification_table
from evote_verifier.domain.errors.dataset import PayloadDecodeError
from evote_verifier.domain.errors.runner import (
    RunnerHasAlreadyRunError,
    RunnerIsRunningError,
    RunnerStartupError,
)
from evote_verifier.domain.models.verification_meta_data import (
    VerificationMetaDataList,
    VerificationPeriod,
)
from evote_verifier.infrastructure.file_structure.directories import VerificationDirectory
from evote_verifier.infrastructure.observability.run_context import (
    generate_run_id,
    set_run_id,
)


def _utc_now() -> datetime:
    """Return current UTC time with timezone info."""
    return datetime.now(timezone.utc)


@dataclass
class RunnerHooks:
    """Optional callbacks around a run.

    Attributes:
        before_runner: Called with the start time once start-up checks pass.
        before_verification: Called with the id of each verification before it starts.
        after_verification: Called with the outcome of each finished verification.
        after_runner: Called with the run summary.
    """

    before_runner: Callable[[datetime], None] | None = None
    before_verification: Callable[[str], None] | None = None
    after_verification: Callable[[VerificationOutcome], None] | None = None
    after_runner: Callable[[RunSummary], None] | None = None


class Runner(LoggingMixin):
    """Runs the verifications of one period over one dataset."""

    def __init__(
        self,
        path: Path,
        period: VerificationPeriod,
        metadata: VerificationMetaDataList,
        *,
        exclusions: Iterable[str] = (),
        context: VerificationContext | None = None,
        strategy: RunStrategy | None = None,
        hooks: RunnerHooks | None = None,
        table: Iterable[VerificationDescriptor] | None = None,
    ) -> None:
        """Build the active suite.

        Raises:
            RunnerConfigurationError: If the check table, the metadata and
                the exclusions disagree.
        """
        self._path = Path(path)
        self._period = period
        self._metadata = metadata
        self._exclusions = tuple(exclusions)
        self._table = tuple(table) if table is not None else verification_table(period)
        self._context = context or VerificationContext()
        self._strategy = strategy or SequentialStrategy()
        self._hooks = hooks or RunnerHooks()
        self._init_logger(component="runner")
        self._suite = self._build_suite()
        self._start_time: datetime | None = None
        self._duration: float | None = None
        self._summary: RunSummary | None = None

    def _build_suite(self) -> VerificationSuite:
        return build_suite(self._period, self._table, self._metadata, self._exclusions)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def period(self) -> VerificationPeriod:
        return self._period

    @property
    def suite(self) -> VerificationSuite:
        return self._suite

    @property
    def start_time(self) -> datetime | None:
        return self._start_time

    @property
    def duration(self) -> float | None:
        return self._duration

    @property
    def summary(self) -> RunSummary | None:
        """Summary of the finished run, or None."""
        return self._summary

    def is_running(self) -> bool:
        return self._start_time is not None and self._duration is None

    def is_finished(self) -> bool:
        return self._start_time is not None and self._duration is not None

    def can_be_started(self) -> bool:
        return self._start_time is None

    def reset(self) -> None:
        """Return to NotStarted with fresh, empty results."""
        if self.is_running():
            raise RunnerIsRunningError()
        self._suite = self._build_suite()
        self._start_time = None
        self._duration = None
        self._summary = None

    def check_startup(self, directory: VerificationDirectory) -> None:
        """Fatal checks on the dataset before any verification runs.

        Raises:
            RunnerStartupError: If the dataset layout is unusable.
        """
        if not directory.root.is_dir():
            raise RunnerStartupError(f"dataset directory {directory.root} does not exist")
        if not directory.context.location.is_dir():
            raise RunnerStartupError(f"context directory missing in {directory.root}")
        if not directory.period_location.is_dir():
            raise RunnerStartupError(
                f"{directory.period_location.name} directory missing in {directory.root}"
            )
        try:
            directory.context.election_event_context_payload_file.decode()
        except PayloadDecodeError as exc:
            raise RunnerStartupError(str(exc)) from exc

    def run_all(self) -> RunSummary:
        """Run every active verification once.

        Returns:
            The run summary.

        Raises:
            RunnerIsRunningError: If a run is in progress.
            RunnerHasAlreadyRunError: If the runner already finished.
            RunnerStartupError: If a start-up check fails.
        """
        if self.is_running():
            raise RunnerIsRunningError()
        if self.is_finished():
            raise RunnerHasAlreadyRunError()

        set_run_id(generate_run_id())
        log = self._log_operation(
            "run_all", period=self._period.value, path=str(self._path)
        )
        directory = VerificationDirectory(self._path, self._period)
        self.check_startup(directory)
        if self._context.trust_store is not None:
            log.info(
                "trust_store_fingerprints",
                fingerprints={
                    authority.keystore_name: fingerprint
                    for authority, fingerprint in self._context.trust_store.fingerprints().items()
                },
            )

        self._start_time = _utc_now()
        started = time.perf_counter()
        log.info(
            "verifications_started",
            active=len(self._suite.verifications),
            excluded=len(self._suite.excluded),
        )
        for meta_data in self._suite.excluded:
            log.warning(
                "verification_skipped", verification_id=meta_data.id, name=meta_data.name
            )
        if self._hooks.before_runner is not None:
            self._hooks.before_runner(self._start_time)

        try:
            self._strategy.run(
                self._suite.verifications,
                directory,
                self._context,
                self._on_start,
                self._on_finish,
            )
        finally:
            self._duration = time.perf_counter() - started

        summary = RunSummary.from_verifications(
            self._period,
            self._start_time,
            self._duration,
            self._suite.verifications,
            skipped=(meta_data.id for meta_data in self._suite.excluded),
        )
        self._summary = summary
        log.info(
            "verifications_finished",
            duration=round(self._duration, 3),
            errors=summary.error_count,
            failures=summary.failure_count,
        )
        if self._hooks.after_runner is not None:
            self._hooks.after_runner(summary)
        return summary

    def _on_start(self, verification: Verification) -> None:
        self._log_operation("run_verification", verification_id=verification.id).debug(
            "verification_started", name=verification.name
        )
        if self._hooks.before_verification is not None:
            self._hooks.before_verification(verification.id)

    def _on_finish(self, verification: Verification) -> None:
        outcome = VerificationOutcome.from_verification(verification)
        log = self._log_operation("run_verification", verification_id=verification.id)
        log.info(
            "verification_finished",
            name=verification.name,
            status=outcome.status.value,
            errors=len(outcome.errors),
            failures=len(outcome.failures),
            duration=round(outcome.duration, 3),
        )
        for event in outcome.errors:
            log.error("verification_error", detail=str(event))
        for event in outcome.failures:
            log.warning("verification_failure", detail=str(event))
        if self._hooks.after_verification is not None:
            self._hooks.after_verification(outcome)
