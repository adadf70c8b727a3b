"""Unit tests for the run summary."""

from datetime import datetime, timezone

from evote_verifier.application.verifications.suite import VerificationStatus
from evote_verifier.application.verifications.summary import (
    EXIT_ERRORS,
    EXIT_FAILURES,
    EXIT_OK,
    RunSummary,
    VerificationOutcome,
)
from evote_verifier.domain.models.verification_meta_data import (
    VerificationCategory,
    VerificationPeriod,
)
from evote_verifier.domain.models.verification_result import VerificationEvent

START = datetime(2030, 3, 21, 9, 0, tzinfo=timezone.utc)


def _outcome(
    verification_id: str,
    errors: tuple[VerificationEvent, ...] = (),
    failures: tuple[VerificationEvent, ...] = (),
) -> VerificationOutcome:
    if errors:
        status = VerificationStatus.FINISHED_WITH_ERRORS
    elif failures:
        status = VerificationStatus.FINISHED_WITH_FAILURES
    else:
        status = VerificationStatus.FINISHED_SUCCESSFULLY
    return VerificationOutcome(
        id=verification_id,
        name=f"Verify{verification_id.replace('.', '')}",
        category=VerificationCategory.CONSISTENCY,
        status=status,
        duration=0.25,
        errors=errors,
        failures=failures,
    )


def _summary(*outcomes: VerificationOutcome, skipped: tuple[str, ...] = ()) -> RunSummary:
    return RunSummary(
        period=VerificationPeriod.SETUP,
        start_time=START,
        duration=1.5,
        outcomes=outcomes,
        skipped=skipped,
    )


class TestExitCode:
    """Tests for the exit code of a run."""

    def test_clean_run(self) -> None:
        assert _summary(_outcome("03.01")).exit_code == EXIT_OK

    def test_failures_win_over_errors(self) -> None:
        """A protocol violation is reported even when other checks errored."""
        summary = _summary(
            _outcome("03.01", errors=(VerificationEvent.error("unreadable"),)),
            _outcome("03.02", failures=(VerificationEvent.failure("mismatch"),)),
        )

        assert summary.exit_code == EXIT_FAILURES

    def test_errors_only(self) -> None:
        summary = _summary(_outcome("03.01", errors=(VerificationEvent.error("unreadable"),)))

        assert summary.exit_code == EXIT_ERRORS
        assert not summary.is_ok()


class TestAggregation:
    """Tests for counts and lookups."""

    def test_counts(self) -> None:
        """Counts add up over all outcomes."""
        summary = _summary(
            _outcome(
                "03.01",
                failures=(VerificationEvent.failure("a"), VerificationEvent.failure("b")),
            ),
            _outcome("03.02", errors=(VerificationEvent.error("c"),)),
        )

        assert summary.failure_count == 2
        assert summary.error_count == 1
        assert summary.per_check() == {"03.01": (0, 2), "03.02": (1, 0)}

    def test_outcome_lookup(self) -> None:
        summary = _summary(_outcome("03.01"))

        assert summary.outcome("03.01") is not None
        assert summary.outcome("03.02") is None

    def test_to_dict(self) -> None:
        """The dictionary form is JSON-ready."""
        failure = VerificationEvent.failure("mismatch").with_context("file.json")
        summary = _summary(_outcome("03.01", failures=(failure,)), skipped=("03.09",))

        document = summary.to_dict()

        assert document["period"] == "setup"
        assert document["start_time"] == "2030-03-21T09:00:00+00:00"
        assert document["ok"] is False
        assert document["skipped"] == ["03.09"]
        assert document["verifications"][0]["failures"] == ["file.json: mismatch"]
        assert document["verifications"][0]["status"] == "finished_with_failures"
        assert document["verifications"][0]["category"] == "consistency"
