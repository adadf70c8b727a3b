"""Unit tests for building the suite and executing single verifications."""

from collections.abc import Callable

import pytest

from evote_verifier.application.verifications.context import VerificationContext
from evote_verifier.application.verifications.suite import (
    Verification,
    VerificationDescriptor,
    VerificationStatus,
    build_suite,
)
from evote_verifier.application.verifications.table import verification_table
from evote_verifier.domain.errors import RunnerConfigurationError
from evote_verifier.domain.models.verification_meta_data import (
    VerificationCategory,
    VerificationMetaDataList,
    VerificationPeriod,
)
from evote_verifier.domain.models.verification_result import VerificationEvent

SETUP = VerificationPeriod.SETUP


def _table(
    metadata: VerificationMetaDataList,
    function: Callable,
    period: VerificationPeriod = SETUP,
) -> list[VerificationDescriptor]:
    return [
        VerificationDescriptor(m.id, m.name, m.category, function)
        for m in metadata.for_period(period)
    ]


def _passing(directory, context, result) -> None:
    pass


class TestBuildSuite:
    """Tests for build_suite."""

    def test_real_table_in_execution_order(self, metadata: VerificationMetaDataList) -> None:
        """Categories run in declaration order."""
        suite = build_suite(SETUP, verification_table(SETUP), metadata)

        categories = [v.meta_data.category for v in suite.verifications]
        order = list(VerificationCategory)
        assert categories == sorted(categories, key=order.index)
        assert suite.ids()[0] == "02.02"
        assert len(suite) == 18

    def test_exclusions_are_recorded(self, metadata: VerificationMetaDataList) -> None:
        """Excluded verifications leave the active list."""
        suite = build_suite(SETUP, verification_table(SETUP), metadata, ["03.09", "05.04"])

        assert "03.09" not in suite.ids()
        assert [m.id for m in suite.excluded] == ["03.09", "05.04"]
        assert suite.get("03.09") is None
        assert suite.get("03.10") is not None

    def test_unknown_exclusion_raises(self, metadata: VerificationMetaDataList) -> None:
        """Excluding an id that does not exist is a configuration error."""
        with pytest.raises(RunnerConfigurationError) as exc_info:
            build_suite(SETUP, verification_table(SETUP), metadata, ["99.99"])

        assert "99.99" in exc_info.value.reason

    def test_exclusion_of_other_period_is_ignored(
        self, metadata: VerificationMetaDataList
    ) -> None:
        """A tally id excluded from a setup run does not change the setup suite."""
        suite = build_suite(SETUP, verification_table(SETUP), metadata, ["10.01"])

        assert len(suite) == 18
        assert suite.excluded == ()

    def test_missing_implementation_raises(self, metadata: VerificationMetaDataList) -> None:
        """Every metadata record of the period needs a table entry."""
        table = _table(metadata, _passing)[1:]

        with pytest.raises(RunnerConfigurationError) as exc_info:
            build_suite(SETUP, table, metadata)

        assert "01.01" in exc_info.value.reason

    def test_name_mismatch_raises(self, metadata: VerificationMetaDataList) -> None:
        """A table entry must carry its metadata name."""
        table = _table(metadata, _passing)
        first = table[0]
        table[0] = VerificationDescriptor(first.id, "SomethingElse", first.category, _passing)

        with pytest.raises(RunnerConfigurationError):
            build_suite(SETUP, table, metadata)

    def test_wrong_period_raises(self, metadata: VerificationMetaDataList) -> None:
        """A tally entry in a setup table is rejected."""
        table = _table(metadata, _passing) + _table(metadata, _passing, VerificationPeriod.TALLY)[:1]

        with pytest.raises(RunnerConfigurationError) as exc_info:
            build_suite(SETUP, table, metadata)

        assert "belongs to period tally" in exc_info.value.reason


class TestVerification:
    """Tests for executing a single verification."""

    def _verification(self, metadata: VerificationMetaDataList, function: Callable) -> Verification:
        meta_data = metadata.get("03.09")
        assert meta_data is not None
        return Verification(meta_data, function)

    def test_initial_state(self, metadata: VerificationMetaDataList) -> None:
        """A new verification has not started and has an empty result."""
        verification = self._verification(metadata, _passing)

        assert verification.status is VerificationStatus.NOT_STARTED
        assert verification.result.is_ok()
        assert verification.duration is None

    def test_success(self, metadata: VerificationMetaDataList, tmp_path) -> None:
        """No events means finished successfully."""
        verification = self._verification(metadata, _passing)

        verification.run(tmp_path, VerificationContext())

        assert verification.status is VerificationStatus.FINISHED_SUCCESSFULLY
        assert verification.duration is not None

    def test_failures_and_errors(self, metadata: VerificationMetaDataList, tmp_path) -> None:
        """Errors take precedence over failures in the status."""

        def check(directory, context, result) -> None:
            result.push(VerificationEvent.failure("mismatch"))
            result.push(VerificationEvent.error("unreadable"))

        verification = self._verification(metadata, check)
        verification.run(tmp_path, VerificationContext())

        assert verification.status is VerificationStatus.FINISHED_WITH_ERRORS
        assert len(verification.result.failures()) == 1

    def test_exception_becomes_one_error(
        self, metadata: VerificationMetaDataList, tmp_path
    ) -> None:
        """An exception escaping the check is recorded as a single ERROR."""

        def check(directory, context, result) -> None:
            raise RuntimeError("boom")

        verification = self._verification(metadata, check)
        verification.run(tmp_path, VerificationContext())

        errors = verification.result.errors()
        assert len(errors) == 1
        assert errors[0].message == "Exception during verification: RuntimeError: boom"
        assert verification.status is VerificationStatus.FINISHED_WITH_ERRORS

    def test_timeout_is_an_error(self, metadata: VerificationMetaDataList) -> None:
        """A timed-out verification finishes with one ERROR."""
        verification = self._verification(metadata, _passing)

        verification.record_timeout(2.5)

        assert verification.status is VerificationStatus.FINISHED_WITH_ERRORS
        assert str(verification.result.errors()[0]) == "Verification timed out after 2.5 s"
