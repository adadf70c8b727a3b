"""Unit tests for verification events and results."""

from evote_verifier.domain.models.verification_result import (
    VerificationEvent,
    VerificationEventKind,
    VerificationResult,
)


class TestVerificationEvent:
    """Tests for VerificationEvent."""

    def test_factories(self) -> None:
        """error() and failure() set the kind."""
        assert VerificationEvent.error("x").kind is VerificationEventKind.ERROR
        assert VerificationEvent.failure("x").kind is VerificationEventKind.FAILURE

    def test_context_path_is_outermost_first(self) -> None:
        """Contexts are added innermost first and printed outermost first."""
        event = (
            VerificationEvent.failure("Wrong signature")
            .with_context("controlComponentPublicKeysPayload.2.json")
            .with_context("vcs-1")
        )

        assert event.contexts == ("controlComponentPublicKeysPayload.2.json", "vcs-1")
        assert str(event) == "vcs-1 / controlComponentPublicKeysPayload.2.json: Wrong signature"

    def test_str_without_context(self) -> None:
        """Without context the message is printed alone."""
        assert str(VerificationEvent.error("boom")) == "boom"

    def test_with_context_does_not_mutate(self) -> None:
        """Events are immutable; with_context returns a copy."""
        event = VerificationEvent.error("boom")
        event.with_context("file.json")
        assert event.contexts == ()


class TestVerificationResult:
    """Tests for VerificationResult."""

    def test_empty_result_is_ok(self) -> None:
        """A fresh result has no events."""
        result = VerificationResult()

        assert result.is_ok()
        assert not result.has_errors()
        assert not result.has_failures()
        assert len(result) == 0

    def test_errors_and_failures_kept_apart(self) -> None:
        """errors() and failures() split events by kind, preserving order."""
        result = VerificationResult()
        result.push(VerificationEvent.failure("f1"))
        result.push(VerificationEvent.error("e1"))
        result.push(VerificationEvent.failure("f2"))

        assert [e.message for e in result.failures()] == ["f1", "f2"]
        assert [e.message for e in result.errors()] == ["e1"]
        assert [e.message for e in result] == ["f1", "e1", "f2"]
        assert result.has_errors() and result.has_failures()
        assert not result.is_ok()

    def test_append_with_context_tags_every_event(self) -> None:
        """Appending a sub-result tags each of its events."""
        inner = VerificationResult()
        inner.push(VerificationEvent.failure("a"))
        inner.push_with_context(VerificationEvent.error("b"), "file.json")
        outer = VerificationResult()
        outer.push(VerificationEvent.failure("first"))

        outer.append_with_context(inner, "bb-1")

        assert [str(e) for e in outer] == ["first", "bb-1: a", "bb-1 / file.json: b"]

    def test_append_keeps_order(self) -> None:
        """append() extends without reordering."""
        first = VerificationResult([VerificationEvent.error("1")])
        second = VerificationResult([VerificationEvent.error("2"), VerificationEvent.error("3")])

        first.append(second)

        assert [e.message for e in first.events] == ["1", "2", "3"]
