"""Verification events and results.

A verification produces an append-only, ordered list of events. Two kinds
are kept strictly apart:

- ERROR: the verification could not complete (unreadable input, missing
  certificate, exception). The outcome is inconclusive.
- FAILURE: the verification completed and found a protocol violation.

Invariants:
- Events are never reordered or dropped
- errors() and failures() preserve relative order
- Contexts are stored innermost first
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum


class VerificationEventKind(str, Enum):
    """Kind of a verification event."""

    ERROR = "error"
    FAILURE = "failure"


@dataclass(frozen=True)
class VerificationEvent:
    """Immutable verification event.

    Attributes:
        kind: ERROR or FAILURE.
        message: Description of the cause.
        contexts: Context path, innermost first (file name, index, check id).
    """

    kind: VerificationEventKind
    message: str
    contexts: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def error(cls, message: str) -> VerificationEvent:
        """Create an ERROR event."""
        return cls(kind=VerificationEventKind.ERROR, message=message)

    @classmethod
    def failure(cls, message: str) -> VerificationEvent:
        """Create a FAILURE event."""
        return cls(kind=VerificationEventKind.FAILURE, message=message)

    @property
    def is_error(self) -> bool:
        return self.kind is VerificationEventKind.ERROR

    @property
    def is_failure(self) -> bool:
        return self.kind is VerificationEventKind.FAILURE

    def with_context(self, context: str) -> VerificationEvent:
        """Return a copy with one more (outer) context element."""
        return VerificationEvent(
            kind=self.kind, message=self.message, contexts=self.contexts + (context,)
        )

    def __str__(self) -> str:
        if not self.contexts:
            return self.message
        path = " / ".join(reversed(self.contexts))
        return f"{path}: {self.message}"


class VerificationResult:
    """Append-only ordered collection of verification events."""

    def __init__(self, events: Iterable[VerificationEvent] = ()) -> None:
        self._events: list[VerificationEvent] = list(events)

    def __iter__(self) -> Iterator[VerificationEvent]:
        return iter(self._events)

    def __len__(self) -> int:
        return len(self._events)

    def __repr__(self) -> str:
        return (
            f"VerificationResult(errors={len(self.errors())}, "
            f"failures={len(self.failures())})"
        )

    @property
    def events(self) -> tuple[VerificationEvent, ...]:
        return tuple(self._events)

    def push(self, event: VerificationEvent) -> None:
        """Append one event."""
        self._events.append(event)

    def push_with_context(self, event: VerificationEvent, context: str) -> None:
        """Append one event tagged with a context element."""
        self._events.append(event.with_context(context))

    def append(self, other: VerificationResult) -> None:
        """Append all events of another result, preserving order."""
        self._events.extend(other)

    def append_with_context(self, other: VerificationResult, context: str) -> None:
        """Append all events of another result, tagging each with a context."""
        self._events.extend(event.with_context(context) for event in other)

    def errors(self) -> list[VerificationEvent]:
        return [event for event in self._events if event.is_error]

    def failures(self) -> list[VerificationEvent]:
        return [event for event in self._events if event.is_failure]

    def has_errors(self) -> bool:
        return any(event.is_error for event in self._events)

    def has_failures(self) -> bool:
        return any(event.is_failure for event in self._events)

    def is_ok(self) -> bool:
        """True when there are neither errors nor failures."""
        return not self._events
