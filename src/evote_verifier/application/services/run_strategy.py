"""Strategies for executing the verifications of a run.

- SequentialStrategy: one after another in the calling thread (default).
- ParallelStrategy: at most max_workers verifications at a time, each on its
  own worker thread. Every verification owns its result, and outcomes are
  recorded in registration order. A failing or timed-out verification never
  cancels its siblings.

The timeout of a verification counts from the moment its worker starts. A
timed-out worker thread cannot be stopped: it is abandoned, its late result
is discarded and its slot goes to the next queued verification.
"""

from __future__ import annotations

import threading
import time
from abc import ABC, abstractmethod
from collections import deque
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from evote_verifier.application.verifications.context import VerificationContext
from evote_verifier.application.verifications.suite import Verification
from evote_verifier.config.verifier_config import VerifierConfig
from evote_verifier.domain.models.verification_result import VerificationResult
from evote_verifier.infrastructure.file_structure.directories import VerificationDirectory

VerificationCallback = Callable[[Verification], None]


class RunStrategy(ABC):
    """Abstract execution strategy."""

    @abstractmethod
    def run(
        self,
        verifications: Sequence[Verification],
        directory: VerificationDirectory,
        context: VerificationContext,
        on_start: VerificationCallback,
        on_finish: VerificationCallback,
    ) -> None:
        """Execute all verifications, calling on_start and on_finish for each."""
        ...


class SequentialStrategy(RunStrategy):
    """Run verifications one after another."""

    def run(
        self,
        verifications: Sequence[Verification],
        directory: VerificationDirectory,
        context: VerificationContext,
        on_start: VerificationCallback,
        on_finish: VerificationCallback,
    ) -> None:
        for verification in verifications:
            on_start(verification)
            verification.run(directory, context)
            on_finish(verification)


@dataclass
class _Task:
    """A verification handed to a worker thread."""

    verification: Verification
    started_at: float
    outcome: tuple[VerificationResult, float] | None = None
    timed_out: bool = False

    @property
    def settled(self) -> bool:
        return self.outcome is not None or self.timed_out


class ParallelStrategy(RunStrategy):
    """Run verifications on a bounded number of worker threads.

    Attributes:
        max_workers: Number of verifications running at the same time.
        timeout: Seconds a verification may run once its worker started, or
            None to wait indefinitely.
    """

    def __init__(self, max_workers: int, timeout: float | None = None) -> None:
        if max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {max_workers}")
        if timeout is not None and timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout}")
        self.max_workers = max_workers
        self.timeout = timeout

    def run(
        self,
        verifications: Sequence[Verification],
        directory: VerificationDirectory,
        context: VerificationContext,
        on_start: VerificationCallback,
        on_finish: VerificationCallback,
    ) -> None:
        condition = threading.Condition()
        queued = deque(verifications)
        running: list[_Task] = []
        tasks: list[_Task] = []
        reported = 0

        def work(task: _Task) -> None:
            outcome = task.verification.execute(directory, context)
            with condition:
                task.outcome = outcome
                condition.notify_all()

        def launch() -> None:
            while queued and len(running) < self.max_workers:
                verification = queued.popleft()
                on_start(verification)
                verification.mark_running()
                task = _Task(verification, started_at=time.monotonic())
                running.append(task)
                tasks.append(task)
                threading.Thread(
                    target=work,
                    args=(task,),
                    name=f"verification-{verification.id}",
                    daemon=True,
                ).start()

        with condition:
            launch()
            while running:
                now = time.monotonic()
                for task in list(running):
                    if task.outcome is not None:
                        running.remove(task)
                    elif self.timeout is not None and now - task.started_at >= self.timeout:
                        task.timed_out = True
                        running.remove(task)
                launch()

                while reported < len(tasks) and tasks[reported].settled:
                    task = tasks[reported]
                    if task.timed_out:
                        task.verification.record_timeout(self.timeout or 0.0)
                    else:
                        task.verification.record(*task.outcome)  # type: ignore[misc]
                    on_finish(task.verification)
                    reported += 1

                if running:
                    condition.wait(self._wait_time(running))

    def _wait_time(self, running: list[_Task]) -> float | None:
        """Seconds until the earliest deadline of the running verifications."""
        if self.timeout is None:
            return None
        deadline = min(task.started_at for task in running) + self.timeout
        return max(0.0, deadline - time.monotonic())


def strategy_for(config: VerifierConfig) -> RunStrategy:
    """Select the execution strategy configured for a run."""
    if config.is_parallel:
        return ParallelStrategy(config.parallel_workers, config.check_timeout_seconds)
    return SequentialStrategy()
