"""Job contract and per-job result model for the worker pool."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from typing import Protocol


class JobContext:
    """Advisory execution context shared by every job of a batch.

    Jobs should check :meth:`cancelled` before starting remote calls and bound
    them by :meth:`remaining_seconds`.
    The pool itself never interrupts a running job.
    """

    def __init__(self, *, timeout_seconds: float | None = None) -> None:
        self._cancel_event = threading.Event()
        self._deadline = (
            time.monotonic() + timeout_seconds if timeout_seconds is not None else None
        )

    def cancel(self) -> None:
        self._cancel_event.set()

    def cancelled(self) -> bool:
        if self._cancel_event.is_set():
            return True
        return self._deadline is not None and time.monotonic() >= self._deadline

    def remaining_seconds(self) -> float | None:
        """Seconds left before the deadline, or ``None`` without one."""

        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())


class Job(Protocol):
    """Unit of work executed by the pool."""

    def process(self, ctx: JobContext) -> None:
        """Run the work; raise to report failure."""
        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class Result:
    """Outcome of one job: the job itself and the error it raised, if any."""

    job: Job
    error: BaseException | None = field(default=None)

    @property
    def ok(self) -> bool:
        return self.error is None
