"""Fixed-size thread pool that runs a batch of jobs to completion."""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Sequence

from actions_mobydick.worker.models import Job, JobContext, Result

logger = logging.getLogger(__name__)

_CLOSED = object()
_DONE = object()


class WorkerPool:
    """Runs batches of independent jobs on ``concurrency`` worker threads.

    Each :meth:`work` call is split into three roles that only talk through
    queues: a feeder pushes jobs into a bounded intake queue and then closes it,
    the workers drain it and emit one :class:`Result` per job, and a completion
    thread joins the workers before marking the result queue as finished.
    The caller just drains results until that marker arrives.

    The pool can be reused for sequential batches. Overlapping ``work`` calls
    on one instance are not supported.
    """

    def __init__(self, concurrency: int) -> None:
        if concurrency < 1:
            raise ValueError(f"Worker pool concurrency must be >= 1, got {concurrency}.")
        self.concurrency = concurrency

    def work(self, ctx: JobContext, jobs: Sequence[Job]) -> list[Result]:
        """Process every job and return one result per job, in completion order."""

        intake: queue.Queue[Job | object] = queue.Queue(maxsize=self.concurrency)
        results: queue.Queue[Result | object] = queue.Queue()

        workers = [
            threading.Thread(
                target=self._run_worker,
                args=(ctx, intake, results),
                daemon=True,
                name=f"worker-pool-{index}",
            )
            for index in range(self.concurrency)
        ]
        for worker in workers:
            worker.start()

        threading.Thread(
            target=self._feed,
            args=(jobs, intake),
            daemon=True,
            name="worker-pool-feeder",
        ).start()
        threading.Thread(
            target=self._await_workers,
            args=(workers, results),
            daemon=True,
            name="worker-pool-completion",
        ).start()

        collected = self._drain(results)
        failed = sum(1 for result in collected if not result.ok)
        logger.info(
            "Worker pool batch finished: jobs=%d ok=%d failed=%d concurrency=%d",
            len(collected),
            len(collected) - failed,
            failed,
            self.concurrency,
        )
        return collected

    def _feed(self, jobs: Sequence[Job], intake: queue.Queue[Job | object]) -> None:
        for job in jobs:
            intake.put(job)
        for _ in range(self.concurrency):
            intake.put(_CLOSED)

    @staticmethod
    def _run_worker(
        ctx: JobContext,
        intake: queue.Queue[Job | object],
        results: queue.Queue[Result | object],
    ) -> None:
        while True:
            job = intake.get()
            if job is _CLOSED:
                return
            try:
                job.process(ctx)  # type: ignore[union-attr]
            except Exception as exc:  # noqa: BLE001
                logger.debug("Job %r failed: %s", job, exc)
                results.put(Result(job=job, error=exc))  # type: ignore[arg-type]
            except BaseException as exc:  # noqa: BLE001
                # Keep consuming; every taken job yields exactly one result.
                logger.warning("Job %r aborted with %s", job, type(exc).__name__)
                results.put(Result(job=job, error=exc))  # type: ignore[arg-type]
            else:
                logger.debug("Job %r succeeded", job)
                results.put(Result(job=job))  # type: ignore[arg-type]

    @staticmethod
    def _await_workers(
        workers: list[threading.Thread],
        results: queue.Queue[Result | object],
    ) -> None:
        for worker in workers:
            worker.join()
        results.put(_DONE)

    @staticmethod
    def _drain(results: queue.Queue[Result | object]) -> list[Result]:
        collected: list[Result] = []
        while True:
            item = results.get()
            if item is _DONE:
                return collected
            collected.append(item)  # type: ignore[arg-type]
