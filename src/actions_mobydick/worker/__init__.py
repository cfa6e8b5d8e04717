"""Bounded worker pool for batches of independent jobs."""

from actions_mobydick.worker.models import Job, JobContext, Result
from actions_mobydick.worker.pool import WorkerPool

__all__ = [
    "Job",
    "JobContext",
    "Result",
    "WorkerPool",
]
