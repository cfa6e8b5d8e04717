"""Distribution of the rendered workflow file across an organisation."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Protocol

from actions_mobydick.config import DEFAULT_COMMIT_MESSAGE
from actions_mobydick.errors import CreateFileError, DistributionError, JobCancelledError
from actions_mobydick.github.models import Repository, RepositoryPage
from actions_mobydick.worker import JobContext, Result, WorkerPool
from actions_mobydick.workflow import WorkflowFile

logger = logging.getLogger(__name__)

DEFAULT_PER_PAGE = 100


class RepositoriesService(Protocol):
    """Remote operations the manager needs from GitHub."""

    def list_by_org(
        self,
        org: str,
        *,
        type: str = "all",  # noqa: A002
        page: int = 0,
        per_page: int = DEFAULT_PER_PAGE,
        timeout: float | None = None,
    ) -> RepositoryPage:
        """Fetch one page of organisation repositories."""
        raise NotImplementedError

    def create_file(
        self,
        owner: str,
        repo: str,
        path: str,
        *,
        message: str,
        content: bytes,
        timeout: float | None = None,
    ) -> None:
        """Create one file in a repository."""
        raise NotImplementedError


@dataclass(slots=True)
class DistributionSummary:
    """Aggregated outcome of one distribution run."""

    success_count: int = 0
    failure_count: int = 0
    results: list[Result] = field(default_factory=list)
    dry_run: bool = False

    @property
    def total(self) -> int:
        return self.success_count + self.failure_count

    @property
    def succeeded(self) -> tuple[str, ...]:
        return tuple(sorted(_repository_name(r) for r in self.results if r.ok))

    @property
    def failed(self) -> tuple[tuple[str, str], ...]:
        """``(repository, error message)`` pairs for failed jobs."""

        return tuple(
            sorted((_repository_name(r), str(r.error)) for r in self.results if not r.ok),
        )


class RepositoryLister:
    """Collects every repository of an organisation by following listing pages."""

    def __init__(
        self,
        repositories: RepositoriesService,
        *,
        organisation: str,
        per_page: int = DEFAULT_PER_PAGE,
    ) -> None:
        self.repositories = repositories
        self.organisation = organisation
        self.per_page = per_page

    def fetch_all(self, ctx: JobContext, private_only: bool) -> list[Repository]:
        """Follow pages until ``next_page`` is 0; any page error discards the partial list."""

        repo_type = "private" if private_only else "all"
        page = 0
        listed: list[Repository] = []
        while True:
            if ctx.cancelled():
                raise JobCancelledError("Repository listing canceled.")
            result = self.repositories.list_by_org(
                self.organisation,
                type=repo_type,
                page=page,
                per_page=self.per_page,
                timeout=ctx.remaining_seconds(),
            )
            listed.extend(result.repositories)
            if result.next_page == 0:
                break
            page = result.next_page

        logger.info(
            "Listed %d repositories for %s (type=%s)",
            len(listed),
            self.organisation,
            repo_type,
        )
        return listed


class ActionManager:
    """Lists organisation repositories and commits the workflow file into each of them."""

    def __init__(  # noqa: PLR0913
        self,
        *,
        organisation: str,
        workflow_file: WorkflowFile,
        worker_pool: WorkerPool,
        repositories: RepositoriesService,
        dry_run: bool = False,
        commit_message: str = DEFAULT_COMMIT_MESSAGE,
        per_page: int = DEFAULT_PER_PAGE,
    ) -> None:
        self.organisation = organisation
        self.workflow_file = workflow_file
        self.worker_pool = worker_pool
        self.repositories = repositories
        self.dry_run = dry_run
        self.commit_message = commit_message
        self.per_page = per_page

    def distribute(self, ctx: JobContext, private_only: bool) -> DistributionSummary:
        """Commit the workflow file to every listed repository.

        Only a listing failure raises; per-repository failures are counted.
        """

        try:
            repositories = self.list_repositories(ctx, private_only)
        except Exception as error:  # noqa: BLE001
            raise DistributionError(f"failed to list repositories: {error}") from error

        jobs = [
            CreateFileJob(
                handler=self,
                repository=repository.name,
                path=self.workflow_file.path,
                content=self.workflow_file.content,
            )
            for repository in repositories
        ]
        results = self.worker_pool.work(ctx, jobs)

        summary = DistributionSummary(results=results, dry_run=self.dry_run)
        for result in results:
            if result.ok:
                summary.success_count += 1
            else:
                summary.failure_count += 1
        logger.info(
            "Distribution finished: organisation=%s success=%d failure=%d dry_run=%s",
            self.organisation,
            summary.success_count,
            summary.failure_count,
            self.dry_run,
        )
        return summary

    def list_repositories(self, ctx: JobContext, private_only: bool) -> list[Repository]:
        return RepositoryLister(
            self.repositories,
            organisation=self.organisation,
            per_page=self.per_page,
        ).fetch_all(ctx, private_only)

    def create_file(self, ctx: JobContext, repository: str, path: str, content: bytes) -> None:
        if self.dry_run:
            logger.info("create_file.dry_run repository=%s path=%s", repository, path)
            return
        if ctx.cancelled():
            raise JobCancelledError(f"Skipped {repository}: distribution canceled.")

        try:
            self.repositories.create_file(
                self.organisation,
                repository,
                path,
                message=self.commit_message,
                content=content,
                timeout=ctx.remaining_seconds(),
            )
        except Exception as error:
            logger.warning("create_file.failure repository=%s error=%s", repository, error)
            raise
        logger.info("create_file.success repository=%s", repository)


@dataclass(slots=True, eq=False)
class CreateFileJob:
    """Commit one workflow file into one repository."""

    handler: ActionManager = field(repr=False)
    repository: str
    path: str
    content: bytes = field(repr=False)

    def process(self, ctx: JobContext) -> None:
        try:
            self.handler.create_file(ctx, self.repository, self.path, self.content)
        except Exception as error:
            raise CreateFileError(self.repository, error) from error


def _repository_name(result: Result) -> str:
    return getattr(result.job, "repository", repr(result.job))
