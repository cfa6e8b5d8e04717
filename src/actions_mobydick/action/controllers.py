"""Controllers for the ``action`` CLI commands."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

from actions_mobydick.action.manager import (
    ActionManager,
    DistributionSummary,
    RepositoriesService,
    RepositoryLister,
)
from actions_mobydick.config import GitHubSettings, Settings
from actions_mobydick.errors import DistributionError
from actions_mobydick.github import GitHubClient
from actions_mobydick.worker import JobContext, WorkerPool
from actions_mobydick.workflow import WorkflowFile, load_workflow_file

ClientFactory = Callable[[str, GitHubSettings], RepositoriesService]


@dataclass(slots=True)
class DistributeCommand:
    """CLI input for workflow distribution."""

    organisation: str
    token: str
    concurrency: int
    file: Path
    version: str
    private: bool
    dry_run: bool


@dataclass(slots=True)
class ListCommand:
    """CLI input for repository listing."""

    organisation: str
    token: str
    private: bool


class ActionCliController:
    """Coordinates command execution and renders output lines."""

    def __init__(
        self,
        *,
        client_factory: ClientFactory | None = None,
        settings_loader: Callable[[], Settings] = Settings.from_env,
    ) -> None:
        self._client_factory = client_factory or _default_client
        self._settings_loader = settings_loader

    def load_settings(self) -> Settings:
        settings = self._settings_loader()
        settings.validate()
        return settings

    def distribute(self, command: DistributeCommand) -> list[str]:
        settings = self.load_settings()
        workflow_file = load_workflow_file(
            command.file,
            command.version,
            workflows_dir=settings.distribution.workflows_dir,
        )

        with self._repositories(command.token, settings) as repositories:
            manager = ActionManager(
                organisation=command.organisation,
                workflow_file=workflow_file,
                worker_pool=WorkerPool(command.concurrency),
                repositories=repositories,
                dry_run=command.dry_run,
                commit_message=settings.distribution.commit_message,
                per_page=settings.github.per_page,
            )
            summary = manager.distribute(JobContext(), private_only=command.private)

        return _format_summary(command, workflow_file, summary)

    def list_repositories(self, command: ListCommand) -> list[str]:
        settings = self.load_settings()
        with self._repositories(command.token, settings) as repositories:
            lister = RepositoryLister(
                repositories,
                organisation=command.organisation,
                per_page=settings.github.per_page,
            )
            try:
                listed = lister.fetch_all(JobContext(), private_only=command.private)
            except Exception as error:  # noqa: BLE001
                raise DistributionError(f"failed to list repositories: {error}") from error

        lines = [f"{index}: {repository.full_name}" for index, repository in enumerate(listed, 1)]
        lines.append(f"Total repositories: {len(listed)}")
        return lines

    @contextmanager
    def _repositories(self, token: str, settings: Settings) -> Iterator[RepositoriesService]:
        service = self._client_factory(token, settings.github)
        try:
            yield service
        finally:
            close = getattr(service, "close", None)
            if callable(close):
                close()


def _default_client(token: str, settings: GitHubSettings) -> RepositoriesService:
    return GitHubClient(token, settings=settings)


def _format_summary(
    command: DistributeCommand,
    workflow_file: WorkflowFile,
    summary: DistributionSummary,
) -> list[str]:
    prefix = "[dry-run] " if summary.dry_run else ""
    lines = [
        f"{prefix}Distributed {workflow_file.path} (version {command.version}) "
        f"to {summary.total} repositories in {command.organisation} "
        f"with concurrency={command.concurrency}",
    ]
    if summary.dry_run:
        lines.extend(f"[dry-run] would create file in {name}" for name in summary.succeeded)
    lines.extend(f"Failed {name}: {error}" for name, error in summary.failed)
    lines.append(
        f"{prefix}Distribution completed: "
        f"success={summary.success_count} failure={summary.failure_count}",
    )
    return lines
