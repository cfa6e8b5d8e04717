"""Workflow distribution across organisation repositories."""

from actions_mobydick.action.manager import (
    ActionManager,
    CreateFileJob,
    DistributionSummary,
    RepositoriesService,
    RepositoryLister,
)

__all__ = [
    "ActionManager",
    "CreateFileJob",
    "DistributionSummary",
    "RepositoriesService",
    "RepositoryLister",
]
