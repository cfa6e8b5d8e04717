"""GitHub REST API access."""

from actions_mobydick.github.client import GitHubClient
from actions_mobydick.github.models import Repository, RepositoryPage

__all__ = [
    "GitHubClient",
    "Repository",
    "RepositoryPage",
]
