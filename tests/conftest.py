"""Shared test fixtures."""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass, field

import pytest

from actions_mobydick.errors import GitHubApiError
from actions_mobydick.github.models import RepositoryPage


@dataclass(slots=True)
class CreateFileCall:
    owner: str
    repo: str
    path: str
    message: str
    content: bytes
    timeout: float | None = None


@dataclass
class FakeRepositoriesService:
    """In-memory stand-in for the GitHub repositories API.

    ``pages`` are returned in order, one per ``list_by_org`` call; an exception
    instance in the list is raised instead. ``failing_repos`` make ``create_file``
    raise for those repository names.
    """

    pages: list[RepositoryPage | Exception] = field(default_factory=list)
    failing_repos: frozenset[str] = frozenset()
    list_calls: list[dict[str, object]] = field(default_factory=list)
    create_calls: list[CreateFileCall] = field(default_factory=list)
    closed: bool = False
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def list_by_org(
        self,
        org: str,
        *,
        type: str = "all",  # noqa: A002
        page: int = 0,
        per_page: int = 100,
        timeout: float | None = None,
    ) -> RepositoryPage:
        index = len(self.list_calls)
        self.list_calls.append(
            {"org": org, "type": type, "page": page, "per_page": per_page, "timeout": timeout},
        )
        item = self.pages[index]
        if isinstance(item, Exception):
            raise item
        return item

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
        with self._lock:
            self.create_calls.append(
                CreateFileCall(
                    owner=owner,
                    repo=repo,
                    path=path,
                    message=message,
                    content=content,
                    timeout=timeout,
                ),
            )
        if repo in self.failing_repos:
            raise GitHubApiError("Invalid request.", status_code=422)

    def close(self) -> None:
        self.closed = True


@pytest.fixture()
def repositories_service() -> Callable[..., FakeRepositoriesService]:
    """Factory for fake services preloaded with listing pages."""

    def _build(
        *pages: RepositoryPage | Exception,
        failing_repos: tuple[str, ...] = (),
    ) -> FakeRepositoriesService:
        return FakeRepositoriesService(pages=list(pages), failing_repos=frozenset(failing_repos))

    return _build
