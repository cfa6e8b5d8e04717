"""Minimal GitHub REST client for repository listing and file creation."""

from __future__ import annotations

import base64
import logging
from typing import Any
from urllib.parse import parse_qs, quote, urlparse

import httpx

from actions_mobydick.config import GitHubSettings
from actions_mobydick.errors import GitHubApiError
from actions_mobydick.github.models import Repository, RepositoryPage

logger = logging.getLogger(__name__)

GITHUB_ACCEPT = "application/vnd.github+json"
GITHUB_API_VERSION = "2022-11-28"


class GitHubClient:
    """``httpx`` wrapper implementing the repositories service used by the manager.

    The underlying client is thread-safe, so one instance serves all workers.
    """

    def __init__(
        self,
        token: str,
        *,
        settings: GitHubSettings | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        settings = settings or GitHubSettings()
        self._request_timeout = settings.request_timeout_seconds
        self._client = httpx.Client(
            base_url=settings.api_url,
            timeout=httpx.Timeout(settings.request_timeout_seconds, connect=10.0),
            headers={
                "Accept": GITHUB_ACCEPT,
                "Authorization": f"Bearer {token}",
                "User-Agent": settings.user_agent,
                "X-GitHub-Api-Version": GITHUB_API_VERSION,
            },
            transport=transport,
        )

    def list_by_org(
        self,
        org: str,
        *,
        type: str = "all",  # noqa: A002
        page: int = 0,
        per_page: int = 100,
        timeout: float | None = None,
    ) -> RepositoryPage:
        """Fetch one page of ``GET /orgs/{org}/repos``."""

        params: dict[str, Any] = {"type": type, "per_page": per_page}
        if page > 0:
            params["page"] = page
        response = self._request(
            "GET",
            f"/orgs/{quote(org, safe='')}/repos",
            timeout=timeout,
            params=params,
        )
        payload = response.json()
        if not isinstance(payload, list):
            raise GitHubApiError(
                f"Unexpected repository listing payload for {org!r}",
                status_code=response.status_code,
            )
        return RepositoryPage(
            repositories=[Repository.from_payload(item) for item in payload],
            next_page=_next_page(response),
        )

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
        """Create ``path`` on the default branch via ``PUT /repos/{owner}/{repo}/contents/{path}``."""

        self._request(
            "PUT",
            f"/repos/{quote(owner, safe='')}/{quote(repo, safe='')}/contents/{quote(path)}",
            timeout=timeout,
            json={
                "message": message,
                "content": base64.b64encode(content).decode("ascii"),
            },
        )

    def _request(
        self,
        method: str,
        url: str,
        *,
        timeout: float | None = None,
        **kwargs: Any,
    ) -> httpx.Response:
        # A caller deadline can only shorten the configured request timeout.
        if timeout is not None:
            kwargs["timeout"] = min(timeout, self._request_timeout)
        try:
            response = self._client.request(method, url, **kwargs)
        except httpx.TimeoutException as exc:
            logger.warning("Timeout calling GitHub %s %s", method, url)
            raise GitHubApiError(f"timeout calling {method} {url}") from exc
        except httpx.HTTPError as exc:
            logger.warning("HTTP error calling GitHub %s %s: %s", method, url, exc)
            raise GitHubApiError(str(exc)) from exc
        if not response.is_success:
            raise GitHubApiError(_error_message(response), status_code=response.status_code)
        return response

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> GitHubClient:
        return self

    def __exit__(self, *_: object) -> None:
        self.close()


def _next_page(response: httpx.Response) -> int:
    next_link = response.links.get("next", {}).get("url")
    if not next_link:
        return 0
    values = parse_qs(urlparse(next_link).query).get("page")
    if not values:
        return 0
    try:
        return int(values[0])
    except ValueError:
        return 0


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text.strip() or response.reason_phrase
    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"])
    return response.reason_phrase
