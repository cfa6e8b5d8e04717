from __future__ import annotations

import base64
import json

import allure
import httpx
import pytest

from actions_mobydick.config import GitHubSettings
from actions_mobydick.errors import GitHubApiError
from actions_mobydick.github import GitHubClient, Repository

pytestmark = [
    allure.epic("GitHub Integration"),
    allure.feature("REST Client"),
]


def _repo_payload(name: str, *, private: bool = False) -> dict[str, object]:
    return {
        "id": abs(hash(name)) % 10_000,
        "name": name,
        "full_name": f"organisation/{name}",
        "private": private,
        "default_branch": "master",
    }


def _client(handler, **settings) -> GitHubClient:
    return GitHubClient(
        "secret-token",
        settings=GitHubSettings(**settings),
        transport=httpx.MockTransport(handler),
    )


def test_list_by_org_parses_page_and_next_link() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json=[_repo_payload("alpha"), _repo_payload("beta", private=True)],
            headers={
                "Link": (
                    '<https://api.github.com/organizations/1/repos?type=all&per_page=2&page=2>; '
                    'rel="next", '
                    '<https://api.github.com/organizations/1/repos?type=all&per_page=2&page=5>; '
                    'rel="last"'
                ),
            },
        )

    with _client(handler) as client:
        page = client.list_by_org("organisation", type="all", per_page=2)

    assert page.next_page == 2
    assert page.repositories == [
        Repository(name="alpha", full_name="organisation/alpha"),
        Repository(name="beta", full_name="organisation/beta"),
    ]
    [request] = seen
    assert request.method == "GET"
    assert request.url.path == "/orgs/organisation/repos"
    assert dict(request.url.params) == {"type": "all", "per_page": "2"}
    assert request.headers["Authorization"] == "Bearer secret-token"
    assert request.headers["Accept"] == "application/vnd.github+json"


def test_list_by_org_last_page_has_no_next() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["page"] == "3"
        assert request.url.params["type"] == "private"
        return httpx.Response(
            200,
            json=[_repo_payload("gamma")],
            headers={
                "Link": '<https://api.github.com/organizations/1/repos?page=1>; rel="first"',
            },
        )

    with _client(handler) as client:
        page = client.list_by_org("organisation", type="private", page=3)

    assert page.next_page == 0
    assert [repository.name for repository in page.repositories] == ["gamma"]


def test_list_by_org_raises_api_error_with_status() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"message": "Not Found"})

    with _client(handler) as client, pytest.raises(GitHubApiError) as excinfo:
        client.list_by_org("missing-org")

    assert excinfo.value.status_code == 404
    assert str(excinfo.value) == "HTTP 404: Not Found"


def test_list_by_org_rejects_non_list_payload() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"unexpected": True})

    with _client(handler) as client, pytest.raises(GitHubApiError, match="Unexpected"):
        client.list_by_org("organisation")


def test_create_file_puts_base64_content_with_message() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(201, json={"content": {"path": ".github/workflows/mobydick.yaml"}})

    with _client(handler, api_url="https://github.example.com/api/v3") as client:
        client.create_file(
            "organisation",
            "alpha",
            ".github/workflows/mobydick.yaml",
            message="GitHub Actions workflow for Mobydick",
            content=b"name: Mobydick\n",
        )

    [request] = seen
    assert request.method == "PUT"
    assert request.url.host == "github.example.com"
    assert request.url.path == (
        "/api/v3/repos/organisation/alpha/contents/.github/workflows/mobydick.yaml"
    )
    body = json.loads(request.content)
    assert body["message"] == "GitHub Actions workflow for Mobydick"
    assert base64.b64decode(body["content"]) == b"name: Mobydick\n"


def test_create_file_existing_file_surfaces_remote_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            422,
            json={"message": 'Invalid request.\n\n"sha" wasn\'t supplied.'},
        )

    with _client(handler) as client, pytest.raises(GitHubApiError) as excinfo:
        client.create_file("organisation", "alpha", "a.yaml", message="m", content=b"x")

    assert excinfo.value.status_code == 422
    assert "sha" in excinfo.value.message


def test_transport_error_becomes_api_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with _client(handler) as client, pytest.raises(GitHubApiError) as excinfo:
        client.list_by_org("organisation")

    assert excinfo.value.status_code is None
    assert "connection refused" in str(excinfo.value)
    assert isinstance(excinfo.value.__cause__, httpx.ConnectError)


def test_timeout_becomes_api_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with _client(handler) as client, pytest.raises(GitHubApiError, match="timeout"):
        client.create_file("organisation", "alpha", "a.yaml", message="m", content=b"x")


@pytest.mark.parametrize(
    ("deadline", "expected"),
    [(None, 30.0), (1.5, 1.5), (120.0, 30.0)],
)
def test_deadline_shortens_request_timeout(deadline, expected) -> None:
    seen: list[dict[str, float]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.extensions["timeout"])
        return httpx.Response(200, json=[])

    with _client(handler, request_timeout_seconds=30.0) as client:
        client.list_by_org("organisation", timeout=deadline)

    [timeouts] = seen
    assert timeouts["read"] == expected


def test_create_file_passes_deadline_to_request() -> None:
    seen: list[dict[str, float]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.extensions["timeout"])
        return httpx.Response(201, json={"content": {}})

    with _client(handler, request_timeout_seconds=30.0) as client:
        client.create_file(
            "organisation",
            "alpha",
            "a.yaml",
            message="m",
            content=b"x",
            timeout=2.0,
        )

    assert seen[0]["write"] == 2.0
