"""Shared fixtures: fake GitHub payloads and a routed mock transport."""

from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict

import httpx
import pytest

from gitcast.core.github import GitHubClient

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


def iso(dt: datetime) -> str:
    return dt.strftime("%Y-%m-%dT%H:%M:%SZ")


def raw_repo(name: str, **overrides: Any) -> Dict[str, Any]:
    """A `/users/{login}/repos` entry with sensible defaults."""
    repo = {
        "name": name,
        "description": f"{name} description",
        "license": {"spdx_id": "MIT"},
        "language": "Python",
        "fork": False,
        "stargazers_count": 3,
        "forks_count": 1,
        "open_issues_count": 2,
        "html_url": f"https://github.com/octocat/{name}",
        "homepage": None,
        "topics": ["cli", "tools"],
        "created_at": "2023-01-10T08:00:00Z",
        "updated_at": "2024-06-01T08:00:00Z",
        "pushed_at": iso(NOW - timedelta(days=3)),
        "default_branch": "main",
    }
    repo.update(overrides)
    return repo


def make_transport(routes: Dict[str, Any]) -> httpx.MockTransport:
    """Route requests by URL path.

    A route value can be a JSON payload (200), a `(status, payload)` tuple,
    or a callable taking the request and returning an `httpx.Response`.
    Unknown paths answer 404.
    """

    def handler(request: httpx.Request) -> httpx.Response:
        route = routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, json={"message": "Not Found"})
        if callable(route):
            return route(request)
        if isinstance(route, tuple):
            status, payload = route
            return httpx.Response(status, json=payload)
        return httpx.Response(200, json=route)

    return httpx.MockTransport(handler)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def client_for() -> Callable[[Dict[str, Any]], GitHubClient]:
    """Build a `GitHubClient` answering from a routes table."""

    def build(routes: Dict[str, Any]) -> GitHubClient:
        return GitHubClient("test-token", transport=make_transport(routes))

    return build
