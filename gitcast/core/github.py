"""Async GitHub API client and the profile/repository fetchers built on it.

`GitHubClient.request` is the only place that talks HTTP. It adds the bearer
token and JSON headers and turns every non-2xx answer into one of the
`gitcast.core.errors` kinds. It never retries.

The fetchers on top of it:

- `analyze_profile`: user, pinned items, profile README probe, external PR
  count and owned repositories, fetched concurrently and folded into a
  `ProfileAnalysis`.
- `get_repository_list`: owned repositories mapped to `RepositorySummary`
  without any per-repository call.
- `get_repository_details`: languages, commits, contributors and README for
  one repository. Never raises; each failed part falls back to its default.

Rate Limits:
    - Authenticated: 5,000 requests/hour per token
    - Search API: 30 requests/minute

Example:
    ```python
    async with GitHubClient(token) as gh:
        analysis = await analyze_profile(gh)
        listing = await get_repository_list(gh)
        detail = await get_repository_details(gh, listing.user_login, "my-repo")
    ```
"""
from __future__ import annotations
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, List, Optional, TypeVar
import asyncio
import base64
import logging

import httpx

from .analysis import classify_activity, compute_repo_stats, language_distribution
from .errors import GitCastError, InvalidCredentials, NotFound, RateLimited, RemoteError
from .models import (
    MAX_PINNED_ITEMS,
    GitHubReadme,
    GitHubRepo,
    GitHubSearchResponse,
    GitHubUser,
    PinnedItemsResponse,
    PinnedRepo,
    ProfileAnalysis,
    RepositoryDetail,
    RepositoryListData,
    RepositorySummary,
)

logger = logging.getLogger(__name__)

GH_API = "https://api.github.com"
MAX_REPOS = 100
RECENT_COMMITS_SAMPLE = 10
CONTRIBUTORS_SAMPLE = 100

PINNED_ITEMS_QUERY = """
query($username: String!) {
  user(login: $username) {
    pinnedItems(first: 6, types: REPOSITORY) {
      nodes {
        ... on Repository {
          name
          description
          repositoryTopics(first: 5) {
            nodes {
              topic {
                name
              }
            }
          }
        }
      }
    }
  }
}
"""

T = TypeVar("T")
R = TypeVar("R")


def _error_message(r: httpx.Response) -> str:
    try:
        body = r.json()
    except ValueError:
        return "Failed to parse error response."
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return "An unexpected error occurred."


class GitHubClient:
    """Authenticated GitHub REST + GraphQL client.

    Use as an async context manager so the underlying connection pool is
    closed. A custom `transport` can be passed (tests use
    `httpx.MockTransport`).
    """

    def __init__(self, token: str, base_url: str = GH_API, timeout: float = 20.0,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        if not token:
            raise InvalidCredentials("GitHub Personal Access Token was not provided.")
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            transport=transport,
            headers={
                "Authorization": f"Bearer {token}",
                "Content-Type": "application/json",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
            },
        )

    async def __aenter__(self) -> "GitHubClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(self, endpoint: str, method: str = "GET",
                      body: Optional[dict] = None,
                      params: Optional[Dict[str, Any]] = None) -> Any:
        """Issue one request and return the decoded JSON body.

        Args:
            endpoint: Path relative to the API base URL, e.g. "/user".
            method: HTTP method.
            body: JSON body for POST requests.
            params: Query string parameters.

        Returns:
            Decoded JSON, or None for 204 No Content.

        Raises:
            InvalidCredentials: 401.
            RateLimited: 403 carrying an `x-ratelimit-reset` header.
            NotFound: 404.
            RemoteError: any other non-2xx, a 2xx body that is not JSON, or a
                transport failure.
        """
        logger.debug("GitHub %s %s", method, endpoint)
        try:
            r = await self._client.request(method, endpoint, json=body, params=params)
        except httpx.HTTPError as e:
            raise RemoteError(0, str(e) or type(e).__name__) from e

        if r.status_code == 204:
            return None
        if r.is_success:
            try:
                return r.json()
            except ValueError as e:
                raise RemoteError(r.status_code, "Failed to parse response.") from e

        if r.status_code == 401:
            raise InvalidCredentials(
                "Invalid GitHub Personal Access Token. Please check your token and permissions.",
                service="github",
            )
        reset = r.headers.get("x-ratelimit-reset", "")
        if r.status_code == 403 and reset.isdigit():
            reset_at = datetime.fromtimestamp(int(reset)).astimezone()
            raise RateLimited(
                f"GitHub API rate limit exceeded. Please try again at {reset_at:%H:%M:%S}.",
                reset_at=reset_at,
            )
        if r.status_code == 404:
            raise NotFound(_error_message(r))
        raise RemoteError(r.status_code, _error_message(r))

    async def graphql(self, query: str, variables: Dict[str, Any]) -> Any:
        return await self.request("/graphql", method="POST",
                                  body={"query": query, "variables": variables})


# ---- profile analysis -------------------------------------------------------

async def get_authenticated_user(client: GitHubClient) -> GitHubUser:
    return GitHubUser.model_validate(await client.request("/user"))


async def get_pinned_repos(client: GitHubClient, username: str) -> List[PinnedRepo]:
    """Return at most 6 pinned repositories with up to 5 topics each."""
    resp = PinnedItemsResponse.model_validate(
        await client.graphql(PINNED_ITEMS_QUERY, {"username": username})
    )
    if resp.errors and (resp.data is None or resp.data.user is None):
        raise RemoteError(200, resp.errors[0].get("message", "GraphQL query failed."))
    return [PinnedRepo.from_node(n) for n in resp.nodes()[:MAX_PINNED_ITEMS]]


async def has_profile_readme(client: GitHubClient, username: str) -> bool:
    """True when the `{username}/{username}` profile repository exists."""
    try:
        await client.request(f"/repos/{username}/{username}")
    except NotFound:
        return False
    return True


async def get_os_contributions(client: GitHubClient, username: str) -> int:
    """Count public PRs authored by `username` on repositories they don't own."""
    data = await client.request(
        "/search/issues",
        params={"q": f"is:pr author:{username} -user:{username} is:public", "per_page": 1},
    )
    return GitHubSearchResponse.model_validate(data).total_count


async def list_owned_repos(client: GitHubClient, username: str) -> List[GitHubRepo]:
    """Up to 100 owned repositories, most recently pushed first."""
    data = await client.request(
        f"/users/{username}/repos",
        params={"type": "owner", "sort": "pushed", "per_page": MAX_REPOS},
    )
    return [GitHubRepo.model_validate(item) for item in data or []]


async def analyze_profile(client: GitHubClient, now: Optional[datetime] = None) -> ProfileAnalysis:
    """Build a `ProfileAnalysis` for the token's owner.

    The four fetches after the user lookup run concurrently; the first
    failure among them propagates.
    """
    user = await get_authenticated_user(client)
    username = user.login

    pinned, readme_exists, os_contributions, repos = await asyncio.gather(
        get_pinned_repos(client, username),
        has_profile_readme(client, username),
        get_os_contributions(client, username),
        list_owned_repos(client, username),
    )
    logger.info("Analyzed %s: %d repos, %d pinned", username, len(repos), len(pinned))

    return ProfileAnalysis(
        user_name=user.name or username,
        user_login=username,
        bio=user.bio,
        has_profile_readme=readme_exists,
        pinned_repos=pinned,
        repo_stats=compute_repo_stats(repos),
        language_distribution=language_distribution(repos),
        activity=classify_activity(repos, now),
        os_contributions=os_contributions,
    )


# ---- repository list / detail ----------------------------------------------

async def get_repository_list(client: GitHubClient) -> RepositoryListData:
    """List owned repositories without fetching per-repository detail."""
    user = await get_authenticated_user(client)
    repos = await list_owned_repos(client, user.login)
    return RepositoryListData(
        user_name=user.name or user.login,
        user_login=user.login,
        repositories=[RepositorySummary.from_api(r) for r in repos],
    )


def decode_readme(readme: GitHubReadme) -> str:
    """Return README text, decoding GitHub's base64 transport encoding."""
    if readme.encoding == "base64":
        return base64.b64decode(readme.content).decode("utf-8", errors="ignore")
    return readme.content


async def _best_effort(label: str, fetch: Awaitable[T], default: T) -> T:
    try:
        return await fetch
    except (GitCastError, httpx.HTTPError, ValueError, TypeError) as e:
        logger.warning("Could not fetch %s: %s", label, e)
        return default


async def _languages(client: GitHubClient, path: str) -> Dict[str, int]:
    data = await client.request(f"{path}/languages") or {}
    if not isinstance(data, dict):
        raise TypeError(f"unexpected languages payload: {type(data).__name__}")
    return {str(k): int(v) for k, v in data.items()}


async def _count(client: GitHubClient, endpoint: str, per_page: int) -> int:
    return len(await client.request(endpoint, params={"per_page": per_page}) or [])


async def _readme(client: GitHubClient, path: str) -> Optional[str]:
    data = await client.request(f"{path}/readme")
    return decode_readme(GitHubReadme.model_validate(data)) if data else None


async def get_repository_details(client: GitHubClient, owner: str, repo: str) -> RepositoryDetail:
    """Fetch the detail overlay for one repository.

    The four parts are fetched concurrently and each one degrades to its
    empty default on failure, so this never raises.
    """
    path = f"/repos/{owner}/{repo}"
    languages, commits, contributors, readme = await asyncio.gather(
        _best_effort(f"{repo} languages", _languages(client, path), {}),
        _best_effort(f"{repo} commits", _count(client, f"{path}/commits", RECENT_COMMITS_SAMPLE), 0),
        _best_effort(f"{repo} contributors", _count(client, f"{path}/contributors", CONTRIBUTORS_SAMPLE), 0),
        _best_effort(f"{repo} README", _readme(client, path), None),
    )
    return RepositoryDetail(
        languages=languages,
        recent_commits=commits,
        contributors=contributors,
        has_readme=readme is not None,
        readme_content=readme,
    )


async def process_batch(items: List[T], batch_size: int,
                        processor: Callable[[T], Awaitable[R]],
                        delay: float = 0.1) -> List[R]:
    """Run `processor` over `items` in concurrent batches of `batch_size`.

    Sleeps `delay` seconds between batches (not after the last one) to stay
    under request-rate limits. Results keep the order of `items`.
    """
    if batch_size < 1:
        raise ValueError("batch_size must be at least 1")
    results: List[R] = []
    for i in range(0, len(items), batch_size):
        batch = items[i:i + batch_size]
        results.extend(await asyncio.gather(*(processor(item) for item in batch)))
        if i + batch_size < len(items):
            await asyncio.sleep(delay)
    return results
