"""Data structures for GitHub payloads and the derived GitCast views.

Raw API payloads are narrowed into explicit pydantic models at the client
boundary (`GitHubUser`, `GitHubRepo`, `PinnedItemsResponse`, ...). The rest
of the package only works with the domain models defined further down:

- `RepositorySummary`: one repository as shown in the grid, immutable.
- `RepositoryDetail`: the lazily fetched overlay (languages, commits,
  contributors, README). Merged onto a summary with `with_detail`.
- `ProfileAnalysis`: the aggregate built by `analyze_profile`.

Example:
    ```python
    summary = RepositorySummary.from_api(GitHubRepo.model_validate(raw))
    summary = summary.with_detail(RepositoryDetail(languages={"Python": 1200}))
    ```
"""
from __future__ import annotations
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

MAX_PINNED_ITEMS = 6
MAX_PINNED_TOPICS = 5


# ---- raw GitHub payloads ----------------------------------------------------

class GitHubUser(BaseModel):
    """`GET /user`."""

    login: str
    name: Optional[str] = None
    bio: Optional[str] = None


class GitHubLicense(BaseModel):
    spdx_id: Optional[str] = None


class GitHubRepo(BaseModel):
    """One entry of `GET /users/{login}/repos`."""

    name: str
    description: Optional[str] = None
    license: Optional[GitHubLicense] = None
    language: Optional[str] = None
    fork: bool = False
    stargazers_count: int = 0
    forks_count: int = 0
    open_issues_count: int = 0
    html_url: str = ""
    homepage: Optional[str] = None
    topics: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    pushed_at: Optional[datetime] = None
    default_branch: str = "main"


class GitHubSearchResponse(BaseModel):
    total_count: int = 0


class GitHubReadme(BaseModel):
    """`GET /repos/{owner}/{repo}/readme`."""

    content: str = ""
    encoding: Optional[str] = None


class _Topic(BaseModel):
    name: str


class _TopicNode(BaseModel):
    topic: _Topic


class _TopicConnection(BaseModel):
    nodes: List[_TopicNode] = Field(default_factory=list)


class PinnedRepoNode(BaseModel):
    """A node of the `pinnedItems` GraphQL connection."""

    name: str
    description: Optional[str] = None
    repositoryTopics: _TopicConnection = Field(default_factory=_TopicConnection)


class _PinnedConnection(BaseModel):
    nodes: List[PinnedRepoNode] = Field(default_factory=list)


class _PinnedUser(BaseModel):
    pinnedItems: _PinnedConnection = Field(default_factory=_PinnedConnection)


class _PinnedData(BaseModel):
    user: Optional[_PinnedUser] = None


class PinnedItemsResponse(BaseModel):
    """Whole GraphQL response body for the pinned items query."""

    data: Optional[_PinnedData] = None
    errors: Optional[List[dict]] = None

    def nodes(self) -> List[PinnedRepoNode]:
        if self.data is None or self.data.user is None:
            return []
        return self.data.user.pinnedItems.nodes


# ---- domain models ----------------------------------------------------------

class PinnedRepo(BaseModel):
    name: str
    description: Optional[str] = None
    topics: List[str] = Field(default_factory=list)

    @classmethod
    def from_node(cls, node: PinnedRepoNode) -> "PinnedRepo":
        topics = [n.topic.name for n in node.repositoryTopics.nodes][:MAX_PINNED_TOPICS]
        return cls(name=node.name, description=node.description, topics=topics)


def percentage(part: int, total: int) -> int:
    """Rounded percentage of `part` in `total`; 0 when `total` is 0."""
    if total <= 0:
        return 0
    return round(part / total * 100)


class RepoStats(BaseModel):
    """Counts over the owned repository list."""

    total: int = 0
    with_description: int = 0
    with_license: int = 0

    @property
    def description_percent(self) -> int:
        return percentage(self.with_description, self.total)

    @property
    def license_percent(self) -> int:
        return percentage(self.with_license, self.total)


class ActivityLevel(str, Enum):
    """Coarse push-recency label, see `analysis.classify_activity`."""

    NONE = "none"
    LOW = "low"
    EXCELLENT = "excellent"
    GOOD = "good"
    SPORADIC = "sporadic"

    @property
    def message(self) -> str:
        return ACTIVITY_MESSAGES[self]


ACTIVITY_MESSAGES = {
    ActivityLevel.NONE: "No recent activity found.",
    ActivityLevel.LOW: "Activity has been low in the past 3 months.",
    ActivityLevel.EXCELLENT: "Excellent! Activity has been very consistent and recent.",
    ActivityLevel.GOOD: "Good! There's consistent activity over the last few months.",
    ActivityLevel.SPORADIC: "Activity seems a bit sporadic. There have been some updates in the last 3 months.",
}


class ProfileAnalysis(BaseModel):
    """Everything the profile podcast prompt needs, rebuilt on every request."""

    user_name: str
    user_login: str
    bio: Optional[str] = None
    has_profile_readme: bool = False
    pinned_repos: List[PinnedRepo] = Field(default_factory=list, max_length=MAX_PINNED_ITEMS)
    repo_stats: RepoStats = Field(default_factory=RepoStats)
    language_distribution: Dict[str, int] = Field(default_factory=dict)
    activity: ActivityLevel = ActivityLevel.NONE
    os_contributions: int = 0


class RepositoryDetail(BaseModel):
    """Best-effort enrichment for one repository.

    Every field has an empty default so a failed sub-fetch never leaks a
    `None` into prompt formatting.
    """

    languages: Dict[str, int] = Field(default_factory=dict)
    recent_commits: int = 0
    contributors: int = 0
    has_readme: bool = False
    readme_content: Optional[str] = None


class RepositorySummary(BaseModel):
    """Display model for one owned repository.

    `name` is the merge key for the detail overlay. Instances are frozen;
    `with_detail` returns a new summary.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    description: Optional[str] = None
    language: Optional[str] = None
    stars: int = 0
    forks: int = 0
    issues: int = 0
    license: Optional[str] = None
    topics: List[str] = Field(default_factory=list)
    url: str = ""
    homepage: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    pushed_at: Optional[datetime] = None
    default_branch: str = "main"

    # detail overlay, populated on demand
    languages: Dict[str, int] = Field(default_factory=dict)
    recent_commits: int = 0
    contributors: int = 0
    has_readme: bool = False
    readme_content: Optional[str] = None

    @field_validator("topics")
    @classmethod
    def _dedupe_topics(cls, v: List[str]) -> List[str]:
        return list(dict.fromkeys(v))

    @classmethod
    def from_api(cls, repo: GitHubRepo) -> "RepositorySummary":
        return cls(
            name=repo.name,
            description=repo.description,
            language=repo.language,
            stars=repo.stargazers_count,
            forks=repo.forks_count,
            issues=repo.open_issues_count,
            license=repo.license.spdx_id if repo.license else None,
            topics=repo.topics,
            url=repo.html_url,
            homepage=repo.homepage,
            created_at=repo.created_at,
            updated_at=repo.updated_at,
            pushed_at=repo.pushed_at,
            default_branch=repo.default_branch,
        )

    def with_detail(self, detail: RepositoryDetail) -> "RepositorySummary":
        """Overlay `detail` onto this summary. Applying it twice is a no-op."""
        return self.model_copy(update=detail.model_dump())


class RepositoryListData(BaseModel):
    user_name: str
    user_login: str
    repositories: List[RepositorySummary] = Field(default_factory=list)
