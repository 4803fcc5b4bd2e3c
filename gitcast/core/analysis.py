"""Pure derivations over repository lists.

Nothing here touches the network, so everything can be tested with plain
model instances.
"""
from __future__ import annotations
import calendar
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Protocol, Sequence

from .models import ActivityLevel, GitHubRepo, RepoStats, RepositorySummary


class _Pushed(Protocol):
    pushed_at: Optional[datetime]


def months_ago(now: datetime, months: int) -> datetime:
    """Same wall-clock time `months` calendar months before `now`.

    The day is clamped to the length of the target month (31 March minus one
    month is 28/29 February).
    """
    month_index = now.month - 1 - months
    year = now.year + month_index // 12
    month = month_index % 12 + 1
    day = min(now.day, calendar.monthrange(year, month)[1])
    return now.replace(year=year, month=month, day=day)


def _aware(value: datetime) -> datetime:
    """Naive datetimes are taken as local time."""
    return value if value.tzinfo is not None else value.astimezone()


def classify_activity(repos: Sequence[_Pushed], now: Optional[datetime] = None) -> ActivityLevel:
    """Label push recency across `repos`.

    Decision tree, thresholds are strict:
        no repos                                  -> NONE
        nothing pushed in the last 3 months       -> LOW
        >half pushed in the last month, and >5    -> EXCELLENT
        >3 pushed in the last 3 months            -> GOOD
        otherwise                                 -> SPORADIC
    """
    if not repos:
        return ActivityLevel.NONE
    now = _aware(now or datetime.now(timezone.utc))
    one_month_ago = months_ago(now, 1)
    three_months_ago = months_ago(now, 3)

    pushes = [_aware(r.pushed_at) for r in repos if r.pushed_at is not None]
    recent = sum(1 for p in pushes if p > three_months_ago)
    if recent == 0:
        return ActivityLevel.LOW

    very_recent = sum(1 for p in pushes if p > one_month_ago)
    if very_recent > len(repos) / 2 and very_recent > 5:
        return ActivityLevel.EXCELLENT
    if recent > 3:
        return ActivityLevel.GOOD
    return ActivityLevel.SPORADIC


def compute_repo_stats(repos: Sequence[GitHubRepo]) -> RepoStats:
    return RepoStats(
        total=len(repos),
        with_description=sum(1 for r in repos if r.description),
        with_license=sum(1 for r in repos if r.license is not None),
    )


def language_distribution(repos: Iterable[GitHubRepo]) -> Dict[str, int]:
    """Count repositories per primary language, skipping undetected ones."""
    dist: Dict[str, int] = {}
    for repo in repos:
        if repo.language:
            dist[repo.language] = dist.get(repo.language, 0) + 1
    return dist


def top_languages(counts: Dict[str, int], k: int = 5) -> List[tuple[str, int]]:
    """Return the `k` largest entries, ties kept in insertion order."""
    return sorted(counts.items(), key=lambda kv: kv[1], reverse=True)[:k]


# ---- repository grid ---------------------------------------------------------

ALL_LANGUAGES = "all"


def available_languages(repos: Iterable[RepositorySummary]) -> List[str]:
    return sorted({r.language for r in repos if r.language})


def filter_repositories(
    repos: Iterable[RepositorySummary],
    search: str = "",
    language: str = ALL_LANGUAGES,
) -> List[RepositorySummary]:
    """Free-text match on name/description AND exact primary language match.

    Args:
        repos: Repositories to filter, order is preserved.
        search: Case-insensitive substring; empty matches everything.
        language: A primary language, or "all".
    """
    term = search.strip().lower()
    out = []
    for repo in repos:
        matches_search = (
            not term
            or term in repo.name.lower()
            or term in (repo.description or "").lower()
        )
        matches_language = language == ALL_LANGUAGES or repo.language == language
        if matches_search and matches_language:
            out.append(repo)
    return out
