"""In-memory state for one viewing session.

Holds the repository list and the detail overlays fetched so far. Detail is
fetched at most once per repository name; asking for both a podcast and a
presentation of the same repository reuses it. Nothing here is persisted.
"""
from __future__ import annotations
from typing import Dict, List, Optional
import logging

from .analysis import ALL_LANGUAGES, available_languages, filter_repositories
from .github import GitHubClient, get_repository_details, get_repository_list, process_batch
from .models import RepositoryDetail, RepositoryListData, RepositorySummary

logger = logging.getLogger(__name__)


class RepositorySession:
    """Repository grid state plus a by-name detail cache.

    Attributes:
        client: GitHub client used for lazy detail fetches.
        data: The list loaded by `load`, or None before that.
    """

    def __init__(self, client: GitHubClient):
        self.client = client
        self.data: Optional[RepositoryListData] = None
        self._details: Dict[str, RepositoryDetail] = {}

    async def load(self) -> RepositoryListData:
        """(Re)load the repository list; a new list drops cached detail."""
        self.data = await get_repository_list(self.client)
        self._details.clear()
        return self.data

    def _require_data(self) -> RepositoryListData:
        if self.data is None:
            raise RuntimeError("Repository list not loaded; call load() first")
        return self.data

    @property
    def repositories(self) -> List[RepositorySummary]:
        return self._require_data().repositories

    def get(self, name: str) -> RepositorySummary:
        """Return the repository called `name`, merged with any cached detail."""
        for repo in self.repositories:
            if repo.name == name:
                detail = self._details.get(name)
                return repo.with_detail(detail) if detail else repo
        raise KeyError(name)

    def is_enriched(self, name: str) -> bool:
        return name in self._details

    async def enrich(self, name: str) -> RepositorySummary:
        repo = self.get(name)
        if name not in self._details:
            logger.debug("Fetching detail for %s", name)
            self._details[name] = await get_repository_details(
                self.client, self._require_data().user_login, name
            )
        return repo.with_detail(self._details[name])

    async def enrich_all(self, names: Optional[List[str]] = None,
                         batch_size: int = 5, delay: float = 0.1) -> List[RepositorySummary]:
        """Enrich `names` (default: every repository) in paced batches."""
        if names is None:
            names = [r.name for r in self.repositories]
        return await process_batch(names, batch_size, self.enrich, delay=delay)

    def languages(self) -> List[str]:
        return available_languages(self.repositories)

    def filter(self, search: str = "", language: str = ALL_LANGUAGES) -> List[RepositorySummary]:
        return [self.get(r.name) for r in filter_repositories(self.repositories, search, language)]
