"""Tests for pydantic models and the detail overlay."""

import pytest
from pydantic import ValidationError

from conftest import raw_repo
from gitcast.core.models import (
    GitHubRepo,
    PinnedRepo,
    PinnedRepoNode,
    ProfileAnalysis,
    RepositoryDetail,
    RepositorySummary,
)


def summary(**overrides):
    return RepositorySummary.from_api(GitHubRepo.model_validate(raw_repo("hello", **overrides)))


class TestRepositorySummary:
    def test_from_api(self):
        s = summary(topics=["cli", "tools", "cli"], homepage="https://example.com")
        assert s.name == "hello"
        assert s.stars == 3
        assert s.forks == 1
        assert s.issues == 2
        assert s.license == "MIT"
        assert s.topics == ["cli", "tools"]
        assert s.url == "https://github.com/octocat/hello"
        assert s.homepage == "https://example.com"
        assert s.pushed_at.tzinfo is not None

    def test_is_frozen(self):
        s = summary()
        with pytest.raises(ValidationError):
            s.name = "other"

    def test_with_detail_overlays_fields(self):
        detail = RepositoryDetail(languages={"Python": 10}, recent_commits=4, contributors=2,
                                  has_readme=True, readme_content="# hi")
        merged = summary().with_detail(detail)
        assert merged.name == "hello"
        assert merged.languages == {"Python": 10}
        assert merged.recent_commits == 4
        assert merged.contributors == 2
        assert merged.has_readme is True
        assert merged.readme_content == "# hi"

    def test_with_detail_is_idempotent(self):
        detail = RepositoryDetail(languages={"Go": 99}, recent_commits=10, contributors=1)
        once = summary().with_detail(detail)
        assert once.with_detail(detail) == once

    def test_with_detail_does_not_mutate_original(self):
        base = summary()
        base.with_detail(RepositoryDetail(recent_commits=7))
        assert base.recent_commits == 0


class TestPinned:
    def test_topics_capped_at_five(self):
        node = PinnedRepoNode.model_validate({
            "name": "p",
            "description": None,
            "repositoryTopics": {"nodes": [{"topic": {"name": str(i)}} for i in range(8)]},
        })
        assert PinnedRepo.from_node(node).topics == ["0", "1", "2", "3", "4"]

    def test_analysis_rejects_more_than_six_pinned(self):
        with pytest.raises(ValidationError):
            ProfileAnalysis(user_name="a", user_login="a",
                            pinned_repos=[PinnedRepo(name=str(i)) for i in range(7)])
