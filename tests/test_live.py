"""Live checks against real services.

Skipped unless the matching environment variable is set:
- TEST_WITH_OLLAMA: a local Ollama server with the configured model pulled
- TEST_WITH_GITHUB: GITHUB_TOKEN holds a valid personal access token
"""

import os

import httpx
import pytest

from gitcast.core.config import load_settings
from gitcast.core.generator import OllamaGenerator
from gitcast.core.github import GitHubClient, get_repository_list


@pytest.mark.skipif(not os.getenv("TEST_WITH_OLLAMA"), reason="Ollama server not available")
class TestOllama:
    def test_server_reachable(self):
        settings = load_settings()
        with httpx.Client(timeout=5.0) as client:
            response = client.get(f"{settings.ollama_base_url}/api/tags")
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_generates_text(self):
        settings = load_settings()
        generator = OllamaGenerator(model=settings.ollama_model, base_url=settings.ollama_base_url)
        text = await generator.generate("Say hello in one short sentence.", max_output_tokens=32)
        assert isinstance(text, str) and text.strip()


@pytest.mark.skipif(not os.getenv("TEST_WITH_GITHUB"), reason="GitHub token not provided")
class TestGitHub:
    @pytest.mark.asyncio
    async def test_lists_own_repositories(self):
        settings = load_settings()
        async with GitHubClient(settings.github_token or "", base_url=settings.github_api_url) as gh:
            data = await get_repository_list(gh)
        assert data.user_login
        assert len(data.repositories) <= 100
