"""GitCast: podcasts and slide decks about your GitHub repositories.

Authenticates against the GitHub API with a personal access token, analyzes
the profile and its repositories, and asks a text-generation model for a
narrated podcast script or an HTML slide presentation. Usable both as a
command-line tool and as a Python SDK.

Features:
    - Profile analysis (pinned repos, stats, languages, activity)
    - Lazy per-repository detail (languages, commits, contributors, README)
    - Gemini (default) or local Ollama generation backends
    - Terminal narration and slide browsing

Quick Start:
    ```python
    import asyncio
    import gitcast

    async def main():
        async with gitcast.GitHubClient(token) as gh:
            session = gitcast.RepositorySession(gh)
            await session.load()
            repo = await session.enrich("my-repo")
        generator = gitcast.get_generator("gemini", api_key=gemini_key)
        print(await gitcast.generate_repository_podcast_script(repo, generator))

    asyncio.run(main())
    ```

CLI Usage:
    ```bash
    gitcast analyze --format md
    gitcast repos --language Python
    gitcast podcast my-repo --narrate
    gitcast slides my-repo --out slides.html
    ```
"""

__version__ = "0.1.0"

# Re-export main functionality for easy importing
from .core import (
    Settings,
    load_settings,
    GitCastError,
    InvalidCredentials,
    RateLimited,
    DailyQuotaExceeded,
    RemoteError,
    NotFound,
    ServiceUnavailable,
    GitHubClient,
    analyze_profile,
    get_repository_list,
    get_repository_details,
    get_generator,
    generate_podcast_script,
    generate_repository_podcast_script,
    generate_repository_presentation,
    map_generation_error,
    RepositorySession,
    SlideDeck,
    parse_slides,
)

__all__ = [
    "Settings",
    "load_settings",
    "GitCastError",
    "InvalidCredentials",
    "RateLimited",
    "DailyQuotaExceeded",
    "RemoteError",
    "NotFound",
    "ServiceUnavailable",
    "GitHubClient",
    "analyze_profile",
    "get_repository_list",
    "get_repository_details",
    "get_generator",
    "generate_podcast_script",
    "generate_repository_podcast_script",
    "generate_repository_presentation",
    "map_generation_error",
    "RepositorySession",
    "SlideDeck",
    "parse_slides",
]
