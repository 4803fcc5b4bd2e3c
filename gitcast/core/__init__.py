"""Core functionality for GitCast.

This module contains the core business logic for:
- GitHub API interactions and profile analysis
- Prompt formatting and AI generation
- Slide extraction and narration playback
- Configuration management
"""

from .config import Settings, load_settings
from .errors import (
    DailyQuotaExceeded,
    GitCastError,
    InvalidCredentials,
    NotFound,
    RateLimited,
    RemoteError,
    ServiceUnavailable,
)
from .github import GitHubClient, analyze_profile, get_repository_details, get_repository_list
from .generator import (
    get_generator,
    generate_podcast_script,
    generate_repository_podcast_script,
    generate_repository_presentation,
    map_generation_error,
)
from .session import RepositorySession
from .slides import SlideDeck, parse_slides

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
