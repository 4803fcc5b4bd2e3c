"""Configuration management for gitcast.

Settings are merged from three sources:
1. Environment variables (highest priority, `.env` is loaded first)
2. TOML configuration file (medium priority)
3. Default values (lowest priority)

Credentials (GitHub token, Gemini API key) only ever come from the
environment or from the command line, never from the TOML file.

Example config.toml:
    ```toml
    [github]
    api_url = "https://api.github.com"
    timeout = 20.0

    [generator]
    kind = "gemini"
    model = "gemini-2.5-flash"
    tracing = false

    [prompt]
    date_format = "%d/%m/%Y"

    [session]
    batch_size = 5
    batch_delay = 0.1

    [speech]
    rate = 1.0
    words_per_minute = 150

    [logging]
    level = "INFO"
    ```

Environment Variables:
    GITHUB_TOKEN: GitHub personal access token (repo + read:user scopes)
    GEMINI_API_KEY / GOOGLE_API_KEY: Gemini API key
    GITHUB_API_URL: Override the GitHub API base URL
    GITCAST_GENERATOR: Override generator kind ("gemini" or "ollama")
    GITCAST_MODEL: Override model name
    OLLAMA_MODEL: Override Ollama model name
    OLLAMA_BASE_URL: Override Ollama server URL
    LANGFUSE_PUBLIC_KEY: Enables Langfuse tracing when present
    GITCAST_LOG_LEVEL: Override log level
"""
from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
import os
import tomllib  # Python 3.11+

from dotenv import find_dotenv, load_dotenv


@dataclass
class Settings:
    """Runtime configuration derived from `config.toml` and environment.

    Values are merged with precedence: environment > config file > defaults.

    Attributes:
        github_token: GitHub personal access token.
        github_api_url: Base URL of the GitHub REST/GraphQL API.
        github_timeout: Per-request timeout in seconds.
        generator_kind: Generation backend ("gemini" or "ollama").
        gemini_api_key: API key for the Gemini backend.
        model: Gemini model name.
        ollama_model: Model name for the Ollama backend.
        ollama_base_url: Base URL for a local Ollama server.
        tracing: Whether to attach Langfuse callbacks to generation calls.
        date_format: strftime pattern used for dates in prompts.
        batch_size: Repositories enriched concurrently per batch.
        batch_delay: Pause between batches, in seconds.
        speech_rate: Narration speed multiplier.
        speech_pitch: Narration pitch.
        speech_volume: Narration volume (0.0 - 1.0).
        words_per_minute: Base narration speed.
        log_level: Root log level used by the CLI.
    """

    # GitHub
    github_token: str | None = None
    github_api_url: str = "https://api.github.com"
    github_timeout: float = 20.0

    # Generator
    generator_kind: str = "gemini"
    gemini_api_key: str | None = None
    model: str = "gemini-2.5-flash"
    ollama_model: str = "llama3.2:3b"
    ollama_base_url: str = "http://localhost:11434"
    tracing: bool = False

    # Prompt
    date_format: str = "%d/%m/%Y"

    # Session
    batch_size: int = 5
    batch_delay: float = 0.1

    # Speech
    speech_rate: float = 1.0
    speech_pitch: float = 1.0
    speech_volume: float = 1.0
    words_per_minute: int = 150

    log_level: str = "WARNING"


def load_config(path: str = "config.toml") -> dict:
    """Load a TOML config file into a dictionary.

    Args:
        path: Path to the TOML configuration file.

    Returns:
        Dictionary containing configuration data, or empty dict if file missing.
    """
    p = Path(path)
    if not p.exists():
        return {}
    with p.open("rb") as f:
        return tomllib.load(f)


def load_settings(config_path: str | None = None) -> Settings:
    """Create a `Settings` object from config file and environment variables.

    Args:
        config_path: Path to TOML config file. Defaults to "config.toml".

    Returns:
        Settings object with merged configuration from all sources.
    """
    load_dotenv(find_dotenv(usecwd=True))
    cfg = load_config(config_path or "config.toml")

    s = Settings()

    # github section
    gh = cfg.get("github", {})
    s.github_token = os.getenv("GITHUB_TOKEN") or None
    s.github_api_url = os.getenv("GITHUB_API_URL", gh.get("api_url", s.github_api_url))
    s.github_timeout = float(gh.get("timeout", s.github_timeout))

    # generator section
    gen = cfg.get("generator", {})
    s.generator_kind = os.getenv("GITCAST_GENERATOR", gen.get("kind", s.generator_kind))
    s.gemini_api_key = os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY") or None
    s.model = os.getenv("GITCAST_MODEL", gen.get("model", s.model))
    s.ollama_model = os.getenv("OLLAMA_MODEL", gen.get("ollama_model", s.ollama_model))
    s.ollama_base_url = os.getenv("OLLAMA_BASE_URL", gen.get("ollama_base_url", s.ollama_base_url))
    s.tracing = bool(os.getenv("LANGFUSE_PUBLIC_KEY")) or bool(gen.get("tracing", s.tracing))

    # prompt section
    pr = cfg.get("prompt", {})
    s.date_format = pr.get("date_format", s.date_format)

    # session section
    se = cfg.get("session", {})
    s.batch_size = int(se.get("batch_size", s.batch_size))
    s.batch_delay = float(se.get("batch_delay", s.batch_delay))

    # speech section
    sp = cfg.get("speech", {})
    s.speech_rate = float(sp.get("rate", s.speech_rate))
    s.speech_pitch = float(sp.get("pitch", s.speech_pitch))
    s.speech_volume = float(sp.get("volume", s.speech_volume))
    s.words_per_minute = int(sp.get("words_per_minute", s.words_per_minute))

    lg = cfg.get("logging", {})
    s.log_level = os.getenv("GITCAST_LOG_LEVEL", lg.get("level", s.log_level)).upper()

    return s
