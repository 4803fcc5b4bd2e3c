"""Command-line interface for gitcast.

This module provides the terminal front end: it parses arguments, fetches
the profile or repository data from GitHub, asks the configured generator
for a podcast script or a slide presentation, and prints, narrates or
browses the result.

Usage:
    ```bash
    # Profile analysis and profile podcast
    gitcast analyze --format md
    gitcast profile-podcast --format md

    # Repository grid, filtered
    gitcast repos --search api --language Python

    # Repository podcast, narrated in the terminal
    gitcast podcast my-repo --narrate

    # Presentation, written to a file or browsed slide by slide
    gitcast slides my-repo --out slides.html
    gitcast slides my-repo --browse
    ```

Configuration:
    The CLI supports configuration via:
    - Command-line arguments (highest priority)
    - Environment variables / .env
    - config.toml file (lowest priority)
"""
from __future__ import annotations
from typing import Callable, List, Optional
import argparse, asyncio, json, logging, os, sys

from ..core.analysis import ALL_LANGUAGES
from ..core.config import Settings, load_settings
from ..core.errors import GitCastError, InvalidCredentials
from ..core.generator import (
    Generator,
    get_generator,
    generate_podcast_script,
    generate_repository_podcast_script,
    generate_repository_presentation,
)
from ..core.github import GitHubClient, analyze_profile
from ..core.models import MAX_PINNED_ITEMS, ProfileAnalysis, RepositorySummary
from ..core.narration import TerminalSpeechEngine, estimated_minutes, get_narrator, reset_narrator, script_to_markdown
from ..core.session import RepositorySession
from ..core.slides import CLOSE_KEY, NEXT_KEY, PREVIOUS_KEY, SlideDeck, slide_text

logger = logging.getLogger(__name__)

BROWSE_KEYS = {"n": NEXT_KEY, "": NEXT_KEY, "p": PREVIOUS_KEY, "q": CLOSE_KEY}


def analysis_to_markdown(analysis: ProfileAnalysis) -> str:
    stats = analysis.repo_stats
    lines = [
        f"# {analysis.user_name} (@{analysis.user_login})",
        "",
        f"- Bio: {analysis.bio or 'not provided'}",
        f"- Profile README: {'yes' if analysis.has_profile_readme else 'missing'}",
        f"- Pinned repositories: {len(analysis.pinned_repos)}/{MAX_PINNED_ITEMS}",
    ]
    for p in analysis.pinned_repos:
        topics = f" — _{', '.join(p.topics)}_" if p.topics else ""
        lines.append(f"  - {p.name}{topics}")
    lines += [
        f"- Repositories: {stats.total}",
        f"  - with description: {stats.with_description} ({stats.description_percent}%)",
        f"  - with license: {stats.with_license} ({stats.license_percent}%)",
        "- Languages: " + (", ".join(
            f"{lang} ({count})" for lang, count in
            sorted(analysis.language_distribution.items(), key=lambda kv: kv[1], reverse=True)
        ) or "none detected"),
        f"- Activity: {analysis.activity.message}",
        f"- Open source contributions: {analysis.os_contributions} PRs",
    ]
    return "\n".join(lines)


def repos_to_markdown(repos: List[RepositorySummary]) -> str:
    """Convert a list of repositories to a Markdown bullet list."""
    lines = []
    for r in repos:
        tech = f" — _{r.language}_" if r.language else ""
        desc = f": {r.description}" if r.description else ""
        lines.append(f"- [{r.name}]({r.url}){tech}{desc} ★{r.stars}")
    return "\n".join(lines)


def _emit(payload: str, out: Optional[str], what: str = "") -> None:
    if out:
        os.makedirs(os.path.dirname(out) or ".", exist_ok=True)
        with open(out, "w", encoding="utf-8") as f:
            f.write(payload)
        print(f"wrote {out}{f' ({what})' if what else ''}")
    else:
        print(payload)


def _make_generator(settings: Settings) -> Generator:
    if settings.generator_kind.lower() == "ollama":
        return get_generator("ollama", model=settings.ollama_model,
                             base_url=settings.ollama_base_url, tracing=settings.tracing)
    return get_generator(settings.generator_kind, api_key=settings.gemini_api_key,
                         model=settings.model, tracing=settings.tracing)


def _github(settings: Settings) -> GitHubClient:
    return GitHubClient(settings.github_token or "", base_url=settings.github_api_url,
                        timeout=settings.github_timeout)


async def _load_repo(session: RepositorySession, name: str) -> RepositorySummary:
    await session.load()
    try:
        return await session.enrich(name)
    except KeyError:
        raise GitCastError(
            f"Repository '{name}' not found among {session.data.user_login}'s repositories."
        ) from None


def narrate(script: str, settings: Settings) -> None:
    """Narrate `script` in the terminal until it ends or Ctrl-C."""
    narrator = get_narrator(
        lambda: TerminalSpeechEngine(words_per_minute=settings.words_per_minute),
        rate=settings.speech_rate, pitch=settings.speech_pitch, volume=settings.speech_volume,
    )
    print(f"Estimated duration: ~{estimated_minutes(script, settings.words_per_minute)} min",
          file=sys.stderr)
    narrator.play(script)
    try:
        narrator.engine.wait()
    except KeyboardInterrupt:
        print(f"\nstopped at {narrator.progress:.0f}%", file=sys.stderr)
    finally:
        reset_narrator()


def browse(deck: SlideDeck, read: Callable[[str], str] = input) -> None:
    """Page through `deck`: n/Enter next, p previous, q quit."""
    if not len(deck):
        print("The generated presentation contains no slides.")
        return
    while True:
        print(f"\n== {deck.counter()} ==")
        print(slide_text(deck.current_slide))
        try:
            cmd = read("[n]ext [p]rev [q]uit > ").strip().lower()
        except EOFError:
            break
        key = BROWSE_KEYS.get(cmd)
        if key is not None and not deck.handle_key(key):
            break


async def run(args: argparse.Namespace, settings: Settings) -> Optional[str]:
    """Execute one command; returns a script to narrate, if any."""
    cmd = args.command
    logger.debug("Running %s", cmd)

    if cmd in ("profile-podcast", "podcast", "slides"):
        generator = _make_generator(settings)

    async with _github(settings) as gh:
        if cmd == "analyze":
            analysis = await analyze_profile(gh)
            if args.format == "json":
                _emit(json.dumps(analysis.model_dump(mode="json"), ensure_ascii=False, indent=2), None)
            else:
                _emit(analysis_to_markdown(analysis), None)

        elif cmd == "repos":
            session = RepositorySession(gh)
            await session.load()
            repos = session.filter(args.search, args.language)
            if args.details:
                repos = await session.enrich_all([r.name for r in repos], batch_size=settings.batch_size,
                                                 delay=settings.batch_delay)
            if args.format == "json":
                payload = json.dumps([r.model_dump(mode="json") for r in repos], ensure_ascii=False, indent=2)
            else:
                payload = repos_to_markdown(repos)
            _emit(payload, None)

        elif cmd == "profile-podcast":
            analysis = await analyze_profile(gh)
            script = await generate_podcast_script(analysis, generator)
            _emit(script_to_markdown(script) if args.format == "md" else script, args.out, "podcast script")

        elif cmd == "podcast":
            repo = await _load_repo(RepositorySession(gh), args.repo)
            script = await generate_repository_podcast_script(repo, generator, settings.date_format)
            if args.narrate:
                return script
            _emit(script_to_markdown(script) if args.format == "md" else script, args.out, "podcast script")

        elif cmd == "slides":
            repo = await _load_repo(RepositorySession(gh), args.repo)
            html = await generate_repository_presentation(repo, generator, settings.date_format)
            deck = SlideDeck.from_html(html)
            if args.browse:
                browse(deck)
            else:
                _emit(html, args.out, f"{len(deck)} slides")
    return None


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="gitcast", description="Podcasts and slide decks about your GitHub repositories.")
    p.add_argument("--config", help="Path to config.toml (defaults to ./config.toml if present)")
    p.add_argument("--github-token", help="GitHub personal access token (default: $GITHUB_TOKEN)")
    p.add_argument("--gemini-key", help="Gemini API key (default: $GEMINI_API_KEY)")
    p.add_argument("--generator", choices=["gemini", "ollama"], help="Generation backend")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = p.add_subparsers(dest="command", required=True)

    a = sub.add_parser("analyze", help="Analyze the token owner's GitHub profile")
    a.add_argument("--format", choices=["json", "md"], default="md", help="Output format")

    r = sub.add_parser("repos", help="List owned repositories")
    r.add_argument("--search", default="", help="Match against name or description")
    r.add_argument("--language", default=ALL_LANGUAGES, help="Primary language, or 'all'")
    r.add_argument("--details", action="store_true", help="Fetch languages, commits, contributors and README")
    r.add_argument("--format", choices=["json", "md"], default="md", help="Output format")

    pp = sub.add_parser("profile-podcast", help="Podcast reviewing the whole profile")
    pp.add_argument("--out", help="Write to file instead of stdout")
    pp.add_argument("--format", choices=["text", "md"], default="text", help="Output format")

    pc = sub.add_parser("podcast", help="Five minute podcast about one repository")
    pc.add_argument("repo", help="Repository name")
    pc.add_argument("--out", help="Write to file instead of stdout")
    pc.add_argument("--format", choices=["text", "md"], default="text", help="Output format")
    pc.add_argument("--narrate", action="store_true", help="Read the script aloud in the terminal")

    s = sub.add_parser("slides", help="HTML slide presentation about one repository")
    s.add_argument("repo", help="Repository name")
    s.add_argument("--out", help="Write the HTML to a file instead of stdout")
    s.add_argument("--browse", action="store_true", help="Browse the slides in the terminal")
    return p


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    Exits with status 2 when a credential is missing or rejected, 1 on any
    other GitCast error.
    """
    args = build_parser().parse_args(argv)

    # Load config.toml (if present) + env defaults, then CLI overrides
    settings = load_settings(args.config or "config.toml")
    if args.github_token:
        settings.github_token = args.github_token
    if args.gemini_key:
        settings.gemini_api_key = args.gemini_key
    if args.generator:
        settings.generator_kind = args.generator

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        script = asyncio.run(run(args, settings))
    except InvalidCredentials as e:
        print(f"error: {e}", file=sys.stderr)
        sys.exit(2)
    except GitCastError as e:
        print(f"error: {e}", file=sys.stderr)
        sys.exit(1)

    if script is not None:
        narrate(script, settings)


if __name__ == "__main__":
    main()
