"""Prompt formatting for the generative backends.

The `format_*` functions are pure: they turn a `ProfileAnalysis` or an
enriched `RepositorySummary` into the plain-text data block embedded in a
prompt. The `build_*` functions wrap that block in one of the prompt
templates below.

Example:
    ```python
    from gitcast.core.prompts import build_repository_podcast_prompt

    prompt = build_repository_podcast_prompt(repo)
    ```
"""
from __future__ import annotations
from datetime import datetime
from typing import Dict, List, Optional
from textwrap import dedent

from langchain_core.prompts import PromptTemplate

from .analysis import top_languages
from .models import MAX_PINNED_ITEMS, ProfileAnalysis, RepositorySummary

README_PREVIEW_CHARS = 1000
DEFAULT_DATE_FORMAT = "%d/%m/%Y"


def readme_preview(text: Optional[str], limit: int = README_PREVIEW_CHARS) -> str:
    """First `limit` characters of `text`, with "..." only if it was cut."""
    if not text:
        return "No README available"
    return text[:limit] + ("..." if len(text) > limit else "")


def language_breakdown(languages: Dict[str, int], k: int = 5) -> List[str]:
    """Top `k` languages by bytes as "Name (12.3%)", largest first."""
    total = sum(languages.values())
    out = []
    for lang, size in top_languages(languages, k):
        pct = f"{size / total * 100:.1f}" if total > 0 else "0"
        out.append(f"{lang} ({pct}%)")
    return out


def _date(value: Optional[datetime], fmt: str) -> str:
    """Format `value` as a date in the local timezone."""
    return value.astimezone().strftime(fmt) if value else "Unknown"


def format_analysis_for_prompt(analysis: ProfileAnalysis) -> str:
    stats = analysis.repo_stats
    languages = [f"{lang}: {count} repos" for lang, count in top_languages(analysis.language_distribution)]
    pinned = "\n".join(
        f"      - {p.name}: {'Has description.' if p.description else 'Missing description.'} "
        f"Topics: {', '.join(p.topics) or 'None'}."
        for p in analysis.pinned_repos
    )
    readme = ("Exists and is set up correctly." if analysis.has_profile_readme
              else "Missing. This is a huge opportunity!")
    lines = [
        f"- User Name: {analysis.user_name}",
        f"- User Bio: {analysis.bio or 'Not provided.'}",
        f"- Profile README: {readme}",
        f"- Pinned Repositories: {len(analysis.pinned_repos)}/{MAX_PINNED_ITEMS} pinned.",
    ]
    if pinned:
        lines.append(pinned)
    lines += [
        "- Repository Stats:",
        f"  - Total Repos: {stats.total}",
        f"  - With a description: {stats.with_description} ({stats.description_percent}%)",
        f"  - With a license: {stats.with_license} ({stats.license_percent}%)",
        f"- Top Languages: {'; '.join(languages) or 'No languages detected.'}",
        f"- Recent Activity Summary: {analysis.activity.message}",
        f"- Open Source Contributions (PRs to other public repos): {analysis.os_contributions}",
    ]
    return "\n".join(lines)


def format_repository_for_prompt(repo: RepositorySummary, date_format: str = DEFAULT_DATE_FORMAT) -> str:
    """Describe one repository, including whatever detail overlay it carries."""
    breakdown = language_breakdown(repo.languages)
    return "\n".join([
        f"Repository: {repo.name}",
        f"Description: {repo.description or 'No description provided'}",
        f"Primary Language: {repo.language or 'Not specified'}",
        f"Language Breakdown: {', '.join(breakdown) or 'Not available'}",
        "",
        "Stats:",
        f"- Stars: {repo.stars}",
        f"- Forks: {repo.forks}",
        f"- Open Issues: {repo.issues}",
        f"- Contributors: {repo.contributors or 'Not available'}",
        f"- Recent Commits (last 10): {repo.recent_commits or 'Not available'}",
        "",
        "Additional Info:",
        f"- License: {repo.license or 'No license'}",
        f"- Topics/Tags: {', '.join(repo.topics) or 'None'}",
        f"- Created: {_date(repo.created_at, date_format)}",
        f"- Last Updated: {_date(repo.updated_at, date_format)}",
        f"- Last Push: {_date(repo.pushed_at, date_format)}",
        f"- Has README: {'Yes' if repo.has_readme else 'No'}",
        f"- Homepage: {repo.homepage or 'None'}",
        "",
        "README Preview:",
        readme_preview(repo.readme_content),
    ])


# ---- templates ---------------------------------------------------------------

PROFILE_PODCAST_TEMPLATE = PromptTemplate.from_template(dedent("""
    You are "GitCast", a friendly, encouraging, and sharp AI that creates personalized mini-podcasts for GitHub users to improve their profiles. Your tone is like a helpful tech mentor: positive, clear, and actionable.

    The user's name is {user_name}.

    Based on the following analysis data, generate a podcast script. The script must be plain text only.

    **Analysis Data:**
    {analysis}

    **Podcast Script Structure:**
    1.  **Intro:** Start with a friendly, energetic greeting. Mention the user's name. Use a sound effect in brackets like [Upbeat intro music].
    2.  **Body - Strengths & Insights:** Start with the positive. Highlight 2-3 specific strengths from the analysis (e.g., "excellent open source contributions," "great profile README," "clear specialization in a language"). Then, provide insights. For example, if Python is dominant, mention their clear expertise.
    3.  **Body - Actionable Suggestions:** Gently transition to areas for improvement. Provide 2-3 specific, actionable suggestions. Instead of "add descriptions," say "Your repo 'project-A' could attract more attention with a short description." or "I noticed many repos are missing a license. Adding an MIT license is a quick way to make your code more reusable."
    4.  **Call to Action Summary:** Create a clear, numbered list of the 2-3 most important actions for the user to take this week.
    5.  **Outro:** End on a high note. Be encouraging and sign off. Use a sound effect like [Outro music fades in].

    **Constraint:** The entire output must be a single block of plain text. Do not use Markdown, JSON, or any other formatting. Just the script.
""").strip())

REPOSITORY_PODCAST_TEMPLATE = PromptTemplate.from_template(dedent("""
    You are "GitCast", a friendly and insightful tech podcaster who reviews GitHub repositories.
    Create a 5-minute podcast script (approximately 750-900 words) analyzing this repository.

    **Repository Data:**
    {repository}

    **Podcast Script Requirements:**
    1. **Length:** The script must be exactly 5 minutes when read aloud (750-900 words). This is CRITICAL.
    2. **Format:** Plain text only. No markdown, JSON, or special formatting.
    3. **Tone:** Conversational, like a tech YouTuber reviewing code - friendly, honest, insightful.

    **Structure:**
    1. **Intro (30 seconds):** Welcome + repository name + quick hook about what makes it interesting. Add [Intro music] at start.
    2. **Overview (1 minute):** What does this repo do? What problem does it solve? Main technologies used.
    3. **Deep Dive (2 minutes):**
       - Code quality observations (based on languages, structure, README quality)
       - Activity and maintenance (commits, contributors, last update)
       - Community engagement (stars, forks, issues)
       - Strengths you noticed
    4. **Constructive Feedback (1 minute):** 2-3 specific suggestions for improvement:
       - Documentation gaps
       - Missing features or best practices
       - License/topics/description improvements
       - Community building opportunities
    5. **Wrap-up (30 seconds):** Summary + who would benefit from this project. Add [Outro music] at end.

    **Important:**
    - Be specific, not generic
    - Use actual data from the repository
    - Balance praise with constructive criticism
    - Make it sound natural and conversational
    - Keep it to exactly 5 minutes (750-900 words)
""").strip())

PRESENTATION_TEMPLATE = PromptTemplate.from_template(dedent("""
    Generate a comprehensive presentation about this GitHub repository in HTML slide format.

    **Repository Data:**
    {repository}

    **Output Requirements:**
    Return ONLY the HTML slides content (the content that goes inside the slides container).
    Each slide should be a <section> element.
    Use Tailwind CSS classes for styling (the parent will have Tailwind loaded).

    **Slide Structure (8-10 slides):**
    1. Title slide: Repository name + tagline
    2. Overview: What it does, key features
    3. Technical Stack: Languages, frameworks, tools
    4. Key Metrics: Stars, forks, contributors, activity
    5. Code Quality & Documentation
    6. Strengths & Highlights (2-3 specific points)
    7. Areas for Improvement (2-3 constructive suggestions)
    8. Community & Impact
    9. Conclusion & Recommendations

    **Styling Guidelines:**
    - Each slide: bg-slate-900 text-white p-12 min-h-screen flex flex-col justify-center
    - Headings: text-4xl font-bold mb-6
    - Subheadings: text-2xl font-semibold mb-4
    - Body text: text-lg text-slate-300
    - Use emojis sparingly for visual interest
    - Use color accents: text-blue-400, text-green-400, text-yellow-400, text-red-400

    Return ONLY the HTML for the slides (multiple <section> elements), nothing else.
""").strip())


def build_profile_podcast_prompt(analysis: ProfileAnalysis) -> str:
    return PROFILE_PODCAST_TEMPLATE.format(
        user_name=analysis.user_name,
        analysis=format_analysis_for_prompt(analysis),
    )


def build_repository_podcast_prompt(repo: RepositorySummary, date_format: str = DEFAULT_DATE_FORMAT) -> str:
    return REPOSITORY_PODCAST_TEMPLATE.format(repository=format_repository_for_prompt(repo, date_format))


def build_presentation_prompt(repo: RepositorySummary, date_format: str = DEFAULT_DATE_FORMAT) -> str:
    return PRESENTATION_TEMPLATE.format(repository=format_repository_for_prompt(repo, date_format))
