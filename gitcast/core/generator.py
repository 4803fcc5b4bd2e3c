"""Text generation backends and the GitCast artifact generators.

Two backends share one `Generator.generate` call:
- GeminiGenerator: Google Gemini through `langchain-google-genai` (default)
- OllamaGenerator: a local model served by Ollama, no API key needed

Provider failures are turned into `gitcast.core.errors` kinds by
`map_generation_error`, which is the only place that knows what provider
error messages look like. No call is retried.

Example:
    ```python
    from gitcast.core.generator import get_generator, generate_repository_podcast_script

    generator = get_generator("gemini", api_key="...")
    script = await generate_repository_podcast_script(repo, generator)
    ```
"""
from __future__ import annotations
from typing import Any, Callable, List, Optional, Tuple
import logging

from langchain_core.output_parsers import StrOutputParser
from langchain_core.runnables import Runnable
from langchain_google_genai import ChatGoogleGenerativeAI
from langchain_ollama.llms import OllamaLLM
from langfuse import get_client
from langfuse.langchain import CallbackHandler

from .errors import DailyQuotaExceeded, GitCastError, InvalidCredentials, RateLimited, ServiceUnavailable
from .models import ProfileAnalysis, RepositorySummary
from .prompts import (
    DEFAULT_DATE_FORMAT,
    build_presentation_prompt,
    build_profile_podcast_prompt,
    build_repository_podcast_prompt,
)

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash"

# (substrings that must all appear, error factory), checked top to bottom.
ERROR_PATTERNS: List[Tuple[Tuple[str, ...], Callable[[], GitCastError]]] = [
    (("api key not valid",),
     lambda: InvalidCredentials("Your Gemini API Key is not valid. Please check and try again.", service="gemini")),
    (("daily limit",),
     lambda: DailyQuotaExceeded("You've reached the daily request limit for your Gemini API Key. Please try again tomorrow.")),
    (("resource exhausted", "quota"),
     lambda: DailyQuotaExceeded("You've reached the daily request limit for your Gemini API Key. Please try again tomorrow.")),
    (("429",),
     lambda: RateLimited("You've exceeded the API rate limit for your key. Please wait a moment and try again.")),
    (("rate limit",),
     lambda: RateLimited("You've exceeded the API rate limit for your key. Please wait a moment and try again.")),
]


def map_generation_error(error: BaseException | str, artifact: str = "content") -> GitCastError:
    """Classify a provider failure by its message.

    Matching is case-insensitive and treats "_" like a space, so both
    "RESOURCE_EXHAUSTED" and "resource exhausted" hit the quota rule.

    Args:
        error: The provider exception, or its message.
        artifact: What was being generated, used in the fallback message.
    """
    message = str(error).lower().replace("_", " ")
    for needles, make in ERROR_PATTERNS:
        if all(n in message for n in needles):
            return make()
    return ServiceUnavailable(
        f"Failed to generate {artifact} from AI. The service may be temporarily unavailable."
    )


class Generator:
    """Base class: builds a LangChain runnable and invokes it once.

    Subclasses implement `_build_llm`. Passing `llm` bypasses it, which is
    how tests plug in fake models.
    """

    def __init__(self, tracing: bool = False, llm: Optional[Runnable] = None):
        self.tracing = tracing
        self._llm_override = llm

    def _build_llm(self, temperature: float, max_output_tokens: Optional[int]) -> Runnable:
        raise NotImplementedError

    async def generate(self, prompt: str, temperature: float = 0.7,
                       max_output_tokens: Optional[int] = None,
                       artifact: str = "content") -> str:
        """Send `prompt` and return the generated text.

        Raises:
            InvalidCredentials, DailyQuotaExceeded, RateLimited,
            ServiceUnavailable: see `map_generation_error`.
        """
        config: dict[str, Any] = {}
        if self.tracing:
            config["callbacks"] = [CallbackHandler()]
        logger.info("Generating %s (%d prompt chars)", artifact, len(prompt))
        try:
            llm = self._llm_override or self._build_llm(temperature, max_output_tokens)
            chain = llm | StrOutputParser()
            text = await chain.ainvoke(prompt, config=config)
        except GitCastError:
            raise
        except Exception as e:
            logger.error("Generation of %s failed: %s", artifact, e)
            raise map_generation_error(e, artifact) from e
        finally:
            if self.tracing:
                get_client().flush()
        logger.info("Generated %s: %d characters", artifact, len(text))
        return text


class GeminiGenerator(Generator):
    """Google Gemini backend."""

    def __init__(self, api_key: str | None, model: str = DEFAULT_MODEL,
                 tracing: bool = False, llm: Optional[Runnable] = None):
        if not api_key:
            raise InvalidCredentials("Gemini API key was not provided.", service="gemini")
        super().__init__(tracing=tracing, llm=llm)
        self.api_key = api_key
        self.model = model

    def _build_llm(self, temperature: float, max_output_tokens: Optional[int]) -> Runnable:
        kwargs: dict[str, Any] = {}
        if max_output_tokens is not None:
            kwargs["max_output_tokens"] = max_output_tokens
        return ChatGoogleGenerativeAI(
            model=self.model,
            google_api_key=self.api_key,
            temperature=temperature,
            max_retries=0,
            **kwargs,
        )


class OllamaGenerator(Generator):
    """Local Ollama backend."""

    def __init__(self, model: str = "llama3.2:3b", base_url: str = "http://localhost:11434",
                 tracing: bool = False, llm: Optional[Runnable] = None):
        super().__init__(tracing=tracing, llm=llm)
        self.model = model
        self.base_url = base_url

    def _build_llm(self, temperature: float, max_output_tokens: Optional[int]) -> Runnable:
        return OllamaLLM(
            model=self.model,
            base_url=self.base_url,
            temperature=temperature,
            num_predict=max_output_tokens,
        )


def get_generator(kind: str, **kwargs) -> Generator:
    """Factory that returns a generator backend.

    Args:
        kind: "gemini" or "ollama".
        **kwargs: Passed to the backend constructor.

    Raises:
        ValueError: If an unknown generator kind is provided.
    """
    kind = (kind or "gemini").lower()
    if kind == "gemini":
        return GeminiGenerator(**kwargs)
    if kind == "ollama":
        return OllamaGenerator(**kwargs)
    raise ValueError(f"Unknown generator kind: {kind}")


# ---- artifacts --------------------------------------------------------------

async def generate_podcast_script(analysis: ProfileAnalysis, generator: Generator) -> str:
    """Plain-text profile review podcast."""
    return await generator.generate(
        build_profile_podcast_prompt(analysis), temperature=0.7, artifact="podcast script"
    )


async def generate_repository_podcast_script(repo: RepositorySummary, generator: Generator,
                                             date_format: str = DEFAULT_DATE_FORMAT) -> str:
    """Plain-text, roughly five minute (750-900 words) repository podcast."""
    return await generator.generate(
        build_repository_podcast_prompt(repo, date_format),
        temperature=0.8, max_output_tokens=1200, artifact="podcast script",
    )


async def generate_repository_presentation(repo: RepositorySummary, generator: Generator,
                                           date_format: str = DEFAULT_DATE_FORMAT) -> str:
    """HTML fragment made of `<section>` slides."""
    return await generator.generate(
        build_presentation_prompt(repo, date_format),
        temperature=0.7, max_output_tokens=2500, artifact="presentation",
    )
