"""
News Digest Generator - LLM-Powered Summarization

Turns a ranked batch of feed articles into a short Swedish weekly summary
using the configured LLM. Retries a bounded number of times when the backend
reports that it is overloaded.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable

import constants as const
from llm_provider import BackendConfig, LLMProvider
from news_feed import NewsArticle


logger = logging.getLogger(__name__)

PROMPT_TEMPLATE = """
Du skriver en VECKOSUMMERING för utvecklare inom VR/AR/XR/AI.
Utgå ENBART från artikellistan nedan (gissa inte).

KRAV:
- Svara på svenska
- Max 5 punkter
- Max 1–2 meningar per punkt
- Totalt MAX 1500 tecken
- Fokusera på dev-relevanta saker (SDK, standarder, ramverk, verktyg, plattformar, releases)
- Om listan är tunn: skriv färre punkter hellre än att hitta på
- Avsluta med: "Källor:" och lista 3–6 viktigaste länkar

ARTIKLAR:
{articles}
"""


def format_article_listing(articles: list[NewsArticle]) -> str:
    """
    Render articles as a numbered listing for the prompt.

    Each entry is "N. [source] title (YYYY-MM-DD)" followed by the link on its
    own line. The date is the first 10 characters of the raw value.
    """
    lines = []
    for index, article in enumerate(articles, start=1):
        date_suffix = f" ({article.date[:10]})" if article.date else ""
        lines.append(f"{index}. [{article.source}] {article.title}{date_suffix}\n{article.link}")
    return "\n\n".join(lines)


def build_prompt(articles: list[NewsArticle]) -> str:
    return PROMPT_TEMPLATE.format(articles=format_article_listing(articles))


def is_overloaded_error(error: BaseException) -> bool:
    """True when the error message says the backend is overloaded or unavailable (HTTP 503)"""
    message = str(error)
    lowered = message.lower()
    return "503" in message or "overloaded" in lowered or "unavailable" in lowered


class NewsDigest:
    """
    Generate AI-powered news digests from feed articles
    """

    def __init__(
        self,
        provider: LLMProvider | None = None,
        config: BackendConfig | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """
        Initialize news digest generator

        Args:
            provider: LLM provider (created from config if None)
            config: Backend settings used when no provider is given
            sleep: Coroutine used to wait between attempts
        """
        self.provider = provider if provider else LLMProvider(config)
        self.sleep = sleep
        self.max_attempts = const.LLM_MAX_ATTEMPTS
        self.retry_delays = const.LLM_RETRY_DELAYS

    async def generate(self, articles: list[NewsArticle]) -> str:
        """
        Summarize articles into a digest.

        Args:
            articles: Ranked articles to summarize

        Returns:
            Raw response text from the LLM

        Raises:
            Exception: The backend error, immediately for non-overload errors,
                or the last one after all attempts failed
        """
        prompt = build_prompt(articles)
        logger.info(f"Generating digest from {len(articles)} articles with {self.provider.litellm_model}")

        for attempt in range(1, self.max_attempts + 1):
            try:
                return await self.provider.complete_text(prompt)
            except Exception as e:
                if not is_overloaded_error(e) or attempt == self.max_attempts:
                    raise

                delay = self.retry_delays[attempt - 1]
                logger.warning(
                    f"LLM overloaded (attempt {attempt}/{self.max_attempts}), retrying in {delay}s"
                )
                await self.sleep(delay)

        # max_attempts is always >= 1, so the loop returns or raises
        raise RuntimeError("no digest attempts were made")
