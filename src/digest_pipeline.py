"""
Weekly Digest Pipeline

Shared by the Discord bot, the one-shot weekly job and the CLI:
feed list -> fetch each feed -> rank by recency -> summarize -> assemble message.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import asyncio
import logging

import constants as const
import util
from llm_provider import BackendConfig
from news_digest import NewsDigest
from news_feed import NewsArticle, NewsFeedAggregator, take_latest


logger = logging.getLogger(__name__)


class ConfigurationError(ValueError):
    """Raised when the pipeline is started without usable configuration"""


def assemble_message(header: str, body: str) -> str:
    """
    Prefix the digest with its header and cap the length for Discord.

    Messages longer than DIGEST_MAX_CHARS are cut to DIGEST_TRUNCATE_AT
    characters and marked as truncated.
    """
    message = header + body
    if len(message) > const.DIGEST_MAX_CHARS:
        message = message[: const.DIGEST_TRUNCATE_AT] + const.DIGEST_TRUNCATION_MARKER
    return message


async def collect_articles(
    feed_urls: list[str],
    aggregator: NewsFeedAggregator,
    per_feed: int = const.ARTICLES_PER_FEED,
) -> list[NewsArticle]:
    """
    Fetch feeds one at a time and pool the latest articles of each.

    Feeds that fail contribute nothing.
    """
    pool: list[NewsArticle] = []
    for url in feed_urls:
        # feedparser/requests block, keep the event loop free for the bot
        articles = await asyncio.to_thread(aggregator.fetch_latest, url, per_feed)
        pool.extend(articles)
    return pool


async def build_digest(
    feed_spec: str | None,
    backend_config: BackendConfig | None = None,
    aggregator: NewsFeedAggregator | None = None,
    digest: NewsDigest | None = None,
) -> str:
    """
    Build the weekly digest message.

    Args:
        feed_spec: Comma-separated feed URLs
        backend_config: LLM settings (defaults from the environment)
        aggregator: Feed fetcher (a default NewsFeedAggregator if None)
        digest: Digest generator (created from backend_config if None)

    Returns:
        Message ready to post, or the fixed notice when no feed yielded articles

    Raises:
        ConfigurationError: The feed list is empty
        Exception: The LLM error once the digest generator gives up
    """
    feed_urls = util.parse_feed_list(feed_spec)
    if not feed_urls:
        raise ConfigurationError("RSS_FEEDS is not set (no feed URLs configured)")

    aggregator = aggregator if aggregator else NewsFeedAggregator()

    pool = await collect_articles(feed_urls, aggregator)
    if not pool:
        logger.warning(f"No articles from any of {len(feed_urls)} feeds")
        return const.MSG_NO_ARTICLES

    latest = take_latest(pool, const.ARTICLES_TOTAL)
    logger.info(f"Collected {len(pool)} articles from {len(feed_urls)} feeds, summarizing {len(latest)}")

    digest = digest if digest else NewsDigest(config=backend_config)
    summary = await digest.generate(latest)

    return assemble_message(const.DIGEST_HEADER, summary)
