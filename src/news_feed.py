"""
News Feed Aggregator - RSS Article Fetcher and Recency Ranker

Fetches articles from the configured RSS/Atom feeds and normalizes them into
NewsArticle records. A broken or unreachable feed is logged and skipped so
one bad source never aborts the whole digest.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import logging
import time
from datetime import datetime, timezone
from typing import Any

import feedparser
import requests
from dateutil import parser as date_parser

import constants as const


logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
# Fields missing from a date string are taken from here, not from today
PARSE_DEFAULT = datetime(1970, 1, 1)


class NewsArticle:
    """Represents a single feed entry"""

    def __init__(
        self,
        source: str | None,
        title: str | None = None,
        link: str | None = None,
        date: str | None = None,
    ):
        self.source = source or ""
        self.title = title or const.UNTITLED_ARTICLE
        self.link = link or ""
        self.date = date or ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary"""
        return {
            "source": self.source,
            "title": self.title,
            "link": self.link,
            "date": self.date,
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NewsArticle):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return f"NewsArticle(source={self.source!r}, title={self.title!r}, date={self.date!r})"


def parse_article_date(value: str | None) -> datetime | None:
    """
    Parse a feed date string into an aware datetime.

    Args:
        value: RFC 822, ISO 8601 or any format dateutil understands

    Returns:
        Timezone-aware datetime (naive values are taken as UTC), or None when
        the value is empty, unparsable or carries an out-of-range UTC offset
    """
    if not value:
        return None
    try:
        parsed = date_parser.parse(value, default=PARSE_DEFAULT)
        if parsed.tzinfo is None:
            return parsed.replace(tzinfo=timezone.utc)
        return parsed.astimezone(timezone.utc)
    except (ValueError, OverflowError):
        return None


def take_latest(items: list[NewsArticle], n: int) -> list[NewsArticle]:
    """
    Return the n most recent articles.

    When at least one article carries a parsable date the whole list is sorted
    newest first, with undated articles ranked as epoch (last, but kept).
    When no article is dated the original order is preserved.

    Args:
        items: Articles in feed order
        n: Maximum number of articles to return

    Returns:
        New list with at most n articles
    """
    if n <= 0:
        return []

    stamps = [parse_article_date(item.date) for item in items]
    if any(stamp is not None for stamp in stamps):
        ranked = sorted(zip(items, stamps), key=lambda pair: pair[1] or EPOCH, reverse=True)
        return [item for item, _ in ranked[:n]]

    return list(items[:n])


def _entry_date(entry: Any) -> str:
    """Best-effort publication date: parsed time as ISO, then the raw strings"""
    parsed = entry.get("published_parsed") or entry.get("updated_parsed")
    if parsed:
        return time.strftime("%Y-%m-%dT%H:%M:%SZ", parsed)
    return entry.get("published") or entry.get("updated") or ""


class NewsFeedAggregator:
    """
    Fetches RSS/Atom feeds over HTTP and turns their entries into NewsArticle records
    """

    def __init__(
        self,
        user_agent: str = const.FEED_USER_AGENT,
        timeout: int = const.FEED_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
    ):
        """
        Initialize news aggregator

        Args:
            user_agent: User-Agent header sent to feed servers
            timeout: Request timeout in seconds
            session: Optional requests session (a plain requests.get is used if None)
        """
        self.timeout = timeout
        self.headers = {"User-Agent": user_agent, "Accept": const.FEED_ACCEPT}
        self.session = session

    def _download(self, feed_url: str) -> bytes:
        http = self.session if self.session is not None else requests
        response = http.get(feed_url, headers=self.headers, timeout=self.timeout)
        response.raise_for_status()
        return response.content

    def fetch_rss_feed(self, feed_url: str) -> list[NewsArticle]:
        """
        Fetch news from single RSS feed

        Args:
            feed_url: RSS feed URL

        Returns:
            List of NewsArticle objects, empty if the feed could not be read
        """
        try:
            feed = feedparser.parse(self._download(feed_url))

            if feed.get("bozo") and not feed.entries:
                raise ValueError(f"Malformed feed: {feed.get('bozo_exception')}")

            source = feed.feed.get("title") or feed_url
            articles = [
                NewsArticle(
                    source=source,
                    title=entry.get("title"),
                    link=entry.get("link"),
                    date=_entry_date(entry),
                )
                for entry in feed.entries
            ]

            logger.debug(f"Fetched {len(articles)} RSS articles from {feed_url}")
            return articles

        except Exception as e:
            logger.warning(f"Skipping broken/unreachable feed {feed_url}: {e}")
            return []

    def fetch_latest(self, feed_url: str, limit: int = const.ARTICLES_PER_FEED) -> list[NewsArticle]:
        """Fetch a feed and keep its `limit` most recent articles"""
        return take_latest(self.fetch_rss_feed(feed_url), limit)
