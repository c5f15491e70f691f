#!/usr/bin/env python3
"""
XR News CLI

Command-line tools for trying out the digest without posting to Discord.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.

Usage:
    python src/cli.py --help
    python src/cli.py feeds --limit 5
    python src/cli.py preview --model gemini/gemini-2.5-flash
"""

import asyncio
import logging
import sys

import click

# Local application imports
import constants as const
import util
from digest_pipeline import ConfigurationError, build_digest
from llm_provider import BackendConfig
from news_feed import NewsFeedAggregator


logger = logging.getLogger(__name__)


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def cli(debug):
    """
    XR News Command Line Interface

    Preview the weekly digest and check the configured RSS feeds.
    """
    util.setup_logger(name=None, level="DEBUG" if debug else None, console=True, log_file=const.CMDS_LOG_FILE)


@cli.command("feeds")
@click.option("--feeds", "feed_spec", default=None, help="Comma-separated feed URLs (default: RSS_FEEDS)")
@click.option("--limit", default=const.ARTICLES_PER_FEED, show_default=True, help="Articles shown per feed")
def feeds(feed_spec, limit):
    """
    Fetch each feed and list its latest articles.
    """
    urls = util.parse_feed_list(feed_spec if feed_spec is not None else const.RSS_FEEDS)
    if not urls:
        click.secho("No feeds configured. Set RSS_FEEDS or pass --feeds.", fg="yellow")
        sys.exit(1)

    aggregator = NewsFeedAggregator()
    total = 0

    for url in urls:
        articles = aggregator.fetch_latest(url, limit)
        total += len(articles)

        color = "green" if articles else "red"
        click.secho(f"\n{url} ({len(articles)} articles)", fg=color, bold=True)
        for article in articles:
            date = f" ({article.date[:10]})" if article.date else ""
            click.echo(f"  [{article.source}] {article.title}{date}")
            click.echo(f"    {article.link}")

    click.echo(f"\nTotal: {total} articles from {len(urls)} feeds")


@cli.command("preview")
@click.option("--feeds", "feed_spec", default=None, help="Comma-separated feed URLs (default: RSS_FEEDS)")
@click.option("--model", default=None, help=f"LiteLLM model id (default: {const.LLM_MODEL})")
def preview(feed_spec, model):
    """
    Build the weekly digest and print it instead of posting.
    """
    config = BackendConfig(model=model) if model else BackendConfig()
    feed_spec = feed_spec if feed_spec is not None else const.RSS_FEEDS

    try:
        text = asyncio.run(build_digest(feed_spec, config))
    except ConfigurationError as e:
        click.secho(f"✗ {e}", fg="yellow", err=True)
        sys.exit(1)
    except Exception as e:
        logger.error(f"Error building digest: {e}", exc_info=True)
        click.secho(f"✗ Error building digest: {e}", fg="red", err=True)
        sys.exit(1)

    click.echo(text)
    click.secho(f"\n({len(text)} characters)", fg="blue")


if __name__ == "__main__":
    cli()
