#!/usr/bin/env python3
"""
Post the weekly digest once and exit.

Meant for an external scheduler (cron, CI schedule). Posts through the
Discord REST API, so no gateway connection is needed.

Exit codes:
    0 - digest posted, or the LLM was overloaded and a notice was posted instead
    1 - any other failure

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import asyncio
import logging
import sys

import requests

import constants as const
import util
from digest_pipeline import build_digest
from llm_provider import BackendConfig
from news_digest import is_overloaded_error


logger = logging.getLogger(__name__)


class DiscordPostError(RuntimeError):
    """Raised when the Discord API rejects a message"""


def post_to_discord_channel(
    content: str,
    channel_id: str | None = None,
    token: str | None = None,
) -> None:
    """
    Post a message to a channel with the bot token.

    Args:
        content: Message text (at most 2000 characters)
        channel_id: Target channel (defaults to NEWS_CHANNEL_ID)
        token: Bot token (defaults to DISCORD_TOKEN)

    Raises:
        DiscordPostError: Missing configuration or a non-2xx response
    """
    channel_id = channel_id or const.NEWS_CHANNEL_ID
    token = token or const.TOKEN

    if not channel_id:
        raise DiscordPostError("NEWS_CHANNEL_ID is not set")
    if not token:
        raise DiscordPostError("DISCORD_TOKEN is not set")

    url = f"{const.DISCORD_API_URL}/channels/{channel_id}/messages"
    response = requests.post(
        url,
        headers={"Authorization": f"Bot {token}", "Content-Type": "application/json"},
        json={"content": content},
        timeout=const.DISCORD_POST_TIMEOUT_SECONDS,
    )

    if not response.ok:
        raise DiscordPostError(f"Discord API error ({response.status_code}): {response.text}")


def run(feed_spec: str | None = None, backend_config: BackendConfig | None = None) -> int:
    """
    Build and post the digest, returning the process exit code.
    """
    feed_spec = feed_spec if feed_spec is not None else const.RSS_FEEDS

    try:
        text = asyncio.run(build_digest(feed_spec, backend_config))
        post_to_discord_channel(text)
        logger.info("Done. Digest posted to Discord.")
        return 0

    except Exception as e:
        logger.error(f"Weekly digest failed: {e}", exc_info=True)

        if is_overloaded_error(e):
            try:
                post_to_discord_channel(const.MSG_OVERLOADED)
            except Exception as post_err:
                logger.error(f"Could not post overload notice: {post_err}")
            return 0

        return 1


def main() -> None:
    util.setup_logger(name=None, level=None, console=True, log_file=const.JOB_LOG_FILE)
    sys.exit(run())


if __name__ == "__main__":
    main()
