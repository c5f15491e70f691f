#!/usr/bin/env python3
"""
XR News Discord Bot

Long-running Discord client. Posts the weekly RSS digest every Monday at
09:00 Stockholm time and builds one on demand with `!news`.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

# Standard library imports
import logging
from datetime import datetime, time
from typing import Any, Protocol
from zoneinfo import ZoneInfo

# Third-party imports
import discord
from discord.ext import commands, tasks

# Local application imports
import constants as const
import util
from digest_pipeline import ConfigurationError, build_digest
from llm_provider import BackendConfig


# Initialize root logger for the application
util.setup_logger(name=None, level=None, console=True)
logger = logging.getLogger(__name__)

SCHEDULE_TZ = ZoneInfo(const.SCHEDULE_TIMEZONE)


def log_command(message: discord.Message, command_name: str) -> None:
    """Standardized logging for prefix commands."""
    user = message.author.name
    guild_name = message.guild.name if message.guild else "DM"
    guild_id = message.guild.id if message.guild else None
    logger.info(f"[{guild_name} ({guild_id})] {user} -> {command_name}")


class Messageable(Protocol):
    async def send(self, content: str) -> Any: ...


class Client(commands.Bot):
    def __init__(self, *args, feed_spec: str | None = None, backend_config: BackendConfig | None = None, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.feed_spec = feed_spec if feed_spec is not None else const.RSS_FEEDS
        self.backend_config = backend_config if backend_config else BackendConfig()
        self.news_channel_id = const.NEWS_CHANNEL_ID

    async def post_weekly_summary(self, channel: Messageable) -> None:
        """
        Build the digest and send it to a channel.

        Raises:
            ConfigurationError: RSS_FEEDS is empty
            Exception: Digest generation failed
        """
        text = await build_digest(self.feed_spec, self.backend_config)
        await channel.send(text)

    @tasks.loop(time=time(hour=const.SCHEDULE_HOUR, tzinfo=SCHEDULE_TZ))
    async def weekly_digest_task(self):
        """Post the weekly digest to the news channel (runs daily at 09:00, posts on Mondays)."""
        if datetime.now(SCHEDULE_TZ).weekday() != const.SCHEDULE_WEEKDAY:
            return

        logger.info("Running weekly digest task...")
        if not self.news_channel_id:
            logger.error("NEWS_CHANNEL_ID is not set, skipping weekly digest")
            return

        try:
            channel = await self.fetch_channel(int(self.news_channel_id))
            try:
                await self.post_weekly_summary(channel)
            except ConfigurationError as e:
                logger.warning(f"Weekly digest without configuration: {e}")
                await channel.send(const.MSG_NO_FEEDS)
                return
            logger.info(f"Weekly digest posted to channel {self.news_channel_id}")
        except Exception as e:
            logger.error(f"Error in weekly digest task: {e}", exc_info=True)

    @weekly_digest_task.before_loop
    async def before_weekly_digest(self):
        """Wait until bot is ready before starting the weekly digest task."""
        await self.wait_until_ready()

    async def on_ready(self) -> None:
        logger.info(f"Logged in as {self.user}")

        if not self.weekly_digest_task.is_running():
            self.weekly_digest_task.start()
            logger.info(f"Weekly digest scheduled: Monday {const.SCHEDULE_HOUR:02d}:00 ({const.SCHEDULE_TIMEZONE})")

    async def close(self) -> None:
        """Clean shutdown of bot resources"""
        logger.info("Shutting down bot...")

        if self.weekly_digest_task.is_running():
            self.weekly_digest_task.cancel()
            logger.info("Weekly digest task stopped")

        await super().close()

    async def on_message(self, message: discord.Message) -> None:
        if message.author.bot:
            return

        content = message.content.strip()

        if content == "!ping":
            log_command(message, "!ping")
            await message.channel.send(const.MSG_PING)

        elif content == "!news":
            log_command(message, "!news")
            await self._handle_news_command(message.channel)

    async def _handle_news_command(self, channel: Messageable) -> None:
        """
        Build a digest on demand and report failures in the channel.

        Args:
            channel: Channel the command was issued in
        """
        try:
            await channel.send(const.MSG_BUILDING)
            await self.post_weekly_summary(channel)
        except ConfigurationError as e:
            logger.warning(f"!news without configuration: {e}")
            await channel.send(const.MSG_NO_FEEDS)
        except Exception as e:
            logger.error(f"Error in !news: {e}", exc_info=True)
            await channel.send(f"{const.MSG_FAILED}\n```{e!s}```")


def main() -> None:
    # Discord permissions
    intents = discord.Intents.default()
    intents.message_content = True
    intents.guilds = True

    client = Client(command_prefix="!", intents=intents, help_command=None)

    if not const.TOKEN:
        logger.error("DISCORD_TOKEN environment variable not set")
        raise ValueError("DISCORD_TOKEN environment variable is required")

    logger.info("Starting Discord bot")
    client.run(const.TOKEN, log_handler=None)


if __name__ == "__main__":
    main()
