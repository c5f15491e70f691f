#!/usr/bin/env python3
"""
Tests for the Discord client commands and the weekly digest task

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import sys
import os
# Add src to path for imports (needed when running test file directly)
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src')))

import unittest
from datetime import datetime
from unittest.mock import AsyncMock, Mock, call, patch

import discord

import constants as const
from bot import SCHEDULE_TZ, Client
from digest_pipeline import ConfigurationError


def make_message(content, is_bot=False):
    message = Mock()
    message.content = content
    message.author.bot = is_bot
    message.author.name = "tester"
    message.guild = None
    message.channel.send = AsyncMock()
    return message


class TestClientCommands(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.client = Client(
            command_prefix="!",
            intents=discord.Intents.default(),
            feed_spec="https://a.example/rss",
        )

    async def test_ping(self):
        message = make_message("!ping")
        await self.client.on_message(message)
        message.channel.send.assert_awaited_once_with(const.MSG_PING)

    async def test_ignores_bots_and_other_messages(self):
        for message in (make_message("!news", is_bot=True), make_message("hello"), make_message("!newsletter")):
            await self.client.on_message(message)
            message.channel.send.assert_not_awaited()

    @patch("bot.build_digest", new_callable=AsyncMock)
    async def test_news_posts_digest(self, mock_build):
        mock_build.return_value = "Digest text"
        message = make_message("!news")

        await self.client.on_message(message)

        mock_build.assert_awaited_once_with("https://a.example/rss", self.client.backend_config)
        self.assertEqual(
            message.channel.send.await_args_list,
            [call(const.MSG_BUILDING), call("Digest text")],
        )

    @patch("bot.build_digest", new_callable=AsyncMock)
    async def test_news_without_feeds(self, mock_build):
        mock_build.side_effect = ConfigurationError("RSS_FEEDS is not set")
        message = make_message("!news")

        await self.client.on_message(message)

        message.channel.send.assert_awaited_with(const.MSG_NO_FEEDS)

    @patch("bot.build_digest", new_callable=AsyncMock)
    async def test_news_failure_shows_error_block(self, mock_build):
        mock_build.side_effect = Exception("503 Service Unavailable")
        message = make_message("!news")

        await self.client.on_message(message)

        message.channel.send.assert_awaited_with(f"{const.MSG_FAILED}\n```503 Service Unavailable```")


class TestWeeklyDigestTask(unittest.IsolatedAsyncioTestCase):
    MONDAY = datetime(2025, 1, 6, 9, 0, tzinfo=SCHEDULE_TZ)
    TUESDAY = datetime(2025, 1, 7, 9, 0, tzinfo=SCHEDULE_TZ)

    def setUp(self):
        self.client = Client(
            command_prefix="!",
            intents=discord.Intents.default(),
            feed_spec="https://a.example/rss",
        )
        self.client.news_channel_id = "123"
        self.channel = Mock()
        self.channel.send = AsyncMock()
        self.client.fetch_channel = AsyncMock(return_value=self.channel)

    @patch("bot.build_digest", new_callable=AsyncMock)
    @patch("bot.datetime")
    async def test_posts_on_monday(self, mock_datetime, mock_build):
        mock_datetime.now.return_value = self.MONDAY
        mock_build.return_value = "Digest text"

        await self.client.weekly_digest_task()

        self.client.fetch_channel.assert_awaited_once_with(123)
        self.channel.send.assert_awaited_once_with("Digest text")

    @patch("bot.build_digest", new_callable=AsyncMock)
    @patch("bot.datetime")
    async def test_skips_other_days(self, mock_datetime, mock_build):
        mock_datetime.now.return_value = self.TUESDAY

        await self.client.weekly_digest_task()

        mock_build.assert_not_awaited()
        self.channel.send.assert_not_awaited()

    @patch("bot.build_digest", new_callable=AsyncMock)
    @patch("bot.datetime")
    async def test_failure_is_logged_not_raised(self, mock_datetime, mock_build):
        mock_datetime.now.return_value = self.MONDAY
        mock_build.side_effect = Exception("401 API key not valid")

        with self.assertLogs("bot", level="ERROR"):
            await self.client.weekly_digest_task()

        self.channel.send.assert_not_awaited()

    @patch("bot.build_digest", new_callable=AsyncMock)
    @patch("bot.datetime")
    async def test_missing_feeds_posts_notice(self, mock_datetime, mock_build):
        mock_datetime.now.return_value = self.MONDAY
        mock_build.side_effect = ConfigurationError("RSS_FEEDS is not set")

        await self.client.weekly_digest_task()

        self.channel.send.assert_awaited_once_with(const.MSG_NO_FEEDS)

    @patch("bot.build_digest", new_callable=AsyncMock)
    @patch("bot.datetime")
    async def test_missing_channel_id_skips(self, mock_datetime, mock_build):
        mock_datetime.now.return_value = self.MONDAY
        self.client.news_channel_id = None

        with self.assertLogs("bot", level="ERROR"):
            await self.client.weekly_digest_task()

        self.client.fetch_channel.assert_not_awaited()
        mock_build.assert_not_awaited()


if __name__ == '__main__':
    unittest.main()
