#!/usr/bin/env python3
"""
Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import os

from dotenv import load_dotenv


# Logging
LOG_FILE = "bot.log"
JOB_LOG_FILE = "weekly-job.log"
CMDS_LOG_FILE = "cmds.log"
MAX_LOG_SIZE = 10 * 1024 * 1024  # 10 MB
BACKUP_COUNT = 5

load_dotenv()

# DISCORD
TOKEN = os.getenv("DISCORD_TOKEN")
NEWS_CHANNEL_ID = os.getenv("NEWS_CHANNEL_ID")
DISCORD_API_URL = "https://discord.com/api/v10"
DISCORD_POST_TIMEOUT_SECONDS = 15

# Weekly schedule: Monday 09:00 Stockholm time
SCHEDULE_TIMEZONE = "Europe/Stockholm"
SCHEDULE_HOUR = 9
SCHEDULE_WEEKDAY = 0  # Monday

# RSS
RSS_FEEDS = os.getenv("RSS_FEEDS", "")
FEED_USER_AGENT = "vr-ar-ai-news-bot/1.0"
FEED_ACCEPT = "application/rss+xml, application/xml;q=0.9, */*;q=0.8"
FEED_TIMEOUT_SECONDS = 20
UNTITLED_ARTICLE = "(utan titel)"
ARTICLES_PER_FEED = 10
ARTICLES_TOTAL = 30

# LLM Configuration
# LLM_MODEL takes any LiteLLM model id; GEMINI_MODEL is kept for existing .env files.
# LiteLLM reads provider keys (GEMINI_API_KEY, OPENAI_API_KEY, ...) from the environment,
# LLM_API_KEY overrides them.
LLM_API_KEY = os.getenv("LLM_API_KEY")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
LLM_MODEL = os.getenv("LLM_MODEL") or f"gemini/{GEMINI_MODEL}"
LLM_MAX_ATTEMPTS = 3
LLM_RETRY_DELAYS = (1.5, 3.0)  # seconds, before attempt 2 and attempt 3

# Digest message
DIGEST_HEADER = "## 🗞️ Veckosummering (från våra källor)\n"
DIGEST_MAX_CHARS = 1900  # Discord rejects messages over 2000 characters
DIGEST_TRUNCATE_AT = 1880
DIGEST_TRUNCATION_MARKER = "\n…(trunkerat)"

# User-facing messages (Swedish)
MSG_NO_ARTICLES = "⚠️ Kunde inte läsa någon RSS-feed just nu (alla misslyckades)."
MSG_NO_FEEDS = "⚠️ Ingen RSS_FEEDS är satt i .env"
MSG_PING = "Botten är vaken! 🧠"
MSG_BUILDING = "⏳ Bygger veckosummering från RSS (senaste artiklarna)..."
MSG_FAILED = "❌ Kunde inte skapa veckosummering."
MSG_OVERLOADED = (
    "⚠️ Veckosummering kunde inte genereras just nu (Gemini överbelastad). "
    "Jag försöker igen nästa schemalagda körning."
)
