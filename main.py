"""
Library Curator - Discord bot entry point.

Watches the recommendations channel, classifies every shared link into one
of the three libraries and posts it to that library's forum.
"""

import sys

from curator.bot.client import CuratorBot
from curator.core.db import init_db
from curator.core.logging import get_logger, setup_logging
from curator.core.settings import get_settings
from curator.pipeline.factory import build_pipeline

logger = get_logger(__name__)


def main() -> int:
    settings = get_settings()
    setup_logging()

    if not settings.discord_bot_token:
        logger.error("DISCORD_BOT_TOKEN environment variable not set")
        return 1
    if not settings.recommendations_channel_id:
        logger.warning("RECOMMENDATIONS_CHANNEL_ID not set; no messages will be processed")

    init_db(create_tables=settings.debug)
    bot = CuratorBot(build_pipeline(settings))
    # discord.py installs its own handler unless told not to
    bot.run(settings.discord_bot_token, log_handler=None)
    return 0


if __name__ == "__main__":
    sys.exit(main())
