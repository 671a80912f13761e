"""
Discord adapter: listens to the recommendations channel and runs the
synchronous pipeline on a worker thread for each shared link.
"""

from __future__ import annotations

import asyncio

import discord
from discord.ext import commands

from curator.core.logging import get_logger
from curator.models.contracts import ProcessingStatus
from curator.pipeline.factory import Pipeline
from curator.pipeline.submission_processor import ProcessingOutcome, Submission
from curator.services.library_tags import get_library
from curator.utils.discord_links import message_link
from curator.utils.error_logger import log_error
from curator.utils.url_utils import extract_first_url

logger = get_logger(__name__)

PROCESSING_REACTION = "👀"
SUCCESS_REACTION = "✅"
FAILURE_REACTION = "❌"


def to_submission(message: discord.Message) -> Submission:
    guild_id = str(message.guild.id) if message.guild else None
    return Submission(
        source_message_id=str(message.id),
        channel_id=str(message.channel.id),
        raw_text=message.content,
        submitter_id=str(message.author.id),
        submitter_name=message.author.display_name,
        message_link=message_link(guild_id, str(message.channel.id), str(message.id)),
    )


def success_reply(outcome: ProcessingOutcome, guild_id: str | None) -> str:
    library = "the library"
    if outcome.library_type:
        library = get_library(outcome.library_type).display_name
    link = message_link(guild_id, outcome.forum_channel_id, outcome.thread_id)
    thread = link or f"<#{outcome.thread_id}>"
    return (
        f"✅ Your recommendation has been added to **{library}**!\n\n"
        f"📚 Continue the discussion here: {thread}"
    )


class RecommendationCog(commands.Cog):
    def __init__(self, bot: commands.Bot, pipeline: Pipeline):
        self.bot = bot
        self.pipeline = pipeline
        self.settings = pipeline.settings
        self._backfill_task: asyncio.Task | None = None

    @commands.Cog.listener()
    async def on_ready(self):
        logger.info(f"Bot is ready! Logged in as {self.bot.user}")

        try:
            missing = await asyncio.to_thread(self.pipeline.publisher.check_forum_tags)
        except Exception as e:
            log_error("discord_bot", e, operation="check_forum_tags")
        else:
            if any(missing.values()):
                logger.warning("Some library tags are missing from their forums; see above")

        # on_ready fires again after every reconnect
        if self.settings.backfill_enabled and self._backfill_task is None:
            self._backfill_task = asyncio.create_task(self._run_backfill())
            self._backfill_task.add_done_callback(self._on_backfill_done)

    async def _run_backfill(self):
        return await asyncio.to_thread(self.pipeline.backfill().run)

    @staticmethod
    def _on_backfill_done(task: asyncio.Task) -> None:
        if task.cancelled():
            logger.warning("Backfill task was cancelled")
            return
        error = task.exception()
        if error is not None:
            log_error("backfill", error, operation="run")
            return
        result = task.result()
        logger.info(
            f"Backfill completed: checked={result.checked} processed={result.processed} "
            f"skipped={result.skipped} retried={result.retried} errors={result.errors}",
            extra={
                "component": "backfill",
                "operation": "run",
                "context_data": {
                    "checked": result.checked,
                    "processed": result.processed,
                    "skipped": result.skipped,
                    "retried": result.retried,
                    "errors": result.errors,
                    "limit_reached": result.limit_reached,
                },
            },
        )

    def is_recommendation(self, message: discord.Message) -> bool:
        if message.author.bot:
            return False
        channel_id = self.settings.recommendations_channel_id
        if not channel_id or str(message.channel.id) != channel_id:
            return False
        return extract_first_url(message.content) is not None

    @commands.Cog.listener()
    async def on_message(self, message: discord.Message):
        if not self.is_recommendation(message):
            return
        await self.handle_recommendation(message)

    async def handle_recommendation(self, message: discord.Message) -> ProcessingOutcome | None:
        logger.info(
            f"Handling recommendation message {message.id} from {message.author}",
            extra={
                "component": "discord_bot",
                "operation": "handle_recommendation",
                "item_id": str(message.id),
            },
        )
        await self._react(message, PROCESSING_REACTION)

        try:
            outcome = await asyncio.to_thread(self.pipeline.processor.process, to_submission(message))
        except Exception as e:
            log_error("discord_bot", e, operation="handle_recommendation", item_id=str(message.id))
            outcome = None

        await self._unreact(message, PROCESSING_REACTION)
        guild_id = str(message.guild.id) if message.guild else None

        if outcome is not None and outcome.status == ProcessingStatus.SKIPPED:
            logger.debug(f"Message {message.id} skipped: {outcome.error or 'already handled'}")
            return outcome

        if outcome is not None and outcome.status == ProcessingStatus.PUBLISHED:
            await self._react(message, SUCCESS_REACTION)
            await self._reply(message, success_reply(outcome, guild_id))
            return outcome

        await self._react(message, FAILURE_REACTION)
        await self._reply(
            message,
            "⚠️ Sorry, I encountered an error processing this recommendation. "
            "Please check the URL and try again.",
        )
        return outcome

    async def _react(self, message: discord.Message, emoji: str) -> None:
        try:
            await message.add_reaction(emoji)
        except discord.HTTPException as e:
            logger.debug(f"Could not add {emoji} reaction to {message.id}: {e}")

    async def _unreact(self, message: discord.Message, emoji: str) -> None:
        if self.bot.user is None:
            return
        try:
            await message.remove_reaction(emoji, self.bot.user)
        except discord.HTTPException as e:
            logger.debug(f"Could not remove {emoji} reaction from {message.id}: {e}")

    async def _reply(self, message: discord.Message, content: str) -> None:
        try:
            await message.reply(content, mention_author=False)
        except discord.HTTPException as e:
            logger.debug(f"Could not reply to {message.id}: {e}")


class CuratorBot(commands.Bot):
    def __init__(self, pipeline: Pipeline):
        intents = discord.Intents.default()
        intents.message_content = True
        super().__init__(command_prefix="!", intents=intents)
        self.pipeline = pipeline

    async def setup_hook(self):
        await self.add_cog(RecommendationCog(self, self.pipeline))

    async def close(self):
        await super().close()
        self.pipeline.close()
