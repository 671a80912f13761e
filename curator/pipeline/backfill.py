"""
Replay recommendations posted while the bot was offline.

Walks the recommendations channel backwards from the newest message until
the last published timestamp (or the message cap), then feeds every unseen
message that carries a URL through the submission pipeline, oldest first.
Stored recommendations that failed earlier and still have attempts left are
retried afterwards.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime

from curator.core.logging import get_logger
from curator.core.settings import Settings
from curator.errors import DiscordApiError
from curator.models.contracts import ProcessingStatus
from curator.models.forum import ChatMessage
from curator.pipeline.submission_processor import Submission, SubmissionProcessor
from curator.repositories.recommendation_repository import RecommendationRepository
from curator.services.discord_api import MAX_MESSAGES_PER_PAGE, DiscordApiClient
from curator.utils.discord_links import message_link
from curator.utils.error_logger import log_error, log_processing_error
from curator.utils.url_utils import SYNTHETIC_ID_PREFIX, extract_urls

logger = get_logger(__name__)


@dataclass
class BackfillResult:
    checked: int = 0
    processed: int = 0
    skipped: int = 0
    errors: int = 0
    retried: int = 0
    limit_reached: bool = False


def _as_utc(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    # processed_at is stored as naive UTC
    return value if value.tzinfo else value.replace(tzinfo=UTC)


class BackfillReconciler:
    def __init__(
        self,
        discord_api: DiscordApiClient,
        repository: RecommendationRepository,
        processor: SubmissionProcessor,
        settings: Settings,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.discord_api = discord_api
        self.repository = repository
        self.processor = processor
        self.settings = settings
        self.sleep = sleep

    def run(self) -> BackfillResult:
        channel_id = self.settings.recommendations_channel_id
        if not channel_id:
            logger.warning("Backfill skipped: RECOMMENDATIONS_CHANNEL_ID is not configured")
            return BackfillResult()

        started = time.monotonic()
        boundary = _as_utc(self.repository.get_last_published_timestamp())
        max_messages = self.settings.backfill_max_messages
        if boundary:
            logger.info(f"Backfilling recommendations posted after {boundary.isoformat()}")
        else:
            logger.info(f"No published recommendations yet, checking the last {max_messages} messages")

        messages = self.fetch_messages_after(channel_id, boundary, max_messages)
        result = BackfillResult(checked=len(messages), limit_reached=len(messages) >= max_messages)

        candidates = [m for m in messages if not m.author_is_bot and extract_urls(m.content)]
        existing = self.repository.find_existing_identities(m.id for m in candidates)
        pending = [m for m in candidates if m.id not in existing]
        result.skipped = result.checked - len(pending)

        logger.info(
            f"{len(pending)} of {len(candidates)} messages with URLs need backfill",
            extra={
                "component": "backfill",
                "operation": "run",
                "context_data": {
                    "checked": result.checked,
                    "with_urls": len(candidates),
                    "already_known": len(existing),
                },
            },
        )

        for index, message in enumerate(pending, start=1):
            self._process(self._to_submission(message), result, "process_historical_message")
            if index % 10 == 0:
                logger.info(f"Backfill progress: {index}/{len(pending)}")

        self.retry_stored(result, handled={m.id for m in pending})

        logger.info(
            f"Backfill finished in {time.monotonic() - started:.1f}s: "
            f"checked={result.checked} processed={result.processed} "
            f"skipped={result.skipped} retried={result.retried} "
            f"errors={result.errors} limit_reached={result.limit_reached}"
        )
        return result

    def retry_stored(self, result: BackfillResult, handled: set[str] | None = None) -> None:
        """Re-run stored recommendations that failed earlier and have attempts left."""
        handled = handled or set()
        rows = self.repository.get_retryable(limit=self.settings.backfill_max_messages)
        retryable = [row for row in rows if row.original_message_id not in handled]
        if retryable:
            logger.info(f"Retrying {len(retryable)} stored recommendations with attempts left")
        for row in retryable:
            submission = Submission(
                source_message_id=row.original_message_id,
                channel_id=row.original_channel_id,
                raw_text=row.original_content or "",
                submitter_id=row.recommender_id,
                submitter_name=row.recommender_name,
                url=row.url,
                message_link=self._stored_link(row.original_channel_id, row.original_message_id),
            )
            if self._process(submission, result, "retry_stored_recommendation"):
                result.retried += 1

    def _process(self, submission: Submission, result: BackfillResult, operation: str) -> bool:
        """Run one submission, tallying it into ``result``; True when it did not fail."""
        try:
            outcome = self.processor.process(submission)
        except Exception as e:
            log_processing_error("backfill", submission.source_message_id, e, operation=operation)
            result.errors += 1
            return False

        if outcome.status == ProcessingStatus.FAILED:
            result.errors += 1
            return False
        result.processed += 1
        return True

    def _stored_link(self, channel_id: str, message_id: str) -> str | None:
        if message_id.startswith(SYNTHETIC_ID_PREFIX):
            return None
        return message_link(self.settings.discord_guild_id, channel_id, message_id)

    def fetch_messages_after(
        self, channel_id: str, boundary: datetime | None, max_messages: int
    ) -> list[ChatMessage]:
        """Messages newer than ``boundary``, oldest first, at most ``max_messages``."""
        collected: list[ChatMessage] = []
        before: str | None = None

        while len(collected) < max_messages:
            fetch_limit = min(MAX_MESSAGES_PER_PAGE, max_messages - len(collected))
            try:
                batch = self.discord_api.get_messages(channel_id, before=before, limit=fetch_limit)
            except DiscordApiError as e:
                log_error("backfill", e, operation="fetch_messages", context={"channel_id": channel_id})
                break
            if not batch:
                break

            collected.extend(m for m in batch if boundary is None or m.created_at > boundary)

            if len(batch) < fetch_limit:
                break
            if boundary is not None and batch[-1].created_at <= boundary:
                break

            before = batch[-1].id
            if len(collected) < max_messages:
                self.sleep(self.settings.backfill_batch_delay_seconds)

        collected = collected[:max_messages]
        collected.reverse()
        return collected

    def _to_submission(self, message: ChatMessage) -> Submission:
        return Submission(
            source_message_id=message.id,
            channel_id=message.channel_id,
            raw_text=message.content,
            submitter_id=message.author_id,
            submitter_name=message.author_name,
            message_link=message_link(
                message.guild_id or self.settings.discord_guild_id, message.channel_id, message.id
            ),
        )
