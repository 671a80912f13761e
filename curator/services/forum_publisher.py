"""
Render a classified recommendation as a post in its library's forum.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from curator.core.logging import get_logger
from curator.core.settings import Settings
from curator.errors import DiscordApiError, PublicationError
from curator.models.contracts import LibraryType, Sentiment
from curator.models.forum import ForumChannel, PublishedPost
from curator.models.schema import Recommendation
from curator.services.discord_api import ONE_WEEK_MINUTES, DiscordApiClient
from curator.services.library_tags import LIBRARIES
from curator.services.tag_resolver import resolve_tags
from curator.utils.error_logger import log_error

logger = get_logger(__name__)

MAX_THREAD_NAME = 100
MAX_EMBED_TITLE = 256
MAX_EMBED_DESCRIPTION = 4096
MAX_FIELD_VALUE = 1024

CONTENT_TYPE_EMOJI = {
    "video": "🎥",
    "podcast": "🎙️",
    "article": "📰",
    "book": "📚",
    "audiobook": "🎧",
    "tool": "🛠️",
    "course": "🎓",
    "other": "🔗",
}

SENTIMENT_COLORS = {
    Sentiment.POSITIVE: 0x00FF00,
    Sentiment.CRITICAL: 0xFF9900,
    Sentiment.INFORMATIVE: 0x0099FF,
}
DEFAULT_COLOR = 0x808080


def quality_stars(score: int | None) -> str:
    if score is None:
        return ""
    if score >= 9:
        return "⭐⭐⭐"
    if score >= 7:
        return "⭐⭐"
    if score >= 5:
        return "⭐"
    return ""


def embed_color(sentiment: str | None) -> int:
    try:
        return SENTIMENT_COLORS.get(Sentiment(sentiment), DEFAULT_COLOR)
    except ValueError:
        return DEFAULT_COLOR


def _truncate(text: str, limit: int) -> str:
    return text if len(text) <= limit else text[: limit - 1] + "…"


def _bullets(items: list[str]) -> str:
    return _truncate("\n".join(f"• {item}" for item in items), MAX_FIELD_VALUE)


def _recommender(recommendation: Recommendation) -> str:
    # Imported rows carry a placeholder id instead of a Discord user id
    if (recommendation.recommender_id or "").isdigit():
        return f"<@{recommendation.recommender_id}>"
    return recommendation.recommender_name


def build_embed(recommendation: Recommendation, message_link: str | None) -> dict[str, Any]:
    """Discord embed payload for a forum post."""
    content_type = recommendation.content_type or "other"
    emoji = CONTENT_TYPE_EMOJI.get(content_type, "🔗")
    title = recommendation.title or recommendation.url

    description = recommendation.ai_summary or recommendation.description or ""
    if recommendation.tldr:
        description = f"**TL;DR:** {recommendation.tldr}\n\n{description}"

    score = recommendation.quality_score
    fields: list[dict[str, Any]] = [
        {"name": "Type", "value": content_type, "inline": True},
        {
            "name": "Quality",
            "value": f"{quality_stars(score)} {score}/10".strip() if score else "n/a",
            "inline": True,
        },
    ]
    if recommendation.duration:
        fields.append({"name": "Duration", "value": recommendation.duration, "inline": True})
    if recommendation.topics:
        fields.append({"name": "Topics", "value": _truncate(", ".join(recommendation.topics), MAX_FIELD_VALUE)})
    if recommendation.key_takeaways:
        fields.append({"name": "📝 Key Takeaways", "value": _bullets(recommendation.key_takeaways)})
    if recommendation.main_ideas:
        fields.append({"name": "💡 Main Ideas", "value": _bullets(recommendation.main_ideas)})

    fields.append(
        {"name": "Recommended by", "value": _recommender(recommendation), "inline": True}
    )
    if message_link:
        fields.append(
            {"name": "Original Message", "value": f"[Jump to message]({message_link})", "inline": True}
        )

    embed: dict[str, Any] = {
        "title": _truncate(f"{emoji} {title}", MAX_EMBED_TITLE),
        "description": _truncate(description, MAX_EMBED_DESCRIPTION),
        "url": recommendation.url,
        "color": embed_color(recommendation.sentiment),
        "fields": fields,
        "timestamp": datetime.now(UTC).isoformat(),
    }
    if recommendation.thumbnail:
        embed["image"] = {"url": recommendation.thumbnail}
    return embed


class ForumPublisher:
    def __init__(self, discord_api: DiscordApiClient, settings: Settings):
        self.discord_api = discord_api
        self.settings = settings
        self._forums: dict[str, ForumChannel] = {}

    def forum_id_for(self, library: LibraryType | str) -> str:
        forum_id = self.settings.forum_ids().get(str(library))
        if not forum_id:
            raise PublicationError(f"No forum channel configured for library {library!r}")
        return forum_id

    def get_forum(self, forum_id: str) -> ForumChannel:
        """Forum channel with its tags, fetched once per forum."""
        if forum_id not in self._forums:
            channel = self.discord_api.get_channel(forum_id)
            if not channel.is_forum:
                raise PublicationError(f"Channel {forum_id} is not a forum channel")
            self._forums[forum_id] = channel
        return self._forums[forum_id]

    def publish(self, recommendation: Recommendation, message_link: str | None = None) -> PublishedPost:
        """Create the forum thread for a classified recommendation.

        Not idempotent: every call creates a new thread.

        Raises:
            PublicationError: missing configuration or a Discord API failure.
        """
        library = recommendation.library_type
        if not library or not recommendation.primary_tag:
            raise PublicationError(f"Recommendation {recommendation.id} has not been classified")

        forum_id = self.forum_id_for(library)
        try:
            forum = self.get_forum(forum_id)
            applied_tags = resolve_tags(
                recommendation.primary_tag,
                recommendation.secondary_tags or [],
                library,
                forum.available_tags,
                max_tags=self.settings.max_tags_per_post,
            )
            thread = self.discord_api.create_forum_thread(
                forum_id,
                name=_truncate(recommendation.title or recommendation.url, MAX_THREAD_NAME),
                embed=build_embed(recommendation, message_link),
                applied_tags=applied_tags,
                auto_archive_duration=ONE_WEEK_MINUTES,
            )
        except DiscordApiError as e:
            log_error(
                "forum_publisher",
                e,
                operation="publish",
                item_id=recommendation.id,
                context={"forum_id": forum_id, "library": library},
            )
            raise PublicationError(str(e)) from e

        thread_id = str(thread["id"])
        # Forum starter messages share the thread's id
        post_id = str((thread.get("message") or {}).get("id") or thread_id)
        logger.info(
            f"Created forum post {thread_id} in {library}",
            extra={
                "component": "forum_publisher",
                "operation": "publish",
                "item_id": recommendation.id,
                "context_data": {"forum_id": forum_id, "applied_tags": applied_tags},
            },
        )
        return PublishedPost(post_id=post_id, thread_id=thread_id, forum_channel_id=forum_id)

    def check_forum_tags(self) -> dict[LibraryType, list[str]]:
        """Log vocabulary tags missing from each configured forum."""
        missing_by_library: dict[LibraryType, list[str]] = {}
        for library_type, library in LIBRARIES.items():
            forum_id = self.settings.forum_ids().get(str(library_type))
            if not forum_id:
                logger.warning(f"No forum configured for {library.display_name}")
                continue
            try:
                forum = self.get_forum(forum_id)
            except (DiscordApiError, PublicationError) as e:
                log_error("forum_publisher", e, operation="check_forum_tags", context={"forum_id": forum_id})
                continue

            existing = {tag.name.lower() for tag in forum.available_tags}
            missing = [tag.name for tag in library.tags if tag.name.lower() not in existing]
            missing_by_library[library_type] = missing
            if missing:
                logger.warning(
                    f"{library.display_name} forum is missing {len(missing)} tags: {', '.join(missing)}",
                    extra={
                        "component": "forum_publisher",
                        "operation": "check_forum_tags",
                        "context_data": {"library": str(library_type), "missing": missing},
                    },
                )
            else:
                logger.info(f"All forum tags present for {library.display_name}")
        return missing_by_library

