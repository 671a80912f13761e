"""Plain records for the Discord objects the pipeline reads."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class ForumTag:
    id: str
    name: str
    emoji: str | None = None


@dataclass
class ForumChannel:
    id: str
    name: str
    is_forum: bool
    available_tags: list[ForumTag] = field(default_factory=list)


@dataclass
class ChatMessage:
    id: str
    channel_id: str
    content: str
    author_id: str
    author_name: str
    author_is_bot: bool
    created_at: datetime
    guild_id: str | None = None


@dataclass
class PublishedPost:
    post_id: str
    thread_id: str
    forum_channel_id: str
