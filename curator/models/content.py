"""In-memory result of content extraction."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from curator.models.contracts import ContentCategory


@dataclass
class ContentMetadata:
    author: str | None = None
    duration: str | None = None
    thumbnail: str | None = None
    published_time: str | None = None
    description: str | None = None
    channel_name: str | None = None
    view_count: int | None = None
    narrator: str | None = None
    publisher: str | None = None
    rating: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass
class ContentEnvelope:
    """Extracted content handed to the metadata synthesizer.

    ``transcribed`` is True only when ``content`` holds a real transcript
    rather than a description or page text.
    """

    category: ContentCategory
    url: str
    title: str
    content: str
    metadata: ContentMetadata = field(default_factory=ContentMetadata)
    transcribed: bool = False
