"""Validated classification produced by the metadata synthesizer."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from curator.models.contracts import ContentKind, LibraryType, Sentiment

ALLOWED_TOPICS: tuple[str, ...] = (
    "programming",
    "ai",
    "technology",
    "business",
    "finance",
    "science",
    "history",
    "philosophy",
    "psychology",
    "politics",
    "culture",
    "health",
    "productivity",
    "design",
    "education",
    "self-improvement",
    "entertainment",
    "fiction",
)

MAX_SECONDARY_TAGS = 4


class RecommendationMetadata(BaseModel):
    title: str = Field(..., min_length=1, max_length=500)
    description: str = ""
    content_type: ContentKind = ContentKind.OTHER
    topics: list[str] = Field(default_factory=list)
    duration: str | None = None
    quality_score: int = Field(5, ge=1, le=10)
    sentiment: Sentiment = Sentiment.NEUTRAL
    summary: str = ""
    library_type: LibraryType
    primary_tag: str
    secondary_tags: list[str] = Field(default_factory=list, max_length=MAX_SECONDARY_TAGS)
    key_takeaways: list[str] = Field(default_factory=list)
    main_ideas: list[str] = Field(default_factory=list)
    tldr: str | None = None
    thumbnail: str | None = None

    @field_validator("secondary_tags")
    @classmethod
    def validate_secondary_tags(cls, v: list[str], info) -> list[str]:
        primary = info.data.get("primary_tag")
        if primary and any(tag.lower() == primary.lower() for tag in v):
            raise ValueError("secondary_tags must not repeat the primary tag")
        return v

    @field_validator("topics")
    @classmethod
    def validate_topics(cls, v: list[str]) -> list[str]:
        unknown = [topic for topic in v if topic not in ALLOWED_TOPICS]
        if unknown:
            raise ValueError(f"Unknown topics: {unknown}")
        return v
