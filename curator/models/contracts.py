"""Canonical domain contracts and enums shared across the pipeline."""

from __future__ import annotations

from enum import StrEnum


class ContentCategory(StrEnum):
    """URL categories that select an extractor."""

    VIDEO = "video"
    AUDIOBOOK = "audiobook"
    AUDIO_EPISODE = "audio_episode"
    ARTICLE = "article"
    OTHER = "other"


class ContentKind(StrEnum):
    """Content type stored on a recommendation and shown on its post."""

    VIDEO = "video"
    PODCAST = "podcast"
    ARTICLE = "article"
    BOOK = "book"
    AUDIOBOOK = "audiobook"
    TOOL = "tool"
    COURSE = "course"
    OTHER = "other"


class LibraryType(StrEnum):
    """The three curated libraries, each with its own forum and vocabulary."""

    FICTION = "fiction"
    ATHENAEUM = "athenaeum"
    GROWTH = "growth"


class Sentiment(StrEnum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    CRITICAL = "critical"
    INFORMATIVE = "informative"


class ProcessingStatus(StrEnum):
    """Outcome of one pass of a submission through the pipeline."""

    PUBLISHED = "published"
    SKIPPED = "skipped"
    NEEDS_ATTENTION = "needs_attention"
    FAILED = "failed"


class ProcessingStep(StrEnum):
    """Operations recorded in the processing log."""

    EXTRACT = "extract"
    SYNTHESIZE = "synthesize"
    PUBLISH = "publish"


class LogStatus(StrEnum):
    SUCCESS = "success"
    FALLBACK = "fallback"
    FAILURE = "failure"
