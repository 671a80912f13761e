"""
Turn extracted content (or a bare URL) into a validated classification.

One completion per call. The completion text must contain a JSON object;
everything in it is normalized onto the closed vocabularies before it is
returned, so callers never see a tag outside the chosen library.
"""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from curator.core.logging import get_logger
from curator.core.settings import get_settings
from curator.errors import SynthesisError
from curator.models.content import ContentEnvelope
from curator.models.contracts import ContentCategory, ContentKind, LibraryType, Sentiment
from curator.models.forum import ForumTag
from curator.models.metadata import ALLOWED_TOPICS, MAX_SECONDARY_TAGS, RecommendationMetadata
from curator.services.library_tags import get_library
from curator.services.llm_client import LlmClient
from curator.services.llm_prompts import build_content_prompt, build_url_prompt
from curator.services.tag_resolver import resolve_tag
from curator.utils.json_repair import extract_json_object

logger = get_logger(__name__)

MAX_TOPICS = 4
MAX_LIST_ITEMS = 6

_CATEGORY_KIND = {
    ContentCategory.VIDEO: ContentKind.VIDEO,
    ContentCategory.AUDIOBOOK: ContentKind.AUDIOBOOK,
    ContentCategory.AUDIO_EPISODE: ContentKind.PODCAST,
    ContentCategory.ARTICLE: ContentKind.ARTICLE,
}


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _string_list(value: Any, limit: int = MAX_LIST_ITEMS) -> list[str]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        return []
    return [item.strip() for item in value if isinstance(item, str) and item.strip()][:limit]


def _vocabulary_as_tags(library: LibraryType) -> list[ForumTag]:
    return [ForumTag(id=tag.name, name=tag.name) for tag in get_library(library).tags]


def map_to_vocabulary(suggestion: str, library: LibraryType, exclude: list[str] | None = None) -> str | None:
    """Canonical vocabulary name for a suggested tag, or None."""
    match = resolve_tag(suggestion, library, _vocabulary_as_tags(library), exclude or [])
    return match.name if match else None


def _quality(value: Any) -> int:
    try:
        score = int(round(float(value)))
    except (TypeError, ValueError):
        return 5
    return max(1, min(10, score))


def _sentiment(value: Any) -> Sentiment:
    try:
        return Sentiment(_text(value).lower())
    except ValueError:
        return Sentiment.NEUTRAL


def _content_kind(value: Any, category: ContentCategory | None) -> ContentKind:
    try:
        return ContentKind(_text(value).lower())
    except ValueError:
        return _CATEGORY_KIND.get(category, ContentKind.OTHER)


def _topics(value: Any) -> list[str]:
    topics: list[str] = []
    for topic in _string_list(value, limit=20):
        normalized = topic.lower().replace(" ", "-")
        if normalized in ALLOWED_TOPICS and normalized not in topics:
            topics.append(normalized)
    return topics[:MAX_TOPICS]


class MetadataSynthesizer:
    def __init__(self, llm_client: LlmClient, max_content_chars: int | None = None):
        self.llm_client = llm_client
        self.max_content_chars = max_content_chars or get_settings().max_content_chars

    def analyze_content(
        self, envelope: ContentEnvelope, message_content: str, recommender_name: str
    ) -> RecommendationMetadata:
        """Classify extracted content, including takeaways, main ideas and a TL;DR."""
        prompt = build_content_prompt(
            envelope, message_content, recommender_name, self.max_content_chars
        )
        completion = self.llm_client.complete(prompt)
        return self.parse_completion(
            completion,
            include_insights=True,
            fallback_title=envelope.title,
            category=envelope.category,
            thumbnail=envelope.metadata.thumbnail,
            fallback_duration=envelope.metadata.duration,
        )

    def analyze_url(self, url: str, message_content: str, recommender_name: str) -> RecommendationMetadata:
        """Classify from the URL and message alone."""
        completion = self.llm_client.complete(build_url_prompt(url, message_content, recommender_name))
        return self.parse_completion(completion, include_insights=False, fallback_title=url)

    def parse_completion(
        self,
        completion: str,
        *,
        include_insights: bool,
        fallback_title: str,
        category: ContentCategory | None = None,
        thumbnail: str | None = None,
        fallback_duration: str | None = None,
    ) -> RecommendationMetadata:
        """Validate raw completion text into ``RecommendationMetadata``.

        Raises:
            SynthesisError: no JSON object, unknown library or a primary tag
                outside the library vocabulary.
        """
        data = extract_json_object(completion)
        if data is None:
            logger.warning(f"No JSON object in completion: {completion[:200]!r}")
            raise SynthesisError("Completion contained no parseable JSON object")

        raw_library = _text(data.get("libraryType")).lower()
        try:
            library = LibraryType(raw_library)
        except ValueError as e:
            raise SynthesisError(f"Unknown library type: {raw_library!r}") from e

        raw_primary = _text(data.get("primaryTag"))
        primary = map_to_vocabulary(raw_primary, library)
        if primary is None:
            raise SynthesisError(f"Primary tag {raw_primary!r} is not in the {library} vocabulary")

        secondaries: list[str] = []
        for suggestion in _string_list(data.get("secondaryTags"), limit=20):
            if len(secondaries) >= MAX_SECONDARY_TAGS:
                break
            mapped = map_to_vocabulary(suggestion, library, exclude=[primary, *secondaries])
            if mapped is not None:
                secondaries.append(mapped)

        duration = _text(data.get("duration")) or fallback_duration
        if duration and duration.lower() in {"null", "none", "unknown", "n/a"}:
            duration = fallback_duration

        try:
            metadata = RecommendationMetadata(
                title=(_text(data.get("title")) or fallback_title)[:500],
                description=_text(data.get("description")),
                content_type=_content_kind(data.get("contentType"), category),
                topics=_topics(data.get("topics")),
                duration=duration or None,
                quality_score=_quality(data.get("qualityScore")),
                sentiment=_sentiment(data.get("sentiment")),
                summary=_text(data.get("summary")),
                library_type=library,
                primary_tag=primary,
                secondary_tags=secondaries,
                key_takeaways=_string_list(data.get("keyTakeaways")) if include_insights else [],
                main_ideas=_string_list(data.get("mainIdeas")) if include_insights else [],
                tldr=(_text(data.get("tldr")) or None) if include_insights else None,
                thumbnail=thumbnail,
            )
        except ValidationError as e:
            raise SynthesisError(f"Classification failed validation: {e}") from e

        logger.info(
            f"Classified as {library}/{primary}",
            extra={
                "component": "metadata_synthesizer",
                "operation": "parse_completion",
                "context_data": {
                    "library_type": str(library),
                    "primary_tag": primary,
                    "secondary_tags": secondaries,
                    "content_rich": include_insights,
                },
            },
        )
        return metadata
