"""Tests for completion parsing and vocabulary mapping."""

import json

import pytest

from curator.errors import SynthesisError
from curator.models.content import ContentEnvelope, ContentMetadata
from curator.models.contracts import ContentCategory, ContentKind, LibraryType, Sentiment
from curator.services.library_tags import get_library_tag_names
from curator.services.metadata_synthesizer import MetadataSynthesizer, map_to_vocabulary


def _completion(**overrides) -> str:
    payload = {
        "title": "Designing Data-Intensive Applications",
        "description": "A tour of the ideas behind reliable, scalable data systems.",
        "contentType": "book",
        "topics": ["programming", "Technology", "cooking"],
        "duration": None,
        "qualityScore": 9,
        "sentiment": "positive",
        "summary": "Covers storage engines, replication, partitioning and streams.",
        "libraryType": "growth",
        "primaryTag": "Tech & Code",
        "secondaryTags": ["Advanced", "Gold Standard", "Tech & Code", "Fantasy"],
        "keyTakeaways": ["Know your consistency model", "Logs are the backbone"],
        "mainIdeas": ["Reliability", "Scalability", "Maintainability"],
        "tldr": "The systems design book every backend engineer should read.",
    }
    payload.update(overrides)
    return f"Here is the classification:\n```json\n{json.dumps(payload)}\n```"


@pytest.fixture
def envelope() -> ContentEnvelope:
    return ContentEnvelope(
        category=ContentCategory.ARTICLE,
        url="https://example.com/ddia",
        title="DDIA review",
        content="x" * 120,
        metadata=ContentMetadata(thumbnail="https://example.com/cover.png", duration="12 min"),
    )


def test_analyze_content_normalizes_completion(fake_llm, envelope):
    llm = fake_llm(_completion())

    metadata = MetadataSynthesizer(llm, max_content_chars=100).analyze_content(
        envelope, "Must read https://example.com/ddia", "alice"
    )

    assert metadata.library_type == LibraryType.GROWTH
    assert metadata.primary_tag == "Tech & Code"
    # duplicate of the primary and the other library's tag are dropped
    assert metadata.secondary_tags == ["Advanced", "Gold Standard"]
    assert metadata.topics == ["programming", "technology"]
    assert metadata.content_type == ContentKind.BOOK
    assert metadata.sentiment == Sentiment.POSITIVE
    assert metadata.quality_score == 9
    assert metadata.duration == "12 min"
    assert metadata.thumbnail == "https://example.com/cover.png"
    assert metadata.key_takeaways == ["Know your consistency model", "Logs are the backbone"]
    assert metadata.tldr.startswith("The systems design book")

    prompt = llm.prompts[0]
    assert '"alice"' in prompt
    assert "[Content truncated]" in prompt


def test_primary_tag_is_always_in_library_vocabulary(fake_llm, envelope):
    llm = fake_llm(_completion(libraryType="athenaeum", primaryTag="history of rome", secondaryTags=["memoir"]))

    metadata = MetadataSynthesizer(llm).analyze_content(envelope, "", "bob")

    assert metadata.primary_tag == "History"
    assert metadata.primary_tag in get_library_tag_names(metadata.library_type)
    assert metadata.secondary_tags == ["Biography"]


def test_url_only_analysis_omits_insights(fake_llm):
    llm = fake_llm(_completion())

    metadata = MetadataSynthesizer(llm).analyze_url("https://example.com/ddia", "great book", "carol")

    assert metadata.key_takeaways == []
    assert metadata.main_ideas == []
    assert metadata.tldr is None
    assert "could not be fetched" in llm.prompts[0]


def test_completion_without_json_raises(fake_llm, envelope):
    llm = fake_llm("Sorry, I cannot classify this link.")

    with pytest.raises(SynthesisError, match="no parseable JSON"):
        MetadataSynthesizer(llm).analyze_content(envelope, "", "dave")


def test_unknown_library_raises(fake_llm, envelope):
    with pytest.raises(SynthesisError, match="Unknown library"):
        MetadataSynthesizer(fake_llm(_completion(libraryType="cookbooks"))).analyze_content(envelope, "", "e")


def test_unmappable_primary_tag_raises(fake_llm, envelope):
    llm = fake_llm(_completion(primaryTag="Underwater Basket Weaving"))

    with pytest.raises(SynthesisError, match="not in the growth vocabulary"):
        MetadataSynthesizer(llm).analyze_content(envelope, "", "f")


def test_out_of_range_values_are_clamped(fake_llm, envelope):
    llm = fake_llm(_completion(qualityScore="42", sentiment="ecstatic", contentType="hologram"))

    metadata = MetadataSynthesizer(llm).analyze_content(envelope, "", "g")

    assert metadata.quality_score == 10
    assert metadata.sentiment == Sentiment.NEUTRAL
    # unknown content types fall back to the extracted category
    assert metadata.content_type == ContentKind.ARTICLE


def test_secondary_tags_capped_at_four(fake_llm, envelope):
    llm = fake_llm(
        _completion(secondaryTags=["Book", "Podcast", "Finance", "Productivity", "Leadership", "Beginner"])
    )

    metadata = MetadataSynthesizer(llm).analyze_content(envelope, "", "h")

    assert metadata.secondary_tags == ["Book", "Podcast", "Finance", "Productivity"]


def test_map_to_vocabulary_uses_synonyms():
    assert map_to_vocabulary("coding", LibraryType.GROWTH) == "Tech & Code"
    assert map_to_vocabulary("dragons", LibraryType.FICTION) == "Fantasy"
    assert map_to_vocabulary("dragons", LibraryType.GROWTH) is None
