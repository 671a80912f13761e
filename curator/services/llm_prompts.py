"""Prompt templates for recommendation classification."""

from __future__ import annotations

from curator.models.content import ContentEnvelope
from curator.models.contracts import ContentKind, Sentiment
from curator.models.metadata import ALLOWED_TOPICS
from curator.services.library_tags import LIBRARIES

LIBRARY_RULES = """\
LIBRARY CLASSIFICATION (pick exactly one):
- "fiction": the item tells a story or is made to entertain: novels, films, series,
  audio drama, comics, animation. Fiction is fiction even when the subject is historical.
- "athenaeum": non-fiction that helps someone understand the world, the past or the
  human mind: history, philosophy, psychology, science, society, biography.
- "growth": practical, applied material that helps someone improve a skill, a career
  or daily life: programming, business, finance, productivity, health, cooking, tools.
When an item could fit two libraries, ask what the reader walks away with: a story
(fiction), an understanding (athenaeum) or a capability (growth)."""

TAG_RULES = """\
TAG RULES:
- primaryTag MUST be copied exactly from the chosen library's tag list.
- secondaryTags: 1 to 4 tags, copied exactly from the SAME library's tag list, never
  repeating primaryTag. Prefer a mix of format, subject and quality tags."""


def _library_vocabulary_section() -> str:
    blocks = []
    for library in LIBRARIES.values():
        tag_names = ", ".join(tag.name for tag in library.tags)
        blocks.append(
            f'"{library.library_type}" ({library.display_name}: {library.description}; '
            f'goal: "{library.goal}")\n  Tags: {tag_names}'
        )
    return "\n".join(blocks)


def _response_shape(include_insights: bool) -> str:
    content_types = "|".join(kind.value for kind in ContentKind)
    sentiments = "|".join(s.value for s in Sentiment)
    insights = (
        '  "keyTakeaways": ["string"],\n'
        '  "mainIdeas": ["string"],\n'
        '  "tldr": "string",\n'
        if include_insights
        else ""
    )
    return (
        "{\n"
        '  "title": "string",\n'
        '  "description": "string",\n'
        f'  "contentType": "{content_types}",\n'
        '  "topics": ["string"],\n'
        '  "duration": "string or null",\n'
        '  "qualityScore": number,\n'
        f'  "sentiment": "{sentiments}",\n'
        '  "summary": "string",\n'
        f"{insights}"
        '  "libraryType": "fiction|athenaeum|growth",\n'
        '  "primaryTag": "string",\n'
        '  "secondaryTags": ["string"]\n'
        "}"
    )


def _shared_instructions(include_insights: bool) -> str:
    topics = ", ".join(ALLOWED_TOPICS)
    insight_lines = (
        "- keyTakeaways: 3 to 5 concrete takeaways from the content.\n"
        "- mainIdeas: 2 to 4 central ideas or arguments.\n"
        "- tldr: one sentence.\n"
        if include_insights
        else ""
    )
    return f"""\
FIELDS:
- title: clear, concise title of the content itself.
- description: 1-2 sentences on what the content is.
- topics: 2 to 4 values chosen only from: {topics}.
- duration: length if known ("45 min", "12h 30m", "300 pages", "10 min read") or null.
- qualityScore: integer 1-10 from the recommender's enthusiasm and the content's value.
- sentiment: tone of the recommendation.
- summary: 2-3 sentences combining the recommender's perspective and what the content offers.
{insight_lines}
{LIBRARY_RULES}

LIBRARIES AND THEIR TAGS:
{_library_vocabulary_section()}

{TAG_RULES}

Respond ONLY with valid JSON in exactly this shape:
{_response_shape(include_insights)}"""


def build_content_prompt(
    envelope: ContentEnvelope,
    message_content: str,
    recommender_name: str,
    max_content_chars: int = 50_000,
) -> str:
    """Prompt for content-rich analysis of an extracted page, video or episode."""
    meta = envelope.metadata
    details = [
        f"URL: {envelope.url}",
        f"Extracted title: {envelope.title}",
        f"Category: {envelope.category}",
    ]
    for label, value in (
        ("Author", meta.author),
        ("Channel", meta.channel_name),
        ("Narrator", meta.narrator),
        ("Publisher", meta.publisher),
        ("Duration", meta.duration),
        ("Published", meta.published_time),
        ("Rating", meta.rating),
    ):
        if value:
            details.append(f"{label}: {value}")

    content_label = "Transcript" if envelope.transcribed else "Content"
    content = envelope.content[:max_content_chars]
    if len(envelope.content) > max_content_chars:
        content += "\n[Content truncated]"

    return f"""\
You are cataloguing a recommendation shared in a Discord community. The user \
"{recommender_name}" recommended the content below.

Recommendation message: {message_content}

{chr(10).join(details)}

{content_label}:
{content}

{_shared_instructions(include_insights=True)}"""


def build_url_prompt(url: str, message_content: str, recommender_name: str) -> str:
    """Prompt for URL-only analysis when the content could not be fetched."""
    return f"""\
You are cataloguing a recommendation shared in a Discord community. The user \
"{recommender_name}" recommended the following link. Its content could not be \
fetched, so rely on the URL, the message and what you know about the work.

URL: {url}
Recommendation message: {message_content}

{_shared_instructions(include_insights=False)}"""
