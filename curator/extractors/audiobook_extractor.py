import re

from bs4 import BeautifulSoup

from curator.core.logging import get_logger
from curator.extractors.html_helpers import (
    clean_whitespace,
    fetch_page,
    first_text,
    json_ld_name,
    json_ld_objects,
    page_description,
    page_thumbnail,
    page_title,
    parse_html,
    parse_iso_duration,
)
from curator.http_client.robust_http_client import RobustHttpClient
from curator.models.content import ContentEnvelope, ContentMetadata
from curator.models.contracts import ContentCategory

logger = get_logger(__name__)

AUTHOR_SELECTORS = (
    ".authorLabel a",
    ".bc-author a",
    'span[itemprop="author"]',
    'a[itemprop="author"]',
    '[class*="author"]',
)
NARRATOR_SELECTORS = (".narratorLabel a", ".bc-narrator a", '[class*="narrator"]')
RUNTIME_SELECTORS = (".runtimeLabel", '[class*="runtime"]', '[class*="duration"]', '[class*="length"]')
PUBLISHER_SELECTORS = (".publisherLabel a", ".publisherLabel", '[class*="publisher"]', 'span[itemprop="publisher"]')

RUNTIME_PATTERN = re.compile(r"\d+\s*(hr|hrs|hour|hours|min|mins)\b", re.IGNORECASE)
LABEL_PREFIX = re.compile(r"^(written by|by|author|narrated by|narrator|length|publisher)\s*:?\s*", re.IGNORECASE)

AUDIOBOOK_LD_TYPES = {"Audiobook", "Book", "Product", "CreativeWork"}


def _strip_label(value: str | None) -> str | None:
    if not value:
        return None
    stripped = LABEL_PREFIX.sub("", clean_whitespace(value))
    return stripped or None


def _ld_types(obj: dict) -> set[str]:
    value = obj.get("@type")
    if isinstance(value, list):
        return {str(v) for v in value}
    return {str(value)} if value else set()


class AudiobookExtractor:
    """Audiobook storefront pages (Audible, Libro.fm, Kobo and the like)."""

    def __init__(self, http_client: RobustHttpClient):
        self.http_client = http_client

    def extract(self, url: str) -> ContentEnvelope:
        html, final_url = fetch_page(self.http_client, url)
        soup = parse_html(html)

        title = page_title(soup) or first_text(soup, ("h1",)) or "Audiobook"
        description = page_description(soup) or ""

        author = _strip_label(first_text(soup, AUTHOR_SELECTORS))
        narrator = _strip_label(first_text(soup, NARRATOR_SELECTORS))
        duration = _strip_label(first_text(soup, RUNTIME_SELECTORS, RUNTIME_PATTERN))
        publisher = _strip_label(first_text(soup, PUBLISHER_SELECTORS))
        rating = None

        for obj in self._audiobook_ld(soup):
            author = author or json_ld_name(obj.get("author"))
            narrator = narrator or json_ld_name(obj.get("readBy"))
            publisher = publisher or json_ld_name(obj.get("publisher"))
            duration = duration or parse_iso_duration(obj.get("duration") or obj.get("timeRequired"))
            aggregate = obj.get("aggregateRating")
            if rating is None and isinstance(aggregate, dict) and aggregate.get("ratingValue"):
                rating = str(aggregate["ratingValue"])

        content = description
        if author:
            content = f"Author: {author}\n\n{description}"
        if narrator:
            content = f"{content}\n\nNarrator: {narrator}"

        logger.info(
            "Extracted audiobook metadata",
            extra={
                "component": "audiobook_extractor",
                "operation": "extract",
                "context_data": {"url": final_url, "author": author, "narrator": narrator},
            },
        )
        return ContentEnvelope(
            category=ContentCategory.AUDIOBOOK,
            url=final_url,
            title=title,
            content=content.strip() or title,
            metadata=ContentMetadata(
                author=author,
                narrator=narrator,
                publisher=publisher,
                duration=duration,
                rating=rating,
                description=description or None,
                thumbnail=page_thumbnail(soup, final_url),
            ),
        )

    @staticmethod
    def _audiobook_ld(soup: BeautifulSoup) -> list[dict]:
        return [obj for obj in json_ld_objects(soup) if _ld_types(obj) & AUDIOBOOK_LD_TYPES]
