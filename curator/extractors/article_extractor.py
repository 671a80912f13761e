import trafilatura

from curator.core.logging import get_logger
from curator.errors import ExtractionError
from curator.extractors.html_helpers import (
    fetch_page,
    json_ld_name,
    json_ld_objects,
    meta_content,
    page_description,
    page_thumbnail,
    page_title,
    paragraph_text,
    parse_html,
)
from curator.http_client.robust_http_client import RobustHttpClient
from curator.models.content import ContentEnvelope, ContentMetadata
from curator.models.contracts import ContentCategory

logger = get_logger(__name__)


class ArticleExtractor:
    """Readable article text plus Open Graph / JSON-LD metadata."""

    def __init__(self, http_client: RobustHttpClient):
        self.http_client = http_client

    def extract(self, url: str) -> ContentEnvelope:
        html, final_url = fetch_page(self.http_client, url)
        soup = parse_html(html)

        title = page_title(soup)
        body = trafilatura.extract(html, include_comments=False, include_tables=False) or ""
        if not body.strip():
            body = paragraph_text(soup)

        if not title and not body.strip():
            raise ExtractionError(url, "Page has neither a title nor readable text")

        author = meta_content(soup, "author", "article:author", "twitter:creator")
        published_time = meta_content(soup, "article:published_time", "datePublished", "date")
        for obj in json_ld_objects(soup):
            if not author:
                author = json_ld_name(obj.get("author"))
            if not published_time and isinstance(obj.get("datePublished"), str):
                published_time = obj["datePublished"]

        description = page_description(soup)
        metadata = ContentMetadata(
            author=author,
            published_time=published_time,
            description=description,
            thumbnail=page_thumbnail(soup, final_url),
            publisher=meta_content(soup, "og:site_name"),
        )

        logger.info(f"Extracted article {final_url} ({len(body)} chars)")
        return ContentEnvelope(
            category=ContentCategory.ARTICLE,
            url=final_url,
            title=title or final_url,
            content=body.strip() or description or "",
            metadata=metadata,
        )
