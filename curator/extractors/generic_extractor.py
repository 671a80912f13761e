from curator.core.logging import get_logger
from curator.errors import ExtractionError
from curator.extractors.html_helpers import (
    fetch_page,
    page_description,
    page_thumbnail,
    page_title,
    parse_html,
    visible_text,
)
from curator.http_client.robust_http_client import RobustHttpClient
from curator.models.content import ContentEnvelope, ContentMetadata
from curator.models.contracts import ContentCategory

logger = get_logger(__name__)


class GenericExtractor:
    """Title, description and visible text of any HTML page.

    Used for uncategorized URLs and as the fallback for every other extractor.
    """

    def __init__(self, http_client: RobustHttpClient):
        self.http_client = http_client

    def extract(self, url: str) -> ContentEnvelope:
        html, final_url = fetch_page(self.http_client, url)
        soup = parse_html(html)

        title = page_title(soup)
        description = page_description(soup)
        thumbnail = page_thumbnail(soup, final_url)
        text = visible_text(soup)

        if not title and not text:
            raise ExtractionError(url, "Page has no title and no visible text")

        logger.debug(f"Generic extraction for {final_url}: {len(text)} chars")
        return ContentEnvelope(
            category=ContentCategory.OTHER,
            url=final_url,
            title=title or final_url,
            content=text or description or "",
            metadata=ContentMetadata(description=description, thumbnail=thumbnail),
        )
