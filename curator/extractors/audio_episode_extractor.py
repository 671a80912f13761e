import re
from urllib.parse import quote

import httpx

from curator.core.logging import get_logger
from curator.extractors.html_helpers import (
    absolute_thumbnail,
    fetch_page,
    first_text,
    format_seconds,
    meta_content,
    page_description,
    page_thumbnail,
    page_title,
    parse_html,
)
from curator.extractors.url_classifier import host_matches
from curator.http_client.robust_http_client import RobustHttpClient
from curator.models.content import ContentEnvelope, ContentMetadata
from curator.models.contracts import ContentCategory

logger = get_logger(__name__)

SPOTIFY_OEMBED_URL = "https://open.spotify.com/oembed?url="
SHOW_NAME_SELECTORS = (".podcast-title", ".show-title", '[itemprop="name"]', "h1", "h2")
DURATION_SELECTORS = ('[class*="duration"]',)


def _is_spotify(url: str) -> bool:
    match = re.match(r"https?://([^/]+)", url, re.IGNORECASE)
    return bool(match) and host_matches(match.group(1).lower(), ("spotify.com",))


class AudioEpisodeExtractor:
    """Podcast episode pages: Spotify oEmbed first, then page metadata."""

    def __init__(self, http_client: RobustHttpClient):
        self.http_client = http_client

    def extract(self, url: str) -> ContentEnvelope:
        if _is_spotify(url):
            envelope = self._extract_spotify_oembed(url)
            if envelope is not None:
                return envelope
        return self._extract_page(url)

    def _extract_spotify_oembed(self, url: str) -> ContentEnvelope | None:
        oembed_url = f"{SPOTIFY_OEMBED_URL}{quote(url, safe='')}"
        try:
            data = self.http_client.get(oembed_url).json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Spotify oEmbed failed for {url}, falling back to page: {e}")
            return None

        title = (data.get("title") or "").strip()
        if not title:
            return None

        show = data.get("provider_name") if data.get("provider_name") != "Spotify" else None
        thumbnail = absolute_thumbnail(data.get("thumbnail_url"), url)
        content = f"Spotify episode: {title}"
        if show:
            content = f"Podcast: {show}\n\n{content}"

        return ContentEnvelope(
            category=ContentCategory.AUDIO_EPISODE,
            url=url,
            title=title,
            content=content,
            metadata=ContentMetadata(
                author=show,
                thumbnail=thumbnail,
                extra={"source": "spotify_oembed", "oembed_type": data.get("type")},
            ),
        )

    def _extract_page(self, url: str) -> ContentEnvelope:
        html, final_url = fetch_page(self.http_client, url)
        soup = parse_html(html)

        title = page_title(soup) or "Podcast Episode"
        description = page_description(soup) or ""
        show_name = meta_content(soup, "og:site_name") or first_text(soup, SHOW_NAME_SELECTORS)
        duration = self._extract_duration(soup)

        content = description
        if show_name:
            content = f"Podcast: {show_name}\n\n{description}".strip()

        logger.info(f"Extracted podcast metadata for {final_url} (show={show_name})")
        return ContentEnvelope(
            category=ContentCategory.AUDIO_EPISODE,
            url=final_url,
            title=title,
            content=content or title,
            metadata=ContentMetadata(
                author=show_name,
                description=description or None,
                duration=duration,
                thumbnail=page_thumbnail(soup, final_url),
            ),
        )

    @staticmethod
    def _extract_duration(soup) -> str | None:
        raw = meta_content(soup, "music:duration", "duration")
        if raw:
            try:
                return format_seconds(int(float(raw)))
            except ValueError:
                pass
        return first_text(soup, DURATION_SELECTORS)
