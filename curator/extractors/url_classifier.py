"""Detect the content category of a URL from its host."""

from __future__ import annotations

from urllib.parse import urlparse

from curator.models.contracts import ContentCategory
from curator.utils.url_utils import has_scheme

VIDEO_DOMAINS = ("youtube.com", "youtu.be", "m.youtube.com", "youtube-nocookie.com")

# Audible runs one storefront per country (audible.com, audible.co.uk, ...)
AUDIOBOOK_BRAND_LABELS = ("audible",)
COUNTRY_SECOND_LEVEL_LABELS = ("co", "com")
AUDIOBOOK_DOMAINS = (
    "libro.fm",
    "audiobooks.com",
    "scribd.com",
    "kobo.com",
    "downpour.com",
    "audiobooksnow.com",
    "chirpbooks.com",
    "hoopla.com",
    "everand.com",
)

AUDIO_EPISODE_DOMAINS = (
    "open.spotify.com",
    "spotify.com",
    "pca.st",
    "podcasts.apple.com",
    "podcasts.google.com",
    "overcast.fm",
    "pocketcasts.com",
    "castbox.fm",
    "podcastaddict.com",
    "player.fm",
    "tunein.com",
    "stitcher.com",
    "podbean.com",
    "anchor.fm",
    "buzzsprout.com",
    "simplecast.com",
    "transistor.fm",
)

NON_ARTICLE_DOMAINS = ("twitter.com", "x.com", "facebook.com", "instagram.com", "tiktok.com")


def _host(url: str) -> str | None:
    try:
        parsed = urlparse(url.strip() if has_scheme(url.strip()) else f"https://{url.strip()}")
        host = parsed.hostname
    except ValueError:
        return None
    if not host or "." not in host:
        return None
    return host.lower()


def host_matches(host: str, domains: tuple[str, ...]) -> bool:
    """True when host is one of ``domains`` or a subdomain of one."""
    return any(host == domain or host.endswith(f".{domain}") for domain in domains)


def _is_audiobook_host(host: str) -> bool:
    if host_matches(host, AUDIOBOOK_DOMAINS):
        return True
    labels = host.split(".")
    for index, label in enumerate(labels):
        if label not in AUDIOBOOK_BRAND_LABELS:
            continue
        # The brand must be the registrable label: audible.de, audible.co.uk
        suffix = labels[index + 1 :]
        if len(suffix) == 1 or (len(suffix) == 2 and suffix[0] in COUNTRY_SECOND_LEVEL_LABELS):
            return True
    return False


def classify_url(url: str) -> ContentCategory:
    """Return the category for ``url``. Total: unparsable input is ``OTHER``."""
    if not isinstance(url, str) or not url.strip():
        return ContentCategory.OTHER

    host = _host(url)
    if host is None:
        return ContentCategory.OTHER

    if host_matches(host, VIDEO_DOMAINS):
        return ContentCategory.VIDEO
    if _is_audiobook_host(host):
        return ContentCategory.AUDIOBOOK
    if host_matches(host, AUDIO_EPISODE_DOMAINS):
        return ContentCategory.AUDIO_EPISODE
    if host_matches(host, NON_ARTICLE_DOMAINS):
        return ContentCategory.OTHER
    return ContentCategory.ARTICLE
