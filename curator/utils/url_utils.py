"""URL normalization helpers."""

from __future__ import annotations

import hashlib
import re
from urllib.parse import parse_qsl, urlencode, urlparse, urlunparse

SYNTHETIC_ID_PREFIX = "bulk-"

_SCHEME_PATTERN = re.compile(r"^[a-z][a-z0-9+.-]*://", re.IGNORECASE)
_URL_PATTERN = re.compile(r"https?://[^\s<>\"'`|]+", re.IGNORECASE)
_TRAILING_PUNCTUATION = ".,;:!?)]}>'\""

_TRACKING_PARAMS = {"fbclid", "gclid", "igshid", "mc_cid", "mc_eid", "ref_src", "si", "feature"}

_YOUTUBE_HOSTS = {
    "youtube.com",
    "www.youtube.com",
    "m.youtube.com",
    "music.youtube.com",
    "youtube-nocookie.com",
    "www.youtube-nocookie.com",
}
_YOUTUBE_ID = re.compile(r"^[A-Za-z0-9_-]{11}$")
_YOUTUBE_PATH_PREFIXES = ("shorts", "embed", "live", "v")


def has_scheme(url: str) -> bool:
    """True when ``url`` starts with a scheme such as ``https://``."""
    return _SCHEME_PATTERN.match(url) is not None


def extract_urls(text: str | None) -> list[str]:
    """Return every http(s) URL in free text, in order of appearance."""
    if not text:
        return []
    urls = []
    for match in _URL_PATTERN.findall(text):
        cleaned = match.rstrip(_TRAILING_PUNCTUATION)
        if cleaned:
            urls.append(cleaned)
    return urls


def extract_first_url(text: str | None) -> str | None:
    urls = extract_urls(text)
    return urls[0] if urls else None


def extract_youtube_video_id(url: str) -> str | None:
    """Return the 11 character video id for any YouTube URL form, else None."""
    try:
        parsed = urlparse(url.strip())
    except ValueError:
        return None
    host = (parsed.hostname or "").lower()

    if host in {"youtu.be", "www.youtu.be"}:
        candidate = parsed.path.lstrip("/").split("/")[0]
        return candidate if _YOUTUBE_ID.match(candidate) else None

    if host not in _YOUTUBE_HOSTS:
        return None

    if parsed.path in {"/watch", "/watch/"}:
        for key, value in parse_qsl(parsed.query):
            if key == "v" and _YOUTUBE_ID.match(value):
                return value
        return None

    parts = [p for p in parsed.path.split("/") if p]
    if len(parts) >= 2 and parts[0] in _YOUTUBE_PATH_PREFIXES and _YOUTUBE_ID.match(parts[1]):
        return parts[1]
    return None


def _is_tracking_param(key: str) -> bool:
    lowered = key.lower()
    return lowered.startswith("utm_") or lowered in _TRACKING_PARAMS


def normalize_url(url: str) -> str:
    """
    Canonical form used for identity and dedup.

    Trims whitespace, defaults the scheme to https, lowercases scheme and
    host, drops the fragment and tracking parameters, and rewrites every
    YouTube form to ``https://www.youtube.com/watch?v=ID``. Applying it twice
    gives the same result as applying it once.
    """
    cleaned = (url or "").strip()
    if not cleaned:
        return cleaned
    if not has_scheme(cleaned):
        cleaned = f"https://{cleaned.lstrip('/')}"

    video_id = extract_youtube_video_id(cleaned)
    if video_id:
        return f"https://www.youtube.com/watch?v={video_id}"

    try:
        parsed = urlparse(cleaned)
    except ValueError:
        return cleaned

    query = urlencode(
        [(k, v) for k, v in parse_qsl(parsed.query, keep_blank_values=True) if not _is_tracking_param(k)]
    )
    path = parsed.path
    if not path and not query:
        path = "/"
    return urlunparse(
        (parsed.scheme.lower(), parsed.netloc.lower(), path, parsed.params, query, "")
    )


def synthetic_message_id(url: str) -> str:
    """Stable identity for URLs that did not arrive as chat messages."""
    digest = hashlib.sha256(url.strip().lower().encode("utf-8")).hexdigest()
    return f"{SYNTHETIC_ID_PREFIX}{digest[:16]}"
