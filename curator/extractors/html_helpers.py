"""HTML helpers shared by the page-based extractors."""

from __future__ import annotations

import json
import re
from typing import Any
from urllib.parse import urljoin

import httpx
from bs4 import BeautifulSoup

from curator.errors import ExtractionError
from curator.http_client.robust_http_client import RobustHttpClient

MIN_THUMBNAIL_LENGTH = 12
MAX_VISIBLE_TEXT_CHARS = 20_000


def fetch_page(http_client: RobustHttpClient, url: str) -> tuple[str, str]:
    """GET ``url`` and return ``(html, final_url)``.

    Network failures and non-2xx responses become ``ExtractionError``.
    """
    try:
        response = http_client.get(url)
    except httpx.HTTPStatusError as e:
        raise ExtractionError(url, f"HTTP {e.response.status_code}") from e
    except httpx.HTTPError as e:
        raise ExtractionError(url, e) from e
    return response.text, str(response.url)


def parse_html(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def meta_content(soup: BeautifulSoup, *keys: str) -> str | None:
    """First non-empty ``<meta>`` content matching any key by property or name."""
    for key in keys:
        for attr in ("property", "name", "itemprop"):
            tag = soup.find("meta", attrs={attr: key})
            if tag and tag.get("content", "").strip():
                return tag["content"].strip()
    return None


def page_title(soup: BeautifulSoup) -> str | None:
    title = meta_content(soup, "og:title", "twitter:title")
    if title:
        return title
    if soup.title and soup.title.string:
        return clean_whitespace(soup.title.string) or None
    return None


def page_description(soup: BeautifulSoup) -> str | None:
    return meta_content(soup, "og:description", "twitter:description", "description")


def absolute_thumbnail(value: str | None, base_url: str) -> str | None:
    """Resolve a thumbnail against the page URL; drop anything that is not http(s)."""
    if not value:
        return None
    resolved = urljoin(base_url, value.strip())
    if not resolved.startswith(("http://", "https://")):
        return None
    if len(resolved) < MIN_THUMBNAIL_LENGTH:
        return None
    return resolved


def page_thumbnail(soup: BeautifulSoup, base_url: str) -> str | None:
    return absolute_thumbnail(
        meta_content(soup, "og:image", "og:image:url", "twitter:image", "twitter:image:src"),
        base_url,
    )


def json_ld_objects(soup: BeautifulSoup) -> list[dict[str, Any]]:
    """All JSON-LD objects on the page, flattened out of lists and ``@graph``."""
    objects: list[dict[str, Any]] = []
    for script in soup.find_all("script", attrs={"type": "application/ld+json"}):
        raw = script.string or script.get_text() or ""
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            continue
        stack = data if isinstance(data, list) else [data]
        while stack:
            item = stack.pop(0)
            if isinstance(item, list):
                stack.extend(item)
            elif isinstance(item, dict):
                objects.append(item)
                graph = item.get("@graph")
                if isinstance(graph, list):
                    stack.extend(graph)
    return objects


def json_ld_name(value: Any) -> str | None:
    """Name out of a JSON-LD person/organization value (string, dict or list)."""
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, dict):
        name = value.get("name")
        return name.strip() if isinstance(name, str) and name.strip() else None
    if isinstance(value, list):
        names = [n for n in (json_ld_name(v) for v in value) if n]
        return ", ".join(names) or None
    return None


def first_text(soup: BeautifulSoup, selectors: tuple[str, ...], pattern: re.Pattern | None = None) -> str | None:
    """Text of the first element matching any selector (and ``pattern`` if given)."""
    for selector in selectors:
        for element in soup.select(selector):
            text = clean_whitespace(element.get_text(" "))
            if not text:
                continue
            if pattern is not None and not pattern.search(text):
                continue
            return text
    return None


def clean_whitespace(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()


def visible_text(soup: BeautifulSoup, limit: int = MAX_VISIBLE_TEXT_CHARS) -> str:
    for tag in soup(["script", "style", "noscript", "template", "svg", "nav", "footer", "header"]):
        tag.decompose()
    root = soup.body or soup
    return clean_whitespace(root.get_text(" "))[:limit]


def paragraph_text(soup: BeautifulSoup) -> str:
    paragraphs = [clean_whitespace(p.get_text(" ")) for p in soup.find_all("p")]
    return "\n\n".join(p for p in paragraphs if p)


def format_seconds(seconds: int | float | None) -> str | None:
    """42 min / 1h 5m style duration."""
    if seconds is None or seconds < 0:
        return None
    minutes = int(seconds) // 60
    if minutes < 60:
        return f"{minutes} min"
    return f"{minutes // 60}h {minutes % 60}m"


def parse_iso_duration(value: str | None) -> str | None:
    """Turn an ISO-8601 duration (PT5H32M) into a readable string."""
    if not value:
        return None
    match = re.fullmatch(r"P(?:(\d+)D)?(?:T(?:(\d+)H)?(?:(\d+)M)?(?:(\d+(?:\.\d+)?)S)?)?", value.strip())
    if not match or not any(match.groups()):
        return value.strip() or None
    days, hours, minutes, seconds = (float(g) if g else 0 for g in match.groups())
    total = days * 86400 + hours * 3600 + minutes * 60 + seconds
    return format_seconds(total)
