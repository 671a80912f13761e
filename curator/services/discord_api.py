"""
Minimal Discord REST client: channel lookup, forum threads and message history.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

import httpx
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from curator.core.logging import get_logger
from curator.core.settings import Settings
from curator.errors import DiscordApiError
from curator.models.forum import ChatMessage, ForumChannel, ForumTag

logger = get_logger(__name__)

# Channel types from the Discord API
GUILD_FORUM = 15
GUILD_MEDIA = 16
ONE_WEEK_MINUTES = 10080
MAX_MESSAGES_PER_PAGE = 100
MAX_RATE_LIMIT_WAIT = 30.0


class _RateLimited(Exception):
    def __init__(self, retry_after: float):
        self.retry_after = retry_after
        super().__init__(f"Rate limited, retry after {retry_after}s")


def _is_retryable(error: BaseException) -> bool:
    """Retry policy for idempotent requests."""
    if isinstance(error, (_RateLimited, httpx.TransportError)):
        return True
    return isinstance(error, DiscordApiError) and error.status_code >= 500


def _is_rate_limited(error: BaseException) -> bool:
    """Retry policy for writes: only a 429 guarantees nothing was created."""
    return isinstance(error, _RateLimited)


def _wait_for_retry(retry_state: RetryCallState) -> float:
    error = retry_state.outcome.exception() if retry_state.outcome else None
    if isinstance(error, _RateLimited):
        return min(error.retry_after, MAX_RATE_LIMIT_WAIT)
    return wait_exponential(multiplier=0.5, min=0.5, max=8)(retry_state)


def _retry_after(response: httpx.Response) -> float:
    try:
        return float(response.json().get("retry_after", 1.0))
    except (ValueError, AttributeError, TypeError):
        return float(response.headers.get("Retry-After", 1.0))


def _error_detail(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        text = response.text.strip()
        return text[:300] if text else "Unknown error"
    if isinstance(payload, dict) and isinstance(payload.get("message"), str):
        return payload["message"]
    return "Unknown error"


def _parse_message(payload: dict[str, Any], channel_id: str) -> ChatMessage:
    author = payload.get("author") or {}
    return ChatMessage(
        id=str(payload["id"]),
        channel_id=str(payload.get("channel_id") or channel_id),
        content=payload.get("content") or "",
        author_id=str(author.get("id") or ""),
        author_name=author.get("global_name") or author.get("username") or "unknown",
        author_is_bot=bool(author.get("bot")),
        created_at=datetime.fromisoformat(payload["timestamp"]),
        guild_id=str(payload["guild_id"]) if payload.get("guild_id") else None,
    )


class DiscordApiClient:
    def __init__(
        self,
        token: str,
        base_url: str = "https://discord.com/api/v10",
        timeout: float = 15.0,
        max_attempts: int = 3,
        transport: httpx.BaseTransport | None = None,
    ):
        self.max_attempts = max(1, max_attempts)
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            transport=transport,
            headers={
                "Authorization": f"Bot {token}",
                "User-Agent": "DiscordBot (library-curator, 1.0)",
            },
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> DiscordApiClient:
        if not settings.discord_bot_token:
            raise ValueError("DISCORD_BOT_TOKEN not configured in settings.")
        return cls(
            settings.discord_bot_token,
            base_url=settings.discord_api_base_url,
            timeout=settings.http_timeout_seconds,
            max_attempts=settings.http_max_retries,
        )

    def _request(self, method: str, path: str, *, idempotent: bool = True, **kwargs: Any) -> Any:
        @retry(
            stop=stop_after_attempt(self.max_attempts),
            wait=_wait_for_retry,
            retry=retry_if_exception(_is_retryable if idempotent else _is_rate_limited),
            reraise=True,
        )
        def _send() -> Any:
            response = self._client.request(method, path, **kwargs)
            if response.status_code == 429:
                raise _RateLimited(_retry_after(response))
            if response.status_code >= 400:
                detail = _error_detail(response)
                logger.error(
                    "Discord API request failed",
                    extra={
                        "component": "discord_api",
                        "operation": "request",
                        "context_data": {
                            "method": method,
                            "path": path,
                            "status_code": response.status_code,
                            "detail": detail,
                        },
                    },
                )
                raise DiscordApiError(response.status_code, detail, method=method, path=path)
            if not response.content:
                return None
            try:
                return response.json()
            except ValueError as e:
                raise DiscordApiError(
                    response.status_code, "Response body is not JSON", method=method, path=path
                ) from e

        try:
            return _send()
        except _RateLimited as e:
            raise DiscordApiError(429, str(e), method=method, path=path) from e
        except httpx.HTTPError as e:
            logger.error(
                "Discord API transport error",
                extra={
                    "component": "discord_api",
                    "operation": "request",
                    "context_data": {"method": method, "path": path, "error": str(e)},
                },
            )
            raise DiscordApiError(0, str(e) or type(e).__name__, method=method, path=path) from e

    def get_channel(self, channel_id: str) -> ForumChannel:
        payload = self._request("GET", f"/channels/{channel_id}")
        tags = [
            ForumTag(id=str(tag["id"]), name=tag["name"], emoji=tag.get("emoji_name"))
            for tag in payload.get("available_tags") or []
        ]
        return ForumChannel(
            id=str(payload["id"]),
            name=payload.get("name") or "",
            is_forum=payload.get("type") in {GUILD_FORUM, GUILD_MEDIA},
            available_tags=tags,
        )

    def create_forum_thread(
        self,
        channel_id: str,
        *,
        name: str,
        embed: dict[str, Any],
        applied_tags: list[str],
        auto_archive_duration: int = ONE_WEEK_MINUTES,
    ) -> dict[str, Any]:
        """Start a forum post; returns the created thread object."""
        body = {
            "name": name,
            "auto_archive_duration": auto_archive_duration,
            "applied_tags": applied_tags,
            "message": {"embeds": [embed]},
        }
        return self._request("POST", f"/channels/{channel_id}/threads", json=body, idempotent=False)

    def get_messages(
        self, channel_id: str, *, before: str | None = None, limit: int = MAX_MESSAGES_PER_PAGE
    ) -> list[ChatMessage]:
        """One page of channel history, newest first."""
        params: dict[str, Any] = {"limit": max(1, min(limit, MAX_MESSAGES_PER_PAGE))}
        if before:
            params["before"] = before
        payload = self._request("GET", f"/channels/{channel_id}/messages", params=params)
        return [_parse_message(item, channel_id) for item in payload or []]

    def close(self) -> None:
        self._client.close()
