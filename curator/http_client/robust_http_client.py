"""
Synchronous HTTP client shared by the extractors.
"""

import httpx
from tenacity import (
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from curator.core.logging import get_logger
from curator.core.settings import get_settings
from curator.utils.error_logger import log_http_error

logger = get_logger(__name__)

DEFAULT_TIMEOUT = 15.0
DEFAULT_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}


def is_retryable_error(error: BaseException) -> bool:
    """Transport failures and 5xx responses are retried; 4xx never are."""
    if isinstance(error, httpx.HTTPStatusError):
        return 500 <= error.response.status_code < 600
    return isinstance(error, httpx.TransportError)


class RobustHttpClient:
    """
    A synchronous HTTP client for GET requests.

    Follows redirects, applies a per-request timeout, retries transient
    failures and raises ``httpx.HTTPStatusError`` for non-2xx responses.
    """

    def __init__(
        self,
        timeout: float | None = None,
        headers: dict[str, str] | None = None,
        max_retries: int | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        settings = get_settings()
        self.default_timeout = timeout or settings.http_timeout_seconds or DEFAULT_TIMEOUT
        self.max_retries = max(1, max_retries or settings.http_max_retries)

        self.default_headers = dict(DEFAULT_HEADERS)
        if headers:
            self.default_headers.update(headers)

        self._transport = transport
        self._client: httpx.Client | None = None

    def _get_client(self) -> httpx.Client:
        """Initializes and returns the httpx.Client instance."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.Client(
                headers=self.default_headers,
                timeout=self.default_timeout,
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    def _request(
        self,
        method: str,
        url: str,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> httpx.Response:
        client = self._get_client()
        effective_timeout = timeout if timeout is not None else self.default_timeout

        @retry(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
            retry=retry_if_exception(is_retryable_error),
            reraise=True,
        )
        def _send() -> httpx.Response:
            response = client.request(method, url, headers=headers, timeout=effective_timeout)
            response.raise_for_status()
            return response

        logger.debug(f"{method} {url} (timeout {effective_timeout}s)")
        try:
            response = _send()
        except httpx.HTTPStatusError as e:
            log_http_error(
                "robust_http_client",
                url=url,
                response=e.response,
                error=e,
                operation=f"http_{method.lower()}",
                context={"status_code": e.response.status_code},
            )
            raise
        except httpx.RequestError as e:
            log_http_error(
                "robust_http_client",
                url=url,
                error=e,
                operation=f"http_{method.lower()}",
            )
            raise

        if response.history:
            logger.debug(f"Request to {url} was redirected. Final URL: {response.url}")
        return response

    def get(
        self,
        url: str,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> httpx.Response:
        """
        Performs a synchronous GET request.

        Raises:
            httpx.HTTPStatusError: For 4xx or 5xx responses.
            httpx.RequestError: For other network-related errors.
        """
        return self._request("GET", url, headers=headers, timeout=timeout)

    def close(self) -> None:
        """Closes the underlying httpx.Client."""
        if self._client and not self._client.is_closed:
            self._client.close()
            logger.debug("RobustHttpClient closed")

    def __enter__(self) -> "RobustHttpClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
