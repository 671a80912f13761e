import httpx
import pytest

from curator.http_client.robust_http_client import RobustHttpClient


@pytest.fixture
def html_client():
    """RobustHttpClient serving canned pages keyed by URL; anything else is a 404."""
    clients = []

    def factory(pages: dict[str, str | tuple[int, str]]) -> RobustHttpClient:
        def handler(request: httpx.Request) -> httpx.Response:
            page = pages.get(str(request.url))
            if page is None:
                return httpx.Response(404, text="not found")
            if isinstance(page, tuple):
                status, body = page
                return httpx.Response(status, text=body)
            return httpx.Response(200, text=page, headers={"content-type": "text/html"})

        client = RobustHttpClient(timeout=5, max_retries=1, transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    yield factory
    for client in clients:
        client.close()
