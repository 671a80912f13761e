import httpx
import pytest

from curator.http_client.robust_http_client import RobustHttpClient, is_retryable_error


def _client(handler, max_retries: int = 2) -> RobustHttpClient:
    return RobustHttpClient(timeout=5, max_retries=max_retries, transport=httpx.MockTransport(handler))


def test_get_successful():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.headers["User-Agent"].startswith("Mozilla/5.0")
        return httpx.Response(200, text="Success")

    with _client(handler) as client:
        response = client.get("https://example.com/page")

    assert response.status_code == 200
    assert response.text == "Success"


def test_follows_redirects():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/old":
            return httpx.Response(301, headers={"Location": "https://example.com/new"})
        return httpx.Response(200, text="moved")

    with _client(handler) as client:
        response = client.get("https://example.com/old")

    assert str(response.url) == "https://example.com/new"
    assert len(response.history) == 1


def test_retries_server_errors():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        if len(calls) == 1:
            return httpx.Response(503, text="unavailable")
        return httpx.Response(200, text="ok")

    with _client(handler) as client:
        response = client.get("https://example.com/flaky")

    assert response.text == "ok"
    assert len(calls) == 2


def test_client_errors_are_not_retried():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(404, text="missing")

    with _client(handler, max_retries=3) as client:
        with pytest.raises(httpx.HTTPStatusError) as exc_info:
            client.get("https://example.com/missing")

    assert exc_info.value.response.status_code == 404
    assert len(calls) == 1


def test_transport_errors_are_raised_after_retries():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        raise httpx.ConnectError("connection refused", request=request)

    with _client(handler) as client:
        with pytest.raises(httpx.ConnectError):
            client.get("https://example.com/down")

    assert len(calls) == 2


def test_close_reopens_lazily():
    client = _client(lambda request: httpx.Response(200, text="ok"))
    client.get("https://example.com/")
    client.close()

    assert client.get("https://example.com/").text == "ok"
    client.close()


@pytest.mark.parametrize(
    "status, expected",
    [(500, True), (502, True), (599, True), (400, False), (404, False), (429, False)],
)
def test_is_retryable_error_for_status(status, expected):
    request = httpx.Request("GET", "https://example.com")
    response = httpx.Response(status, request=request)
    error = httpx.HTTPStatusError("boom", request=request, response=response)

    assert is_retryable_error(error) is expected


def test_is_retryable_error_for_other_exceptions():
    request = httpx.Request("GET", "https://example.com")

    assert is_retryable_error(httpx.ReadTimeout("slow", request=request)) is True
    assert is_retryable_error(ValueError("nope")) is False
