import http.client
import io
import ssl
import urllib.error
import urllib.request

import pytest

from recombiner.core.config import HttpSettings
from recombiner.core.errors import FetchFailedError, HarvestCancelledError, NetworkFailure
from recombiner.infrastructure.http.fetcher import HttpFetcher

SETTINGS = HttpSettings(timeout_seconds=1.0, user_agent="test-agent")


class _Response(io.BytesIO):
    def __init__(self, body: bytes, status: int = 200) -> None:
        super().__init__(body)
        self.status = status


def test_get_text_and_json(monkeypatch: pytest.MonkeyPatch) -> None:
    seen: list[urllib.request.Request] = []

    def fake_urlopen(request, timeout):
        seen.append(request)
        return _Response(b'{"id": 5}')

    monkeypatch.setattr(urllib.request, "urlopen", fake_urlopen)
    fetcher = HttpFetcher(settings=SETTINGS)

    assert fetcher.get_text("https://example.org/a") == '{"id": 5}'
    assert fetcher.get_json("https://example.org/a") == {"id": 5}
    assert seen[0].get_method() == "GET"
    assert seen[0].get_header("User-agent") == "test-agent"


def test_http_status_failure_is_fetch_failed(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_urlopen(request, timeout):
        raise urllib.error.HTTPError(request.full_url, 404, "Not Found", None, None)

    monkeypatch.setattr(urllib.request, "urlopen", fake_urlopen)

    with pytest.raises(FetchFailedError) as info:
        HttpFetcher(settings=SETTINGS).get_text("https://example.org/missing")
    assert info.value.status == 404
    assert info.value.url == "https://example.org/missing"


def test_transport_failure_is_network_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_urlopen(request, timeout):
        raise urllib.error.URLError("connection refused")

    monkeypatch.setattr(urllib.request, "urlopen", fake_urlopen)

    with pytest.raises(NetworkFailure, match="connection refused"):
        HttpFetcher(settings=SETTINGS).get_text("https://example.org/a")


def test_exists_uses_head_and_swallows_failures(monkeypatch: pytest.MonkeyPatch) -> None:
    methods: list[str] = []

    def fake_urlopen(request, timeout):
        methods.append(request.get_method())
        if request.full_url.endswith("/missing"):
            raise urllib.error.HTTPError(request.full_url, 404, "Not Found", None, None)
        return _Response(b"")

    monkeypatch.setattr(urllib.request, "urlopen", fake_urlopen)
    fetcher = HttpFetcher(settings=SETTINGS)

    assert fetcher.exists("https://example.org/present")
    assert not fetcher.exists("https://example.org/missing")
    assert methods == ["HEAD", "HEAD"]


def test_cancellation_check_stops_requests(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_urlopen(request, timeout):  # pragma: no cover
        raise AssertionError("request should not be sent")

    monkeypatch.setattr(urllib.request, "urlopen", fake_urlopen)
    fetcher = HttpFetcher(settings=SETTINGS).with_cancellation(lambda: True)

    with pytest.raises(HarvestCancelledError):
        fetcher.get_text("https://example.org/a")


class _BrokenBodyResponse(_Response):
    def __init__(self, error: Exception) -> None:
        super().__init__(b"")
        self.error = error

    def read(self, *args) -> bytes:
        raise self.error


@pytest.mark.parametrize(
    "error",
    [http.client.IncompleteRead(b"partial", 100), ssl.SSLError("decryption failed")],
)
def test_body_read_failures_are_network_failures(monkeypatch: pytest.MonkeyPatch, error: Exception) -> None:
    monkeypatch.setattr(urllib.request, "urlopen", lambda request, timeout: _BrokenBodyResponse(error))

    with pytest.raises(NetworkFailure) as info:
        HttpFetcher(settings=SETTINGS).get_text("https://example.org/book/_toc.yml")
    assert info.value.url == "https://example.org/book/_toc.yml"
    assert info.value.__cause__ is error
