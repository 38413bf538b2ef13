"""Tests for the retrying HTTP client and default caption download."""

import httpx
import pytest

from media_resolver.core.http_client import (
    _MAX_BACKOFF,
    _NETWORK_ERRORS,
    _RETRYABLE_STATUS_CODES,
    HTTPClient,
)
from media_resolver.models.manifest import CaptionTrack

from .conftest import FakeClient


@pytest.fixture()
def no_backoff(monkeypatch):
    monkeypatch.setattr(HTTPClient, "_backoff", staticmethod(lambda attempt, response=None: 0.0))


def _transport(responses):
    """MockTransport replaying *responses* in order and recording requests."""
    seen = []
    queue = list(responses)

    def handler(request: httpx.Request):
        seen.append(request)
        item = queue.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    return httpx.MockTransport(handler), seen


class TestRetryConfig:
    def test_retryable_status_codes(self):
        assert {429, 500, 502, 503, 504} <= _RETRYABLE_STATUS_CODES
        # Client errors (except 429) are NOT retried
        for code in (400, 401, 403, 404):
            assert code not in _RETRYABLE_STATUS_CODES

    def test_max_backoff_is_capped(self):
        assert _MAX_BACKOFF == 30.0

    def test_network_error_types(self):
        error_names = {cls.__name__ for cls in _NETWORK_ERRORS}
        assert {"TimeoutException", "ConnectError", "ReadError", "WriteError"} <= error_names


class TestBackoff:
    def test_attempt_0(self):
        assert 1.0 <= HTTPClient._backoff(0) <= 2.0

    def test_caps_at_max(self):
        assert HTTPClient._backoff(100) <= _MAX_BACKOFF

    def test_retry_after_is_a_floor(self):
        response = httpx.Response(429, headers={"Retry-After": "12"})
        assert HTTPClient._backoff(0, response) >= 12.0


class TestClientInit:
    def test_default_headers_set(self):
        client = HTTPClient()
        assert "User-Agent" in client._default_headers
        assert client._default_headers["Accept"].startswith("text/vtt")

    def test_custom_headers_override(self):
        client = HTTPClient(headers={"Accept-Language": "ja"})
        assert client._default_headers["Accept-Language"] == "ja"


class TestGetText:
    @pytest.mark.asyncio
    async def test_returns_body(self):
        transport, seen = _transport([httpx.Response(200, text="WEBVTT\n")])
        async with HTTPClient(max_retries=0, transport=transport) as client:
            assert await client.get_text("https://cdn/captions/en") == "WEBVTT\n"
        assert len(seen) == 1

    @pytest.mark.asyncio
    async def test_retries_server_errors(self, no_backoff):
        transport, seen = _transport([httpx.Response(503), httpx.Response(200, text="ok")])
        async with HTTPClient(max_retries=2, transport=transport) as client:
            assert await client.get_text("https://cdn/captions/en") == "ok"
        assert len(seen) == 2

    @pytest.mark.asyncio
    async def test_retries_network_errors(self, no_backoff):
        transport, seen = _transport([httpx.ConnectError("refused"), httpx.Response(200, text="ok")])
        async with HTTPClient(max_retries=1, transport=transport) as client:
            assert await client.get_text("https://cdn/captions/en") == "ok"
        assert len(seen) == 2

    @pytest.mark.asyncio
    async def test_client_error_not_retried(self, no_backoff):
        transport, seen = _transport([httpx.Response(404)])
        async with HTTPClient(max_retries=3, transport=transport) as client:
            with pytest.raises(httpx.HTTPStatusError):
                await client.get_text("https://cdn/captions/en")
        assert len(seen) == 1

    @pytest.mark.asyncio
    async def test_network_error_after_retries(self, no_backoff):
        transport, _ = _transport([httpx.ReadError("reset")] * 2)
        async with HTTPClient(max_retries=1, transport=transport) as client:
            with pytest.raises(httpx.ReadError):
                await client.get_text("https://cdn/captions/en")


class TestDefaultTrackText:
    @pytest.mark.asyncio
    async def test_platform_client_downloads_track_url(self):
        transport, seen = _transport([httpx.Response(200, text="WEBVTT\n\n00:00.000 --> 00:01.000\nhi")])

        # Use the base-class download instead of the fake's canned text
        client = FakeClient()
        client._http = HTTPClient(max_retries=0, transport=transport)
        track = CaptionTrack(language_code="en", url="https://cdn/captions/en")
        text = await super(FakeClient, client).get_track_text(track)
        await client.http.close()

        assert text.endswith("hi")
        assert str(seen[0].url) == "https://cdn/captions/en"
