"""
Tests for the bounded HTTP fetcher.
"""

from __future__ import annotations

import asyncio
import time

import aiohttp
import pytest
from aioresponses import aioresponses

from textquarry.crawler.http_client import HttpClient
from textquarry.exceptions import FetchTimeoutError, NetworkFailureError

URL = "https://example.com/page"


class _StallingResponse:
    """Response whose body download never finishes."""

    status = 200
    url = URL
    headers: dict = {}

    def __init__(self) -> None:
        self.released = False
        self.cancelled = False

    async def __aenter__(self) -> "_StallingResponse":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.released = True
        self.cancelled = exc_type is asyncio.CancelledError

    async def text(self, errors: str = "strict") -> str:
        await asyncio.sleep(30)
        return ""


class _StallingSession:
    def __init__(self) -> None:
        self.response = _StallingResponse()

    def get(self, url, headers=None) -> _StallingResponse:
        return self.response

    async def close(self) -> None:
        pass


@pytest.fixture
def stalled_client(config) -> HttpClient:
    client = HttpClient(config)
    client.session = _StallingSession()  # type: ignore[assignment]
    client._is_initialized = True
    return client


class TestHttpClient:
    @pytest.mark.asyncio
    async def test_fetch_success(self, http_client):
        with aioresponses() as m:
            m.get(URL, status=200, body="<html>hello</html>")
            response = await http_client.fetch(URL)

        assert response.ok
        assert response.status == 200
        assert response.body == "<html>hello</html>"
        assert response.end_ts >= response.start_ts

    @pytest.mark.asyncio
    async def test_non_success_status_is_returned(self, http_client):
        with aioresponses() as m:
            m.get(URL, status=403, body="forbidden")
            response = await http_client.fetch(URL)

        assert not response.ok
        assert response.status == 403
        assert response.body == "forbidden"

    @pytest.mark.asyncio
    async def test_extra_headers_sent(self, http_client):
        with aioresponses() as m:
            m.get(URL, status=200, body="ok")
            await http_client.fetch(URL, headers={"Authorization": "Bearer secret"})
            call = next(iter(m.requests.values()))[0]

        assert call.kwargs["headers"]["Authorization"] == "Bearer secret"

    @pytest.mark.asyncio
    async def test_timeout_maps_to_fetch_timeout_error(self, http_client):
        with aioresponses() as m:
            m.get(URL, timeout=True)
            with pytest.raises(FetchTimeoutError, match="timeout"):
                await http_client.fetch(URL, timeout=1.5)

    @pytest.mark.asyncio
    async def test_client_error_maps_to_network_failure(self, http_client):
        with aioresponses() as m:
            m.get(URL, exception=aiohttp.ClientConnectionError("connection refused"))
            with pytest.raises(NetworkFailureError, match="connection refused"):
                await http_client.fetch(URL)

    @pytest.mark.asyncio
    async def test_fetch_requires_initialize(self, config):
        client = HttpClient(config)
        with pytest.raises(RuntimeError):
            await client.fetch(URL)

    @pytest.mark.asyncio
    async def test_context_manager_closes_session(self, config):
        async with HttpClient(config) as client:
            assert client.session is not None
        assert client.session is None


class TestBoundedTransfer:
    """The budget covers the body download, and expiry aborts the transfer."""

    @pytest.mark.asyncio
    async def test_stalled_body_times_out(self, stalled_client):
        start = time.monotonic()
        with pytest.raises(FetchTimeoutError) as excinfo:
            await stalled_client.fetch(URL, timeout=0.05)

        assert time.monotonic() - start < 5
        assert excinfo.value.timeout == 0.05
        assert stalled_client.session.response.released
        assert stalled_client.session.response.cancelled

    @pytest.mark.asyncio
    async def test_caller_cancellation_aborts_transfer(self, stalled_client):
        task = asyncio.create_task(stalled_client.fetch(URL, timeout=30))
        await asyncio.sleep(0.05)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert stalled_client.session.response.released
