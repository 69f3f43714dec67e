"""
Bounded HTTP fetcher: one GET with a hard wall-clock limit.

The limit covers connection setup and the full body download. When it
expires the in-flight request is cancelled and its connection released,
so a stalled transfer never outlives its budget. There are no retries at
this layer; falling back is the strategy chain's job.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

import aiohttp
import structlog

from textquarry.config.config import Config
from textquarry.exceptions import FetchTimeoutError, NetworkFailureError
from textquarry.observability.metrics import increment, observe

logger = structlog.get_logger(__name__)


@dataclass
class FetchResponse:
    """Response from a bounded fetch with timing information."""

    status: int
    body: str
    url: str
    final_url: str
    start_ts: float
    end_ts: float
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def elapsed(self) -> float:
        return self.end_ts - self.start_ts


class HttpClient:
    """Shared aiohttp session wrapper with per-request timeouts."""

    def __init__(self, config: Config):
        self.config = config
        self.fetch_config = config.fetch
        self.session: Optional[aiohttp.ClientSession] = None
        self._is_initialized = False

        logger.debug(
            "HTTP client created",
            timeout=self.fetch_config.timeout,
            user_agent=self.fetch_config.user_agent,
        )

    async def initialize(self) -> None:
        """Initialize the HTTP client session."""
        if self.session is None:
            self.session = aiohttp.ClientSession(headers={"User-Agent": self.fetch_config.user_agent})
            self._is_initialized = True
            logger.debug("HTTP client session initialized")

    async def close(self) -> None:
        """Close the HTTP client and clean up resources."""
        if self.session:
            await self.session.close()
            self.session = None
        self._is_initialized = False
        logger.debug("HTTP client closed")

    async def __aenter__(self) -> "HttpClient":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def fetch(
        self,
        url: str,
        *,
        headers: Optional[Mapping[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> FetchResponse:
        """
        GET ``url`` and read the whole body within ``timeout`` seconds.

        Args:
            url: URL to fetch
            headers: Extra request headers
            timeout: Wall-clock budget in seconds (None = config default)

        Returns:
            FetchResponse for any HTTP status; callers decide what non-2xx means

        Raises:
            FetchTimeoutError: the budget expired; the transfer was cancelled
            NetworkFailureError: the request failed without a response
        """
        if not self._is_initialized or self.session is None:
            raise RuntimeError("HTTP client not initialized. Call initialize() first.")

        if timeout is None:
            timeout = self.fetch_config.timeout

        start_time = time.time()
        try:
            async with asyncio.timeout(timeout):
                async with self.session.get(url, headers=dict(headers or {})) as response:
                    body = await response.text(errors="replace")
                    result = FetchResponse(
                        status=response.status,
                        body=body,
                        url=url,
                        final_url=str(response.url),
                        start_ts=start_time,
                        end_ts=time.time(),
                        headers=dict(response.headers),
                    )
        except TimeoutError as e:
            increment("fetch_failures_total", reason="timeout")
            logger.warning("Request timed out", url=url, timeout=timeout)
            raise FetchTimeoutError(url, timeout) from e
        except aiohttp.ClientError as e:
            increment("fetch_failures_total", reason="network")
            logger.warning("Request failed", url=url, error=str(e), error_type=type(e).__name__)
            raise NetworkFailureError(f"network error: {e}") from e

        increment("fetch_responses_total", status_class=f"{result.status // 100}xx")
        observe("fetch_latency_seconds", result.elapsed)
        logger.debug("Fetched", url=url, status=result.status, elapsed=round(result.elapsed, 3))
        return result
