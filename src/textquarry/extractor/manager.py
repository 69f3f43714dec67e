"""
ContentExtractor: runs the strategy chain for one URL at a time.

Strategies execute strictly in priority order. A failing strategy is
logged and recorded, then the next one runs; only exhaustion of the
whole chain is reported to the caller. Payload processing runs in a
worker thread. Cancelling an ``extract`` call cancels the fetch in flight
(or abandons the processing step) and nothing after it runs.
"""

from __future__ import annotations

import asyncio
import time
import uuid
from typing import List, Optional, Sequence

import structlog

from ..config.config import Config
from ..crawler.http_client import HttpClient
from ..exceptions import AllStrategiesExhaustedError
from ..observability.metrics import increment
from ..security.validation import validate_url
from .models import FetchAttemptOutcome, ScrapedResult, SiteType
from .strategies import Strategy, build_strategies

logger = structlog.get_logger(__name__)


class ContentExtractor:
    """
    Extracts the main readable text of a web page.

    The extractor owns no per-call state, so concurrent ``extract`` calls
    for different URLs may share one instance.
    """

    def __init__(
        self,
        config: Config,
        *,
        client: Optional[HttpClient] = None,
        strategies: Optional[Sequence[Strategy]] = None,
    ) -> None:
        """
        Args:
            config: Engine configuration (endpoints, credentials, timeouts)
            client: Shared HTTP client; one is created and owned if omitted
            strategies: Strategy chain; built from ``config.strategies`` if omitted
        """
        self.config = config
        self.client = client or HttpClient(config)
        self._owns_client = client is None
        self.strategies: List[Strategy] = list(strategies) if strategies is not None else build_strategies(config)
        self.logger = logger.bind(component="ContentExtractor")

    async def __aenter__(self) -> "ContentExtractor":
        await self.client.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._owns_client:
            await self.client.close()

    async def extract(self, url: str, site_type: SiteType = SiteType.GENERIC) -> ScrapedResult:
        """
        Run the strategy chain for ``url``.

        Raises:
            InvalidUrlError: before any network activity, if the URL fails its shape check
            AllStrategiesExhaustedError: every strategy failed; carries each reason in order
        """
        url = validate_url(url, site_type)

        with structlog.contextvars.bound_contextvars(extraction_id=uuid.uuid4().hex[:12]):
            start_time = time.time()
            outcomes: List[FetchAttemptOutcome] = []
            self.logger.info("Starting extraction", url=url, site_type=site_type.value)

            for strategy in self.strategies:
                self.logger.debug("Attempting strategy", strategy=strategy.name, url=url)
                try:
                    payload = await strategy.acquire(self.client, url)
                    # Parsing and scoring are CPU-bound, so they run in a worker thread.
                    # to_thread copies the context, keeping extraction_id on its log lines.
                    result = await asyncio.to_thread(strategy.process, payload, url, site_type)
                except Exception as e:
                    outcome = FetchAttemptOutcome(strategy=strategy.name, reason=str(e) or type(e).__name__)
                    outcomes.append(outcome)
                    increment("strategy_attempts_total", strategy=strategy.name, outcome="failure")
                    self.logger.warning(
                        "Strategy failed",
                        strategy=strategy.name,
                        url=url,
                        reason=outcome.reason,
                        error_type=type(e).__name__,
                    )
                    continue

                increment("strategy_attempts_total", strategy=strategy.name, outcome="success")
                increment("extractions_total", site_type=site_type.value, outcome="success")
                self.logger.info(
                    "Extraction completed",
                    strategy=strategy.name,
                    url=url,
                    content_length=len(result.content),
                    elapsed=round(time.time() - start_time, 3),
                )
                return result

            increment("extractions_total", site_type=site_type.value, outcome="exhausted")
            error = AllStrategiesExhaustedError(outcomes)
            self.logger.warning("All strategies failed", url=url, attempts=len(outcomes), error=str(error))
            raise error

    async def get_blog_content(self, url: str) -> ScrapedResult:
        return await self.extract(url, SiteType.GENERIC)

    async def get_linkedin_content(self, url: str) -> ScrapedResult:
        return await self.extract(url, SiteType.SOCIAL)
