"""
Acquisition strategies tried, in order, by the content extractor.

A strategy is two steps: ``acquire`` turns the target URL into a raw
payload through one external service, and ``process`` turns that payload
into a ScrapedResult. Either step raises an ExtractionError subclass on
failure; the extractor records it and moves on to the next strategy.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import Dict, List, Optional
from urllib.parse import quote

import structlog

from ..config.config import Config, ExtractionSettings
from ..crawler.http_client import HttpClient
from ..exceptions import ContentTooShortError, NetworkFailureError
from .bot_detection import HTML_SIGNATURES, RENDERED_SIGNATURES, ensure_not_bot_wall
from .metadata import ResultAssembler, extract_html_metadata, extract_markdown_metadata
from .models import ScrapedResult, SiteType
from .noise_filters import GENERIC_FILTER, filter_for
from .readability_scorer import ContentScorer, LinkDensityPruner
from .soup_document import SoupDocument

logger = structlog.get_logger(__name__)


def format_endpoint(template: str, url: str) -> str:
    """Fill an endpoint template with the raw and percent-encoded target URL."""
    return template.format(url=url, url_quoted=quote(url, safe=""))


class Strategy(ABC):
    """One acquisition path: an external service plus its cleanup."""

    name: str = "strategy"

    def __init__(self, template: str, settings: ExtractionSettings, *, timeout: Optional[float] = None) -> None:
        self.template = template
        self.settings = settings
        self.timeout = timeout
        self.assembler = ResultAssembler(settings)

    def endpoint(self, url: str) -> str:
        return format_endpoint(self.template, url)

    def request_headers(self) -> Dict[str, str]:
        return {}

    async def acquire(self, client: HttpClient, url: str) -> str:
        """Fetch the raw payload for ``url``; non-2xx statuses are failures."""
        response = await client.fetch(self.endpoint(url), headers=self.request_headers(), timeout=self.timeout)
        if not response.ok:
            raise NetworkFailureError(f"status {response.status}", status=response.status)
        return response.body

    @abstractmethod
    def process(self, payload: str, url: str, site_type: SiteType) -> ScrapedResult:
        """Turn a raw payload into a result or raise an ExtractionError."""


class RenderProxyStrategy(Strategy):
    """Pre-rendered markdown from a page rendering service."""

    name = "render_proxy"

    def __init__(
        self,
        template: str,
        settings: ExtractionSettings,
        *,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> None:
        super().__init__(template, settings, timeout=timeout)
        self.api_key = api_key

    def request_headers(self) -> Dict[str, str]:
        if self.api_key:
            return {"Authorization": f"Bearer {self.api_key}"}
        return {}

    def process(self, payload: str, url: str, site_type: SiteType) -> ScrapedResult:
        text = payload.strip()
        if len(text) <= self.settings.min_content_length:
            raise ContentTooShortError(f"rendered payload too short ({len(text)} chars)")

        metadata = extract_markdown_metadata(text)
        ensure_not_bot_wall(metadata.title, text[: self.settings.bot_sample_length], RENDERED_SIGNATURES)

        noise_filter = filter_for(site_type)
        body = noise_filter.clean(text)
        logger.debug("Filtered rendered markdown", filter=noise_filter.name, before=len(text), after=len(body))
        return self.assembler.assemble(metadata.title, body, image_url=metadata.image_url)


class HtmlStrategy(Strategy):
    """Raw HTML through a proxy, located by the DOM scorer."""

    def __init__(self, template: str, settings: ExtractionSettings, *, timeout: Optional[float] = None) -> None:
        super().__init__(template, settings, timeout=timeout)
        self.scorer = ContentScorer()
        self.pruner = LinkDensityPruner()

    def extract_html(self, html: str, url: str) -> ScrapedResult:
        document = SoupDocument.parse(html)
        # Metadata first: scoring strips <meta> tags.
        metadata = extract_html_metadata(document, base_url=url)
        ensure_not_bot_wall(metadata.title, signatures=HTML_SIGNATURES)

        container = self.scorer.score(document)
        removed = self.pruner.prune(container)
        # No DOM-level social filter exists, so HTML always gets the generic line filter.
        body = GENERIC_FILTER.clean(container.block_text())
        logger.debug("Extracted HTML content", container=container.tag, pruned=removed, length=len(body))
        return self.assembler.assemble(metadata.title, body, metadata.description, metadata.image_url)

    def process(self, payload: str, url: str, site_type: SiteType) -> ScrapedResult:
        return self.extract_html(payload, url)


class JsonProxyStrategy(HtmlStrategy):
    """Raw HTML wrapped in a JSON envelope's ``contents`` field."""

    name = "json_proxy"

    def process(self, payload: str, url: str, site_type: SiteType) -> ScrapedResult:
        try:
            data = json.loads(payload)
        except json.JSONDecodeError as e:
            raise NetworkFailureError(f"invalid proxy response: {e.msg}") from e

        contents = data.get("contents") if isinstance(data, dict) else None
        if not contents or not isinstance(contents, str):
            raise NetworkFailureError("proxy response has no contents")
        return self.extract_html(contents, url)


class RawProxyStrategy(HtmlStrategy):
    """Raw HTML passed straight through a proxy."""

    name = "raw_proxy"


def build_strategies(config: Config) -> List[Strategy]:
    """Instantiate the configured strategies in priority order."""
    strategy_config = config.strategies
    settings = config.extraction
    timeout = config.fetch.timeout

    factories = {
        RenderProxyStrategy.name: lambda: RenderProxyStrategy(
            strategy_config.render_proxy_template,
            settings,
            api_key=strategy_config.render_proxy_api_key,
            timeout=timeout,
        ),
        JsonProxyStrategy.name: lambda: JsonProxyStrategy(strategy_config.json_proxy_template, settings, timeout=timeout),
        RawProxyStrategy.name: lambda: RawProxyStrategy(strategy_config.raw_proxy_template, settings, timeout=timeout),
    }
    return [factories[name]() for name in strategy_config.order]
