"""
FastAPI application exposing content extraction over HTTP.
"""

from __future__ import annotations

import time
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional, cast

import structlog
import uvicorn
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from pydantic import BaseModel, Field

from textquarry import __version__
from textquarry.config.config import Config, settings
from textquarry.exceptions import AllStrategiesExhaustedError, InvalidUrlError
from textquarry.extractor.manager import ContentExtractor
from textquarry.extractor.models import SiteType

logger = structlog.get_logger(__name__)


class ExtractRequest(BaseModel):
    url: str = Field(..., description="Page to extract.")
    site_type: SiteType = Field(default=SiteType.GENERIC, description="generic or social")


class ExtractResponse(BaseModel):
    title: str
    content: str
    imageUrl: Optional[str] = None


def create_app(config: Config | None = None, extractor: ContentExtractor | None = None) -> FastAPI:
    """Build the API; the app owns one ContentExtractor for its lifespan."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        app_config = config if config is not None else cast(Config, settings)
        app.state.extractor = extractor or ContentExtractor(app_config)
        app.state.start_time = time.time()
        logger.info("Starting textquarry API", version=__version__)
        async with app.state.extractor:
            yield
        logger.info("Shutting down textquarry API")

    app = FastAPI(title="textquarry", version=__version__, lifespan=lifespan)

    @app.post("/extract", response_model=ExtractResponse)
    async def extract(body: ExtractRequest, request: Request) -> Dict[str, Any]:
        content_extractor: ContentExtractor = request.app.state.extractor
        try:
            result = await content_extractor.extract(body.url, body.site_type)
        except InvalidUrlError as e:
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e
        except AllStrategiesExhaustedError as e:
            raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e)) from e
        return result.to_dict()

    @app.get("/health")
    async def health_check(request: Request) -> Dict[str, Any]:
        """Health check endpoint for Kubernetes/Docker."""
        return {
            "status": "healthy",
            "version": __version__,
            "uptime": time.time() - request.app.state.start_time,
        }

    @app.get("/metrics")
    async def get_prometheus_metrics() -> PlainTextResponse:
        """Endpoint for Prometheus to scrape."""
        return PlainTextResponse(generate_latest(), media_type=CONTENT_TYPE_LATEST)

    return app


def run_web_server(config: Config, host: str, port: int) -> None:
    """Serve the API with uvicorn."""
    logger.info("Serving textquarry API", host=host, port=port)
    uvicorn.run(create_app(config), host=host, port=port, log_level="info")
