"""
Video transcript retrieval through a hosted transcript service.
"""

from __future__ import annotations

import json
from typing import Any, Optional

import structlog

from ..config.config import TranscriptConfig
from ..crawler.http_client import HttpClient
from ..exceptions import NetworkFailureError
from ..extractor.strategies import format_endpoint

logger = structlog.get_logger(__name__)


def _decode(body: str) -> Any:
    try:
        return json.loads(body)
    except json.JSONDecodeError:
        return None


def join_transcript(content: Any) -> str:
    """Flatten the service's ``content`` field: a string, or a list of ``{text}`` segments."""
    if isinstance(content, list):
        return " ".join(
            segment["text"] for segment in content if isinstance(segment, dict) and isinstance(segment.get("text"), str)
        )
    return str(content)


class TranscriptClient:
    """Fetches the transcript of a video URL."""

    def __init__(self, config: TranscriptConfig, client: HttpClient, *, timeout: Optional[float] = None) -> None:
        self.config = config
        self.client = client
        self.timeout = timeout

    async def get_transcript(self, video_url: str) -> str:
        """
        Return the transcript text of ``video_url``.

        Raises:
            NetworkFailureError: non-2xx status or a response without content
            FetchTimeoutError: the service did not answer in time
        """
        headers = {"Content-Type": "application/json"}
        if self.config.api_key:
            headers["x-api-key"] = self.config.api_key

        endpoint = format_endpoint(self.config.endpoint_template, video_url)
        response = await self.client.fetch(endpoint, headers=headers, timeout=self.timeout)
        data = _decode(response.body)

        if not response.ok:
            message = data.get("message") if isinstance(data, dict) else None
            raise NetworkFailureError(message or f"Transcription failed: status {response.status}", status=response.status)

        content = data.get("content") if isinstance(data, dict) else None
        if not content:
            raise NetworkFailureError("Transcript content not found in response.")

        transcript = join_transcript(content)
        logger.debug("Fetched transcript", url=video_url, length=len(transcript))
        return transcript
