"""
Tests for TranscriptClient.
"""

from __future__ import annotations

import re

import pytest
from aioresponses import aioresponses

from textquarry.config.config import TranscriptConfig
from textquarry.exceptions import NetworkFailureError
from textquarry.sources.transcripts import TranscriptClient, join_transcript

VIDEO_URL = "https://www.youtube.com/watch?v=abc123"
ENDPOINT = re.compile(r"^https://api\.supadata\.ai/v1/youtube/transcript.*")


@pytest.fixture
def transcripts(http_client) -> TranscriptClient:
    return TranscriptClient(TranscriptConfig(api_key="test-key"), http_client)


def test_join_transcript():
    assert join_transcript("already text") == "already text"
    assert join_transcript([{"text": "hello"}, {"offset": 1}, {"text": "world"}, "junk"]) == "hello world"


class TestTranscriptClient:
    @pytest.mark.asyncio
    async def test_segments_joined(self, transcripts):
        with aioresponses() as m:
            m.get(ENDPOINT, status=200, payload={"content": [{"text": "hello", "offset": 0}, {"text": "world"}]})
            transcript = await transcripts.get_transcript(VIDEO_URL)
            call = next(iter(m.requests.values()))[0]

        assert transcript == "hello world"
        assert call.kwargs["headers"]["x-api-key"] == "test-key"

    @pytest.mark.asyncio
    async def test_string_content(self, transcripts):
        with aioresponses() as m:
            m.get(ENDPOINT, status=200, payload={"content": "the whole transcript"})
            assert await transcripts.get_transcript(VIDEO_URL) == "the whole transcript"

    @pytest.mark.asyncio
    async def test_service_error_message_surfaced(self, transcripts):
        with aioresponses() as m:
            m.get(ENDPOINT, status=401, payload={"message": "Invalid API key"})
            with pytest.raises(NetworkFailureError, match="Invalid API key"):
                await transcripts.get_transcript(VIDEO_URL)

    @pytest.mark.asyncio
    async def test_error_without_message(self, transcripts):
        with aioresponses() as m:
            m.get(ENDPOINT, status=500, body="upstream exploded")
            with pytest.raises(NetworkFailureError, match="status 500"):
                await transcripts.get_transcript(VIDEO_URL)

    @pytest.mark.asyncio
    async def test_missing_content(self, transcripts):
        with aioresponses() as m:
            m.get(ENDPOINT, status=200, payload={"lang": "en"})
            with pytest.raises(NetworkFailureError, match="not found"):
                await transcripts.get_transcript(VIDEO_URL)
