"""
Turns pipeline sources into text and renders them as one prompt context.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List

import structlog

from ..exceptions import SourceResolutionError
from ..extractor.manager import ContentExtractor
from ..extractor.models import SiteType
from .transcripts import TranscriptClient

logger = structlog.get_logger(__name__)

VIDEO_HOSTS = ("youtube.com", "youtu.be")


class SourceKind(Enum):
    VIDEO = "video"
    BLOG = "blog"
    LINKEDIN = "linkedin"
    TEXT = "text"
    FILE = "file"


@dataclass(slots=True, frozen=True)
class SourceRef:
    """One user-supplied input of a pipeline."""

    kind: SourceKind
    value: str


_PLACEHOLDER_LABELS = {
    SourceKind.VIDEO: ("Video URL", "Transcript fetch failed"),
    SourceKind.BLOG: ("Blog URL", "Content fetch failed"),
    SourceKind.LINKEDIN: ("LinkedIn URL", "Post fetch failed"),
}


def is_video_url(value: str) -> bool:
    return any(host in value for host in VIDEO_HOSTS)


class SourceResolver:
    """Shared source handling for every pipeline that consumes sources."""

    def __init__(self, extractor: ContentExtractor, transcripts: TranscriptClient) -> None:
        self.extractor = extractor
        self.transcripts = transcripts

    async def resolve(self, source: SourceRef) -> str:
        """Return the text of one source or raise SourceResolutionError."""
        kind = source.kind
        value = source.value.strip()

        if kind in (SourceKind.TEXT, SourceKind.FILE):
            return source.value

        if kind is SourceKind.VIDEO and not is_video_url(value):
            return f"[Video URL/Text]: {value}"

        try:
            if kind is SourceKind.VIDEO:
                transcript = await self.transcripts.get_transcript(value)
                return f"[Video Transcript: {value}]\n{transcript}"
            site_type = SiteType.SOCIAL if kind is SourceKind.LINKEDIN else SiteType.GENERIC
            result = await self.extractor.extract(value, site_type)
            return result.content
        except Exception as e:
            raise SourceResolutionError(kind.value, value, str(e)) from e

    def placeholder(self, source: SourceRef) -> str:
        label, note = _PLACEHOLDER_LABELS[source.kind]
        return f"[{label}]: {source.value} (Note: {note}, using URL only)"

    async def build_context(self, sources: Iterable[SourceRef]) -> str:
        """Resolve sources in order into numbered ``Source n (kind): text`` blocks.

        A source that cannot be resolved is replaced by a placeholder
        naming its URL instead of failing the whole context.
        """
        blocks: List[str] = []
        for index, source in enumerate(sources, start=1):
            try:
                text = await self.resolve(source)
            except SourceResolutionError as e:
                logger.warning("Source resolution failed", kind=e.kind, value=e.value, reason=e.reason)
                text = self.placeholder(source)
            blocks.append(f"Source {index} ({source.kind.value}): {text}")
        return "\n\n".join(blocks)
