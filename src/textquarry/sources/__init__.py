"""
Pipeline source resolution.
"""

from .resolver import SourceKind, SourceRef, SourceResolver
from .transcripts import TranscriptClient

__all__ = [
    "SourceKind",
    "SourceRef",
    "SourceResolver",
    "TranscriptClient",
]
