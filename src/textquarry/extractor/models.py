"""
Data models for extraction results.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class SiteType(Enum):
    """Selects the noise filter applied to rendered text."""

    GENERIC = "generic"
    SOCIAL = "social"


@dataclass(slots=True, frozen=True)
class ScrapedResult:
    """Final output of one successful extraction."""

    title: str
    content: str
    image_url: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the result."""
        if not self.content.strip():
            raise ValueError("content must not be empty")

    def to_dict(self) -> Dict[str, Any]:
        """Wire form consumed by canvas nodes and the HTTP API."""
        return {"title": self.title, "content": self.content, "imageUrl": self.image_url}


@dataclass(slots=True, frozen=True)
class FetchAttemptOutcome:
    """Why one strategy failed during an extraction."""

    strategy: str
    reason: str


@dataclass(slots=True)
class ScoredCandidate:
    """A DOM element and the score accumulated for it during one pass."""

    element: Any
    score: float = 0.0
