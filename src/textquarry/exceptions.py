"""
Error taxonomy for content extraction.

Every failure raised inside a strategy is an ``ExtractionError`` so the
orchestrator can record it and move on; only ``AllStrategiesExhaustedError``
and ``InvalidUrlError`` reach callers of ``ContentExtractor.extract``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Sequence

if TYPE_CHECKING:
    from textquarry.extractor.models import FetchAttemptOutcome


class ExtractionError(Exception):
    """Base class for all extraction failures."""

    pass


class FetchTimeoutError(ExtractionError):
    """Raised when a request exceeds its wall-clock budget."""

    def __init__(self, url: str, timeout: float) -> None:
        super().__init__(f"timeout after {timeout:g}s")
        self.url = url
        self.timeout = timeout


class NetworkFailureError(ExtractionError):
    """Raised on connection errors and non-success HTTP statuses."""

    def __init__(self, message: str, *, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


class BotProtectionError(ExtractionError):
    """Raised when a challenge page is served instead of content."""

    pass


class ContentTooShortError(ExtractionError):
    """Raised when the usable text falls below the minimum length."""

    pass


class InvalidUrlError(ExtractionError, ValueError):
    """Raised by pre-flight URL checks, before any network activity."""

    pass


class AllStrategiesExhaustedError(ExtractionError):
    """Raised when every strategy in the chain has failed."""

    def __init__(self, outcomes: Sequence["FetchAttemptOutcome"]) -> None:
        self.outcomes: List["FetchAttemptOutcome"] = list(outcomes)
        reasons = " | ".join(f"{outcome.strategy}: {outcome.reason}" for outcome in self.outcomes)
        super().__init__(f"Failed to fetch content. Attempts: {reasons}")

    @property
    def reasons(self) -> List[str]:
        return [outcome.reason or "" for outcome in self.outcomes]


class SourceResolutionError(ExtractionError):
    """Raised when a pipeline source cannot be turned into text."""

    def __init__(self, kind: str, value: str, reason: str) -> None:
        super().__init__(f"Could not resolve {kind} source '{value}': {reason}")
        self.kind = kind
        self.value = value
        self.reason = reason
