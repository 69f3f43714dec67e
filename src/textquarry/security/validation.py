"""
Pre-flight validation of target URLs.

Runs before any network activity so that malformed input never reaches a
third-party proxy.
"""

from __future__ import annotations

import re
from typing import List, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, Field

from ..exceptions import InvalidUrlError
from ..extractor.models import SiteType


class URLValidationRules(BaseModel):
    """Rules for URL validation."""

    allowed_schemes: List[str] = Field(default=["http", "https"])
    max_url_length: int = 2048
    social_url_pattern: str = r"linkedin\.com/|lnkd\.in/"


class InputValidator:
    """Validates URLs submitted for extraction."""

    def __init__(self, url_rules: Optional[URLValidationRules] = None):
        self.url_rules = url_rules or URLValidationRules()
        self._social_pattern = re.compile(self.url_rules.social_url_pattern, re.IGNORECASE)

    def validate_url(self, url: str, site_type: SiteType = SiteType.GENERIC) -> str:
        """
        Validate a URL for the given site type.

        Returns:
            The URL with surrounding whitespace removed

        Raises:
            InvalidUrlError: If the URL cannot be extracted from
        """
        url = (url or "").strip()
        if not url:
            raise InvalidUrlError("URL must not be empty")

        if len(url) > self.url_rules.max_url_length:
            raise InvalidUrlError(f"URL exceeds maximum length of {self.url_rules.max_url_length}")

        try:
            parsed = urlparse(url)
        except ValueError as e:
            raise InvalidUrlError(f"Invalid URL format: {e}") from e

        if parsed.scheme.lower() not in self.url_rules.allowed_schemes:
            raise InvalidUrlError(f"Invalid URL scheme: {parsed.scheme or '(none)'}")

        if not parsed.netloc:
            raise InvalidUrlError(f"URL has no host: {url}")

        if site_type is SiteType.SOCIAL and not self._social_pattern.search(url):
            raise InvalidUrlError(f"Not a supported social post URL: {url}")

        return url


_default_validator = InputValidator()


def validate_url(url: str, site_type: SiteType = SiteType.GENERIC) -> str:
    """Validate a URL with the default rules."""
    return _default_validator.validate_url(url, site_type)
