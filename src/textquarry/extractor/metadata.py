"""
Page metadata extraction and final result assembly.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urljoin

import structlog

from ..config.config import ExtractionSettings
from ..exceptions import ContentTooShortError
from .models import ScrapedResult
from .protocols import HtmlDocument

logger = structlog.get_logger(__name__)

DEFAULT_TITLE = "Extracted Content"

_MARKDOWN_TITLE = re.compile(r"^Title:[ \t]*(.*)$", re.MULTILINE)
_MARKDOWN_IMAGE = re.compile(r"!\[[^\]]*\]\(([^)\s]+)[^)]*\)")
_NON_ALNUM = re.compile(r"[^a-z0-9]")


@dataclass(slots=True, frozen=True)
class PageMetadata:
    """Title, description and representative image of a page."""

    title: str = DEFAULT_TITLE
    description: Optional[str] = None
    image_url: Optional[str] = None


def _meta_content(document: HtmlDocument, selector: str) -> Optional[str]:
    element = document.select_first(selector)
    if element is None:
        return None
    content = (element.attr("content") or "").strip()
    return content or None


def extract_html_metadata(document: HtmlDocument, base_url: Optional[str] = None) -> PageMetadata:
    """Read metadata before the document is cleaned (cleaning drops meta tags)."""
    image_url = _meta_content(document, 'meta[property="og:image"]') or _meta_content(
        document, 'meta[name="twitter:image"]'
    )
    if image_url and base_url and not image_url.startswith(("http://", "https://")):
        image_url = urljoin(base_url, image_url)

    description = _meta_content(document, 'meta[property="og:description"]') or _meta_content(
        document, 'meta[name="description"]'
    )

    return PageMetadata(title=document.title or DEFAULT_TITLE, description=description, image_url=image_url)


def extract_markdown_metadata(text: str) -> PageMetadata:
    """Read the ``Title:`` header and first image of rendered markdown."""
    title_match = _MARKDOWN_TITLE.search(text)
    title = title_match.group(1).strip() if title_match else ""
    image_match = _MARKDOWN_IMAGE.search(text)
    return PageMetadata(
        title=title or DEFAULT_TITLE,
        image_url=image_match.group(1) if image_match else None,
    )


def normalize_for_comparison(text: str) -> str:
    """Lowercase and drop everything that is not a letter or digit."""
    return _NON_ALNUM.sub("", text.lower())


def starts_with_title(title: str, body: str) -> bool:
    """True when the body already opens with the title, ignoring a leading "title" token."""
    normalized_title = normalize_for_comparison(title)
    normalized_body = normalize_for_comparison(body)
    if normalized_body.startswith("title"):
        normalized_body = normalized_body[len("title") :]
    return normalized_body.startswith(normalized_title)


class ResultAssembler:
    """Turns filtered body text and page metadata into a ScrapedResult."""

    def __init__(self, settings: ExtractionSettings | None = None) -> None:
        self.settings = settings or ExtractionSettings()

    def assemble(
        self,
        title: str,
        body_text: str,
        description: Optional[str] = None,
        image_url: Optional[str] = None,
    ) -> ScrapedResult:
        """Build the result or raise ContentTooShortError.

        A thin body (common for single-page apps) is replaced by the meta
        description when the description is long enough. The title is
        prepended as a ``Title:`` header unless the body already starts with it.
        """
        title = title.strip() or DEFAULT_TITLE
        body = body_text.strip()
        description = (description or "").strip()

        if len(body) < self.settings.thin_body_length and len(description) >= self.settings.min_description_length:
            logger.debug("Body too thin, using meta description", body_length=len(body))
            body = description

        if len(body) < self.settings.min_content_length:
            raise ContentTooShortError(
                f"Extracted content too short ({len(body)} < {self.settings.min_content_length} chars)"
            )

        content = body if starts_with_title(title, body) else f"Title: {title}\n\n{body}"
        return ScrapedResult(title=title, content=content, image_url=image_url or None)
