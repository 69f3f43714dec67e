"""
Readability-style location of the main content container.

The scorer gives every paragraph-like element a score from its length and
comma count, credits the full score to its parent and half of it to its
grandparent, and picks the best-scoring element. Crediting two levels up
copes with both one large ``<article>`` and many small paragraph wrappers.
"""

from __future__ import annotations

from typing import Dict, List

import structlog

from .models import ScoredCandidate
from .protocols import HtmlDocument, HtmlElement

logger = structlog.get_logger(__name__)


class ContentScorer:
    """Finds the element most likely to hold the page's primary text."""

    def __init__(self) -> None:
        self.config = {
            "junk_tags": [
                "script",
                "style",
                "noscript",
                "iframe",
                "svg",
                "button",
                "input",
                "form",
                "textarea",
                "meta",
                "link",
                "aside",
                "nav",
                "footer",
                "header",
            ],
            "noise_selectors": [
                ".ad",
                ".ads",
                ".advertisement",
                ".social-share",
                ".share-buttons",
                ".related-articles",
                ".related-posts",
                ".sidebar",
                ".comments",
                ".newsletter-signup",
                ".popup",
                ".hidden",
                '[aria-hidden="true"]',
                "#sidebar",
                "#comments",
                ".outbrain",
                ".taboola",
                # Social feed chrome
                ".job-details-jobs-unified-top-card__content--two-pane",
                ".contextual-sign-in-modal",
                ".global-nav",
                ".ad-banner-container",
            ],
            "paragraph_selector": (
                "p, article, div.feed-shared-update-v2__description-wrapper, .update-components-text"
            ),
            "min_paragraph_length": 25,
            "chars_per_point": 100,
            "max_length_points": 3,
        }

    def strip_noise(self, document: HtmlDocument) -> None:
        """Remove non-content tags and known noise widgets."""
        for element in document.iter_select(self.config["junk_tags"] + self.config["noise_selectors"]):
            element.remove()

    def paragraph_score(self, text: str) -> int:
        length_points = min(len(text) // self.config["chars_per_point"], self.config["max_length_points"])
        return 1 + text.count(",") + length_points

    def score_candidates(self, document: HtmlDocument) -> List[ScoredCandidate]:
        """Accumulate paragraph scores onto parents and grandparents."""
        candidates: Dict[int, ScoredCandidate] = {}

        def credit(element: HtmlElement, points: float) -> None:
            candidate = candidates.get(element.key())
            if candidate is None:
                candidate = candidates[element.key()] = ScoredCandidate(element=element)
            candidate.score += points

        for paragraph in document.select(self.config["paragraph_selector"]):
            text = paragraph.text()
            if len(text) < self.config["min_paragraph_length"]:
                continue

            score = self.paragraph_score(text)
            parent = paragraph.parent()
            if parent is None:
                continue
            credit(parent, score)
            grandparent = parent.parent()
            if grandparent is not None:
                credit(grandparent, score / 2)

        return list(candidates.values())

    def score(self, document: HtmlDocument) -> HtmlElement:
        """Strip noise and return the content container.

        Falls back to the document body when no candidate scores above zero.
        """
        self.strip_noise(document)

        top: ScoredCandidate | None = None
        for candidate in self.score_candidates(document):
            if candidate.score > 0 and (top is None or candidate.score > top.score):
                top = candidate

        if top is None:
            logger.debug("No scored candidate, falling back to body")
            return document.body

        logger.debug("Selected content container", tag=top.element.tag, score=top.score)
        return top.element


class LinkDensityPruner:
    """Removes navigation-like blocks from a content container."""

    def __init__(
        self,
        *,
        max_link_density: float = 0.6,
        min_text_length: int = 50,
        boilerplate_max_length: int = 100,
    ) -> None:
        self.max_link_density = max_link_density
        self.min_text_length = min_text_length
        self.boilerplate_max_length = boilerplate_max_length
        self.block_selector = "div, ul, li, section"
        self.boilerplate_phrases = ("related articles", "read more", "most watched")

    @staticmethod
    def link_density(element: HtmlElement) -> float:
        links = element.select("a")
        if not links:
            return 0.0
        link_length = sum(len(link.text()) for link in links)
        return link_length / (len(element.text()) or 1)

    def is_boilerplate(self, text: str) -> bool:
        lowered = text.lower()
        return len(text) < self.boilerplate_max_length and any(
            phrase in lowered for phrase in self.boilerplate_phrases
        )

    def prune(self, container: HtmlElement) -> int:
        """Remove noisy descendants in place; returns how many were removed."""
        removed = 0
        for element in container.select(self.block_selector):
            text = element.text()
            too_linky = len(text) > self.min_text_length and self.link_density(element) > self.max_link_density
            if too_linky or self.is_boilerplate(text):
                element.remove()
                removed += 1
        return removed
