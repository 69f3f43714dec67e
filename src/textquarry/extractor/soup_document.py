"""
BeautifulSoup-backed implementation of the HtmlDocument protocol.
"""

from __future__ import annotations

import copy
from typing import Iterator, Optional

import structlog
from bs4 import BeautifulSoup, Tag
from soupsieve import SelectorSyntaxError

from .protocols import HtmlDocument, HtmlElement

logger = structlog.get_logger(__name__)

# Closing one of these ends a paragraph in the linearized text.
BLOCK_TAGS = ["p", "div", "h1", "h2", "h3", "h4", "h5", "h6", "li", "tr"]


class SoupElement(HtmlElement):
    """Wraps a bs4 Tag. Equality and hashing follow node identity."""

    __slots__ = ("_tag",)

    def __init__(self, tag: Tag) -> None:
        self._tag = tag

    def __eq__(self, other: object) -> bool:
        return isinstance(other, SoupElement) and other._tag is self._tag

    def __hash__(self) -> int:
        return id(self._tag)

    def __repr__(self) -> str:
        return f"SoupElement(<{self._tag.name}>)"

    @property
    def tag(self) -> str:
        return self._tag.name

    def select(self, selector: str) -> list[HtmlElement]:
        return [SoupElement(tag) for tag in self._tag.select(selector)]

    def parent(self) -> Optional[HtmlElement]:
        parent = self._tag.parent
        if parent is None or isinstance(parent, BeautifulSoup):
            return None
        return SoupElement(parent)

    def text(self) -> str:
        return self._tag.get_text()

    def block_text(self) -> str:
        # Work on a copy so linearizing never mutates the scored document.
        fragment = copy.copy(self._tag)
        for br in fragment.find_all("br"):
            br.replace_with("\n")
        for block in fragment.find_all(BLOCK_TAGS):
            block.append("\n\n")
        if fragment.name in BLOCK_TAGS:
            fragment.append("\n\n")
        return fragment.get_text()

    def attr(self, name: str) -> Optional[str]:
        value = self._tag.get(name)
        if isinstance(value, list):
            return " ".join(value)
        return value

    def remove(self) -> None:
        self._tag.extract()

    def key(self) -> int:
        return id(self._tag)


class SoupDocument(HtmlDocument):
    """A page parsed with BeautifulSoup's built-in parser."""

    def __init__(self, html: str, parser: str = "html.parser") -> None:
        self._soup = BeautifulSoup(html, parser)

    @classmethod
    def parse(cls, html: str) -> "SoupDocument":
        return cls(html)

    @property
    def title(self) -> Optional[str]:
        title_tag = self._soup.find("title")
        if title_tag is None:
            return None
        title = " ".join(title_tag.get_text().split())
        return title or None

    @property
    def body(self) -> HtmlElement:
        body = self._soup.find("body")
        return SoupElement(body if isinstance(body, Tag) else self._soup)

    def select(self, selector: str) -> list[HtmlElement]:
        return [SoupElement(tag) for tag in self._soup.select(selector)]

    def select_first(self, selector: str) -> Optional[HtmlElement]:
        tag = self._soup.select_one(selector)
        return SoupElement(tag) if tag is not None else None

    def iter_select(self, selectors: list[str]) -> Iterator[HtmlElement]:
        for selector in selectors:
            try:
                matches = self._soup.select(selector)
            except SelectorSyntaxError as e:
                logger.debug("Skipping invalid selector", selector=selector, error=str(e))
                continue
            for tag in matches:
                yield SoupElement(tag)
