"""
Protocols for the HTML-parsing backend used by the content scorer.
"""

from __future__ import annotations

from typing import Iterator, Optional, Protocol, runtime_checkable


@runtime_checkable
class HtmlElement(Protocol):
    """One element of a parsed document."""

    @property
    def tag(self) -> str:
        ...

    def select(self, selector: str) -> list["HtmlElement"]:
        """Return descendants matching a CSS selector, in document order."""
        ...

    def parent(self) -> Optional["HtmlElement"]:
        """Return the parent element, or None at the document root."""
        ...

    def text(self) -> str:
        """Return the concatenated text of the subtree."""
        ...

    def block_text(self) -> str:
        """Return the subtree text with block boundaries mapped to blank lines."""
        ...

    def attr(self, name: str) -> Optional[str]:
        ...

    def remove(self) -> None:
        """Detach the subtree from its document."""
        ...

    def key(self) -> int:
        """Identity of the underlying node, stable for the document's lifetime."""
        ...


@runtime_checkable
class HtmlDocument(Protocol):
    """A parsed HTML page."""

    @property
    def title(self) -> Optional[str]:
        ...

    @property
    def body(self) -> HtmlElement:
        """The body element, or the root element when the page has none."""
        ...

    def select(self, selector: str) -> list[HtmlElement]:
        ...

    def select_first(self, selector: str) -> Optional[HtmlElement]:
        ...

    def iter_select(self, selectors: list[str]) -> Iterator[HtmlElement]:
        """Yield matches for each selector in turn; invalid selectors are skipped."""
        ...
