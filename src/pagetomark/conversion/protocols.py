"""Protocol definitions for content conversion."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Optional, Protocol


class Element(Protocol):
    """A node of a parsed HTML or XML document."""

    def attribute(self, name: str) -> Optional[str]:
        """Return an attribute value, or None when absent."""
        ...

    def text(self) -> str:
        """Return the concatenated text content of the node."""
        ...


class HtmlDocument(Protocol):
    """
    Capability interface over a parsed HTML page.

    Extractors depend on this rather than on a concrete parser, so the
    parser library stays an implementation detail.
    """

    def find_by_selector(self, selector: str) -> Optional[Element]:
        """Return the first element matching a CSS selector."""
        ...

    def elements_by_tag_name(self, name: str) -> Sequence[Element]:
        """Return every element with the given tag name, in document order."""
        ...

    def attribute(self, selector: str, name: str) -> Optional[str]:
        """Return an attribute of the first element matching a selector."""
        ...


class XmlDocument(Protocol):
    """Capability interface over a parsed XML document."""

    def elements_by_tag_name(self, name: str) -> Sequence[Element]:
        """Return every element with the given local tag name, in document order."""
        ...


class MarkdownConverter(Protocol):
    """
    Protocol for converting HTML to Markdown.

    Implementations convert cleaned HTML to Markdown format.
    """

    def convert(self, html: str, url: str) -> str:
        """
        Convert HTML to Markdown.

        Args:
            html: HTML content string
            url: Source URL (for resolving relative links)

        Returns:
            Markdown string
        """
        ...
