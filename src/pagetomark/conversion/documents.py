"""Parser-backed implementations of the HtmlDocument/XmlDocument interfaces."""

from __future__ import annotations

import copy
from typing import Optional
from xml.etree.ElementTree import Element as XmlNode

from bs4 import BeautifulSoup, Tag
from defusedxml import ElementTree


class SoupElement:
    """Element backed by a BeautifulSoup tag."""

    def __init__(self, tag: Tag) -> None:
        self.tag = tag

    def attribute(self, name: str) -> Optional[str]:
        value = self.tag.get(name)
        if value is None:
            return None
        if isinstance(value, list):
            return " ".join(value)
        return str(value)

    def text(self) -> str:
        return self.tag.get_text()


class SoupDocument:
    """
    HtmlDocument backed by BeautifulSoup.

    Example:
        doc = SoupDocument.parse(html, base_url="https://example.com/post")
        title = doc.find_by_selector("title")
    """

    def __init__(self, soup: BeautifulSoup) -> None:
        self.soup = soup

    @classmethod
    def parse(cls, html: str, base_url: Optional[str] = None) -> SoupDocument:
        """
        Parse HTML, optionally injecting a ``<base href>`` directive.

        The base directive lets relative links and images resolve against
        the page's original URL rather than wherever the HTML was relayed from.
        """
        soup = BeautifulSoup(html, "html.parser")
        if base_url:
            _inject_base(soup, base_url)
        return cls(soup)

    def clone(self) -> SoupDocument:
        """Deep copy, for passes that mutate the tree."""
        return SoupDocument(copy.copy(self.soup))

    @property
    def base_url(self) -> Optional[str]:
        return self.attribute("base[href]", "href")

    def find_by_selector(self, selector: str) -> Optional[SoupElement]:
        tag = self.soup.select_one(selector)
        return SoupElement(tag) if isinstance(tag, Tag) else None

    def elements_by_tag_name(self, name: str) -> list[SoupElement]:
        return [SoupElement(tag) for tag in self.soup.find_all(name)]

    def attribute(self, selector: str, name: str) -> Optional[str]:
        element = self.find_by_selector(selector)
        return element.attribute(name) if element else None


def _inject_base(soup: BeautifulSoup, base_url: str) -> None:
    head = soup.find("head")
    if not isinstance(head, Tag):
        head = soup.new_tag("head")
        html = soup.find("html")
        if isinstance(html, Tag):
            html.insert(0, head)
        else:
            soup.insert(0, head)

    base = soup.new_tag("base", href=base_url)
    head.append(base)


class EtreeElement:
    """Element backed by an ElementTree node."""

    def __init__(self, node: XmlNode) -> None:
        self.node = node

    def attribute(self, name: str) -> Optional[str]:
        return self.node.get(name)

    def text(self) -> str:
        return "".join(self.node.itertext())


class EtreeDocument:
    """
    XmlDocument backed by defusedxml's ElementTree (XXE-safe).

    Raises:
        ElementTree.ParseError: from ``parse`` on malformed XML
    """

    def __init__(self, root: XmlNode) -> None:
        self.root = root

    @classmethod
    def parse(cls, xml: str) -> EtreeDocument:
        return cls(ElementTree.fromstring(xml.strip().encode("utf-8")))

    def elements_by_tag_name(self, name: str) -> list[EtreeElement]:
        return [EtreeElement(node) for node in self.root.iter() if _local_name(node.tag) == name]


def _local_name(tag: object) -> str:
    if not isinstance(tag, str):
        return ""
    return tag.rsplit("}", 1)[-1]
