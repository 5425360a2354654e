"""Readability-style main content extraction from HTML pages."""

import logging
import re
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

from .documents import SoupDocument

logger = logging.getLogger(__name__)

# Elements that typically contain main content
CONTENT_SELECTORS = [
    "article",
    "main",
    '[role="main"]',
    '[itemprop="articleBody"]',
    ".post-content",
    ".article-content",
    ".article-body",
    ".entry-content",
    ".content",
    "#content",
    "#main-content",
]

# Elements to remove (navigation, ads, etc.)
REMOVE_SELECTORS = [
    "nav",
    "header",
    "footer",
    "aside",
    "form",
    "button",
    ".nav",
    ".navbar",
    ".sidebar",
    ".footer",
    ".menu",
    ".advertisement",
    ".ads",
    ".social-share",
    ".comments",
    ".related-posts",
    '[role="navigation"]',
    '[role="banner"]',
    '[role="contentinfo"]',
    '[role="complementary"]',
    '[aria-hidden="true"]',
    "script",
    "style",
    "noscript",
    "iframe",
    "svg",
    "template",
]

# class/id hints of boilerplate containers, and hints that veto removal
UNLIKELY_CANDIDATES = re.compile(
    r"-ad-|banner|breadcrumbs|combx|comment|community|cookie|disqus|gdpr|legends|"
    r"menu|newsletter|pager|pagination|popup|related|remark|replies|rss|"
    r"shoutbox|sidebar|skyscraper|social|sponsor|subscribe|supplemental",
    re.IGNORECASE,
)
MAYBE_CANDIDATE = re.compile(r"and|article|body|column|content|main|shadow", re.IGNORECASE)

# Tags whose parents are scored as article containers
SCORED_TAGS = ["p", "pre", "td", "blockquote"]

TITLE_SEPARATORS = re.compile(r"\s+[|\-–—:/]\s+|\s+::\s+")

KEEP_ATTRIBUTES = {"href", "src", "alt", "title"}


@dataclass(frozen=True)
class ParsedArticle:
    """
    Simplified article isolated from a page.

    Attributes:
        title: Article title ("" when none could be found)
        byline: Author line, if the page declares one
        content_html: Cleaned HTML of the article body
    """

    title: str
    byline: Optional[str]
    content_html: str


class ArticleSimplifier:
    """
    Isolates the main article of a page, in the manner of Readability.

    Works on a copy of the document, because the pass removes boilerplate
    (navigation, ads, scripts, styles) from the tree it is given.

    Example:
        document = SoupDocument.parse(html, base_url=url)
        article = ArticleSimplifier().parse(document)
        if article is None:
            print("Not article-shaped")
    """

    def __init__(
        self,
        content_selectors: Optional[list[str]] = None,
        remove_selectors: Optional[list[str]] = None,
        min_text_length: int = 25,
    ):
        """
        Initialize the simplifier.

        Args:
            content_selectors: CSS selectors for main content (overrides defaults)
            remove_selectors: CSS selectors for elements to remove (extends defaults)
            min_text_length: Shortest body text accepted as an article
        """
        self._content_selectors = content_selectors or CONTENT_SELECTORS
        self._remove_selectors = list(REMOVE_SELECTORS)
        if remove_selectors:
            self._remove_selectors.extend(remove_selectors)
        self._min_text_length = min_text_length

    def parse(self, document: SoupDocument, url: Optional[str] = None) -> Optional[ParsedArticle]:
        """
        Extract the article from a parsed page.

        Args:
            document: Parsed page; it is copied, never modified
            url: Fallback base for relative links when the page has no <base>

        Returns:
            ParsedArticle, or None if the page is not article-shaped
        """
        work = document.clone()
        soup = work.soup
        base_url = work.base_url or url

        # Metadata first: headers and bylines are removed below
        title = self._extract_title(soup)
        byline = self._extract_byline(soup)

        self._remove_unwanted(soup)
        self._remove_unlikely(soup)

        content = self._find_main_content(soup)
        if content is None:
            logger.debug(f"No content candidate found for {url}")
            return None

        text = self._normalize_text(content.get_text(" ", strip=True))
        if len(text) < self._min_text_length:
            logger.debug(f"Content too short for {url}: {len(text)} chars")
            return None

        if base_url:
            self._resolve_links(content, base_url)
        self._clean_attributes(content)

        return ParsedArticle(
            title=title,
            byline=byline,
            content_html=self._clean_whitespace(str(content)),
        )

    def _meta_content(self, soup: BeautifulSoup, key: str) -> Optional[str]:
        meta = soup.find("meta", attrs={"property": key}) or soup.find("meta", attrs={"name": key})
        if isinstance(meta, Tag) and meta.get("content"):
            value = self._normalize_text(str(meta["content"]))
            return value or None
        return None

    def _extract_title(self, soup: BeautifulSoup) -> str:
        """Extract the article title: og:title, then <title>, then first <h1>."""
        og_title = self._meta_content(soup, "og:title")
        if og_title:
            return og_title

        title_tag = soup.find("title")
        if isinstance(title_tag, Tag):
            raw = self._normalize_text(title_tag.get_text())
            if raw:
                return self._trim_site_suffix(raw)

        h1 = soup.find("h1")
        if isinstance(h1, Tag):
            return self._normalize_text(h1.get_text())

        return ""

    def _trim_site_suffix(self, title: str) -> str:
        """Drop a trailing " | Site Name" style suffix when what remains still reads as a title."""
        separators = list(TITLE_SEPARATORS.finditer(title))
        if not separators:
            return title
        head = title[: separators[-1].start()].strip()
        if len(head.split()) >= 2:
            return head
        return title

    def _extract_byline(self, soup: BeautifulSoup) -> Optional[str]:
        """Extract the author line from meta tags or byline markup."""
        author = self._meta_content(soup, "author")
        if author:
            return author

        article_author = self._meta_content(soup, "article:author")
        if article_author and not article_author.startswith(("http://", "https://")):
            return article_author

        for selector in ('[rel="author"]', '[itemprop="author"]', ".byline", ".author"):
            element = soup.select_one(selector)
            if isinstance(element, Tag):
                text = self._normalize_text(element.get_text(" ", strip=True))
                if text and len(text) < 100:
                    return text
        return None

    def _remove_unwanted(self, soup: BeautifulSoup) -> None:
        """Remove navigation, ads, and other unwanted elements."""
        for selector in self._remove_selectors:
            for el in soup.select(selector):
                if not el.decomposed:
                    el.decompose()

    def _remove_unlikely(self, soup: BeautifulSoup) -> None:
        """Remove containers whose class/id marks them as boilerplate."""
        candidates = [tag for tag in soup.find_all(True) if tag.name not in ("html", "body", "article", "main")]
        for tag in candidates:
            if tag.decomposed or tag.attrs is None:
                continue
            hint = " ".join(tag.get("class") or []) + " " + str(tag.get("id") or "")
            if not hint.strip():
                continue
            if UNLIKELY_CANDIDATES.search(hint) and not MAYBE_CANDIDATE.search(hint):
                tag.decompose()

    def _find_main_content(self, soup: BeautifulSoup) -> Optional[Tag]:
        """Find the main content element using selectors, then paragraph scoring."""
        for selector in self._content_selectors:
            element = soup.select_one(selector)
            if isinstance(element, Tag) and len(element.get_text(strip=True)) > 100:
                return element

        best = self._best_scored_candidate(soup)
        if best is not None:
            return best

        body = soup.find("body")
        if isinstance(body, Tag):
            return body
        return None

    def _best_scored_candidate(self, soup: BeautifulSoup) -> Optional[Tag]:
        """Score parents of paragraph-like nodes and return the strongest one."""
        scores: dict[int, float] = {}
        nodes: dict[int, Tag] = {}

        for node in soup.find_all(SCORED_TAGS):
            text = self._normalize_text(node.get_text(" ", strip=True))
            if len(text) < 25:
                continue

            score = 1 + text.count(",") + min(len(text) // 100, 3)
            parent = node.parent
            grandparent = parent.parent if isinstance(parent, Tag) else None

            for ancestor, weight in ((parent, 1.0), (grandparent, 0.5)):
                if not isinstance(ancestor, Tag) or ancestor.name in ("html", "[document]"):
                    continue
                key = id(ancestor)
                nodes[key] = ancestor
                scores[key] = scores.get(key, 0.0) + score * weight

        if not scores:
            return None

        def final_score(key: int) -> float:
            return scores[key] * (1 - self._link_density(nodes[key]))

        best_key = max(scores, key=final_score)
        return nodes[best_key]

    def _link_density(self, element: Tag) -> float:
        text_length = len(element.get_text(strip=True))
        if text_length == 0:
            return 0.0
        link_length = sum(len(a.get_text(strip=True)) for a in element.find_all("a"))
        return min(link_length / text_length, 1.0)

    def _clean_attributes(self, element: Tag) -> None:
        """Remove unnecessary attributes from elements."""
        for tag in element.find_all(True):
            attrs_to_remove = [attr for attr in tag.attrs if attr not in KEEP_ATTRIBUTES]
            for attr in attrs_to_remove:
                del tag[attr]

    def _resolve_links(self, element: Tag, base_url: str) -> None:
        """Convert relative URLs to absolute URLs."""
        for tag in element.find_all("a", href=True):
            href = tag["href"]
            if href.startswith("#"):
                continue  # Keep anchor links
            if not href.startswith(("http://", "https://", "//", "mailto:", "tel:")):
                tag["href"] = urljoin(base_url, href)

        for tag in element.find_all(src=True):
            src = tag["src"]
            if not src.startswith(("http://", "https://", "//", "data:")):
                tag["src"] = urljoin(base_url, src)

    def _normalize_text(self, text: str) -> str:
        return re.sub(r"\s+", " ", text).strip()

    def _clean_whitespace(self, text: str) -> str:
        """Clean up excessive whitespace."""
        text = text.replace("\r\n", "\n").replace("\r", "\n")
        text = re.sub(r"\n{3,}", "\n\n", text)
        text = "\n".join(line.rstrip() for line in text.split("\n"))
        return text.strip()
