"""HTML to Markdown conversion and frontmatter."""

from __future__ import annotations

import logging
import re
from typing import Optional
from urllib.parse import urljoin

import html2text
from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

# Dropped outright rather than converted
DROPPED_TAGS = ["script", "style", "noscript"]

_CODE_BLOCK_RE = re.compile(r"\[code\][ \t]*\n(.*?)\n?[ \t]*\[/code\]", re.DOTALL)
_HR_RE = re.compile(r"^[ \t]*\* \* \*[ \t]*$", re.MULTILINE)
_FRONTMATTER_RE = re.compile(r"\A---\n(.*?)\n---(?:\n|\Z)", re.DOTALL)


class HtmlToMarkdown:
    """
    Converts HTML content to clean Markdown.

    Uses html2text, post-processed into a fixed dialect: ATX headings,
    fenced code blocks, ``-`` bullets and ``---`` horizontal rules.

    Example:
        converter = HtmlToMarkdown()
        markdown = converter.convert(html_string, "https://example.com/post")
    """

    def __init__(
        self,
        body_width: int = 0,
        inline_links: bool = True,
        wrap_links: bool = False,
        ignore_images: bool = False,
        unicode_snob: bool = True,
    ):
        """
        Initialize the Markdown converter.

        Args:
            body_width: Max line width (0 = no wrapping)
            inline_links: Use inline [text](url) vs reference style
            wrap_links: Wrap long links
            ignore_images: Skip image conversion
            unicode_snob: Use Unicode chars where possible
        """
        self._converter = html2text.HTML2Text()

        # Line width (0 = no wrapping for consistent output)
        self._converter.body_width = body_width

        # Link handling
        self._converter.inline_links = inline_links
        self._converter.wrap_links = wrap_links

        # Content handling
        self._converter.ignore_images = ignore_images
        self._converter.unicode_snob = unicode_snob

        # Dialect: "-" bullets, code blocks marked so they can be fenced
        self._converter.ul_item_mark = "-"
        self._converter.mark_code = True
        self._converter.default_image_alt = ""
        self._converter.single_line_break = False

    def _drop_tags(self, html: str) -> str:
        soup = BeautifulSoup(html, "html.parser")
        for tag in soup.find_all(DROPPED_TAGS):
            tag.decompose()
        return str(soup)

    def _fence_code_blocks(self, markdown: str) -> str:
        """Turn html2text's [code]...[/code] markers into ``` fences."""

        def fence(match: re.Match[str]) -> str:
            lines = match.group(1).split("\n")
            body = "\n".join(line[4:] if line.startswith("    ") else line for line in lines).strip("\n")
            return f"```\n{body}\n```"

        return _CODE_BLOCK_RE.sub(fence, markdown)

    def _clean_output(self, markdown: str) -> str:
        """Clean up the converted Markdown."""
        markdown = self._fence_code_blocks(markdown)
        markdown = _HR_RE.sub("---", markdown)

        # Remove excessive blank lines
        markdown = re.sub(r"\n{3,}", "\n\n", markdown)

        # Remove trailing whitespace on each line
        markdown = "\n".join(line.rstrip() for line in markdown.split("\n"))

        # Ensure single newline at end
        return markdown.strip() + "\n"

    def _fix_relative_links(self, markdown: str, base_url: str) -> str:
        """Ensure all links are absolute."""

        def replace_link(match: re.Match[str]) -> str:
            text = match.group(1)
            url = match.group(2)

            # Skip anchors and already absolute URLs
            if url.startswith(("#", "http://", "https://", "mailto:", "tel:", "data:")):
                result: str = match.group(0)
                return result

            absolute_url = urljoin(base_url, url)
            return f"[{text}]({absolute_url})"

        # Match markdown links [text](url)
        return re.sub(r"\[([^\]]+)\]\(([^)\s]+)\)", replace_link, markdown)

    def convert(self, html: str, url: str) -> str:
        """
        Convert HTML to Markdown.

        Args:
            html: HTML content string
            url: Source URL for resolving relative links

        Returns:
            Markdown string
        """
        try:
            self._converter.baseurl = url
            markdown = self._converter.handle(self._drop_tags(html))
            markdown = self._clean_output(markdown)
            return self._fix_relative_links(markdown, url)

        except Exception as e:
            logger.error(f"Failed to convert HTML to Markdown: {e}")
            # Return plain text as fallback
            soup = BeautifulSoup(html, "html.parser")
            for tag in soup.find_all(DROPPED_TAGS):
                tag.decompose()
            text: str = soup.get_text(separator="\n")
            return text.strip() + "\n"


def _single_line(value: str) -> str:
    return " ".join(value.split())


class FrontmatterBuilder:
    """
    Builds the metadata block that opens every converted document.

    Only the title is quoted; every value is folded onto one line so the
    block can be read back with ``parse_frontmatter``.

    Example:
        builder = FrontmatterBuilder()
        frontmatter = builder.build(
            title="Getting Started",
            source="https://example.com/getting-started",
            author="Jane Doe",
            date="2024-05-01 10:30:00",
        )
    """

    def build(self, title: str, source: str, **fields: Optional[str]) -> str:
        """
        Build the frontmatter string.

        Args:
            title: Document title (quoted, with quotes and backslashes escaped)
            source: Source URL
            **fields: Further fields in output order; None values are skipped

        Returns:
            Frontmatter string (with --- delimiters), followed by a blank line
        """
        safe_title = _single_line(title).replace("\\", "\\\\").replace('"', '\\"')
        lines = ["---", f'title: "{safe_title}"', f"source: {_single_line(source)}"]

        for key, value in fields.items():
            if value is not None:
                lines.append(f"{key}: {_single_line(str(value))}")

        lines.append("---")
        return "\n".join(lines) + "\n\n"


def parse_frontmatter(markdown: str) -> dict[str, str]:
    """
    Read back the fields of a frontmatter block written by FrontmatterBuilder.

    Returns:
        Field name to string value; empty if the document has no block
    """
    match = _FRONTMATTER_RE.match(markdown)
    if not match:
        return {}

    fields: dict[str, str] = {}
    for line in match.group(1).split("\n"):
        key, sep, value = line.partition(":")
        if not sep:
            continue
        value = value.strip()
        if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
            value = re.sub(r"\\(.)", r"\1", value[1:-1])
        fields[key.strip()] = value
    return fields
