"""Content conversion for pagetomark (DOM access, simplification, Markdown)."""

from .documents import EtreeDocument, SoupDocument
from .extractor import ArticleSimplifier, ParsedArticle
from .markdown import FrontmatterBuilder, HtmlToMarkdown, parse_frontmatter
from .normalizer import (
    capture_timestamp,
    format_timestamp,
    format_transcript_item,
    render_document,
    render_transcript,
)
from .protocols import Element, HtmlDocument, MarkdownConverter, XmlDocument

__all__ = [
    # Protocols
    "Element",
    "HtmlDocument",
    "MarkdownConverter",
    "XmlDocument",
    # Implementations
    "ArticleSimplifier",
    "EtreeDocument",
    "FrontmatterBuilder",
    "HtmlToMarkdown",
    "ParsedArticle",
    "SoupDocument",
    # Rendering
    "capture_timestamp",
    "format_timestamp",
    "format_transcript_item",
    "parse_frontmatter",
    "render_document",
    "render_transcript",
]
