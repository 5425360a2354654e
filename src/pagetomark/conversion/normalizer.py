"""Rendering of extraction results into canonical Markdown documents."""

from datetime import datetime
from typing import Optional

from ..models.results import ArticleContent, ConversionResult, TranscriptContent, TranscriptItem
from .markdown import FrontmatterBuilder

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
UNKNOWN_AUTHOR = "Unknown"

_frontmatter = FrontmatterBuilder()


def capture_timestamp(now: Optional[datetime] = None) -> str:
    """Format the capture time (local time, second precision)."""
    return (now or datetime.now()).strftime(TIMESTAMP_FORMAT)


def format_timestamp(seconds: float) -> str:
    """
    Format an offset as MM:SS, or HH:MM:SS once it reaches an hour.

    >>> format_timestamp(65)
    '01:05'
    >>> format_timestamp(3661)
    '01:01:01'
    """
    total = max(int(seconds), 0)
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)

    if hours > 0:
        return f"{hours:02d}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"


def _heading(title: str) -> str:
    return f"# {' '.join(title.split())}\n\n"


def render_document(article: ArticleContent, url: str, timestamp: str) -> ConversionResult:
    """Render an extracted article as a ConversionResult."""
    header = _frontmatter.build(
        title=article.title,
        source=url,
        author=article.byline or UNKNOWN_AUTHOR,
        date=timestamp,
    )
    markdown = header + _heading(article.title) + article.markdown_body

    return ConversionResult(markdown=markdown, title=article.title, url=url, timestamp=timestamp)


def format_transcript_item(item: TranscriptItem) -> str:
    return f"**[{format_timestamp(item.start_seconds)}]** {item.text}"


def render_transcript(transcript: TranscriptContent, url: str, timestamp: str) -> ConversionResult:
    """
    Render a transcript as a ConversionResult.

    Each item becomes its own paragraph, in the order given.
    """
    header = _frontmatter.build(
        title=transcript.title,
        source=url,
        video_id=transcript.video_id,
        date=timestamp,
    )
    intro = f"**Video:** [{url}]({url})\n\n---\n\n"
    body = "".join(f"{format_transcript_item(item)}\n\n" for item in transcript.items)

    markdown = header + _heading(transcript.title) + intro + body
    return ConversionResult(markdown=markdown, title=transcript.title, url=url, timestamp=timestamp)
