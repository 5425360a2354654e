"""Tests for Markdown rendering and frontmatter."""

from datetime import datetime

import pytest
from pagetomark.conversion.markdown import FrontmatterBuilder, parse_frontmatter
from pagetomark.conversion.normalizer import (
    capture_timestamp,
    format_timestamp,
    format_transcript_item,
    render_document,
    render_transcript,
)
from pagetomark.models.results import ArticleContent, TranscriptContent, TranscriptItem

TIMESTAMP = "2024-05-01 10:30:00"


class TestFormatTimestamp:
    """Tests for transcript offsets."""

    @pytest.mark.parametrize(
        "seconds,expected",
        [
            (0, "00:00"),
            (5.9, "00:05"),
            (65, "01:05"),
            (3599, "59:59"),
            (3600, "01:00:00"),
            (3661, "01:01:01"),
        ],
    )
    def test_format(self, seconds, expected):
        assert format_timestamp(seconds) == expected

    def test_capture_timestamp(self):
        assert capture_timestamp(datetime(2024, 5, 1, 10, 30, 0)) == TIMESTAMP


class TestFrontmatter:
    """Tests for FrontmatterBuilder and parse_frontmatter."""

    def test_layout(self):
        block = FrontmatterBuilder().build(title="Hello", source="https://example.com", author="Jane", date=TIMESTAMP)
        assert block == (
            '---\ntitle: "Hello"\nsource: https://example.com\nauthor: Jane\n'
            f"date: {TIMESTAMP}\n---\n\n"
        )

    def test_none_fields_skipped(self):
        block = FrontmatterBuilder().build(title="T", source="s", author=None)
        assert "author" not in block

    def test_title_escaping_round_trip(self):
        """Test that quotes, backslashes and newlines survive a round trip."""
        title = 'Say "hi" to C:\\temp\nnow'
        fields = parse_frontmatter(FrontmatterBuilder().build(title=title, source="s"))
        assert fields["title"] == 'Say "hi" to C:\\temp now'

    def test_no_frontmatter(self):
        assert parse_frontmatter("# Just a heading\n") == {}


class TestRenderDocument:
    """Tests for article rendering."""

    def test_render(self):
        article = ArticleContent(title="My Post", byline=None, markdown_body="Body text.\n")
        result = render_document(article, "https://example.com/post", TIMESTAMP)

        assert result.title == "My Post"
        assert result.url == "https://example.com/post"
        assert result.timestamp == TIMESTAMP
        assert "author: Unknown" in result.markdown
        assert result.markdown.endswith("---\n\n# My Post\n\nBody text.\n")

    def test_frontmatter_round_trip(self):
        article = ArticleContent(title='A "quoted" title', byline="Jane Doe", markdown_body="x\n")
        result = render_document(article, "https://example.com/post?a=1", TIMESTAMP)
        fields = parse_frontmatter(result.markdown)

        assert fields["title"] == result.title
        assert fields["source"] == result.url
        assert fields["date"] == result.timestamp
        assert fields["author"] == "Jane Doe"


class TestRenderTranscript:
    """Tests for transcript rendering."""

    @pytest.fixture
    def transcript(self):
        return TranscriptContent(
            video_id="dQw4w9WgXcQ",
            title="Song",
            items=(
                TranscriptItem(text="first", start_seconds=1.0, duration_seconds=2.0),
                TranscriptItem(text="second", start_seconds=3725.0, duration_seconds=2.0),
            ),
        )

    def test_render(self, transcript):
        url = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
        result = render_transcript(transcript, url, TIMESTAMP)

        assert "video_id: dQw4w9WgXcQ" in result.markdown
        assert f"# Song\n\n**Video:** [{url}]({url})\n\n---\n\n" in result.markdown
        assert result.markdown.endswith("**[00:01]** first\n\n**[01:02:05]** second\n\n")

    def test_frontmatter_round_trip(self, transcript):
        url = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
        result = render_transcript(transcript, url, TIMESTAMP)
        fields = parse_frontmatter(result.markdown)

        assert fields["title"] == "Song"
        assert fields["source"] == url
        assert fields["date"] == TIMESTAMP

    def test_item_format(self):
        assert format_transcript_item(TranscriptItem("hi", 65.0, 1.0)) == "**[01:05]** hi"
