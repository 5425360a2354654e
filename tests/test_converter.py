"""Tests for the conversion orchestrator."""

import asyncio
from datetime import datetime

import pytest
from conftest import ARTICLE_HTML, EMPTY_APP_HTML, TIMED_TEXT_XML, FakeHttpClient, watch_page
from pagetomark.conversion.markdown import parse_frontmatter
from pagetomark.core.converter import Converter, convert_blocking
from pagetomark.errors import ClassificationError, ExtractionError, NoCaptionsError
from pagetomark.http.proxy import ProxyChannel
from pagetomark.models.config import ConverterConfig
from pagetomark.models.results import ConversionResult, LinkStatus, ProcessedLink

PAGE_URL = "https://example.com/blog/async"
VIDEO_ID = "dQw4w9WgXcQ"
WATCH = f"https://www.youtube.com/watch?v={VIDEO_ID}"
CAPTION_URL = f"https://www.youtube.com/api/timedtext?v={VIDEO_ID}&lang=en&kind=asr"
FIXED_NOW = datetime(2024, 5, 1, 10, 30, 0)


def make_converter(client, **config):
    return Converter(ConverterConfig(**config), http_client=client, clock=lambda: FIXED_NOW)


class TestConvert:
    """Tests for Converter.convert()."""

    @pytest.mark.asyncio
    async def test_document(self, fake_client):
        fake_client.add(PAGE_URL, ARTICLE_HTML)
        result = await make_converter(fake_client).convert(f"  {PAGE_URL}  ")

        assert result.title == "Understanding Async Python"
        assert result.url == PAGE_URL
        assert result.timestamp == "2024-05-01 10:30:00"
        assert result.markdown.startswith("---\n")
        assert "# Understanding Async Python" in result.markdown

        fields = parse_frontmatter(result.markdown)
        assert fields["source"] == result.url
        assert fields["date"] == result.timestamp

    @pytest.mark.asyncio
    async def test_video(self, fake_client):
        """Test that a short link yields a transcript sourced from the watch URL."""
        fake_client.add(WATCH, watch_page(VIDEO_ID, CAPTION_URL))
        fake_client.add(CAPTION_URL, TIMED_TEXT_XML, content_type="text/xml")

        result = await make_converter(fake_client).convert(f"https://youtu.be/{VIDEO_ID}")

        assert result.title == "Never Gonna Give You Up"
        assert result.url == WATCH
        assert "**[00:00]** Hello and welcome" in result.markdown
        assert parse_frontmatter(result.markdown)["video_id"] == VIDEO_ID

    @pytest.mark.asyncio
    async def test_video_through_cors_proxy(self, fake_client):
        converter = make_converter(fake_client, proxy={"cors_proxy_url": "https://cors.example.com"})
        channel = ProxyChannel(fake_client, relay_base="https://cors.example.com")
        fake_client.add(channel.build_url(WATCH), watch_page(VIDEO_ID, CAPTION_URL))
        fake_client.add(channel.build_url(CAPTION_URL), TIMED_TEXT_XML, content_type="text/xml")

        result = await converter.convert(VIDEO_ID)

        assert result.url == WATCH
        assert channel.build_url(WATCH) in fake_client.requests

    @pytest.mark.asyncio
    async def test_classification_error_propagates(self, fake_client):
        with pytest.raises(ClassificationError):
            await make_converter(fake_client).convert("https://www.youtube.com/watch?feature=share")
        assert fake_client.requests == []

    @pytest.mark.asyncio
    async def test_no_article_propagates(self, fake_client):
        fake_client.add(PAGE_URL, EMPTY_APP_HTML)
        with pytest.raises(ExtractionError):
            await make_converter(fake_client).convert(PAGE_URL)

    @pytest.mark.asyncio
    async def test_no_captions_propagates(self, fake_client):
        with pytest.raises(NoCaptionsError):
            await make_converter(fake_client).convert(WATCH)

    @pytest.mark.asyncio
    async def test_requires_context_without_injected_client(self):
        with pytest.raises(RuntimeError, match="not initialized"):
            await Converter(ConverterConfig()).convert(PAGE_URL)


class TestProcess:
    """Tests for Converter.process()."""

    @pytest.mark.asyncio
    async def test_completed(self, fake_client):
        fake_client.add(PAGE_URL, ARTICLE_HTML)
        link = await make_converter(fake_client).process(PAGE_URL)

        assert link.status is LinkStatus.COMPLETED
        assert link.result is not None
        assert link.error is None

    @pytest.mark.asyncio
    async def test_all_strategies_fail(self, fake_client):
        """Test that a video without captions ends in ERROR, not an exception."""
        link = await make_converter(fake_client).process(f"https://youtu.be/{VIDEO_ID}")

        assert link.status is LinkStatus.ERROR
        assert link.result is None
        assert "No captions found" in link.error

    @pytest.mark.asyncio
    async def test_unexpected_error_recorded(self, fake_client):
        converter = make_converter(fake_client)

        async def explode(url):
            raise KeyError("bug")

        converter.convert = explode
        link = await converter.process(PAGE_URL)

        assert link.status is LinkStatus.ERROR
        assert "Unexpected error" in link.error


class SlowClient(FakeHttpClient):
    """FakeHttpClient that records how many requests overlap."""

    def __init__(self):
        super().__init__()
        self.in_flight = 0
        self.max_in_flight = 0

    async def get(self, url, *, timeout=None, headers=None):
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0.01)
            return await super().get(url, timeout=timeout, headers=headers)
        finally:
            self.in_flight -= 1


class TestConvertMany:
    """Tests for Converter.convert_many()."""

    @pytest.mark.asyncio
    async def test_order_and_isolation(self, fake_client):
        urls = [f"{PAGE_URL}/{i}" for i in range(4)]
        for url in urls[:2]:
            fake_client.add(url, ARTICLE_HTML)

        links = await make_converter(fake_client).convert_many(urls)

        assert [link.url for link in links] == urls
        assert [link.status for link in links] == [
            LinkStatus.COMPLETED,
            LinkStatus.COMPLETED,
            LinkStatus.ERROR,
            LinkStatus.ERROR,
        ]
        assert len({link.id for link in links}) == 4

    @pytest.mark.asyncio
    async def test_concurrency_bounded(self):
        client = SlowClient()
        urls = [f"{PAGE_URL}/{i}" for i in range(6)]
        for url in urls:
            client.add(url, ARTICLE_HTML)

        links = await make_converter(client, max_concurrent=2).convert_many(urls)

        assert all(link.status is LinkStatus.COMPLETED for link in links)
        assert client.max_in_flight == 2


class TestConvertBlocking:
    """Tests for the sync wrapper."""

    @pytest.mark.asyncio
    async def test_refuses_running_loop(self):
        with pytest.raises(RuntimeError, match="async context"):
            convert_blocking(PAGE_URL)


class TestProcessedLink:
    """Tests for the link lifecycle."""

    def result(self):
        return ConversionResult(markdown="# x\n", title="x", url=PAGE_URL, timestamp="2024-05-01 10:30:00")

    def test_single_transition(self):
        link = ProcessedLink(url=PAGE_URL)
        assert link.status is LinkStatus.PROCESSING
        assert not link.is_terminal

        link.complete(self.result())
        assert link.is_terminal
        with pytest.raises(RuntimeError):
            link.fail("late")

    def test_to_dict(self):
        link = ProcessedLink(url=PAGE_URL)
        link.fail("Failed to fetch URL. Status: 404")

        data = link.to_dict()
        assert data["status"] == "error"
        assert data["error"] == "Failed to fetch URL. Status: 404"
        assert "result" not in data
