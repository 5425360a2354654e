"""Conversion orchestrator: classify a URL, run its pipeline, render Markdown."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from types import TracebackType
from typing import Callable, Optional

from ..conversion.extractor import ArticleSimplifier
from ..conversion.normalizer import capture_timestamp, render_document, render_transcript
from ..errors import ConversionError
from ..extraction.document import DocumentExtractor
from ..extraction.transcript import TranscriptExtractor
from ..http import AsyncHttpClient, HttpClient, ProxyChannel
from ..models.config import ConverterConfig
from ..models.results import ConversionResult, ProcessedLink, ResourceKind
from .classifier import canonical_video_url, classify

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class Converter:
    """
    Primary API: turn links into Markdown documents.

    Owns an AsyncHttpClient for its lifetime unless one is injected.
    Conversions share nothing but that client, so any number may run
    concurrently on one Converter.

    Example:
        async with Converter(ConverterConfig()) as converter:
            result = await converter.convert("https://youtu.be/dQw4w9WgXcQ")
            print(result.markdown)

            links = await converter.convert_many(urls)
            failed = [link for link in links if link.status is LinkStatus.ERROR]
    """

    def __init__(
        self,
        config: Optional[ConverterConfig] = None,
        http_client: Optional[HttpClient] = None,
        clock: Optional[Clock] = None,
    ):
        """
        Initialize the Converter.

        Args:
            config: Converter configuration (defaults if None)
            http_client: Client to use instead of an owned AsyncHttpClient
            clock: Source of the capture time (``datetime.now`` if None)
        """
        self.config = config or ConverterConfig()
        self._clock = clock or datetime.now
        self._injected_client = http_client
        self._owned_client: Optional[AsyncHttpClient] = None
        self._document_extractor: Optional[DocumentExtractor] = None
        self._transcript_extractor: Optional[TranscriptExtractor] = None

        if http_client is not None:
            self._build_extractors(http_client)

    def _build_extractors(self, http_client: HttpClient) -> None:
        proxy = self.config.proxy
        channel = ProxyChannel(
            http_client,
            relay_base=proxy.cors_proxy_url,
            mode=proxy.cors_proxy_mode,
            timeout=self.config.network.timeout,
        )
        self._document_extractor = DocumentExtractor(
            channel,
            simplifier=ArticleSimplifier(min_text_length=self.config.min_article_length),
            default_title=self.config.default_document_title,
        )
        self._transcript_extractor = TranscriptExtractor.from_config(http_client, channel, self.config)

    async def __aenter__(self) -> Converter:
        """Enter async context and open the HTTP client if we own one."""
        if self._injected_client is None:
            network = self.config.network
            self._owned_client = AsyncHttpClient(
                max_retries=network.max_retries,
                retry_base_delay=network.retry_base_delay,
                max_content_size=network.max_content_size,
                user_agent=network.user_agent,
                default_timeout=network.timeout,
            )
            await self._owned_client.__aenter__()
            self._build_extractors(self._owned_client)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit async context and close the owned HTTP client."""
        if self._owned_client:
            await self._owned_client.__aexit__(exc_type, exc_val, exc_tb)
            self._owned_client = None
            self._document_extractor = None
            self._transcript_extractor = None

    def _require_extractors(self) -> tuple[DocumentExtractor, TranscriptExtractor]:
        if self._document_extractor is None or self._transcript_extractor is None:
            raise RuntimeError("Converter not initialized. Use 'async with Converter(...)'")
        return self._document_extractor, self._transcript_extractor

    async def convert(self, url: str) -> ConversionResult:
        """
        Convert one link into a Markdown document.

        Args:
            url: Video URL, bare video identifier or any web page URL

        Returns:
            ConversionResult

        Raises:
            ClassificationError: video-shaped URL without an identifier
            FetchError: the page or relay could not be fetched
            ExtractionError: the page is not article-shaped
            NoCaptionsError: no transcript strategy produced captions
        """
        documents, transcripts = self._require_extractors()
        url = url.strip()
        classification = classify(url)

        if classification.kind is ResourceKind.VIDEO and classification.video_id:
            video_id = classification.video_id
            logger.info(f"Extracting transcript for video {video_id}")
            transcript = await transcripts.extract(video_id)
            watch_url = canonical_video_url(video_id, self.config.transcript.watch_url)
            return render_transcript(transcript, watch_url, capture_timestamp(self._clock()))

        logger.info(f"Extracting article from {url}")
        article = await documents.extract(url)
        return render_document(article, url, capture_timestamp(self._clock()))

    async def process(self, url: str) -> ProcessedLink:
        """
        Convert one link, recording the outcome instead of raising.

        Returns:
            ProcessedLink in COMPLETED or ERROR state
        """
        link = ProcessedLink(url=url.strip())
        try:
            link.complete(await self.convert(url))
        except ConversionError as e:
            logger.warning(f"Failed to convert {link.url}: {e}")
            link.fail(str(e))
        except Exception as e:
            logger.exception(f"Unexpected error converting {link.url}")
            link.fail(f"Unexpected error: {e}")
        return link

    async def convert_many(self, urls: list[str]) -> list[ProcessedLink]:
        """
        Convert several links concurrently.

        At most ``config.max_concurrent`` conversions run at once. The
        returned links are in submission order; one failure never affects
        the others.
        """
        semaphore = asyncio.Semaphore(self.config.max_concurrent)

        async def bounded(url: str) -> ProcessedLink:
            async with semaphore:
                return await self.process(url)

        links = await asyncio.gather(*(bounded(url) for url in urls))
        completed = sum(1 for link in links if link.result is not None)
        logger.info(f"Converted {completed}/{len(links)} links")
        return list(links)


def convert_blocking(url: str, **kwargs: object) -> ConversionResult:
    """
    Blocking conversion of a single link.

    Convenience wrapper for sync code. Do not call from within a running
    event loop (Jupyter, asyncio frameworks); use ``Converter`` there.

    Args:
        url: Link to convert
        **kwargs: Options passed to ConverterConfig

    Example:
        result = convert_blocking("https://example.com/post", max_concurrent=1)
        Path("post.md").write_text(result.markdown)
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        pass
    else:
        raise RuntimeError("convert_blocking() called from async context. Use 'async with Converter()' instead.")

    config = ConverterConfig(**kwargs)  # type: ignore[arg-type]

    async def _run() -> ConversionResult:
        async with Converter(config) as converter:
            return await converter.convert(url)

    return asyncio.run(_run())
