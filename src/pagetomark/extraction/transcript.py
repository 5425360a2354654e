"""Transcript extraction: run the strategy chain and shape the result."""

from __future__ import annotations

import logging
from typing import Optional

from ..errors import NoCaptionsError
from ..http.protocols import HttpClient
from ..http.proxy import ProxyChannel
from ..models.config import ConverterConfig
from ..models.results import TranscriptContent
from .chain import StrategyChain, TranscriptStrategy
from .strategies import DirectCaptionsStrategy, PageScrapeStrategy, RelayStrategy

logger = logging.getLogger(__name__)


class TranscriptExtractor:
    """
    Obtains a video's transcript through an ordered StrategyChain.

    Example:
        extractor = TranscriptExtractor.from_config(client, channel, config)
        content = await extractor.extract("dQw4w9WgXcQ")
    """

    def __init__(
        self,
        strategies: list[TranscriptStrategy],
        default_title: str = "YouTube Video Transcript",
    ) -> None:
        self._chain = StrategyChain(strategies=list(strategies))
        self._default_title = default_title

    @classmethod
    def from_config(
        cls,
        http_client: HttpClient,
        proxy_channel: ProxyChannel,
        config: ConverterConfig,
    ) -> TranscriptExtractor:
        """Build the canonical chain: direct captions, relay, page scrape."""
        transcript = config.transcript
        timeout: Optional[float] = config.network.timeout
        return cls(
            strategies=[
                DirectCaptionsStrategy(
                    http_client,
                    api_url=transcript.caption_api_url,
                    languages=transcript.languages,
                    timeout=timeout,
                ),
                RelayStrategy(http_client, relay_url=config.proxy.transcript_relay_url, timeout=timeout),
                PageScrapeStrategy(
                    proxy_channel,
                    watch_url=transcript.watch_url,
                    primary_language=transcript.primary_language,
                ),
            ],
            default_title=transcript.default_title,
        )

    @property
    def strategy_names(self) -> list[str]:
        return [s.name for s in self._chain.strategies]

    async def extract(self, video_id: str) -> TranscriptContent:
        """
        Fetch the transcript for a video.

        Raises:
            NoCaptionsError: every strategy failed or found nothing
        """
        result = await self._chain.run(video_id)
        if not result.succeeded:
            raise NoCaptionsError(video_id)

        return TranscriptContent(
            video_id=video_id,
            title=result.title or self._default_title,
            items=result.items,
        )
