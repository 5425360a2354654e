"""Ordered fallback chain of transcript strategies."""

import logging
from dataclasses import dataclass, field
from typing import Optional, Protocol, runtime_checkable

from ..models.results import TranscriptItem

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StrategyOutcome:
    """
    What a single strategy attempt produced.

    Attributes:
        items: Transcript items (empty when the strategy found none)
        title: Video title, if the strategy came across one
    """

    items: tuple[TranscriptItem, ...] = ()
    title: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return len(self.items) > 0


class StrategyFailed(Exception):
    """
    A strategy gave up.

    Carries any title discovered before the failure, so the chain can still
    use it if a later strategy succeeds without one.
    """

    def __init__(self, message: str, title: Optional[str] = None):
        self.title = title
        super().__init__(message)


@runtime_checkable
class TranscriptStrategy(Protocol):
    """
    Protocol for one way of obtaining a transcript.

    Error Handling Contract:
    - Return an empty StrategyOutcome when nothing was found
    - Raise (StrategyFailed or anything else) on failure
    - The chain logs the failure and moves on to the next strategy

    Example implementation:
        class CachedStrategy:
            name = "cached"

            async def attempt(self, video_id: str) -> StrategyOutcome:
                items = self.store.get(video_id, ())
                return StrategyOutcome(items=tuple(items))
    """

    name: str

    async def attempt(self, video_id: str) -> StrategyOutcome:
        """
        Try to produce transcript items for a video.

        Args:
            video_id: Platform identifier of the video

        Returns:
            StrategyOutcome (possibly empty)
        """
        ...


@dataclass(frozen=True)
class ChainResult:
    """Final result of running a StrategyChain."""

    items: tuple[TranscriptItem, ...]
    title: Optional[str]
    strategy: Optional[str]
    attempted: tuple[str, ...] = ()

    @property
    def succeeded(self) -> bool:
        return len(self.items) > 0


@dataclass
class StrategyChain:
    """
    First-success combinator over transcript strategies.

    Strategies run strictly in order; the chain stops at the first one that
    yields at least one item. A strategy that raises or finds nothing is
    logged and skipped; its error never escapes the chain.

    Example:
        chain = StrategyChain(strategies=[
            DirectCaptionsStrategy(client, config),
            RelayStrategy(client, relay_url),
            PageScrapeStrategy(channel, config),
        ])

        result = await chain.run("dQw4w9WgXcQ")
        if not result.succeeded:
            logger.error(f"Tried {result.attempted}, nothing found")
    """

    strategies: list[TranscriptStrategy] = field(default_factory=list)

    async def run(self, video_id: str) -> ChainResult:
        """
        Run strategies in order until one produces items.

        Args:
            video_id: Platform identifier of the video

        Returns:
            ChainResult; ``items`` is empty when every strategy failed
        """
        discovered_title: Optional[str] = None
        attempted: list[str] = []

        for strategy in self.strategies:
            attempted.append(strategy.name)
            logger.debug(f"Trying transcript strategy '{strategy.name}' for {video_id}")

            try:
                outcome = await strategy.attempt(video_id)
            except StrategyFailed as e:
                logger.warning(f"Strategy '{strategy.name}' failed for {video_id}: {e}")
                discovered_title = discovered_title or e.title
                continue
            except Exception as e:
                logger.warning(f"Strategy '{strategy.name}' failed for {video_id}: {e!r}")
                continue

            discovered_title = discovered_title or outcome.title
            if outcome.succeeded:
                logger.info(f"Strategy '{strategy.name}' produced {len(outcome.items)} segments for {video_id}")
                return ChainResult(
                    items=outcome.items,
                    title=outcome.title or discovered_title,
                    strategy=strategy.name,
                    attempted=tuple(attempted),
                )

            logger.info(f"Strategy '{strategy.name}' found no captions for {video_id}")

        logger.error(f"All transcript strategies failed for {video_id}: {', '.join(attempted)}")
        return ChainResult(items=(), title=discovered_title, strategy=None, attempted=tuple(attempted))

    def add_strategy(self, strategy: TranscriptStrategy) -> "StrategyChain":
        """
        Add a strategy to the end of the chain (fluent API).

        Returns:
            Self for chaining
        """
        self.strategies.append(strategy)
        return self
