"""Extraction pipelines: articles from web pages, transcripts from videos."""

from .chain import ChainResult, StrategyChain, StrategyFailed, StrategyOutcome, TranscriptStrategy
from .document import DocumentExtractor
from .json_scanner import JsonScanError, extract_balanced, extract_embedded_json, find_balanced_end
from .strategies import (
    DirectCaptionsStrategy,
    PageScrapeStrategy,
    RelayStrategy,
    discover_caption_tracks,
    extract_page_title,
    select_caption_track,
)
from .timedtext import TimedTextError, looks_like_timed_text, parse_timed_text
from .transcript import TranscriptExtractor

__all__ = [
    # Pipelines
    "DocumentExtractor",
    "TranscriptExtractor",
    # Strategy chain
    "ChainResult",
    "StrategyChain",
    "StrategyFailed",
    "StrategyOutcome",
    "TranscriptStrategy",
    "DirectCaptionsStrategy",
    "PageScrapeStrategy",
    "RelayStrategy",
    "discover_caption_tracks",
    "extract_page_title",
    "select_caption_track",
    # Parsing
    "JsonScanError",
    "TimedTextError",
    "extract_balanced",
    "extract_embedded_json",
    "find_balanced_end",
    "looks_like_timed_text",
    "parse_timed_text",
]
