"""Typed failures surfaced by the conversion pipeline."""

from __future__ import annotations

from enum import Enum
from typing import Optional


class FetchFailure(str, Enum):
    """Why a network call produced nothing usable."""

    STATUS = "status"
    EMPTY = "empty"
    TRANSPORT = "transport"


class ExtractionFailure(str, Enum):
    """Why the document pipeline could not produce an article."""

    NO_ARTICLE = "no_article"


class ConversionError(Exception):
    """Base class for every failure a conversion can end with."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ClassificationError(ConversionError):
    """A video-shaped URL from which no identifier could be extracted."""

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"Invalid YouTube URL. Could not extract video ID from: {url}")


class FetchError(ConversionError):
    """A direct or proxied network call failed or returned unusable content."""

    def __init__(
        self,
        reason: FetchFailure,
        url: str,
        status_code: Optional[int] = None,
        detail: Optional[str] = None,
    ):
        self.reason = reason
        self.url = url
        self.status_code = status_code

        if reason is FetchFailure.STATUS:
            message = f"Failed to fetch URL. Status: {status_code}"
        elif reason is FetchFailure.EMPTY:
            message = "No content received from proxy."
        else:
            message = f"Network error while fetching {url}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class ExtractionError(ConversionError):
    """The document pipeline produced no usable article body."""

    def __init__(self, reason: ExtractionFailure, url: str):
        self.reason = reason
        self.url = url
        super().__init__(f"Could not extract readable article content from {url}")


class NoCaptionsError(ConversionError):
    """Every transcript strategy was exhausted without producing items."""

    def __init__(self, video_id: str):
        self.video_id = video_id
        super().__init__(
            "No captions found for this video. The video may not have subtitles enabled."
        )
