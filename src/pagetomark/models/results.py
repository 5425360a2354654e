"""Data model shared by the extractors, the normalizer and callers."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class ResourceKind(str, Enum):
    """Which extraction pipeline a URL is routed to."""

    DOCUMENT = "document"
    VIDEO = "video"


@dataclass(frozen=True)
class Classification:
    """Result of classifying a URL."""

    kind: ResourceKind
    video_id: Optional[str] = None


@dataclass(frozen=True)
class ConversionRequest:
    url: str


@dataclass(frozen=True)
class ConversionResult:
    """
    A successfully converted resource.

    Attributes:
        markdown: Full document, starting with the frontmatter block
        title: Never empty; a placeholder is used when none was found
        url: Source URL recorded in the frontmatter
        timestamp: Local capture time, ``YYYY-MM-DD HH:MM:SS``
    """

    markdown: str
    title: str
    url: str
    timestamp: str


@dataclass(frozen=True)
class TranscriptItem:
    """One timed text segment, times in seconds."""

    text: str
    start_seconds: float
    duration_seconds: float


class CaptionKind(str, Enum):
    MANUAL = "manual"
    AUTO = "auto"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class CaptionTrack:
    """A language-tagged caption source discovered for a video."""

    language_code: str
    kind: CaptionKind
    source_locator: str

    @classmethod
    def from_player_json(cls, entry: dict[str, Any]) -> Optional[CaptionTrack]:
        """
        Build a track from a player-configuration caption entry.

        Entries without a ``baseUrl`` are unusable and yield None. A missing
        ``kind`` marks a creator-provided track, ``asr`` a speech-recognition
        one.
        """
        base_url = entry.get("baseUrl")
        if not isinstance(base_url, str) or not base_url:
            return None

        raw_kind = entry.get("kind")
        if raw_kind is None or raw_kind == "":
            kind = CaptionKind.MANUAL
        elif raw_kind == "asr":
            kind = CaptionKind.AUTO
        else:
            kind = CaptionKind.UNKNOWN

        return cls(
            language_code=str(entry.get("languageCode") or ""),
            kind=kind,
            source_locator=base_url,
        )


@dataclass(frozen=True)
class ArticleContent:
    """Output of the document extractor."""

    title: str
    byline: Optional[str]
    markdown_body: str


@dataclass(frozen=True)
class TranscriptContent:
    """Output of the transcript extractor."""

    video_id: str
    title: str
    items: tuple[TranscriptItem, ...]


class LinkStatus(str, Enum):
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"


@dataclass
class ProcessedLink:
    """
    Per-submission record owned by the caller and populated by the converter.

    Created in PROCESSING, it moves exactly once to COMPLETED (with
    ``result``) or ERROR (with ``error``) and never changes again.

    Example:
        link = ProcessedLink(url="https://example.com/post")
        link.complete(result)
        assert link.status is LinkStatus.COMPLETED
    """

    url: str
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    status: LinkStatus = LinkStatus.PROCESSING
    result: Optional[ConversionResult] = None
    error: Optional[str] = None

    @property
    def is_terminal(self) -> bool:
        return self.status is not LinkStatus.PROCESSING

    def _ensure_processing(self) -> None:
        if self.is_terminal:
            raise RuntimeError(f"Link {self.id} already finished with status {self.status.value}")

    def complete(self, result: ConversionResult) -> None:
        self._ensure_processing()
        self.status = LinkStatus.COMPLETED
        self.result = result

    def fail(self, message: str) -> None:
        self._ensure_processing()
        self.status = LinkStatus.ERROR
        self.error = message or "An unexpected error occurred during conversion."

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dictionary for serialization."""
        data: dict[str, Any] = {"id": self.id, "url": self.url, "status": self.status.value}
        if self.result is not None:
            data["result"] = {
                "markdown": self.result.markdown,
                "title": self.result.title,
                "url": self.result.url,
                "timestamp": self.result.timestamp,
            }
        if self.error is not None:
            data["error"] = self.error
        return data
