"""pagetomark configuration and data models."""

from .config import (
    DEFAULT_CAPTION_LANGUAGES,
    ConverterConfig,
    NetworkConfig,
    ProxyConfig,
    TranscriptConfig,
)
from .results import (
    ArticleContent,
    CaptionKind,
    CaptionTrack,
    Classification,
    ConversionRequest,
    ConversionResult,
    LinkStatus,
    ProcessedLink,
    ResourceKind,
    TranscriptContent,
    TranscriptItem,
)

__all__ = [
    # Config
    "DEFAULT_CAPTION_LANGUAGES",
    "ConverterConfig",
    "NetworkConfig",
    "ProxyConfig",
    "TranscriptConfig",
    # Results
    "ArticleContent",
    "CaptionKind",
    "CaptionTrack",
    "Classification",
    "ConversionRequest",
    "ConversionResult",
    "LinkStatus",
    "ProcessedLink",
    "ResourceKind",
    "TranscriptContent",
    "TranscriptItem",
]
