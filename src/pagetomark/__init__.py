"""
pagetomark - Convert web pages and video transcripts to Markdown.

Usage:
    from pagetomark import Converter, ConverterConfig

    config = ConverterConfig.from_env()

    async with Converter(config) as converter:
        result = await converter.convert("https://youtu.be/dQw4w9WgXcQ")
        print(result.markdown)
"""

__version__ = "1.0.0"

from .core.classifier import classify, extract_video_id, is_video_url
from .core.converter import Converter, convert_blocking
from .errors import (
    ClassificationError,
    ConversionError,
    ExtractionError,
    ExtractionFailure,
    FetchError,
    FetchFailure,
    NoCaptionsError,
)
from .models.config import ConverterConfig, NetworkConfig, ProxyConfig, TranscriptConfig
from .models.results import ConversionResult, LinkStatus, ProcessedLink, ResourceKind
from .naming import combine_markdown, combined_filename, safe_filename

__all__ = [
    "__version__",
    # Core
    "Converter",
    "convert_blocking",
    "classify",
    "extract_video_id",
    "is_video_url",
    # Config
    "ConverterConfig",
    "NetworkConfig",
    "ProxyConfig",
    "TranscriptConfig",
    # Results
    "ConversionResult",
    "LinkStatus",
    "ProcessedLink",
    "ResourceKind",
    # Errors
    "ConversionError",
    "ClassificationError",
    "FetchError",
    "FetchFailure",
    "ExtractionError",
    "ExtractionFailure",
    "NoCaptionsError",
    # Output
    "combine_markdown",
    "combined_filename",
    "safe_filename",
]
