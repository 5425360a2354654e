"""
URL classification: video pages vs generic documents.
"""

import re
from typing import Optional
from urllib.parse import parse_qs, urlparse

from ..errors import ClassificationError
from ..models.results import Classification, ResourceKind

# Shapes that route a URL to the transcript pipeline
VIDEO_SHAPE_PATTERN = re.compile(
    r"(?:youtube\.com/watch|youtu\.be/|youtube\.com/embed/|youtube\.com/shorts/|youtube\.com/v/)",
    re.IGNORECASE,
)

# Identifier extraction, tried in order; the first capture group wins
VIDEO_ID_PATTERNS = [
    re.compile(
        r"(?:youtube\.com/watch\?v=|youtu\.be/|youtube\.com/embed/|youtube\.com/shorts/|youtube\.com/v/)"
        r"([^&\n?#/]+)",
        re.IGNORECASE,
    ),
    re.compile(r"^([a-zA-Z0-9_-]{11})$"),
]

BARE_ID_PATTERN = re.compile(r"^[a-zA-Z0-9_-]{11}$")

WATCH_URL = "https://www.youtube.com/watch?v={video_id}"


def is_video_url(url: str) -> bool:
    """Quick check if a string has a video-page shape or is a bare identifier."""
    url = url.strip()
    return bool(VIDEO_SHAPE_PATTERN.search(url) or BARE_ID_PATTERN.match(url))


def extract_video_id(url: str) -> Optional[str]:
    """
    Extract the video identifier from a URL or bare identifier token.
    Returns None if no identifier can be found.
    """
    url = url.strip()
    if not url:
        return None

    for pattern in VIDEO_ID_PATTERNS:
        m = pattern.search(url)
        if m and m.group(1):
            return m.group(1)

    # Fallback: parse query string for 'v' parameter (watch?feature=share&v=...)
    parsed = urlparse(url if "://" in url else f"https://{url}")
    if "youtube.com" in parsed.netloc.lower():
        v = parse_qs(parsed.query).get("v", [None])[0]
        if v:
            return v

    return None


def classify(url: str) -> Classification:
    """
    Decide which extraction pipeline a URL belongs to.

    Pure and deterministic. Anything without a video shape is a document;
    a video-shaped URL without an extractable identifier raises.

    Raises:
        ClassificationError: video shape matched but no identifier was found
    """
    if not is_video_url(url):
        return Classification(kind=ResourceKind.DOCUMENT)

    video_id = extract_video_id(url)
    if not video_id:
        raise ClassificationError(url)
    return Classification(kind=ResourceKind.VIDEO, video_id=video_id)


def canonical_video_url(video_id: str, template: str = WATCH_URL) -> str:
    """Return the watch-page URL for an identifier."""
    return template.format(video_id=video_id)
