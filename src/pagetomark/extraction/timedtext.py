"""
Timed-text (caption XML) parsing into TranscriptItems.

Two layouts are accepted:

- ``<transcript><text start="1.5" dur="2.0">...</text></transcript>``, times
  in seconds; some endpoints write the duration as ``d`` instead of ``dur``.
- ``<timedtext><body><p t="1500" d="2000">...</p></body></timedtext>``, times
  in milliseconds (``<text t= d=>`` is read the same way).
"""

import html
import logging
import re
from typing import Optional
from xml.etree.ElementTree import ParseError

from defusedxml import DefusedXmlException

from ..conversion.documents import EtreeDocument
from ..conversion.protocols import Element
from ..models.results import TranscriptItem

logger = logging.getLogger(__name__)

_TIMED_ELEMENT_RE = re.compile(r"<(?:text|p)[\s>]")


class TimedTextError(ValueError):
    """The caption payload is empty or not parseable XML."""


def looks_like_timed_text(body: Optional[str]) -> bool:
    """Cheap pre-check: a non-empty body that contains timed elements."""
    return bool(body and body.strip() and _TIMED_ELEMENT_RE.search(body))


def _number(value: Optional[str]) -> Optional[float]:
    if value is None or not value.strip():
        return None
    try:
        return float(value)
    except ValueError:
        return None


def _timing(element: Element) -> Optional[tuple[float, float]]:
    """Return (start, duration) in seconds, or None if the element carries no start."""
    start = _number(element.attribute("start"))
    if start is not None:
        duration = _number(element.attribute("dur"))
        if duration is None:
            duration = _number(element.attribute("d"))
        return start, duration or 0.0

    start_ms = _number(element.attribute("t"))
    if start_ms is not None:
        duration_ms = _number(element.attribute("d")) or 0.0
        return start_ms / 1000.0, duration_ms / 1000.0

    return None


def clean_caption_text(raw: str) -> str:
    """Decode HTML entities left in caption text and collapse whitespace."""
    # Payloads are frequently escaped twice; XML parsing removes one layer.
    return " ".join(html.unescape(raw).split())


def parse_timed_text(xml: str) -> list[TranscriptItem]:
    """
    Parse a caption XML document.

    Items with no text are dropped; the rest are sorted by start time,
    keeping document order among equal starts.

    Raises:
        TimedTextError: empty or malformed XML
    """
    if not xml or not xml.strip():
        raise TimedTextError("Empty caption payload")

    try:
        document = EtreeDocument.parse(xml)
    except (ParseError, DefusedXmlException) as e:
        raise TimedTextError(f"Malformed caption XML: {e}") from e

    elements = document.elements_by_tag_name("text") or document.elements_by_tag_name("p")

    items: list[TranscriptItem] = []
    for element in elements:
        timing = _timing(element)
        if timing is None:
            continue
        text = clean_caption_text(element.text())
        if not text:
            continue
        start, duration = timing
        items.append(TranscriptItem(text=text, start_seconds=start, duration_seconds=duration))

    items.sort(key=lambda item: item.start_seconds)
    logger.debug(f"Parsed {len(items)} caption segments from {len(elements)} elements")
    return items
