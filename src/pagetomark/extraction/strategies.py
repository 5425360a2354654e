"""Concrete transcript strategies, in the order the chain tries them."""

import html
import json
import logging
import re
from typing import Any, Optional
from urllib.parse import quote, urljoin

from ..core.classifier import WATCH_URL, canonical_video_url
from ..errors import FetchError, FetchFailure
from ..http.protocols import HttpClient
from ..http.proxy import ProxyChannel
from ..models.results import CaptionKind, CaptionTrack
from .chain import StrategyFailed, StrategyOutcome
from .json_scanner import JsonScanError, extract_embedded_json
from .timedtext import TimedTextError, looks_like_timed_text, parse_timed_text

logger = logging.getLogger(__name__)

CAPTION_API_URL = "https://www.youtube.com/api/timedtext"

# Tried in order; the second also matches assignments without "var"
PLAYER_RESPONSE_MARKERS = [
    "var ytInitialPlayerResponse =",
    "ytInitialPlayerResponse =",
]
CAPTION_TRACKS_MARKER = '"captionTracks":'

_TITLE_RE = re.compile(r"<title[^>]*>(.*?)</title>", re.IGNORECASE | re.DOTALL)
_TITLE_SUFFIX_RE = re.compile(r"\s*-\s*YouTube\s*$")


def _language_matches(code: str, language: str) -> bool:
    code, language = code.lower(), language.lower()
    return code == language or code.split("-")[0] == language


def select_caption_track(tracks: list[CaptionTrack], primary_language: str) -> Optional[CaptionTrack]:
    """
    Pick the best caption track.

    Preference: manual track in the primary language, then an
    auto-generated one in the primary language, then the first listed.
    """
    if not tracks:
        return None

    in_language = [t for t in tracks if _language_matches(t.language_code, primary_language)]
    for track in in_language:
        if track.kind is CaptionKind.MANUAL:
            return track
    for track in in_language:
        if track.kind is CaptionKind.AUTO:
            return track
    return tracks[0]


def extract_page_title(page: str) -> Optional[str]:
    """Read the ``<title>`` of a watch page without the platform suffix."""
    match = _TITLE_RE.search(page)
    if not match:
        return None
    title = " ".join(html.unescape(match.group(1)).split())
    title = _TITLE_SUFFIX_RE.sub("", title)
    if not title or title == "YouTube":
        return None
    return title


def _caption_entries(player: Any) -> Optional[list]:
    if not isinstance(player, dict):
        return None
    renderer = (player.get("captions") or {}).get("playerCaptionsTracklistRenderer") or {}
    entries = renderer.get("captionTracks") if isinstance(renderer, dict) else None
    return entries if isinstance(entries, list) else None


def discover_caption_tracks(page: str) -> list[CaptionTrack]:
    """
    Find caption tracks advertised in a watch page.

    Reads the embedded player response first; when that object is missing
    or cannot be decoded, falls back to the first ``"captionTracks"`` array.
    """
    entries: Optional[list] = None

    for marker in PLAYER_RESPONSE_MARKERS:
        try:
            player = extract_embedded_json(page, marker)
        except JsonScanError as e:
            logger.debug(f"Player response after {marker!r} unusable: {e}")
            continue
        if player is not None:
            entries = _caption_entries(player)
            break

    if entries is None:
        try:
            found = extract_embedded_json(page, CAPTION_TRACKS_MARKER, opener="[")
        except JsonScanError as e:
            logger.debug(f"Caption track array unusable: {e}")
            found = None
        entries = found if isinstance(found, list) else []

    tracks = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        track = CaptionTrack.from_player_json(entry)
        if track is not None:
            tracks.append(track)
    return tracks


class DirectCaptionsStrategy:
    """
    Ask the platform's caption endpoint directly, one language at a time.

    Languages are tried strictly in order and the loop stops at the first
    payload that parses to at least one segment.
    """

    name = "direct-captions"

    def __init__(
        self,
        http_client: HttpClient,
        api_url: str = CAPTION_API_URL,
        languages: Optional[list[str]] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self._client = http_client
        self._api_url = api_url
        self._languages = list(languages) if languages else ["en"]
        self._timeout = timeout

    def build_url(self, video_id: str, language: str) -> str:
        return f"{self._api_url}?v={quote(video_id, safe='')}&lang={quote(language, safe='')}"

    async def attempt(self, video_id: str) -> StrategyOutcome:
        for language in self._languages:
            url = self.build_url(video_id, language)
            try:
                response = await self._client.get(url, timeout=self._timeout)
            except Exception as e:
                logger.debug(f"Caption request for {video_id} ({language}) failed: {e!r}")
                continue

            if not response.ok:
                logger.debug(f"Caption request for {video_id} ({language}) returned HTTP {response.status_code}")
                continue

            body = response.text()
            if not looks_like_timed_text(body):
                logger.debug(f"No captions in {language} for {video_id}")
                continue

            try:
                items = parse_timed_text(body)
            except TimedTextError as e:
                logger.debug(f"Unparseable captions in {language} for {video_id}: {e}")
                continue

            if items:
                logger.debug(f"Found {len(items)} {language} caption segments for {video_id}")
                return StrategyOutcome(items=tuple(items))

        return StrategyOutcome()


class RelayStrategy:
    """
    Ask a transcript relay service for the captions.

    The relay answers ``GET <relay>?videoId=<id>`` with
    ``{"success": bool, "title": str?, "transcript": "<xml>"?, "error": str?}``.
    Produces nothing when no relay is configured.
    """

    name = "relay"

    def __init__(
        self,
        http_client: HttpClient,
        relay_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self._client = http_client
        self._relay_url = relay_url
        self._timeout = timeout

    async def attempt(self, video_id: str) -> StrategyOutcome:
        if not self._relay_url:
            logger.debug("No transcript relay configured, skipping")
            return StrategyOutcome()

        url = f"{self._relay_url}?videoId={quote(video_id, safe='')}"
        response = await self._client.get(url, timeout=self._timeout)
        if not response.ok:
            raise FetchError(FetchFailure.STATUS, url, status_code=response.status_code)

        try:
            data = json.loads(response.text())
        except ValueError as e:
            raise StrategyFailed(f"Relay returned invalid JSON: {e}") from e
        if not isinstance(data, dict):
            raise StrategyFailed("Relay returned an unexpected payload")

        raw_title = data.get("title")
        title = " ".join(raw_title.split()) if isinstance(raw_title, str) else ""
        title = title or None

        transcript = data.get("transcript")
        if not data.get("success") or not isinstance(transcript, str) or not transcript.strip():
            raise StrategyFailed(f"Relay reported failure: {data.get('error') or 'no transcript'}", title=title)

        try:
            items = parse_timed_text(transcript)
        except TimedTextError as e:
            raise StrategyFailed(str(e), title=title) from e

        return StrategyOutcome(items=tuple(items), title=title)


class PageScrapeStrategy:
    """
    Scrape the watch page for caption tracks and fetch the best one.

    Both the page and the track are fetched through the proxy channel.
    """

    name = "page-scrape"

    def __init__(
        self,
        proxy_channel: ProxyChannel,
        watch_url: str = WATCH_URL,
        primary_language: str = "en",
    ) -> None:
        self._channel = proxy_channel
        self._watch_url = watch_url
        self._primary_language = primary_language

    async def attempt(self, video_id: str) -> StrategyOutcome:
        page = await self._channel.fetch_text(canonical_video_url(video_id, self._watch_url))
        title = extract_page_title(page)

        tracks = discover_caption_tracks(page)
        track = select_caption_track(tracks, self._primary_language)
        if track is None:
            raise StrategyFailed("No caption tracks listed on the watch page", title=title)

        logger.debug(f"Selected {track.kind.value} track '{track.language_code}' for {video_id}")
        locator = urljoin("https://www.youtube.com/", track.source_locator)

        try:
            xml = await self._channel.fetch_text(locator)
            items = parse_timed_text(xml)
        except (FetchError, TimedTextError) as e:
            raise StrategyFailed(f"Caption track unusable: {e}", title=title) from e

        return StrategyOutcome(items=tuple(items), title=title)
