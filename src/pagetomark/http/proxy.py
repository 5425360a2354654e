"""Proxy Channel: forwards a GET to a target URL through an optional relay."""

from __future__ import annotations

import json
import logging
from typing import Literal, Optional
from urllib.parse import quote

from ..errors import FetchError, FetchFailure
from .protocols import HttpClient, HttpResponse

logger = logging.getLogger(__name__)

ProxyMode = Literal["raw", "json"]


class ProxyChannel:
    """
    Opaque forwarding channel for cross-origin fetches.

    Two relay contracts are supported:

    - ``raw``: ``GET <relay>/?<percent-encoded target>``; the relay answers
      with the target's body and mirrors its status.
    - ``json``: ``GET <relay>?url=<percent-encoded target>``; the relay
      answers with a JSON envelope whose ``contents`` field holds the body.

    With no relay configured the target is fetched directly.

    The channel is stateless; concurrent calls from independent conversions
    never interfere.

    Example:
        channel = ProxyChannel(client, relay_base="https://cors.example.workers.dev")
        html = await channel.fetch_text("https://example.com/article")
    """

    def __init__(
        self,
        http_client: HttpClient,
        relay_base: Optional[str] = None,
        mode: ProxyMode = "raw",
        timeout: Optional[float] = None,
    ) -> None:
        """
        Initialize the channel.

        Args:
            http_client: Client used for every outbound request
            relay_base: Relay endpoint, or None for direct fetches
            mode: Relay contract ("raw" or "json")
            timeout: Per-call timeout override (client default if None)
        """
        self._client = http_client
        self._relay_base = relay_base.rstrip("/") if relay_base else None
        self._mode = mode
        self._timeout = timeout

    @property
    def is_direct(self) -> bool:
        return self._relay_base is None

    def build_url(self, target_url: str) -> str:
        """Return the URL actually requested for a target."""
        if self._relay_base is None:
            return target_url
        encoded = quote(target_url, safe="")
        if self._mode == "json":
            return f"{self._relay_base}?url={encoded}"
        return f"{self._relay_base}/?{encoded}"

    async def fetch(self, target_url: str) -> HttpResponse:
        """
        Fetch a target and return the relay's raw response.

        Raises:
            FetchError: TRANSPORT when the relay (or target) is unreachable
                or the call times out, STATUS on a non-2xx answer.
        """
        request_url = self.build_url(target_url)
        try:
            response = await self._client.get(request_url, timeout=self._timeout)
        except Exception as e:
            raise FetchError(FetchFailure.TRANSPORT, target_url, detail=repr(e)) from e

        if not response.ok:
            logger.debug(f"Proxy fetch of {target_url} returned HTTP {response.status_code}")
            raise FetchError(FetchFailure.STATUS, target_url, status_code=response.status_code)
        return response

    async def fetch_text(self, target_url: str) -> str:
        """
        Fetch a target and return its body as text.

        Raises:
            FetchError: as ``fetch``, plus EMPTY when no content came back.
        """
        response = await self.fetch(target_url)
        text = response.text()

        if self._relay_base is not None and self._mode == "json":
            text = self._unwrap_envelope(text, target_url)

        if not text.strip():
            raise FetchError(FetchFailure.EMPTY, target_url)
        return text

    def _unwrap_envelope(self, body: str, target_url: str) -> str:
        try:
            data = json.loads(body)
        except ValueError as e:
            raise FetchError(FetchFailure.EMPTY, target_url, detail="relay returned invalid JSON") from e

        contents = data.get("contents") if isinstance(data, dict) else None
        if not contents or not isinstance(contents, str):
            raise FetchError(FetchFailure.EMPTY, target_url)
        return contents
