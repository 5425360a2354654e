"""Shared fixtures: an in-memory HttpClient and canned payloads."""

from typing import Optional, Union

import pytest
from pagetomark.http.protocols import HttpResponse

Route = Union[HttpResponse, Exception]


def make_response(
    body: Union[str, bytes] = "",
    status: int = 200,
    content_type: str = "text/html; charset=utf-8",
    url: str = "",
) -> HttpResponse:
    content = body.encode("utf-8") if isinstance(body, str) else body
    return HttpResponse(
        status_code=status,
        content=content,
        content_type=content_type,
        headers={"Content-Type": content_type},
        url=url,
    )


class FakeHttpClient:
    """HttpClient answering from a URL -> response table; unknown URLs get a 404."""

    def __init__(self, routes: Optional[dict[str, Route]] = None):
        self.routes: dict[str, Route] = dict(routes or {})
        self.requests: list[str] = []
        self.timeouts: list[Optional[float]] = []

    def add(self, url: str, body: Union[str, bytes] = "", status: int = 200, content_type: str = "text/html") -> None:
        self.routes[url] = make_response(body, status=status, content_type=content_type, url=url)

    def fail(self, url: str, error: Exception) -> None:
        self.routes[url] = error

    async def get(
        self,
        url: str,
        *,
        timeout: Optional[float] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> HttpResponse:
        self.requests.append(url)
        self.timeouts.append(timeout)
        route = self.routes.get(url)
        if route is None:
            return make_response("Not Found", status=404, url=url)
        if isinstance(route, Exception):
            raise route
        return route


ARTICLE_HTML = """<!DOCTYPE html>
<html>
<head>
  <title>Understanding Async Python | Example Blog</title>
  <meta name="author" content="Jane Doe">
</head>
<body>
  <nav><a href="/">Home</a> <a href="/about">About</a></nav>
  <article>
    <h1>Understanding Async Python</h1>
    <p>Asynchronous programming lets a single thread juggle many waiting tasks,
       which matters most when the work is dominated by network latency.</p>
    <p>The event loop runs coroutines, suspends them at await points, and resumes
       them when their results are ready. See the <a href="/docs/asyncio">asyncio guide</a>.</p>
    <pre><code>async def main():
    await asyncio.sleep(1)</code></pre>
  </article>
  <footer>Copyright 2024 Example Blog</footer>
  <script>trackVisitor();</script>
</body>
</html>
"""

EMPTY_APP_HTML = """<!DOCTYPE html>
<html><head><title>App</title></head>
<body><div id="app"></div><script src="/bundle.js"></script></body>
</html>
"""

TIMED_TEXT_XML = """<?xml version="1.0" encoding="utf-8" ?>
<transcript>
  <text start="0.5" dur="2.1">Hello and welcome</text>
  <text start="2.6" dur="3.0">to the show &amp;amp; more</text>
  <text start="5.6" dur="1.5">Let&amp;#39;s begin</text>
</transcript>
"""


def watch_page(video_id: str, caption_url: str, title: str = "Never Gonna Give You Up") -> str:
    return f"""<html><head><title>{title} - YouTube</title></head><body>
<script>var ytInitialPlayerResponse = {{"videoDetails": {{"videoId": "{video_id}"}},
"captions": {{"playerCaptionsTracklistRenderer": {{"captionTracks": [
{{"baseUrl": "{caption_url}", "languageCode": "en", "kind": "asr"}}
]}}}}}};var meta = {{}};</script>
</body></html>"""


@pytest.fixture
def fake_client() -> FakeHttpClient:
    return FakeHttpClient()
