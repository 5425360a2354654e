"""Document extraction: fetch a page, isolate the article, convert it to Markdown."""

import logging
from typing import Optional

from ..conversion.documents import SoupDocument
from ..conversion.extractor import ArticleSimplifier
from ..conversion.markdown import HtmlToMarkdown
from ..conversion.protocols import MarkdownConverter
from ..errors import ExtractionError, ExtractionFailure
from ..http.proxy import ProxyChannel
from ..models.results import ArticleContent

logger = logging.getLogger(__name__)


class DocumentExtractor:
    """
    Turns a generic web page into an ArticleContent.

    The page is fetched through the proxy channel and parsed with a
    ``<base>`` pointing at the original URL, so relative links and images
    resolve against the page rather than the relay.

    Example:
        extractor = DocumentExtractor(channel)
        article = await extractor.extract("https://example.com/post")
    """

    def __init__(
        self,
        proxy_channel: ProxyChannel,
        simplifier: Optional[ArticleSimplifier] = None,
        converter: Optional[MarkdownConverter] = None,
        default_title: str = "Untitled",
    ):
        """
        Initialize the extractor.

        Args:
            proxy_channel: Channel used to fetch pages
            simplifier: Article simplifier (uses default if None)
            converter: HTML to Markdown converter (uses default if None)
            default_title: Title used when the page has none
        """
        self._channel = proxy_channel
        self._simplifier = simplifier or ArticleSimplifier()
        self._converter = converter or HtmlToMarkdown()
        self._default_title = default_title

    async def extract(self, url: str) -> ArticleContent:
        """
        Fetch and extract the article at ``url``.

        Raises:
            FetchError: the page could not be fetched
            ExtractionError: the page is not article-shaped
        """
        html = await self._channel.fetch_text(url)
        logger.debug(f"Fetched {len(html)} chars from {url}")

        document = SoupDocument.parse(html, base_url=url)
        article = self._simplifier.parse(document, url)
        if article is None:
            raise ExtractionError(ExtractionFailure.NO_ARTICLE, url)

        body = self._converter.convert(article.content_html, url)
        if not body.strip():
            raise ExtractionError(ExtractionFailure.NO_ARTICLE, url)

        return ArticleContent(
            title=article.title.strip() or self._default_title,
            byline=article.byline,
            markdown_body=body,
        )
