"""Tests for article simplification and the document extractor."""

import pytest
from conftest import ARTICLE_HTML, EMPTY_APP_HTML
from pagetomark.conversion.documents import SoupDocument
from pagetomark.conversion.extractor import ArticleSimplifier
from pagetomark.conversion.markdown import HtmlToMarkdown
from pagetomark.errors import ExtractionError, ExtractionFailure, FetchError, FetchFailure
from pagetomark.extraction.document import DocumentExtractor
from pagetomark.http.proxy import ProxyChannel

PAGE_URL = "https://example.com/blog/async"


class TestSoupDocument:
    """Tests for the BeautifulSoup-backed document."""

    def test_base_injected(self):
        document = SoupDocument.parse("<html><head></head><body><p>x</p></body></html>", base_url=PAGE_URL)
        assert document.base_url == PAGE_URL

    def test_base_injected_without_head(self):
        document = SoupDocument.parse("<p>fragment</p>", base_url=PAGE_URL)
        assert document.base_url == PAGE_URL

    def test_clone_is_independent(self):
        document = SoupDocument.parse(ARTICLE_HTML)
        copy = document.clone()
        for tag in copy.soup.find_all("nav"):
            tag.decompose()

        assert document.find_by_selector("nav") is not None
        assert copy.find_by_selector("nav") is None

    def test_attribute_lookup(self):
        document = SoupDocument.parse(ARTICLE_HTML)
        assert document.attribute('meta[name="author"]', "content") == "Jane Doe"
        assert document.attribute("meta[name=missing]", "content") is None
        assert len(document.elements_by_tag_name("p")) == 2


class TestArticleSimplifier:
    """Tests for main-content isolation."""

    def test_extracts_article(self):
        article = ArticleSimplifier().parse(SoupDocument.parse(ARTICLE_HTML, base_url=PAGE_URL))

        assert article is not None
        assert article.title == "Understanding Async Python"
        assert article.byline == "Jane Doe"
        assert "event loop runs coroutines" in article.content_html
        assert "Home" not in article.content_html
        assert "Copyright" not in article.content_html

    def test_resolves_relative_links(self):
        article = ArticleSimplifier().parse(SoupDocument.parse(ARTICLE_HTML, base_url=PAGE_URL))
        assert 'href="https://example.com/docs/asyncio"' in article.content_html

    def test_source_document_untouched(self):
        document = SoupDocument.parse(ARTICLE_HTML)
        ArticleSimplifier().parse(document)
        assert document.find_by_selector("footer") is not None

    def test_empty_app_shell(self):
        """Test that a page with no readable text is not an article."""
        assert ArticleSimplifier().parse(SoupDocument.parse(EMPTY_APP_HTML)) is None

    def test_paragraph_scoring_without_semantic_markup(self):
        html = """<html><body>
            <div class="links"><a href="/a">One</a> <a href="/b">Two</a> <a href="/c">Three</a></div>
            <div class="story">
              <p>This paragraph has enough words, commas, and clauses to score well.</p>
              <p>So does this one, which continues the story at some length, again.</p>
            </div>
        </body></html>"""
        article = ArticleSimplifier().parse(SoupDocument.parse(html))

        assert article is not None
        assert "continues the story" in article.content_html
        assert "Three" not in article.content_html

    def test_title_falls_back_to_h1(self):
        html = "<html><body><h1>Only Heading</h1><p>" + "Body text that is long enough. " * 3 + "</p></body></html>"
        article = ArticleSimplifier().parse(SoupDocument.parse(html))
        assert article.title == "Only Heading"


class TestHtmlToMarkdown:
    """Tests for the Markdown dialect."""

    @pytest.fixture
    def converter(self):
        return HtmlToMarkdown()

    def test_headings_and_bullets(self, converter):
        markdown = converter.convert("<h2>Setup</h2><ul><li>one</li><li>two</li></ul>", PAGE_URL)
        assert "## Setup" in markdown
        assert "- one" in markdown
        assert "- two" in markdown

    def test_fenced_code(self, converter):
        markdown = converter.convert("<pre><code>x = 1\ny = 2</code></pre>", PAGE_URL)
        assert "```\nx = 1\ny = 2\n```" in markdown
        assert "[code]" not in markdown

    def test_horizontal_rule(self, converter):
        markdown = converter.convert("<p>above</p><hr><p>below</p>", PAGE_URL)
        assert "\n---\n" in markdown
        assert "* * *" not in markdown

    def test_scripts_dropped(self, converter):
        markdown = converter.convert("<p>kept</p><script>alert(1)</script><style>p{}</style>", PAGE_URL)
        assert "kept" in markdown
        assert "alert" not in markdown

    def test_relative_links_made_absolute(self, converter):
        markdown = converter.convert('<p><a href="/docs">Docs</a></p>', PAGE_URL)
        assert "[Docs](https://example.com/docs)" in markdown


class TestDocumentExtractor:
    """Tests for the end-to-end document pipeline."""

    @pytest.mark.asyncio
    async def test_extracts_markdown(self, fake_client):
        fake_client.add(PAGE_URL, ARTICLE_HTML)
        article = await DocumentExtractor(ProxyChannel(fake_client)).extract(PAGE_URL)

        assert article.title == "Understanding Async Python"
        assert article.byline == "Jane Doe"
        assert "Asynchronous programming lets a single thread" in article.markdown_body
        assert "[asyncio guide](https://example.com/docs/asyncio)" in article.markdown_body
        assert "```" in article.markdown_body
        assert "trackVisitor" not in article.markdown_body

    @pytest.mark.asyncio
    async def test_not_article_shaped(self, fake_client):
        fake_client.add(PAGE_URL, EMPTY_APP_HTML)

        with pytest.raises(ExtractionError) as exc_info:
            await DocumentExtractor(ProxyChannel(fake_client)).extract(PAGE_URL)
        assert exc_info.value.reason is ExtractionFailure.NO_ARTICLE

    @pytest.mark.asyncio
    async def test_default_title(self, fake_client):
        body = "<p>" + "Plain words without any title markup at all. " * 3 + "</p>"
        fake_client.add(PAGE_URL, f"<html><body>{body}</body></html>")

        article = await DocumentExtractor(ProxyChannel(fake_client)).extract(PAGE_URL)
        assert article.title == "Untitled"

    @pytest.mark.asyncio
    async def test_fetch_failure_propagates(self, fake_client):
        with pytest.raises(FetchError) as exc_info:
            await DocumentExtractor(ProxyChannel(fake_client)).extract(PAGE_URL)
        assert exc_info.value.reason is FetchFailure.STATUS
        assert "Status: 404" in str(exc_info.value)
