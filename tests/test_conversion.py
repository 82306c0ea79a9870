"""Tests for the conversion module."""

from unittest.mock import MagicMock

from bs4 import BeautifulSoup
from conftest import ARTICLE_TEXT

from pagepull.conversion import (
    BOILERPLATE_SELECTORS,
    CONVERSION_ERROR,
    UNABLE_TO_EXTRACT,
    ArticleExtractor,
    ContentExtractor,
    HtmlToMarkdown,
    NoisePruner,
    TextFlattener,
    html_to_markdown,
    html_to_text,
    resolve_urls,
)
from pagepull.models.config import ExtractionConfig
from pagepull.models.page import ExtractedArticle, ExtractMode, PageContent


class TestHtmlToMarkdown:
    """Tests for the Markdown emitter rules."""

    def test_atx_headings(self):
        result = HtmlToMarkdown().convert("<h1>Title</h1><h2>Section</h2><p>Body</p>")

        assert "# Title" in result
        assert "## Section" in result
        assert "Body" in result

    def test_dash_bullets(self):
        result = HtmlToMarkdown().convert("<ul><li>one</li><li>two</li></ul>")

        assert "- one" in result
        assert "- two" in result

    def test_fenced_code_blocks(self):
        result = HtmlToMarkdown().convert("<pre><code>x = 1\ny = 2</code></pre>")

        assert "```" in result
        assert "x = 1\ny = 2" in result

    def test_link(self):
        result = HtmlToMarkdown().convert('<p><a href="https://example.com/a"> Read more </a></p>')
        assert "[Read more](https://example.com/a)" in result

    def test_link_with_empty_href_is_plain_text(self):
        result = HtmlToMarkdown().convert('<p><a href="">Click here</a></p>')

        assert "Click here" in result
        assert "[" not in result
        assert "()" not in result

    def test_link_without_text_emits_nothing(self):
        result = HtmlToMarkdown().convert('<p>Before <a href="https://example.com"> </a>after</p>')

        assert "example.com" not in result
        assert "[]" not in result

    def test_link_inside_code_is_plain_text(self):
        result = HtmlToMarkdown().convert('<p><code><a href="https://example.com">ref</a></code></p>')

        assert "ref" in result
        assert "[ref]" not in result

    def test_image(self):
        result = HtmlToMarkdown().convert('<p><img src="https://example.com/a.png" alt="Diagram"></p>')
        assert "![Diagram](https://example.com/a.png)" in result

    def test_image_default_alt(self):
        result = HtmlToMarkdown().convert('<p><img src="https://example.com/a.png"></p>')
        assert "![image](https://example.com/a.png)" in result

    def test_image_without_src_emits_nothing(self):
        result = HtmlToMarkdown().convert('<p>Text<img alt="Missing"><img src="  " alt="Blank"></p>')

        assert "!" not in result
        assert "Missing" not in result
        assert "Blank" not in result

    def test_excluded_tags_removed(self):
        html = """<div>
            <script>alert("bad")</script>
            <style>.bad { color: red; }</style>
            <noscript>Enable JavaScript</noscript>
            <iframe src="https://ads.example.com"></iframe>
            <p>Good content</p>
        </div>"""
        result = HtmlToMarkdown().convert(html)

        assert "alert" not in result
        assert ".bad" not in result
        assert "Enable JavaScript" not in result
        assert "ads.example.com" not in result
        assert "Good content" in result


class TestTextFlattener:
    """Tests for the plain-text emitter."""

    def test_no_markdown_syntax(self):
        html = """<div>
            <h1>Title</h1>
            <p>Some <b>bold</b> and <a href="https://example.com">linked</a> words.</p>
        </div>"""
        result = TextFlattener().flatten(html)

        assert "Title" in result
        assert "Some bold and linked words." in result
        assert "#" not in result
        assert "**" not in result
        assert "https://example.com" not in result

    def test_whitespace_cleaned(self):
        result = TextFlattener().flatten("<div>\n   <p>one    two</p>\n\n\n\n   <p>three</p></div>")

        assert "one two" in result
        assert "\n\n\n" not in result
        assert not any(line.startswith(" ") for line in result.split("\n"))

    def test_excluded_tags_removed(self):
        result = TextFlattener().flatten("<div><script>var x = 1;</script><p>Visible</p></div>")

        assert "var x" not in result
        assert "Visible" in result


class TestNoisePruner:
    """Tests for the fallback boilerplate pruner."""

    def test_removes_default_selectors(self):
        html = """<body>
            <nav>Nav text</nav>
            <header>Header text</header>
            <div class="sidebar">Sidebar text</div>
            <div class="ad">Ad text</div>
            <div class="ads">Ads text</div>
            <div id="cookie-banner">Cookie text</div>
            <p>Body text</p>
            <aside>Aside text</aside>
            <footer>Footer text</footer>
        </body>"""
        soup = BeautifulSoup(html, "html.parser")

        removed = NoisePruner().prune(soup.body)

        text = soup.get_text()
        assert removed == 8
        assert "Body text" in text
        for noise in ("Nav", "Header", "Sidebar", "Ad text", "Ads", "Cookie", "Aside", "Footer"):
            assert noise not in text

    def test_nested_matches_counted_once(self):
        soup = BeautifulSoup("<body><header><nav>Menu</nav></header><p>Body</p></body>", "html.parser")

        removed = NoisePruner().prune(soup.body)

        # nav goes first, then header
        assert removed == 2
        assert soup.get_text() == "Body"

    def test_extra_selectors(self):
        soup = BeautifulSoup('<body><div class="promo-box">Buy now</div><p>Body</p></body>', "html.parser")
        pruner = NoisePruner(extra_selectors=[".promo-box"])

        pruner.prune(soup.body)

        assert pruner.selectors == BOILERPLATE_SELECTORS + (".promo-box",)
        assert "Buy now" not in soup.get_text()


class TestArticleExtractor:
    """Tests for structural extraction."""

    def test_finds_article_tag(self):
        soup = BeautifulSoup(
            f"<body><nav>Navigation</nav><article><h1>Title</h1><p>{ARTICLE_TEXT}</p></article></body>",
            "html.parser",
        )

        article = ArticleExtractor().extract_article(soup)

        assert article is not None
        assert "<h1>Title</h1>" in article.content_html
        assert "Navigation" not in article.text_content

    def test_density_fallback_without_semantic_tags(self):
        html = f"""<body>
            <div class="links"><a href="/a">Link one</a> <a href="/b">Link two</a></div>
            <div class="story"><p>{ARTICLE_TEXT}</p><p>Second paragraph here.</p></div>
        </body>"""

        article = ArticleExtractor().extract_article(BeautifulSoup(html, "html.parser"))

        assert article is not None
        assert "Second paragraph here." in article.text_content
        assert "Link one" not in article.text_content

    def test_short_page_yields_none(self):
        soup = BeautifulSoup("<body><article><p>Too short.</p></article></body>", "html.parser")
        assert ArticleExtractor().extract_article(soup) is None

    def test_noisy_containers_stripped(self):
        html = f"""<body><article>
            <p>{ARTICLE_TEXT}</p>
            <div class="share-buttons">Share on social</div>
            <section id="comments">Great post!</section>
        </article></body>"""

        article = ArticleExtractor().extract_article(BeautifulSoup(html, "html.parser"))

        assert article is not None
        assert "Share on social" not in article.text_content
        assert "Great post!" not in article.text_content

    def test_min_words_configurable(self):
        soup = BeautifulSoup("<body><article><p>Just five words here now.</p></article></body>", "html.parser")
        article = ArticleExtractor(min_words=5).extract_article(soup)

        assert article is not None
        assert "Just five words" in article.text_content


class TestResolveUrls:
    """Tests for link and image URL resolution."""

    def test_relative_urls_resolved(self):
        soup = BeautifulSoup('<a href="/other">x</a><img src="img/a.png">', "html.parser")

        resolve_urls(soup, "https://example.com/docs/page")

        assert soup.a["href"] == "https://example.com/other"
        assert soup.img["src"] == "https://example.com/docs/img/a.png"

    def test_base_href_takes_precedence(self):
        soup = BeautifulSoup('<base href="https://cdn.example.org/v2/"><a href="guide">x</a>', "html.parser")

        resolve_urls(soup, "https://example.com/page")

        assert soup.a["href"] == "https://cdn.example.org/v2/guide"

    def test_empty_href_left_empty(self):
        soup = BeautifulSoup('<a href="  ">x</a>', "html.parser")

        resolve_urls(soup, "https://example.com/page")

        assert soup.a["href"] == ""

    def test_malformed_href_kept_as_is(self):
        soup = BeautifulSoup('<a href="http://[oops/">broken</a><img src="/logo.png">', "html.parser")

        resolve_urls(soup, "https://example.com/page")

        assert soup.a["href"] == "http://[oops/"
        assert soup.img["src"] == "https://example.com/logo.png"

    def test_malformed_href_does_not_lose_page(self):
        html = '<p>Important body text here.</p><p><a href="http://[oops/">broken</a></p>'

        result = html_to_markdown(html, "https://example.com/")

        assert result != CONVERSION_ERROR
        assert "Important body text here." in result
        assert "broken" in result


class TestContentExtractor:
    """Tests for the per-page extraction orchestrator."""

    def test_article_path_drops_surrounding_noise(self, make_page):
        page = make_page("https://example.com/post")

        result = ContentExtractor().extract(page)

        assert result.startswith("# Rendering Pages")
        assert "Rendering pipelines turn dynamic pages" in result
        assert "Home" not in result
        assert "Copyright footer" not in result

    def test_article_text_mode(self, make_page):
        result = ContentExtractor().extract(make_page("https://example.com/post"), ExtractMode.TEXT)

        assert result.startswith("Rendering Pages")
        assert "#" not in result
        assert "Home" not in result

    def test_fallback_prunes_boilerplate(self):
        html = """<html><body>
            <nav>Nav links</nav>
            <header>Site header</header>
            <div class="sidebar">Sidebar</div>
            <div class="ad">Advert</div>
            <p>Short page body.</p>
            <footer>Site footer</footer>
        </body></html>"""
        page = PageContent(html=html, resolved_url="https://example.com/")

        result = ContentExtractor().extract(page)

        assert result == "Short page body."

    def test_fallback_text_mode(self):
        html = """<html><body>
            <nav>Nav links</nav>
            <h2>Heading</h2>
            <p>Short page body.</p>
        </body></html>"""
        page = PageContent(html=html, resolved_url="https://example.com/")

        result = ContentExtractor().extract(page, ExtractMode.TEXT)

        assert result == "Heading\nShort page body."

    def test_responsive_duplicates_removed(self):
        html = f"""<html><body><article>
            <div class="mobile"><p>{ARTICLE_TEXT}</p></div>
            <div class="desktop"><p>{ARTICLE_TEXT}</p></div>
        </article></body></html>"""
        page = PageContent(html=html, resolved_url="https://example.com/")

        result = ContentExtractor().extract(page)

        assert result.count("Rendering pipelines turn dynamic pages") == 1

    def test_links_resolved_against_final_url(self, make_page):
        html = f"""<html><body><article>
            <p>{ARTICLE_TEXT} See the <a href="../guide">guide</a>.</p>
        </article></body></html>"""
        page = PageContent(html=html, resolved_url="https://example.com/docs/intro")

        result = ContentExtractor().extract(page)

        assert "[guide](https://example.com/guide)" in result

    def test_document_without_body(self):
        page = PageContent(html="<html><head><title>Empty</title></head></html>", resolved_url="https://x.example")
        assert ContentExtractor().extract(page) == UNABLE_TO_EXTRACT

    def test_empty_document(self):
        page = PageContent(html="", resolved_url="https://x.example")
        assert ContentExtractor().extract(page) == UNABLE_TO_EXTRACT

    def test_tag_only_fragment(self):
        html = '<p><a href="/p"><img src="/i.png" alt="x"></a></p>'
        page = PageContent(html=html, resolved_url="https://example.com/")

        result = ContentExtractor().extract(page)

        assert result != UNABLE_TO_EXTRACT
        assert "![x](https://example.com/i.png)" in result

    def test_unexpected_error_becomes_sentinel(self):
        structural = MagicMock()
        structural.extract_article.side_effect = RuntimeError("parser exploded")
        page = PageContent(html="<p>Hi</p>", resolved_url="https://x.example")

        assert ContentExtractor(structural_extractor=structural).extract(page) == CONVERSION_ERROR

    def test_structural_extractor_gets_a_copy(self):
        def destructive(soup):
            soup.body.clear()
            return None

        structural = MagicMock()
        structural.extract_article.side_effect = destructive
        page = PageContent(html="<html><body><p>Still here</p></body></html>", resolved_url="https://x.example")

        assert ContentExtractor(structural_extractor=structural).extract(page) == "Still here"

    def test_empty_article_falls_back(self):
        structural = MagicMock()
        structural.extract_article.return_value = ExtractedArticle(content_html="  ", text_content="")
        page = PageContent(html="<html><body><p>Body text</p></body></html>", resolved_url="https://x.example")

        assert ContentExtractor(structural_extractor=structural).extract(page) == "Body text"

    def test_from_config(self):
        config = ExtractionConfig(min_article_words=3, extra_remove_selectors=[".promo"], dedup_lookback=0)
        html = '<html><body><div class="promo">Buy</div><p>A</p><p>A</p></body></html>'
        page = PageContent(html=html, resolved_url="https://x.example")

        result = ContentExtractor.from_config(config).extract(page)

        # lookback 0 keeps the repeat; the extra selector removes the promo
        assert result == "A\n\nA"

    def test_convenience_functions(self, make_page):
        html = make_page("https://example.com/post").html

        assert html_to_markdown(html, "https://example.com/post").startswith("# Rendering Pages")
        assert html_to_text(html, "https://example.com/post").startswith("Rendering Pages")
