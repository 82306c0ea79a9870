"""Per-page extraction: rendered HTML in, normalized Markdown or text out."""

from __future__ import annotations

import copy
import logging
from typing import Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

from ..models.config import ExtractionConfig
from ..models.page import ExtractMode, PageContent
from .article import ArticleExtractor
from .markdown import HtmlToMarkdown, TextFlattener, clean_text
from .normalizer import DEFAULT_LOOKBACK, normalize
from .protocols import StructuralExtractor
from .pruner import NoisePruner

logger = logging.getLogger(__name__)

UNABLE_TO_EXTRACT = "Unable to extract content."
CONVERSION_ERROR = "An error occurred during content conversion."


def _absolute(base_url: str, value: str) -> str:
    """Join ``value`` onto ``base_url``; a value urljoin cannot parse is kept as is."""
    if not value:
        return ""
    try:
        return urljoin(base_url, value)
    except ValueError:
        logger.debug(f"Leaving malformed URL unresolved: {value!r}")
        return value


def resolve_urls(soup: BeautifulSoup, base_url: str) -> None:
    """
    Make every link and image URL absolute, in place.

    A ``<base href>`` in the document takes precedence over ``base_url``.
    Empty attributes are left empty and malformed ones are left untouched.

    Args:
        soup: Parsed document
        base_url: URL the document was served from (after redirects)
    """
    base = soup.find("base", href=True)
    if isinstance(base, Tag):
        base_url = _absolute(base_url, str(base["href"]).strip()) or base_url

    for tag in soup.find_all("a", href=True):
        href = str(tag["href"]).strip()
        tag["href"] = _absolute(base_url, href)

    for tag in soup.find_all(src=True):
        src = str(tag["src"]).strip()
        tag["src"] = _absolute(base_url, src)


def _document_body(soup: BeautifulSoup) -> Optional[Tag]:
    """Return the body of a parsed document, or None for an empty document."""
    if soup.body is not None:
        return soup.body

    # html.parser does not wrap bare fragments in <body>
    if soup.head is not None:
        soup.head.decompose()
    # Empty only when nothing but the <html> shell is left; a tag-only fragment
    # (an image, say) still has content to emit
    if not soup.get_text(strip=True) and soup.find(lambda tag: tag.name != "html") is None:
        return None
    return soup


class ContentExtractor:
    """
    Turns a rendered page into normalized Markdown or plain text.

    Runs the structural extractor on a copy of the document. When it finds an
    article, that subtree is emitted; otherwise known boilerplate is pruned
    from the full body and the remainder is emitted. Either way the output
    goes through the normalizer.

    ``extract`` never raises: a document without a body yields
    ``UNABLE_TO_EXTRACT`` and any unexpected failure yields
    ``CONVERSION_ERROR``.

    Example:
        extractor = ContentExtractor()
        markdown = extractor.extract(page)
        text = extractor.extract(page, ExtractMode.TEXT)
    """

    def __init__(
        self,
        structural_extractor: Optional[StructuralExtractor] = None,
        pruner: Optional[NoisePruner] = None,
        markdown: Optional[HtmlToMarkdown] = None,
        flattener: Optional[TextFlattener] = None,
        lookback: int = DEFAULT_LOOKBACK,
    ):
        """
        Initialize the content extractor.

        Args:
            structural_extractor: Main-content extractor (uses ArticleExtractor if None)
            pruner: Fallback boilerplate pruner (uses default selectors if None)
            markdown: Markdown emitter (uses default if None)
            flattener: Plain-text emitter (uses default if None)
            lookback: Paragraph dedup window passed to the normalizer
        """
        self._structural = structural_extractor or ArticleExtractor()
        self._pruner = pruner or NoisePruner()
        self._markdown = markdown or HtmlToMarkdown()
        self._flattener = flattener or TextFlattener()
        self._lookback = lookback

    @classmethod
    def from_config(cls, config: ExtractionConfig) -> ContentExtractor:
        """Build an extractor from the extraction section of the config."""
        return cls(
            structural_extractor=ArticleExtractor(min_words=config.min_article_words),
            pruner=NoisePruner(extra_selectors=config.extra_remove_selectors),
            lookback=config.dedup_lookback,
        )

    def extract(self, page: PageContent, mode: ExtractMode = ExtractMode.MARKDOWN) -> str:
        """
        Extract the main content of a page.

        Args:
            page: Rendered page
            mode: Markdown or plain text output

        Returns:
            Normalized document, or a sentinel string when extraction is impossible
        """
        try:
            return self._extract(page, ExtractMode(mode))
        except Exception as e:
            logger.error(f"Content conversion failed for {page.resolved_url}: {e}")
            return CONVERSION_ERROR

    def _extract(self, page: PageContent, mode: ExtractMode) -> str:
        soup = BeautifulSoup(page.html, "html.parser")
        resolve_urls(soup, page.resolved_url)

        article = self._structural.extract_article(copy.copy(soup))

        if article is not None:
            if mode == ExtractMode.MARKDOWN and article.content_html.strip():
                return normalize(self._markdown.convert(article.content_html), self._lookback)
            if mode == ExtractMode.TEXT and article.text_content.strip():
                return normalize(clean_text(article.text_content), self._lookback)

        logger.debug(f"No article found in {page.resolved_url}, falling back to pruned body")

        body = _document_body(soup)
        if body is None:
            logger.warning(f"Could not find a document body for {page.resolved_url}")
            return UNABLE_TO_EXTRACT

        self._pruner.prune(body)

        if mode == ExtractMode.MARKDOWN:
            raw = self._markdown.convert(body)
        else:
            raw = self._flattener.flatten(body)
        return normalize(raw, self._lookback)


_default_extractor: Optional[ContentExtractor] = None


def _get_default_extractor() -> ContentExtractor:
    global _default_extractor
    if _default_extractor is None:
        _default_extractor = ContentExtractor()
    return _default_extractor


def html_to_markdown(html: str, url: str = "") -> str:
    """Convert a page's HTML to normalized Markdown with default settings."""
    return _get_default_extractor().extract(PageContent(html=html, resolved_url=url), ExtractMode.MARKDOWN)


def html_to_text(html: str, url: str = "") -> str:
    """Convert a page's HTML to normalized plain text with default settings."""
    return _get_default_extractor().extract(PageContent(html=html, resolved_url=url), ExtractMode.TEXT)
