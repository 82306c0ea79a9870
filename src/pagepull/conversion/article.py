"""Structural main-content extraction.

Isolates the article subtree of a page with DOM heuristics:

1. Strip boilerplate tags and elements whose class/id/role look like noise.
2. Try priority content selectors; the largest match with enough words wins.
3. Score ``<div>``/``<section>`` elements by paragraph density.
4. Give up (``None``) so the caller can fall back to pruning the whole body.
"""

from __future__ import annotations

import logging

from bs4 import BeautifulSoup, Tag

from ..models.page import ExtractedArticle

logger = logging.getLogger(__name__)

DEFAULT_MIN_WORDS = 50

# Elements that typically contain main content, tried in order
CONTENT_SELECTORS: tuple[str, ...] = (
    "article",
    "main",
    '[role="main"]',
    '[itemprop="articleBody"]',
    ".post-content",
    ".article-content",
    ".entry-content",
    ".article-body",
    ".content",
    ".main-content",
    "#content",
    "#main-content",
)

# Tags stripped before any candidate is considered
STRIP_TAGS: tuple[str, ...] = (
    "script",
    "style",
    "noscript",
    "iframe",
    "template",
    "form",
    "nav",
    "header",
    "footer",
    "aside",
)

# Class/id/role substrings that indicate non-content elements
NOISE_SUBSTRINGS: tuple[str, ...] = (
    "sidebar",
    "comment",
    "advertisement",
    "banner",
    "promo",
    "related",
    "share",
    "social",
    "newsletter",
    "cookie",
    "popup",
    "modal",
    "widget",
)


def _word_count(tag: Tag) -> int:
    return len(tag.get_text(separator=" ").split())


def _is_noisy(tag: Tag) -> bool:
    """Return True if *tag* appears to be boilerplate."""
    combined = " ".join(
        [
            " ".join(tag.get("class") or []),
            str(tag.get("id") or ""),
            str(tag.get("role") or ""),
        ]
    ).lower()
    return any(noise in combined for noise in NOISE_SUBSTRINGS)


def _paragraph_words(tag: Tag) -> int:
    return sum(len(p.get_text(separator=" ").split()) for p in tag.find_all("p"))


class ArticleExtractor:
    """
    Heuristic structural extractor.

    Mutates the soup it is given; pass a copy when the original document is
    still needed.

    Example:
        extractor = ArticleExtractor(min_words=50)
        article = extractor.extract_article(copy.copy(soup))
        if article is None:
            ...  # fall back
    """

    def __init__(
        self,
        min_words: int = DEFAULT_MIN_WORDS,
        content_selectors: tuple[str, ...] = CONTENT_SELECTORS,
    ) -> None:
        """
        Initialize the extractor.

        Args:
            min_words: Minimum words a candidate needs to count as the article
            content_selectors: CSS selectors for main content (overrides defaults)
        """
        self._min_words = min_words
        self._content_selectors = content_selectors

    def _strip_boilerplate(self, soup: BeautifulSoup) -> None:
        for el in soup.find_all(list(STRIP_TAGS)):
            if not el.decomposed:
                el.decompose()

        for el in soup.find_all(["div", "section", "aside"]):
            if not el.decomposed and _is_noisy(el):
                el.decompose()

    def _by_selector(self, soup: BeautifulSoup) -> Tag | None:
        for selector in self._content_selectors:
            elements = [el for el in soup.select(selector) if isinstance(el, Tag)]
            if not elements:
                continue
            best = max(elements, key=_word_count)
            if _word_count(best) >= self._min_words:
                logger.debug(f"Main content matched selector {selector!r}")
                return best
        return None

    def _by_density(self, soup: BeautifulSoup) -> Tag | None:
        best: Tag | None = None
        best_score = 0.0
        for el in soup.find_all(["div", "section"]):
            para_words = _paragraph_words(el)
            if para_words < self._min_words:
                continue
            density = para_words / max(_word_count(el), 1)
            score = para_words * density
            if score > best_score:
                best, best_score = el, score
        if best is not None:
            logger.debug(f"Main content chosen by paragraph density (score {best_score:.1f})")
        return best

    def extract_article(self, soup: BeautifulSoup) -> ExtractedArticle | None:
        """
        Find the main content of a parsed document.

        Args:
            soup: Parsed document (modified in place)

        Returns:
            ExtractedArticle, or None when no convincing candidate exists
        """
        self._strip_boilerplate(soup)

        node = self._by_selector(soup) or self._by_density(soup)
        if node is None:
            return None

        return ExtractedArticle(
            content_html=str(node),
            text_content=node.get_text(),
        )
