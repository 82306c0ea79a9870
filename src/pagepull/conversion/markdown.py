"""HTML to Markdown and plain-text emission."""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import Any

from bs4 import BeautifulSoup, Tag
from markdownify import ATX, MarkdownConverter

# Never emitted and never descended into
EXCLUDED_TAGS = ("script", "style", "noscript", "iframe")

DEFAULT_IMAGE_ALT = "image"

# Built once; every emission gets its own converter instance from these.
MARKDOWN_OPTIONS = MappingProxyType(
    {
        "heading_style": ATX,
        "bullets": "-",
        "code_language": "",
        "strip_document": "strip",
    }
)

_HORIZONTAL_WS = re.compile(r"[^\S\n]+")
_BLANK_RUN = re.compile(r"\n\s*\n")
_LEADING_SPACES = re.compile(r"^ +", re.MULTILINE)


class PageMarkdownConverter(MarkdownConverter):
    """
    markdownify converter with the image and link rules used for pages.

    Images become ``![alt](src)`` (alt falls back to "image") and vanish when
    they have no source. Links become ``[text](href)`` with trimmed text, or
    just the text when either part is empty, so no empty-target link is ever
    produced.
    """

    def convert_img(self, el: Tag, text: str, parent_tags: set[str]) -> str:
        src = (el.get("src") or "").strip()
        if not src:
            return ""
        alt = el.get("alt") or DEFAULT_IMAGE_ALT
        return f"![{alt}]({src})"

    def convert_a(self, el: Tag, text: str, parent_tags: set[str]) -> str:
        text = (text or "").strip()
        if "_noformat" in parent_tags:
            return text
        href = (el.get("href") or "").strip()
        if not href or not text:
            return text
        return f"[{text}]({href})"


def _drop_excluded(element: Tag) -> None:
    """Remove script/style/noscript/iframe elements in place."""
    for el in element.find_all(list(EXCLUDED_TAGS)):
        el.decompose()


class HtmlToMarkdown:
    """
    Converts HTML (a string or a parsed subtree) to Markdown.

    Uses markdownify with ATX headings, fenced code blocks and ``-`` bullets.
    The converter options are shared read-only; each call builds its own
    converter, so one instance can serve concurrent extractions.

    Example:
        converter = HtmlToMarkdown()
        markdown = converter.convert("<h1>Title</h1><p>Body</p>")
    """

    def __init__(self, **overrides: Any) -> None:
        """
        Initialize the Markdown converter.

        Args:
            **overrides: markdownify options replacing the defaults
        """
        self._options = MappingProxyType({**MARKDOWN_OPTIONS, **overrides})

    def convert(self, html: str | Tag) -> str:
        """
        Convert HTML to Markdown.

        A Tag argument is converted as-is and must already be a private copy:
        excluded elements are removed from it.

        Args:
            html: HTML string or parsed subtree

        Returns:
            Markdown string (not yet normalized)
        """
        if isinstance(html, Tag):
            root = html
        else:
            root = BeautifulSoup(html, "html.parser")
        _drop_excluded(root)

        converter = PageMarkdownConverter(**self._options)
        markdown: str = converter.convert_soup(root)
        return markdown


def clean_text(text: str) -> str:
    """Tidy raw text: single spaces, single blank lines, no leading indentation."""
    text = _HORIZONTAL_WS.sub(" ", text)
    text = _BLANK_RUN.sub("\n\n", text)
    text = _LEADING_SPACES.sub("", text)
    return text.strip()


class TextFlattener:
    """
    Converts HTML (a string or a parsed subtree) to plain text.

    Example:
        flattener = TextFlattener()
        text = flattener.flatten("<p>Hello <b>world</b></p>")
    """

    def flatten(self, html: str | Tag) -> str:
        """
        Extract the visible text of an HTML fragment.

        Args:
            html: HTML string or parsed subtree (a Tag is modified in place)

        Returns:
            Plain text (not yet normalized)
        """
        if isinstance(html, Tag):
            root = html
        else:
            root = BeautifulSoup(html, "html.parser")
        _drop_excluded(root)
        return clean_text(root.get_text())
