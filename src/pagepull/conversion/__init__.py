"""Content conversion for pagepull (HTML to normalized Markdown or text)."""

from .article import ArticleExtractor
from .extractor import (
    CONVERSION_ERROR,
    UNABLE_TO_EXTRACT,
    ContentExtractor,
    html_to_markdown,
    html_to_text,
    resolve_urls,
)
from .markdown import HtmlToMarkdown, PageMarkdownConverter, TextFlattener
from .normalizer import DEFAULT_LOOKBACK, normalize, remove_duplicate_lines, remove_duplicate_paragraphs
from .protocols import StructuralExtractor
from .pruner import BOILERPLATE_SELECTORS, NoisePruner

__all__ = [
    # Protocols
    "StructuralExtractor",
    # Implementations
    "ArticleExtractor",
    "ContentExtractor",
    "HtmlToMarkdown",
    "NoisePruner",
    "PageMarkdownConverter",
    "TextFlattener",
    # Functions
    "html_to_markdown",
    "html_to_text",
    "normalize",
    "remove_duplicate_lines",
    "remove_duplicate_paragraphs",
    "resolve_urls",
    # Constants
    "BOILERPLATE_SELECTORS",
    "CONVERSION_ERROR",
    "DEFAULT_LOOKBACK",
    "UNABLE_TO_EXTRACT",
]
