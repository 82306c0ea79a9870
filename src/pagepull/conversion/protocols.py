"""Protocol definitions for content conversion."""

from typing import Optional, Protocol

from bs4 import BeautifulSoup

from ..models.page import ExtractedArticle


class StructuralExtractor(Protocol):
    """
    Protocol for isolating the main content of a parsed document.

    Implementations may mutate the document they receive; callers hand
    them a copy.
    """

    def extract_article(self, soup: BeautifulSoup) -> Optional[ExtractedArticle]:
        """
        Extract the main content subtree.

        Args:
            soup: Parsed document

        Returns:
            ExtractedArticle, or None when no article could be found
        """
        ...
