"""Selector-based boilerplate removal for pages where structural extraction fails."""

import logging
from collections.abc import Iterable

from bs4 import Tag

logger = logging.getLogger(__name__)

# Elements to remove (navigation, ads, cookie notices)
BOILERPLATE_SELECTORS = (
    "nav",
    "header",
    "footer",
    "aside",
    ".sidebar",
    ".menu",
    ".navigation",
    ".advertisement",
    ".ad",
    ".ads",
    "#cookie-banner",
    ".cookie-banner",
    ".cookie-notice",
)


class NoisePruner:
    """
    Removes known boilerplate regions from a DOM subtree.

    Example:
        pruner = NoisePruner(extra_selectors=[".newsletter-signup"])
        removed = pruner.prune(soup.body)
    """

    def __init__(self, extra_selectors: Iterable[str] = ()) -> None:
        """
        Initialize the pruner.

        Args:
            extra_selectors: CSS selectors removed in addition to the defaults
        """
        self._selectors = BOILERPLATE_SELECTORS + tuple(extra_selectors)

    @property
    def selectors(self) -> tuple[str, ...]:
        return self._selectors

    def prune(self, element: Tag) -> int:
        """
        Remove every element matching a boilerplate selector, in place.

        Args:
            element: Subtree to clean (usually the document body)

        Returns:
            Number of elements removed
        """
        removed = 0
        for selector in self._selectors:
            for el in element.select(selector):
                # Already gone with an ancestor matched by an earlier selector
                if el.decomposed:
                    continue
                el.decompose()
                removed += 1

        logger.debug(f"Pruned {removed} boilerplate elements")
        return removed
