"""Protocol definitions for the remote render service."""

from __future__ import annotations

from typing import Protocol

from ..models.page import PageContent, UsageInfo, WaitStrategy


class PageRenderer(Protocol):
    """
    Protocol for services that fetch and render a page.

    This abstraction allows for:
    - Fake renderers in tests
    - Different backends (hosted scraping APIs, a local browser, etc.)
    """

    async def render_page(
        self,
        url: str,
        wait_for: WaitStrategy = WaitStrategy.NETWORKIDLE,
    ) -> PageContent:
        """
        Fetch and render a page.

        Args:
            url: The URL to fetch
            wait_for: Load condition to wait for before capturing HTML

        Returns:
            PageContent with HTML, final URL and title

        Raises:
            FetchError: When the page could not be delivered
        """
        ...


class UsageSource(Protocol):
    """Protocol for services that report account usage."""

    async def get_usage(self) -> UsageInfo:
        """
        Fetch the current usage summary.

        Raises:
            FetchError: When the summary could not be retrieved
        """
        ...
