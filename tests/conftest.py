"""Shared fixtures: an in-memory renderer standing in for the render service."""

import asyncio

import pytest

from pagepull.models.page import PageContent, UsageInfo, WaitStrategy

ARTICLE_TEXT = (
    "Rendering pipelines turn dynamic pages into static documents that language "
    "models can read. The renderer waits for the network to settle, captures the "
    "final markup and hands it to an extractor. The extractor keeps the article "
    "body, drops menus and footers, converts what remains into Markdown and then "
    "removes repeated blocks that responsive layouts tend to duplicate."
)


class FakeRenderer:
    """
    Renderer returning canned pages.

    ``pages`` maps a URL to a PageContent or to an exception to raise;
    ``delays`` maps a URL to seconds to sleep first.
    """

    def __init__(self, pages, delays=None, usage=None):
        self.pages = pages
        self.delays = delays or {}
        self.usage = usage
        self.calls = []

    async def render_page(self, url, wait_for=WaitStrategy.NETWORKIDLE):
        self.calls.append((url, wait_for))
        await asyncio.sleep(self.delays.get(url, 0))
        outcome = self.pages[url]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    async def get_usage(self):
        if isinstance(self.usage, Exception):
            raise self.usage
        return self.usage

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return None


def article_page(url, title="Example Article", heading="Rendering Pages"):
    """A page with navigation around an article long enough to be extracted."""
    html = f"""<html><head><title>{title}</title></head><body>
        <nav><a href="/">Home</a> <a href="/docs">Docs</a></nav>
        <article>
            <h1>{heading}</h1>
            <p>{ARTICLE_TEXT}</p>
        </article>
        <footer>Copyright footer</footer>
    </body></html>"""
    return PageContent(html=html, resolved_url=url, title=title)


@pytest.fixture
def make_renderer():
    """Factory for FakeRenderer instances."""
    return FakeRenderer


@pytest.fixture
def make_page():
    """Factory for article pages."""
    return article_page


@pytest.fixture
def usage_info():
    return UsageInfo(
        plan="Pro",
        credits_total=1000000,
        credits_used=234567,
        credits_remaining=765433,
        reset_date="2026-11-01",
    )
