"""
pagepull - Scrape web pages through a rendering API and reduce them to clean Markdown.

Usage:
    from pagepull import BatchFetcher, PagepullConfig, RenderApiClient

    config = PagepullConfig()

    async with RenderApiClient.from_config(config.api) as client:
        report = await BatchFetcher(client).fetch_all(["https://example.com"])
        for result in report.results:
            print(result.title, result.content)

    # Or convert HTML you already have
    from pagepull import html_to_markdown

    markdown = html_to_markdown(html, "https://example.com/page")
"""

__version__ = "1.0.0"

from .conversion import ContentExtractor, html_to_markdown, html_to_text, normalize
from .core.batch import BatchFetcher
from .errors import ConfigError, FetchError, PagepullError, ValidationError
from .http.client import RenderApiClient
from .models.config import ApiConfig, BatchConfig, ExtractionConfig, PagepullConfig
from .models.events import BatchEvent, BatchEventType
from .models.page import BatchReport, ExtractMode, PageContent, PageResult, UsageInfo, WaitStrategy
from .tools import ToolResult, get_usage, scrape_url, scrape_urls

__all__ = [
    "__version__",
    # Core
    "BatchFetcher",
    "ContentExtractor",
    "RenderApiClient",
    "html_to_markdown",
    "html_to_text",
    "normalize",
    # Tools
    "ToolResult",
    "get_usage",
    "scrape_url",
    "scrape_urls",
    # Config
    "PagepullConfig",
    "ApiConfig",
    "ExtractionConfig",
    "BatchConfig",
    # Models
    "BatchReport",
    "ExtractMode",
    "PageContent",
    "PageResult",
    "UsageInfo",
    "WaitStrategy",
    # Events
    "BatchEvent",
    "BatchEventType",
    # Errors
    "PagepullError",
    "FetchError",
    "ValidationError",
    "ConfigError",
]
