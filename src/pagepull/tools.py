"""
Tool operations: the command surface of pagepull.

Each operation validates its input, runs the fetch and extraction pipeline
and returns a ToolResult whose text is ready to hand to a language model.
Operations never raise; failures come back as ``is_error`` results whose
text starts with ``Error:``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from .conversion.extractor import ContentExtractor
from .core.batch import MAX_URLS, BatchFetcher
from .errors import FetchError
from .http.protocols import PageRenderer, UsageSource
from .models.page import BatchReport, ExtractMode, PageResult, UsageInfo, WaitStrategy
from .security.url_validator import UrlValidator

logger = logging.getLogger(__name__)

_url_validator = UrlValidator()


@dataclass(frozen=True)
class ToolResult:
    """Text returned by a tool operation, flagged when it reports a failure."""

    text: str
    is_error: bool = False

    @staticmethod
    def error(message: str) -> ToolResult:
        return ToolResult(text=f"Error: {message}", is_error=True)


def _check_url(url: str) -> str:
    result = _url_validator.validate(url)
    if not result.is_valid:
        raise ValueError(result.rejection_reason)
    return url.strip()


class ScrapeUrlRequest(BaseModel):
    """Arguments of ``scrape_url``."""

    url: str = Field(..., description="The URL of the webpage to scrape")
    wait_for: WaitStrategy = Field(
        WaitStrategy.NETWORKIDLE,
        description="Page load condition to wait for (networkidle recommended for SPA sites)",
    )

    model_config = {"extra": "forbid"}

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        return _check_url(v)


class ScrapeUrlsRequest(BaseModel):
    """Arguments of ``scrape_urls``."""

    urls: list[str] = Field(..., min_length=1, max_length=MAX_URLS, description="URLs to scrape")
    wait_for: WaitStrategy = Field(
        WaitStrategy.NETWORKIDLE,
        description="Page load condition to wait for (networkidle recommended for SPA sites)",
    )

    model_config = {"extra": "forbid"}

    @field_validator("urls")
    @classmethod
    def validate_urls(cls, v: list[str]) -> list[str]:
        return [_check_url(url) for url in v]


def _describe_validation_error(error: PydanticValidationError) -> str:
    """Flatten pydantic's error list into one line."""
    parts = []
    for detail in error.errors():
        location = ".".join(str(part) for part in detail["loc"])
        message = detail["msg"].removeprefix("Value error, ")
        parts.append(f"{location}: {message}" if location else message)
    return "Invalid input: " + "; ".join(parts)


def format_usage(usage: UsageInfo) -> str:
    """Render a usage summary as a Markdown table."""
    return "\n".join(
        [
            "## API Usage",
            "",
            "| Item | Value |",
            "|------|-------|",
            f"| Plan | {usage.plan} |",
            f"| Total Credits | {usage.credits_total:,} |",
            f"| Used Credits | {usage.credits_used:,} |",
            f"| Remaining Credits | {usage.credits_remaining:,} |",
            f"| Reset Date | {usage.reset_date} |",
        ]
    )


def format_page(result: PageResult) -> str:
    """Render a successful single-page result with its title and source."""
    return "\n".join(
        [
            f"# {result.title}",
            "",
            f"> Source: {result.resolved_url or result.url}",
            "",
            result.content or "",
        ]
    )


def _format_section(index: int, result: PageResult) -> str:
    if result.success:
        heading, body = f"## {index}. {result.title}", result.content or ""
    else:
        heading, body = f"## {index}. Error", f"Error: {result.error}"
    return "\n".join([heading, "", f"> Source: {result.url}", "", body])


def format_report(report: BatchReport) -> str:
    """Render a batch report: a summary heading, then one section per URL."""
    summary = f"# Scrape Results ({report.success_count}/{report.total} successful)\n\n"
    sections = [_format_section(i, result) for i, result in enumerate(report.results, start=1)]
    return summary + "\n\n---\n\n".join(sections)


async def get_usage(source: UsageSource) -> ToolResult:
    """
    Report the account's plan, credits and reset date.

    Args:
        source: Service that reports usage

    Returns:
        ToolResult with a Markdown table, or an error result
    """
    try:
        usage = await source.get_usage()
    except FetchError as e:
        logger.error(f"Usage lookup failed: {e.message}")
        return ToolResult.error(e.message)
    except Exception as e:
        logger.error(f"Unexpected error during usage lookup: {e}", exc_info=True)
        return ToolResult.error(str(e) or "Unknown error")

    return ToolResult(text=format_usage(usage))


async def scrape_url(
    renderer: PageRenderer,
    url: str,
    wait_for: str | WaitStrategy = WaitStrategy.NETWORKIDLE,
    extractor: ContentExtractor | None = None,
    mode: ExtractMode = ExtractMode.MARKDOWN,
) -> ToolResult:
    """
    Scrape one page and return its main content.

    Args:
        renderer: Service that renders pages
        url: Page to scrape
        wait_for: Load condition ("load", "networkidle" or "domcontentloaded")
        extractor: Content extractor (default settings if None)
        mode: Markdown or plain text output

    Returns:
        ToolResult with a titled document, or an error result
    """
    try:
        request = ScrapeUrlRequest(url=url, wait_for=wait_for)
    except PydanticValidationError as e:
        return ToolResult.error(_describe_validation_error(e))

    result = await BatchFetcher(renderer, extractor).fetch_one(request.url, request.wait_for, mode)
    if not result.success:
        return ToolResult.error(result.error or "Failed to scrape the page.")
    return ToolResult(text=format_page(result))


async def scrape_urls(
    renderer: PageRenderer,
    urls: list[str],
    wait_for: str | WaitStrategy = WaitStrategy.NETWORKIDLE,
    extractor: ContentExtractor | None = None,
    mode: ExtractMode = ExtractMode.MARKDOWN,
) -> ToolResult:
    """
    Scrape up to ten pages in parallel.

    Individual page failures are reported inside the result text; only
    invalid input makes the whole result an error.

    Args:
        renderer: Service that renders pages
        urls: Pages to scrape (1 to 10)
        wait_for: Load condition applied to every page
        extractor: Content extractor (default settings if None)
        mode: Markdown or plain text output

    Returns:
        ToolResult with a summary and one section per URL, or an error result
    """
    try:
        request = ScrapeUrlsRequest(urls=urls, wait_for=wait_for)
    except PydanticValidationError as e:
        return ToolResult.error(_describe_validation_error(e))

    report = await BatchFetcher(renderer, extractor).fetch_all(request.urls, request.wait_for, mode)
    return ToolResult(text=format_report(report))
