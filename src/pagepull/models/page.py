"""Data carried through the fetch and extraction pipeline."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

UNTITLED = "Untitled"


class WaitStrategy(str, Enum):
    """Page load condition the render service waits for before returning HTML."""

    LOAD = "load"
    NETWORKIDLE = "networkidle"
    DOMCONTENTLOADED = "domcontentloaded"


class ExtractMode(str, Enum):
    """Output flavour of the extraction pipeline."""

    MARKDOWN = "markdown"
    TEXT = "text"


@dataclass(frozen=True)
class PageContent:
    """
    Rendered page as returned by the render service.

    Attributes:
        html: Raw (possibly browser-rendered) HTML
        resolved_url: URL after redirects, used to resolve relative links
        title: Page title, if the service reported one
    """

    html: str
    resolved_url: str
    title: Optional[str] = None


@dataclass(frozen=True)
class ExtractedArticle:
    """Main-content subtree isolated by a structural extractor."""

    content_html: str
    text_content: str


@dataclass(frozen=True)
class UsageInfo:
    """Account usage summary reported by the render service."""

    plan: str
    credits_total: int
    credits_used: int
    credits_remaining: int
    reset_date: str


@dataclass
class PageResult:
    """
    Outcome for one requested URL in a batch.

    Exactly one of ``content`` (on success) or ``error`` (on failure) is set.
    Use the ``ok`` and ``failed`` constructors rather than building one by hand.
    """

    url: str
    success: bool
    title: Optional[str] = None
    content: Optional[str] = None
    error: Optional[str] = None
    resolved_url: Optional[str] = None

    @staticmethod
    def ok(url: str, content: str, title: Optional[str] = None, resolved_url: Optional[str] = None) -> "PageResult":
        """Create a successful result."""
        return PageResult(
            url=url,
            success=True,
            title=title or UNTITLED,
            content=content,
            resolved_url=resolved_url or url,
        )

    @staticmethod
    def failed(url: str, error: str) -> "PageResult":
        """Create a failed result."""
        return PageResult(url=url, success=False, error=error)


@dataclass
class BatchReport:
    """
    Results of a batch fetch, in the order the URLs were requested.
    """

    results: list[PageResult] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def success_count(self) -> int:
        return sum(1 for result in self.results if result.success)

    @property
    def failure_count(self) -> int:
        return self.total - self.success_count

    @property
    def all_succeeded(self) -> bool:
        return self.success_count == self.total

    def to_dict(self) -> dict:
        """Convert report to dictionary for serialization."""
        return {
            "total": self.total,
            "success_count": self.success_count,
            "results": [
                {
                    "url": r.url,
                    "success": r.success,
                    "title": r.title,
                    "content": r.content,
                    "error": r.error,
                }
                for r in self.results
            ],
        }
