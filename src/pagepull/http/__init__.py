"""Render service client for pagepull."""

from .client import RenderApiClient, parse_page_payload, parse_usage_payload
from .protocols import PageRenderer, UsageSource

__all__ = [
    "PageRenderer",
    "RenderApiClient",
    "UsageSource",
    "parse_page_payload",
    "parse_usage_payload",
]
