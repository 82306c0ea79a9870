"""Pagepull configuration, page and event models."""

from .config import ApiConfig, BatchConfig, ExtractionConfig, PagepullConfig
from .events import BatchEvent, BatchEventType, EventEmitter
from .page import (
    UNTITLED,
    BatchReport,
    ExtractedArticle,
    ExtractMode,
    PageContent,
    PageResult,
    UsageInfo,
    WaitStrategy,
)

__all__ = [
    # Config
    "ApiConfig",
    "BatchConfig",
    "ExtractionConfig",
    "PagepullConfig",
    # Events
    "BatchEvent",
    "BatchEventType",
    "EventEmitter",
    # Pages
    "UNTITLED",
    "BatchReport",
    "ExtractedArticle",
    "ExtractMode",
    "PageContent",
    "PageResult",
    "UsageInfo",
    "WaitStrategy",
]
