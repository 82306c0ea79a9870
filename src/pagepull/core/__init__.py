"""Batch orchestration for pagepull."""

from .batch import MAX_URLS, BatchFetcher

__all__ = ["BatchFetcher", "MAX_URLS"]
