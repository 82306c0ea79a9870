"""Concurrency management for pagepull."""

from .manager import ConcurrencyManager

__all__ = ["ConcurrencyManager"]
