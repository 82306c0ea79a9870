"""URL validation for pagepull."""

from .url_validator import UrlValidationResult, UrlValidator

__all__ = ["UrlValidator", "UrlValidationResult"]
