"""Exception types raised by pagepull."""


class PagepullError(Exception):
    """Base class for all pagepull errors."""


class FetchError(PagepullError):
    """
    The remote render service could not deliver a page.

    Covers network failures, HTTP errors, blocked pages, render timeouts
    and unusable responses. The message is meant to be shown to a caller
    as-is.
    """

    def __init__(self, message: str, url: str | None = None, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.url = url
        self.status_code = status_code


class ValidationError(PagepullError):
    """Input was rejected before any fetch was attempted."""


class ConfigError(PagepullError):
    """Configuration file could not be loaded or validated."""
