"""Validation of the URLs handed to the render service."""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass
from urllib.parse import urlsplit


@dataclass
class UrlValidationResult:
    """Result of URL validation."""

    is_valid: bool
    rejection_reason: str | None = None

    @staticmethod
    def valid() -> UrlValidationResult:
        return UrlValidationResult(is_valid=True)

    @staticmethod
    def invalid(reason: str) -> UrlValidationResult:
        return UrlValidationResult(is_valid=False, rejection_reason=reason)


class UrlValidator:
    """
    Checks that a URL is something the render service can be asked to fetch.

    Only absolute http(s) URLs with a host are accepted. Pages are fetched by
    the remote service, not by this process, so loopback and private hosts are
    allowed unless ``block_private_hosts`` is set.

    Example:
        validator = UrlValidator()
        result = validator.validate("ftp://example.com/file")
        result.rejection_reason  # "Scheme 'ftp' not allowed (use http or https)"
    """

    ALLOWED_SCHEMES = frozenset({"http", "https"})
    LOCAL_SUFFIXES = (".internal", ".local", ".localhost", ".localdomain")

    def __init__(self, block_private_hosts: bool = False):
        """
        Args:
            block_private_hosts: Reject localhost, internal suffixes and
                private/loopback/link-local IP literals.
        """
        self.block_private_hosts = block_private_hosts

    def validate(self, url: str) -> UrlValidationResult:
        """
        Validate a URL.

        Args:
            url: The URL to validate

        Returns:
            UrlValidationResult with is_valid and optional rejection_reason
        """
        try:
            parsed = urlsplit(url.strip())
            hostname = parsed.hostname
        except ValueError:
            return UrlValidationResult.invalid(f"Invalid URL: {url!r}")

        if parsed.scheme.lower() not in self.ALLOWED_SCHEMES:
            scheme = parsed.scheme or "(none)"
            return UrlValidationResult.invalid(f"Scheme '{scheme}' not allowed (use http or https)")

        if not hostname:
            return UrlValidationResult.invalid(f"URL has no host: {url!r}")

        if self.block_private_hosts:
            reason = self._private_host_reason(hostname)
            if reason:
                return UrlValidationResult.invalid(reason)

        return UrlValidationResult.valid()

    def _private_host_reason(self, hostname: str) -> str | None:
        if hostname == "localhost" or hostname.endswith(self.LOCAL_SUFFIXES):
            return f"Local host '{hostname}' not allowed"

        try:
            ip = ipaddress.ip_address(hostname)
        except ValueError:
            # A domain name
            return None

        if ip.is_loopback or ip.is_private or ip.is_link_local or ip.is_reserved:
            return f"Non-public IP address '{hostname}' not allowed"
        return None

    def is_valid(self, url: str) -> bool:
        return self.validate(url).is_valid
