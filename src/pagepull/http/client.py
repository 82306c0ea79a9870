"""Async client for the hosted render/scrape API."""

from __future__ import annotations

import asyncio
import json
import logging
from types import TracebackType
from typing import Any

import aiohttp

from ..errors import FetchError
from ..models.config import ApiConfig
from ..models.page import PageContent, UsageInfo, WaitStrategy

logger = logging.getLogger(__name__)

DEFAULT_SCRAPE_ERROR = "Failed to scrape the page."
DEFAULT_USAGE_ERROR = "Failed to retrieve usage information."


def parse_page_payload(payload: dict[str, Any], requested_url: str) -> PageContent:
    """
    Turn a ``/scrape`` response body into a PageContent.

    Args:
        payload: Decoded JSON body
        requested_url: URL that was asked for (fallback for the resolved URL)

    Returns:
        PageContent

    Raises:
        FetchError: If the service reported a failure or sent no HTML
    """
    if not payload.get("success"):
        raise FetchError(str(payload.get("error") or DEFAULT_SCRAPE_ERROR), url=requested_url)

    data = payload.get("data")
    if not isinstance(data, dict) or not isinstance(data.get("html"), str):
        raise FetchError("Render service returned no HTML", url=requested_url)

    return PageContent(
        html=data["html"],
        resolved_url=str(data.get("url") or requested_url),
        title=data.get("title") or None,
    )


def parse_usage_payload(payload: dict[str, Any]) -> UsageInfo:
    """
    Turn a ``/usage`` response body into a UsageInfo.

    Raises:
        FetchError: If the service reported a failure or the body is malformed
    """
    if not payload.get("success"):
        raise FetchError(str(payload.get("error") or DEFAULT_USAGE_ERROR))

    data = payload.get("data")
    if not isinstance(data, dict):
        raise FetchError("Usage response has no data")

    try:
        return UsageInfo(
            plan=str(data["plan"]),
            credits_total=int(data["credits_total"]),
            credits_used=int(data["credits_used"]),
            credits_remaining=int(data["credits_remaining"]),
            reset_date=str(data["reset_date"]),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise FetchError(f"Malformed usage response: {e}") from e


class RenderApiClient:
    """
    Async client for the render service.

    Pages are rendered remotely in a headless browser; this client only
    moves JSON. Requests are made once: failures surface as FetchError and
    are never retried here.

    Features:
    - API key authentication via the X-API-Key header
    - Content size limits to prevent memory exhaustion
    - Timeout controls
    - Shared session, safe for concurrent requests

    Example:
        async with RenderApiClient("https://api.example.com/v1", api_key="...") as client:
            page = await client.render_page("https://example.com", WaitStrategy.LOAD)
            print(page.title)
    """

    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        timeout: float = 60.0,
        max_content_size: int = 50 * 1024 * 1024,
        user_agent: str | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            base_url: Service base URL (endpoints are appended to it)
            api_key: API key for the service
            timeout: Request timeout in seconds
            max_content_size: Maximum response size in bytes
            user_agent: Custom User-Agent string
        """
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._timeout = timeout
        self._max_content_size = max_content_size
        self._user_agent = user_agent or "pagepull/1.0"

        self._session: aiohttp.ClientSession | None = None

    @classmethod
    def from_config(cls, config: ApiConfig) -> RenderApiClient:
        """Build a client from the API section of the config."""
        return cls(
            base_url=config.base_url,
            api_key=config.api_key,
            timeout=config.timeout,
            max_content_size=config.max_content_size,
            user_agent=config.user_agent,
        )

    async def __aenter__(self) -> RenderApiClient:
        """Enter async context and create session."""
        connector = aiohttp.TCPConnector(
            limit=20,  # Total connection limit
            ttl_dns_cache=300,  # DNS cache TTL
        )
        self._session = aiohttp.ClientSession(
            connector=connector,
            headers={"User-Agent": self._user_agent, "Accept": "application/json"},
        )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit async context and close session."""
        if self._session:
            await self._session.close()
            self._session = None

    @staticmethod
    def _error_message(content: bytes) -> str | None:
        """Pull an error message out of an error response body, if there is one."""
        try:
            body = json.loads(content.decode("utf-8", errors="replace"))
        except ValueError:
            return None
        if isinstance(body, dict):
            message = body.get("error") or body.get("message")
            return str(message) if message else None
        return None

    async def _request(
        self,
        method: str,
        endpoint: str,
        *,
        payload: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """
        Perform one request against the service and decode its JSON body.

        Raises:
            FetchError: On network errors, timeouts, HTTP errors and bad bodies
            RuntimeError: If called outside the async context
        """
        if self._session is None:
            raise RuntimeError("Client not initialized. Use 'async with' context manager.")

        if not self._api_key:
            raise FetchError("API key is not configured (set PAGEPULL_API_KEY)")

        url = f"{self._base_url}/{endpoint}"

        try:
            async with self._session.request(
                method,
                url,
                json=payload,
                headers={"X-API-Key": self._api_key},
                timeout=aiohttp.ClientTimeout(total=self._timeout),
            ) as response:
                # Check Content-Length if available
                content_length = response.headers.get("Content-Length")
                if content_length and int(content_length) > self._max_content_size:
                    raise FetchError(f"Response too large: {content_length} bytes")

                # Read content with size limit
                content = b""
                async for chunk in response.content.iter_chunked(8192):
                    content += chunk
                    if len(content) > self._max_content_size:
                        raise FetchError(f"Response size limit exceeded: >{self._max_content_size} bytes")

                if response.status >= 400:
                    detail = self._error_message(content) or response.reason or "request failed"
                    raise FetchError(f"HTTP {response.status}: {detail}", status_code=response.status)

        except asyncio.TimeoutError as e:
            logger.error(f"Request to {url} timed out after {self._timeout:.0f}s")
            raise FetchError(f"Request timed out after {self._timeout:.0f}s") from e
        except aiohttp.ClientError as e:
            logger.error(f"Network error calling {url}: {e}")
            raise FetchError(f"Network error: {e}") from e

        try:
            body = json.loads(content.decode("utf-8", errors="replace"))
        except ValueError as e:
            raise FetchError("Render service returned invalid JSON") from e

        if not isinstance(body, dict):
            raise FetchError("Render service returned an unexpected response")
        return body

    async def render_page(
        self,
        url: str,
        wait_for: WaitStrategy = WaitStrategy.NETWORKIDLE,
    ) -> PageContent:
        """
        Render a page in the remote browser.

        Args:
            url: The URL to fetch
            wait_for: Load condition to wait for

        Returns:
            PageContent with HTML, final URL and title

        Raises:
            FetchError: When the page could not be delivered
        """
        strategy = WaitStrategy(wait_for)
        logger.debug(f"Rendering {url} (wait_for={strategy.value})")

        try:
            body = await self._request(
                "POST",
                "scrape",
                payload={"url": url, "wait_for": strategy.value, "javascript": True},
            )
        except FetchError as e:
            e.url = url
            raise

        page = parse_page_payload(body, url)
        logger.debug(f"Rendered {url}: {len(page.html)} chars of HTML")
        return page

    async def get_usage(self) -> UsageInfo:
        """
        Fetch the account usage summary.

        Raises:
            FetchError: When the summary could not be retrieved
        """
        body = await self._request("GET", "usage")
        return parse_usage_payload(body)
