"""Concurrent fetch-and-extract over a batch of URLs."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import Any

from ..concurrency.manager import ConcurrencyManager
from ..conversion.extractor import ContentExtractor
from ..errors import FetchError, ValidationError
from ..http.protocols import PageRenderer
from ..models.events import BatchEvent, BatchEventType, EventEmitter
from ..models.page import BatchReport, ExtractMode, PageContent, PageResult, WaitStrategy

logger = logging.getLogger(__name__)

MAX_URLS = 10


class BatchFetcher:
    """
    Fetches and extracts several pages at once.

    Every URL is rendered and extracted in its own task; the batch waits for
    all of them. A failure on one URL becomes a failed PageResult and never
    touches the others. Results keep the order of the requested URLs,
    whatever order the tasks finish in.

    Example:
        async with RenderApiClient.from_config(config.api) as client:
            fetcher = BatchFetcher(client)
            report = await fetcher.fetch_all(["https://a.example", "https://b.example"])
            print(f"{report.success_count}/{report.total} succeeded")
    """

    def __init__(
        self,
        renderer: PageRenderer,
        extractor: ContentExtractor | None = None,
        max_urls: int = MAX_URLS,
        on_event: EventEmitter | None = None,
        concurrency: ConcurrencyManager | None = None,
    ):
        """
        Initialize the batch fetcher.

        Args:
            renderer: Service that renders pages
            extractor: Content extractor (default settings if None)
            max_urls: Largest batch accepted by fetch_all
            on_event: Optional callback for progress events
            concurrency: Thread pool for extraction; extraction runs inline if None
        """
        self._renderer = renderer
        self._extractor = extractor or ContentExtractor()
        self._max_urls = max_urls
        self._on_event = on_event
        self._concurrency = concurrency

    def _emit(self, event_type: BatchEventType, **kwargs: Any) -> None:
        if self._on_event is None:
            return
        # Callback errors never abort the batch
        try:
            self._on_event(BatchEvent(type=event_type, **kwargs))
        except Exception as e:
            logger.error(f"Event callback failed on {event_type.value}: {e}", exc_info=True)

    async def _extract(self, page: PageContent, mode: ExtractMode) -> str:
        if self._concurrency is not None:
            return await self._concurrency.run_cpu_bound(self._extractor.extract, page, mode)
        return self._extractor.extract(page, mode)

    async def fetch_one(
        self,
        url: str,
        wait_for: WaitStrategy = WaitStrategy.NETWORKIDLE,
        mode: ExtractMode = ExtractMode.MARKDOWN,
    ) -> PageResult:
        """
        Render one URL and extract its content.

        Never raises for per-page problems; they are reported in the result.

        Args:
            url: URL to fetch
            wait_for: Load condition passed to the renderer
            mode: Markdown or plain text output

        Returns:
            PageResult for the URL
        """
        try:
            page = await self._renderer.render_page(url, wait_for)
            content = await self._extract(page, mode)
        except FetchError as e:
            logger.error(f"Failed to fetch {url}: {e.message}")
            return PageResult.failed(url, e.message)
        except Exception as e:
            logger.error(f"Unexpected error processing {url}: {e}", exc_info=True)
            return PageResult.failed(url, str(e) or type(e).__name__)

        return PageResult.ok(url, content, title=page.title, resolved_url=page.resolved_url)

    async def fetch_all(
        self,
        urls: Sequence[str],
        wait_for: WaitStrategy = WaitStrategy.NETWORKIDLE,
        mode: ExtractMode = ExtractMode.MARKDOWN,
    ) -> BatchReport:
        """
        Render and extract every URL concurrently.

        Args:
            urls: URLs to fetch (1 to ``max_urls``)
            wait_for: Load condition passed to the renderer for every URL
            mode: Markdown or plain text output

        Returns:
            BatchReport with one result per URL, in input order

        Raises:
            ValidationError: If ``urls`` is empty or too long (nothing is fetched)
        """
        urls = list(urls)
        if not urls:
            raise ValidationError("At least one URL is required")
        if len(urls) > self._max_urls:
            raise ValidationError(f"Too many URLs: {len(urls)} (maximum is {self._max_urls})")

        total = len(urls)
        logger.info(f"Fetching {total} URL(s)")
        self._emit(BatchEventType.BATCH_STARTED, total=total, message=f"Fetching {total} URL(s)")

        async def run(index: int, url: str) -> PageResult:
            self._emit(BatchEventType.PAGE_STARTED, url=url, index=index, total=total)
            result = await self.fetch_one(url, wait_for, mode)
            if result.success:
                self._emit(BatchEventType.PAGE_COMPLETED, url=url, index=index, total=total, message=result.title)
            else:
                self._emit(BatchEventType.PAGE_FAILED, url=url, index=index, total=total, error=result.error)
            return result

        results = await asyncio.gather(*(run(i, url) for i, url in enumerate(urls)))
        report = BatchReport(results=list(results))

        logger.info(f"Batch complete: {report.success_count}/{report.total} successful")
        self._emit(
            BatchEventType.BATCH_COMPLETED,
            total=total,
            message=f"{report.success_count}/{report.total} successful",
        )
        return report
