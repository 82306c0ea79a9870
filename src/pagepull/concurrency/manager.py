"""Thread pool for running page extraction off the event loop."""

import asyncio
import functools
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Optional, TypeVar

T = TypeVar("T")


class ConcurrencyManager:
    """
    Owns a ThreadPoolExecutor used for CPU-bound extraction work.

    Parsing and converting a large page can take long enough to stall other
    in-flight renders, so the batch fetcher hands extraction to this pool when
    one is configured. The executor is created lazily on first use.

    Example:
        with ConcurrencyManager(max_workers=4) as manager:
            fetcher = BatchFetcher(client, concurrency=manager)
            report = await fetcher.fetch_all(urls)
    """

    def __init__(self, max_workers: int = 4) -> None:
        """
        Args:
            max_workers: Number of worker threads.
        """
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.max_workers = max_workers
        self._executor: Optional[ThreadPoolExecutor] = None

    @property
    def executor(self) -> ThreadPoolExecutor:
        """Get or create the thread pool executor."""
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self.max_workers,
                thread_name_prefix="pagepull-cpu-",
            )
        return self._executor

    async def run_cpu_bound(self, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """
        Run ``func(*args, **kwargs)`` in the pool and await its result.

        Exceptions raised by ``func`` propagate to the awaiting coroutine.
        """
        loop = asyncio.get_running_loop()
        if kwargs:
            func = functools.partial(func, **kwargs)
        return await loop.run_in_executor(self.executor, func, *args)

    def shutdown(self, wait: bool = True) -> None:
        """Shut the pool down; a later call to ``run_cpu_bound`` starts a new one."""
        if self._executor is not None:
            self._executor.shutdown(wait=wait)
            self._executor = None

    async def __aenter__(self) -> "ConcurrencyManager":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.shutdown(wait=True)

    def __enter__(self) -> "ConcurrencyManager":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.shutdown(wait=True)
