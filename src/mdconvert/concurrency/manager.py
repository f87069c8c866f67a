"""Thread pool manager for blocking calls made from async code."""

import asyncio
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Optional, TypeVar

T = TypeVar("T")


class ConcurrencyManager:
    """
    Manages a ThreadPoolExecutor for blocking work in async contexts.

    The native renderer is a plain C call that holds the calling thread for
    the whole conversion; running it here keeps the event loop free for other
    conversions in flight.

    Example:
        async with ConcurrencyManager(max_workers=4) as manager:
            markdown = await manager.run_blocking(convert, html_bytes, timeout=30)
    """

    def __init__(self, max_workers: int = 4, thread_name_prefix: str = "mdconvert-native-") -> None:
        """
        Initialize the concurrency manager.

        Args:
            max_workers: Number of thread pool workers. Defaults to 4.
            thread_name_prefix: Prefix for worker thread names
        """
        self.max_workers = max_workers
        self.thread_name_prefix = thread_name_prefix
        self._executor: Optional[ThreadPoolExecutor] = None

    @property
    def executor(self) -> ThreadPoolExecutor:
        """Get or create the thread pool executor."""
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self.max_workers,
                thread_name_prefix=self.thread_name_prefix,
            )
        return self._executor

    async def run_blocking(
        self,
        func: Callable[..., T],
        *args: Any,
        timeout: Optional[float] = None,
    ) -> T:
        """
        Run a blocking function in the thread pool.

        Args:
            func: The function to execute
            *args: Positional arguments for the function
            timeout: Seconds to wait for the result (None = wait forever)

        Returns:
            The result of the function call

        Raises:
            asyncio.TimeoutError: If the call did not finish within timeout.
                The worker thread keeps running; its result is discarded.
        """
        loop = asyncio.get_running_loop()
        future = loop.run_in_executor(self.executor, func, *args)
        if timeout is None:
            return await future
        return await asyncio.wait_for(future, timeout=timeout)

    def shutdown(self, wait: bool = True) -> None:
        """
        Shutdown the thread pool executor.

        Args:
            wait: If True, wait for pending tasks to complete.
                  If False, cancel pending tasks immediately.
        """
        if self._executor is not None:
            self._executor.shutdown(wait=wait)
            self._executor = None

    async def __aenter__(self) -> "ConcurrencyManager":
        """Enter async context."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Exit async context and shutdown executor."""
        self.shutdown(wait=True)
