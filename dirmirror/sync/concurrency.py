"""Concurrency limiting for sync runs."""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Optional

from ..utils import DEFAULT_CONCURRENCY

logger = logging.getLogger(__name__)


class ConcurrencyLimiter:
    """Runs task bodies on a fixed-size worker pool.

    At most ``limit`` submitted callables execute at the same time, no
    matter how many are queued. Submitting never blocks the caller.
    Queued callables start in FIFO order.

    Examples:
        >>> with ConcurrencyLimiter(4) as limiter:
        ...     future = limiter.submit(pow, 2, 10)
        ...     future.result()
        1024
    """

    def __init__(self, limit: int = DEFAULT_CONCURRENCY):
        """Initialize the limiter.

        Args:
            limit: Maximum number of concurrently running callables

        Raises:
            ValueError: If limit is not positive
        """
        if limit < 1:
            raise ValueError(f"limit must be a positive integer, got {limit!r}")
        self.limit = limit
        self._executor: Optional[ThreadPoolExecutor] = None
        self._lock = threading.Lock()
        self._active = 0
        self._peak = 0

    @property
    def active(self) -> int:
        """Number of callables currently running."""
        with self._lock:
            return self._active

    @property
    def peak(self) -> int:
        """Highest number of callables that ran at the same time."""
        with self._lock:
            return self._peak

    def __enter__(self) -> "ConcurrencyLimiter":
        logger.debug("Starting worker pool with %d workers", self.limit)
        self._executor = ThreadPoolExecutor(
            max_workers=self.limit, thread_name_prefix="dirmirror"
        )
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.shutdown(cancel_pending=exc_info[0] is not None)

    def shutdown(self, cancel_pending: bool = False) -> None:
        """Stop the worker pool and wait for running callables.

        Args:
            cancel_pending: Drop queued callables that have not started
        """
        if self._executor is not None:
            self._executor.shutdown(wait=True, cancel_futures=cancel_pending)
            self._executor = None

    def submit(self, fn: Callable[..., Any], *args: Any) -> Future:
        """Schedule ``fn(*args)`` to run when a slot is free.

        Args:
            fn: Callable to run
            *args: Positional arguments for ``fn``

        Returns:
            Future for the result of ``fn``

        Raises:
            RuntimeError: If the limiter is not running
        """
        if self._executor is None:
            raise RuntimeError("ConcurrencyLimiter is not running")
        return self._executor.submit(self._run, fn, *args)

    def _run(self, fn: Callable[..., Any], *args: Any) -> Any:
        with self._lock:
            self._active += 1
            if self._active > self._peak:
                self._peak = self._active
        try:
            return fn(*args)
        finally:
            with self._lock:
                self._active -= 1
