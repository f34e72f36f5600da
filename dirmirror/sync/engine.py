"""Core sync engine for mirroring a directory tree."""

import logging
import threading
import time
from concurrent.futures import FIRST_COMPLETED, Future, wait
from pathlib import Path
from typing import Callable, Iterable, Optional, Union

from ..exceptions import SyncCancelledError
from ..utils import (
    DEFAULT_CONCURRENCY,
    DEFAULT_MAX_RETRIES,
    DEFAULT_RETRY_DELAY,
    format_size,
    relative_posix,
)
from .comparator import SyncAction, needs_copy
from .concurrency import ConcurrencyLimiter
from .operations import SyncOperations
from .progress import SyncProgressEvent, SyncProgressTracker, SyncStats
from .request import SyncRequest
from .scanner import DirectoryScanner, EntryType, SyncTask

logger = logging.getLogger(__name__)


class SyncEngine:
    """Mirrors a source tree into a destination tree.

    Every entry becomes a task on a shared worker pool. Directory tasks
    create the destination directory and hand their children back to the
    coordinating thread, which schedules them; no task ever waits for
    another task while holding a worker. The first fatal error stops the
    run and is re-raised once running tasks have finished.
    """

    def __init__(
        self,
        tracker: Optional[SyncProgressTracker] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initialize sync engine.

        Args:
            tracker: Receives progress events from worker threads
            sleep: Sleep function used for the copy retry backoff
        """
        self.tracker = tracker or SyncProgressTracker()
        self.sleep = sleep
        self.peak_concurrency = 0
        self._cancelled = threading.Event()

    def cancel(self) -> None:
        """Ask the running sync to stop at the next task boundary."""
        logger.debug("Cancellation requested")
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        """True while a cancel() request is pending.

        The flag is cleared when the run it applied to has finished.
        """
        return self._cancelled.is_set()

    def sync(self, request: SyncRequest) -> SyncStats:
        """Sync ``request.source`` into ``request.destination``.

        Args:
            request: Sync request

        Returns:
            SyncStats with counters of the run

        Raises:
            ValueError: If the source is not a directory or the destination
                lies inside the source without being excluded
            FatalCopyError: If a file copy failed
            DirectoryCreationError: If a destination directory could not
                be created
            SyncCancelledError: If cancel() was called before or during the run

        Examples:
            >>> engine = SyncEngine()
            >>> stats = engine.sync(SyncRequest("/src", "/dst", exclude=("Cache",)))
            >>> print(f"Copied {stats.copied} file(s)")
        """
        try:
            return self._run(request)
        finally:
            # A cancel() issued before the run started applies to this run
            self._cancelled.clear()

    def _run(self, request: SyncRequest) -> SyncStats:
        self.peak_concurrency = 0
        self._validate(request)

        logger.info(
            "Syncing %s -> %s (concurrency=%d)",
            request.source,
            request.destination,
            request.concurrency,
        )
        start_time = time.time()

        stats = SyncStats()
        scanner = DirectoryScanner(request)
        operations = SyncOperations(
            max_retries=request.max_retries,
            retry_delay=request.retry_delay,
            sleep=self.sleep,
        )

        limiter = ConcurrencyLimiter(request.concurrency)
        try:
            with limiter:

                def schedule(task: SyncTask) -> Future:
                    return limiter.submit(
                        self._process_task, task, scanner, operations, stats
                    )

                pending: set[Future] = {schedule(SyncTask.for_root(request))}
                while pending:
                    done, pending = wait(pending, return_when=FIRST_COMPLETED)
                    for future in done:
                        # Raises the task's error; leaving the limiter drops
                        # queued tasks and waits for running ones.
                        for child in future.result():
                            pending.add(schedule(child))
        finally:
            self.peak_concurrency = limiter.peak

        elapsed = time.time() - start_time
        logger.info(
            "Sync finished in %.2fs: %d copied (%s), %d skipped, %d symlink(s)",
            elapsed,
            stats.copied,
            format_size(stats.bytes_copied),
            stats.skipped,
            stats.symlinks,
        )
        return stats

    def _validate(self, request: SyncRequest) -> None:
        if not request.source.exists():
            raise ValueError(f"Source directory does not exist: {request.source}")
        if not request.source.is_dir():
            raise ValueError(f"Source path is not a directory: {request.source}")

        source = request.source.resolve()
        destination = request.destination.resolve()
        if destination == source:
            raise ValueError("Source and destination are the same directory")
        if source in destination.parents:
            relative_path = relative_posix(destination, source)
            if not request.is_excluded(destination.name, relative_path):
                raise ValueError(
                    f"Destination {request.destination} is inside the source; "
                    f"exclude '{relative_path}' to sync into it"
                )

    def _process_task(
        self,
        task: SyncTask,
        scanner: DirectoryScanner,
        operations: SyncOperations,
        stats: SyncStats,
    ) -> list[SyncTask]:
        """Handle one entry and return the tasks it spawned."""
        if self._cancelled.is_set():
            raise SyncCancelledError("Sync cancelled")

        entry = task.entry
        if entry.entry_type == EntryType.DIRECTORY:
            result = scanner.scan(task)
            stats.add("directories")
            self.tracker.emit(SyncProgressEvent.DIRECTORY_ENSURED, entry.relative_path)
            for relative_path in result.excluded:
                stats.add("excluded")
                self.tracker.emit(SyncProgressEvent.ENTRY_EXCLUDED, relative_path)
            return result.tasks

        if entry.entry_type == EntryType.SYMLINK:
            outcome = operations.relink(task.source, task.destination)
            if outcome.ok:
                stats.add("symlinks")
                self.tracker.emit(
                    SyncProgressEvent.SYMLINK_RELINKED, entry.relative_path
                )
            else:
                stats.add("symlink_failures")
                self.tracker.emit(SyncProgressEvent.SYMLINK_FAILED, entry.relative_path)
            return []

        if entry.entry_type == EntryType.FILE:
            decision = needs_copy(task.source, task.destination)
            if decision.action == SyncAction.SKIP:
                stats.add("skipped")
                self.tracker.emit(SyncProgressEvent.FILE_SKIPPED, entry.relative_path)
                return []

            logger.debug(f"Copying {entry.relative_path} ({decision.reason})")
            operations.copy_file(task.source, task.destination)
            stats.add("copied")
            stats.add("bytes_copied", decision.source.size)
            self.tracker.emit(
                SyncProgressEvent.FILE_COPIED,
                entry.relative_path,
                decision.source.size,
            )
            return []

        logger.warning(f"Ignoring special file: {entry.relative_path}")
        stats.add("special")
        self.tracker.emit(SyncProgressEvent.SPECIAL_IGNORED, entry.relative_path)
        return []


def sync_directory(
    source: Union[str, Path],
    destination: Union[str, Path],
    exclude: Iterable[str] = (),
    concurrency: int = DEFAULT_CONCURRENCY,
    max_retries: int = DEFAULT_MAX_RETRIES,
    retry_delay: float = DEFAULT_RETRY_DELAY,
    tracker: Optional[SyncProgressTracker] = None,
) -> SyncStats:
    """Mirror ``source`` into ``destination``, copying only changed files.

    Args:
        source: Source directory
        destination: Destination directory, created if missing
        exclude: Substrings; entries whose name or source-relative path
            contains one of them are skipped with their subtree
        concurrency: Maximum number of file operations in flight
        max_retries: Copy attempts per file when it is busy or locked
        retry_delay: Base backoff between copy attempts in seconds
        tracker: Optional progress tracker

    Returns:
        SyncStats with counters of the run

    Examples:
        >>> stats = sync_directory("profile", "/tmp/profile", exclude=["Cache"])
        >>> stats.copied
        42
    """
    request = SyncRequest(
        source=Path(source),
        destination=Path(destination),
        exclude=tuple(exclude),
        concurrency=concurrency,
        max_retries=max_retries,
        retry_delay=retry_delay,
    )
    return SyncEngine(tracker=tracker).sync(request)
