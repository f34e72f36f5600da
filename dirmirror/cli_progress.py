"""CLI progress display for sync runs.

This module provides a Rich-based progress display that works with
the SyncProgressTracker from the sync engine.
"""

from typing import Optional

from rich.progress import (
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)

from .sync import SyncEngine, SyncRequest, SyncStats
from .sync.progress import SyncProgressEvent, SyncProgressInfo, SyncProgressTracker
from .utils import format_size


class SyncProgressDisplay:
    """Rich-based progress display for sync runs.

    Shows a spinner with running counts of copied and skipped files.
    The total is unknown up front because the tree is walked while it
    is being synced.
    """

    def __init__(self) -> None:
        """Initialize the progress display."""
        self._progress: Optional[Progress] = None
        self._task: Optional[TaskID] = None
        self._copied = 0
        self._skipped = 0
        self._bytes = 0

    def create_tracker(self) -> SyncProgressTracker:
        """Create a SyncProgressTracker that updates this display."""
        return SyncProgressTracker(callback=self._handle_event)

    def _format_counts(self) -> str:
        return (
            f"{self._copied} copied ({format_size(self._bytes)}), "
            f"{self._skipped} unchanged"
        )

    def _handle_event(self, info: SyncProgressInfo) -> None:
        """Handle a progress event from the tracker.

        Args:
            info: Progress information
        """
        if info.event == SyncProgressEvent.FILE_COPIED:
            self._copied += 1
            self._bytes += info.bytes
        elif info.event == SyncProgressEvent.FILE_SKIPPED:
            self._skipped += 1
        elif info.event != SyncProgressEvent.DIRECTORY_ENSURED:
            return

        if self._progress is not None and self._task is not None:
            self._progress.update(
                self._task,
                description=f"Syncing: {info.relative_path or '.'}",
                counts=self._format_counts(),
            )

    def __enter__(self) -> "SyncProgressDisplay":
        """Enter context manager - start progress display."""
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            TextColumn("[cyan]{task.fields[counts]}"),
            TimeElapsedColumn(),
            refresh_per_second=4,
            transient=True,
        )
        self._progress.__enter__()
        self._task = self._progress.add_task(
            "Scanning...", total=None, counts=self._format_counts()
        )
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit context manager - stop progress display."""
        if self._progress is not None:
            self._progress.__exit__(exc_type, exc_val, exc_tb)
            self._progress = None
            self._task = None


def run_sync_with_progress(request: SyncRequest, show_progress: bool = True) -> SyncStats:
    """Run a sync with a Rich progress display.

    Args:
        request: Sync request to run
        show_progress: If False, run without a display

    Returns:
        SyncStats of the run
    """
    if not show_progress:
        return SyncEngine().sync(request)

    with SyncProgressDisplay() as display:
        engine = SyncEngine(tracker=display.create_tracker())
        return engine.sync(request)
