"""Progress events and statistics for sync runs.

Events are emitted from worker threads. ``SyncProgressTracker``
serializes callback invocations so callbacks do not need their own
locking.
"""

import threading
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Callable, Optional


class SyncProgressEvent(str, Enum):
    """Kinds of progress events."""

    DIRECTORY_ENSURED = "directory_ensured"
    FILE_COPIED = "file_copied"
    FILE_SKIPPED = "file_skipped"
    SYMLINK_RELINKED = "symlink_relinked"
    SYMLINK_FAILED = "symlink_failed"
    ENTRY_EXCLUDED = "entry_excluded"
    SPECIAL_IGNORED = "special_ignored"


@dataclass(frozen=True)
class SyncProgressInfo:
    """Payload of one progress event."""

    event: SyncProgressEvent
    relative_path: str
    bytes: int = 0


class SyncProgressTracker:
    """Forwards progress events to a callback."""

    def __init__(self, callback: Optional[Callable[[SyncProgressInfo], None]] = None):
        self.callback = callback
        self._lock = threading.Lock()

    def emit(
        self, event: SyncProgressEvent, relative_path: str, size: int = 0
    ) -> None:
        """Report an event.

        Args:
            event: Event kind
            relative_path: Path of the entry relative to the source root
            size: Bytes involved, for copied files
        """
        if self.callback is None:
            return
        with self._lock:
            self.callback(SyncProgressInfo(event, relative_path, size))


@dataclass
class SyncStats:
    """Counters collected during a sync run."""

    directories: int = 0
    copied: int = 0
    skipped: int = 0
    symlinks: int = 0
    symlink_failures: int = 0
    excluded: int = 0
    special: int = 0
    bytes_copied: int = 0
    _lock: threading.Lock = field(
        default_factory=threading.Lock, repr=False, compare=False
    )

    def add(self, name: str, amount: int = 1) -> None:
        """Increment a counter from any thread."""
        with self._lock:
            setattr(self, name, getattr(self, name) + amount)

    def to_dict(self) -> dict:
        """Return the counters as a plain dictionary."""
        with self._lock:
            return {
                f.name: getattr(self, f.name)
                for f in fields(self)
                if not f.name.startswith("_")
            }
