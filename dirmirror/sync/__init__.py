"""Sync engine for dirmirror - concurrent delta copy of directory trees."""

from .comparator import (
    FileSignature,
    SyncAction,
    SyncDecision,
    compare_signatures,
    needs_copy,
)
from .concurrency import ConcurrencyLimiter
from .config import load_sync_requests_from_json
from .engine import SyncEngine, sync_directory
from .operations import (
    SymlinkOutcome,
    SyncOperations,
    copy_with_retry,
    replicate_symlink,
)
from .progress import (
    SyncProgressEvent,
    SyncProgressInfo,
    SyncProgressTracker,
    SyncStats,
)
from .request import SyncRequest
from .scanner import DirectoryScanner, DirEntry, EntryType, ScanResult, SyncTask

__all__ = [
    "SyncEngine",
    "sync_directory",
    "SyncRequest",
    "load_sync_requests_from_json",
    "ConcurrencyLimiter",
    "DirectoryScanner",
    "DirEntry",
    "EntryType",
    "ScanResult",
    "SyncTask",
    "FileSignature",
    "SyncAction",
    "SyncDecision",
    "compare_signatures",
    "needs_copy",
    "SyncOperations",
    "SymlinkOutcome",
    "copy_with_retry",
    "replicate_symlink",
    "SyncProgressEvent",
    "SyncProgressInfo",
    "SyncProgressTracker",
    "SyncStats",
]
