"""dirmirror - concurrent, delta-aware directory mirroring."""

from .exceptions import (
    DirectoryCreationError,
    DirMirrorError,
    FatalCopyError,
    SymlinkReplicationError,
    SyncCancelledError,
    SyncConfigError,
)
from .sync import SyncEngine, SyncRequest, SyncStats, sync_directory

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "SyncEngine",
    "SyncRequest",
    "SyncStats",
    "sync_directory",
    "DirMirrorError",
    "DirectoryCreationError",
    "FatalCopyError",
    "SymlinkReplicationError",
    "SyncCancelledError",
    "SyncConfigError",
]
