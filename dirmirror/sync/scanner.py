"""Directory scanning for sync runs.

The scanner handles one directory at a time: it makes sure the
destination directory exists, lists the source directory and turns every
entry that survives the exclusion rules into a ``SyncTask``. Recursion is
driven by the engine, which feeds directory tasks back into the scanner.
"""

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from ..exceptions import DirectoryCreationError
from ..utils import relative_posix
from .request import SyncRequest

logger = logging.getLogger(__name__)


class EntryType(str, Enum):
    """Kinds of directory entries."""

    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"
    OTHER = "other"
    """Sockets, FIFOs and device nodes"""


@dataclass(frozen=True)
class DirEntry:
    """A single entry found while listing a source directory."""

    name: str
    """Bare entry name"""

    entry_type: EntryType
    """Entry kind, symlinks are never followed"""

    relative_path: str
    """Path relative to the source root (forward slashes)"""


@dataclass(frozen=True)
class SyncTask:
    """One unit of scheduled work."""

    source: Path
    """Absolute source path of the entry"""

    destination: Path
    """Matching destination path"""

    root: Path
    """Source root of the run"""

    entry: DirEntry
    """Entry being synced"""

    @classmethod
    def for_root(cls, request: SyncRequest) -> "SyncTask":
        """Create the task that walks the source root itself."""
        return cls(
            source=request.source,
            destination=request.destination,
            root=request.source,
            entry=DirEntry(name="", entry_type=EntryType.DIRECTORY, relative_path=""),
        )


@dataclass
class ScanResult:
    """Outcome of scanning one directory."""

    tasks: list[SyncTask] = field(default_factory=list)
    """Tasks for the entries to sync"""

    excluded: list[str] = field(default_factory=list)
    """Relative paths of entries skipped by exclusion rules"""


def classify_entry(entry: os.DirEntry) -> EntryType:
    """Classify an ``os.scandir`` entry without following symlinks.

    Args:
        entry: Entry returned by ``os.scandir``

    Returns:
        EntryType of the entry
    """
    if entry.is_symlink():
        return EntryType.SYMLINK
    if entry.is_dir(follow_symlinks=False):
        return EntryType.DIRECTORY
    if entry.is_file(follow_symlinks=False):
        return EntryType.FILE
    return EntryType.OTHER


def ensure_directory(path: Path) -> None:
    """Create ``path`` and any missing parents.

    Args:
        path: Directory to create

    Raises:
        DirectoryCreationError: If the directory cannot be created, for
            example because a file occupies the path
    """
    try:
        os.makedirs(path, exist_ok=True)
    except OSError as e:
        raise DirectoryCreationError(path, str(e)) from e


class DirectoryScanner:
    """Lists source directories and builds sync tasks.

    Examples:
        >>> request = SyncRequest(source="/src", destination="/dst")
        >>> scanner = DirectoryScanner(request)
        >>> result = scanner.scan(SyncTask.for_root(request))
        >>> for task in result.tasks:
        ...     print(task.entry.relative_path, task.entry.entry_type.value)
    """

    def __init__(self, request: SyncRequest):
        """Initialize directory scanner.

        Args:
            request: Sync request holding roots and exclusion substrings
        """
        self.request = request

    def should_exclude(self, name: str, relative_path: str) -> bool:
        """Check if an entry should be excluded.

        Args:
            name: Bare entry name
            relative_path: Path relative to the source root

        Returns:
            True if the entry (and its subtree) must be skipped
        """
        if self.request.is_excluded(name, relative_path):
            logger.debug(f"Excluding: {relative_path}")
            return True
        return False

    def scan(self, task: SyncTask) -> ScanResult:
        """Ensure the destination of a directory task and list its children.

        The destination directory is created before any child task is
        returned, so children can always write into it.

        Args:
            task: Directory task to scan

        Returns:
            ScanResult with one task per non-excluded child

        Raises:
            DirectoryCreationError: If the destination cannot be created
            OSError: If the source directory cannot be listed
        """
        ensure_directory(task.destination)

        result = ScanResult()
        with os.scandir(task.source) as it:
            for item in it:
                source = task.source / item.name
                relative_path = relative_posix(source, task.root)
                if self.should_exclude(item.name, relative_path):
                    result.excluded.append(relative_path)
                    continue

                entry = DirEntry(
                    name=item.name,
                    entry_type=classify_entry(item),
                    relative_path=relative_path,
                )
                result.tasks.append(
                    SyncTask(
                        source=source,
                        destination=task.destination / item.name,
                        root=task.root,
                        entry=entry,
                    )
                )

        return result
