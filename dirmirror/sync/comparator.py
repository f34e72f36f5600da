"""Change detection for regular files."""

import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class SyncAction(str, Enum):
    """Actions that can be taken for a regular file."""

    COPY = "copy"
    """Copy source content over the destination"""

    SKIP = "skip"
    """Destination is up to date"""


@dataclass(frozen=True)
class FileSignature:
    """Metadata used to decide whether a file changed."""

    mtime_ns: int
    """Last modification time in nanoseconds"""

    size: int
    """File size in bytes"""

    @classmethod
    def from_stat(cls, stat: os.stat_result) -> "FileSignature":
        """Build a signature from an ``os.stat`` result."""
        return cls(mtime_ns=stat.st_mtime_ns, size=stat.st_size)

    @classmethod
    def of(cls, path: Path) -> "FileSignature":
        """Read the signature of ``path``.

        Raises:
            OSError: If the file cannot be stat'ed
        """
        return cls.from_stat(os.stat(path))

    @classmethod
    def of_optional(cls, path: Path) -> Optional["FileSignature"]:
        """Read the signature of ``path``, or None if it does not exist."""
        try:
            return cls.of(path)
        except (FileNotFoundError, NotADirectoryError):
            return None


@dataclass
class SyncDecision:
    """Represents a decision about how to sync a file."""

    action: SyncAction
    """Action to take"""

    reason: str
    """Human-readable reason for this decision"""

    source: FileSignature
    """Signature of the source file"""

    destination: Optional[FileSignature]
    """Signature of the destination file (if it exists)"""


def compare_signatures(
    source: FileSignature, destination: Optional[FileSignature]
) -> SyncDecision:
    """Decide whether a destination file is up to date.

    The destination is current when it exists, has the same size and is
    not older than the source. Content is never compared.

    Args:
        source: Signature of the source file
        destination: Signature of the destination file, None if missing

    Returns:
        SyncDecision with COPY or SKIP
    """
    if destination is None:
        return SyncDecision(SyncAction.COPY, "New file", source, destination)

    if destination.size != source.size:
        reason = f"Size changed ({destination.size} -> {source.size})"
        return SyncDecision(SyncAction.COPY, reason, source, destination)

    if destination.mtime_ns < source.mtime_ns:
        return SyncDecision(SyncAction.COPY, "Source is newer", source, destination)

    return SyncDecision(SyncAction.SKIP, "Unchanged", source, destination)


def needs_copy(source_path: Path, dest_path: Path) -> SyncDecision:
    """Compare a source file with its destination counterpart.

    Args:
        source_path: Source file
        dest_path: Destination file, may be missing

    Returns:
        SyncDecision for this file

    Raises:
        OSError: If the source file cannot be stat'ed
    """
    source = FileSignature.of(source_path)
    destination = FileSignature.of_optional(dest_path)
    decision = compare_signatures(source, destination)
    logger.debug("%s: %s (%s)", dest_path, decision.action.value, decision.reason)
    return decision
