"""Exceptions raised by dirmirror."""

from pathlib import Path
from typing import Optional


class DirMirrorError(Exception):
    """Base exception for all dirmirror errors."""


class FatalCopyError(DirMirrorError):
    """A file copy failed and will not be retried.

    Raised for non-transient errors and when transient errors persist
    after every attempt. The underlying ``OSError`` is chained as
    ``__cause__``.
    """

    def __init__(self, source: Path, destination: Path, attempts: int, reason: str):
        self.source = source
        self.destination = destination
        self.attempts = attempts
        self.reason = reason
        super().__init__(
            f"Failed to copy {source} -> {destination} "
            f"after {attempts} attempt(s): {reason}"
        )


class DirectoryCreationError(DirMirrorError):
    """A destination directory could not be created."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot create directory {path}: {reason}")


class SymlinkReplicationError(DirMirrorError):
    """A destination symlink could not be replaced.

    Never raised by the engine; carried inside a ``SymlinkOutcome``.
    """

    def __init__(self, path: Path, target: str, stage: str, reason: str):
        self.path = path
        self.target = target
        self.stage = stage
        self.reason = reason
        super().__init__(f"Cannot {stage} symlink {path} -> {target}: {reason}")


class SyncCancelledError(DirMirrorError):
    """The sync run was cancelled before it completed."""


class SyncConfigError(DirMirrorError):
    """Invalid sync configuration file."""

    def __init__(self, message: str, path: Optional[Path] = None):
        self.path = path
        if path is not None:
            message = f"{path}: {message}"
        super().__init__(message)
