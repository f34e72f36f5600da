"""Utility functions and constants for dirmirror."""

import errno
import os
from pathlib import Path

# =============================================================================
# Constants for sync operations
# =============================================================================

# Maximum number of task bodies running at the same time
DEFAULT_CONCURRENCY: int = 50

# Retry configuration for transient copy errors
DEFAULT_MAX_RETRIES: int = 3
DEFAULT_RETRY_DELAY: float = 0.1  # seconds, multiplied by the attempt number

# errno values reported for busy or momentarily locked files
TRANSIENT_ERRNOS: frozenset[int] = frozenset({errno.EBUSY, errno.EACCES})

# Windows: ERROR_SHARING_VIOLATION, ERROR_LOCK_VIOLATION
TRANSIENT_WINERRORS: frozenset[int] = frozenset({32, 33})


# =============================================================================
# Error classification
# =============================================================================


def is_transient_error(exc: BaseException) -> bool:
    """Check whether an OS error signals a busy or locked file.

    Args:
        exc: Exception raised by a filesystem call

    Returns:
        True if the operation may succeed when retried shortly

    Examples:
        >>> is_transient_error(OSError(errno.EBUSY, "busy"))
        True
        >>> is_transient_error(FileNotFoundError(errno.ENOENT, "missing"))
        False
    """
    if not isinstance(exc, OSError):
        return False
    if getattr(exc, "winerror", None) in TRANSIENT_WINERRORS:
        return True
    return exc.errno in TRANSIENT_ERRNOS


# =============================================================================
# Path utilities
# =============================================================================


def relative_posix(path: Path, base: Path) -> str:
    """Return ``path`` relative to ``base`` using forward slashes.

    Args:
        path: Path below ``base``
        base: Root path

    Returns:
        Relative path string (e.g., "sub/file.txt")
    """
    return Path(os.path.relpath(path, base)).as_posix()


# =============================================================================
# Size formatting utilities
# =============================================================================


def format_size(size_bytes: int) -> str:
    """Format file size in human-readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted size string (e.g., "1.5 MB", "256 B")
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    elif size_bytes < 1024 * 1024 * 1024:
        return f"{size_bytes / 1024 / 1024:.1f} MB"
    else:
        return f"{size_bytes / 1024 / 1024 / 1024:.1f} GB"
