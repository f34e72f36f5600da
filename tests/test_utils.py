"""Unit tests for utility functions."""

import errno
from pathlib import Path

from dirmirror.utils import format_size, is_transient_error, relative_posix


class TestIsTransientError:
    """Tests for is_transient_error function."""

    def test_busy_is_transient(self):
        """EBUSY means another process holds the file."""
        assert is_transient_error(OSError(errno.EBUSY, "Device or resource busy"))

    def test_access_denied_is_transient(self):
        """EACCES is retried, Windows reports locked files this way."""
        assert is_transient_error(PermissionError(errno.EACCES, "Permission denied"))

    def test_windows_sharing_violation_is_transient(self):
        """winerror 32 and 33 are sharing and lock violations."""
        for code in (32, 33):
            error = OSError(errno.EINVAL, "locked")
            error.winerror = code
            assert is_transient_error(error)

    def test_missing_file_is_not_transient(self):
        """A missing source will not appear by retrying."""
        assert not is_transient_error(FileNotFoundError(errno.ENOENT, "missing"))

    def test_disk_full_is_not_transient(self):
        """ENOSPC is a persistent failure."""
        assert not is_transient_error(OSError(errno.ENOSPC, "No space left"))

    def test_non_os_error(self):
        """Only OSError subclasses can be transient."""
        assert not is_transient_error(ValueError("nope"))


class TestRelativePosix:
    """Tests for relative_posix function."""

    def test_nested_path(self):
        """Nested paths use forward slashes."""
        base = Path("root")
        assert relative_posix(base / "sub" / "file.txt", base) == "sub/file.txt"

    def test_direct_child(self):
        """Direct children are just the name."""
        base = Path("root")
        assert relative_posix(base / "a.txt", base) == "a.txt"


class TestFormatSize:
    """Tests for format_size function."""

    def test_bytes(self):
        assert format_size(256) == "256 B"

    def test_kilobytes(self):
        assert format_size(1536) == "1.5 KB"

    def test_megabytes(self):
        assert format_size(5 * 1024 * 1024) == "5.0 MB"

    def test_gigabytes(self):
        assert format_size(2 * 1024 * 1024 * 1024) == "2.0 GB"
