"""Sync request definition."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..utils import DEFAULT_CONCURRENCY, DEFAULT_MAX_RETRIES, DEFAULT_RETRY_DELAY


@dataclass(frozen=True)
class SyncRequest:
    """Parameters of one sync run.

    Examples:
        >>> request = SyncRequest(
        ...     source="/home/user/profile",
        ...     destination="/home/user/.cache/profile",
        ...     exclude=("Cache", "Crashpad"),
        ...     concurrency=8,
        ... )
        >>> request.source
        PosixPath('/home/user/profile')
    """

    source: Path
    """Source root directory"""

    destination: Path
    """Destination root directory (created if missing)"""

    exclude: tuple[str, ...] = field(default_factory=tuple)
    """Substrings matched against entry names and source-relative paths"""

    concurrency: int = DEFAULT_CONCURRENCY
    """Maximum number of file operations running at the same time"""

    max_retries: int = DEFAULT_MAX_RETRIES
    """Total copy attempts per file when the file is busy or locked"""

    retry_delay: float = DEFAULT_RETRY_DELAY
    """Base backoff in seconds, multiplied by the attempt number"""

    def __post_init__(self) -> None:
        """Normalize paths and validate limits."""
        object.__setattr__(self, "source", Path(self.source))
        object.__setattr__(self, "destination", Path(self.destination))

        exclude: Any = self.exclude
        if isinstance(exclude, str):
            exclude = (exclude,)
        exclude = tuple(exclude)
        if not all(isinstance(p, str) for p in exclude):
            raise ValueError(f"exclude must hold strings only, got {exclude!r}")
        # Empty strings would match every entry
        object.__setattr__(self, "exclude", tuple(p for p in exclude if p))

        if isinstance(self.concurrency, bool) or self.concurrency < 1:
            raise ValueError(
                f"concurrency must be a positive integer, got {self.concurrency!r}"
            )
        if self.max_retries < 1:
            raise ValueError(f"max_retries must be at least 1, got {self.max_retries!r}")
        if self.retry_delay < 0:
            raise ValueError(
                f"retry_delay must not be negative, got {self.retry_delay!r}"
            )

    def is_excluded(self, name: str, relative_path: str) -> bool:
        """Check whether an entry matches any exclusion substring.

        Args:
            name: Bare entry name
            relative_path: Path relative to the source root (forward slashes)

        Returns:
            True if the entry must be skipped
        """
        return any(p in name or p in relative_path for p in self.exclude)

    def to_dict(self) -> dict:
        """Convert request to dictionary for JSON serialization."""
        return {
            "source": str(self.source),
            "destination": str(self.destination),
            "exclude": list(self.exclude),
            "concurrency": self.concurrency,
            "maxRetries": self.max_retries,
            "retryDelay": self.retry_delay,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SyncRequest":
        """Create SyncRequest from dictionary.

        Args:
            data: Mapping with ``source`` and ``destination`` keys and
                optional ``exclude``, ``concurrency``, ``maxRetries``
                and ``retryDelay`` keys

        Returns:
            SyncRequest instance

        Raises:
            ValueError: If required keys are missing or values are invalid
        """
        missing = [key for key in ("source", "destination") if not data.get(key)]
        if missing:
            raise ValueError(f"Missing required field(s): {', '.join(missing)}")

        exclude = data.get("exclude", [])
        if isinstance(exclude, str):
            exclude = [exclude]
        if not isinstance(exclude, (list, tuple)) or not all(
            isinstance(p, str) for p in exclude
        ):
            raise ValueError("exclude must be a list of strings")

        return cls(
            source=Path(data["source"]).expanduser(),
            destination=Path(data["destination"]).expanduser(),
            exclude=exclude,
            concurrency=int(data.get("concurrency", DEFAULT_CONCURRENCY)),
            max_retries=int(data.get("maxRetries", DEFAULT_MAX_RETRIES)),
            retry_delay=float(data.get("retryDelay", DEFAULT_RETRY_DELAY)),
        )
