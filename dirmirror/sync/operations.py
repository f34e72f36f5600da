"""File operations used by the sync engine.

Regular file copies and symlink replication follow different error
policies: a failed copy aborts the run, a failed relink is reported in a
``SymlinkOutcome`` and the run continues.
"""

import logging
import os
import shutil
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from ..exceptions import FatalCopyError, SymlinkReplicationError
from ..utils import DEFAULT_MAX_RETRIES, DEFAULT_RETRY_DELAY, is_transient_error

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SymlinkOutcome:
    """Result of replicating one symlink."""

    path: Path
    """Destination link path"""

    target: str
    """Literal link target read from the source"""

    error: Optional[SymlinkReplicationError] = None
    """Failure that was swallowed, if any"""

    @property
    def ok(self) -> bool:
        """True if the destination link was created."""
        return self.error is None


def copy_with_retry(
    source: Path,
    destination: Path,
    max_retries: int = DEFAULT_MAX_RETRIES,
    retry_delay: float = DEFAULT_RETRY_DELAY,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """Copy a file, retrying while it is busy or locked.

    Content and permission bits are copied, the destination is
    overwritten. Transient errors are retried with a linear backoff of
    ``retry_delay * attempt`` seconds.

    Args:
        source: Source file
        destination: Destination file
        max_retries: Total number of attempts
        retry_delay: Base delay between attempts in seconds
        sleep: Sleep function, replaceable in tests

    Returns:
        Number of attempts made

    Raises:
        FatalCopyError: On a non-transient error or when every attempt
            failed
    """
    for attempt in range(1, max_retries + 1):
        try:
            shutil.copyfile(source, destination)
            shutil.copymode(source, destination)
            return attempt
        except OSError as e:
            if is_transient_error(e) and attempt < max_retries:
                delay = retry_delay * attempt
                logger.debug(
                    "Copy of %s failed (%s), retrying in %.2fs (attempt %d/%d)",
                    source,
                    e,
                    delay,
                    attempt,
                    max_retries,
                )
                sleep(delay)
                continue
            raise FatalCopyError(source, destination, attempt, str(e)) from e

    # max_retries < 1
    raise FatalCopyError(source, destination, 0, "no copy attempt allowed")


def replicate_symlink(source: Path, destination: Path) -> SymlinkOutcome:
    """Replace ``destination`` with a symlink to the target of ``source``.

    The target string is copied literally and not rewritten for the
    destination tree, dangling targets are fine. Failures to remove the
    old entry or create the new link are returned, not raised.

    Args:
        source: Source symlink
        destination: Destination path

    Returns:
        SymlinkOutcome describing the result

    Raises:
        OSError: If the source link cannot be read
    """
    target = os.readlink(source)

    try:
        os.unlink(destination)
    except FileNotFoundError:
        pass
    except OSError as e:
        error = SymlinkReplicationError(destination, target, "remove", str(e))
        return SymlinkOutcome(destination, target, error)

    try:
        os.symlink(target, destination, target_is_directory=os.path.isdir(source))
    except OSError as e:
        error = SymlinkReplicationError(destination, target, "create", str(e))
        return SymlinkOutcome(destination, target, error)

    return SymlinkOutcome(destination, target)


class SyncOperations:
    """File operations bound to the retry settings of one run."""

    def __init__(
        self,
        max_retries: int = DEFAULT_MAX_RETRIES,
        retry_delay: float = DEFAULT_RETRY_DELAY,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initialize sync operations.

        Args:
            max_retries: Total copy attempts per file
            retry_delay: Base backoff between attempts in seconds
            sleep: Sleep function used for the backoff
        """
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.sleep = sleep

    def copy_file(self, source: Path, destination: Path) -> int:
        """Copy a file with the configured retry policy."""
        return copy_with_retry(
            source,
            destination,
            max_retries=self.max_retries,
            retry_delay=self.retry_delay,
            sleep=self.sleep,
        )

    def relink(self, source: Path, destination: Path) -> SymlinkOutcome:
        """Replicate a symlink, logging failures instead of raising."""
        outcome = replicate_symlink(source, destination)
        if outcome.error is not None:
            logger.warning("Symlink not replicated: %s", outcome.error)
        return outcome
