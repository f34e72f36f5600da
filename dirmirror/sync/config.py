"""Loading sync requests from JSON configuration files."""

import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import Union

from ..exceptions import SyncConfigError
from .request import SyncRequest

logger = logging.getLogger(__name__)


def load_sync_requests_from_json(path: Union[str, Path]) -> list[SyncRequest]:
    """Load sync requests from a JSON file.

    The file holds either a single request object or a list of them::

        [
            {
                "source": "~/Library/Application Support/Google/Chrome",
                "destination": "~/.cache/scraping",
                "exclude": ["Cache", "Crashpad"],
                "concurrency": 20
            }
        ]

    Relative paths are resolved against the directory of the file.

    Args:
        path: Path to the JSON file

    Returns:
        List of SyncRequest objects in file order

    Raises:
        SyncConfigError: If the file cannot be read, is not valid JSON or
            contains an invalid request
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise SyncConfigError(f"Cannot read config file: {e}", path) from e
    except json.JSONDecodeError as e:
        raise SyncConfigError(f"Invalid JSON: {e}", path) from e

    if isinstance(data, dict):
        data = [data]
    if not isinstance(data, list):
        raise SyncConfigError("Expected an object or a list of objects", path)

    requests: list[SyncRequest] = []
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            raise SyncConfigError(f"Entry {index} is not an object", path)
        try:
            request = SyncRequest.from_dict(item)
        except (TypeError, ValueError) as e:
            raise SyncConfigError(f"Entry {index}: {e}", path) from e

        # Absolute paths are kept as they are by the join
        request = replace(
            request,
            source=path.parent / request.source,
            destination=path.parent / request.destination,
        )
        requests.append(request)

    logger.debug("Loaded %d sync request(s) from %s", len(requests), path)
    return requests
