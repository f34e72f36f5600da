"""CLI interface for dirmirror."""

import logging
from pathlib import Path
from typing import Any, Optional

import click

from . import __version__
from .cli_progress import run_sync_with_progress
from .exceptions import DirMirrorError
from .output import OutputFormatter
from .sync import SyncRequest, load_sync_requests_from_json
from .utils import DEFAULT_CONCURRENCY, DEFAULT_MAX_RETRIES

logger = logging.getLogger(__name__)


@click.group()
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.option("--json", is_flag=True, help="Output in JSON format")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose/debug logging output",
)
@click.version_option(version=__version__)
@click.pass_context
def main(ctx: Any, quiet: bool, json: bool, verbose: bool) -> None:
    """dirmirror - Mirror a directory tree, copying only what changed."""
    ctx.ensure_object(dict)
    ctx.obj["out"] = OutputFormatter(json_output=json, quiet=quiet)

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%H:%M:%S",
        )
        logging.getLogger("dirmirror").setLevel(logging.DEBUG)
    else:
        logging.basicConfig(level=logging.WARNING)


@main.command()
@click.argument("source", type=click.Path(path_type=Path), required=False)
@click.argument("destination", type=click.Path(path_type=Path), required=False)
@click.option(
    "--exclude",
    "-e",
    multiple=True,
    help="Skip entries whose name or relative path contains TEXT (repeatable)",
)
@click.option(
    "--concurrency",
    "-j",
    type=click.IntRange(min=1),
    default=DEFAULT_CONCURRENCY,
    envvar="DIRMIRROR_CONCURRENCY",
    show_default=True,
    help="Maximum number of file operations running at once",
)
@click.option(
    "--retries",
    type=click.IntRange(min=1),
    default=DEFAULT_MAX_RETRIES,
    show_default=True,
    help="Copy attempts per file when the file is busy or locked",
)
@click.option(
    "--config",
    "-c",
    "config_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="JSON file with one or more sync requests",
)
@click.option("--no-progress", is_flag=True, help="Do not show a progress display")
@click.pass_context
def sync(
    ctx: Any,
    source: Optional[Path],
    destination: Optional[Path],
    exclude: tuple[str, ...],
    concurrency: int,
    retries: int,
    config_file: Optional[Path],
    no_progress: bool,
) -> None:
    """Mirror SOURCE into DESTINATION.

    Files are copied only when the destination copy is missing, has a
    different size or is older than the source. Symlinks are recreated
    with the same target. Nothing is ever deleted from DESTINATION.

    Examples:

        dirmirror sync ~/profile ~/.cache/profile -e Cache -e Crashpad

        dirmirror sync --config mirrors.json
    """
    out: OutputFormatter = ctx.obj["out"]

    try:
        if config_file is not None:
            if source is not None or destination is not None:
                raise click.UsageError("Use either SOURCE DESTINATION or --config")
            requests = load_sync_requests_from_json(config_file)
        elif source is None or destination is None:
            raise click.UsageError("SOURCE and DESTINATION are required")
        else:
            requests = [
                SyncRequest(
                    source=source,
                    destination=destination,
                    exclude=exclude,
                    concurrency=concurrency,
                    max_retries=retries,
                )
            ]
    except DirMirrorError as e:
        out.error(str(e))
        ctx.exit(1)

    logger.debug("Running %d sync request(s)", len(requests))
    show_progress = not (no_progress or out.quiet or out.json_output)
    results = []
    for request in requests:
        out.info(f"Syncing: {request.source} -> {request.destination}")
        try:
            stats = run_sync_with_progress(request, show_progress=show_progress)
        except (DirMirrorError, ValueError, OSError) as e:
            out.error(str(e))
            ctx.exit(1)
        except KeyboardInterrupt:
            out.warning("Sync interrupted by user")
            ctx.exit(130)

        summary = stats.to_dict()
        if out.json_output:
            results.append(
                {
                    "source": str(request.source),
                    "destination": str(request.destination),
                    **summary,
                }
            )
        else:
            out.print_summary("Sync summary", summary)
            if stats.copied == 0:
                out.success("No changes needed - everything is in sync!")
            else:
                out.success("Sync complete!")

    if out.json_output:
        out.output_json(results)


if __name__ == "__main__":
    main()
