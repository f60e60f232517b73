# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import os
import sys
from pathlib import Path
from typing import NoReturn

import click
from rich.console import Console

from recsync.core.click_format import GNUHelpColorsCommand
from recsync.core.config import CFG
from recsync.core.error import ConfigError, RecsyncError
from recsync.core.logger import get_logger

from .usage import DiskUsage

logger = get_logger(__name__)
console = Console()


@click.command(
    short_help="Show disk usage of the local root.",
    help=f"""Show the disk usage of the filesystem holding the recordings.

{click.style("PATH", fg="green")}   Path on the filesystem to inspect. Optional.

If PATH is not specified, the directory from the `{CFG.env_vars.local_dir}` environment variable is used.""",
    cls=GNUHelpColorsCommand,
    help_options_color="bright_blue",
)
@click.argument(
    "path",
    type=str,
    metavar=click.style("PATH", fg="green"),
    required=False,
    default=None,
)
def usage(path: str | None) -> NoReturn:
    """
    Print disk usage of the local root.
    """
    try:
        if not path and not (path := os.environ.get(CFG.env_vars.local_dir, "").strip()):
            raise ConfigError(
                f"No path specified and '{CFG.env_vars.local_dir}' environment variable is not set."
            )

        DiskUsage.fromPath(Path(path)).print(console)
        sys.exit(0)
    except RecsyncError as e:
        logger.error(e)
        sys.exit(e.exit_code)
    except Exception as e:
        logger.critical(e, exc_info=True, stack_info=True)
        sys.exit(CFG.exit_codes.unexpected_error)
