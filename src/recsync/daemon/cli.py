# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import sys
from typing import NoReturn

import click

import recsync
from recsync.core.click_format import GNUHelpColorsCommand
from recsync.core.config import CFG
from recsync.core.error import RecsyncError
from recsync.core.logger import get_logger
from recsync.core.settings import Settings

from .daemon import Daemon

logger = get_logger(__name__, show_time=True)


@click.command(
    short_help="Record audio and move finished days to the remote host.",
    help=f"""Run the recording daemon.

The daemon runs the capture program ({CFG.capture.program}) in the foreground, writing segment files into day-folders
under the local root. In the background, it keeps the day-folders for the upcoming days created and
periodically moves completed day-folders to the remote host, deleting them locally once verified.

The daemon runs until the capture program stops or until it receives SIGTERM or SIGINT.

Requires the `{CFG.env_vars.local_dir}`, `{CFG.env_vars.remote_host}` and `{CFG.env_vars.remote_dir}` environment variables.""",
    cls=GNUHelpColorsCommand,
    help_options_color="bright_blue",
)
def run() -> NoReturn:
    """
    Entrypoint of the recording daemon.

    Exits:
        0: Stopped by a signal or the capture program finished successfully.
        92: Missing configuration.
        93: Local filesystem failure.
        95: Capture program could not be started or failed.
        99: Fatal unexpected error (indicates a bug).
    """
    try:
        settings = Settings.fromEnv()
        logger.info(
            f"[recsync v{recsync.__version__}] Recording into '{settings.local_root}', "
            f"syncing to '{settings.remote_target}'."
        )
        sys.exit(Daemon(settings).run())
    except RecsyncError as e:
        logger.error(e)
        sys.exit(e.exit_code)
    except Exception as e:
        logger.critical(e, exc_info=True, stack_info=True)
        sys.exit(CFG.exit_codes.unexpected_error)
