# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import sys
from typing import NoReturn

import click

from recsync.core.click_format import GNUHelpColorsCommand
from recsync.core.clock import Clock
from recsync.core.config import CFG
from recsync.core.error import RecsyncError
from recsync.core.logger import get_logger
from recsync.core.settings import Settings

from .rotator import DirectoryRotator

logger = get_logger(__name__)


@click.command(
    short_help="Create the upcoming day-folders.",
    help=f"""Create the day-folders for today and the next {CFG.rotator.window_days - 1} days in the local root.

Folders that already exist are left untouched.""",
    cls=GNUHelpColorsCommand,
    help_options_color="bright_blue",
)
def rotate() -> NoReturn:
    """
    Ensure the window of day-folders exists.
    """
    try:
        settings = Settings.fromEnv()
        directories = DirectoryRotator(settings.local_root, Clock()).ensureWindow()
        logger.info(
            f"Day-folders ready in '{settings.local_root}': {', '.join(d.name for d in directories)}."
        )
        sys.exit(0)
    except RecsyncError as e:
        logger.error(e)
        sys.exit(e.exit_code)
    except Exception as e:
        logger.critical(e, exc_info=True, stack_info=True)
        sys.exit(CFG.exit_codes.unexpected_error)
