# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import sys
from typing import NoReturn

import click
from rich.console import Console
from rich.text import Text

from recsync.core.click_format import GNUHelpColorsCommand
from recsync.core.config import CFG
from recsync.core.error import RecsyncError
from recsync.core.logger import get_logger
from recsync.core.settings import Settings
from recsync.remote import SSHRemote

from .verifier import FolderVerifier

logger = get_logger(__name__)
console = Console()


@click.command(
    short_help="Compare day-folders with their remote copies.",
    help=f"""Compare the specified day-folders with their copies on the remote host.

{click.style("FOLDER", fg="green")}   Name of a day-folder in the local root (e.g. 20240601). Can be repeated.

Every file of the folder is compared by its SHA-256 digest. Nothing is copied or deleted.
Exits with zero only if all specified folders are verified.""",
    cls=GNUHelpColorsCommand,
    help_options_color="bright_blue",
)
@click.argument(
    "folders",
    type=str,
    nargs=-1,
    required=True,
    metavar=click.style("FOLDER", fg="green"),
)
def verify(folders: tuple[str, ...]) -> NoReturn:
    """
    Verify day-folders against the remote host.
    """
    try:
        settings = Settings.fromEnv()
        verifier = FolderVerifier(settings, SSHRemote(settings.remote_host))

        all_verified = True
        for folder in folders:
            result = verifier.verify(folder)
            all_verified = all_verified and bool(result)
            console.print(
                Text(
                    str(result),
                    style=CFG.presenter.success_style
                    if result
                    else CFG.presenter.warning_style,
                )
            )

        sys.exit(0 if all_verified else CFG.exit_codes.default)
    except RecsyncError as e:
        logger.error(e)
        sys.exit(e.exit_code)
    except Exception as e:
        logger.critical(e, exc_info=True, stack_info=True)
        sys.exit(CFG.exit_codes.unexpected_error)
