# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import sys

import click
from click_help_colors import HelpColorsGroup

from recsync.daemon.cli import run
from recsync.rotate.cli import rotate
from recsync.sync.cli import sync
from recsync.usage.cli import usage
from recsync.verify.cli import verify

__version__ = "0.3.0"

# support both --help and -h
_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


@click.group(
    cls=HelpColorsGroup,
    help_options_color="bright_blue",
    invoke_without_command=True,
    context_settings=_CONTEXT_SETTINGS,
)
@click.option(
    "--version",
    is_flag=True,
    help="Print the current version of recsync and exit.",
)
@click.pass_context
def cli(ctx: click.Context, version: bool):
    """
    Run any recsync command.

    recsync records audio into dated day-folders and moves completed days
    to a remote host, deleting local copies only after their content has been verified.
    """
    if version:
        print(__version__)
        sys.exit(0)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        sys.exit(0)


cli.add_command(run)
cli.add_command(sync)
cli.add_command(verify)
cli.add_command(rotate)
cli.add_command(usage)
