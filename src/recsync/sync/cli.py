# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import signal
import sys
from typing import NoReturn

import click
from rich.console import Console

from recsync.core.click_format import GNUHelpColorsCommand
from recsync.core.clock import Clock
from recsync.core.config import CFG
from recsync.core.error import RecsyncError
from recsync.core.logger import get_logger
from recsync.core.settings import Settings
from recsync.remote import SSHRemote
from recsync.transfer import FolderTransfer
from recsync.verify import FolderVerifier

from .presenter import SyncPresenter
from .scheduler import SyncScheduler

logger = get_logger(__name__)
console = Console()


@click.command(
    short_help="Move completed day-folders to the remote host.",
    help=f"""Move completed day-folders from the local root to the remote host.

Each day-folder older than today is verified against the remote host, copied if needed,
verified again, and deleted locally once its remote copy matches byte for byte.

By default, `{CFG.binary_name} sync` polls the local root every {CFG.scheduler.poll_interval} seconds until stopped.
Use `--once` to run a single poll cycle and print a summary.

The local root, remote host and remote directory are read from the
`{CFG.env_vars.local_dir}`, `{CFG.env_vars.remote_host}` and `{CFG.env_vars.remote_dir}` environment variables.""",
    cls=GNUHelpColorsCommand,
    help_options_color="bright_blue",
)
@click.option(
    "--once",
    is_flag=True,
    default=False,
    help="Run a single poll cycle and exit.",
)
def sync(once: bool) -> NoReturn:
    """
    Run the sync scheduler.
    """
    try:
        settings = Settings.fromEnv()
        clock = Clock()
        remote = SSHRemote(settings.remote_host)
        scheduler = SyncScheduler(
            settings,
            FolderVerifier(settings, remote),
            FolderTransfer(settings, remote),
            clock,
        )

        if once:
            report = scheduler.runCycle()
            SyncPresenter(report).print(console)
        else:
            _stop_on_signals(clock)
            scheduler.run()

        sys.exit(0)
    except RecsyncError as e:
        logger.error(e)
        sys.exit(e.exit_code)
    except Exception as e:
        logger.critical(e, exc_info=True, stack_info=True)
        sys.exit(CFG.exit_codes.unexpected_error)


def _stop_on_signals(clock: Clock) -> None:
    """
    Stop the clock (and thus the scheduler loop) on SIGTERM or SIGINT.
    """

    def handler(signum, _frame):
        logger.info(f"Received {signal.Signals(signum).name}, stopping after the current folder.")
        clock.stop()

    signal.signal(signal.SIGTERM, handler)
    signal.signal(signal.SIGINT, handler)
