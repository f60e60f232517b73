# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

from datetime import timedelta
from pathlib import Path

from recsync.core.clock import Clock
from recsync.core.common import format_duration
from recsync.core.config import CFG
from recsync.core.error import LocalIOError
from recsync.core.logger import get_logger

logger = get_logger(__name__, show_time=True)


class DirectoryRotator:
    """
    Maintains the rolling window of pre-created day-folders.
    """

    def __init__(
        self,
        local_root: Path,
        clock: Clock,
        window_days: int | None = None,
        interval: float | None = None,
    ):
        """
        Initialize the rotator.

        Args:
            local_root (Path): Local directory holding the day-folders.
            clock (Clock): Source of the current date.
            window_days (int | None): Number of day-folders to keep, starting with today.
                Defaults to `CFG.rotator.window_days`.
            interval (float | None): Seconds between two checks of the window.
                Defaults to `CFG.rotator.interval`.
        """
        self._local_root = local_root
        self._clock = clock
        self._window_days = (
            CFG.rotator.window_days if window_days is None else window_days
        )
        self._interval = CFG.rotator.interval if interval is None else interval

    def ensureWindow(self) -> list[Path]:
        """
        Make sure that the day-folders for today and the upcoming days exist.

        Existing folders are left untouched.

        Returns:
            list[Path]: Paths to the folders of the window.

        Raises:
            LocalIOError: If any of the folders cannot be created.
        """
        directories = [
            self._local_root / name
            for name in self._clock.upcomingNames(self._window_days)
        ]
        for directory in directories:
            try:
                directory.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise LocalIOError(
                    f"Could not create day-folder '{directory}': {e}."
                ) from e

        logger.debug(
            f"Day-folders ready: {', '.join(str(d.name) for d in directories)}."
        )
        return directories

    def run(self) -> None:
        """
        Check the window every `interval` seconds until the clock is stopped.

        The first check happens after the first interval elapses; the window
        is expected to be created once at startup.

        Raises:
            LocalIOError: If any of the folders cannot be created.
        """
        logger.info(
            f"Checking day-folders in '{self._local_root}' "
            f"every {format_duration(timedelta(seconds=self._interval))}."
        )
        while not self._clock.sleep(self._interval):
            self.ensureWindow()

        logger.info("Directory rotator stopped.")
