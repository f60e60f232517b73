# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Time source and cooperative sleeping for the recsync background tasks.

All recurring tasks ask a `Clock` for the current date and wait through it,
so that tests can substitute a clock that does not depend on real time and
so that a shutdown request interrupts any ongoing wait immediately.
"""

import threading
from datetime import date, datetime, timedelta

from .config import CFG


def day_folder_name(day: date) -> str:
    """
    Return the name of the day-folder for the given date (e.g. '20240601').

    Names sort lexicographically in chronological order.
    """
    return day.strftime(CFG.date_formats.day_folder)


class Clock:
    """
    Real-time clock with an attached stop event.

    Attributes:
        stop_event (threading.Event): Event signalling that all tasks using
            this clock should finish.
    """

    def __init__(self, stop_event: threading.Event | None = None):
        self.stop_event = stop_event or threading.Event()

    def now(self) -> datetime:
        """Return the current local date and time."""
        return datetime.now()

    def today(self) -> date:
        """Return the current local date."""
        return self.now().date()

    def todayName(self) -> str:
        """Return the name of today's day-folder."""
        return day_folder_name(self.today())

    def upcomingNames(self, days: int) -> list[str]:
        """
        Return the names of the day-folders for today and the following days.

        Args:
            days (int): Number of day-folder names to return, starting with today.
        """
        today = self.today()
        return [day_folder_name(today + timedelta(days=i)) for i in range(days)]

    def sleep(self, seconds: float) -> bool:
        """
        Wait for the given number of seconds or until a stop is requested.

        Returns:
            bool: True if the clock was stopped during (or before) the wait.
        """
        return self.stop_event.wait(seconds)

    def stop(self) -> None:
        """Request all tasks using this clock to finish."""
        self.stop_event.set()

    def isStopped(self) -> bool:
        """Return True if a stop was requested."""
        return self.stop_event.is_set()
