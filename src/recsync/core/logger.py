# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import logging
import os
import threading

from rich.console import Console
from rich.logging import RichHandler

from .config import CFG


class _TaskFilter(logging.Filter):
    """
    Prefix records emitted from background tasks with the name of the task thread.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if record.threadName and record.threadName != threading.main_thread().name:
            record.task = f"[{record.threadName}] "
        else:
            record.task = ""
        return True


def get_logger(name: str, show_time: bool = False) -> logging.Logger:
    """
    Return a logger writing through rich's RichHandler on stderr.

    Timestamps are shown if `show_time` is set (long-running tasks) or if
    the debug mode is enabled. Messages logged from the rotator, scheduler
    or relay threads carry the thread name.
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    debug_mode = os.environ.get(CFG.env_vars.debug_mode) is not None
    level = logging.DEBUG if debug_mode else logging.INFO
    logger.setLevel(level)

    handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        show_path=False,
        show_time=show_time or debug_mode,
        log_time_format=CFG.date_formats.standard,
        tracebacks_width=None,
        tracebacks_code_width=None,
    )
    handler.setLevel(level)
    handler.addFilter(_TaskFilter())
    handler.setFormatter(logging.Formatter("%(task)s%(message)s"))

    logger.addHandler(handler)
    logger.propagate = False

    return logger
