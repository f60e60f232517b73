# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
The long-running recsync process.

`Daemon` runs the capture program in the foreground while the directory
rotator and the sync scheduler run as background threads. The tasks do not
share any in-process state; they only meet in the local root directory.
"""

from .daemon import Daemon

__all__ = [
    "Daemon",
]
