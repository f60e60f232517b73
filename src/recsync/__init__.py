# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Rolling archive of audio recordings with verified transfer to a remote host.

This package runs an external capture program that writes segment files into
day-folders, keeps the upcoming day-folders created, and moves completed
day-folders to a remote host over ssh/scp. A local day-folder is deleted only
after every file in it has been verified against its remote copy by SHA-256.
All recsync CLI commands delegate to the functionality implemented here.
"""

from .recsync import __version__, cli

__all__ = [
    "__version__",
    "cli",
    "capture",
    "core",
    "daemon",
    "properties",
    "remote",
    "rotate",
    "sync",
    "transfer",
    "usage",
    "verify",
]
