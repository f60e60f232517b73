# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
The verified-sync pipeline.

This module defines `SyncScheduler`, the polling loop that moves completed
day-folders to the remote host. In every poll cycle it walks the local
day-folders from the oldest, stops at today's folder, and for each eligible
folder runs verify -> (transfer -> verify) -> delete. A local folder is only
ever deleted right after a successful verification of that same folder.
"""

from .scheduler import CycleReport, FolderReport, SyncScheduler

__all__ = [
    "CycleReport",
    "FolderReport",
    "SyncScheduler",
]
