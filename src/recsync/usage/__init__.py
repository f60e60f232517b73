# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Disk usage of the filesystem holding the recordings.
"""

from .usage import DiskUsage

__all__ = [
    "DiskUsage",
]
