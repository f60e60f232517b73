# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Copying day-folders to the remote host.
"""

from .transfer import FolderTransfer

__all__ = [
    "FolderTransfer",
]
