# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Pre-creation of day-folders.

`DirectoryRotator` keeps the folders for today and the following days
in place so that the capture program never has to wait for one.
"""

from .rotator import DirectoryRotator

__all__ = [
    "DirectoryRotator",
]
