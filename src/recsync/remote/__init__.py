# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Access to the remote host receiving the day-folders.

This module defines `RemoteExecutor`, the narrow capability interface through
which recsync touches the remote host (listing a directory, digesting a file,
copying a directory tree), and `SSHRemote`, its implementation on top of the
`ssh` and `scp` programs.
"""

from .executor import RemoteExecutor, SSHRemote

__all__ = [
    "RemoteExecutor",
    "SSHRemote",
]
