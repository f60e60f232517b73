# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Exception types used throughout recsync.

Failures of the local filesystem and of the configuration are fatal for the
whole process. Failures on the remote side are always recoverable: they are
absorbed into a verification result or a retained folder and retried in the
next poll cycle. Each exception carries an associated exit code used by
recsync commands to report failures consistently.
"""

from .config import CFG


class RecsyncError(Exception):
    """Common exception type for all recsync errors."""

    exit_code = CFG.exit_codes.default


class ConfigError(RecsyncError):
    """Raised when required configuration is missing or invalid."""

    exit_code = CFG.exit_codes.config


class LocalIOError(RecsyncError):
    """Raised when the local filesystem cannot be listed, created, or read."""

    exit_code = CFG.exit_codes.local_io


class RemoteError(RecsyncError):
    """Base class for failures involving the remote host."""

    exit_code = CFG.exit_codes.remote


class RemoteDispatchError(RemoteError):
    """
    Raised when the secure channel to the remote host could not be used at all
    (ssh/scp missing, connection refused, authentication failure, timeout).
    """

    pass


class RemoteCommandError(RemoteError):
    """
    Raised when a command ran on the remote host but reported a failure
    (e.g., the listed directory or digested file does not exist).
    """

    pass


class DigestParseError(RemoteError):
    """Raised when the output of the remote digest command cannot be parsed."""

    pass


class TransferError(RemoteError):
    """Raised when copying a day-folder to the remote host fails."""

    pass


class CaptureError(RecsyncError):
    """Raised when the capture program cannot be launched or fails."""

    exit_code = CFG.exit_codes.capture
