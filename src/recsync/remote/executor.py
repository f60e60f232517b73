# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import shlex
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path, PurePosixPath

from recsync.core.config import CFG
from recsync.core.error import RemoteCommandError, RemoteDispatchError
from recsync.core.logger import get_logger

logger = get_logger(__name__, show_time=True)


class RemoteExecutor(ABC):
    """
    Abstract capability for operating on the remote host.

    Implementations must raise:
        RemoteCommandError: If the operation reached the remote host
            but reported a failure (e.g., the path does not exist).
        RemoteDispatchError: If the remote host could not be reached
            or the underlying mechanism could not be invoked at all.

    Implementations never retry; retrying is left to the next poll cycle.
    """

    @abstractmethod
    def listDirectory(self, directory: PurePosixPath) -> list[str]:
        """
        List the names of the entries in a remote directory.

        Args:
            directory (PurePosixPath): Absolute or home-relative path on the remote host.

        Returns:
            list[str]: Names of the entries inside the directory.
        """

    @abstractmethod
    def digestFile(self, file: PurePosixPath) -> str:
        """
        Compute the SHA-256 digest of a remote file.

        Args:
            file (PurePosixPath): Path to the file on the remote host.

        Returns:
            str: Raw output of the remote digest command
                (the hex digest followed by the file name).
        """

    @abstractmethod
    def copyTree(self, local_dir: Path, remote_dir: PurePosixPath) -> None:
        """
        Recursively copy a local directory into a remote directory.

        The copied directory keeps its name, i.e. the result is
        `remote_dir / local_dir.name`.

        Args:
            local_dir (Path): Local directory to copy.
            remote_dir (PurePosixPath): Remote directory to copy into.
        """


class SSHRemote(RemoteExecutor):
    """
    Remote executor using `ssh` for commands and `scp` for copying.

    Key-based authentication is required: ssh is never allowed
    to ask for a password.
    """

    # exit code of ssh and scp if the connection fails
    SSH_FAIL = 255

    def __init__(self, host: str):
        """
        Initialize the executor.

        Args:
            host (str): The remote host (ssh alias or user@host).
        """
        self._host = host

    def listDirectory(self, directory: PurePosixPath) -> list[str]:
        stdout = self._runRemote(
            ["ls", "-A", str(directory)],
            f"Could not list remote directory '{directory}' on '{self._host}'",
        )

        # split by newline and filter out empty lines
        return [line for line in stdout.splitlines() if line.strip()]

    def digestFile(self, file: PurePosixPath) -> str:
        return self._runRemote(
            [CFG.verifier.remote_digest_command, str(file)],
            f"Could not compute digest of remote file '{file}' on '{self._host}'",
        )

    def copyTree(self, local_dir: Path, remote_dir: PurePosixPath) -> None:
        command = [
            "scp",
            "-r",
            "-q",
            "-o",
            "PasswordAuthentication=no",
            "-o",
            "BatchMode=yes",
            "-o",
            f"ConnectTimeout={CFG.timeouts.ssh_connect}",
            str(local_dir),
            f"{self._host}:{remote_dir}",
        ]
        self._execute(
            command,
            CFG.timeouts.scp,
            f"Could not copy '{local_dir}' to '{self._host}:{remote_dir}'",
        )

    def _runRemote(self, remote_command: list[str], error_message: str) -> str:
        """
        Run a command on the remote host and return its standard output.

        Every argument is quoted before being handed to the remote shell.
        """
        command = [
            "ssh",
            "-o",
            "PasswordAuthentication=no",  # never ask for password
            "-o",
            "BatchMode=yes",
            "-o",
            f"ConnectTimeout={CFG.timeouts.ssh_connect}",
            "-q",  # suppress some SSH messages
            self._host,
            " ".join(_quote(arg) for arg in remote_command),
        ]
        return self._execute(command, CFG.timeouts.ssh, error_message)

    def _execute(self, command: list[str], timeout: int, error_message: str) -> str:
        """
        Execute a local ssh/scp command and classify its failures.

        Raises:
            RemoteDispatchError: If the command could not be started, timed out,
                or the connection to the remote host failed.
            RemoteCommandError: If the remote side reported a failure.
        """
        logger.debug(f"Executing: '{' '.join(command)}'.")
        try:
            result = subprocess.run(
                command, capture_output=True, text=True, timeout=timeout
            )
        except subprocess.TimeoutExpired as e:
            raise RemoteDispatchError(
                f"{error_message}: Connection timed out after {timeout} seconds."
            ) from e
        except OSError as e:
            raise RemoteDispatchError(
                f"{error_message}: Could not execute '{command[0]}': {e}."
            ) from e

        if result.returncode == SSHRemote.SSH_FAIL:
            raise RemoteDispatchError(
                f"{error_message}: Could not connect to host: {result.stderr.strip()}."
            )
        if result.returncode != 0:
            raise RemoteCommandError(f"{error_message}: {result.stderr.strip()}.")

        return result.stdout


def _quote(argument: str) -> str:
    """
    Quote an argument for the remote shell.

    A leading '~/' is kept unquoted so that home-relative paths
    are still expanded by the remote shell.
    """
    if argument.startswith("~/"):
        return "~/" + shlex.quote(argument[2:])
    return shlex.quote(argument)
