# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import os
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from recsync.core.error import (
    DigestParseError,
    LocalIOError,
    RemoteCommandError,
    RemoteDispatchError,
)
from recsync.core.logger import get_logger
from recsync.core.settings import Settings
from recsync.properties.states import VerificationOutcome
from recsync.remote import RemoteExecutor

from .checksum import ChecksumVerifier

logger = get_logger(__name__, show_time=True)


@dataclass(frozen=True)
class VerificationResult:
    """
    Result of verifying a day-folder against its remote copy.

    The result is truthy only if the whole folder is verified.

    Attributes:
        folder (str): Name of the verified day-folder.
        outcome (VerificationOutcome): Reason for the result.
        file (str | None): Name of the file which failed verification, if any.
    """

    folder: str
    outcome: VerificationOutcome
    file: str | None = None

    def __bool__(self) -> bool:
        return self.outcome == VerificationOutcome.VERIFIED

    def __str__(self) -> str:
        if self.file:
            return f"{self.folder}: {self.outcome} ({self.file})"
        return f"{self.folder}: {self.outcome}"


class FolderVerifier:
    """
    Verifies that a local day-folder exists on the remote host
    and that every local file has a byte-identical remote counterpart.
    """

    def __init__(self, settings: Settings, remote: RemoteExecutor):
        """
        Args:
            settings (Settings): Deployment settings.
            remote (RemoteExecutor): Executor used to inspect the remote host.
        """
        self._settings = settings
        self._remote = remote
        self._checksum = ChecksumVerifier(remote)

    def verify(self, folder: str) -> VerificationResult:
        """
        Verify a day-folder against its remote copy.

        Every file below the folder, including files in nested directories, is
        compared with the remote file at the same relative path. Files are
        compared in the order of their relative paths and the verification
        stops at the first file that does not match.

        Args:
            folder (str): Name of the day-folder.

        Returns:
            VerificationResult: Truthy if the folder exists remotely and all files match.

        Raises:
            LocalIOError: If the local day-folder cannot be listed.
        """
        local_dir = self._settings.local_root / folder
        remote_dir = self._settings.remote_root / folder

        try:
            self._remote.listDirectory(remote_dir)
        except RemoteCommandError as e:
            logger.info(f"Folder '{folder}' does not exist on the remote host: {e}")
            return VerificationResult(folder, VerificationOutcome.REMOTE_MISSING)
        except RemoteDispatchError as e:
            logger.warning(f"Could not check folder '{folder}' on the remote host: {e}")
            return VerificationResult(folder, VerificationOutcome.REMOTE_UNREACHABLE)

        logger.debug(f"Folder '{folder}' exists on the remote host.")

        for file in self._getLocalFiles(local_dir):
            relative = file.relative_to(local_dir).as_posix()
            if (outcome := self._verifyFile(file, remote_dir / relative)) is not None:
                return VerificationResult(folder, outcome, relative)

        logger.debug(f"All files of folder '{folder}' match the remote host.")
        return VerificationResult(folder, VerificationOutcome.VERIFIED)

    def _verifyFile(
        self, file: Path, remote_file: PurePosixPath
    ) -> VerificationOutcome | None:
        """
        Compare a single local file with its remote counterpart.

        Returns:
            VerificationOutcome | None: The reason of the failure or None if the files match.
        """
        try:
            local_digest = self._checksum.digestLocal(file)
        except LocalIOError as e:
            logger.error(e)
            return VerificationOutcome.LOCAL_READ_FAILED

        try:
            remote_digest = self._checksum.digestRemote(remote_file)
        except RemoteCommandError as e:
            logger.info(e)
            return VerificationOutcome.REMOTE_FILE_MISSING
        except RemoteDispatchError as e:
            logger.warning(e)
            return VerificationOutcome.REMOTE_UNREACHABLE
        except DigestParseError as e:
            logger.warning(e)
            return VerificationOutcome.MALFORMED_DIGEST

        if not ChecksumVerifier.matches(local_digest, remote_digest):
            logger.info(f"File '{file}' differs from its remote copy '{remote_file}'.")
            return VerificationOutcome.DIGEST_MISMATCH

        return None

    @staticmethod
    def _getLocalFiles(directory: Path) -> list[Path]:
        """
        Return all files below a local day-folder, nested directories included,
        sorted by their path relative to the day-folder.

        Raises:
            LocalIOError: If the directory or any of its subdirectories cannot be listed.
        """

        def fail(e: OSError) -> None:
            raise LocalIOError(f"Could not list local folder '{e.filename}': {e}.") from e

        files = []
        for root, _, names in os.walk(directory, onerror=fail):
            files.extend(Path(root) / name for name in names)

        return sorted(files, key=lambda f: f.relative_to(directory).as_posix())
