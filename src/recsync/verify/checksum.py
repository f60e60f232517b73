# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import hashlib
import hmac
from pathlib import Path, PurePosixPath

from recsync.core.config import CFG
from recsync.core.error import DigestParseError, LocalIOError
from recsync.core.logger import get_logger
from recsync.remote import RemoteExecutor

logger = get_logger(__name__, show_time=True)


class ChecksumVerifier:
    """
    Computes and compares SHA-256 digests of local and remote files.

    Digests are always recomputed; nothing is cached between calls.
    """

    DIGEST_SIZE = hashlib.sha256().digest_size

    def __init__(self, remote: RemoteExecutor):
        """
        Args:
            remote (RemoteExecutor): Executor used to digest remote files.
        """
        self._remote = remote

    def digestLocal(self, file: Path) -> bytes:
        """
        Compute the SHA-256 digest of a local file.

        Args:
            file (Path): The local file to digest.

        Returns:
            bytes: The raw digest.

        Raises:
            LocalIOError: If the file cannot be opened or read.
        """
        sha = hashlib.sha256()
        try:
            with file.open("rb") as f:
                while chunk := f.read(CFG.verifier.chunk_size):
                    sha.update(chunk)
        except OSError as e:
            raise LocalIOError(f"Could not read local file '{file}': {e}.") from e

        digest = sha.digest()
        logger.debug(f"Local file '{file}' has digest '{digest.hex()}'.")
        return digest

    def digestRemote(self, file: PurePosixPath) -> bytes:
        """
        Compute the SHA-256 digest of a remote file.

        The first whitespace-delimited token of the remote command's output
        is decoded as the hex-encoded digest.

        Args:
            file (PurePosixPath): The remote file to digest.

        Returns:
            bytes: The raw digest.

        Raises:
            RemoteCommandError: If the remote digest command fails.
            RemoteDispatchError: If the remote host cannot be reached.
            DigestParseError: If the output of the remote command is malformed.
        """
        output = self._remote.digestFile(file)
        digest = ChecksumVerifier.parseDigest(output)
        logger.debug(f"Remote file '{file}' has digest '{digest.hex()}'.")
        return digest

    @staticmethod
    def parseDigest(output: str) -> bytes:
        """
        Parse the output of `sha256sum` into a raw digest.

        Raises:
            DigestParseError: If the output does not start with a hex-encoded SHA-256 digest.
        """
        tokens = output.split()
        if not tokens:
            raise DigestParseError("Remote digest command produced no output.")

        # sha256sum marks lines of escaped file names with a leading backslash
        token = tokens[0].removeprefix("\\")
        try:
            digest = bytes.fromhex(token)
        except ValueError as e:
            raise DigestParseError(
                f"Could not decode remote digest '{token}': {e}."
            ) from e

        if len(digest) != ChecksumVerifier.DIGEST_SIZE:
            raise DigestParseError(
                f"Remote digest '{token}' has {len(digest)} bytes, "
                f"expected {ChecksumVerifier.DIGEST_SIZE}."
            )

        return digest

    @staticmethod
    def matches(local: bytes, remote: bytes) -> bool:
        """Return True if the two digests are byte-for-byte equal."""
        return hmac.compare_digest(local, remote)
