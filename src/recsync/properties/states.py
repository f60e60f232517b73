# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

from enum import Enum


class FolderState(Enum):
    """
    State of a day-folder within a single poll cycle of the SyncScheduler.

    PENDING -> (PRE_VERIFIED | PRE_UNVERIFIED)
    PRE_VERIFIED -> DELETED
    PRE_UNVERIFIED -> TRANSFERRING -> (POST_VERIFIED | POST_UNVERIFIED)
    POST_VERIFIED -> DELETED
    POST_UNVERIFIED -> RETAINED

    A verified folder that cannot be deleted is RETAINED as well.
    """

    PENDING = 1
    PRE_VERIFIED = 2
    PRE_UNVERIFIED = 3
    TRANSFERRING = 4
    POST_VERIFIED = 5
    POST_UNVERIFIED = 6
    DELETED = 7
    RETAINED = 8

    def __str__(self) -> str:
        """
        Return the lowercase string representation of the enum variant.

        Returns:
            str: The name of the state in lowercase, with spaces instead of underscores.
        """
        return self.name.lower().replace("_", " ")

    def isTerminal(self) -> bool:
        """Return True if the folder is not processed further in the current cycle."""
        return self in {FolderState.DELETED, FolderState.RETAINED}


class VerificationOutcome(Enum):
    """
    Reason for the result of verifying a day-folder against its remote copy.
    """

    VERIFIED = 1
    REMOTE_MISSING = 2
    REMOTE_UNREACHABLE = 3
    REMOTE_FILE_MISSING = 4
    MALFORMED_DIGEST = 5
    DIGEST_MISMATCH = 6
    LOCAL_READ_FAILED = 7

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")
