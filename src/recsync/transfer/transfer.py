# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

from recsync.core.error import RemoteError, TransferError
from recsync.core.logger import get_logger
from recsync.core.settings import Settings
from recsync.remote import RemoteExecutor

logger = get_logger(__name__, show_time=True)


class FolderTransfer:
    """
    Copies whole day-folders into the remote root.

    A failed copy may leave partial files on the remote host. They are not
    cleaned up here; the folder is simply verified again before any deletion.
    """

    def __init__(self, settings: Settings, remote: RemoteExecutor):
        """
        Args:
            settings (Settings): Deployment settings.
            remote (RemoteExecutor): Executor used to copy the folder.
        """
        self._settings = settings
        self._remote = remote

    def copy(self, folder: str) -> None:
        """
        Recursively copy a local day-folder to the remote root.

        Args:
            folder (str): Name of the day-folder.

        Raises:
            TransferError: If the copy fails for any reason.
        """
        local_dir = self._settings.local_root / folder
        logger.info(f"Copying '{local_dir}' to '{self._settings.remote_target}'.")

        try:
            self._remote.copyTree(local_dir, self._settings.remote_root)
        except RemoteError as e:
            raise TransferError(f"Could not transfer folder '{folder}': {e}") from e

        logger.info(f"Copied folder '{folder}' to the remote host.")
