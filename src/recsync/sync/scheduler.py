# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import shutil
from dataclasses import dataclass, field
from datetime import timedelta

from recsync.core.clock import Clock
from recsync.core.common import format_duration
from recsync.core.config import CFG
from recsync.core.error import LocalIOError, TransferError
from recsync.core.logger import get_logger
from recsync.core.settings import Settings
from recsync.properties.states import FolderState, VerificationOutcome
from recsync.transfer import FolderTransfer
from recsync.verify import FolderVerifier, VerificationResult

logger = get_logger(__name__, show_time=True)


@dataclass
class FolderReport:
    """
    Record of how a single day-folder was processed in a poll cycle.

    Attributes:
        folder (str): Name of the day-folder.
        states (list[FolderState]): States the folder went through, in order.
        verification (VerificationResult | None): The last verification result.
    """

    folder: str
    states: list[FolderState] = field(default_factory=lambda: [FolderState.PENDING])
    verification: VerificationResult | None = None

    @property
    def state(self) -> FolderState:
        """The final state of the folder in the cycle."""
        return self.states[-1]

    def moveTo(self, state: FolderState) -> None:
        logger.debug(f"Folder '{self.folder}': {self.state} -> {state}.")
        self.states.append(state)


@dataclass
class CycleReport:
    """
    Summary of one poll cycle.

    Attributes:
        today (str): Name of today's day-folder at the start of the cycle.
        processed (list[FolderReport]): Folders processed in this cycle, oldest first.
        not_eligible (list[str]): Folders that were not eligible (today or later).
        postponed (list[str]): Eligible folders left for the next cycle because
            the cycle was ended early.
    """

    today: str
    processed: list[FolderReport] = field(default_factory=list)
    not_eligible: list[str] = field(default_factory=list)
    postponed: list[str] = field(default_factory=list)

    def foldersIn(self, state: FolderState) -> list[str]:
        """Return the names of the processed folders whose final state is `state`."""
        return [r.folder for r in self.processed if r.state == state]


class SyncScheduler:
    """
    Polling loop moving completed day-folders to the remote host.
    """

    def __init__(
        self,
        settings: Settings,
        verifier: FolderVerifier,
        transfer: FolderTransfer,
        clock: Clock,
        poll_interval: float | None = None,
    ):
        """
        Initialize the scheduler.

        Args:
            settings (Settings): Deployment settings.
            verifier (FolderVerifier): Verifier of day-folders.
            transfer (FolderTransfer): Copier of day-folders.
            clock (Clock): Source of the current date, used for waiting between cycles.
            poll_interval (float | None): Seconds between two cycles.
                Defaults to `CFG.scheduler.poll_interval`.
        """
        self._settings = settings
        self._verifier = verifier
        self._transfer = transfer
        self._clock = clock
        self._poll_interval = (
            CFG.scheduler.poll_interval if poll_interval is None else poll_interval
        )

    def run(self) -> None:
        """
        Run poll cycles until the clock is stopped.

        Raises:
            LocalIOError: If the local root cannot be listed.
        """
        logger.info(
            f"Syncing '{self._settings.local_root}' to '{self._settings.remote_target}' "
            f"every {format_duration(timedelta(seconds=self._poll_interval))}."
        )
        while not self._clock.isStopped():
            self.runCycle()
            if self._clock.sleep(self._poll_interval):
                break

        logger.info("Sync scheduler stopped.")

    def runCycle(self) -> CycleReport:
        """
        Run a single poll cycle over all local day-folders.

        Returns:
            CycleReport: Summary of the cycle.

        Raises:
            LocalIOError: If the local root cannot be listed
                or a local day-folder cannot be listed.
        """
        folders = self._listLocalFolders()
        report = CycleReport(today=self._clock.todayName())

        for i, folder in enumerate(folders):
            # the capture program may still be writing into today's folder
            if folder >= report.today:
                logger.info(f"Reached folder '{folder}' (today is '{report.today}').")
                report.not_eligible = folders[i:]
                break

            if self._clock.isStopped():
                logger.info("Stop requested, ending the cycle.")
                report.postponed = folders[i:]
                break

            folder_report = self._processFolder(folder)
            report.processed.append(folder_report)

            if (
                folder_report.verification is not None
                and folder_report.verification.outcome
                == VerificationOutcome.REMOTE_UNREACHABLE
            ):
                logger.warning(
                    "Remote host is unreachable, remaining folders are postponed to the next cycle."
                )
                report.postponed = [f for f in folders[i + 1 :] if f < report.today]
                report.not_eligible = [f for f in folders[i + 1 :] if f >= report.today]
                break

        logger.info(
            f"Cycle finished: {len(report.foldersIn(FolderState.DELETED))} deleted, "
            f"{len(report.foldersIn(FolderState.RETAINED))} retained."
        )
        return report

    def _processFolder(self, folder: str) -> FolderReport:
        """
        Verify, transfer if needed, verify again, and delete a single day-folder.
        """
        report = FolderReport(folder)

        logger.info(f"Verifying folder '{folder}' before transfer.")
        report.verification = self._verifier.verify(folder)
        logger.info(f"Verification of '{folder}' before transfer: {report.verification.outcome}.")

        if report.verification:
            # already synced in a previous cycle that did not get to delete it
            report.moveTo(FolderState.PRE_VERIFIED)
            self._deleteFolder(report)
            return report

        report.moveTo(FolderState.PRE_UNVERIFIED)
        if report.verification.outcome == VerificationOutcome.REMOTE_UNREACHABLE:
            report.moveTo(FolderState.RETAINED)
            return report

        report.moveTo(FolderState.TRANSFERRING)
        try:
            self._transfer.copy(folder)
        except TransferError as e:
            logger.error(e)
            report.moveTo(FolderState.POST_UNVERIFIED)
            report.moveTo(FolderState.RETAINED)
            return report

        logger.info(f"Verifying folder '{folder}' after transfer.")
        report.verification = self._verifier.verify(folder)
        logger.info(f"Verification of '{folder}' after transfer: {report.verification.outcome}.")

        if not report.verification:
            report.moveTo(FolderState.POST_UNVERIFIED)
            report.moveTo(FolderState.RETAINED)
            return report

        report.moveTo(FolderState.POST_VERIFIED)
        self._deleteFolder(report)
        return report

    def _deleteFolder(self, report: FolderReport) -> None:
        """
        Delete a verified local day-folder.

        A failed deletion is only logged: the folder is found verified
        and deleted again in the next cycle.
        """
        directory = self._settings.local_root / report.folder
        logger.info(f"Deleting local folder '{directory}' as it is verified on the remote host.")
        try:
            shutil.rmtree(directory)
        except OSError as e:
            logger.error(f"Could not delete local folder '{directory}': {e}.")
            report.moveTo(FolderState.RETAINED)
            return

        report.moveTo(FolderState.DELETED)

    def _listLocalFolders(self) -> list[str]:
        """
        Return the names of the directories in the local root, sorted ascending.

        Raises:
            LocalIOError: If the local root cannot be listed.
        """
        try:
            entries = list(self._settings.local_root.iterdir())
        except OSError as e:
            raise LocalIOError(
                f"Could not list local root '{self._settings.local_root}': {e}."
            ) from e

        return sorted(entry.name for entry in entries if entry.is_dir())
