# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import signal
import threading
from collections.abc import Callable
from types import FrameType

from recsync.capture import CaptureSupervisor
from recsync.core.clock import Clock
from recsync.core.config import CFG
from recsync.core.error import CaptureError, LocalIOError
from recsync.core.logger import get_logger
from recsync.core.settings import Settings
from recsync.remote import RemoteExecutor, SSHRemote
from recsync.rotate import DirectoryRotator
from recsync.sync import SyncScheduler
from recsync.transfer import FolderTransfer
from recsync.usage import DiskUsage
from recsync.verify import FolderVerifier

logger = get_logger(__name__, show_time=True)


class Daemon:
    """
    Wires the recsync components into a single long-running process.

    The Daemon is responsible for:
      - Creating the local root and the initial window of day-folders
      - Running the directory rotator and the sync scheduler in background threads
      - Running the capture program in the foreground
      - Stopping everything on SIGTERM/SIGINT or on a fatal error in any task
    """

    def __init__(
        self,
        settings: Settings,
        clock: Clock | None = None,
        remote: RemoteExecutor | None = None,
        capture: CaptureSupervisor | None = None,
    ):
        """
        Initialize the daemon.

        Args:
            settings (Settings): Deployment settings.
            clock (Clock | None): Clock shared by all tasks. A real clock is used if not provided.
            remote (RemoteExecutor | None): Access to the remote host. Uses ssh/scp if not provided.
            capture (CaptureSupervisor | None): Supervisor of the capture program.
        """
        self._settings = settings
        self._clock = clock or Clock()
        remote = remote or SSHRemote(settings.remote_host)

        self._rotator = DirectoryRotator(settings.local_root, self._clock)
        self._scheduler = SyncScheduler(
            settings,
            FolderVerifier(settings, remote),
            FolderTransfer(settings, remote),
            self._clock,
        )
        self._capture = capture or CaptureSupervisor(settings.local_root)

        self._tasks: list[threading.Thread] = []
        # first fatal error raised by a background task
        self._fatal_error: BaseException | None = None
        self._shutdown_requested = False

    def run(self) -> int:
        """
        Run the daemon until the capture program stops and all tasks finish.

        Returns:
            int: Exit code of the capture program.

        Raises:
            LocalIOError: If the local root or the day-folders cannot be created,
                or if a background task hit a local filesystem failure.
            CaptureError: If the capture program cannot be started or fails.
        """
        self._prepareLocalRoot()
        self._rotator.ensureWindow()
        self._installSignalHandlers()

        self._startTask("rotator", self._rotator.run)
        self._startTask("scheduler", self._scheduler.run)

        try:
            exit_code = self._capture.run()

            if exit_code == 0 and not self._clock.isStopped():
                logger.info(
                    "Capture program has finished. Background tasks keep running until stopped."
                )
                self._clock.stop_event.wait()
        finally:
            self._clock.stop()
            self._joinTasks()
            self._logDiskUsage()

        if self._fatal_error:
            raise self._fatal_error

        if exit_code != 0 and not self._shutdown_requested:
            raise CaptureError(f"Capture program exited with code {exit_code}.")

        return 0 if self._shutdown_requested else exit_code

    def requestShutdown(self) -> None:
        """Stop all tasks and the capture program."""
        self._shutdown_requested = True
        self._clock.stop()
        self._capture.terminate()

    def _prepareLocalRoot(self) -> None:
        try:
            self._settings.local_root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise LocalIOError(
                f"Could not create local root '{self._settings.local_root}': {e}."
            ) from e

    def _installSignalHandlers(self) -> None:
        signal.signal(signal.SIGTERM, self._handleSignal)
        signal.signal(signal.SIGINT, self._handleSignal)

    def _handleSignal(self, signum: int, _frame: FrameType | None) -> None:
        """
        Signal handler for SIGTERM and SIGINT.
        """
        logger.info(f"Received {signal.Signals(signum).name}, initiating shutdown.")
        self.requestShutdown()

    def _startTask(self, name: str, func: Callable[[], None]) -> None:
        thread = threading.Thread(
            target=self._guard, args=(name, func), name=name, daemon=True
        )
        self._tasks.append(thread)
        thread.start()

    def _guard(self, name: str, func: Callable[[], None]) -> None:
        """
        Run a background task and stop the whole daemon if it fails.
        """
        try:
            func()
        except Exception as e:
            logger.error(f"Task '{name}' failed: {e}")
            if self._fatal_error is None:
                self._fatal_error = e
            self._clock.stop()
            self._capture.terminate()

    def _joinTasks(self) -> None:
        for task in self._tasks:
            task.join(CFG.daemon.join_timeout)
            if task.is_alive():
                logger.warning(f"Task '{task.name}' did not stop in time.")

    def _logDiskUsage(self) -> None:
        try:
            logger.info(f"Disk usage: {DiskUsage.fromPath(self._settings.local_root)}.")
        except LocalIOError as e:
            logger.warning(e)
