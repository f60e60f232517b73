# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import subprocess
import threading
from pathlib import Path
from typing import IO

from recsync.core.config import CFG
from recsync.core.error import CaptureError
from recsync.core.logger import get_logger

logger = get_logger(__name__, show_time=True)


class CaptureSupervisor:
    """
    Runs the capture program in the foreground and relays its output.

    The standard output and the standard error output of the program are
    each read by a dedicated thread and logged line by line. Both threads
    are joined before the program is considered finished.
    """

    def __init__(
        self,
        local_root: Path,
        program: str | None = None,
        arguments: list[str] | None = None,
        output_pattern: str | None = None,
    ):
        """
        Initialize the supervisor.

        Args:
            local_root (Path): Local directory holding the day-folders.
            program (str | None): Capture program. Defaults to `CFG.capture.program`.
            arguments (list[str] | None): Arguments of the program preceding the output pattern.
                Defaults to `CFG.capture.arguments`.
            output_pattern (str | None): strftime pattern of the segment files relative
                to `local_root`. Defaults to `CFG.capture.output_pattern`.
        """
        self._local_root = local_root
        self._program = program or CFG.capture.program
        self._arguments = (
            list(CFG.capture.arguments) if arguments is None else list(arguments)
        )
        self._output_pattern = output_pattern or CFG.capture.output_pattern

        self._process: subprocess.Popen[str] | None = None
        # reentrant, terminate() may run in a signal handler while run() holds it
        self._lock = threading.RLock()
        self._stop_requested = False

    def buildCommand(self) -> list[str]:
        """Return the full command line of the capture program."""
        return [
            self._program,
            *self._arguments,
            str(self._local_root / self._output_pattern),
        ]

    def run(self) -> int:
        """
        Launch the capture program and wait for it to finish.

        If a stop was requested before the launch, the program is not started.

        Returns:
            int: Exit code of the capture program, 0 if it was not started.

        Raises:
            CaptureError: If the capture program cannot be launched.
        """
        command = self.buildCommand()

        with self._lock:
            if self._stop_requested:
                logger.info("Stop requested, capture program is not started.")
                return 0

            logger.info(f"Starting capture: '{' '.join(command)}'.")
            try:
                self._process = subprocess.Popen(
                    command,
                    stdout=subprocess.PIPE,
                    stderr=subprocess.PIPE,
                    text=True,
                    errors="replace",
                )
            except OSError as e:
                raise CaptureError(f"Could not start '{self._program}': {e}.") from e

            # a stop may have been requested while the program was being launched
            if self._stop_requested:
                self._stopProcess()

        relays = [
            threading.Thread(
                target=_relay,
                args=(self._process.stdout, "STDOUT"),
                name="capture",
                daemon=True,
            ),
            threading.Thread(
                target=_relay,
                args=(self._process.stderr, "STDERR"),
                name="capture",
                daemon=True,
            ),
        ]
        for relay in relays:
            relay.start()

        exit_code = self._process.wait()
        for relay in relays:
            relay.join()

        logger.info(f"Capture program finished with exit code {exit_code}.")
        return exit_code

    def terminate(self) -> None:
        """
        Ask the capture program to stop.

        SIGTERM is sent immediately; if the program is still running after
        `CFG.capture.sigterm_to_sigkill` seconds, it is killed. If the program
        has not been started yet, it will not be started at all.
        """
        with self._lock:
            self._stop_requested = True
            self._stopProcess()

    def _stopProcess(self) -> None:
        if not self._process or self._process.poll() is not None:
            return

        logger.info("Stopping the capture program.")
        self._process.terminate()

        killer = threading.Timer(CFG.capture.sigterm_to_sigkill, self._kill)
        killer.daemon = True
        killer.start()

    def _kill(self) -> None:
        if self._process and self._process.poll() is None:
            logger.warning("Capture program did not stop, killing it.")
            self._process.kill()


def _relay(stream: IO[str] | None, label: str) -> None:
    """
    Log every line read from the stream until it is closed.
    """
    if stream is None:
        return

    try:
        with stream:
            for line in stream:
                logger.info(f"{label}: {line.rstrip()}")
    except (OSError, ValueError) as e:
        logger.warning(f"Could not read capture {label.lower()}: {e}.")
