# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Configuration system for recsync.

This module defines dataclasses representing the tunable aspects of recsync:
environment variable names, timeouts for remote commands, polling intervals,
capture-program arguments, presentation settings, and exit codes.

The `Config` class loads user configuration from a TOML file (if available)
and provides a globally accessible `CFG` instance. Deployment-specific
values (local root, remote host, remote root) are not part of `CFG`; they
are read from the environment into `recsync.core.settings.Settings`.
"""

import os
import tomllib
from dataclasses import dataclass, field, fields, is_dataclass
from pathlib import Path
from typing import Any, Self


@dataclass
class EnvironmentVariables:
    """Environment variable names used by recsync."""

    # Local directory holding the day-folders.
    local_dir: str = "LOCAL_DIR"
    # Remote host (ssh alias or user@host) receiving the day-folders.
    remote_host: str = "REMOTE_HOST"
    # Directory on the remote host receiving the day-folders.
    remote_dir: str = "REMOTE_HOST_DIR"
    # Enables recsync debug mode.
    debug_mode: str = "RECSYNC_DEBUG"
    # Explicit path to the recsync config file.
    config: str = "RECSYNC_CONFIG"


@dataclass
class TimeoutSettings:
    """Timeout settings in seconds."""

    # Connection timeout passed to ssh and scp.
    ssh_connect: int = 30
    # Timeout for a single remote command (listing, digesting).
    ssh: int = 300
    # Timeout for copying a whole day-folder.
    scp: int = 3600


@dataclass
class SchedulerSettings:
    """Settings for the SyncScheduler."""

    # Interval (in seconds) between two poll cycles.
    poll_interval: int = 1800


@dataclass
class RotatorSettings:
    """Settings for the DirectoryRotator."""

    # Interval (in seconds) between two checks of the day-folder window.
    interval: int = 43200
    # Number of day-folders (starting with today) kept pre-created.
    window_days: int = 3


@dataclass
class VerifierSettings:
    """Settings for checksum verification."""

    # Number of bytes read at once when digesting a local file.
    chunk_size: int = 1024 * 1024
    # Command used on the remote host to compute a SHA-256 digest.
    remote_digest_command: str = "sha256sum"


@dataclass
class CaptureSettings:
    """Settings for the external capture program."""

    # Capture program to execute.
    program: str = "ffmpeg"
    # Arguments passed to the capture program before the output pattern.
    arguments: list[str] = field(
        default_factory=lambda: [
            "-f",
            "alsa",
            "-ac",
            "2",
            "-ar",
            "48000",
            "-i",
            "plughw:1",
            "-map",
            "0:0",
            "-acodec",
            "libmp3lame",
            "-b:a",
            "96k",
            "-f",
            "segment",
            "-strftime",
            "1",
            "-segment_time",
            "120",
            "-segment_atclocktime",
            "1",
        ]
    )
    # strftime pattern of the segment files, relative to the local root.
    output_pattern: str = "%Y%m%d/%H-%M-%S.mp3"
    # Delay (in seconds) between SIGTERM and SIGKILL when stopping the capture program.
    sigterm_to_sigkill: int = 5


@dataclass
class DaemonSettings:
    """Settings for the recsync daemon."""

    # Maximal time (in seconds) to wait for a background task to stop.
    join_timeout: int = 30


@dataclass
class PresenterSettings:
    """Settings for presenting sync reports and disk usage."""

    # Style used for border lines.
    border_style: str = "white"
    # Style used for the title.
    title_style: str = "white bold"
    # Style used for table headers.
    headers_style: str = "default"
    # Style used for table values.
    main_style: str = "white"
    # Style used for folders that were deleted after verification.
    success_style: str = "bright_green"
    # Style used for folders that were retained.
    warning_style: str = "bright_yellow"
    # Style used for folders that were skipped.
    skipped_style: str = "grey50"


@dataclass
class DateFormats:
    """Date and time format strings."""

    # Standard date format used in log messages.
    standard: str = "%Y-%m-%d %H:%M:%S"
    # Format of the day-folder names.
    day_folder: str = "%Y%m%d"


@dataclass
class ExitCodes:
    """Exit codes used for various errors."""

    # Default error code for failures of recsync commands.
    default: int = 91
    # Returned when the required configuration is missing.
    config: int = 92
    # Returned when the local filesystem cannot be used.
    local_io: int = 93
    # Returned when the remote host cannot be used.
    remote: int = 94
    # Returned when the capture program fails.
    capture: int = 95
    # Returned on an unexpected or unhandled error.
    unexpected_error: int = 99


@dataclass
class Config:
    """Main configuration for recsync."""

    env_vars: EnvironmentVariables = field(default_factory=EnvironmentVariables)
    timeouts: TimeoutSettings = field(default_factory=TimeoutSettings)
    scheduler: SchedulerSettings = field(default_factory=SchedulerSettings)
    rotator: RotatorSettings = field(default_factory=RotatorSettings)
    verifier: VerifierSettings = field(default_factory=VerifierSettings)
    capture: CaptureSettings = field(default_factory=CaptureSettings)
    daemon: DaemonSettings = field(default_factory=DaemonSettings)
    presenter: PresenterSettings = field(default_factory=PresenterSettings)
    date_formats: DateFormats = field(default_factory=DateFormats)
    exit_codes: ExitCodes = field(default_factory=ExitCodes)

    # Name of the recsync binary.
    binary_name: str = "recsync"

    @classmethod
    def load(cls, config_path: Path | None = None) -> Self:
        """
        Load configuration from TOML file or use defaults.

        Args:
            config_path: Explicit path to config file. If None, searches standard locations.

        Returns:
            Config instance with loaded or default values.
        """
        if config_path is None:
            config_path = Config._get_config_path()

        try:
            if config_path and config_path.exists():
                with config_path.open("rb") as f:
                    config_data = tomllib.load(f)
                return _dict_to_dataclass(cls, config_data)
        except Exception as e:
            raise ValueError(f"Could not read recsync config '{config_path}': {e}.")

        # no config found - use defaults
        return cls()

    @staticmethod
    def _get_config_path() -> Path | None:
        """
        Search for config file in standard locations (XDG compliant).
        Returns the first existing config file, or None.
        """
        config_locations: list[Path | None] = [
            # 1. Explicit environment variable (highest priority)
            Path(env_path)
            if (env_path := os.getenv(EnvironmentVariables.config))
            else None,
            # 2. Current working directory (for development/override)
            Path.cwd() / "recsync_config.toml",
            # 3. XDG config home (standard user config location)
            Path(os.getenv("XDG_CONFIG_HOME", Path.home() / ".config"))
            / "recsync"
            / "config.toml",
        ]

        for path in config_locations:
            if path and path.is_file():
                return path

        return None


def _dict_to_dataclass(cls, data: dict[str, Any]):
    """
    Recursively convert a dictionary to a dataclass instance.
    Handles nested dataclasses properly.
    """
    if not is_dataclass(cls):
        return data

    field_values = {}
    for field_info in fields(cls):
        field_name = field_info.name
        field_type = field_info.type

        if field_name in data:
            value = data[field_name]
            if is_dataclass(field_type) and isinstance(value, dict):
                field_values[field_name] = _dict_to_dataclass(field_type, value)
            else:
                field_values[field_name] = value

    return cls(**field_values)


# Global configuration for recsync.
CFG = Config.load()
