# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Self

from .config import CFG
from .error import ConfigError
from .logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Settings:
    """
    Deployment settings of a recsync process.

    The settings are read once at startup and passed explicitly
    to every component that needs them.

    Attributes:
        local_root (Path): Local directory holding the day-folders.
        remote_host (str): Host receiving the day-folders (ssh alias or user@host).
        remote_root (PurePosixPath): Directory on the remote host receiving the day-folders.
    """

    local_root: Path
    remote_host: str
    remote_root: PurePosixPath

    @classmethod
    def fromEnv(cls, environ: Mapping[str, str] | None = None) -> Self:
        """
        Build the settings from environment variables.

        Args:
            environ (Mapping[str, str] | None): Environment to read from.
                Defaults to `os.environ`.

        Returns:
            Settings: The loaded settings.

        Raises:
            ConfigError: If any of the required variables is unset or blank.
        """
        environ = os.environ if environ is None else environ

        values = {}
        for name in (
            CFG.env_vars.local_dir,
            CFG.env_vars.remote_host,
            CFG.env_vars.remote_dir,
        ):
            value = environ.get(name, "").strip()
            if not value:
                raise ConfigError(f"'{name}' environment variable is not set.")
            values[name] = value

        settings = cls(
            local_root=Path(values[CFG.env_vars.local_dir]),
            remote_host=values[CFG.env_vars.remote_host],
            remote_root=PurePosixPath(values[CFG.env_vars.remote_dir]),
        )
        logger.debug(f"Loaded settings: {settings}.")
        return settings

    @property
    def remote_target(self) -> str:
        """Remote root in the 'host:path' form understood by scp."""
        return f"{self.remote_host}:{self.remote_root}"
