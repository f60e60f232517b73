# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Self

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from recsync.core.common import format_size
from recsync.core.config import CFG
from recsync.core.error import LocalIOError


@dataclass(frozen=True)
class DiskUsage:
    """
    Snapshot of the usage of a filesystem.

    Attributes:
        path (Path): Path used to select the filesystem.
        total (int): Size of the filesystem in bytes.
        used (int): Used space in bytes.
        free (int): Space available in bytes.
    """

    path: Path
    total: int
    used: int
    free: int

    @classmethod
    def fromPath(cls, path: Path) -> Self:
        """
        Read the usage of the filesystem holding `path`.

        Raises:
            LocalIOError: If the usage cannot be obtained.
        """
        try:
            usage = shutil.disk_usage(path)
        except OSError as e:
            raise LocalIOError(f"Could not get disk usage of '{path}': {e}.") from e

        return cls(path=path, total=usage.total, used=usage.used, free=usage.free)

    @property
    def fraction(self) -> float:
        """Fraction of the filesystem that is used (0.0 to 1.0)."""
        if self.total == 0:
            return 0.0
        return self.used / self.total

    def __str__(self) -> str:
        return (
            f"{format_size(self.used)} of {format_size(self.total)} used "
            f"({self.fraction:.1%}), {format_size(self.free)} free"
        )

    def createPanel(self) -> Panel:
        """Create a rich panel summarizing the disk usage."""
        table = Table(show_header=False, box=None, padding=(0, 2))
        table.add_column(justify="right", style=CFG.presenter.headers_style)
        table.add_column(justify="left", style=CFG.presenter.main_style)

        table.add_row("Path:", str(self.path))
        table.add_row("Size:", format_size(self.total))
        table.add_row("Used:", f"{format_size(self.used)} ({self.fraction:.1%})")
        table.add_row("Free:", format_size(self.free))

        return Panel(
            table,
            title=Text(
                "DISK USAGE", style=CFG.presenter.title_style, justify="center"
            ),
            border_style=CFG.presenter.border_style,
            expand=False,
        )

    def print(self, console: Console | None = None) -> None:
        console = console or Console()
        console.print(self.createPanel())
