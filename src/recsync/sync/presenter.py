# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from recsync.core.config import CFG
from recsync.properties.states import FolderState

from .scheduler import CycleReport


class SyncPresenter:
    """
    Presentation layer for the result of a poll cycle.
    """

    def __init__(self, report: CycleReport):
        self._report = report

    def createReportPanel(self) -> Panel:
        """
        Create a panel listing every local day-folder and what happened to it.

        Returns:
            Panel: A rich Panel containing the report table.
        """
        table = Table(
            show_header=True,
            header_style=CFG.presenter.headers_style,
            box=None,
            padding=(0, 2),
        )
        table.add_column("Folder", justify="left")
        table.add_column("Result", justify="left")
        table.add_column("Verification", justify="left")

        for folder_report in self._report.processed:
            style = (
                CFG.presenter.success_style
                if folder_report.state == FolderState.DELETED
                else CFG.presenter.warning_style
            )
            table.add_row(
                Text(folder_report.folder, style=CFG.presenter.main_style),
                Text(str(folder_report.state), style=style),
                Text(
                    str(folder_report.verification.outcome)
                    if folder_report.verification is not None
                    else "",
                    style=CFG.presenter.main_style,
                ),
            )

        for folder in self._report.postponed:
            table.add_row(
                Text(folder, style=CFG.presenter.skipped_style),
                Text("postponed", style=CFG.presenter.skipped_style),
                "",
            )

        for folder in self._report.not_eligible:
            table.add_row(
                Text(folder, style=CFG.presenter.skipped_style),
                Text("not eligible", style=CFG.presenter.skipped_style),
                "",
            )

        return Panel(
            table,
            title=Text(
                f"SYNC CYCLE ({self._report.today})",
                style=CFG.presenter.title_style,
                justify="center",
            ),
            border_style=CFG.presenter.border_style,
            expand=False,
        )

    def print(self, console: Console | None = None) -> None:
        console = console or Console()
        console.print(self.createReportPanel())
