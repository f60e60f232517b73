# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
GNU-style help output for recsync commands.
"""

import click
from click import HelpFormatter
from click_help_colors import HelpColorsCommand


class GNUHelpFormatter(HelpFormatter):
    """Help formatter printing bold headings and options on separate lines."""

    def __init__(
        self,
        width: int | None = None,
        headers_color: str | None = None,
        options_color: str | None = None,
    ):
        super().__init__(width=width)
        self.headers_color = headers_color or "white"
        self.options_color = options_color or "white"

    def write_heading(self, heading: str) -> None:
        self.write(f"{click.style(heading, fg=self.headers_color, bold=True)}\n")

    def write_usage(self, prog: str, args: str = "", prefix: str | None = None) -> None:
        prefix = click.style(prefix or "Usage:", fg=self.headers_color, bold=True)
        self.write(f"{prefix} {prog} {args}".rstrip() + "\n")

    def write_dl(self, rows, col_max: int = 30, col_spacing: int = 2) -> None:
        for term, definition in rows:
            self.write(f"  {click.style(term, fg=self.options_color, bold=True)}\n")

            for line in (definition or "").splitlines():
                if line.strip():
                    self.write(f"      {line}\n")
            self.write("\n")


class GNUHelpColorsCommand(HelpColorsCommand):
    """Click command printing its help in GNU style."""

    def get_help(self, ctx: click.Context) -> str:
        formatter = GNUHelpFormatter(
            width=ctx.terminal_width,
            headers_color=getattr(self, "help_headers_color", None),
            options_color=getattr(self, "help_options_color", None),
        )
        self.format_help(ctx, formatter)
        return formatter.getvalue()
